import random
from typing import List, Optional, Sequence

from .geo import Point, haversine


EPSILON = 1e-10


def shuffle(items: List[int], rng: random.Random) -> List[int]:
    # Fisher-Yates, in place.
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def tour_distance(genes: Sequence[int], points: Sequence[Point]) -> float:
    dist = 0.0
    n = len(genes)
    for i in range(n):
        dist += haversine(points[genes[i]], points[genes[(i + 1) % n]])
    return dist


class Individual:
    """A candidate tour with its cached closed-loop distance and fitness.

    ``distance`` and ``fitness`` only change through :meth:`calc_fitness`;
    callers that edit ``genes`` must call it again.
    """

    def __init__(self, genes: Sequence[int], points: Optional[Sequence[Point]] = None):
        self.genes: List[int] = list(genes)
        if sorted(self.genes) != list(range(len(self.genes))):
            raise ValueError(f"genes are not a permutation of 0..{len(self.genes) - 1}: {self.genes}")
        if points is not None and len(points) != len(self.genes):
            raise ValueError(f"genes cover {len(self.genes)} points but {len(points)} were given")
        self._distance = 0.0
        self._fitness = 0.0
        if points is not None:
            self.calc_fitness(points)

    @property
    def distance(self) -> float:
        return self._distance

    @property
    def fitness(self) -> float:
        return self._fitness

    def calc_fitness(self, points: Sequence[Point]) -> None:
        self._distance = tour_distance(self.genes, points)
        self._fitness = 1 / (self._distance + EPSILON)

    def __len__(self) -> int:
        return len(self.genes)

    def __repr__(self) -> str:
        return f"Individual(distance={self._distance:.3f}, genes={self.genes})"
