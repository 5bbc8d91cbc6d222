import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .geo import Point
from .individual import Individual, shuffle
from .operators import TOURNAMENT_SIZE, mutate, order_crossover, roulette_select, tournament_select


SELECTION_METHODS = ("tournament", "roulette")


@dataclass
class GAConfig:
    population_size: int = 100
    mutation_rate: float = 0.02
    crossover_rate: float = 0.8
    selection_method: str = "tournament"
    tournament_size: int = TOURNAMENT_SIZE
    random_seed: Optional[int] = None

    def __post_init__(self):
        if self.population_size < 1:
            raise ValueError(f"population_size must be >= 1, got {self.population_size}")
        for name in ("mutation_rate", "crossover_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.selection_method not in SELECTION_METHODS:
            raise ValueError(
                f"unknown selection method {self.selection_method!r}; expected one of {SELECTION_METHODS}"
            )
        if self.tournament_size < 1:
            raise ValueError(f"tournament_size must be >= 1, got {self.tournament_size}")


class GeneticAlgorithm:
    """Generational GA over closed tours of a fixed point set.

    Call :meth:`init_population` once, then :meth:`evolve` once per step.
    The best tour ever seen is kept in ``best_solution`` and re-inserted into
    every new generation, so its distance never increases.
    """

    def __init__(
        self,
        points: Sequence[Point],
        config: GAConfig = None,
        rng: random.Random = None,
    ):
        if not points:
            raise ValueError("at least one point is required")
        self.cfg = config or GAConfig()
        self.points: List[Point] = [tuple(p) for p in points]
        self.rng = rng or random.Random(self.cfg.random_seed)
        self.population: List[Individual] = []
        self.generation = 0
        self.best_solution: Optional[Individual] = None

    @property
    def initialized(self) -> bool:
        return bool(self.population)

    def init_population(self) -> None:
        self.population = []
        self.generation = 0
        self.best_solution = None
        indices = list(range(len(self.points)))
        for i in range(self.cfg.population_size):
            genes = indices[:] if i == 0 else shuffle(indices[:], self.rng)
            self.population.append(Individual(genes, self.points))
        self.find_best()

    def find_best(self) -> Individual:
        best = self.population[0]
        for ind in self.population:
            if ind.fitness > best.fitness:
                best = ind
        if self.best_solution is None or best.fitness > self.best_solution.fitness:
            self.best_solution = best
        return self.best_solution

    def select(self) -> Individual:
        if self.cfg.selection_method == "roulette":
            return roulette_select(self.population, self.rng)
        return tournament_select(self.population, self.rng, k=self.cfg.tournament_size)

    def evolve(self) -> Individual:
        if not self.initialized:
            raise RuntimeError("init_population() must be called before evolve()")
        new_pop: List[Individual] = [self.best_solution]
        while len(new_pop) < self.cfg.population_size:
            p1 = self.select()
            p2 = self.select()
            if self.rng.random() < self.cfg.crossover_rate:
                child_genes = order_crossover(p1.genes, p2.genes, self.rng)
            else:
                child_genes = p1.genes[:]
            mutate(child_genes, self.cfg.mutation_rate, self.rng)
            new_pop.append(Individual(child_genes, self.points))
        self.population = new_pop
        self.generation += 1
        return self.find_best()

    def snapshot(self) -> Dict:
        best = self.best_solution
        return {
            "generation": self.generation,
            "genes": list(best.genes) if best else [],
            "distance": best.distance if best else 0.0,
            "fitness": best.fitness if best else 0.0,
        }
