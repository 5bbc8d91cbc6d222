import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import networkx as nx
import numpy as np

from ..geo import Point, distance_matrix, geo_graph


Tour = List[int]


@dataclass
class SolveResult:
    tour: Tour
    length: float
    solver_name: str
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        """Relative excess over ``optimum``; inf when no optimum is known."""
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum


def tour_length(dist: np.ndarray, tour: Sequence[int]) -> float:
    idx = np.asarray(tour, dtype=int)
    return float(dist[idx, np.roll(idx, -1)].sum())


def nearest_neighbor_tour(graph: nx.Graph, start: int) -> Tour:
    tour = [start]
    unvisited = set(graph.nodes())
    unvisited.remove(start)
    current = start
    while unvisited:
        # Ties resolve to the lowest index so the tour is reproducible.
        nxt = min(sorted(unvisited), key=lambda node: graph[current][node]["weight"])
        tour.append(nxt)
        unvisited.remove(nxt)
        current = nxt
    return tour


def two_opt(dist: np.ndarray, tour: Tour, max_iter: int = 200) -> Tour:
    best = tour[:]
    best_len = tour_length(dist, best)
    n = len(tour)
    for _ in range(max_iter):
        improved = False
        for i in range(1, n - 1):
            for j in range(i + 2, n + 1):
                candidate = best[:]
                candidate[i:j] = reversed(candidate[i:j])
                candidate_len = tour_length(dist, candidate)
                if candidate_len + 1e-9 < best_len:
                    best = candidate
                    best_len = candidate_len
                    improved = True
        if not improved:
            break
    return best


class ReferenceSolver:
    """Nearest-neighbour construction from point 0 followed by 2-opt.

    Gives a deterministic yardstick to compare a GA run against.
    """

    name = "nearest_neighbor+two_opt"

    def __init__(self, max_iter: int = 200):
        self.max_iter = max_iter

    def solve(self, points: Sequence[Point], optimum: Optional[float] = None) -> SolveResult:
        if not points:
            return SolveResult(tour=[], length=0.0, solver_name=self.name, optimum=optimum)
        dist = distance_matrix(points)
        tour = nearest_neighbor_tour(geo_graph(points, dist), 0)
        if len(tour) >= 4:
            tour = two_opt(dist, tour, max_iter=self.max_iter)
        return SolveResult(tour=tour, length=tour_length(dist, tour), solver_name=self.name, optimum=optimum)


def reference_tour(points: Sequence[Point], optimum: Optional[float] = None) -> SolveResult:
    return ReferenceSolver().solve(points, optimum=optimum)
