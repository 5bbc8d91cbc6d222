from .heuristics import (
    ReferenceSolver,
    SolveResult,
    Tour,
    nearest_neighbor_tour,
    reference_tour,
    tour_length,
    two_opt,
)

__all__ = [
    "ReferenceSolver",
    "SolveResult",
    "Tour",
    "nearest_neighbor_tour",
    "reference_tour",
    "tour_length",
    "two_opt",
]
