"""
Headless route-planning session.

Owns the point set, the run flag and the GA engine the way an interactive map
front end would: points can only be edited while paused, a run needs at least
``MIN_POINTS`` points, and each scheduler tick advances one generation.
"""

import threading
from typing import Dict, List, Optional

from .evolutionary import GAConfig, GeneticAlgorithm
from .geo import Point, close_route


MAX_POINTS = 50
MIN_POINTS = 3


class SessionError(RuntimeError):
    pass


class RouteSession:
    def __init__(self, config: GAConfig = None, max_points: int = MAX_POINTS):
        self._config = config or GAConfig()
        self.max_points = max_points
        self.points: List[Point] = []
        self.ga: Optional[GeneticAlgorithm] = None
        self.running = False
        self._lock = threading.Lock()

    @property
    def config(self) -> GAConfig:
        return self._config

    @config.setter
    def config(self, value: GAConfig) -> None:
        self._require_paused("change GA parameters")
        self._config = value
        self.ga = None

    def _require_paused(self, action: str) -> None:
        if self.running:
            raise SessionError(f"cannot {action} while the run is active; pause first")

    def add_point(self, lat: float, lng: float) -> int:
        self._require_paused("add points")
        if len(self.points) >= self.max_points:
            raise SessionError(f"point limit reached ({self.max_points})")
        self.points.append((float(lat), float(lng)))
        # The engine indexes a fixed point list; the next start() rebuilds it.
        self.ga = None
        return len(self.points) - 1

    def remove_point(self, index: int) -> Point:
        self._require_paused("remove points")
        point = self.points.pop(index)
        self.ga = None
        return point

    def clear_points(self) -> None:
        self._require_paused("clear points")
        self.points = []
        self.reset()

    def start(self) -> None:
        if len(self.points) < MIN_POINTS:
            raise SessionError(f"at least {MIN_POINTS} points are needed, got {len(self.points)}")
        if self.running:
            return
        if self.ga is None:
            self.ga = GeneticAlgorithm(self.points, self._config)
            self.ga.init_population()
        self.running = True

    def pause(self) -> None:
        self.running = False

    def reset(self) -> None:
        self._require_paused("reset")
        self.ga = None

    def tick(self) -> Dict:
        """Run one generation if the session is running and return the stats."""
        with self._lock:
            if self.running:
                self.ga.evolve()
            return self.stats()

    def stats(self) -> Dict:
        if self.ga is None:
            return {"points": len(self.points), "generation": 0, "distance_km": 0.0, "running": self.running}
        return {
            "points": len(self.points),
            "generation": self.ga.generation,
            "distance_km": self.ga.best_solution.distance,
            "running": self.running,
        }

    def route(self) -> List[Point]:
        if self.ga is None or self.ga.best_solution is None:
            return []
        return close_route(self.ga.points, self.ga.best_solution.genes)
