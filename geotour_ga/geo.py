import math
from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np


Point = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def deg2rad(deg: float) -> float:
    return deg * (math.pi / 180)


def haversine(p1: Point, p2: Point) -> float:
    """Great-circle distance in kilometres between two (lat, lng) points."""
    d_lat = deg2rad(p2[0] - p1[0])
    d_lon = deg2rad(p2[1] - p1[1])
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(deg2rad(p1[0])) * math.cos(deg2rad(p2[0])) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_matrix(points: Sequence[Point]) -> np.ndarray:
    if not points:
        return np.zeros((0, 0))
    coords = np.radians(np.asarray(points, dtype=float))
    lat = coords[:, 0][:, None]
    lon = coords[:, 1][:, None]
    d_lat = lat.T - lat
    d_lon = lon.T - lon
    a = np.sin(d_lat / 2) ** 2 + np.cos(lat) * np.cos(lat.T) * np.sin(d_lon / 2) ** 2
    # Rounding can push a marginally past 1 for antipodal pairs.
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def geo_graph(points: Sequence[Point], dist: Optional[np.ndarray] = None) -> nx.Graph:
    """Complete graph over point indices, weighted by haversine kilometres."""
    if dist is None:
        dist = distance_matrix(points)
    graph = nx.Graph()
    for i, (lat, lng) in enumerate(points):
        graph.add_node(i, lat=lat, lng=lng)
    n = len(points)
    for i in range(n):
        for j in range(i + 1, n):
            graph.add_edge(i, j, weight=float(dist[i, j]))
    return graph


def close_route(points: Sequence[Point], tour: Sequence[int]) -> List[Point]:
    """Coordinates of a tour with the first point repeated to close the loop."""
    path = [tuple(points[i]) for i in tour]
    if path:
        path.append(path[0])
    return path
