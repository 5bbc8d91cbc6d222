import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tsplib95
from tsplib95.exceptions import TsplibError

from .geo import Point, haversine


@dataclass
class PointSet:
    name: str
    path: Optional[Path]
    points: List[Point]
    optimum: Optional[float] = None


def _check_point(lat: float, lng: float, where: str) -> Point:
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lng <= 180.0:
        raise ValueError(f"{where}: ({lat}, {lng}) is not a valid latitude/longitude pair")
    return (float(lat), float(lng))


def tsplib_geo_to_degrees(value: float) -> float:
    # TSPLIB GEO coordinates are DDD.MM (degrees, then minutes as the fraction).
    deg = int(value)
    minutes = value - deg
    return deg + 5.0 * minutes / 3.0


def load_json(path: Path) -> List[Point]:
    raw = json.loads(path.read_text())
    if isinstance(raw, dict):
        raw = raw.get("points", [])
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a list of points")
    points = []
    for i, item in enumerate(raw):
        try:
            if isinstance(item, dict):
                lat, lng = float(item["lat"]), float(item["lng"])
            else:
                lat, lng = float(item[0]), float(item[1])
        except (KeyError, IndexError, TypeError) as exc:
            raise ValueError(f"{path.name}[{i}]: expected [lat, lng] or an object with lat/lng, got {item!r}") from exc
        points.append(_check_point(lat, lng, f"{path.name}[{i}]"))
    return points


def load_csv(path: Path) -> List[Point]:
    points = []
    with path.open("r", newline="") as f:
        rows = [row for row in csv.reader(f) if row and any(cell.strip() for cell in row)]
    if rows and rows[0][0].strip().lower() in ("lat", "latitude"):
        rows = rows[1:]
    for lineno, row in enumerate(rows, start=1):
        if len(row) < 2:
            raise ValueError(f"{path.name}:{lineno}: expected 'lat,lng', got {row}")
        points.append(_check_point(float(row[0]), float(row[1]), f"{path.name}:{lineno}"))
    return points


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _load_optimum(path: Path, points: List[Point], node_index: Dict[int, int]) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        tour_file = _parse_tsplib(candidate)
        if not tour_file.tours:
            continue
        try:
            nodes = [node_index[n] for n in tour_file.tours[0]]
        except KeyError as exc:
            raise ValueError(f"{candidate.name}: tour visits unknown node {exc.args[0]}") from exc
        if sorted(nodes) != list(range(len(points))):
            raise ValueError(f"{candidate.name}: tour does not visit every node exactly once")
        dist = 0.0
        for i in range(len(nodes)):
            dist += haversine(points[nodes[i]], points[nodes[(i + 1) % len(nodes)]])
        return float(dist)
    return None


def _parse_tsplib(path: Path):
    try:
        return tsplib95.load(path)
    except (TsplibError, KeyError, IndexError, TypeError) as exc:
        raise ValueError(f"{path.name}: not a readable TSPLIB file ({exc})") from exc


def load_tsplib(path: Path) -> PointSet:
    problem = _parse_tsplib(path)
    coords = problem.node_coords or problem.display_data
    if not coords:
        raise ValueError(f"{path.name}: TSPLIB instance has no node coordinates")
    geo = str(problem.edge_weight_type).upper() == "GEO"
    nodes = sorted(coords)
    points = []
    for node in nodes:
        if len(coords[node]) < 2:
            raise ValueError(f"{path.name} node {node}: expected two coordinates, got {coords[node]}")
        x, y = coords[node][0], coords[node][1]
        if geo:
            x, y = tsplib_geo_to_degrees(x), tsplib_geo_to_degrees(y)
        points.append(_check_point(x, y, f"{path.name} node {node}"))
    node_index = {node: i for i, node in enumerate(nodes)}
    optimum = _load_optimum(path, points, node_index)
    return PointSet(name=problem.name or path.stem, path=path, points=points, optimum=optimum)


def load_points(path: Path) -> PointSet:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"point file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".tsp":
        return load_tsplib(path)
    if suffix == ".json":
        return PointSet(name=path.stem, path=path, points=load_json(path))
    if suffix in (".csv", ".txt"):
        return PointSet(name=path.stem, path=path, points=load_csv(path))
    raise ValueError(f"unsupported point file format: {path.suffix!r} (use .json, .csv or .tsp)")


def save_route(path: Path, generation: int, distance_km: float, route: List[Point]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "generation": generation,
        "distance_km": distance_km,
        "route": [list(p) for p in route],
    }
    path.write_text(json.dumps(payload, indent=2))
