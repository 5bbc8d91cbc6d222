import argparse
import signal
import time
from contextlib import contextmanager
from pathlib import Path

from geotour_ga.data import PointSet, load_points, save_route
from geotour_ga.evolutionary import SELECTION_METHODS, GAConfig
from geotour_ga.session import RouteSession, SessionError
from geotour_ga.solvers import SolveResult, reference_tour


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def _load(parser: argparse.ArgumentParser, path: str) -> PointSet:
    try:
        return load_points(Path(path))
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))


def build_session(point_set: PointSet, cfg: GAConfig) -> RouteSession:
    session = RouteSession(cfg, max_points=max(len(point_set.points), 1))
    for lat, lng in point_set.points:
        session.add_point(lat, lng)
    return session


def _summary(session: RouteSession, point_set: PointSet) -> None:
    stats = session.stats()
    ref = reference_tour(point_set.points, optimum=point_set.optimum)
    ga = SolveResult(
        tour=session.ga.best_solution.genes if session.ga else [],
        length=stats["distance_km"],
        solver_name="ga",
        optimum=point_set.optimum,
    )
    log(f"best after {stats['generation']} generations: {ga.length:.3f} km")
    log(f"reference ({ref.solver_name}): {ref.length:.3f} km")
    vs_ref = SolveResult(tour=ga.tour, length=ga.length, solver_name="ga", optimum=ref.length)
    if ref.length > 0:
        log(f"GA vs reference: {100.0 * vs_ref.gap:+.2f}%")
    if point_set.optimum is not None:
        log(f"known optimum: {point_set.optimum:.3f} km (GA gap {100.0 * ga.gap:.2f}%, reference gap {100.0 * ref.gap:.2f}%)")


@contextmanager
def pause_on_interrupt(session: RouteSession):
    """Turn SIGINT into a pause so the generation in flight completes."""
    interrupted = []

    def handler(signum, frame):
        interrupted.append(signum)
        session.pause()

    previous = signal.signal(signal.SIGINT, handler)
    try:
        yield interrupted
    finally:
        signal.signal(signal.SIGINT, previous)


def run(args) -> None:
    if args.generations is not None and args.generations < 0:
        args.parser.error(f"--generations must be >= 0, got {args.generations}")
    point_set = _load(args.parser, args.points)
    log(f"loaded {len(point_set.points)} points from {point_set.path} ({point_set.name})")
    try:
        cfg = GAConfig(
            population_size=args.population_size,
            mutation_rate=args.mutation_rate,
            crossover_rate=args.crossover_rate,
            selection_method=args.selection,
            random_seed=args.seed,
        )
    except ValueError as exc:
        args.parser.error(str(exc))
    session = build_session(point_set, cfg)
    try:
        session.start()
    except SessionError as exc:
        args.parser.error(str(exc))
    stats = session.stats()
    log(f"generation 0: {stats['distance_km']:.3f} km (population={cfg.population_size}, selection={cfg.selection_method})")

    limit = "Ctrl+C to stop" if args.generations is None else f"{args.generations} generations"
    log(f"evolving; {limit}.")
    with pause_on_interrupt(session) as interrupted:
        while session.running:
            if args.generations is not None and session.stats()["generation"] >= args.generations:
                session.pause()
                break
            stats = session.tick()
            if args.report_every and stats["generation"] % args.report_every == 0:
                log(f"generation {stats['generation']}: {stats['distance_km']:.3f} km")
            if args.interval > 0 and session.running:
                time.sleep(args.interval)
    if interrupted:
        print("Interrupted.")

    _summary(session, point_set)
    if args.output:
        stats = session.stats()
        save_route(Path(args.output), stats["generation"], stats["distance_km"], session.route())
        log(f"route written to {args.output}")


def info(args) -> None:
    point_set = _load(args.parser, args.points)
    print(f"name={point_set.name} points={len(point_set.points)}")
    if len(point_set.points) >= 2:
        ref = reference_tour(point_set.points, optimum=point_set.optimum)
        print(f"reference={ref.solver_name} length={ref.length:.3f} km")
    if point_set.optimum is not None:
        print(f"optimum={point_set.optimum:.3f} km")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Geographic TSP genetic algorithm")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Evolve a tour for a point set")
    run_parser.add_argument("points", help="Point file (.json, .csv or TSPLIB .tsp)")
    run_parser.add_argument("--population-size", type=int, default=100)
    run_parser.add_argument("--mutation-rate", type=float, default=0.02)
    run_parser.add_argument("--crossover-rate", type=float, default=0.8)
    run_parser.add_argument("--selection", choices=SELECTION_METHODS, default="tournament")
    run_parser.add_argument("--generations", type=int, default=None, help="Stop after N generations")
    run_parser.add_argument("--interval", type=float, default=0.0, help="Seconds between ticks")
    run_parser.add_argument("--seed", type=int, default=None)
    run_parser.add_argument("--report-every", type=int, default=50)
    run_parser.add_argument("--output", default=None, help="Write the best route as JSON")
    run_parser.set_defaults(func=run, parser=run_parser)

    info_parser = subparsers.add_parser("info", help="Describe a point set")
    info_parser.add_argument("points")
    info_parser.set_defaults(func=info, parser=info_parser)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
