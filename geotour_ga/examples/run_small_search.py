from geotour_ga.evolutionary import GAConfig, GeneticAlgorithm
from geotour_ga.geo import close_route
from geotour_ga.solvers import reference_tour


def main():
    # A handful of points around Astrakhan.
    points = [
        (46.3497, 48.0408),
        (46.3650, 48.0550),
        (46.3300, 48.0100),
        (46.3800, 48.0200),
        (46.3400, 48.0700),
        (46.3550, 47.9950),
        (46.3200, 48.0450),
        (46.3720, 48.0800),
    ]
    cfg = GAConfig(population_size=60, mutation_rate=0.1, crossover_rate=0.8, random_seed=7)
    ga = GeneticAlgorithm(points, cfg)
    ga.init_population()
    generations = 200
    for _ in range(generations):
        best = ga.evolve()
        if ga.generation % 25 == 0:
            print(f"gen {ga.generation}: best distance={best.distance:.3f} km")
    ref = reference_tour(points)
    print(f"reference {ref.solver_name}: {ref.length:.3f} km")
    print("route:", close_route(points, ga.best_solution.genes))


if __name__ == "__main__":
    main()
