import random

import pytest

from geotour_ga.evolutionary import GAConfig, GeneticAlgorithm
from geotour_ga.geo import haversine
from geotour_ga.individual import Individual


def _random_points(n, seed):
    rng = random.Random(seed)
    return [(rng.uniform(46.0, 47.0), rng.uniform(47.5, 48.5)) for _ in range(n)]


def test_config_defaults():
    cfg = GAConfig()
    assert cfg.population_size == 100
    assert cfg.mutation_rate == 0.02
    assert cfg.crossover_rate == 0.8
    assert cfg.selection_method == "tournament"
    assert cfg.tournament_size == 5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"population_size": 0},
        {"mutation_rate": -0.1},
        {"crossover_rate": 1.5},
        {"selection_method": "rank"},
        {"tournament_size": 0},
    ],
)
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        GAConfig(**kwargs)


def test_requires_points():
    with pytest.raises(ValueError):
        GeneticAlgorithm([])


def test_evolve_before_init_fails(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=10, random_seed=1))
    with pytest.raises(RuntimeError):
        ga.evolve()


def test_init_population(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=30, random_seed=1))
    ga.init_population()
    assert ga.generation == 0
    assert len(ga.population) == 30
    assert ga.population[0].genes == list(range(len(city_points)))
    for ind in ga.population:
        assert sorted(ind.genes) == list(range(len(city_points)))
    assert ga.best_solution.fitness == max(ind.fitness for ind in ga.population)


def test_init_population_restarts_run(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=20, random_seed=4))
    ga.init_population()
    for _ in range(10):
        ga.evolve()
    assert ga.generation == 10
    ga.init_population()
    assert ga.generation == 0
    assert ga.best_solution in ga.population


def test_evolve_keeps_population_size_and_elite(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=25, random_seed=2))
    ga.init_population()
    elite = ga.best_solution
    best = ga.evolve()
    assert ga.generation == 1
    assert len(ga.population) == 25
    assert ga.population[0] is elite
    assert best is ga.best_solution
    assert best.fitness >= elite.fitness


def test_find_best_only_ratchets_up(unit_square):
    ga = GeneticAlgorithm(unit_square, GAConfig(population_size=3, random_seed=0))
    ga.population = [Individual([0, 2, 1, 3], unit_square), Individual([0, 1, 3, 2], unit_square)]
    optimal = Individual([0, 1, 2, 3], unit_square)
    ga.best_solution = optimal
    assert ga.find_best() is optimal
    ga.best_solution = None
    assert ga.find_best() is max(ga.population, key=lambda ind: ind.fitness)


def test_find_best_first_wins_ties(unit_square):
    ga = GeneticAlgorithm(unit_square, GAConfig(population_size=2, random_seed=0))
    a = Individual([0, 1, 2, 3], unit_square)
    b = Individual([0, 1, 2, 3], unit_square)
    ga.population = [a, b]
    assert ga.find_best() is a


def test_population_of_one_only_keeps_elite(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=1, random_seed=3))
    ga.init_population()
    elite = ga.best_solution
    for _ in range(5):
        ga.evolve()
    assert ga.population == [elite]
    assert ga.generation == 5


@pytest.mark.parametrize("method", ["tournament", "roulette"])
def test_best_never_regresses(method):
    points = _random_points(12, seed=17)
    cfg = GAConfig(population_size=20, mutation_rate=0.3, crossover_rate=0.7, selection_method=method, random_seed=5)
    ga = GeneticAlgorithm(points, cfg)
    ga.init_population()
    previous = ga.best_solution.fitness
    for _ in range(500):
        best = ga.evolve()
        assert best.fitness >= previous
        previous = best.fitness


@pytest.mark.parametrize("method", ["tournament", "roulette"])
def test_unit_square_converges_to_perimeter(unit_square, method):
    cfg = GAConfig(population_size=50, mutation_rate=0.1, crossover_rate=0.8, selection_method=method, random_seed=8)
    ga = GeneticAlgorithm(unit_square, cfg)
    ga.init_population()
    for _ in range(50):
        ga.evolve()
    assert ga.best_solution.distance < 4.05
    assert ga.best_solution.distance == pytest.approx(4.0, abs=1e-3)


def test_collinear_points_have_fixed_distance():
    points = [(0.0, 0.0), (0.0, 0.004), (0.0, 0.009)]
    span = haversine(points[0], points[2])
    ga = GeneticAlgorithm(points, GAConfig(population_size=10, mutation_rate=0.5, random_seed=6))
    ga.init_population()
    assert ga.best_solution.distance == pytest.approx(2 * span)
    for _ in range(20):
        ga.evolve()
        assert ga.best_solution.distance == pytest.approx(2 * span)


def test_seed_makes_runs_reproducible(city_points):
    runs = []
    for _ in range(2):
        ga = GeneticAlgorithm(city_points, GAConfig(population_size=20, mutation_rate=0.2, random_seed=21))
        ga.init_population()
        for _ in range(30):
            ga.evolve()
        runs.append(ga.snapshot())
    assert runs[0] == runs[1]


def test_snapshot(city_points):
    ga = GeneticAlgorithm(city_points, GAConfig(population_size=10, random_seed=1))
    assert ga.snapshot() == {"generation": 0, "genes": [], "distance": 0.0, "fitness": 0.0}
    ga.init_population()
    ga.evolve()
    snap = ga.snapshot()
    assert snap["generation"] == 1
    assert snap["genes"] == ga.best_solution.genes
    assert snap["distance"] == ga.best_solution.distance
    assert snap["fitness"] == ga.best_solution.fitness
