"""
Selection, crossover and mutation operators over permutation tours.
"""

import random
from typing import List, Sequence

from .individual import Individual


Genes = List[int]

TOURNAMENT_SIZE = 5


def tournament_select(population: Sequence[Individual], rng: random.Random, k: int = TOURNAMENT_SIZE) -> Individual:
    # Draws with replacement; strict > keeps the earliest draw on ties.
    best = None
    for _ in range(k):
        ind = population[rng.randrange(len(population))]
        if best is None or ind.fitness > best.fitness:
            best = ind
    return best


def roulette_select(population: Sequence[Individual], rng: random.Random) -> Individual:
    total = sum(ind.fitness for ind in population)
    r = rng.random() * total
    acc = 0.0
    for ind in population:
        acc += ind.fitness
        if acc >= r:
            return ind
    return population[-1]


def order_crossover_range(parent1: Sequence[int], parent2: Sequence[int], start: int, end: int) -> Genes:
    """Order crossover (OX) with a fixed inclusive block ``[start, end]``.

    The block is copied from ``parent1``; the remaining slots are filled
    circularly from ``end + 1`` with ``parent2``'s genes in their original
    order, skipping genes already placed.
    """
    n = len(parent1)
    if len(parent2) != n:
        raise ValueError(f"parents differ in length: {n} != {len(parent2)}")
    if n <= 1:
        return list(parent1)
    if not 0 <= start <= end < n:
        raise ValueError(f"invalid crossover range [{start}, {end}] for length {n}")

    child: List = [None] * n
    used = set()
    for i in range(start, end + 1):
        child[i] = parent1[i]
        used.add(parent1[i])

    p2_index = 0
    for i in range(n):
        pos = (end + 1 + i) % n
        if child[pos] is not None:
            continue
        while parent2[p2_index] in used:
            p2_index += 1
        child[pos] = parent2[p2_index]
        used.add(parent2[p2_index])
    return child


def order_crossover(parent1: Sequence[int], parent2: Sequence[int], rng: random.Random) -> Genes:
    n = len(parent1)
    if n <= 1:
        return list(parent1)
    start = rng.randrange(n)
    end = rng.randrange(start, n)
    return order_crossover_range(parent1, parent2, start, end)


def swap_genes(genes: Genes, i: int, j: int) -> None:
    genes[i], genes[j] = genes[j], genes[i]


def invert_segment(genes: Genes, i: int, j: int) -> None:
    if i > j:
        i, j = j, i
    genes[i : j + 1] = genes[i : j + 1][::-1]


def mutate_swap(genes: Genes, rng: random.Random) -> None:
    i = rng.randrange(len(genes))
    j = rng.randrange(len(genes))
    swap_genes(genes, i, j)


def mutate_inversion(genes: Genes, rng: random.Random) -> None:
    i = rng.randrange(len(genes))
    j = rng.randrange(len(genes))
    invert_segment(genes, i, j)


def mutate(genes: Genes, mutation_rate: float, rng: random.Random) -> bool:
    if not genes or rng.random() >= mutation_rate:
        return False
    if rng.random() < 0.5:
        mutate_swap(genes, rng)
    else:
        mutate_inversion(genes, rng)
    return True
