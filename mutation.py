"""
Mutation operators.
Each operator returns a new chromosome; the input is left untouched.
"""

import random
from typing import List

from tsp_core import City, Chromosome


def insertion(chromosome: Chromosome, rng: random.Random) -> Chromosome:
    """Take a random city out of the tour and insert it at a random place."""
    cities = chromosome.get_array()
    source = rng.randrange(len(cities))
    destination = rng.randrange(len(cities))

    if source != destination:
        cities.insert(destination, cities.pop(source))

    return Chromosome(cities)


def reciprocal_exchange(chromosome: Chromosome, rng: random.Random) -> Chromosome:
    """Swap two randomly selected cities."""
    cities = chromosome.get_array()
    n = len(cities)
    _swap(cities, rng.randrange(n), rng.randrange(n))
    return Chromosome(cities)


def scramble(chromosome: Chromosome, rng: random.Random) -> Chromosome:
    """
    Pick a subset of cities and randomly re-arrange them.

    The subset wraps around the end of the tour: with 10 cities, a start of 8
    and an end of 2 covers indexes 8, 9, 0 and 1.
    """
    cities = chromosome.get_array()
    n = len(cities)
    start = rng.randrange(n)
    end = rng.randrange(n)

    # start == end never enters the loop, so no zero-width draw happens.
    i = start
    while i % n != end:
        offset = rng.randrange(abs(i % n - end))
        _swap(cities, i % n, (i + offset) % n)
        i += 1

    return Chromosome(cities)


def _swap(cities: List[City], i: int, j: int):
    cities[i], cities[j] = cities[j], cities[i]
