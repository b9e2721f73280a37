"""
Shared fixtures for the genetic algorithm tests.
"""

import random
from collections import Counter

from tsp_core import City, Chromosome


def square_cities():
    """Four corners of a 10x10 square; the optimal tour has length 40."""
    return [
        City("A", 0, 0),
        City("B", 10, 0),
        City("C", 10, 10),
        City("D", 0, 10),
    ]


def grid_cities(n):
    """n distinct cities laid out on a grid."""
    return [City(f"C{i}", (i % 7) * 13, (i // 7) * 11) for i in range(n)]


def is_permutation_of(chromosome, cities):
    return len(chromosome) == len(cities) and Counter(chromosome.get_array()) == Counter(cities)


def random_pair(cities, seed):
    rng = random.Random(seed)
    return Chromosome.random(cities, rng), Chromosome.random(cities, rng)


class ScriptedRandom:
    """
    Stand-in random stream returning pre-set values.

    Records the bound of every randrange call so tests can check both the
    order and the number of draws.
    """

    def __init__(self, ints=(), floats=()):
        self._ints = list(ints)
        self._floats = list(floats)
        self.bounds = []

    def randrange(self, n):
        if not self._ints:
            raise AssertionError("Unexpected randrange draw.")
        value = self._ints.pop(0)
        if not 0 <= value < n:
            raise AssertionError(f"Scripted value {value} outside [0, {n}).")
        self.bounds.append(n)
        return value

    def random(self):
        if not self._floats:
            raise AssertionError("Unexpected random draw.")
        return self._floats.pop(0)

    @property
    def exhausted(self):
        return not self._ints and not self._floats


class RecordingRandom(random.Random):
    """A seeded random stream that remembers every randrange result."""

    def __init__(self, seed):
        super().__init__(seed)
        self.calls = []

    def randrange(self, *args, **kwargs):
        value = super().randrange(*args, **kwargs)
        self.calls.append(value)
        return value
