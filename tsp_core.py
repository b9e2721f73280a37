"""
TSP Solver - Core Module
Contains the fundamental data structures for the genetic algorithm:
cities, chromosomes (candidate tours) and bounded populations.
"""

import heapq
import itertools
import math
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class City:
    """Represents a named city with integer x, y coordinates. Immutable."""

    name: str
    x: int
    y: int

    def distance_to(self, city: 'City') -> float:
        """Calculate Euclidean distance to another city."""
        dx = self.x - city.x
        dy = self.y - city.y
        return float(np.sqrt(dx * dx + dy * dy))

    @classmethod
    def random(cls, rng: random.Random, width: int = 500, height: int = 500) -> 'City':
        """Create a city with a random upper-case name and random location."""
        letters = [chr(rng.randrange(26) + 65) for _ in range(rng.randrange(5) + 3)]
        x = rng.randrange(width)
        y = rng.randrange(height)
        return cls("".join(letters), x, y)

    def __str__(self):
        return f"{self.name} ({self.x}, {self.y})"


class Chromosome:
    """
    Represents a tour as an ordered sequence of cities.

    Chromosomes never change after construction, so the total distance is
    computed on first access and cached for the lifetime of the object.
    """

    __slots__ = ("_cities", "_distance", "_hash")

    def __init__(self, cities: Sequence[City]):
        self._cities = tuple(cities)
        self._distance: Optional[float] = None
        self._hash: Optional[int] = None

    @classmethod
    def random(cls, cities: Sequence[City], rng: random.Random) -> 'Chromosome':
        """
        Build a shuffled chromosome from a set of cities.

        Every index is swapped with an index drawn from the whole range, which
        is not a perfectly uniform shuffle.
        """
        shuffled = list(cities)
        n = len(shuffled)
        for i in range(n):
            j = rng.randrange(n)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return cls(shuffled)

    @property
    def cities(self) -> tuple:
        return self._cities

    def get_array(self) -> List[City]:
        """Return a copy of the cities in tour order."""
        return list(self._cities)

    def get_total_distance(self) -> float:
        """Calculate the total distance of the closed tour."""
        if self._distance is not None:
            return self._distance

        if len(self._cities) == 0:
            self._distance = 0.0
            return self._distance

        xs = np.array([city.x for city in self._cities], dtype=np.float64)
        ys = np.array([city.y for city in self._cities], dtype=np.float64)

        # Legs i -> i+1, including the wrap from the last city to the first.
        legs = np.hypot(np.roll(xs, -1) - xs, np.roll(ys, -1) - ys)

        # fsum is exactly rounded, so rotations and reversals give equal totals.
        self._distance = math.fsum(legs.tolist())
        return self._distance

    def __lt__(self, other: 'Chromosome') -> bool:
        return self.get_total_distance() < other.get_total_distance()

    def __eq__(self, other):
        if not isinstance(other, Chromosome):
            return NotImplemented
        return self._cities == other._cities

    def __hash__(self):
        if self._hash is None:
            self._hash = hash(self._cities)
        return self._hash

    def __len__(self):
        return len(self._cities)

    def __getitem__(self, index):
        return self._cities[index]

    def __iter__(self) -> Iterator[City]:
        return iter(self._cities)

    def __str__(self):
        return "[ " + "".join(f"{city.name} " for city in self._cities) + "]"

    def __repr__(self):
        return f"Chromosome(cities={len(self._cities)}, distance={self.get_total_distance():.2f})"


def uniqueness_is_feasible(num_cities: int, population_size: int) -> bool:
    """
    Check whether a population of unique chromosomes can exist.

    Only city counts 1-9 are checked against the number of permutations;
    larger counts are always reported as feasible.
    """
    if 1 <= num_cities <= 9:
        return population_size <= math.factorial(num_cities)
    return True


class Population:
    """
    A capacity-bounded collection of chromosomes.

    Members are kept in a binary heap ordered by distance so the fittest
    member is always at the front. Iteration follows heap order, not
    fitness order.
    """

    def __init__(self, max_size: int):
        if max_size < 0:
            raise ValueError("Population size cannot be negative.")
        self.max_size = max_size
        self._heap = []
        self._counter = itertools.count()

    @property
    def capacity(self) -> int:
        return self.max_size

    def add(self, chromosome: Chromosome):
        """Add a chromosome, keeping the heap ordered by distance."""
        if len(self._heap) == self.max_size:
            raise OverflowError(
                f"Population is full (capacity {self.capacity})."
            )
        entry = (chromosome.get_total_distance(), next(self._counter), chromosome)
        heapq.heappush(self._heap, entry)

    def populate(self, cities: Sequence[City], rng: random.Random):
        """Fill the population with unique, randomly shuffled chromosomes."""
        if self.is_full():
            raise OverflowError(
                f"Population is full (capacity {self.capacity})."
            )
        if len(cities) == 0:
            raise ValueError("Cannot populate from an empty list of cities.")

        # With n cities there are at most n! unique tours.
        if not uniqueness_is_feasible(len(cities), self.max_size):
            raise ValueError(
                "Cannot force uniqueness when the population size is greater "
                "than the factorial of the total number of cities."
            )

        seen = set()
        while not self.is_full():
            chromosome = Chromosome.random(cities, rng)
            if chromosome not in seen:
                seen.add(chromosome)
                self.add(chromosome)

    @classmethod
    def from_cities(cls, max_size: int, cities: Sequence[City], rng: random.Random) -> 'Population':
        population = cls(max_size)
        population.populate(cities, rng)
        return population

    @classmethod
    def random_population(cls, num_cities: int, size: int, rng: random.Random) -> 'Population':
        """
        Generate a population over randomly generated cities.

        Members are shuffled independently; duplicates are allowed.
        """
        cities = [City.random(rng) for _ in range(num_cities)]
        population = cls(size)
        for _ in range(size):
            population.add(Chromosome.random(cities, rng))
        return population

    def clear(self):
        self._heap = []

    def get_cities(self) -> List[City]:
        """Cities of the fittest member, in its tour order."""
        return self.get_most_fit().get_array()

    def get_chromosomes(self) -> List[Chromosome]:
        """All members, in heap order."""
        return [entry[2] for entry in self._heap]

    def get_most_fit(self) -> Chromosome:
        if not self._heap:
            raise IndexError("Population is empty.")
        return self._heap[0][2]

    def get_fittest(self, count: int) -> List[Chromosome]:
        """The `count` fittest members, best first."""
        return [entry[2] for entry in heapq.nsmallest(count, self._heap)]

    def get_average_distance(self) -> int:
        """Mean distance of all members, truncated to an integer."""
        if not self._heap:
            raise ValueError("Cannot average an empty population.")
        return int(math.fsum(entry[0] for entry in self._heap) / len(self._heap))

    def deep_copy(self) -> 'Population':
        """Copy into an independent population of the same capacity."""
        population = Population(self.capacity)
        for chromosome in self:
            population.add(chromosome)
        return population

    def size(self) -> int:
        return len(self._heap)

    def is_full(self) -> bool:
        return len(self._heap) >= self.max_size

    def __len__(self):
        return len(self._heap)

    def __iter__(self) -> Iterator[Chromosome]:
        return (entry[2] for entry in self._heap)

    def __str__(self):
        lines = ["Population:"]
        for chromosome in self:
            lines.append(f"{chromosome} Value: {chromosome.get_total_distance():.2f}")
        return "\n".join(lines)
