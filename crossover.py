"""
Crossover operators.

Each operator combines two parent tours into two children. Some positions are
locked from the same-index parent; the rest are filled from the other parent
and repaired so that every child is still a permutation of the city set.
"""

import random
from collections import deque
from typing import Iterable, List, Sequence, Tuple

from tsp_core import City, Chromosome


Children = Tuple[Chromosome, Chromosome]


def uniform_order(p1: Chromosome, p2: Chromosome, rng: random.Random) -> Children:
    """Uniform order crossover driven by a random 0/1 bit mask."""
    _check_parents(p1, p2)
    mask = generate_bit_mask(len(p1), rng)
    return uniform_order_with_mask(p1, p2, mask)


def one_point(p1: Chromosome, p2: Chromosome, rng: random.Random) -> Children:
    """Keep every city before a random point, repair the rest."""
    _check_parents(p1, p2)
    point = rng.randrange(len(p1))
    return one_point_at(p1, p2, point)


def two_point(p1: Chromosome, p2: Chromosome, rng: random.Random) -> Children:
    """Order crossover: keep the cities outside two random points."""
    _check_parents(p1, p2)
    n = len(p1)
    first = rng.randrange(n)
    second = rng.randrange(n - first) + first
    return two_point_at(p1, p2, first, second)


def generate_bit_mask(size: int, rng: random.Random) -> List[int]:
    return [rng.randrange(2) for _ in range(size)]


# --------------------------------------------------------
# Deterministic forms
# --------------------------------------------------------

def uniform_order_with_mask(p1: Chromosome, p2: Chromosome, mask: Sequence[int]) -> Children:
    """
    Uniform order crossover with an explicit mask.

    Where the mask is 1, child 1 inherits the city of parent 1 and child 2
    the city of parent 2 at the same index.
    """
    _check_parents(p1, p2)
    if len(mask) != len(p1):
        raise ValueError("Bit mask must be the same length as the parents.")
    locked = [i for i, bit in enumerate(mask) if bit == 1]
    return _children(p1, p2, locked)


def one_point_at(p1: Chromosome, p2: Chromosome, point: int) -> Children:
    """One-point crossover locking positions [0, point)."""
    _check_parents(p1, p2)
    n = len(p1)
    if not 0 <= point <= n:
        raise ValueError(f"Crossover point {point} is out of range for {n} cities.")
    return _children(p1, p2, range(point))


def two_point_at(p1: Chromosome, p2: Chromosome, first: int, second: int) -> Children:
    """Two-point crossover locking [0, first) and [second, n)."""
    _check_parents(p1, p2)
    n = len(p1)
    if not 0 <= first <= second <= n:
        raise ValueError(
            f"Crossover points ({first}, {second}) are out of range for {n} cities."
        )
    locked = list(range(first)) + list(range(second, n))
    return _children(p1, p2, locked)


# --------------------------------------------------------
# Repair
# --------------------------------------------------------

def _children(p1: Chromosome, p2: Chromosome, locked: Iterable[int]) -> Children:
    locked = list(locked)
    parent1 = p1.get_array()
    parent2 = p2.get_array()
    child1 = _order_fill(parent1, parent2, locked)
    child2 = _order_fill(parent2, parent1, locked)
    return Chromosome(child1), Chromosome(child2)


def _order_fill(parent: List[City], donor: List[City], locked: List[int]) -> List[City]:
    """
    Build one child: lock `parent` at the given positions, then fill the
    remaining positions from `donor`.
    """
    n = len(parent)
    child = [None] * n
    placed = set()

    for i in locked:
        child[i] = parent[i]
        placed.add(parent[i])

    # Take the donor's city at the same index where it is not already used.
    for i in range(n):
        if child[i] is None and donor[i] not in placed:
            child[i] = donor[i]
            placed.add(donor[i])

    # Whatever is still missing goes into the gaps, in donor order.
    leftovers = deque(city for city in donor if city not in placed)
    for i in range(n):
        if child[i] is None:
            if not leftovers:
                raise AssertionError("Ran out of cities while filling the child.")
            child[i] = leftovers.popleft()

    if leftovers:
        raise AssertionError("All leftover cities should have been placed.")

    return child


def _check_parents(p1: Chromosome, p2: Chromosome):
    if len(p1) != len(p2):
        raise ValueError("Parents must contain the same number of cities.")
    if len(p1) == 0:
        raise ValueError("Cannot cross over empty chromosomes.")
