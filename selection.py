"""
Selection operators.
Decide which chromosomes survive and potentially reproduce.
"""

import random
from typing import List

from tsp_core import Chromosome, Population


# 1 in 5 chance that the fittest sampled chromosome is not picked.
ODDS_OF_NOT_PICKING_FITTEST = 5


def tournament_selection(population: Population, k: int, rng: random.Random) -> Chromosome:
    """
    Pick k chromosomes at random (with replacement) and return the best one.

    There is a small chance that another sampled chromosome is returned
    instead of the best, which keeps some pressure off the fittest members.

    Args:
        population: The population to select from
        k: Tournament size, must be at least 1
        rng: Shared random stream

    Returns:
        A chromosome that was part of the sampled tournament
    """
    if k < 1:
        raise ValueError("k must be greater than 0.")

    members = population.get_chromosomes()
    if not members:
        raise ValueError("Cannot select from an empty population.")

    sampled = _sample_with_replacement(members, k, rng)
    return _pick(sampled, rng)


def _sample_with_replacement(members: List[Chromosome], k: int, rng: random.Random) -> List[Chromosome]:
    return [members[rng.randrange(len(members))] for _ in range(k)]


def _pick(sampled: List[Chromosome], rng: random.Random) -> Chromosome:
    best = _best_of(sampled)

    if rng.randrange(ODDS_OF_NOT_PICKING_FITTEST) == 0 and len(sampled) != 1:
        others = list(sampled)
        others.remove(best)
        return others[rng.randrange(len(others))]

    return best


def _best_of(sampled: List[Chromosome]) -> Chromosome:
    # First minimum wins on ties.
    best = sampled[0]
    for chromosome in sampled[1:]:
        if chromosome.get_total_distance() < best.get_total_distance():
            best = chromosome
    return best
