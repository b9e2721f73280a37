"""
Preset configurations for the genetic algorithm.
"""

import random
from typing import List, Optional

from data_generator import generate_random_cities
from genetic_algorithm import CrossoverType, GeneticAlgorithm, MutationType
from tsp_core import City, Population


# Parameters.
POPULATION_SIZE = 500   # Size of the population.
MAX_GENERATIONS = 500   # Number of generations to run.
CROSSOVER_RATE = 0.90   # Odds that crossover will occur.
MUTATION_RATE = 0.04    # Odds that mutation will occur.
DEFAULT_CITIES = 48


def get_default_ga(cities: Optional[List[City]] = None, seed: Optional[int] = None,
                   population_size: int = POPULATION_SIZE) -> GeneticAlgorithm:
    """
    Build the standard configuration.

    Args:
        cities: Cities to tour; 48 random cities when omitted
        seed: Seed of the random stream; a random seed is drawn and printed
            when omitted so the run can be reproduced
        population_size: Number of chromosomes per generation
    """
    if seed is None:
        seed = random.SystemRandom().randrange(2 ** 63)
        print(f"Seed: {seed}")
    rng = random.Random(seed)

    if cities is None:
        cities = generate_random_cities(DEFAULT_CITIES, rng)

    return GeneticAlgorithm(
        population=Population.from_cities(population_size, cities, rng),
        max_generations=MAX_GENERATIONS,
        k=3,
        elitism_value=1,
        crossover_rate=CROSSOVER_RATE,
        mutation_rate=MUTATION_RATE,
        local_search_rate=0.0,
        force_uniqueness=False,
        crossover_type=CrossoverType.UNIFORM_ORDER,
        mutation_type=MutationType.INSERTION,
        rng=rng,
    )
