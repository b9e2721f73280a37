"""
Genetic Algorithm Solver
Brings together selection, crossover, mutation and local search into the
generational loop, and records per-generation convergence statistics.
"""

import random
from enum import Enum
from typing import Callable, List, Optional

import crossover
import mutation
from local_search import two_opt_sweep
from selection import tournament_selection
from tsp_core import Chromosome, Population, uniqueness_is_feasible
from visualization import TSPVisualizer


class CrossoverType(Enum):
    UNIFORM_ORDER = "uniform_order"
    ONE_POINT = "one_point"
    TWO_POINT = "two_point"


class MutationType(Enum):
    INSERTION = "insertion"
    RECIPROCAL_EXCHANGE = "reciprocal_exchange"
    SCRAMBLE = "scramble"


CROSSOVERS = {
    CrossoverType.UNIFORM_ORDER: crossover.uniform_order,
    CrossoverType.ONE_POINT: crossover.one_point,
    CrossoverType.TWO_POINT: crossover.two_point,
}

MUTATIONS = {
    MutationType.INSERTION: mutation.insertion,
    MutationType.RECIPROCAL_EXCHANGE: mutation.reciprocal_exchange,
    MutationType.SCRAMBLE: mutation.scramble,
}

NOT_RUN_MESSAGE = "Genetic algorithm was never run."


class GeneticAlgorithm:
    """
    Genetic Algorithm for the TSP.

    Configuration is validated as soon as it is set. Results are only
    available once run() has completed; reset() restores the initial
    population so the same instance can be run again.
    """

    def __init__(
        self,
        population: Optional[Population] = None,
        max_generations: int = 10,
        k: int = 3,
        elitism_value: int = 1,
        crossover_rate: float = 0.95,
        mutation_rate: float = 0.05,
        local_search_rate: float = 0.0,
        force_uniqueness: bool = False,
        crossover_type: CrossoverType = CrossoverType.UNIFORM_ORDER,
        mutation_type: MutationType = MutationType.INSERTION,
        rng: Optional[random.Random] = None,
    ):
        self.rng = rng if rng is not None else random.Random()
        self._elitism_value = 0

        if population is None:
            population = Population.random_population(10, 10, self.rng)
        self.set_population(population)

        self.max_generations = max_generations
        self.k = k
        self.elitism_value = elitism_value
        self.crossover_rate = crossover_rate
        self.mutation_rate = mutation_rate
        self.local_search_rate = local_search_rate
        self.force_uniqueness = force_uniqueness
        self.crossover_type = crossover_type
        self.mutation_type = mutation_type

        self._clear_results()

    # ---------------------------------------
    # Configuration
    # ---------------------------------------

    def set_population(self, population: Population):
        """Use `population` as the initial population of every run."""
        if population is None:
            raise ValueError("Population cannot be None.")
        if population.size() == 0:
            raise ValueError("Population cannot be empty.")
        if population.size() < self._elitism_value:
            raise ValueError("Elitism value cannot be greater than population size.")

        self.initial_population = population
        self.population = population.deep_copy()
        self._average_distance_of_first_generation = population.get_average_distance()
        self._best_distance_of_first_generation = population.get_most_fit().get_total_distance()

    @property
    def rng(self) -> random.Random:
        return self._rng

    @rng.setter
    def rng(self, value: random.Random):
        if value is None:
            raise ValueError("Random stream cannot be None.")
        self._rng = value

    @property
    def max_generations(self) -> int:
        return self._max_generations

    @max_generations.setter
    def max_generations(self, value: int):
        if value < 0:
            raise ValueError("Maximum generations cannot be negative.")
        self._max_generations = value

    @property
    def k(self) -> int:
        """Tournament size."""
        return self._k

    @k.setter
    def k(self, value: int):
        if value < 0:
            raise ValueError("Tournament size cannot be negative.")
        self._k = value

    @property
    def elitism_value(self) -> int:
        return self._elitism_value

    @elitism_value.setter
    def elitism_value(self, value: int):
        if value < 0:
            raise ValueError("Elitism value cannot be negative.")
        if value > self.population.size():
            raise ValueError("Elitism value cannot be greater than population size.")
        self._elitism_value = value

    @property
    def crossover_rate(self) -> float:
        return self._crossover_rate

    @crossover_rate.setter
    def crossover_rate(self, value: float):
        self._crossover_rate = _check_rate(value, "Crossover rate")

    @property
    def mutation_rate(self) -> float:
        return self._mutation_rate

    @mutation_rate.setter
    def mutation_rate(self, value: float):
        self._mutation_rate = _check_rate(value, "Mutation rate")

    @property
    def local_search_rate(self) -> float:
        return self._local_search_rate

    @local_search_rate.setter
    def local_search_rate(self, value: float):
        self._local_search_rate = _check_rate(value, "Local search rate")

    @property
    def force_uniqueness(self) -> bool:
        return self._force_uniqueness

    @force_uniqueness.setter
    def force_uniqueness(self, value: bool):
        num_cities = len(self.population.get_cities())
        if value and not uniqueness_is_feasible(num_cities, self.population.size()):
            raise ValueError(
                "Cannot force uniqueness when the population size is greater "
                "than the factorial of the total number of cities."
            )
        self._force_uniqueness = bool(value)

    @property
    def crossover_type(self) -> CrossoverType:
        return self._crossover_type

    @crossover_type.setter
    def crossover_type(self, value: CrossoverType):
        if not isinstance(value, CrossoverType):
            raise TypeError(f"Expected a CrossoverType, got {value!r}.")
        self._crossover_type = value

    @property
    def mutation_type(self) -> MutationType:
        return self._mutation_type

    @mutation_type.setter
    def mutation_type(self, value: MutationType):
        if not isinstance(value, MutationType):
            raise TypeError(f"Expected a MutationType, got {value!r}.")
        self._mutation_type = value

    # ---------------------------------------
    # Results
    # ---------------------------------------

    @property
    def finished(self) -> bool:
        return self._finished

    def _require_finished(self):
        if not self._finished:
            raise RuntimeError(NOT_RUN_MESSAGE)

    @property
    def average_distance_of_first_generation(self) -> int:
        self._require_finished()
        return self._average_distance_of_first_generation

    @property
    def best_distance_of_first_generation(self) -> float:
        self._require_finished()
        return self._best_distance_of_first_generation

    @property
    def average_distance_of_last_generation(self) -> int:
        self._require_finished()
        return self._average_distance_of_last_generation

    @property
    def best_distance_of_last_generation(self) -> float:
        self._require_finished()
        return self._best_distance_of_last_generation

    @property
    def average_distance_of_each_generation(self) -> List[int]:
        self._require_finished()
        return list(self._average_history)

    @property
    def best_distance_of_each_generation(self) -> List[float]:
        self._require_finished()
        return list(self._best_history)

    @property
    def area_under_average_distances(self) -> int:
        self._require_finished()
        return self._area_under_average

    @property
    def area_under_best_distances(self) -> float:
        self._require_finished()
        return self._area_under_best

    def get_most_fit(self) -> Chromosome:
        self._require_finished()
        return self.population.get_most_fit()

    # ---------------------------------------
    # Lifecycle
    # ---------------------------------------

    def run(self, verbose: bool = False, callback: Optional[Callable[[Chromosome], None]] = None):
        """
        Evolve the population for max_generations generations.

        Args:
            verbose: Print progress every 100 generations
            callback: Called with the fittest chromosome whenever it changes
        """
        most_fit_last = self.population.get_most_fit()
        if callback:
            callback(most_fit_last)

        for gen in range(self._max_generations):
            self.population = self.create_next_generation()
            self._record_generation()

            most_fit = self.population.get_most_fit()
            if callback and most_fit != most_fit_last:
                callback(most_fit)
            most_fit_last = most_fit

            if verbose and (gen + 1) % 100 == 0:
                print(
                    f"Gen {gen+1} | Best = {most_fit.get_total_distance():.2f}"
                    f" | Avg = {self._average_history[-1]}"
                )

        self._finished = True
        self._average_distance_of_last_generation = self.population.get_average_distance()
        self._best_distance_of_last_generation = self.population.get_most_fit().get_total_distance()

    def run_with_debug_mode(self, callback: Callable[[Chromosome], None], verbose: bool = True):
        """Run while handing every new fittest chromosome to `callback`."""
        self.run(verbose=verbose, callback=callback)

    def reset(self):
        """Restore the initial population and forget all results."""
        self.population = self.initial_population.deep_copy()
        self._clear_results()

    def _clear_results(self):
        self._finished = False
        self._average_history: List[int] = []
        self._best_history: List[float] = []
        self._area_under_average = 0
        self._area_under_best = 0.0
        self._average_distance_of_last_generation = None
        self._best_distance_of_last_generation = None

    def _record_generation(self):
        average = self.population.get_average_distance()
        best = self.population.get_most_fit().get_total_distance()
        self._average_history.append(average)
        self._area_under_average += average
        self._best_history.append(best)
        self._area_under_best += best

    # ---------------------------------------
    # Single generation evolution
    # ---------------------------------------

    def create_next_generation(self) -> Population:
        """
        Build the next generation from the current population: elitism
        first, then bred offspring, then one tournament pick if a single
        slot is left over.
        """
        target = self.population.size()
        next_gen = Population(target)
        added = set()

        for elite in self._elites():
            next_gen.add(elite)

        while next_gen.size() < target - 1:
            p1 = tournament_selection(self.population, self._k, self._rng)
            p2 = tournament_selection(self.population, self._k, self._rng)

            do_crossover = self._rng.random() < self._crossover_rate
            do_mutate1 = self._rng.random() < self._mutation_rate
            do_mutate2 = self._rng.random() < self._mutation_rate
            do_local_search1 = self._rng.random() < self._local_search_rate
            do_local_search2 = self._rng.random() < self._local_search_rate

            if do_crossover:
                p1, p2 = self._crossover(p1, p2)

            if do_mutate1:
                p1 = self._mutate(p1)
            if do_mutate2:
                p2 = self._mutate(p2)

            if do_local_search1:
                p1 = two_opt_sweep(p1)
            if do_local_search2:
                p2 = two_opt_sweep(p2)

            if self._force_uniqueness:
                for child in (p1, p2):
                    if child not in added:
                        added.add(child)
                        next_gen.add(child)
            else:
                next_gen.add(p1)
                next_gen.add(p2)

        # Pairs fill in twos, so one slot may be left.
        if next_gen.size() != target:
            next_gen.add(tournament_selection(self.population, self._k, self._rng))

        if next_gen.size() != target:
            raise AssertionError("Next generation population should be full.")

        return next_gen

    def _elites(self) -> List[Chromosome]:
        elites = self.population.get_fittest(self._elitism_value)
        if self._local_search_rate > 0:
            elites = [two_opt_sweep(elite) for elite in elites]
        return elites

    def _crossover(self, p1: Chromosome, p2: Chromosome):
        return CROSSOVERS[self._crossover_type](p1, p2, self._rng)

    def _mutate(self, chromosome: Chromosome) -> Chromosome:
        return MUTATIONS[self._mutation_type](chromosome, self._rng)

    # ---------------------------------------
    # Reporting
    # ---------------------------------------

    def print_properties(self):
        print("----------Genetic Algorithm Properties----------")
        print(f"Number of Cities:   {len(self.population.get_cities())}")
        print(f"Population Size:    {self.population.size()}")
        print(f"Max. Generation:    {self._max_generations}")
        print(f"k Value:            {self._k}")
        print(f"Elitism Value:      {self._elitism_value}")
        print(f"Force Uniqueness:   {self._force_uniqueness}")
        print(f"Local Search Rate:  {self._local_search_rate}")
        print(f"Crossover Type:     {self._crossover_type.name}")
        print(f"Crossover Rate:     {self._crossover_rate * 100}%")
        print(f"Mutation Type:      {self._mutation_type.name}")
        print(f"Mutation Rate:      {self._mutation_rate * 100}%")

    def print_results(self):
        self._require_finished()
        print("-----------Genetic Algorithm Results------------")
        print(f"Average Distance of First Generation:  {self._average_distance_of_first_generation}")
        print(f"Average Distance of Last Generation:   {self._average_distance_of_last_generation}")
        print(f"Best Distance of First Generation:     {self._best_distance_of_first_generation:.2f}")
        print(f"Best Distance of Last Generation:      {self._best_distance_of_last_generation:.2f}")
        print(f"Area Under Average Distance:           {self._area_under_average}")
        print(f"Area Under Best Distance:              {self._area_under_best:.2f}")

    def plot_best_tour(self, visualizer=None, save_path: str = None):
        """Draw the fittest chromosome of the last generation."""
        self._require_finished()
        visualizer = visualizer or TSPVisualizer()
        return visualizer.plot_tour(
            self.population.get_most_fit(), title="Genetic Algorithm Solution", save_path=save_path
        )

    def plot_histories(self, visualizer=None, save_path: str = None):
        """Draw the average and best distance of every generation."""
        self._require_finished()
        visualizer = visualizer or TSPVisualizer()
        return visualizer.plot_histories(
            {
                "Average Evaluation of Entire Population": self._average_history,
                "Evaluation of Fittest Member": self._best_history,
            },
            save_path=save_path,
        )


def _check_rate(value: float, name: str) -> float:
    if value < 0 or value > 1:
        raise ValueError(f"{name} must be between 0 and 1 inclusive.")
    return float(value)
