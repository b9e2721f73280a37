"""
Parameter sweeps over a configured GeneticAlgorithm.

HeatMap reruns the algorithm over a grid of crossover and mutation rates;
AveragingTool reruns it with a fixed configuration and averages the
per-generation results.
"""

import random
import time
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from tqdm import tqdm

from genetic_algorithm import GeneticAlgorithm
from visualization import TSPVisualizer


# ================================
# CONFIGURATION
# ================================
DEFAULT_RUNS = 10
DEFAULT_SCALE = 10
ESTIMATE_SAMPLES = 100


def _format_duration(seconds: float) -> str:
    seconds = int(seconds)
    if seconds > 3600:
        return f"{seconds // 3600} hour(s)"
    if seconds > 60:
        return f"{seconds // 60} minute(s)"
    return f"{seconds} second(s)"


def _steps(start: float, finish: float, increment: float) -> int:
    # Work in thousandths so 0.9 .. 1.0 by 0.02 gives 6 steps.
    return (round(finish * 1000) - round(start * 1000)) // round(increment * 1000) + 1


def _check_range(start: float, finish: float, increment: float):
    if not all(0 <= v <= 1 for v in (start, finish, increment)):
        raise ValueError("Values must be between 0 and 1.")
    if finish < start:
        raise ValueError("Finish must be greater than start.")
    if increment <= 0:
        raise ValueError("Increment must be greater than 0.")
    if increment > (finish - start):
        raise ValueError("Increment cannot be greater than the difference of start and finish.")


class HeatMap:
    """
    Sweep crossover rate (columns) against mutation rate (rows).

    Every cell holds the mean area under the best-distance curve over
    `number_of_runs` runs, truncated to an integer. Lower is better.
    """

    def __init__(self, genetic_algorithm: GeneticAlgorithm, number_of_runs: int = DEFAULT_RUNS,
                 scale: int = DEFAULT_SCALE):
        self.genetic_algorithm = genetic_algorithm
        self.number_of_runs = number_of_runs
        self.scale = scale

        self.crossover_range = None
        self.mutation_range = None
        self.rows = 0
        self.columns = 0

        self.results: Optional[np.ndarray] = None
        self.min_value = None
        self.max_value = None

    @property
    def number_of_runs(self) -> int:
        return self._number_of_runs

    @number_of_runs.setter
    def number_of_runs(self, value: int):
        if value < 1:
            raise ValueError("Number of runs must be at least 1.")
        self._number_of_runs = value

    @property
    def scale(self) -> int:
        return self._scale

    @scale.setter
    def scale(self, value: int):
        if value < 0 or value > 20:
            raise ValueError("Scale must be between 0 and 20, inclusive.")
        self._scale = value

    def set_crossover_range(self, start: float, finish: float, increment: float):
        _check_range(start, finish, increment)
        self.crossover_range = (start, finish, increment)
        self.columns = _steps(start, finish, increment)

    def set_mutation_range(self, start: float, finish: float, increment: float):
        _check_range(start, finish, increment)
        self.mutation_range = (start, finish, increment)
        self.rows = _steps(start, finish, increment)

    @property
    def crossover_rates(self) -> List[float]:
        start, _, increment = self.crossover_range
        return [min(start + x * increment, 1.0) for x in range(self.columns)]

    @property
    def mutation_rates(self) -> List[float]:
        start, _, increment = self.mutation_range
        return [min(start + y * increment, 1.0) for y in range(self.rows)]

    def run(self, estimate: bool = False, verbose: bool = True) -> np.ndarray:
        """
        Fill the grid.

        Args:
            estimate: Time a sample of random runs first and print an estimate
            verbose: Print the sweep summary and elapsed time

        Returns:
            rows x columns array of results
        """
        if self.crossover_range is None or self.mutation_range is None:
            raise RuntimeError("Ranges have not been set.")

        if verbose:
            c_start, c_finish, c_increment = self.crossover_range
            m_start, m_finish, m_increment = self.mutation_range
            print(f"Total Runs To Be Done: {self.columns * self.rows * self.number_of_runs}")
            print(f"{self.columns} columns by {self.rows} rows, executed "
                  f"{self.number_of_runs} time(s) each.")
            print(f"Testing Crossover rate from {c_start} to {c_finish} by {c_increment}")
            print(f"Testing Mutation rate from {m_start} to {m_finish} by {m_increment}")

        if estimate:
            estimated = self.estimate_time()
            print(f"Estimated time: {_format_duration(estimated)}.")

        start = time.time()
        self._fill(verbose)
        if verbose:
            print(f"Time Elapsed: {_format_duration(time.time() - start)}.")
        return self.results

    def _fill(self, verbose: bool):
        ga = self.genetic_algorithm
        results = np.zeros((self.rows, self.columns), dtype=np.int64)
        cells = [(y, x) for y in range(self.rows) for x in range(self.columns)]

        for y, x in tqdm(cells, desc="Heat map", disable=not verbose):
            total = 0.0
            for _ in range(self.number_of_runs):
                ga.reset()
                ga.crossover_rate = self.crossover_rates[x]
                ga.mutation_rate = self.mutation_rates[y]
                ga.run()
                total += ga.area_under_best_distances
            results[y, x] = int(total / self.number_of_runs)

        self.results = results
        self.min_value = int(results.min())
        self.max_value = int(results.max())

    def estimate_time(self, samples: int = ESTIMATE_SAMPLES, rng: random.Random = None) -> float:
        """
        Average the time of `samples` runs at random rates inside the ranges
        and scale it to the whole sweep.

        The rates for these runs come from their own random stream.
        """
        if self.crossover_range is None or self.mutation_range is None:
            raise RuntimeError("Ranges have not been set.")

        rng = rng or random.Random()
        c_start, c_finish, _ = self.crossover_range
        m_start, m_finish, _ = self.mutation_range
        ga = self.genetic_algorithm

        before = time.time()
        for _ in range(samples):
            ga.reset()
            ga.crossover_rate = rng.uniform(c_start, c_finish)
            ga.mutation_rate = rng.uniform(m_start, m_finish)
            ga.run()
        per_run = (time.time() - before) / samples

        return per_run * self.rows * self.columns * self.number_of_runs

    def _require_results(self):
        if self.results is None:
            raise RuntimeError("Heat map was never run.")

    def best(self) -> List[Dict[str, float]]:
        """Every cell holding the minimum value."""
        self._require_results()
        return self._cells_with(self.min_value)

    def worst(self) -> List[Dict[str, float]]:
        """Every cell holding the maximum value."""
        self._require_results()
        return self._cells_with(self.max_value)

    def _cells_with(self, value) -> List[Dict[str, float]]:
        ys, xs = np.nonzero(self.results == value)
        return [
            {
                "crossover_rate": self.crossover_rates[x],
                "mutation_rate": self.mutation_rates[y],
                "x": int(x),
                "y": int(y),
            }
            for y, x in zip(ys, xs)
        ]

    def to_dataframe(self) -> pd.DataFrame:
        """Results with mutation rates as the index and crossover rates as columns."""
        self._require_results()
        return pd.DataFrame(
            self.results,
            index=pd.Index(self.mutation_rates, name="mutation_rate"),
            columns=pd.Index(self.crossover_rates, name="crossover_rate"),
        )

    def save_csv(self, path: str):
        self.to_dataframe().to_csv(path)
        print(f"Heat map values saved to {path}")

    def print_results(self):
        self._require_results()
        print("---------------Heat Map Values------------------")
        for row in self.results:
            print(" ".join(str(v) for v in row))
        print("---------------Heat Map Results-----------------")
        print("Best Value(s) found at:")
        for cell in self.best():
            self._print_cell(cell)
        print("Worst Value(s) found at:")
        for cell in self.worst():
            self._print_cell(cell)

    @staticmethod
    def _print_cell(cell):
        print(f"    Crossover Rate:  {cell['crossover_rate']}")
        print(f"     Mutation Rate:  {cell['mutation_rate']}")
        print(f"        Coordinate:  ({cell['x']}, {cell['y']})")

    def plot(self, visualizer=None, save_path: str = None):
        self._require_results()
        visualizer = visualizer or TSPVisualizer()
        return visualizer.plot_heat_map(
            self.results,
            scale=self.scale,
            crossover_rates=self.crossover_rates,
            mutation_rates=self.mutation_rates,
            save_path=save_path,
        )


class AveragingTool:
    """Run a genetic algorithm several times and average each generation."""

    def __init__(self, genetic_algorithm: GeneticAlgorithm, num_of_times_to_run: int):
        if num_of_times_to_run < 1:
            raise ValueError("Number of runs must be at least 1.")
        self.genetic_algorithm = genetic_algorithm
        self.num_of_times_to_run = num_of_times_to_run
        self.lines: List[List[int]] = []
        self.legend: List[str] = []

    def run(self, verbose: bool = True) -> int:
        """
        Returns:
            The averaged best distance of the final generation
        """
        ga = self.genetic_algorithm
        sum_average = None
        sum_best = None

        for _ in tqdm(range(self.num_of_times_to_run), desc="Averaging", disable=not verbose):
            ga.reset()
            ga.run()
            average = np.asarray(ga.average_distance_of_each_generation, dtype=np.float64)
            best = np.asarray(ga.best_distance_of_each_generation, dtype=np.float64)

            if sum_average is None:
                sum_average = np.zeros_like(average)
                sum_best = np.zeros_like(best)
            sum_average += average
            sum_best += best

        values_for_average = [int(v) for v in sum_average / self.num_of_times_to_run]
        values_for_best = [int(v) for v in sum_best / self.num_of_times_to_run]

        self.legend.extend(["Eval. of Pop.", "Eval. of Fittest"])
        self.lines.extend([values_for_average, values_for_best])

        avg_final_solution = values_for_best[-1] if values_for_best else 0
        if verbose:
            print(f"Average Final Solution: {avg_final_solution}")
        return avg_final_solution

    def add_item_to_legend(self, index: int, item: str):
        """Prefix a legend entry, e.g. with the configuration that produced it."""
        self.legend[index] = f"{item} - {self.legend[index]}"

    def display(self, visualizer=None, save_path: str = None):
        if len(self.legend) != len(self.lines):
            raise RuntimeError("Size of legend needs to be the same as the number of lines.")
        visualizer = visualizer or TSPVisualizer()
        return visualizer.plot_histories(
            dict(zip(self.legend, self.lines)),
            title="Averaged Convergence",
            save_path=save_path,
        )
