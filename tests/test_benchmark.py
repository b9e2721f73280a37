"""
Tests for the heat map sweep and the averaging tool.
"""

import os
import random
import shutil
import tempfile
import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from benchmark import AveragingTool, HeatMap, _format_duration, _steps
from genetic_algorithm import GeneticAlgorithm
from tsp_core import Population

from ga_test_utils import grid_cities


def small_ga(seed=3, max_generations=5):
    rng = random.Random(seed)
    population = Population.from_cities(10, grid_cities(8), rng)
    return GeneticAlgorithm(population=population, max_generations=max_generations, rng=rng)


class TestHelpers(unittest.TestCase):

    def test_steps_count_both_ends(self):
        self.assertEqual(_steps(0.9, 1.0, 0.02), 6)
        self.assertEqual(_steps(0.0, 0.1, 0.02), 6)
        self.assertEqual(_steps(0.9, 1.0, 0.05), 3)
        self.assertEqual(_steps(0.0, 1.0, 0.3), 4)

    def test_format_duration(self):
        self.assertEqual(_format_duration(12.7), "12 second(s)")
        self.assertEqual(_format_duration(125), "2 minute(s)")
        self.assertEqual(_format_duration(7300), "2 hour(s)")


class TestHeatMap(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.heat_map = HeatMap(small_ga(), number_of_runs=2, scale=4)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)
        plt.close("all")

    def _set_ranges(self):
        self.heat_map.set_crossover_range(0.9, 1.0, 0.05)
        self.heat_map.set_mutation_range(0.0, 0.1, 0.05)

    def test_grid_shape_and_rates(self):
        self._set_ranges()
        self.assertEqual((self.heat_map.rows, self.heat_map.columns), (3, 3))
        self.assertEqual(self.heat_map.crossover_rates[-1], 1.0)
        self.assertEqual(len(self.heat_map.mutation_rates), 3)
        for rate in self.heat_map.crossover_rates + self.heat_map.mutation_rates:
            self.assertTrue(0 <= rate <= 1)

    def test_run_fills_every_cell(self):
        self._set_ranges()
        results = self.heat_map.run(verbose=False)

        self.assertEqual(results.shape, (3, 3))
        self.assertEqual(results.dtype, np.int64)
        self.assertTrue((results > 0).all())
        self.assertEqual(self.heat_map.min_value, int(results.min()))
        self.assertEqual(self.heat_map.max_value, int(results.max()))

        for cell in self.heat_map.best():
            self.assertEqual(results[cell["y"], cell["x"]], self.heat_map.min_value)
            self.assertEqual(cell["crossover_rate"], self.heat_map.crossover_rates[cell["x"]])
        for cell in self.heat_map.worst():
            self.assertEqual(results[cell["y"], cell["x"]], self.heat_map.max_value)

    def test_dataframe_and_files(self):
        self._set_ranges()
        self.heat_map.run(verbose=False)

        frame = self.heat_map.to_dataframe()
        self.assertEqual(frame.shape, (3, 3))
        self.assertEqual(frame.index.name, "mutation_rate")
        self.assertEqual(frame.columns.name, "crossover_rate")
        self.assertEqual(list(frame.columns), self.heat_map.crossover_rates)

        csv_path = os.path.join(self.tmpdir, "heat_map.csv")
        png_path = os.path.join(self.tmpdir, "heat_map.png")
        self.heat_map.save_csv(csv_path)
        self.heat_map.plot(save_path=png_path)
        self.assertTrue(os.path.exists(csv_path))
        self.assertTrue(os.path.exists(png_path))

    def test_estimate(self):
        self._set_ranges()
        self.assertGreaterEqual(self.heat_map.estimate_time(samples=2, rng=random.Random(0)), 0)

    def test_needs_ranges_and_results(self):
        with self.assertRaises(RuntimeError):
            self.heat_map.run(verbose=False)
        with self.assertRaises(RuntimeError):
            self.heat_map.best()
        with self.assertRaises(RuntimeError):
            self.heat_map.to_dataframe()

    def test_invalid_ranges(self):
        with self.assertRaises(ValueError):
            self.heat_map.set_crossover_range(0.5, 0.4, 0.1)
        with self.assertRaises(ValueError):
            self.heat_map.set_crossover_range(0.0, 1.5, 0.1)
        with self.assertRaises(ValueError):
            self.heat_map.set_mutation_range(0.0, 0.1, 0.0)
        with self.assertRaises(ValueError):
            self.heat_map.set_mutation_range(0.1, 0.2, 0.5)

    def test_invalid_settings(self):
        with self.assertRaises(ValueError):
            self.heat_map.number_of_runs = 0
        with self.assertRaises(ValueError):
            self.heat_map.scale = 21
        with self.assertRaises(ValueError):
            self.heat_map.scale = -1


class TestAveragingTool(unittest.TestCase):

    def tearDown(self):
        plt.close("all")

    def test_run(self):
        tool = AveragingTool(small_ga(max_generations=6), 3)
        final = tool.run(verbose=False)

        self.assertEqual(tool.legend, ["Eval. of Pop.", "Eval. of Fittest"])
        self.assertEqual([len(line) for line in tool.lines], [6, 6])
        self.assertEqual(final, tool.lines[1][-1])
        for line in tool.lines:
            self.assertTrue(all(isinstance(v, int) and v > 0 for v in line))

    def test_legend_prefix(self):
        tool = AveragingTool(small_ga(), 1)
        tool.run(verbose=False)
        tool.add_item_to_legend(0, "Uniform Order")
        self.assertEqual(tool.legend[0], "Uniform Order - Eval. of Pop.")

    def test_display(self):
        tool = AveragingTool(small_ga(), 2)
        tool.run(verbose=False)
        tmpdir = tempfile.mkdtemp()
        try:
            path = os.path.join(tmpdir, "averaged.png")
            tool.display(save_path=path)
            self.assertTrue(os.path.exists(path))
        finally:
            shutil.rmtree(tmpdir)

        tool.legend.append("extra")
        with self.assertRaises(RuntimeError):
            tool.display()

    def test_needs_at_least_one_run(self):
        with self.assertRaises(ValueError):
            AveragingTool(small_ga(), 0)


if __name__ == "__main__":
    unittest.main()
