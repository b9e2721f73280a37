"""
Tests for the mutation operators.
"""

import random
import unittest

from mutation import insertion, reciprocal_exchange, scramble
from tsp_core import City, Chromosome

from ga_test_utils import ScriptedRandom, grid_cities, is_permutation_of


def five_cities():
    return [City(name, i * 10, (i % 2) * 10) for i, name in enumerate("ABCDE")]


def names(chromosome):
    return "".join(city.name for city in chromosome)


class TestMutationClosure(unittest.TestCase):

    def test_every_operator_keeps_the_city_set(self):
        rng = random.Random(77)
        for n in range(1, 41):
            cities = grid_cities(n)
            chromosome = Chromosome.random(cities, rng)
            for operator in (insertion, reciprocal_exchange, scramble):
                for _ in range(5):
                    mutated = operator(chromosome, rng)
                    self.assertTrue(
                        is_permutation_of(mutated, cities),
                        f"{operator.__name__} broke the tour for {n} cities",
                    )

    def test_input_is_untouched(self):
        chromosome = Chromosome(five_cities())
        rng = random.Random(5)
        for operator in (insertion, reciprocal_exchange, scramble):
            operator(chromosome, rng)
            self.assertEqual(names(chromosome), "ABCDE")

    def test_single_city_is_a_no_op(self):
        chromosome = Chromosome([City("Solo", 3, 3)])
        rng = random.Random(5)
        for operator in (insertion, reciprocal_exchange, scramble):
            mutated = operator(chromosome, rng)
            self.assertEqual(mutated, chromosome)
            self.assertEqual(mutated.get_total_distance(), 0.0)


class TestInsertion(unittest.TestCase):

    def setUp(self):
        self.chromosome = Chromosome(five_cities())

    def test_forward_move(self):
        mutated = insertion(self.chromosome, ScriptedRandom(ints=[1, 3]))
        self.assertEqual(names(mutated), "ACDBE")

    def test_backward_move(self):
        mutated = insertion(self.chromosome, ScriptedRandom(ints=[3, 1]))
        self.assertEqual(names(mutated), "ADBCE")

    def test_same_index(self):
        mutated = insertion(self.chromosome, ScriptedRandom(ints=[2, 2]))
        self.assertEqual(names(mutated), "ABCDE")

    def test_ends(self):
        self.assertEqual(names(insertion(self.chromosome, ScriptedRandom(ints=[0, 4]))), "BCDEA")
        self.assertEqual(names(insertion(self.chromosome, ScriptedRandom(ints=[4, 0]))), "EABCD")


class TestReciprocalExchange(unittest.TestCase):

    def test_swap(self):
        rng = ScriptedRandom(ints=[0, 3])
        self.assertEqual(names(reciprocal_exchange(Chromosome(five_cities()), rng)), "DBCAE")
        self.assertEqual(rng.bounds, [5, 5])

    def test_same_index(self):
        rng = ScriptedRandom(ints=[2, 2])
        self.assertEqual(names(reciprocal_exchange(Chromosome(five_cities()), rng)), "ABCDE")


class TestScramble(unittest.TestCase):

    def test_start_equals_end_draws_nothing_else(self):
        rng = ScriptedRandom(ints=[2, 2])
        mutated = scramble(Chromosome(five_cities()), rng)
        self.assertEqual(names(mutated), "ABCDE")
        self.assertEqual(rng.bounds, [5, 5])
        self.assertTrue(rng.exhausted)

    def test_wraps_around_the_end(self):
        # start 3, end 1: positions 3, 4 and 0 are visited.
        rng = ScriptedRandom(ints=[3, 1, 1, 0, 0])
        mutated = scramble(Chromosome(five_cities()), rng)
        self.assertEqual(names(mutated), "ABCED")
        self.assertEqual(rng.bounds, [5, 5, 2, 3, 1])
        self.assertTrue(rng.exhausted)

    def test_forward_range(self):
        # start 0, end 2: offsets are drawn below 2, then below 1.
        rng = ScriptedRandom(ints=[0, 2, 1, 0])
        mutated = scramble(Chromosome(five_cities()), rng)
        self.assertEqual(names(mutated), "BACDE")
        self.assertEqual(rng.bounds, [5, 5, 2, 1])

    def test_terminates_for_every_start_and_end(self):
        rng = random.Random(13)
        cities = grid_cities(9)
        for _ in range(300):
            self.assertTrue(is_permutation_of(scramble(Chromosome(cities), rng), cities))


if __name__ == "__main__":
    unittest.main()
