"""
Tests for loading and generating city sets.
"""

import os
import random
import shutil
import tempfile
import unittest

from data_generator import generate_circle_cities, generate_random_cities, load_tsp_file


TSPLIB_SAMPLE = """NAME : sample5
COMMENT : five cities
TYPE : TSP
DIMENSION : 5
EDGE_WEIGHT_TYPE : ATT

node_coord_section
1 6734 1453
2 2233 10
3 5530.9 1424.2
4 bad line
5 401 841
EOF
"""

HEADERLESS_SAMPLE = """1 0 0
2 10 0
3 10 10
"""


class TestLoadTspFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _write(self, name, text):
        path = os.path.join(self.tmpdir, name)
        with open(path, "w") as f:
            f.write(text)
        return path

    def test_node_coord_section(self):
        cities = load_tsp_file(self._write("sample5.tsp", TSPLIB_SAMPLE))
        self.assertEqual([c.name for c in cities], ["1", "2", "3", "5"])
        self.assertEqual((cities[0].x, cities[0].y), (6734, 1453))
        # Decimal coordinates are truncated.
        self.assertEqual((cities[2].x, cities[2].y), (5530, 1424))

    def test_file_without_header(self):
        cities = load_tsp_file(self._write("plain.tsp", HEADERLESS_SAMPLE))
        self.assertEqual(len(cities), 3)
        self.assertEqual((cities[2].x, cities[2].y), (10, 10))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_tsp_file(os.path.join(self.tmpdir, "nope.tsp"))

    def test_no_coordinates(self):
        path = self._write("empty.tsp", "NAME : empty\nNODE_COORD_SECTION\nEOF\n")
        with self.assertRaises(ValueError):
            load_tsp_file(path)


class TestGenerators(unittest.TestCase):

    def test_random_cities_are_reproducible(self):
        first = generate_random_cities(20, random.Random(4))
        second = generate_random_cities(20, random.Random(4))
        self.assertEqual(first, second)
        self.assertEqual(len(first), 20)

    def test_random_cities_stay_inside_the_area(self):
        for city in generate_random_cities(100, random.Random(1), width=50, height=30):
            self.assertTrue(0 <= city.x < 50)
            self.assertTrue(0 <= city.y < 30)

    def test_circle(self):
        cities = generate_circle_cities(4, radius=100, center_x=0, center_y=0)
        self.assertEqual([c.name for c in cities], ["City_0", "City_1", "City_2", "City_3"])
        self.assertEqual([(c.x, c.y) for c in cities], [(100, 0), (0, 100), (-100, 0), (0, -100)])


if __name__ == "__main__":
    unittest.main()
