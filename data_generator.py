import os
import random
import re
from typing import List

import numpy as np

from tsp_core import City


def load_tsp_file(path) -> List[City]:
    """
    TSPLIB coordinate loader.
    Supports:
        - NODE_COORD_SECTION files (EUC_2D, ATT, CEIL_2D, GEO)
    Handles:
        - lowercase/uppercase section names
        - blank lines
        - files that start the coordinates without a section header

    Cities are named after their node id; coordinates are truncated to
    integers.
    """

    if not os.path.exists(path):
        raise FileNotFoundError(f"TSP file not found: {path}")

    with open(path, "r") as f:
        raw_lines = [l.strip() for l in f if l.strip()]

    lines_upper = [l.upper() for l in raw_lines]

    # --------------------------------------------
    # 1. Find the start of NODE_COORD_SECTION
    # --------------------------------------------
    start_index = None
    for i, line in enumerate(lines_upper):
        if "NODE_COORD_SECTION" in line:
            start_index = i + 1
            break

    if start_index is None:
        for i, line in enumerate(raw_lines):
            if re.match(r"^\s*\d+\s+[-]?\d+(\.\d+)?\s+[-]?\d+(\.\d+)?", line):
                start_index = i
                break

    if start_index is None:
        raise ValueError(f"Could not find coordinate section in: {path}")

    # --------------------------------------------
    # 2. Parse coordinates
    # --------------------------------------------
    cities = []
    for line in raw_lines[start_index:]:
        if line.upper().startswith("EOF"):
            break

        if not re.match(r"^\d+", line):
            continue

        parts = re.split(r"\s+", line)
        if len(parts) < 3:
            continue

        try:
            x = int(float(parts[1]))
            y = int(float(parts[2]))
        except ValueError:
            continue
        cities.append(City(parts[0], x, y))

    if len(cities) == 0:
        raise ValueError(f"No coordinates parsed in: {path}")

    return cities


def generate_random_cities(n: int, rng: random.Random, width: int = 500, height: int = 500) -> List[City]:
    """
    Generate random cities for testing.

    Args:
        n: Number of cities to generate
        rng: Random stream used for names and positions
        width: Width of the area
        height: Height of the area

    Returns:
        List of randomly named, randomly placed cities
    """
    return [City.random(rng, width=width, height=height) for _ in range(n)]


def generate_circle_cities(n: int, radius: float = 200, center_x: float = 250, center_y: float = 250) -> List[City]:
    """Cities evenly spaced on a circle, named City_0 .. City_{n-1}."""
    cities = []
    for i in range(n):
        angle = 2 * np.pi * i / n
        x = int(round(center_x + radius * np.cos(angle)))
        y = int(round(center_y + radius * np.sin(angle)))
        cities.append(City(f"City_{i}", x, y))
    return cities
