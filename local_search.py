"""
Local search for chromosomes.
A single exhaustive 2-opt style sweep over all segment reversals.
"""

from tsp_core import Chromosome


def two_opt_sweep(chromosome: Chromosome) -> Chromosome:
    """
    Try every reversal of a segment [i, k] and keep the best one found.

    This is one pass, not iterated until no improvement is left. Each call
    costs O(n^3), so callers should only run it occasionally.

    Returns:
        A chromosome built from the best reversal, or the input chromosome
        when no reversal shortens the tour
    """
    best = chromosome
    best_d = chromosome.get_total_distance()
    cities = chromosome.get_array()
    n = len(cities)

    for i in range(n - 1):
        for k in range(i + 1, n):
            candidate = cities[:i] + cities[i:k + 1][::-1] + cities[k + 1:]
            new = Chromosome(candidate)
            d = new.get_total_distance()

            if d < best_d:
                best = new
                best_d = d

    return best
