"""
TSP Solver - Main Application
Run the genetic algorithm, a crossover/mutation heat map sweep, or an
averaged series of runs from the command line.
"""

import argparse
import os
import random

import matplotlib

matplotlib.use("Agg")

from benchmark import AveragingTool, HeatMap
from data_generator import generate_circle_cities, generate_random_cities, load_tsp_file
from genetic_algorithm import CrossoverType, MutationType
from preset import DEFAULT_CITIES, get_default_ga
from visualization import TSPVisualizer


def build_cities(args, rng):
    if args.dataset:
        print(f"\nLoading cities from {args.dataset}...")
        return load_tsp_file(args.dataset)

    print(f"\nGenerating {args.cities} cities in {args.pattern} pattern...")
    if args.pattern == 'circle':
        return generate_circle_cities(args.cities)
    return generate_random_cities(args.cities, rng)


def configure(args):
    seed = args.seed
    if seed is None:
        seed = random.SystemRandom().randrange(2 ** 63)
        print(f"Seed: {seed}")

    # Cities come from their own stream so the GA stream is left untouched.
    cities = build_cities(args, random.Random(seed))
    ga = get_default_ga(cities=cities, seed=seed, population_size=args.population)
    ga.max_generations = args.generations
    ga.k = args.k
    ga.elitism_value = args.elitism
    ga.crossover_rate = args.crossover_rate
    ga.mutation_rate = args.mutation_rate
    ga.local_search_rate = args.local_search_rate
    ga.force_uniqueness = args.unique
    ga.crossover_type = CrossoverType(args.crossover)
    ga.mutation_type = MutationType(args.mutation)
    return ga


def _path(args, name):
    if args.no_viz:
        return None
    os.makedirs(args.save_dir, exist_ok=True)
    return os.path.join(args.save_dir, name)


def run_single(ga, args):
    visualizer = None if args.no_viz else TSPVisualizer()

    ga.print_properties()
    print("\nRunning Genetic Algorithm...")

    if args.debug:
        def on_new_best(chromosome):
            print(f"New best: {chromosome.get_total_distance():.2f} {chromosome}")

        ga.run_with_debug_mode(on_new_best)
    else:
        ga.run(verbose=True)

    ga.print_results()

    if visualizer:
        ga.plot_best_tour(visualizer, save_path=_path(args, "best_tour.png"))
        ga.plot_histories(visualizer, save_path=_path(args, "convergence.png"))


def run_heat_map(ga, args):
    ga.print_properties()
    print("-------------Heat Map Information---------------")
    heat_map = HeatMap(ga, number_of_runs=args.runs, scale=args.scale)
    heat_map.set_crossover_range(0.90, 1.00, 0.02)
    heat_map.set_mutation_range(0.00, 0.10, 0.02)
    heat_map.run(estimate=args.estimate)
    heat_map.print_results()
    print("-------------------Finished--------------------")

    if not args.no_viz:
        heat_map.save_csv(_path(args, "heat_map.csv"))
        heat_map.plot(save_path=_path(args, "heat_map.png"))


def run_averaging(ga, args):
    ga.print_properties()
    tool = AveragingTool(ga, args.average)
    tool.run()
    if not args.no_viz:
        tool.display(save_path=_path(args, "averaged_convergence.png"))


def main():
    """Main entry point for the genetic algorithm application."""
    parser = argparse.ArgumentParser(
        description="Evolve Traveling Salesman tours with a genetic algorithm",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run on 30 random cities with a fixed seed
  python main.py --cities 30 --seed 42

  # Run on a TSPLIB file with two-point crossover
  python main.py --dataset tsp_data/att48.tsp --crossover two_point

  # Sweep crossover and mutation rates
  python main.py --heat-map --generations 100 --population 50

  # Average 10 runs
  python main.py --average 10 --no-viz
        """
    )

    parser.add_argument('--dataset', type=str, help='TSPLIB file to load cities from')
    parser.add_argument('--cities', type=int, default=DEFAULT_CITIES,
                        help=f'Number of cities to generate (default: {DEFAULT_CITIES})')
    parser.add_argument('--pattern', type=str, choices=['random', 'circle'], default='random',
                        help='City placement pattern (default: random)')
    parser.add_argument('--seed', type=int, help='Seed for the random stream')

    parser.add_argument('--population', type=int, default=500, help='Population size (default: 500)')
    parser.add_argument('--generations', type=int, default=500, help='Generations to run (default: 500)')
    parser.add_argument('--k', type=int, default=3, help='Tournament size (default: 3)')
    parser.add_argument('--elitism', type=int, default=1, help='Elite chromosomes kept (default: 1)')
    parser.add_argument('--crossover', type=str, default='uniform_order',
                        choices=[t.value for t in CrossoverType], help='Crossover operator')
    parser.add_argument('--mutation', type=str, default='insertion',
                        choices=[t.value for t in MutationType], help='Mutation operator')
    parser.add_argument('--crossover-rate', type=float, default=0.90)
    parser.add_argument('--mutation-rate', type=float, default=0.04)
    parser.add_argument('--local-search-rate', type=float, default=0.0)
    parser.add_argument('--unique', action='store_true', help='Force unique chromosomes')

    parser.add_argument('--debug', action='store_true', help='Print every new best tour')
    parser.add_argument('--heat-map', action='store_true', help='Sweep crossover and mutation rates')
    parser.add_argument('--runs', type=int, default=5, help='Runs per heat map cell (default: 5)')
    parser.add_argument('--scale', type=int, default=4, help='Heat map cell scale, 0-20 (default: 4)')
    parser.add_argument('--estimate', action='store_true', help='Estimate heat map time first')
    parser.add_argument('--average', type=int, help='Average this many runs')

    parser.add_argument('--save-dir', type=str, default='results', help='Where figures are written')
    parser.add_argument('--no-viz', action='store_true', help='Disable figures')

    args = parser.parse_args()

    ga = configure(args)

    if args.heat_map:
        run_heat_map(ga, args)
    elif args.average:
        run_averaging(ga, args)
    else:
        run_single(ga, args)


if __name__ == "__main__":
    main()
