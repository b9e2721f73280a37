"""
TSP Solver - Visualization Module
Static figures of tours, per-generation convergence and parameter-sweep
heat maps. Figures are returned to the caller and optionally saved.
"""

from typing import Dict, Sequence

import matplotlib.pyplot as plt
import numpy as np

from tsp_core import Chromosome


class TSPVisualizer:
    """Visualize tours and genetic algorithm progress."""

    def __init__(self, figsize=(12, 8)):
        self.figsize = figsize

    def plot_tour(
        self,
        tour: Chromosome,
        title: str = "TSP Tour",
        show_arrows: bool = True,
        save_path: str = None
    ):
        """
        Plot a single tour.

        Args:
            tour: The chromosome to draw
            title: Plot title
            show_arrows: Show direction arrows on edges
            save_path: Optional path to save the figure

        Returns:
            The matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.figsize)

        cities = tour.get_array()
        if len(cities) == 0:
            ax.text(0.5, 0.5, 'No cities in tour',
                    ha='center', va='center', fontsize=16)
            return fig

        x_coords = [city.x for city in cities]
        y_coords = [city.y for city in cities]

        # Close the loop
        x_coords.append(cities[0].x)
        y_coords.append(cities[0].y)

        ax.scatter(x_coords[:-1], y_coords[:-1],
                   c='darkgray', s=80, zorder=3, edgecolors='dimgray', linewidth=1.5)
        ax.plot(x_coords, y_coords,
                '-', color='dimgray', linewidth=2, alpha=0.8, zorder=1)

        for city in cities:
            ax.annotate(city.name,
                        (city.x, city.y),
                        xytext=(0, 6),
                        textcoords='offset points',
                        fontsize=8,
                        ha='center',
                        color='gray')

        if show_arrows and len(cities) > 1:
            for i in range(len(cities)):
                start = cities[i]
                end = cities[(i + 1) % len(cities)]

                mid_x = (start.x + end.x) / 2
                mid_y = (start.y + end.y) / 2
                dx = end.x - start.x
                dy = end.y - start.y

                ax.annotate('',
                            xy=(mid_x + dx * 0.1, mid_y + dy * 0.1),
                            xytext=(mid_x - dx * 0.1, mid_y - dy * 0.1),
                            arrowprops=dict(arrowstyle='->',
                                            color='dimgray',
                                            lw=1.5,
                                            alpha=0.7))

        # Highlight start city
        ax.scatter([cities[0].x], [cities[0].y],
                   c='green', s=200, zorder=4,
                   marker='*', edgecolors='darkgreen', linewidth=1.5)

        distance = tour.get_total_distance()
        ax.set_title(f"{title}\nTotal Distance: {distance:.2f}",
                     fontsize=14, weight='bold')
        ax.set_xlabel('X Coordinate', fontsize=12)
        ax.set_ylabel('Y Coordinate', fontsize=12)
        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')
        # Screen coordinates: y grows downwards.
        ax.invert_yaxis()

        fig.tight_layout()
        self._save(fig, save_path, "Tour")
        return fig

    def plot_histories(
        self,
        histories: Dict[str, Sequence[float]],
        title: str = "Genetic Algorithm Convergence",
        xlabel: str = "Generation",
        ylabel: str = "Distance",
        save_path: str = None
    ):
        """
        Plot several per-generation lines on one chart.

        Args:
            histories: Dict mapping legend entries to per-generation values;
                every line must have the same number of values
            title: Plot title
            xlabel: X-axis label
            ylabel: Y-axis label
            save_path: Optional path to save the figure
        """
        lengths = {len(values) for values in histories.values()}
        if len(lengths) > 1:
            raise ValueError("All lines must contain the same number of values.")

        fig, ax = plt.subplots(figsize=(10, 6))

        colors = ['b', 'r', 'g', 'orange', 'purple']

        for i, (name, history) in enumerate(histories.items()):
            color = colors[i % len(colors)]
            generations = range(1, len(history) + 1)
            label = f"{name} (Final: {history[-1]:.2f})" if len(history) else name
            ax.plot(generations, history, linewidth=2, label=label, color=color)

        ax.set_xlabel(xlabel, fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.set_title(title, fontsize=14, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper right', fontsize=10)

        fig.tight_layout()
        self._save(fig, save_path, "Convergence plot")
        return fig

    def plot_heat_map(
        self,
        values,
        scale: int = 10,
        crossover_rates: Sequence[float] = None,
        mutation_rates: Sequence[float] = None,
        title: str = "Heat Map",
        save_path: str = None
    ):
        """
        Draw a grid of sweep results in grayscale.

        Rows are mutation rates, columns are crossover rates. The lowest
        value is drawn black and the highest white.

        Args:
            values: 2D array of results
            scale: Size of one cell, between 0 and 20
            crossover_rates: Optional column labels
            mutation_rates: Optional row labels
            title: Plot title
            save_path: Optional path to save the figure
        """
        if scale < 0 or scale > 20:
            raise ValueError("Scale must be between 0 and 20, inclusive.")

        grid = np.asarray(values, dtype=float)
        if grid.ndim != 2 or grid.size == 0:
            raise ValueError("Heat map values must be a non-empty 2D grid.")

        rows, columns = grid.shape
        width = max(columns * scale / 10.0, 2.0)
        height = max(rows * scale / 10.0, 2.0)
        fig, ax = plt.subplots(figsize=(width + 1.5, height + 1.0))

        image = ax.imshow(grid, cmap='gray', vmin=grid.min(), vmax=grid.max(),
                          interpolation='nearest')
        fig.colorbar(image, ax=ax)

        if crossover_rates is not None:
            ax.set_xticks(range(columns))
            ax.set_xticklabels([f"{c:.2f}" for c in crossover_rates], rotation=45)
        if mutation_rates is not None:
            ax.set_yticks(range(rows))
            ax.set_yticklabels([f"{m:.2f}" for m in mutation_rates])

        ax.set_xlabel('Crossover Rate', fontsize=12)
        ax.set_ylabel('Mutation Rate', fontsize=12)
        ax.set_title(title, fontsize=14, weight='bold')

        fig.tight_layout()
        self._save(fig, save_path, "Heat map")
        return fig

    @staticmethod
    def _save(fig, save_path, what):
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"{what} saved to {save_path}")
