"""
observations/visualize.py

Watch the swarm converge.

A falling line is the whole story of a run:
how fast the best guess improved, and where it stalled.
"""

from __future__ import annotations
from pathlib import Path
from typing import Sequence, TYPE_CHECKING, Union
import numpy as np

if TYPE_CHECKING:
    from particle_swarm.services.runner import IterationRecord


class ConvergencePlotter:
    """
    Plot of global best fitness per iteration.

    Uses a log scale when every value is positive, since Rosenbrock
    fitness typically falls over many orders of magnitude.
    """

    def __init__(
        self,
        history: Sequence[IterationRecord],
        figsize: tuple = (10, 6),
        title: str = "Particle swarm on Rosenbrock"
    ):
        self.history = list(history)
        self.figsize = figsize
        self.title = title

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None

    def _setup_plot(self):
        """Initialize matplotlib figure."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)

    @property
    def iterations(self) -> np.ndarray:
        return np.array([r.iteration for r in self.history])

    @property
    def fitnesses(self) -> np.ndarray:
        return np.array([r.best_fitness for r in self.history], dtype=np.float64)

    def render(self):
        """Draw the convergence curve. Returns the matplotlib axes."""
        if self._plt is None:
            self._setup_plot()

        self._ax.clear()
        fitnesses = self.fitnesses

        self._ax.plot(self.iterations, fitnesses, color='#2f9599', linewidth=1.5)
        if len(fitnesses) and np.all(fitnesses > 0):
            self._ax.set_yscale('log')

        self._ax.set_xlabel('Iteration')
        self._ax.set_ylabel('Global best fitness')
        self._ax.set_title(self.title)
        self._ax.grid(True, alpha=0.3)

        return self._ax

    def save(self, path: Union[str, Path], dpi: int = 100) -> Path:
        """Render and write the figure to disk."""
        self.render()
        path = Path(path)
        self._fig.savefig(path, dpi=dpi)
        return path

    def close(self) -> None:
        if self._plt is not None:
            self._plt.close(self._fig)
            self._plt = None
            self._fig = None
            self._ax = None
