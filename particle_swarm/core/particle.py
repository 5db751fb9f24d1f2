"""
core/particle.py

A particle is a guess that moves.

It remembers where it is, where it is heading,
and the best place it has ever been.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import numpy as np

from .objective import rosenbrock


@dataclass
class Particle:
    """
    One candidate solution in the 2D search space.

    The personal best only ever improves; the current position may be worse.
    """
    position: np.ndarray                       # Where it is now (x, y)
    velocity: np.ndarray                       # Step applied each iteration
    personal_best_position: Optional[np.ndarray] = None
    personal_best_fitness: Optional[float] = None
    fitness: float = field(init=False)         # Fitness at current position

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=np.float64).copy()
        self.velocity = np.asarray(self.velocity, dtype=np.float64).copy()
        self.fitness = self.evaluate()

        # A new particle's best memory is where it starts
        if self.personal_best_position is None:
            self.personal_best_position = self.position.copy()
        else:
            self.personal_best_position = np.asarray(
                self.personal_best_position, dtype=np.float64
            ).copy()
        if self.personal_best_fitness is None:
            self.personal_best_fitness = rosenbrock(*self.personal_best_position)

    def evaluate(self) -> float:
        """Fitness at the current position."""
        return rosenbrock(self.position[0], self.position[1])

    def move(self) -> float:
        """
        Apply the current velocity and re-evaluate.

        No clamping: particles may leave the initial bounds.
        Returns the fitness at the new position.
        """
        self.position = self.position + self.velocity
        self.fitness = self.evaluate()

        if self.fitness < self.personal_best_fitness:
            self.personal_best_position = self.position.copy()
            self.personal_best_fitness = self.fitness

        return self.fitness

    def __repr__(self) -> str:
        return (
            f"Particle(pos=({self.position[0]:.3f}, {self.position[1]:.3f}), "
            f"fitness={self.fitness:.4g}, "
            f"pbest={self.personal_best_fitness:.4g})"
        )
