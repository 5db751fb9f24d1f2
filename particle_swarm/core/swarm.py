"""
core/swarm.py

Many guesses, one memory.

Each particle is pulled three ways: by its own momentum,
by the best place it remembers, and by the best place anyone has found.

Inspired by:
- Kennedy & Eberhart's particle swarm (1995)
- Bird flocking and fish schooling
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple
import math
import numpy as np

from .particle import Particle


class ConfigurationError(ValueError):
    """Raised when a swarm or run is configured in a way that cannot run."""


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class SwarmConfig:
    """Configuration for a particle swarm."""
    num_particles: int = 15                                # Fixed population size
    inertia: float = 0.9                                   # w: carry-over of previous velocity
    cognitive: float = 1.0                                 # c1: pull toward personal best
    social: float = 1.0                                    # c2: pull toward global best
    x_bounds: Tuple[float, float] = (-5.0, 5.0)            # Initial x range
    y_bounds: Tuple[float, float] = (-5.0, 5.0)            # Initial y range
    velocity_bounds: Tuple[float, float] = (-5.0, 5.0)     # Initial velocity range
    seed: Optional[int] = None                             # None = fresh entropy
    independent_draws: bool = False                        # Draw r1, r2 per dimension
    fitness_only_global_best: bool = False                 # Compare new fitness, not pbest

    def __post_init__(self):
        for name in ("x_bounds", "y_bounds", "velocity_bounds"):
            bounds = getattr(self, name)
            if isinstance(bounds, (list, tuple)):
                setattr(self, name, tuple(bounds))

    def validate(self) -> None:
        """Raise ConfigurationError if the swarm cannot be built."""
        if not _is_int(self.num_particles):
            raise ConfigurationError(
                f"num_particles must be an integer, got {self.num_particles!r}"
            )
        if self.num_particles < 1:
            raise ConfigurationError(
                f"num_particles must be at least 1, got {self.num_particles}"
            )

        for name in ("inertia", "cognitive", "social"):
            value = getattr(self, name)
            if not _is_number(value):
                raise ConfigurationError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

        for name in ("x_bounds", "y_bounds", "velocity_bounds"):
            bounds = getattr(self, name)
            if not isinstance(bounds, tuple) or len(bounds) != 2:
                raise ConfigurationError(f"{name} must be a (min, max) pair, got {bounds!r}")
            low, high = bounds
            if not (_is_number(low) and _is_number(high)):
                raise ConfigurationError(f"{name} must hold numbers, got {bounds!r}")
            if not (math.isfinite(low) and math.isfinite(high)):
                raise ConfigurationError(f"{name} must be finite, got {bounds}")
            if not low < high:
                raise ConfigurationError(f"{name} must satisfy min < max, got {bounds}")

        if self.seed is not None and not (_is_int(self.seed) and self.seed >= 0):
            raise ConfigurationError(
                f"seed must be a non-negative integer or None, got {self.seed!r}"
            )

        for name in ("independent_draws", "fitness_only_global_best"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(
                    f"{name} must be true or false, got {getattr(self, name)!r}"
                )

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        for name in ("x_bounds", "y_bounds", "velocity_bounds"):
            d[name] = list(d[name])
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SwarmConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown swarm options: {sorted(unknown)}")
        return cls(**data)


class Swarm:
    """
    A fixed population of particles plus the best solution any of them found.

    Particles are updated one at a time, in list order. A global best found
    by one particle is visible to the particles processed after it in the
    same iteration.

    The global best is seeded from the first particle, not the population
    minimum. By default each update compares the particle's personal best
    with the global best, so every later particle corrects the seed as soon
    as it is processed. With `fitness_only_global_best` only the new fitness
    is compared: an initial personal best better than the seed is never
    promoted, and trajectories follow the classic fitness-only rule instead.
    """

    def __init__(
        self,
        config: Optional[SwarmConfig] = None,
        rng: Any = None,
        particles: Optional[Sequence[Particle]] = None,
    ):
        self.config = config or SwarmConfig()
        if particles is not None:
            if not particles:
                raise ConfigurationError("A swarm needs at least one particle")
            self.config = replace(self.config, num_particles=len(particles))
        self.config.validate()

        # Any source with random(size=None) and uniform(low, high) will do
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

        if particles is not None:
            self.particles: List[Particle] = list(particles)
        else:
            self.particles = [
                self._spawn_particle() for _ in range(self.config.num_particles)
            ]
        self.iteration = 0
        self._seed_global_best()

    @classmethod
    def from_particles(
        cls,
        particles: Sequence[Particle],
        config: Optional[SwarmConfig] = None,
        rng: Any = None,
    ) -> Swarm:
        """Build a swarm around an explicit population."""
        return cls(config=config, rng=rng, particles=particles)

    def _spawn_particle(self) -> Particle:
        """Sample a particle uniformly within the configured bounds."""
        x = self.rng.uniform(*self.config.x_bounds)
        y = self.rng.uniform(*self.config.y_bounds)
        vx = self.rng.uniform(*self.config.velocity_bounds)
        vy = self.rng.uniform(*self.config.velocity_bounds)
        return Particle(position=np.array([x, y]), velocity=np.array([vx, vy]))

    def _seed_global_best(self) -> None:
        first = self.particles[0]
        self.global_best_position = first.personal_best_position.copy()
        self.global_best_fitness = first.personal_best_fitness

    # ==================== Update ====================

    def _draw_coefficients(self) -> Tuple[Any, Any]:
        """r1, r2 in [0, 1): scalars shared by both dimensions, or one per dimension."""
        if self.config.independent_draws:
            return self.rng.random(2), self.rng.random(2)
        return self.rng.random(), self.rng.random()

    def update_particle(self, particle: Particle) -> float:
        """
        Move one particle and fold its result into the global best.

        v' = w * v + c1 * r1 * (pbest - pos) + c2 * r2 * (gbest - pos)
        pos' = pos + v'

        Returns the particle's fitness at its new position.
        """
        r1, r2 = self._draw_coefficients()

        cognitive_velocity = (
            self.config.cognitive * r1 * (particle.personal_best_position - particle.position)
        )
        social_velocity = (
            self.config.social * r2 * (self.global_best_position - particle.position)
        )
        particle.velocity = (
            self.config.inertia * particle.velocity + cognitive_velocity + social_velocity
        )

        fitness = particle.move()

        if self.config.fitness_only_global_best:
            if fitness < self.global_best_fitness:
                self.global_best_position = particle.position.copy()
                self.global_best_fitness = fitness
        # pbest <= fitness here, so this also catches a new best at the current position
        elif particle.personal_best_fitness < self.global_best_fitness:
            self.global_best_position = particle.personal_best_position.copy()
            self.global_best_fitness = particle.personal_best_fitness

        return fitness

    def step(self) -> float:
        """
        One iteration: update every particle in order.

        Returns the global best fitness after the iteration.
        """
        for particle in self.particles:
            self.update_particle(particle)

        self.iteration += 1
        return self.global_best_fitness

    # ==================== Observation ====================

    def get_positions(self) -> np.ndarray:
        """All particle positions as (N, 2) array."""
        return np.array([p.position for p in self.particles])

    def get_velocities(self) -> np.ndarray:
        """All particle velocities as (N, 2) array."""
        return np.array([p.velocity for p in self.particles])

    def get_personal_best_fitnesses(self) -> np.ndarray:
        return np.array([p.personal_best_fitness for p in self.particles])

    def get_statistics(self) -> Dict[str, Any]:
        """Summary of the swarm's current state."""
        fitnesses = np.array([p.fitness for p in self.particles])
        positions = self.get_positions()
        return {
            'iteration': self.iteration,
            'num_particles': len(self.particles),
            'global_best_fitness': float(self.global_best_fitness),
            'global_best_position': self.global_best_position.tolist(),
            'mean_fitness': float(fitnesses.mean()),
            'min_fitness': float(fitnesses.min()),
            'spread': positions.std(axis=0).tolist(),
        }

    def __len__(self) -> int:
        return len(self.particles)

    def __repr__(self) -> str:
        return (
            f"Swarm(particles={len(self.particles)}, "
            f"iteration={self.iteration}, "
            f"gbest={self.global_best_fitness:.4g})"
        )
