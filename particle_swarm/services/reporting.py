"""
particle_swarm/services/reporting.py

Console reports for a run: parameters up front, progress along the way,
the best solution at the end.
"""

from __future__ import annotations

from particle_swarm.core.swarm import SwarmConfig

from .runner import IterationRecord, RunnerConfig, RunResult


def print_header() -> None:
    print("Rosenbrock using Particle Swarm Optimization")
    print("=" * 43)
    print()


def print_parameters(swarm_config: SwarmConfig, runner_config: RunnerConfig) -> None:
    """Print the configuration once, before the run."""
    print("Parameters:")
    print(f"  Number of particles: {swarm_config.num_particles}")
    print(f"  Number of iterations: {runner_config.iterations}")
    print(f"  Inertia weight: {swarm_config.inertia}")
    print(f"  Cognitive weight: {swarm_config.cognitive}")
    print(f"  Social weight: {swarm_config.social}")
    print(f"  X range: [{swarm_config.x_bounds[0]}, {swarm_config.x_bounds[1]}]")
    print(f"  Y range: [{swarm_config.y_bounds[0]}, {swarm_config.y_bounds[1]}]")
    print(
        f"  Velocity range: [{swarm_config.velocity_bounds[0]}, "
        f"{swarm_config.velocity_bounds[1]}]"
    )
    if swarm_config.seed is not None:
        print(f"  Seed: {swarm_config.seed}")
    print()


class ProgressPrinter:
    """Observer that prints the global best every `interval` iterations (0, 100, 200, ...)."""

    def __init__(self, interval: int = 100):
        self.interval = interval

    def __call__(self, record: IterationRecord) -> None:
        if record.iteration % self.interval == 0:
            print(f"Iteration: {record.iteration}, gbest: {record.best_fitness}")


def print_result(result: RunResult) -> None:
    x, y = result.best_position
    print(
        f"Best solution found at: x = {x}, y = {y}, "
        f"fitness = {result.best_fitness}"
    )
