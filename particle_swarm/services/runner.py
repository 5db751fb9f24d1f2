"""
particle_swarm/services/runner.py

Run loop for a particle swarm.

The runner drives a swarm for a fixed number of iterations:
1. Updates every particle (Swarm.step)
2. Emits an (iteration, best_fitness) record to each observer
3. Returns the final global best

There is no early stopping. A run always executes every iteration
unless an observer fails, in which case the run is aborted.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import numpy as np

from particle_swarm.core.swarm import ConfigurationError, Swarm

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Lifecycle of a run."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class IterationRecord:
    """Best fitness after one iteration."""
    iteration: int
    best_fitness: float

    def to_row(self) -> tuple[int, float]:
        return (self.iteration, self.best_fitness)


@dataclass
class RunResult:
    """Outcome of a completed run."""
    best_position: np.ndarray
    best_fitness: float
    iterations: int
    history: list[IterationRecord] = field(default_factory=list)
    elapsed_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "best_position": self.best_position.tolist(),
            "best_fitness": self.best_fitness,
            "iterations": self.iterations,
            "history": [r.to_row() for r in self.history],
            "elapsed_time": self.elapsed_time,
        }


Observer = Callable[[IterationRecord], None]


@dataclass
class RunnerConfig:
    """Configuration for the run loop."""
    iterations: int = 1000  # Fixed iteration count
    progress_interval: int = 100  # Iterations between progress log lines

    def validate(self) -> None:
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ConfigurationError(f"iterations must be an integer, got {self.iterations!r}")
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be non-negative, got {self.iterations}")
        if isinstance(self.progress_interval, bool) or not isinstance(self.progress_interval, int):
            raise ConfigurationError(
                f"progress_interval must be an integer, got {self.progress_interval!r}"
            )
        if self.progress_interval < 1:
            raise ConfigurationError(
                f"progress_interval must be at least 1, got {self.progress_interval}"
            )


class SwarmRunner:
    """
    Drives a swarm from NOT_STARTED through RUNNING to COMPLETED.

    A runner is single-use: it owns one run of one swarm.
    """

    def __init__(
        self,
        swarm: Swarm,
        config: RunnerConfig | None = None,
        observers: list[Observer] | None = None,
    ):
        self.swarm = swarm
        self.config = config or RunnerConfig()
        self.config.validate()
        self.observers: list[Observer] = list(observers or [])

        self.state = RunState.NOT_STARTED
        self.history: list[IterationRecord] = []
        self.start_time: float | None = None

    def add_observer(self, observer: Observer) -> None:
        """Register a callable that receives every IterationRecord."""
        self.observers.append(observer)

    def _emit(self, record: IterationRecord) -> None:
        for observer in self.observers:
            observer(record)

    def run(self) -> RunResult:
        """
        Execute every iteration and return the final global best.

        Raises RuntimeError if the runner has already been used. Any
        exception from an observer aborts the run and is re-raised.
        """
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"Runner cannot start from state {self.state.value}")

        self.state = RunState.RUNNING
        self.start_time = time.time()
        logger.info(
            f"Starting run: {len(self.swarm)} particles, "
            f"{self.config.iterations} iterations"
        )

        iteration = 0
        try:
            for iteration in range(self.config.iterations):
                best_fitness = self.swarm.step()
                record = IterationRecord(iteration=iteration, best_fitness=best_fitness)
                self.history.append(record)

                if iteration % self.config.progress_interval == 0:
                    logger.info(f"Iteration {iteration}: gbest={best_fitness:.6g}")

                self._emit(record)
        except Exception as e:
            self.state = RunState.FAILED
            logger.error(f"Run aborted at iteration {iteration}: {e}")
            raise

        self.state = RunState.COMPLETED
        elapsed = time.time() - self.start_time
        logger.info(
            f"Run complete in {elapsed:.2f}s: gbest={self.swarm.global_best_fitness:.6g} "
            f"at {self.swarm.global_best_position.tolist()}"
        )

        return RunResult(
            best_position=self.swarm.global_best_position.copy(),
            best_fitness=self.swarm.global_best_fitness,
            iterations=self.config.iterations,
            history=list(self.history),
            elapsed_time=elapsed,
        )
