"""
Run services for the particle swarm.

Components:
- runner: Fixed-length run loop emitting one record per iteration
- recorder: CSV result logging
- reporting: Console reports
"""

from .runner import (
    IterationRecord,
    RunnerConfig,
    RunResult,
    RunState,
    SwarmRunner,
)
from .recorder import CsvFitnessRecorder, load_fitness_csv
from .reporting import ProgressPrinter, print_header, print_parameters, print_result

__all__ = [
    "IterationRecord",
    "RunnerConfig",
    "RunResult",
    "RunState",
    "SwarmRunner",
    "CsvFitnessRecorder",
    "load_fitness_csv",
    "ProgressPrinter",
    "print_header",
    "print_parameters",
    "print_result",
]
