"""
particle_swarm/services/recorder.py

CSV persistence for run results.

One `iteration,fitness` row per iteration, no header. The file is opened
in append mode on every write, so rows from earlier runs are kept unless
the file is reset first.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from .runner import IterationRecord

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "fitness.csv"


class CsvFitnessRecorder:
    """
    Observer that appends each IterationRecord to a CSV file.

    Write failures (OSError) are not caught: they abort the run.
    """

    def __init__(self, path: str | Path = DEFAULT_OUTPUT):
        self.path = Path(path)
        self.rows_written = 0

    def reset(self) -> None:
        """Remove the output file if it exists."""
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Removed existing results file {self.path}")

    def __call__(self, record: IterationRecord) -> None:
        with open(self.path, "a", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(record.to_row())
        self.rows_written += 1


def load_fitness_csv(path: str | Path) -> list[IterationRecord]:
    """Read `iteration,fitness` rows back into records."""
    records = []
    with open(path, newline="") as f:
        for row in csv.reader(f):
            if not row:
                continue
            records.append(IterationRecord(iteration=int(row[0]), best_fitness=float(row[1])))
    return records
