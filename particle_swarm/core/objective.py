"""
core/objective.py

The landscape the swarm searches.

Rosenbrock's banana valley: easy to find, hard to descend.
Global minimum 0 at (1, 1).
"""

from __future__ import annotations
from typing import Tuple

# Location and value of the global minimum
ROSENBROCK_MINIMUM: Tuple[float, float] = (1.0, 1.0)
ROSENBROCK_MINIMUM_VALUE: float = 0.0


def rosenbrock(x: float, y: float) -> float:
    """
    Evaluate (1 - x)^2 + 100 * (y - x^2)^2.

    Pure, never negative for finite input.
    """
    return float((1.0 - x) ** 2 + 100.0 * (y - x ** 2) ** 2)
