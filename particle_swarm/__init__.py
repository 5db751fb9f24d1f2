"""
Particle Swarm: minimizing the Rosenbrock function with a particle swarm.

A small population of candidate solutions, each pulled toward its own best
memory and toward the best the swarm has seen.
"""

__version__ = "0.1.0"
