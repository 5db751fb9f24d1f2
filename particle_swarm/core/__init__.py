"""
Core components of the particle swarm.

- objective: The Rosenbrock landscape
- particle: A single moving candidate
- swarm: The population and its shared memory
"""

from .objective import rosenbrock, ROSENBROCK_MINIMUM, ROSENBROCK_MINIMUM_VALUE
from .particle import Particle
from .swarm import Swarm, SwarmConfig, ConfigurationError

__all__ = [
    "rosenbrock",
    "ROSENBROCK_MINIMUM",
    "ROSENBROCK_MINIMUM_VALUE",
    "Particle",
    "Swarm",
    "SwarmConfig",
    "ConfigurationError",
]
