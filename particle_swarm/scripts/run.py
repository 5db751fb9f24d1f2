#!/usr/bin/env python3
"""
Particle Swarm Run CLI

Minimize the Rosenbrock function with a particle swarm, appending
`iteration,fitness` rows to a CSV file as the run progresses.

Usage:
    # Reference run: 15 particles, 1000 iterations
    python -m particle_swarm.scripts.run

    # Reproducible run with a fresh output file
    python -m particle_swarm.scripts.run --seed 42 --fresh --output run.csv

    # Custom configuration file plus a convergence plot
    python -m particle_swarm.scripts.run --config my_run.yaml --plot convergence.png
"""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from particle_swarm.core.swarm import ConfigurationError, Swarm, SwarmConfig
from particle_swarm.services.recorder import DEFAULT_OUTPUT, CsvFitnessRecorder
from particle_swarm.services.reporting import (
    ProgressPrinter,
    print_header,
    print_parameters,
    print_result,
)
from particle_swarm.services.runner import RunnerConfig, SwarmRunner

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "configs" / "default.yaml"


def load_config(config_path: str = None) -> dict:
    """Load a run configuration file with `swarm` and `run` sections"""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    unknown = set(config) - {"swarm", "run"}
    if unknown:
        raise ConfigurationError(f"Unknown config sections: {sorted(unknown)}")

    return config


def build_configs(config: dict, args: argparse.Namespace = None):
    """
    Merge file values and command-line overrides.

    Returns (SwarmConfig, RunnerConfig, output_path, plot_path).
    """
    for section in ("swarm", "run"):
        if not isinstance(config.get(section) or {}, dict):
            raise ConfigurationError(f"Section '{section}' must be a mapping")

    swarm_section = dict(config.get("swarm") or {})
    run_section = dict(config.get("run") or {})

    output = run_section.pop("output", DEFAULT_OUTPUT)
    plot = run_section.pop("plot", None)

    if args is not None:
        if args.particles is not None:
            swarm_section["num_particles"] = args.particles
        if args.seed is not None:
            swarm_section["seed"] = args.seed
        if args.independent_draws:
            swarm_section["independent_draws"] = True
        if args.fitness_only_global_best:
            swarm_section["fitness_only_global_best"] = True
        if args.iterations is not None:
            run_section["iterations"] = args.iterations
        if args.output is not None:
            output = args.output
        if args.plot is not None:
            plot = args.plot

    swarm_config = SwarmConfig.from_dict(swarm_section)
    try:
        runner_config = RunnerConfig(**run_section)
    except TypeError as e:
        raise ConfigurationError(f"Invalid run options: {e}") from e

    swarm_config.validate()
    runner_config.validate()

    return swarm_config, runner_config, output, plot


def run(
    swarm_config: SwarmConfig,
    runner_config: RunnerConfig,
    output: str = DEFAULT_OUTPUT,
    plot: str = None,
    fresh: bool = False,
    verbose: bool = True,
):
    """Run one swarm end to end and return its RunResult"""
    if verbose:
        print_header()
        print_parameters(swarm_config, runner_config)

    # Build before touching the output file so bad settings leave it intact
    swarm = Swarm(swarm_config)
    runner = SwarmRunner(swarm, runner_config)

    recorder = CsvFitnessRecorder(output)
    if fresh:
        recorder.reset()

    if verbose:
        runner.add_observer(ProgressPrinter(runner_config.progress_interval))
    runner.add_observer(recorder)

    result = runner.run()
    logger.info(f"Wrote {recorder.rows_written} rows to {recorder.path}")

    if verbose:
        print_result(result)

    if plot:
        from particle_swarm.observations.visualize import ConvergencePlotter

        plotter = ConvergencePlotter(result.history)
        try:
            saved = plotter.save(plot)
            logger.info(f"Convergence plot saved to {saved}")
        finally:
            plotter.close()

    return result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Minimize the Rosenbrock function with particle swarm optimization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML configuration file (default: packaged default.yaml)",
    )
    parser.add_argument(
        "--particles",
        type=int,
        default=None,
        help="Override number of particles",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Override number of iterations",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--independent-draws",
        action="store_true",
        help="Draw r1, r2 separately for each dimension",
    )
    parser.add_argument(
        "--fitness-only-global-best",
        action="store_true",
        help="Update the global best from the new fitness only (classic rule)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="CSV file that iteration results are appended to",
    )
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Remove the output file before the run",
    )
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Save a convergence plot to this path (requires matplotlib)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors; skip console reports",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = load_config(args.config)
        swarm_config, runner_config, output, plot = build_configs(config, args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    run(
        swarm_config,
        runner_config,
        output=output,
        plot=plot,
        fresh=args.fresh,
        verbose=not args.quiet,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
