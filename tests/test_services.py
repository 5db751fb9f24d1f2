"""
Tests for particle_swarm/services/

Tests runner, recorder, and reporting components.
"""

import numpy as np
import pytest

from particle_swarm.core.swarm import Swarm, SwarmConfig, ConfigurationError
from particle_swarm.services.runner import (
    IterationRecord,
    RunnerConfig,
    RunResult,
    RunState,
    SwarmRunner,
)
from particle_swarm.services.recorder import CsvFitnessRecorder, load_fitness_csv
from particle_swarm.services.reporting import (
    ProgressPrinter,
    print_parameters,
    print_result,
)


# ==================== Runner Tests ====================

class TestRunnerConfig:
    """Tests for RunnerConfig."""

    def test_default_config(self):
        config = RunnerConfig()
        assert config.iterations == 1000
        assert config.progress_interval == 100

    def test_negative_iterations_rejected(self):
        with pytest.raises(ConfigurationError):
            RunnerConfig(iterations=-1).validate()

    def test_zero_progress_interval_rejected(self):
        with pytest.raises(ConfigurationError):
            RunnerConfig(progress_interval=0).validate()

    @pytest.mark.parametrize("options", [
        {"progress_interval": "x"},
        {"progress_interval": 2.5},
        {"iterations": "10"},
        {"iterations": True},
    ])
    def test_wrong_types_rejected(self, options):
        with pytest.raises(ConfigurationError):
            RunnerConfig(**options).validate()


class TestSwarmRunner:
    """Tests for the run loop."""

    def test_initial_state(self):
        runner = SwarmRunner(Swarm(SwarmConfig(seed=42)))
        assert runner.state is RunState.NOT_STARTED
        assert runner.history == []

    def test_run_completes_fixed_iterations(self):
        swarm = Swarm(SwarmConfig(seed=42))
        runner = SwarmRunner(swarm, RunnerConfig(iterations=50))

        result = runner.run()

        assert runner.state is RunState.COMPLETED
        assert isinstance(result, RunResult)
        assert result.iterations == 50
        assert len(result.history) == 50
        assert swarm.iteration == 50

    def test_records_are_zero_indexed(self):
        runner = SwarmRunner(Swarm(SwarmConfig(seed=42)), RunnerConfig(iterations=5))
        result = runner.run()
        assert [r.iteration for r in result.history] == [0, 1, 2, 3, 4]

    def test_result_matches_swarm_global_best(self):
        swarm = Swarm(SwarmConfig(seed=42))
        result = SwarmRunner(swarm, RunnerConfig(iterations=20)).run()

        assert result.best_fitness == swarm.global_best_fitness
        assert np.array_equal(result.best_position, swarm.global_best_position)
        assert result.history[-1].best_fitness == result.best_fitness

    def test_emitted_fitness_non_increasing(self):
        emitted = []
        runner = SwarmRunner(
            Swarm(SwarmConfig(seed=3)),
            RunnerConfig(iterations=300),
            observers=[emitted.append],
        )
        runner.run()

        fitnesses = [r.best_fitness for r in emitted]
        assert len(fitnesses) == 300
        assert all(b <= a for a, b in zip(fitnesses, fitnesses[1:]))

    def test_observers_called_in_order(self):
        calls = []
        runner = SwarmRunner(Swarm(SwarmConfig(seed=42)), RunnerConfig(iterations=2))
        runner.add_observer(lambda r: calls.append(("first", r.iteration)))
        runner.add_observer(lambda r: calls.append(("second", r.iteration)))

        runner.run()

        assert calls == [("first", 0), ("second", 0), ("first", 1), ("second", 1)]

    def test_zero_iterations_returns_seed(self):
        swarm = Swarm(SwarmConfig(seed=42))
        result = SwarmRunner(swarm, RunnerConfig(iterations=0)).run()

        assert result.history == []
        assert result.best_fitness == swarm.particles[0].personal_best_fitness

    def test_runner_is_single_use(self):
        runner = SwarmRunner(Swarm(SwarmConfig(seed=42)), RunnerConfig(iterations=1))
        runner.run()
        with pytest.raises(RuntimeError):
            runner.run()

    def test_observer_failure_aborts_run(self):
        def failing(record):
            if record.iteration == 3:
                raise OSError("disk full")

        swarm = Swarm(SwarmConfig(seed=42))
        runner = SwarmRunner(swarm, RunnerConfig(iterations=10), observers=[failing])

        with pytest.raises(OSError):
            runner.run()

        assert runner.state is RunState.FAILED
        assert swarm.iteration == 4

    def test_invalid_config_rejected_before_run(self):
        with pytest.raises(ConfigurationError):
            SwarmRunner(Swarm(SwarmConfig(seed=42)), RunnerConfig(iterations=-5))

    def test_identical_seeds_identical_trajectories(self):
        results = [
            SwarmRunner(Swarm(SwarmConfig(seed=99)), RunnerConfig(iterations=100)).run()
            for _ in range(2)
        ]
        assert [r.to_row() for r in results[0].history] == [r.to_row() for r in results[1].history]
        assert np.array_equal(results[0].best_position, results[1].best_position)

    def test_result_to_dict(self):
        result = SwarmRunner(Swarm(SwarmConfig(seed=42)), RunnerConfig(iterations=3)).run()
        data = result.to_dict()

        assert data["iterations"] == 3
        assert len(data["best_position"]) == 2
        assert data["history"][0][0] == 0


# ==================== Recorder Tests ====================

class TestCsvFitnessRecorder:
    """Tests for CSV result logging."""

    def test_creates_file_and_appends_rows(self, tmp_path):
        path = tmp_path / "fitness.csv"
        recorder = CsvFitnessRecorder(path)

        recorder(IterationRecord(iteration=0, best_fitness=3.5))
        recorder(IterationRecord(iteration=1, best_fitness=1.25))

        assert path.read_text().splitlines() == ["0,3.5", "1,1.25"]
        assert recorder.rows_written == 2

    def test_appends_across_runs(self, tmp_path):
        path = tmp_path / "fitness.csv"
        path.write_text("0,9.0\n")

        CsvFitnessRecorder(path)(IterationRecord(iteration=0, best_fitness=2.0))

        assert path.read_text().splitlines() == ["0,9.0", "0,2.0"]

    def test_reset_removes_file(self, tmp_path):
        path = tmp_path / "fitness.csv"
        path.write_text("0,9.0\n")
        recorder = CsvFitnessRecorder(path)

        recorder.reset()
        assert not path.exists()

        recorder.reset()  # no file: nothing to do

    def test_write_failure_propagates(self, tmp_path):
        recorder = CsvFitnessRecorder(tmp_path / "missing" / "fitness.csv")
        with pytest.raises(OSError):
            recorder(IterationRecord(iteration=0, best_fitness=1.0))

    def test_round_trip_through_runner(self, tmp_path):
        path = tmp_path / "fitness.csv"
        runner = SwarmRunner(
            Swarm(SwarmConfig(seed=42)),
            RunnerConfig(iterations=25),
            observers=[CsvFitnessRecorder(path)],
        )
        result = runner.run()

        assert load_fitness_csv(path) == result.history

    def test_failing_recorder_aborts_run(self, tmp_path):
        runner = SwarmRunner(
            Swarm(SwarmConfig(seed=42)),
            RunnerConfig(iterations=10),
            observers=[CsvFitnessRecorder(tmp_path / "missing" / "fitness.csv")],
        )
        with pytest.raises(OSError):
            runner.run()
        assert len(runner.history) == 1


# ==================== Reporting Tests ====================

class TestReporting:
    """Tests for console reports."""

    def test_print_parameters(self, capsys):
        print_parameters(SwarmConfig(), RunnerConfig())
        out = capsys.readouterr().out

        assert "Number of particles: 15" in out
        assert "Number of iterations: 1000" in out
        assert "Inertia weight: 0.9" in out
        assert "X range: [-5.0, 5.0]" in out

    def test_progress_every_interval(self, capsys):
        printer = ProgressPrinter(interval=100)
        for i in range(250):
            printer(IterationRecord(iteration=i, best_fitness=float(i)))

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "Iteration: 0, gbest: 0.0",
            "Iteration: 100, gbest: 100.0",
            "Iteration: 200, gbest: 200.0",
        ]

    def test_print_result(self, capsys):
        result = RunResult(
            best_position=np.array([1.0, 1.0]),
            best_fitness=0.0,
            iterations=10,
        )
        print_result(result)
        out = capsys.readouterr().out
        assert "x = 1.0, y = 1.0, fitness = 0.0" in out
