# timetabling_engine/tests/unit/test_logging.py

"""
Tests for the structured run logger.
"""

import json
import logging

from timetabling_engine.utils.logging import (
    CycleMetrics,
    LogLevel,
    RunLogger,
    RunPhase,
    StructuredFormatter,
)


def make_logger():
    return RunLogger(name="timetabling_engine.test_run", level=LogLevel.DEBUG)


class TestRunLogger:
    """Tests for phase timing, cycle metrics and export"""

    def test_phase_records_duration(self):
        run_logger = make_logger()

        with run_logger.phase(RunPhase.SEEDING, {"initial_population": 3}):
            pass

        durations = run_logger.phase_durations()
        assert set(durations) == {"seeding"}
        assert durations["seeding"] >= 0
        assert run_logger.entries[0].context == {"initial_population": 3}

    def test_phase_end_without_start_warns(self):
        run_logger = make_logger()

        run_logger.end_phase(RunPhase.FINALIZATION)

        assert run_logger.phase_durations() == {}
        assert run_logger.entries[-1].level == LogLevel.WARNING

    def test_cycle_summary(self):
        run_logger = make_logger()
        for generation, action, best in [(1, "crossover", 9), (2, "crossover", 7), (3, "reduce", 4)]:
            run_logger.record_cycle(
                CycleMetrics(
                    generation=generation,
                    action=action,
                    population_size=5,
                    best_fitness=best,
                    mean_fitness=best + 1,
                    worst_fitness=best + 2,
                )
            )

        summary = run_logger.cycle_summary()

        assert summary["generations"] == 3
        assert summary["best_fitness"] == 4
        assert summary["first_best_fitness"] == 9
        assert summary["improvement"] == 5
        assert summary["actions"] == {"crossover": 2, "reduce": 1}
        assert run_logger.cycles()[0]["action"] == "crossover"

    def test_empty_cycle_summary(self):
        assert make_logger().cycle_summary() == {}

    def test_timed_operations(self):
        run_logger = make_logger()

        with run_logger.timed("crossover"):
            pass
        with run_logger.timed("crossover"):
            pass

        assert run_logger.operation_summary()["crossover"]["count"] == 2

    def test_export_and_clear(self, tmp_path):
        run_logger = RunLogger(name="timetabling_engine.test_run", run_id="run-7")
        run_logger.info("seeding started", phase=RunPhase.SEEDING, context={"attempts": 2})
        target = tmp_path / "run_log.json"

        run_logger.export(str(target))

        entries = json.loads(target.read_text())
        assert entries[-1]["message"] == "seeding started"
        assert entries[-1]["phase"] == "seeding"
        assert entries[-1]["level"] == "INFO"
        assert entries[-1]["context"] == {"attempts": 2}
        assert entries[-1]["run_id"] == "run-7"

        run_logger.clear()
        assert run_logger.entries == []


class TestStructuredFormatter:
    """Tests for console formatting"""

    def test_formats_run_entry(self):
        payload = json.dumps(
            {
                "timestamp": "2024-01-01T00:00:00",
                "level": "INFO",
                "phase": "seeding",
                "component": "scheduler",
                "message": "seeding finished",
                "metrics": {"duration_seconds": 1.5},
            }
        )
        record = logging.LogRecord("x", logging.INFO, __file__, 1, payload, None, None)

        line = StructuredFormatter().format(record)

        assert line.startswith("[2024-01-01T00:00:00] [INFO] [seeding] [scheduler]")
        assert "seeding finished" in line
        assert line.endswith("| duration_seconds=1.5")

    def test_plain_message_passes_through(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "plain text", None, None)

        assert StructuredFormatter().format(record) == "plain text"
