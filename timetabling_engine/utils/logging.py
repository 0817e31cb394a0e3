# timetabling_engine/utils/logging.py

"""
Structured logging for scheduling runs.

A ``RunLogger`` sits on top of a standard library logger. Every message it
emits is also kept as a ``RunLogEntry`` so a finished run can be exported as
JSON, and it tracks how long each run phase took and what every population
control cycle did.
"""

import json
import logging
import statistics
import threading
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class RunPhase(Enum):
    """Stages of one scheduling run"""

    SEEDING = "seeding"
    SET_BASED_SEARCH = "set_based_search"
    FINALIZATION = "finalization"


Number = Union[int, float]


@dataclass
class RunLogEntry:
    """One structured message of a run"""

    timestamp: datetime
    level: LogLevel
    message: str
    phase: Optional[RunPhase] = None
    component: str = "scheduler"
    context: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Number] = field(default_factory=dict)
    run_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["timestamp"] = self.timestamp.isoformat()
        payload["level"] = self.level.value
        payload["phase"] = self.phase.value if self.phase else None
        return payload


@dataclass
class CycleMetrics:
    """What one population control cycle left behind"""

    generation: int = 0
    action: str = ""
    population_size: int = 0
    best_fitness: float = 0.0
    mean_fitness: float = 0.0
    worst_fitness: float = 0.0
    stable_generations: int = 0


class RunLogger:
    """
    Logger of one scheduling run.

    Messages go to the standard library logger ``name`` as JSON payloads that
    ``StructuredFormatter`` renders on the console.
    """

    def __init__(
        self,
        name: str = "timetabling_engine.run",
        level: LogLevel = LogLevel.INFO,
        run_id: Optional[str] = None,
        max_entries: int = 10000,
    ):
        self.name = name
        self.level = level
        self.run_id = run_id

        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.value))
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self._logger.addHandler(handler)

        self._entries: deque = deque(maxlen=max_entries)
        self._phase_started: Dict[RunPhase, float] = {}
        self._phase_seconds: Dict[RunPhase, float] = {}
        self._operation_seconds: Dict[str, List[float]] = defaultdict(list)
        self._cycles: List[CycleMetrics] = []

        # The watchdog timer thread logs concurrently with the run
        self._lock = threading.Lock()

    @property
    def entries(self) -> List[RunLogEntry]:
        with self._lock:
            return list(self._entries)

    def record(
        self,
        level: LogLevel,
        message: str,
        phase: Optional[RunPhase] = None,
        component: str = "scheduler",
        context: Optional[Dict[str, Any]] = None,
        metrics: Optional[Dict[str, Number]] = None,
    ) -> RunLogEntry:
        entry = RunLogEntry(
            timestamp=datetime.now(),
            level=level,
            message=message,
            phase=phase,
            component=component,
            context=context or {},
            metrics=metrics or {},
            run_id=self.run_id,
        )
        with self._lock:
            self._entries.append(entry)
        self._logger.log(
            getattr(logging, level.value), json.dumps(entry.to_dict(), default=str)
        )
        return entry

    def debug(self, message: str, **kwargs):
        self.record(LogLevel.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self.record(LogLevel.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.record(LogLevel.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self.record(LogLevel.ERROR, message, **kwargs)

    def start_phase(self, phase: RunPhase, context: Optional[Dict[str, Any]] = None):
        self._phase_started[phase] = time.perf_counter()
        self.info(f"{phase.value} started", phase=phase, context=context)

    def end_phase(self, phase: RunPhase, context: Optional[Dict[str, Any]] = None):
        started = self._phase_started.pop(phase, None)
        if started is None:
            self.warning(f"{phase.value} ended but was never started", phase=phase)
            return
        seconds = time.perf_counter() - started
        self._phase_seconds[phase] = seconds
        self.info(
            f"{phase.value} finished",
            phase=phase,
            context=context,
            metrics={"duration_seconds": seconds},
        )

    @contextmanager
    def phase(self, phase: RunPhase, context: Optional[Dict[str, Any]] = None):
        """Time a run phase, logging its start and end"""
        self.start_phase(phase, context)
        try:
            yield
        finally:
            self.end_phase(phase)

    @contextmanager
    def timed(self, operation: str):
        """Accumulate the wall time of a named operation"""
        started = time.perf_counter()
        try:
            yield
        finally:
            seconds = time.perf_counter() - started
            with self._lock:
                self._operation_seconds[operation].append(seconds)
            self.debug(f"{operation} took {seconds:.4f}s", metrics={"duration_seconds": seconds})

    def record_cycle(self, metrics: CycleMetrics):
        with self._lock:
            self._cycles.append(metrics)
        self.debug(
            f"Cycle {metrics.generation}: {metrics.action}, "
            f"population {metrics.population_size}",
            phase=RunPhase.SET_BASED_SEARCH,
            component="population",
            context={"stable_generations": metrics.stable_generations},
            metrics={
                "best_fitness": metrics.best_fitness,
                "mean_fitness": metrics.mean_fitness,
                "worst_fitness": metrics.worst_fitness,
            },
        )

    def record_stable(self, generation: int, stable_generations: int, limit: int):
        self.info(
            f"Best fitness unchanged for {stable_generations} cycles, "
            f"stopping at generation {generation}",
            phase=RunPhase.SET_BASED_SEARCH,
            component="population",
            context={"generation": generation, "max_stable_generations": limit},
        )

    def phase_durations(self) -> Dict[str, float]:
        return {phase.value: seconds for phase, seconds in self._phase_seconds.items()}

    def operation_summary(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            timings = {name: list(values) for name, values in self._operation_seconds.items()}
        return {
            name: {
                "count": len(values),
                "total_seconds": sum(values),
                "mean_seconds": statistics.mean(values),
            }
            for name, values in timings.items()
            if values
        }

    def cycles(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [asdict(metrics) for metrics in self._cycles]

    def cycle_summary(self) -> Dict[str, Any]:
        """Counts per action and how far the best fitness moved"""
        with self._lock:
            cycles = list(self._cycles)
        if not cycles:
            return {}

        best = [metrics.best_fitness for metrics in cycles]
        actions: Dict[str, int] = defaultdict(int)
        for metrics in cycles:
            actions[metrics.action] += 1
        return {
            "generations": len(cycles),
            "final_population_size": cycles[-1].population_size,
            "first_best_fitness": best[0],
            "best_fitness": min(best),
            "improvement": best[0] - min(best),
            "actions": dict(actions),
        }

    def export(self, filepath: str):
        """Write every kept entry to ``filepath`` as a JSON list"""
        payload = [entry.to_dict() for entry in self.entries]
        with open(filepath, "w") as f:
            json.dump(payload, f, indent=2, default=str)

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._cycles.clear()
            self._operation_seconds.clear()
        self._phase_seconds.clear()


class StructuredFormatter(logging.Formatter):
    """Renders ``RunLogger`` payloads as one readable console line"""

    def format(self, record):
        try:
            payload = json.loads(record.getMessage())
        except (json.JSONDecodeError, TypeError):
            return super().format(record)
        if not isinstance(payload, dict):
            return super().format(record)

        tags = [payload.get("timestamp", ""), payload.get("level", "")]
        tags += [payload[key] for key in ("phase", "component") if payload.get(key)]
        line = " ".join(f"[{tag}]" for tag in tags) + f" {payload.get('message', '')}"
        metrics = payload.get("metrics") or {}
        if metrics:
            line += " | " + ", ".join(f"{key}={value}" for key, value in metrics.items())
        return line

