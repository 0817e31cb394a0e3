# timetabling_engine/utils/watchdog.py

"""Wall-clock budget for a scheduling run."""

import threading
import time
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class TimeBudgetWatchdog:
    """
    Marks a run as expired once its time budget has elapsed.

    A ``threading.Timer`` sets an event when the budget runs out; it never
    touches search state. The run polls ``expired`` between control cycles and
    winds down with the best solution found so far.
    """

    def __init__(self, budget_seconds: float):
        self.budget_seconds = budget_seconds
        self._expired = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._started_at: Optional[float] = None

    def _expire(self):
        logger.warning(f"Time budget of {self.budget_seconds:.1f}s exhausted")
        self._expired.set()

    def start(self) -> "TimeBudgetWatchdog":
        if self._timer is None:
            self._started_at = time.monotonic()
            self._timer = threading.Timer(self.budget_seconds, self._expire)
            self._timer.daemon = True
            self._timer.start()
        return self

    def cancel(self):
        if self._timer is not None:
            self._timer.cancel()

    @property
    def expired(self) -> bool:
        return self._expired.is_set()

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at

    def __enter__(self) -> "TimeBudgetWatchdog":
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback):
        self.cancel()
        return False
