# timetabling_engine/tests/unit/test_watchdog.py

"""
Tests for the wall-clock budget watchdog.
"""

import time

from timetabling_engine.utils.watchdog import TimeBudgetWatchdog


class TestTimeBudgetWatchdog:
    """Tests for expiry and cancellation"""

    def test_expires_after_budget(self):
        with TimeBudgetWatchdog(0.05) as watchdog:
            deadline = time.monotonic() + 2.0
            while not watchdog.expired and time.monotonic() < deadline:
                time.sleep(0.01)

            assert watchdog.expired
            assert watchdog.elapsed_seconds >= 0.04

    def test_not_expired_within_budget(self):
        with TimeBudgetWatchdog(60) as watchdog:
            assert not watchdog.expired

    def test_cancel_prevents_expiry(self):
        watchdog = TimeBudgetWatchdog(0.05).start()
        watchdog.cancel()
        time.sleep(0.1)

        assert not watchdog.expired

    def test_elapsed_before_start(self):
        assert TimeBudgetWatchdog(1).elapsed_seconds == 0.0

    def test_start_is_idempotent(self):
        watchdog = TimeBudgetWatchdog(60)
        watchdog.start()
        timer = watchdog._timer
        watchdog.start()

        assert watchdog._timer is timer
        watchdog.cancel()
