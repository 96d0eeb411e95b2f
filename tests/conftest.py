# tests/conftest.py - Shared fixtures
"""
Deterministic clock and scheduler fixtures.
"""

import pytest


class FakeClock:
    """Manually advanced millisecond clock"""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


class ManualTimer:
    """Handle returned by ManualScheduler"""

    def __init__(self, delay_s, callback):
        self.delay_s = delay_s
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler that only runs callbacks when fire() is called"""

    def __init__(self):
        self.timers = []

    def __call__(self, delay_s, callback):
        timer = ManualTimer(delay_s, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire(self):
        for timer in self.pending:
            timer.fired = True
            timer.callback()


@pytest.fixture
def clock():
    """Fake clock starting at 0 ms"""
    return FakeClock()


@pytest.fixture
def scheduler():
    """Manual scheduler for deferred flushes"""
    return ManualScheduler()
