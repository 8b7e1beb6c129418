"""Shared fixtures for the pattern system tests."""

import pytest


class SteppingClock:
    """Fake clock that advances a fixed number of milliseconds per call."""

    def __init__(self, step_ms: float):
        self.step = step_ms / 1000
        self.now = 0.0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def stepping_clock():
    """Factory for deterministic clocks: ``stepping_clock(step_ms)``."""
    return SteppingClock
