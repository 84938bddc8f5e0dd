"""
**File:** ``conftest.py``
**Region:** ``tests/conftest``

Pytest shared fixtures.

Covers:
- Deterministic time control for Timespec, PacingSchedule and RateLimiter unit tests.
"""

from __future__ import annotations

import time
from typing import Protocol

import pytest

NANOSECONDS_PER_SECOND = 1_000_000_000


class Clock(Protocol):
    """
    Minimal controllable clock used in pacing tests.
    """

    def __call__(self, value: float) -> None: ...

    def advance(self, seconds: float) -> None: ...

    def now(self) -> float: ...

    @property
    def slept(self) -> list[float]: ...


@pytest.fixture
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> Clock:
    """
    Patch time.monotonic_ns and time.sleep for deterministic pacing tests.

    Sleeping advances the simulated time by exactly the requested amount.
    """

    class _Clock:
        def __init__(self) -> None:
            self.now_ns = 0
            self._slept: list[float] = []

        def __call__(self, value: float) -> None:
            self.now_ns = round(float(value) * NANOSECONDS_PER_SECOND)

        def advance(self, seconds: float) -> None:
            self.now_ns += round(float(seconds) * NANOSECONDS_PER_SECOND)

        def now(self) -> float:
            return self.now_ns / NANOSECONDS_PER_SECOND

        def monotonic_ns(self) -> int:
            return self.now_ns

        def sleep(self, seconds: float) -> None:
            self._slept.append(float(seconds))
            self.advance(seconds)

        @property
        def slept(self) -> list[float]:
            return self._slept

    clock = _Clock()
    monkeypatch.setattr(time, "monotonic_ns", clock.monotonic_ns)
    monkeypatch.setattr(time, "sleep", clock.sleep)
    return clock
