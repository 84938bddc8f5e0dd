"""
**File:** ``timespec.py``
**Region:** ``ds_protocol_ratelimit_py_lib/utils/timing``

Timespec Arithmetic

This module implements a small immutable value type holding a point in time
(or a time delta) as whole seconds plus a nanosecond remainder. The pacing
schedule keeps its eligible times as Timespec values so that repeated
advancing by fractional-second durations does not accumulate float error.

Key features:
- Nanoseconds always normalized into ``[0, 1e9)``
- Strict ordering compares seconds first, nanoseconds as tiebreak
- Addition of a fractional-second duration with carry
- Signed subtraction with borrow, as a delta or as float seconds

Example:
    >>> start = Timespec(seconds=1, nanoseconds=900_000_000)
    >>> start.add(0.25)
    Timespec(seconds=2, nanoseconds=150000000)
    >>> start.add(0.25).diff(start).to_seconds()
    0.25
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass

NANOSECONDS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True, slots=True, order=True)
class Timespec:
    """
    A (seconds, nanoseconds) pair.

    Seconds may be negative when the value is the result of subtracting a
    later time from an earlier one; nanoseconds never are.

    :param seconds: Whole seconds.
    :param nanoseconds: Nanosecond remainder in ``[0, 1e9)``.
    """

    seconds: int = 0
    nanoseconds: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.nanoseconds < NANOSECONDS_PER_SECOND:
            raise ValueError(f"nanoseconds must be in [0, {NANOSECONDS_PER_SECOND}), got {self.nanoseconds}")

    @classmethod
    def now(cls) -> Timespec:
        """
        Read the monotonic clock.
        :return: The current time.
        """
        seconds, nanoseconds = divmod(time.monotonic_ns(), NANOSECONDS_PER_SECOND)
        return cls(seconds=seconds, nanoseconds=nanoseconds)

    @classmethod
    def from_seconds(cls, duration: float) -> Timespec:
        """
        Build a delta from a non-negative fractional-second duration.
        :param duration: Duration in seconds.
        :return: The duration as a Timespec.
        """
        return cls().add(duration)

    def less(self, other: Timespec) -> bool:
        """
        Tell whether this time strictly precedes ``other``.
        :param other: The time to compare against.
        :return: True when ``self`` comes first.
        """
        return self.seconds < other.seconds or (self.seconds == other.seconds and self.nanoseconds < other.nanoseconds)

    def add(self, duration: float) -> Timespec:
        """
        Advance by a fractional-second duration.

        The duration is split into whole seconds and a truncated nanosecond
        remainder; nanosecond overflow is carried into seconds.

        :param duration: Non-negative duration in seconds.
        :return: The advanced time.
        """
        if duration < 0:
            raise ValueError(f"duration must be non-negative, got {duration}")
        whole = math.trunc(duration)
        seconds = self.seconds + whole
        nanoseconds = self.nanoseconds + math.trunc((duration - whole) * NANOSECONDS_PER_SECOND)
        if nanoseconds >= NANOSECONDS_PER_SECOND:
            carry, nanoseconds = divmod(nanoseconds, NANOSECONDS_PER_SECOND)
            seconds += carry
        return Timespec(seconds=seconds, nanoseconds=nanoseconds)

    def diff(self, other: Timespec) -> Timespec:
        """
        Subtract ``other`` from this time, borrowing one second when the
        nanosecond difference is negative.
        :param other: The time to subtract.
        :return: The normalized delta ``self - other``.
        """
        seconds = self.seconds - other.seconds
        nanoseconds = self.nanoseconds - other.nanoseconds
        if nanoseconds < 0:
            seconds -= 1
            nanoseconds += NANOSECONDS_PER_SECOND
        return Timespec(seconds=seconds, nanoseconds=nanoseconds)

    def elapsed_since(self, other: Timespec) -> float:
        """
        Subtract ``other`` from this time as float seconds.
        :param other: The earlier time.
        :return: ``self - other`` in seconds.
        """
        return self.diff(other).to_seconds()

    def to_seconds(self) -> float:
        return self.seconds + self.nanoseconds / NANOSECONDS_PER_SECOND
