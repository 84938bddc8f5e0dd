"""
**File:** ``schedule.py``
**Region:** ``ds_protocol_ratelimit_py_lib/utils/pacing``

Pacing Schedule

This module implements the per-direction bookkeeping behind the rate limiter.
A schedule hands out consecutive time slots: each caller reserves a slot as
long as its chunk is "worth" at the target rate, and is told how far in the
future the slot starts. Transfers that take longer than their slot are booked
as credit, which later reservations spend instead of sleeping.

Key features:
- Thread-safe using threading.Lock
- The lock covers only the bookkeeping; callers sleep and transfer unlocked
- Concurrent reservations are linearized into one queue of slots
- Eligible time never moves backwards and credit never goes negative
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from ...enums import Direction
from ..timing import Timespec


@dataclass(frozen=True, slots=True)
class Reservation:
    """
    A slot handed out by a PacingSchedule.

    :param start: The instant the slot begins.
    :param wait: Seconds from the reservation instant until the slot begins.
    :param duration: Length of the slot in seconds, after credit was spent.
    """

    start: Timespec
    wait: float
    duration: float

    @property
    def delay(self) -> float:
        """
        Total seconds the caller has to sleep: the backlog ahead plus its own slot.
        :return: Seconds to sleep.
        """
        return self.wait + self.duration


class PacingSchedule:
    """
    Pacing Schedule

    Holds the next eligible time and the accumulated time credit of one
    transfer direction. The schedule starts idle: eligible immediately, no
    credit.

    :param direction: The transfer direction this schedule paces.
    :param now: The creation instant, used as the first eligible time.
    :return: None

    Example:
        schedule = PacingSchedule(direction=Direction.SEND, now=Timespec.now())

        # Reserve half a second worth of bytes
        reservation = schedule.reserve(0.5, now=Timespec.now())
        time.sleep(reservation.delay)
        # Transfer the bytes here, then book the time it took
        schedule.book(elapsed)
    """

    def __init__(self, *, direction: Direction, now: Timespec) -> None:
        self.direction = direction
        self.next_eligible = now
        self.credit = 0.0
        self._lock = threading.Lock()

    def reserve(self, duration: float, now: Timespec) -> Reservation:
        """
        Spend available credit on ``duration`` and reserve the remaining
        time as the next slot.
        :param duration: Ideal duration of the chunk in seconds.
        :param now: The current time.
        :return: The reserved slot.
        """
        with self._lock:
            return self._reserve(duration, now)

    def book(self, elapsed: float) -> None:
        """
        Add the measured duration of a completed transfer to the credit.
        :param elapsed: Seconds the transfer took.
        :return: None
        """
        with self._lock:
            self.credit += max(0.0, elapsed)

    def book_and_reserve(self, elapsed: float, duration: float, now: Timespec) -> Reservation:
        """
        Book a completed transfer and reserve its slot in one critical section.
        :param elapsed: Seconds the transfer took.
        :param duration: Ideal duration of the transferred bytes in seconds.
        :param now: The current time.
        :return: The reserved slot.
        """
        with self._lock:
            self.credit += max(0.0, elapsed)
            return self._reserve(duration, now)

    def snapshot(self) -> tuple[Timespec, float]:
        """
        Read the next eligible time and the credit consistently.
        :return: ``(next_eligible, credit)``
        """
        with self._lock:
            return self.next_eligible, self.credit

    def __repr__(self) -> str:
        next_eligible, credit = self.snapshot()
        return f"PacingSchedule(direction={self.direction!s}, next_eligible={next_eligible!r}, credit={credit!r})"

    def _reserve(self, duration: float, now: Timespec) -> Reservation:
        # Caller holds the lock.
        if duration >= self.credit:
            duration -= self.credit
            self.credit = 0.0
        else:
            self.credit -= duration
            duration = 0.0

        if self.next_eligible.less(now):
            self.next_eligible = now
            wait = 0.0
        else:
            wait = self.next_eligible.elapsed_since(now)

        start = self.next_eligible
        self.next_eligible = self.next_eligible.add(duration)
        return Reservation(start=start, wait=wait, duration=duration)
