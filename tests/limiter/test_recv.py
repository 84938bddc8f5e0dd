"""
**File:** ``test_recv.py``
**Region:** ``tests/limiter/test_recv``

RateLimiter.recv and RateLimiter.recv_into tests.

Covers:
- Unlimited rate delegating to the channel's receive primitives.
- One receive per call, clamped to max_burst.
- Pacing from the bytes actually received, applied after the data arrives.
- Receive duration booked before the credit draw-down.
- Closed channels and failures bypassing pacing.
"""

from __future__ import annotations

import errno

import pytest
from ds_resource_plugin_py_lib.common.resource.linked_service.errors import ConnectionException

from ds_protocol_ratelimit_py_lib.enums import Direction
from ds_protocol_ratelimit_py_lib.limiter import RateLimiter
from ds_protocol_ratelimit_py_lib.utils.timing import Timespec
from tests.mocks import FakeChannel


def test_unlimited_recv_is_a_direct_call(fake_clock) -> None:
    """
    It reads straight from the channel without clamping or sleeping.
    """

    channel = FakeChannel(inbound=b"x" * 20000)
    data = RateLimiter().recv(channel, 15000)
    assert len(data) == 15000
    assert channel.recv_sizes == [15000]
    assert fake_clock.slept == []


def test_unlimited_recv_into_is_a_direct_call(fake_clock) -> None:
    """
    It forwards buffer, size and flags to the channel's recv_into.
    """

    channel = FakeChannel(inbound=b"abcdef")
    buffer = bytearray(4)
    assert RateLimiter().recv_into(channel, buffer) == 4
    assert buffer == bytearray(b"abcd")
    assert fake_clock.slept == []


def test_unlimited_recv_preserves_native_errors(fake_clock) -> None:
    """
    It lets the channel's own exception propagate untranslated.
    """

    channel = FakeChannel(recv_errors=[ConnectionResetError(errno.ECONNRESET, "reset")])
    with pytest.raises(ConnectionResetError):
        RateLimiter().recv(channel, 10)


def test_recv_clamps_request_to_max_burst(fake_clock) -> None:
    """
    It performs one receive of at most max_burst bytes.
    """

    channel = FakeChannel(inbound=b"y" * 2000)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    data = limiter.recv(channel, 4096)
    assert data == b"y" * 500
    assert channel.recv_sizes == [500]
    assert fake_clock.slept == [0.5]


def test_recv_paces_by_bytes_actually_received(fake_clock) -> None:
    """
    It derives the delay from the received count, not the requested size.
    """

    channel = FakeChannel(inbound=b"z" * 125)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    assert limiter.recv(channel, 500) == b"z" * 125
    assert fake_clock.slept == [0.125]


def test_recv_into_fills_caller_buffer(fake_clock) -> None:
    """
    It writes into the caller's buffer and honours an explicit nbytes.
    """

    channel = FakeChannel(inbound=b"0123456789")
    buffer = bytearray(10)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    assert limiter.recv_into(channel, buffer, 4) == 4
    assert bytes(buffer[:4]) == b"0123"
    assert channel.recv_sizes == [4]


def test_recv_books_own_duration_before_draw_down(fake_clock) -> None:
    """
    It subtracts the just-measured receive time from the delay of the same call.
    """

    channel = FakeChannel(inbound=b"x" * 500, advance=fake_clock.advance, transfer_seconds=0.125)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    limiter.recv(channel, 500)
    assert fake_clock.slept == [0.375]
    assert limiter.schedule(Direction.RECEIVE).credit == 0.0


def test_recv_slow_arrival_skips_delay(fake_clock) -> None:
    """
    It does not sleep when the receive itself took longer than the ideal duration.
    """

    channel = FakeChannel(inbound=b"x" * 500, advance=fake_clock.advance, transfer_seconds=1.0)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    limiter.recv(channel, 500)
    assert fake_clock.slept == []
    assert limiter.schedule(Direction.RECEIVE).credit == pytest.approx(0.5)


def test_recv_consecutive_calls_are_spaced(fake_clock) -> None:
    """
    It holds each caller back so consecutive receives average the target rate.
    """

    channel = FakeChannel(inbound=b"x" * 2000)
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    total = sum(len(limiter.recv(channel, 500)) for _ in range(4))
    assert total == 2000
    assert fake_clock.now() == pytest.approx(2.0)


def test_recv_closed_channel_is_not_paced(fake_clock) -> None:
    """
    It returns an empty result without sleeping or touching the schedule.
    """

    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    assert limiter.recv(FakeChannel(), 500) == b""
    assert fake_clock.slept == []
    assert limiter.schedule(Direction.RECEIVE).snapshot() == (Timespec(0, 0), 0.0)


def test_recv_failure_raises_connection_exception(fake_clock) -> None:
    """
    It surfaces a receive failure without pacing.
    """

    failure = ConnectionResetError(errno.ECONNRESET, "reset")
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    with pytest.raises(ConnectionException) as exc_info:
        limiter.recv(FakeChannel(recv_errors=[failure]), 500)
    assert exc_info.value.__cause__ is failure
    assert fake_clock.slept == []


def test_recv_retries_interrupted_receive(fake_clock) -> None:
    """
    It retries an interrupted receive and paces the data that then arrives.
    """

    channel = FakeChannel(inbound=b"x" * 250, recv_errors=[InterruptedError()])
    limiter = RateLimiter(rate_kbps=8, max_burst=500)
    assert limiter.recv(channel, 500) == b"x" * 250
    assert fake_clock.slept == [0.25]
