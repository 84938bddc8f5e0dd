"""
**File:** ``rate_limiter.py``
**Region:** ``ds_protocol_ratelimit_py_lib/limiter``

Channel Rate Limiter

This module paces byte transfers over a channel to a configured bit rate.
Sends are cut into chunks of at most ``max_burst`` bytes; every chunk
reserves a slot on the send schedule as long as the chunk is worth at the
target rate, sleeps until the slot has passed, and only then goes out.
Receives are paced after the fact: the data is returned as soon as it
arrives and the caller is held back long enough to keep the average rate.

The measured duration of every blocking transfer is booked as credit and
spent by later chunks, so time lost inside the transport is not paid twice
and the long-run rate converges to the target.

Key features:
- Thread-safe; one limiter may be shared by many connections for an aggregate cap
- Independent schedules for the send and receive directions
- Bursts bounded by ``max_burst``
- A rate of 0 turns every call into the plain channel primitive
- Injectable clock and sleep for simulated-time testing
"""

from __future__ import annotations

import dataclasses
import time
from functools import partial

from ds_common_logger_py_lib import Logger

from ..enums import Direction
from ..utils.io import Channel, Clock, FileSource, Sleep, read_block, recv_once, send_all, timed
from ..utils.pacing import PacingSchedule
from ..utils.timing import Timespec
from .config import DEFAULT_MAX_BURST, DEFAULT_READ_BLOCK_SIZE, RateLimiterConfig

logger = Logger.get_logger(__name__)


class RateLimiter:
    """
    Channel Rate Limiter

    Limits the rate at which an application sends and receives data over one
    or more channels. The achieved rate is an average: bytes leave in bursts
    of up to ``max_burst`` bytes. Accuracy degrades above roughly 1 Mbit/s.

    :param rate_kbps: Target rate in kilobits per second. 0 means unlimited.
    :param max_burst: Maximum number of bytes handed to the channel at once.
    :param read_block_size: Block size used by ``sendfile``.
    :param clock: Time source. Defaults to the monotonic clock.
    :param sleep: Sleep primitive. Defaults to ``time.sleep``.
    :return: None

    Example:
        # 64 kbit/s shared by every connection using this limiter
        limiter = RateLimiter(rate_kbps=64, max_burst=1000)

        limiter.send(sock, payload)
        data = limiter.recv(sock, 4096)
    """

    def __init__(
        self,
        rate_kbps: int = 0,
        max_burst: int = DEFAULT_MAX_BURST,
        *,
        read_block_size: int = DEFAULT_READ_BLOCK_SIZE,
        clock: Clock | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        self._config = RateLimiterConfig(
            rate_kbps=rate_kbps,
            max_burst=max_burst,
            read_block_size=read_block_size,
        )
        self._clock = clock
        self._sleep = sleep
        self._send_schedule = PacingSchedule(direction=Direction.SEND, now=self._now())
        self._recv_schedule = PacingSchedule(direction=Direction.RECEIVE, now=self._now())

    @classmethod
    def from_config(
        cls,
        config: RateLimiterConfig,
        *,
        clock: Clock | None = None,
        sleep: Sleep | None = None,
    ) -> RateLimiter:
        """
        Build a limiter from a RateLimiterConfig.
        :param config: The limiter settings.
        :param clock: Time source. Defaults to the monotonic clock.
        :param sleep: Sleep primitive. Defaults to ``time.sleep``.
        :return: The limiter.
        """
        return cls(
            rate_kbps=config.rate_kbps,
            max_burst=config.max_burst,
            read_block_size=config.read_block_size,
            clock=clock,
            sleep=sleep,
        )

    @property
    def config(self) -> RateLimiterConfig:
        return self._config

    @property
    def rate(self) -> int:
        """
        The configured rate in bits per second.
        """
        return self._config.rate_bps

    @property
    def max_burst(self) -> int:
        return self._config.max_burst

    def schedule(self, direction: Direction) -> PacingSchedule:
        """
        Get the pacing schedule of one direction.
        :param direction: The transfer direction.
        :return: The schedule.
        """
        return self._send_schedule if direction is Direction.SEND else self._recv_schedule

    def get_rate(self) -> int:
        """
        Get the configured rate.
        :return: The rate in bits per second.
        """
        return self._config.rate_bps

    def set_rate(self, rate_kbps: int, max_burst: int | None = None) -> None:
        """
        Change the rate and, optionally, the maximum burst.

        Calls already in progress keep the settings they started with.

        :param rate_kbps: New rate in kilobits per second. 0 means unlimited.
        :param max_burst: New maximum burst in bytes. Unchanged when omitted.
        :return: None
        """
        changes: dict[str, int] = {"rate_kbps": rate_kbps}
        if max_burst is not None:
            changes["max_burst"] = max_burst
        self._config = dataclasses.replace(self._config, **changes)
        logger.info("Rate set to %d bit/s with max burst %d bytes", self._config.rate_bps, self._config.max_burst)

    def send(self, channel: Channel, data: bytes | bytearray | memoryview, flags: int = 0) -> int:
        """
        Send ``data`` at the configured rate.

        Blocks until every chunk has been paced and handed to the channel.
        Stops early when the channel stops accepting data.

        :param channel: The channel to write to.
        :param data: The bytes to send.
        :param flags: Flags forwarded to the channel's ``send``.
        :return: The number of bytes sent.
        """
        config = self._config
        if config.rate_bps == 0:
            return channel.send(data, flags)

        return self._send(channel, memoryview(data).cast("B"), flags, config)

    def _send(self, channel: Channel, view: memoryview, flags: int, config: RateLimiterConfig) -> int:
        # Paced chunk loop over a byte view, using the settings the caller snapshotted.
        total = len(view)
        sent = 0
        while sent < total:
            size = min(total - sent, config.max_burst)
            ideal = size * 8 / config.rate_bps

            reservation = self._send_schedule.reserve(ideal, now=self._now())
            logger.debug(
                "Send chunk of %d bytes: wait %.6fs, slot %.6fs of %.6fs ideal",
                size,
                reservation.wait,
                reservation.duration,
                ideal,
            )
            self._pause(reservation.delay)

            written, elapsed = timed(partial(send_all, channel, view[sent : sent + size], flags), self._now)
            self._send_schedule.book(elapsed)

            sent += written
            if written < size:
                break
        return sent

    def recv_into(
        self,
        channel: Channel,
        buffer: bytearray | memoryview,
        nbytes: int = 0,
        flags: int = 0,
    ) -> int:
        """
        Receive into ``buffer`` at the configured rate.

        Performs a single receive of at most ``max_burst`` bytes. The data is
        available as soon as it arrives; the call then sleeps long enough to
        keep the receive rate on target. Nothing is paced when the peer has
        closed the channel.

        :param channel: The channel to read from.
        :param buffer: Writable buffer receiving the data.
        :param nbytes: Maximum number of bytes to receive. 0 means ``len(buffer)``.
        :param flags: Flags forwarded to the channel's ``recv_into``.
        :return: The number of bytes received.
        """
        config = self._config
        if config.rate_bps == 0:
            return channel.recv_into(buffer, nbytes, flags)

        size = min(nbytes or memoryview(buffer).nbytes, config.max_burst)
        received, elapsed = timed(partial(recv_once, channel, buffer, size, flags), self._now)
        if received <= 0:
            return received

        ideal = received * 8 / config.rate_bps
        reservation = self._recv_schedule.book_and_reserve(elapsed, ideal, now=self._now())
        logger.debug(
            "Received %d bytes in %.6fs: wait %.6fs, slot %.6fs of %.6fs ideal",
            received,
            elapsed,
            reservation.wait,
            reservation.duration,
            ideal,
        )
        self._pause(reservation.delay)
        return received

    def recv(self, channel: Channel, bufsize: int, flags: int = 0) -> bytes:
        """
        Receive up to ``bufsize`` bytes at the configured rate.
        :param channel: The channel to read from.
        :param bufsize: Maximum number of bytes to receive.
        :param flags: Flags forwarded to the channel.
        :return: The received bytes; empty when the peer closed.
        """
        config = self._config
        if config.rate_bps == 0:
            return channel.recv(bufsize, flags)

        buffer = bytearray(min(bufsize, config.max_burst))
        received = self.recv_into(channel, buffer, len(buffer), flags)
        return bytes(buffer[:received])

    def sendfile(
        self,
        channel: Channel,
        file: FileSource,
        offset: int | None = None,
        count: int | None = None,
    ) -> int:
        """
        Pump the contents of ``file`` into ``channel`` at the configured rate.

        When a rate is set, ``offset`` is ignored and the file is read from its
        current position. Reaching the end of the file before ``count`` bytes
        is not an error; the short count is returned.

        :param channel: The channel to write to.
        :param file: Binary source to read from.
        :param offset: Start offset, honoured only when the rate is unlimited.
        :param count: Number of bytes to transfer. None means until end of file.
        :return: The number of bytes transferred.
        """
        config = self._config
        if config.rate_bps == 0:
            return channel.sendfile(file, file.tell() if offset is None else offset, count)

        transferred = 0
        while count is None or transferred < count:
            size = config.read_block_size if count is None else min(config.read_block_size, count - transferred)
            block = read_block(file, size)
            if not block:
                logger.debug("File source exhausted after %d bytes", transferred)
                break

            sent = self._send(channel, memoryview(block), 0, config)
            transferred += sent
            if sent < len(block):
                break
        return transferred

    def _now(self) -> Timespec:
        return self._clock() if self._clock is not None else Timespec.now()

    def _pause(self, seconds: float) -> None:
        if seconds <= 0:
            return
        if self._sleep is not None:
            self._sleep(seconds)
        else:
            time.sleep(seconds)
