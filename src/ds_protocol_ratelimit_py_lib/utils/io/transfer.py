"""
**File:** ``transfer.py``
**Region:** ``ds_protocol_ratelimit_py_lib/utils/io``

Blocking transfer helpers.

This module wraps the raw channel and file primitives used by the rate
limiter:

- ``timed`` runs one transfer and measures how long it blocked.
- ``send_all`` keeps calling ``send`` until a chunk is fully accepted.
- ``recv_once`` performs one receive.
- ``read_block`` reads one block from a file source.

Interrupted calls are retried in place. Any other OS-level failure is raised
as a ds-resource-plugin exception chained to the original error.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from ds_common_logger_py_lib import Logger
from ds_resource_plugin_py_lib.common.resource.errors import ResourceException
from ds_resource_plugin_py_lib.common.resource.linked_service.errors import (
    ConnectionException,
)

from .interfaces import Channel, Clock, FileSource

logger = Logger.get_logger(__name__)

T = TypeVar("T")


def timed(transfer: Callable[[], T], clock: Clock) -> tuple[T, float]:
    """
    Run one blocking transfer and measure its wall-clock duration.

    Args:
        transfer: Zero-argument callable performing the transfer.
        clock: Clock read before and after the transfer.

    Returns:
        tuple[T, float]: The transfer result and the elapsed seconds.
    """
    started = clock()
    result = transfer()
    return result, clock().elapsed_since(started)


def send_all(channel: Channel, data: bytes | bytearray | memoryview, flags: int = 0) -> int:
    """
    Send a whole buffer, looping over partial writes.

    A send that accepts zero bytes means the peer is not taking more data;
    the loop stops and the short count is returned.

    Args:
        channel: The channel to write to.
        data: The bytes to send.
        flags: Flags forwarded to every ``send`` call.

    Returns:
        int: The number of bytes accepted by the channel.
    """
    view = memoryview(data).cast("B")
    total = len(view)
    sent = 0
    while sent < total:
        try:
            written = channel.send(view[sent:], flags)
        except InterruptedError:
            continue
        except OSError as exc:
            raise ConnectionException(
                message=f"Send failed after {sent} of {total} bytes: {exc}",
                details={
                    "requested_bytes": total,
                    "sent_bytes": sent,
                    "errno": exc.errno,
                    "error_type": type(exc).__name__,
                },
            ) from exc
        if written == 0:
            logger.warning("Channel stopped accepting data after %d of %d bytes", sent, total)
            break
        sent += written
    return sent


def recv_once(channel: Channel, buffer: bytearray | memoryview, nbytes: int, flags: int = 0) -> int:
    """
    Receive up to ``nbytes`` into ``buffer`` with a single successful call.

    Args:
        channel: The channel to read from.
        buffer: Writable buffer receiving the data.
        nbytes: Maximum number of bytes to receive.
        flags: Flags forwarded to ``recv_into``.

    Returns:
        int: The number of bytes received; 0 when the peer closed.
    """
    while True:
        try:
            return channel.recv_into(buffer, nbytes, flags)
        except InterruptedError:
            continue
        except OSError as exc:
            raise ConnectionException(
                message=f"Receive failed: {exc}",
                details={
                    "requested_bytes": nbytes,
                    "errno": exc.errno,
                    "error_type": type(exc).__name__,
                },
            ) from exc


def read_block(file: FileSource, size: int) -> bytes:
    """
    Read up to ``size`` bytes from a file source.

    Args:
        file: The source to read from.
        size: Maximum number of bytes to read.

    Returns:
        bytes: The data read; empty at end of input.
    """
    while True:
        try:
            return file.read(size)
        except InterruptedError:
            continue
        except OSError as exc:
            raise ResourceException(
                message=f"Reading from file source failed: {exc}",
                details={
                    "requested_bytes": size,
                    "errno": exc.errno,
                    "error_type": type(exc).__name__,
                },
            ) from exc
