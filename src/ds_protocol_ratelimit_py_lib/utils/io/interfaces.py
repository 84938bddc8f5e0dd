"""
**File:** ``interfaces.py``
**Region:** ``ds_protocol_ratelimit_py_lib/utils/io``

Collaborator protocols.

Defines the blocking primitives the rate limiter drives. ``socket.socket``
satisfies Channel and a binary file object satisfies FileSource.
"""

from __future__ import annotations

from typing import Protocol

from ..timing import Timespec


class Channel(Protocol):
    """Contract for a duplex byte channel (a connected socket)."""

    def send(self, data: bytes | memoryview, flags: int = 0, /) -> int: ...

    def recv(self, bufsize: int, flags: int = 0, /) -> bytes: ...

    def recv_into(self, buffer: bytearray | memoryview, nbytes: int = 0, flags: int = 0, /) -> int: ...

    def sendfile(self, file: FileSource, offset: int = 0, count: int | None = None) -> int: ...


class FileSource(Protocol):
    """Contract for a readable binary source."""

    def read(self, size: int = -1, /) -> bytes: ...

    def tell(self) -> int: ...


class Clock(Protocol):
    def __call__(self) -> Timespec: ...


class Sleep(Protocol):
    def __call__(self, seconds: float, /) -> None: ...
