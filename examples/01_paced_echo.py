"""
**File:** ``01_paced_echo.py``
**Region:** ``examples/01_paced_echo``

Example 01: Send and receive over a local socket pair at 64 kbit/s using ds-protocol-ratelimit-py-lib.
"""

from __future__ import annotations

import socket
import threading
import time

from ds_common_logger_py_lib import Logger

from ds_protocol_ratelimit_py_lib.limiter import RateLimiter

Logger()
logger = Logger.get_logger(__name__)


def main() -> None:
    try:
        limiter = RateLimiter(rate_kbps=64, max_burst=1000)
        payload = b"x" * 16_000
        left, right = socket.socketpair()

        with left, right:
            received = bytearray()

            def reader() -> None:
                while len(received) < len(payload):
                    chunk = limiter.recv(right, 4096)
                    if not chunk:
                        break
                    received.extend(chunk)

            thread = threading.Thread(target=reader)
            thread.start()

            started = time.monotonic()
            try:
                sent = limiter.send(left, payload)
            finally:
                left.shutdown(socket.SHUT_WR)
                thread.join()
            elapsed = time.monotonic() - started

        logger.info("rate=%d bit/s", limiter.get_rate())
        logger.info("sent=%d received=%d", sent, len(received))
        logger.info("elapsed=%.2fs (ideal %.2fs)", elapsed, len(payload) * 8 / limiter.get_rate())
    except Exception as exc:
        logger.exception("Paced echo failed: %s", exc.__dict__)


if __name__ == "__main__":
    main()
