"""
**File:** ``02_paced_sendfile.py``
**Region:** ``examples/02_paced_sendfile``

Example 02: Pump a file into a socket at 32 kbit/s using ds-protocol-ratelimit-py-lib.
"""

from __future__ import annotations

import socket
import tempfile
import threading

from ds_common_logger_py_lib import Logger

from ds_protocol_ratelimit_py_lib.limiter import RateLimiter, RateLimiterConfig

Logger()
logger = Logger.get_logger(__name__)


def main() -> None:
    try:
        limiter = RateLimiter.from_config(RateLimiterConfig(rate_kbps=32, max_burst=512))
        left, right = socket.socketpair()

        with left, right:

            def drain() -> None:
                while right.recv(4096):
                    pass

            thread = threading.Thread(target=drain)
            thread.start()

            try:
                with tempfile.TemporaryFile() as source:
                    source.write(b"y" * 6000)
                    source.seek(0)
                    # Asks for more than the file holds; the short count is returned.
                    transferred = limiter.sendfile(left, source, count=8000)
            finally:
                left.shutdown(socket.SHUT_WR)
                thread.join()

        logger.info("transferred=%d", transferred)
    except Exception as exc:
        logger.exception("Paced sendfile failed: %s", exc.__dict__)


if __name__ == "__main__":
    main()
