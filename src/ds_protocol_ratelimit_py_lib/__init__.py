"""
A Python package from the ds-protocol library collection.

**File:** ``__init__.py``
**Region:** ``ds-protocol-ratelimit-py-lib``

Example:

.. code-block:: python

    from ds_protocol_ratelimit_py_lib import RateLimiter

    limiter = RateLimiter(rate_kbps=64)
    limiter.send(sock, b"payload")
"""

from pathlib import Path

PACKAGE_NAME = "ds-protocol-ratelimit-py-lib"
_VERSION_FILE = Path(__file__).parent.parent.parent / "VERSION.txt"
__version__ = _VERSION_FILE.read_text().strip() if _VERSION_FILE.exists() else "0.0.0"

from .enums import Direction  # noqa: E402
from .limiter import RateLimiter, RateLimiterConfig  # noqa: E402
from .utils.pacing import PacingSchedule, Reservation  # noqa: E402
from .utils.timing import Timespec  # noqa: E402

__all__ = [
    "Direction",
    "PacingSchedule",
    "RateLimiter",
    "RateLimiterConfig",
    "Reservation",
    "Timespec",
]
