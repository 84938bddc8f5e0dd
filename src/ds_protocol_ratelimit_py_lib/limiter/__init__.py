"""
**File:** ``__init__.py``
**Region:** ``ds_protocol_ratelimit_py_lib/limiter``

Channel Rate Limiter

This module implements a rate limiter pacing socket transfers to a bit rate.

Example:
    >>> limiter = RateLimiter.from_config(RateLimiterConfig(rate_kbps=64, max_burst=1000))
    >>> limiter.get_rate()
    64000
    >>> limiter.send(sock, b"payload")
    7
"""

from .config import DEFAULT_MAX_BURST, DEFAULT_READ_BLOCK_SIZE, RateLimiterConfig
from .rate_limiter import RateLimiter

__all__ = [
    "DEFAULT_MAX_BURST",
    "DEFAULT_READ_BLOCK_SIZE",
    "RateLimiter",
    "RateLimiterConfig",
]
