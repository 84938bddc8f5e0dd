"""
**File:** ``config.py``
**Region:** ``ds_protocol_ratelimit_py_lib/limiter``

Rate limiter configuration.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_BURST = 10_000
DEFAULT_READ_BLOCK_SIZE = 1024


@dataclass(frozen=True, slots=True)
class RateLimiterConfig:
    """
    Settings for a RateLimiter.

    :param rate_kbps: Target rate in kilobits per second. 0 disables pacing.
    :param max_burst: Largest number of bytes handed to the channel at once.
    :param read_block_size: Block size used when pumping a file into a channel.
    """

    rate_kbps: int = 0
    max_burst: int = DEFAULT_MAX_BURST
    read_block_size: int = DEFAULT_READ_BLOCK_SIZE

    def __post_init__(self) -> None:
        if self.rate_kbps < 0:
            raise ValueError(f"rate_kbps must be non-negative, got {self.rate_kbps}")
        if self.max_burst <= 0:
            raise ValueError(f"max_burst must be positive, got {self.max_burst}")
        if self.read_block_size <= 0:
            raise ValueError(f"read_block_size must be positive, got {self.read_block_size}")

    @property
    def rate_bps(self) -> int:
        return self.rate_kbps * 1000
