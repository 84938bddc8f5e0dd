"""
**File:** ``enums.py``
**Region:** ``ds_protocol_ratelimit_py_lib/enums``

Constants for the rate limiter.

Example:
    >>> Direction.SEND
    'send'
    >>> Direction.RECEIVE
    'receive'
"""

from enum import StrEnum


class Direction(StrEnum):
    """
    Transfer directions, each paced on its own schedule.
    """

    SEND = "send"
    RECEIVE = "receive"
