from .timespec import NANOSECONDS_PER_SECOND, Timespec

__all__ = [
    "NANOSECONDS_PER_SECOND",
    "Timespec",
]
