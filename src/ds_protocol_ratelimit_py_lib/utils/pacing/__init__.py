from .schedule import PacingSchedule, Reservation

__all__ = [
    "PacingSchedule",
    "Reservation",
]
