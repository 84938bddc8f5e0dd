from .io import read_block, recv_once, send_all, timed
from .pacing import PacingSchedule, Reservation
from .timing import Timespec

__all__ = [
    "PacingSchedule",
    "Reservation",
    "Timespec",
    "read_block",
    "recv_once",
    "send_all",
    "timed",
]
