from .interfaces import Channel, Clock, FileSource, Sleep
from .transfer import read_block, recv_once, send_all, timed

__all__ = [
    "Channel",
    "Clock",
    "FileSource",
    "Sleep",
    "read_block",
    "recv_once",
    "send_all",
    "timed",
]
