import logging

from .arithmetic import add_days, add_hours, add_minutes, add_seconds
from .clock import Clock, ManualClock, SystemClock
from .formatting import datetime_format, localtz
from .timer import Timer, timer
from .util import DAY, HOUR, MINUTE, POLL_INTERVAL, SECOND

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "add_seconds",
    "add_minutes",
    "add_hours",
    "add_days",
    "datetime_format",
    "localtz",
    "Clock",
    "SystemClock",
    "ManualClock",
    "Timer",
    "timer",
    "SECOND",
    "MINUTE",
    "HOUR",
    "DAY",
    "POLL_INTERVAL",
]
