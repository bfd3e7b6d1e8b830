"""Timer package."""

from .engine import (
    TimerEngine,
    TICK_INTERVAL_MS,
    AUTO_SWITCH_DELAY_MS,
)
from .scheduler import QtScheduler, Scheduler, ScheduleHandle

__all__ = [
    "TimerEngine",
    "TICK_INTERVAL_MS",
    "AUTO_SWITCH_DELAY_MS",
    "QtScheduler",
    "Scheduler",
    "ScheduleHandle",
]
