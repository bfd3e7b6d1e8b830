"""Cancellable scheduled callbacks on the Qt event loop.

``every()`` runs a callback repeatedly, ``once()`` runs it a single time.
Both return a handle whose ``cancel()`` may be called any number of
times, before or after the callback fired.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class ScheduleHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def every(self, interval_ms: int, callback: Callable[[], None]) -> ScheduleHandle: ...

    def once(self, delay_ms: int, callback: Callable[[], None]) -> ScheduleHandle: ...


class QtScheduleHandle:
    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    @property
    def active(self) -> bool:
        return self._timer is not None

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _fired_once(self) -> None:
        # single-shot timers are done after one timeout
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtScheduler:
    """Scheduler backed by ``QTimer``; needs a running Qt event loop."""

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent

    def every(self, interval_ms: int, callback: Callable[[], None]) -> QtScheduleHandle:
        timer = QTimer(self._parent)
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        return QtScheduleHandle(timer)

    def once(self, delay_ms: int, callback: Callable[[], None]) -> QtScheduleHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(delay_ms)
        handle = QtScheduleHandle(timer)

        def _fire() -> None:
            handle._fired_once()
            callback()

        timer.timeout.connect(_fire)
        timer.start()
        return handle
