"""Typed publish/subscribe channel shared by the timer and the task layer.

Event names are fixed; each carries one payload type:

- ``currentTaskChanged``: :class:`CurrentTaskChanged`
- ``modeChanged``: :class:`ModeChanged`
- ``cycleCompleted``: :class:`CycleCompleted`
- ``timerStateChanged``: :class:`~focuslite.state.TimerSnapshot`

Handlers run synchronously in subscription order.  A handler that raises
is logged and skipped; the others still get the event.  Qt code can also
connect to the ``published(name, payload)`` signal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from .state import Mode, TimerSnapshot

logger = logging.getLogger(__name__)

CURRENT_TASK_CHANGED = "currentTaskChanged"
MODE_CHANGED = "modeChanged"
CYCLE_COMPLETED = "cycleCompleted"
TIMER_STATE_CHANGED = "timerStateChanged"


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    completed: bool = False


@dataclass(frozen=True)
class CurrentTaskChanged:
    task: Task | None


@dataclass(frozen=True)
class ModeChanged:
    mode: Mode
    total_seconds: int


@dataclass(frozen=True)
class CycleCompleted:
    mode: Mode
    cycles_completed: int


EVENT_TYPES: dict[str, type] = {
    CURRENT_TASK_CHANGED: CurrentTaskChanged,
    MODE_CHANGED: ModeChanged,
    CYCLE_COMPLETED: CycleCompleted,
    TIMER_STATE_CHANGED: TimerSnapshot,
}

Handler = Callable[[Any], Any]


class EventBus(QObject):
    published = pyqtSignal(str, object)  # event name, payload

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._handlers: dict[str, list[Handler]] = {name: [] for name in EVENT_TYPES}

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        """Register *handler* for *name*.  Returns an unsubscribe callable."""
        self._check(name)
        self._handlers[name].append(handler)

        def _unsubscribe() -> None:
            try:
                self._handlers[name].remove(handler)
            except ValueError:
                pass  # already removed

        return _unsubscribe

    def publish(self, name: str, payload: Any) -> None:
        self._check(name)
        expected = EVENT_TYPES[name]
        if not isinstance(payload, expected):
            raise TypeError(
                f"{name} expects {expected.__name__}, got {type(payload).__name__}"
            )
        logger.debug("publish %s %r", name, payload)
        self.published.emit(name, payload)
        for handler in list(self._handlers[name]):
            try:
                handler(payload)
            except Exception:
                logger.exception("Handler %r failed for %s", handler, name)

    def subscriber_count(self, name: str) -> int:
        self._check(name)
        return len(self._handlers[name])

    @staticmethod
    def _check(name: str) -> None:
        if name not in EVENT_TYPES:
            raise ValueError(f"Unknown event {name!r}")
