"""Application wiring: storage, event bus, notifier and timer engine.

Usage::

    app = FocusLiteApp()
    app.set_current_task(Task(id="1", text="Write report"))
    app.engine.start()
"""

from __future__ import annotations

import logging
from typing import Any

from PyQt6.QtCore import QObject

from .config import ConfigStore
from .cycles import CycleCounter
from .events import CURRENT_TASK_CHANGED, CurrentTaskChanged, EventBus, Task
from .notifier import NotifierPort, NullNotifier
from .storage.store import KeyValueStore, MemoryStore, PersistencePort
from .timer.engine import TimerEngine
from .timer.scheduler import Scheduler

logger = logging.getLogger(__name__)


class FocusLiteApp(QObject):
    """Owns one engine and everything it talks to."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        storage: PersistencePort | None = None,
        notifier: NotifierPort | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        super().__init__(parent)
        self.storage = storage or self._open_storage()
        self.bus = EventBus(self)
        self.config_store = ConfigStore(self.storage)
        self.cycle_counter = CycleCounter(self.storage)
        self.notifier = notifier or NullNotifier()
        self.engine = TimerEngine(
            self.config_store,
            self.cycle_counter,
            self.notifier,
            self.bus,
            scheduler=scheduler,
            parent=self,
        )
        logger.info("FocusLite initialised")

    @staticmethod
    def _open_storage() -> PersistencePort:
        store = KeyValueStore()
        if store.is_available():
            return store
        logger.warning("Database unavailable; settings will not survive a restart")
        return MemoryStore()

    def set_current_task(self, task: Task | None) -> None:
        self.bus.publish(CURRENT_TASK_CHANGED, CurrentTaskChanged(task))

    def status(self) -> dict[str, Any]:
        snapshot = self.engine.get_state()
        return {
            "storage_available": self.storage.is_available(),
            "components": ["storage", "bus", "config", "cycles", "notifier", "timer"],
            "timer_status": snapshot.status,
            "timer_state": snapshot,
        }

    def clear_all_data(self) -> None:
        """Wipe persisted data and put the timer back to a fresh countdown."""
        self.storage.clear_all()
        self.engine.reset_cycles()
        self.engine.reset()
        logger.info("All data cleared")
