"""Countdown state machine for FocusLite.

States
------
IDLE        Not counting: ``running`` and ``paused`` both false.
RUNNING     Counting down, one tick per second.
PAUSED      ``paused`` true; ``running`` stays true but no ticks arrive.
COMPLETED   Transitional: the tick that reaches 0 completes the
            countdown and drops straight back to IDLE.

Transitions
-----------
IDLE → RUNNING          (start)
RUNNING → PAUSED        (pause)
PAUSED → RUNNING        (resume)
RUNNING → IDLE          (countdown reaches 0)
Any → IDLE              (reset / switch_mode)

With ``auto_switch`` on, completion also schedules a one-shot that fires
2 s later, flips the mode and starts again.  That one-shot is *not*
cancelled by a manual reset, switch_mode or start in the meantime.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from PyQt6.QtCore import QObject, pyqtSignal

from ..config import ConfigStore, TimerConfig
from ..cycles import CycleCounter
from ..errors import NotificationFailure
from ..events import (
    CURRENT_TASK_CHANGED,
    CYCLE_COMPLETED,
    MODE_CHANGED,
    TIMER_STATE_CHANGED,
    CurrentTaskChanged,
    CycleCompleted,
    EventBus,
    ModeChanged,
    Task,
)
from ..notifier import ALERT_TITLE, NotifierPort
from ..state import Mode, TimerSnapshot, format_seconds
from .scheduler import QtScheduler, Scheduler, ScheduleHandle

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000
AUTO_SWITCH_DELAY_MS = 2000


class TimerEngine(QObject):
    """Focus/break countdown with persisted cycles and config.

    Signals
    -------
    tick(remaining_seconds: int)
        Emitted on every decrement.
    state_changed(snapshot: TimerSnapshot)
        Emitted whenever anything a UI would display changes.
    """

    tick = pyqtSignal(int)
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        config_store: ConfigStore,
        cycle_counter: CycleCounter,
        notifier: NotifierPort,
        bus: EventBus,
        *,
        scheduler: Scheduler | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)

        # ── collaborators ─────────────────────────────────────────────
        self._config_store = config_store
        self._cycle_counter = cycle_counter
        self._notifier = notifier
        self._bus = bus
        self._scheduler: Scheduler = scheduler or QtScheduler(self)

        config = self._config_store.load()

        # ── countdown state ───────────────────────────────────────────
        self._mode: Mode = Mode.FOCUS
        self._total: int = config.focus_seconds
        self._remaining: int = self._total
        self._running: bool = False
        self._paused: bool = False
        self._cycles: int = self._cycle_counter.load()
        self._current_task: Task | None = None

        # ── scheduled work ────────────────────────────────────────────
        self._tick_handle: ScheduleHandle | None = None
        self._auto_switch_handle: ScheduleHandle | None = None

        self._unsubscribe_task = self._bus.subscribe(
            CURRENT_TASK_CHANGED, self._on_current_task_changed
        )

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def running(self) -> bool:
        """True from start() until reset, switch_mode or completion,
        including while paused."""
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def auto_switch_pending(self) -> bool:
        return self._auto_switch_handle is not None and self._auto_switch_handle.active

    def get_state(self) -> TimerSnapshot:
        return TimerSnapshot(
            mode=self._mode,
            time_remaining=self._remaining,
            total_seconds=self._total,
            running=self._running,
            paused=self._paused,
            cycles_completed=self._cycles,
            current_task=self._current_task,
        )

    def get_config(self) -> TimerConfig:
        return replace(self._config_store.config)

    def formatted_time_remaining(self) -> str:
        return format_seconds(self._remaining)

    def formatted_total_time(self) -> str:
        return format_seconds(self._total)

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._paused = False
        self._schedule_ticks()
        logger.debug("Timer started (%s, %ss left)", self._mode.value, self._remaining)
        self._render()

    def pause(self) -> None:
        if not self._running or self._paused:
            return
        self._paused = True
        self._cancel_ticks()
        logger.debug("Timer paused at %ss", self._remaining)
        self._render()

    def resume(self) -> None:
        if not self._paused:
            return
        self._paused = False
        # start() would be a no-op here: running is still true
        self._running = True
        self._schedule_ticks()
        logger.debug("Timer resumed at %ss", self._remaining)
        self._render()

    def toggle(self) -> None:
        """Start/pause shortcut: pause while ticking, else resume or start."""
        if self._paused:
            self.resume()
        elif self._running:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        self._cancel_ticks()
        self._running = False
        self._paused = False
        self._remaining = self._total
        logger.debug("Timer reset to %ss", self._total)
        self._render()

    def switch_mode(self, target: Mode | str) -> None:
        try:
            target = Mode(target)
        except ValueError:
            logger.warning("Unknown timer mode %r ignored", target)
            return
        if target == self._mode:
            return

        self._cancel_ticks()
        self._running = False
        self._paused = False
        self._mode = target
        self._total = self._duration_for(target)
        self._remaining = self._total
        logger.debug("Mode switched to %s", target.value)
        self._render()
        self._bus.publish(MODE_CHANGED, ModeChanged(target, self._total))

    def update_config(self, patch: dict[str, Any] | None = None, **changes: Any) -> TimerConfig:
        """Merge *patch* / keyword changes into the config and persist it.

        When the timer is not running, the current countdown is resized
        to the new duration for the current mode.
        """
        merged = dict(patch or {})
        merged.update(changes)
        config = self._config_store.update(**merged)
        if not self._running:
            self._total = self._duration_for(self._mode)
            self._remaining = self._total
            self._render()
        return config

    def reset_cycles(self) -> None:
        """Zero the in-memory cycle count (after stored data was wiped)."""
        self._cycles = 0
        self._render()

    def shutdown(self) -> None:
        """Stop everything scheduled and detach from the bus."""
        self._cancel_ticks()
        if self._auto_switch_handle is not None:
            self._auto_switch_handle.cancel()
            self._auto_switch_handle = None
        self._unsubscribe_task()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _duration_for(self, mode: Mode) -> int:
        config = self._config_store.config
        return config.focus_seconds if mode is Mode.FOCUS else config.break_seconds

    def _schedule_ticks(self) -> None:
        # never more than one recurring tick
        self._cancel_ticks()
        self._tick_handle = self._scheduler.every(TICK_INTERVAL_MS, self._on_tick)

    def _cancel_ticks(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _on_tick(self) -> None:
        if not self._running or self._paused:
            return
        if self._remaining > 0:
            self._remaining -= 1
            self.tick.emit(self._remaining)
            self._render()
        if self._remaining <= 0:
            self._on_complete()

    def _on_complete(self) -> None:
        self._cancel_ticks()
        self._running = False
        self._paused = False
        completed = self._mode

        self._notify(completed)

        if completed is Mode.FOCUS:
            self._cycles += 1
            self._cycle_counter.save(self._cycles)

        logger.info(
            "%s countdown complete (cycles: %d)",
            completed.label,
            self._cycles,
            extra={"_json_mode": completed.value, "_json_cycles": self._cycles},
        )
        self._render()
        self._bus.publish(CYCLE_COMPLETED, CycleCompleted(completed, self._cycles))

        if self._config_store.config.auto_switch:
            if self._auto_switch_handle is not None:
                self._auto_switch_handle.cancel()
            self._auto_switch_handle = self._scheduler.once(
                AUTO_SWITCH_DELAY_MS, self._auto_switch
            )

    def _auto_switch(self) -> None:
        self._auto_switch_handle = None
        # flips whatever mode is current when the delay elapses
        self.switch_mode(self._mode.other)
        self.start()

    def _notify(self, completed: Mode) -> None:
        if self._config_store.config.sound_enabled:
            try:
                self._notifier.play_sound()
            except Exception as exc:
                logger.warning("Sound failed: %s", NotificationFailure(str(exc)))
        try:
            self._notifier.show_alert(ALERT_TITLE, f"{completed.label} time complete!")
        except Exception as exc:
            logger.warning("Alert failed: %s", NotificationFailure(str(exc)))

    def _on_current_task_changed(self, event: CurrentTaskChanged) -> None:
        self._current_task = event.task
        self._render()

    def _render(self) -> None:
        snapshot = self.get_state()
        self.state_changed.emit(snapshot)
        self._bus.publish(TIMER_STATE_CHANGED, snapshot)
