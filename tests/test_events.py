"""Tests for the typed event bus."""

from __future__ import annotations

import pytest

from focuslite.events import (
    CURRENT_TASK_CHANGED,
    CYCLE_COMPLETED,
    MODE_CHANGED,
    CurrentTaskChanged,
    CycleCompleted,
    ModeChanged,
    Task,
)
from focuslite.state import Mode

from helpers import SignalCollector


class TestEventBus:

    def test_subscriber_receives_payload(self, bus):
        c = SignalCollector()
        bus.subscribe(MODE_CHANGED, c)
        bus.publish(MODE_CHANGED, ModeChanged(Mode.BREAK, 300))
        assert c.last == ModeChanged(Mode.BREAK, 300)

    def test_only_matching_event_delivered(self, bus):
        c = SignalCollector()
        bus.subscribe(MODE_CHANGED, c)
        bus.publish(CYCLE_COMPLETED, CycleCompleted(Mode.FOCUS, 1))
        assert len(c) == 0

    def test_unsubscribe(self, bus):
        c = SignalCollector()
        unsubscribe = bus.subscribe(CURRENT_TASK_CHANGED, c)
        unsubscribe()
        unsubscribe()  # idempotent
        bus.publish(CURRENT_TASK_CHANGED, CurrentTaskChanged(None))
        assert len(c) == 0
        assert bus.subscriber_count(CURRENT_TASK_CHANGED) == 0

    def test_failing_handler_does_not_block_others(self, bus):
        def boom(_payload):
            raise RuntimeError("handler bug")

        c = SignalCollector()
        bus.subscribe(CYCLE_COMPLETED, boom)
        bus.subscribe(CYCLE_COMPLETED, c)
        bus.publish(CYCLE_COMPLETED, CycleCompleted(Mode.FOCUS, 2))
        assert c.last.cycles_completed == 2

    def test_qt_signal_mirrors_publish(self, bus):
        c = SignalCollector()
        bus.published.connect(c)
        task = Task(id="1", text="Read")
        bus.publish(CURRENT_TASK_CHANGED, CurrentTaskChanged(task))
        assert c.last == (CURRENT_TASK_CHANGED, CurrentTaskChanged(task))

    def test_unknown_event_rejected(self, bus):
        with pytest.raises(ValueError):
            bus.publish("taskDeleted", object())
        with pytest.raises(ValueError):
            bus.subscribe("taskDeleted", print)

    def test_wrong_payload_type_rejected(self, bus):
        with pytest.raises(TypeError):
            bus.publish(MODE_CHANGED, {"mode": "break"})
