"""Shared test helpers for FocusLite."""

from __future__ import annotations


class SignalCollector:
    """Utility to capture pyqtSignal emissions (or bus events) into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class RecordingNotifier:
    """Notifier that remembers calls; can be told to fail."""

    def __init__(self, *, fail: bool = False):
        self.sounds = 0
        self.alerts: list[tuple[str, str]] = []
        self.fail = fail

    def play_sound(self) -> None:
        if self.fail:
            raise RuntimeError("audio device busy")
        self.sounds += 1

    def show_alert(self, title: str, body: str) -> None:
        if self.fail:
            raise PermissionError("notifications denied")
        self.alerts.append((title, body))


class ManualHandle:
    def __init__(self, due: int, interval: int | None, callback, seq: int):
        self.due = due
        self.interval = interval
        self.callback = callback
        self.seq = seq
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualScheduler:
    """Deterministic stand-in for QtScheduler: time moves only via advance()."""

    def __init__(self):
        self.now = 0  # ms
        self._handles: list[ManualHandle] = []
        self._seq = 0

    def every(self, interval_ms, callback):
        return self._add(interval_ms, interval_ms, callback)

    def once(self, delay_ms, callback):
        return self._add(delay_ms, None, callback)

    def advance(self, seconds: float = 1) -> None:
        """Move the clock forward, firing everything that comes due in order."""
        target = self.now + int(seconds * 1000)
        while True:
            due = [h for h in self._handles if h.active and h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            if handle.interval is None:
                handle.cancel()
            else:
                handle.due += handle.interval
            handle.callback()
        self.now = target
        self._handles = [h for h in self._handles if h.active]

    def ticks(self, n: int) -> None:
        """Deliver *n* one-second ticks."""
        self.advance(n)

    @property
    def active_recurring(self) -> int:
        return sum(1 for h in self._handles if h.active and h.interval is not None)

    @property
    def active_one_shots(self) -> int:
        return sum(1 for h in self._handles if h.active and h.interval is None)

    def _add(self, delay, interval, callback):
        self._seq += 1
        handle = ManualHandle(self.now + delay, interval, callback, self._seq)
        self._handles.append(handle)
        return handle
