"""Timer modes and the read-only timer snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .events import Task


class Mode(Enum):
    FOCUS = "focus"
    BREAK = "break"

    @property
    def other(self) -> Mode:
        return Mode.BREAK if self is Mode.FOCUS else Mode.FOCUS

    @property
    def label(self) -> str:
        return "Focus" if self is Mode.FOCUS else "Break"


def format_seconds(seconds: int) -> str:
    """``MM:SS``; minutes are not wrapped at 60."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable copy of the engine's state at one moment.

    ``running`` and ``paused`` can both be true: a paused timer is still
    considered running, it just receives no ticks.  Use :attr:`status`
    when a single word is needed.
    """

    mode: Mode
    time_remaining: int
    total_seconds: int
    running: bool
    paused: bool
    cycles_completed: int
    current_task: Task | None = None

    @property
    def status(self) -> str:
        if self.paused:
            return "paused"
        if self.running:
            return "running"
        return "stopped"

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current countdown."""
        if self.total_seconds <= 0:
            return 0.0
        elapsed = self.total_seconds - self.time_remaining
        return max(0.0, min(1.0, elapsed / self.total_seconds))

    @property
    def formatted_remaining(self) -> str:
        return format_seconds(self.time_remaining)

    @property
    def formatted_total(self) -> str:
        return format_seconds(self.total_seconds)
