"""Exception types for FocusLite.

None of these ever reach a caller of the timer engine: the storage and
notifier adapters raise them internally and convert them to log records
at the port boundary.
"""

from __future__ import annotations


class FocusLiteError(Exception):
    """Base class for FocusLite errors."""


class PersistenceFailure(FocusLiteError):
    """Storage is unavailable or a value could not be (de)serialized."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"{key}: {reason}")
        self.key = key
        self.reason = reason


class NotificationFailure(FocusLiteError):
    """A sound or an alert could not be delivered."""
