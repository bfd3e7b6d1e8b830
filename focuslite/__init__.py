"""FocusLite: a focus/break countdown timer tied to a task list."""

__version__ = "0.1.0"
