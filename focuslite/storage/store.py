"""Key-value persistence used by the timer's config and cycle counter.

Values are stored JSON-encoded, one row per key.  Every storage problem
is a :class:`~focuslite.errors.PersistenceFailure`: it is logged and the
caller gets the default back (``load``) or simply returns (``save`` /
``remove``).  Nothing here raises into the timer.

Usage::

    store = KeyValueStore()
    store.save("focuslite_cycles", 3)
    store.load("focuslite_cycles", 0)   # -> 3
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ..errors import PersistenceFailure
from .db import get_session, init_db
from .models import KeyValueEntry

logger = logging.getLogger(__name__)


STORAGE_KEYS: dict[str, str] = {
    "tasks": "focuslite_tasks",
    "timer_config": "focuslite_timer_config",
    "cycles": "focuslite_cycles",
}

_PROBE_KEY = "__storage_test__"

# OSError covers a data directory that cannot be created
_STORAGE_ERRORS = (SQLAlchemyError, OSError)


class PersistencePort(Protocol):
    def load(self, key: str, default: Any = None) -> Any: ...

    def save(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...

    def is_available(self) -> bool: ...

    def clear_all(self) -> None: ...


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as exc:
        raise PersistenceFailure(key, f"not serializable: {exc}") from exc


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise PersistenceFailure(key, f"corrupt value: {exc}") from exc


# ═══════════════════════════════════════════════════════════════════════════
#  SQLITE STORE
# ═══════════════════════════════════════════════════════════════════════════


class KeyValueStore:
    """SQLite-backed store (through the shared SQLAlchemy session factory)."""

    def __init__(self, *, create_tables: bool = True) -> None:
        if create_tables:
            try:
                init_db()
            except _STORAGE_ERRORS as exc:
                logger.warning("Storage unavailable, tables not created: %s", exc)

    # ── port API ──────────────────────────────────────────────────────

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._read(key)
            if raw is None:
                logger.debug("No value stored for %s", key)
                return default
            return _decode(key, raw)
        except PersistenceFailure as exc:
            logger.warning("Failed to load %s", exc)
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self._write(key, _encode(key, value))
            logger.debug("Saved %s", key)
        except PersistenceFailure as exc:
            logger.warning("Failed to save %s", exc)

    def remove(self, key: str) -> None:
        try:
            with get_session() as db:
                entry = db.get(KeyValueEntry, key)
                if entry is not None:
                    db.delete(entry)
        except _STORAGE_ERRORS as exc:
            logger.warning("Failed to remove %s", PersistenceFailure(key, str(exc)))

    def is_available(self) -> bool:
        """Probe the database with a write and a delete."""
        try:
            self._write(_PROBE_KEY, json.dumps(_PROBE_KEY))
            with get_session() as db:
                entry = db.get(KeyValueEntry, _PROBE_KEY)
                if entry is not None:
                    db.delete(entry)
        except (PersistenceFailure, *_STORAGE_ERRORS) as exc:
            logger.warning("Storage is not available: %s", exc)
            return False
        return True

    # ── housekeeping ──────────────────────────────────────────────────

    def clear_all(self) -> None:
        """Remove every FocusLite key."""
        for key in STORAGE_KEYS.values():
            self.remove(key)
        logger.info("All FocusLite data removed")

    def storage_info(self) -> dict[str, Any]:
        """Availability, number of entries and total serialized size."""
        if not self.is_available():
            return {"available": False}
        try:
            with get_session() as db:
                values = db.scalars(select(KeyValueEntry.value)).all()
        except _STORAGE_ERRORS as exc:
            logger.warning("Could not read storage info: %s", exc)
            return {"available": False}
        return {
            "available": True,
            "item_count": len(values),
            "total_size": sum(len(v) for v in values),
        }

    # ── internal ──────────────────────────────────────────────────────

    def _read(self, key: str) -> str | None:
        try:
            with get_session() as db:
                entry = db.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except _STORAGE_ERRORS as exc:
            raise PersistenceFailure(key, str(exc)) from exc

    def _write(self, key: str, raw: str) -> None:
        try:
            with get_session() as db:
                entry = db.get(KeyValueEntry, key)
                if entry is None:
                    db.add(KeyValueEntry(key=key, value=raw))
                else:
                    entry.value = raw
        except _STORAGE_ERRORS as exc:
            raise PersistenceFailure(key, str(exc)) from exc


# ═══════════════════════════════════════════════════════════════════════════
#  IN-MEMORY STORE
# ═══════════════════════════════════════════════════════════════════════════


class MemoryStore:
    """Dict-backed store with the same contract.

    Values go through JSON like the SQLite store, so callers always get
    fresh copies back.  ``available=False`` simulates broken storage.
    """

    def __init__(self, *, available: bool = True) -> None:
        self._data: dict[str, str] = {}
        self.available = available

    def load(self, key: str, default: Any = None) -> Any:
        try:
            self._check(key)
            raw = self._data.get(key)
            if raw is None:
                return default
            return _decode(key, raw)
        except PersistenceFailure as exc:
            logger.warning("Failed to load %s", exc)
            return default

    def save(self, key: str, value: Any) -> None:
        try:
            self._check(key)
            self._data[key] = _encode(key, value)
        except PersistenceFailure as exc:
            logger.warning("Failed to save %s", exc)

    def remove(self, key: str) -> None:
        if self.available:
            self._data.pop(key, None)

    def is_available(self) -> bool:
        return self.available

    def clear_all(self) -> None:
        for key in STORAGE_KEYS.values():
            self.remove(key)

    def put_raw(self, key: str, raw: str) -> None:
        """Store an already-encoded value (lets tests plant corrupt data)."""
        self._data[key] = raw

    def _check(self, key: str) -> None:
        if not self.available:
            raise PersistenceFailure(key, "storage unavailable")
