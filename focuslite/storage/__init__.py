"""Storage package."""

from .db import get_session, init_db, configure_engine
from .models import KeyValueEntry
from .store import KeyValueStore, MemoryStore, PersistencePort, STORAGE_KEYS

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "KeyValueEntry",
    "KeyValueStore",
    "MemoryStore",
    "PersistencePort",
    "STORAGE_KEYS",
]
