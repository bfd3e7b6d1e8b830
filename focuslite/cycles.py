"""Persisted count of completed focus cycles."""

from __future__ import annotations

import logging
import math

from .storage.store import PersistencePort, STORAGE_KEYS

logger = logging.getLogger(__name__)

CYCLES_KEY = STORAGE_KEYS["cycles"]


class CycleCounter:
    def __init__(self, storage: PersistencePort) -> None:
        self._storage = storage

    def load(self) -> int:
        """Stored count, or 0 when missing or not a usable number."""
        value = self._storage.load(CYCLES_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Ignoring malformed cycle count: %r", value)
            return 0
        if not math.isfinite(value) or value < 0:
            logger.warning("Ignoring out-of-range cycle count: %r", value)
            return 0
        return int(value)

    def save(self, count: int) -> None:
        self._storage.save(CYCLES_KEY, int(count))
