"""Timer configuration with key-value persistence.

The config is stored under ``focuslite_timer_config`` as a JSON object
with the keys ``focusTime``, ``breakTime``, ``autoSwitch`` and
``soundEnabled``.

Usage::

    store = ConfigStore(KeyValueStore())
    config = store.load()
    store.update(focus_seconds=50 * 60)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict, fields, replace
from typing import Any

from .storage.store import PersistencePort, STORAGE_KEYS

logger = logging.getLogger(__name__)

CONFIG_KEY = STORAGE_KEYS["timer_config"]

# dataclass field -> persisted key
_PERSISTED_NAMES: dict[str, str] = {
    "focus_seconds": "focusTime",
    "break_seconds": "breakTime",
    "auto_switch": "autoSwitch",
    "sound_enabled": "soundEnabled",
}


@dataclass
class TimerConfig:
    """User-configurable timer preferences."""

    focus_seconds: int = 25 * 60
    break_seconds: int = 5 * 60
    auto_switch: bool = True
    sound_enabled: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {_PERSISTED_NAMES[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Any) -> TimerConfig:
        """Build a config from persisted data, field by field.

        Anything missing or of the wrong type keeps its default.
        """
        config = cls()
        if not isinstance(data, dict):
            return config
        changes = {}
        for name, persisted in _PERSISTED_NAMES.items():
            # accept snake_case too, in case someone saved asdict() output
            value = data.get(persisted, data.get(name))
            if value is not None and _valid(name, value):
                changes[name] = value
        return replace(config, **changes)


def _valid(name: str, value: Any) -> bool:
    if name in ("focus_seconds", "break_seconds"):
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    return isinstance(value, bool)


FIELD_NAMES = frozenset(f.name for f in fields(TimerConfig))
_FIELD_BY_ALIAS = {v: k for k, v in _PERSISTED_NAMES.items()}
# camelCase spellings of the field names themselves
_FIELD_BY_ALIAS.update(focusSeconds="focus_seconds", breakSeconds="break_seconds")


class ConfigStore:
    """Holds the live :class:`TimerConfig` and persists every change."""

    def __init__(self, storage: PersistencePort) -> None:
        self._storage = storage
        self._config = TimerConfig()

    @property
    def config(self) -> TimerConfig:
        return self._config

    def load(self) -> TimerConfig:
        """Load from storage, falling back to defaults.  Never raises."""
        data = self._storage.load(CONFIG_KEY, None)
        if data is None:
            self._config = TimerConfig()
        else:
            if not isinstance(data, dict):
                logger.warning("Ignoring malformed timer config: %r", data)
            self._config = TimerConfig.from_dict(data)
        return replace(self._config)

    def save(self, config: TimerConfig | None = None) -> None:
        if config is not None:
            self._config = replace(config)
        self._storage.save(CONFIG_KEY, self._config.to_dict())

    def update(self, **changes: Any) -> TimerConfig:
        """Merge *changes* into the config and persist it.

        Keys may be field names, their camelCase spelling (``focusSeconds``)
        or the persisted names (``focusTime``).
        Unknown keys and invalid values are logged and dropped.
        """
        accepted = {}
        for name, value in changes.items():
            name = _FIELD_BY_ALIAS.get(name, name)
            if name not in FIELD_NAMES:
                logger.warning("Unknown timer config key %r ignored", name)
            elif not _valid(name, value):
                logger.warning("Invalid value for %s ignored: %r", name, value)
            else:
                accepted[name] = value
        self._config = replace(self._config, **accepted)
        self.save()
        return replace(self._config)
