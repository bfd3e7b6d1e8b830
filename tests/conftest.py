"""Shared pytest fixtures for FocusLite tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from focuslite.config import ConfigStore
from focuslite.cycles import CycleCounter
from focuslite.events import EventBus
from focuslite.storage.db import configure_engine, init_db
from focuslite.storage.store import MemoryStore
from focuslite.timer.engine import TimerEngine

from helpers import ManualScheduler, RecordingNotifier


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def storage():
    return MemoryStore()


@pytest.fixture
def bus(qapp):
    return EventBus()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_engine(qapp, storage, bus, scheduler, notifier):
    """Build an engine over the shared fakes, optionally with a stored config."""

    def _make(**config):
        store = ConfigStore(storage)
        if config:
            store.update(**config)
        return TimerEngine(
            store,
            CycleCounter(storage),
            notifier,
            bus,
            scheduler=scheduler,
        )

    return _make


@pytest.fixture
def engine(make_engine):
    """Fresh engine with default durations and auto-switch OFF."""
    return make_engine(auto_switch=False)


@pytest.fixture
def engine_auto(make_engine):
    """Fresh engine with auto-switch ON (the default)."""
    return make_engine()


@pytest.fixture
def unwritable_home(tmp_path, monkeypatch):
    """Point the data directory below a regular file so it cannot be created."""
    from focuslite.storage import db

    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    home = blocker / "focuslite"
    monkeypatch.setattr(db, "APP_SUPPORT_DIR", home)
    monkeypatch.setattr(db, "DB_PATH", home / "focuslite.db")
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_SessionFactory", None)
    return home
