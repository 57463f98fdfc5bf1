"""Shared pytest fixtures for PaceKeeper tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pacekeeper.database.db import configure_engine, init_db
from pacekeeper.timer.engine import SequenceTimer

from helpers import ManualClock, FakeTone, FakeAnnouncer


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
def clock():
    return ManualClock()


@pytest.fixture
def timer(qapp, clock):
    """Empty SequenceTimer driven by the manual clock."""
    return SequenceTimer(parent=None, clock=clock)


@pytest.fixture
def tone():
    return FakeTone()


@pytest.fixture
def announcer():
    """Announcer that finishes every utterance immediately."""
    return FakeAnnouncer(auto_finish=True)


@pytest.fixture
def slow_announcer():
    """Announcer that holds utterances until ``finish()`` is called."""
    return FakeAnnouncer(auto_finish=False)
