"""Shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from tradeflow.db.store import JournalStore
from tradeflow.services.journal import JournalService
from tradeflow.services.settings import SettingsService


@pytest.fixture
def temp_store():
    """Create a journal store backed by a temporary database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield JournalStore(Path(tmpdir) / "test.db")


@pytest.fixture
def journal_service(temp_store):
    return JournalService(temp_store)


@pytest.fixture
def settings_service(temp_store):
    return SettingsService(temp_store)
