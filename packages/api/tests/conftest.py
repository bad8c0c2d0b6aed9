# This project was developed with assistance from AI tools.
"""Shared fixtures.

Every test gets a fresh in-memory record store installed as the process
singleton, so direct service calls and requests through the app see the
same data.
"""

import pytest
from records import InMemoryRecordStore, init_record_store

from src.core.config import settings


@pytest.fixture(autouse=True)
def store():
    """Fresh in-memory record store, installed as the app's backend."""
    backend = InMemoryRecordStore()
    init_record_store(store=backend)
    return backend


@pytest.fixture(autouse=True)
def _auth_enabled(monkeypatch):
    """Tests opt in to the dev bypass explicitly."""
    monkeypatch.setattr(settings, "AUTH_DISABLED", False)


@pytest.fixture
def use_records():
    """Replace the backend with one seeded from ``{RecordType: [records]}``."""

    def _use(seed: dict) -> InMemoryRecordStore:
        backend = InMemoryRecordStore(seed=seed)
        init_record_store(store=backend)
        return backend

    return _use
