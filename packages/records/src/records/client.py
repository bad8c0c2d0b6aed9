# This project was developed with assistance from AI tools.
"""Process-wide record store client and the per-request store dependency.

The underlying client (connection pool) is a singleton initialised once at
app startup via ``init_record_store()``. Handlers never see it directly:
``get_store()`` wraps it in a fresh ``CachedRecordStore`` per request.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from .cache import CachedRecordStore
from .config import RecordStoreSettings, store_settings
from .http import PlatformRecordStore
from .memory import InMemoryRecordStore
from .store import RecordStore

logger = logging.getLogger(__name__)

_store: RecordStore | None = None


def init_record_store(
    cfg: RecordStoreSettings | None = None, store: RecordStore | None = None
) -> RecordStore:
    """Initialise the singleton (called once from app lifespan).

    Pass ``store`` to install a pre-built backend (e.g. a seeded in-memory
    store for local demos).
    """
    global _store  # noqa: PLW0603
    cfg = cfg or store_settings
    if store is not None:
        _store = store
    elif cfg.RECORD_STORE_BACKEND == "memory":
        _store = InMemoryRecordStore()
    else:
        _store = PlatformRecordStore.from_settings(cfg)
    logger.info("Record store initialised (backend=%s)", type(_store).__name__)
    return _store


def get_record_store() -> RecordStore:
    """Return the initialised record store singleton."""
    if _store is None:
        raise RuntimeError("Record store not initialised -- call init_record_store() first")
    return _store


async def close_record_store() -> None:
    """Release the singleton's connections (called from app lifespan)."""
    global _store  # noqa: PLW0603
    if isinstance(_store, PlatformRecordStore):
        await _store.aclose()
    _store = None


async def get_store() -> AsyncIterator[CachedRecordStore]:
    """FastAPI dependency: a request-scoped caching view of the record store."""
    yield CachedRecordStore(get_record_store())
