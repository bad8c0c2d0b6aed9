# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .cache import CachedRecordStore
from .client import close_record_store, get_record_store, get_store, init_record_store
from .config import RecordStoreSettings, store_settings
from .enums import (
    PLATFORM_ADMIN_ROLE,
    AppRole,
    ApplicationStatus,
    InviteStatus,
    LoanStatus,
    RecordType,
    TeamRole,
)
from .http import PlatformRecordStore
from .memory import InMemoryRecordStore
from .store import Record, RecordNotFoundError, RecordStore, RecordStoreError

__all__ = [
    "__version__",
    # Store
    "CachedRecordStore",
    "InMemoryRecordStore",
    "PlatformRecordStore",
    "Record",
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
    "RecordStoreSettings",
    "store_settings",
    "init_record_store",
    "get_record_store",
    "close_record_store",
    "get_store",
    # Enums
    "AppRole",
    "ApplicationStatus",
    "InviteStatus",
    "LoanStatus",
    "PLATFORM_ADMIN_ROLE",
    "RecordType",
    "TeamRole",
]
