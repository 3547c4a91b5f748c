"""
Storage Services Package

Provides the abstract bill store interface and its implementations:
Google Sheets (remote), a JSON file (local cache) and an in-memory store.
"""

from finance_splitter.services.storage.interface import (
    BillStoreInterface,
    StorageError,
    StoreUnavailableError,
)
from finance_splitter.services.storage.google_sheets import (
    GoogleSheetsBillStore,
    GoogleSheetsClient,
)
from finance_splitter.services.storage.local_cache import JsonFileBillStore
from finance_splitter.services.storage.memory import InMemoryBillStore

__all__ = [
    # Interface
    "BillStoreInterface",
    # Exceptions
    "StorageError",
    "StoreUnavailableError",
    # Implementations
    "GoogleSheetsBillStore",
    "GoogleSheetsClient",
    "InMemoryBillStore",
    "JsonFileBillStore",
]
