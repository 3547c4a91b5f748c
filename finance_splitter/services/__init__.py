"""Services package."""

from finance_splitter.services.gateway import BillGateway
from finance_splitter.services.storage import (
    BillStoreInterface,
    GoogleSheetsBillStore,
    GoogleSheetsClient,
    InMemoryBillStore,
    JsonFileBillStore,
    StorageError,
    StoreUnavailableError,
)

__all__ = [
    # Gateway
    "BillGateway",
    # Storage services
    "BillStoreInterface",
    "GoogleSheetsBillStore",
    "GoogleSheetsClient",
    "InMemoryBillStore",
    "JsonFileBillStore",
    "StorageError",
    "StoreUnavailableError",
]
