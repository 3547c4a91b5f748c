"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for bill storage.
The same operations are served by:
1. Google Sheets (the remote store)
2. A JSON file (the local cache)
3. An in-memory store (no cache directory configured, and tests)

The interface is intentionally small: list, upsert by id, delete by id,
and whole-collection replacement for cache mirroring.
"""

from abc import ABC, abstractmethod

from finance_splitter.models.bill import Bill


class BillStoreInterface(ABC):
    """
    Abstract interface for bill storage operations.

    Records are keyed by ``Bill.id``; writes are upserts and the last
    writer wins.
    """

    #: Short name used in log events
    name: str = "store"

    @abstractmethod
    async def list_bills(self) -> list[Bill]:
        """
        Return all stored bills ordered by due date.

        Raises:
            StorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def upsert_bill(self, bill: Bill) -> Bill:
        """
        Insert a bill, or replace the stored bill with the same id.

        Returns:
            The stored bill

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_bill(self, bill_id: str) -> None:
        """
        Delete a bill by id. Deleting an unknown id is a no-op.

        Raises:
            StorageError: If the delete fails
        """
        pass

    async def upsert_bills(self, bills: list[Bill]) -> list[Bill]:
        """Upsert several bills; backends may batch this."""
        return [await self.upsert_bill(bill) for bill in bills]

    async def replace_all(self, bills: list[Bill]) -> None:
        """Replace the whole collection."""
        await self.clear()
        await self.upsert_bills(bills)

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored bill."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StoreUnavailableError(StorageError):
    """Store backend is unreachable or not configured."""
    pass
