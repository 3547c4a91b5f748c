"""
Persistence Gateway

Reads and writes bills through a fallback chain:

    remote store  ->  local cache  ->  regenerate the default schedule

The remote store is optional. Every remote call is bounded by a fixed
timeout; failures are logged and absorbed, never raised to the caller.
Writes go to the local cache first and then to the remote store, and
the last writer wins: there is no conflict detection.
"""

import asyncio
from datetime import date
from typing import Awaitable, Callable, Optional, TypeVar

from finance_splitter.activity import ActivityLogger
from finance_splitter.billing.schedule import (
    generate_default_bills,
    merge_by_id,
    target_year,
)
from finance_splitter.models.bill import Bill, StoreStatus, StoreStatusReport
from finance_splitter.services.storage.interface import (
    BillStoreInterface,
    StorageError,
)


T = TypeVar("T")

ScheduleFactory = Callable[[date], list[Bill]]


class BillGateway:
    """
    Single entry point for bill persistence.

    The local store handle is created once per process and injected here;
    the gateway holds no module-level state.
    """

    def __init__(
        self,
        local_store: BillStoreInterface,
        remote_store: Optional[BillStoreInterface] = None,
        remote_timeout: float = 10.0,
        activity_logger: Optional[ActivityLogger] = None,
        schedule_factory: ScheduleFactory = generate_default_bills,
    ):
        self._local = local_store
        self._remote = remote_store
        self._timeout = remote_timeout
        self._log = activity_logger or ActivityLogger()
        self._schedule_factory = schedule_factory

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    async def _call_remote(self, operation: str, call: Callable[[], Awaitable[T]]) -> T:
        """
        Run one remote call under the timeout.

        Raises:
            StorageError: On failure or timeout
        """
        try:
            return await asyncio.wait_for(call(), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise StorageError(f"{operation} timed out after {self._timeout}s")

    async def _try_remote(self, operation: str, call: Callable[[], Awaitable[T]]) -> bool:
        """Run a remote write, absorbing failures. Returns True on success."""
        if self._remote is None:
            return False
        try:
            await self._call_remote(operation, call)
            return True
        except StorageError as e:
            self._log.log_store_fallback(operation, self._remote.name, str(e))
            return False

    async def _try_local(self, operation: str, call: Callable[[], Awaitable[T]]) -> bool:
        try:
            await call()
            return True
        except StorageError as e:
            self._log.log_store_fallback(operation, self._local.name, str(e))
            return False

    def _generate(self, today: date) -> list[Bill]:
        bills = self._schedule_factory(today)
        self._log.log_schedule_generated(target_year(today), len(bills))
        return bills

    async def _list_local(self) -> list[Bill]:
        try:
            return await self._local.list_bills()
        except StorageError as e:
            self._log.log_store_fallback("list bills", self._local.name, str(e))
            return []

    async def list_with_status(
        self,
        today: Optional[date] = None,
    ) -> tuple[list[Bill], StoreStatusReport]:
        """
        List all bills, reporting whether the remote store was reachable.

        An empty collection is never returned: when no store holds bills,
        the default schedule is generated and stored.
        """
        today = today or date.today()
        error: Optional[str] = None

        if self._remote is not None:
            try:
                bills = await self._call_remote("list bills", self._remote.list_bills)
            except StorageError as e:
                error = str(e)
                self._log.log_store_fallback("list bills", self._remote.name, error)
            else:
                if bills:
                    await self._try_local("mirror bills", lambda: self._local.replace_all(bills))
                    self._log.log_bills_loaded(self._remote.name, len(bills))
                    return bills, _connected(len(bills))

                # Empty remote: seed it from the local cache, else from a new schedule
                bills = await self._list_local()
                source = self._local.name
                if not bills:
                    bills = self._generate(today)
                    source = "generated"
                    await self._try_local("store schedule", lambda: self._local.replace_all(bills))
                saved = await self._try_remote(
                    "seed remote store", lambda: self._remote.upsert_bills(bills)
                )
                self._log.log_bills_loaded(source, len(bills))
                if saved:
                    return bills, _connected(len(bills))
                return bills, _not_connected(len(bills), "Could not save bills to the remote store")

        bills = await self._list_local()
        if bills:
            self._log.log_bills_loaded(self._local.name, len(bills))
            return bills, _not_connected(len(bills), error)

        bills = self._generate(today)
        await self._try_local("store schedule", lambda: self._local.replace_all(bills))
        self._log.log_bills_loaded("generated", len(bills))
        return bills, _not_connected(len(bills), error)

    async def list_bills(self, today: Optional[date] = None) -> list[Bill]:
        """List all bills through the fallback chain."""
        bills, _ = await self.list_with_status(today)
        return bills

    async def upsert_bill(self, bill: Bill) -> Bill:
        """Create or replace one bill by id."""
        await self._try_local("save bill", lambda: self._local.upsert_bill(bill))
        await self._try_remote("save bill", lambda: self._remote.upsert_bill(bill))
        self._log.log_bill_saved(bill.id, bill.name, str(bill.total_amount))
        return bill

    async def upsert_bills(self, bills: list[Bill]) -> list[Bill]:
        if not bills:
            return bills
        await self._try_local("save bills", lambda: self._local.upsert_bills(bills))
        await self._try_remote("save bills", lambda: self._remote.upsert_bills(bills))
        return bills

    async def delete_bill(self, bill_id: str) -> None:
        """Delete one bill by id; unknown ids are a no-op."""
        await self._try_local("delete bill", lambda: self._local.delete_bill(bill_id))
        await self._try_remote("delete bill", lambda: self._remote.delete_bill(bill_id))
        self._log.log_bill_deleted(bill_id)

    async def regenerate(self, today: Optional[date] = None) -> list[Bill]:
        """
        Merge a freshly generated schedule into the stored bills.

        Stored bills keep their payment state; only ids that are missing
        are added. Returns the merged collection.
        """
        today = today or date.today()
        existing = await self.list_bills(today)
        merged = merge_by_id(existing, self._generate(today))

        known = {bill.id for bill in existing}
        added = [bill for bill in merged if bill.id not in known]
        await self.upsert_bills(added)
        return merged

    async def check_store(self) -> StoreStatusReport:
        """Probe the remote store without falling back."""
        if self._remote is None:
            report = StoreStatusReport(
                status=StoreStatus.NOT_CONNECTED,
                database="unavailable",
                bills_count=len(await self._list_local()),
                message="Remote store is not configured. Using the local cache.",
            )
        else:
            try:
                bills = await self._call_remote("check store", self._remote.list_bills)
                report = _connected(len(bills))
            except StorageError as e:
                report = StoreStatusReport(
                    status=StoreStatus.NOT_CONNECTED,
                    database="unavailable",
                    bills_count=0,
                    message="Remote store is not reachable. Using the local cache.",
                    error=str(e),
                )

        self._log.log_store_status(report.status.value, report.bills_count)
        return report


def _connected(count: int) -> StoreStatusReport:
    return StoreStatusReport(
        status=StoreStatus.CONNECTED,
        database="available",
        bills_count=count,
        message="Remote store is working correctly.",
    )


def _not_connected(count: int, error: Optional[str] = None) -> StoreStatusReport:
    return StoreStatusReport(
        status=StoreStatus.NOT_CONNECTED,
        database="unavailable",
        bills_count=count,
        message="Remote store is not available. Using the local cache.",
        error=error,
    )
