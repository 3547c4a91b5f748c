"""
Tests for the persistence gateway fallback chain.

Remote stores are in-memory fakes; the failing and slow variants stand in
for an unreachable Google Sheet.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from finance_splitter.billing.schedule import generate_default_bills
from finance_splitter.models.bill import Bill, StoreStatus
from finance_splitter.services import BillGateway, InMemoryBillStore, StorageError


TODAY = date(2025, 3, 10)
SCHEDULE_SIZE = len(generate_default_bills(TODAY, created_at=0))


def fixed_schedule(today: date) -> list[Bill]:
    return generate_default_bills(today, created_at=0)


def custom_bill(bill_id: str = "bill-custom-1") -> Bill:
    return Bill(
        id=bill_id,
        name="Broadband",
        total_amount=Decimal("45.00"),
        due_date=date(2025, 4, 2),
        created_at=0,
    )


class FailingStore(InMemoryBillStore):
    """Remote store that is always unreachable."""

    name = "failing"

    async def list_bills(self):
        raise StorageError("connection refused")

    async def upsert_bill(self, bill):
        raise StorageError("connection refused")

    async def upsert_bills(self, bills):
        raise StorageError("connection refused")

    async def delete_bill(self, bill_id):
        raise StorageError("connection refused")


class SlowStore(InMemoryBillStore):
    """Remote store that never answers in time."""

    name = "slow"

    async def list_bills(self):
        await asyncio.sleep(5)
        return []


def make_gateway(local=None, remote=None, timeout=1.0) -> BillGateway:
    return BillGateway(
        local_store=local if local is not None else InMemoryBillStore(),
        remote_store=remote,
        remote_timeout=timeout,
        schedule_factory=fixed_schedule,
    )


class TestListWithStatus:
    """Tests for the remote -> local -> generate chain."""

    def test_no_remote_generates_and_caches(self):
        local = InMemoryBillStore()
        bills, report = asyncio.run(make_gateway(local).list_with_status(TODAY))

        assert len(bills) == SCHEDULE_SIZE
        assert len(local) == SCHEDULE_SIZE
        assert report.status == StoreStatus.NOT_CONNECTED
        assert report.database == "unavailable"

    def test_remote_bills_are_mirrored_locally(self):
        local = InMemoryBillStore([custom_bill("bill-stale")])
        remote = InMemoryBillStore([custom_bill()])

        bills, report = asyncio.run(make_gateway(local, remote).list_with_status(TODAY))

        assert [b.id for b in bills] == ["bill-custom-1"]
        assert [b.id for b in asyncio.run(local.list_bills())] == ["bill-custom-1"]
        assert report.is_connected
        assert report.bills_count == 1

    def test_empty_remote_is_seeded_from_local_cache(self):
        local = InMemoryBillStore([custom_bill()])
        remote = InMemoryBillStore()

        bills, report = asyncio.run(make_gateway(local, remote).list_with_status(TODAY))

        assert [b.id for b in bills] == ["bill-custom-1"]
        assert len(remote) == 1
        assert report.is_connected

    def test_empty_everywhere_seeds_remote_with_schedule(self):
        local = InMemoryBillStore()
        remote = InMemoryBillStore()

        bills, report = asyncio.run(make_gateway(local, remote).list_with_status(TODAY))

        assert len(bills) == SCHEDULE_SIZE
        assert len(remote) == SCHEDULE_SIZE
        assert len(local) == SCHEDULE_SIZE
        assert report.is_connected

    def test_failing_remote_falls_back_to_local(self):
        local = InMemoryBillStore([custom_bill()])

        bills, report = asyncio.run(make_gateway(local, FailingStore()).list_with_status(TODAY))

        assert [b.id for b in bills] == ["bill-custom-1"]
        assert report.status == StoreStatus.NOT_CONNECTED
        assert report.error == "connection refused"

    def test_slow_remote_times_out(self):
        local = InMemoryBillStore([custom_bill()])
        gateway = make_gateway(local, SlowStore(), timeout=0.05)

        bills, report = asyncio.run(gateway.list_with_status(TODAY))

        assert [b.id for b in bills] == ["bill-custom-1"]
        assert "timed out" in report.error

    def test_failing_remote_and_empty_cache_generates(self):
        bills = asyncio.run(make_gateway(remote=FailingStore()).list_bills(TODAY))
        assert len(bills) == SCHEDULE_SIZE


class TestWrites:
    """Writes hit the local cache first and never raise on remote failure."""

    def test_upsert_survives_remote_failure(self):
        local = InMemoryBillStore()
        gateway = make_gateway(local, FailingStore())

        saved = asyncio.run(gateway.upsert_bill(custom_bill()))

        assert saved.id == "bill-custom-1"
        assert len(local) == 1

    def test_upsert_writes_both_stores(self):
        local, remote = InMemoryBillStore(), InMemoryBillStore()
        asyncio.run(make_gateway(local, remote).upsert_bills([custom_bill()]))
        assert len(local) == 1
        assert len(remote) == 1

    def test_delete(self):
        local = InMemoryBillStore([custom_bill()])
        remote = InMemoryBillStore([custom_bill()])

        asyncio.run(make_gateway(local, remote).delete_bill("bill-custom-1"))

        assert len(local) == 0
        assert len(remote) == 0


class TestRegenerate:
    def test_keeps_payment_state_and_adds_missing(self):
        paid = fixed_schedule(TODAY)[0].model_copy(
            update={"ire_paid": True, "ire_paid_date": date(2025, 1, 1)}
        )
        local = InMemoryBillStore([paid, custom_bill()])

        merged = asyncio.run(make_gateway(local).regenerate(TODAY))

        assert len(merged) == SCHEDULE_SIZE + 1
        stored = {b.id: b for b in asyncio.run(local.list_bills())}
        assert stored[paid.id].ire_paid is True
        assert "bill-custom-1" in stored
        assert len(stored) == SCHEDULE_SIZE + 1


class TestCheckStore:
    def test_without_remote(self):
        report = asyncio.run(make_gateway(InMemoryBillStore([custom_bill()])).check_store())
        assert report.status == StoreStatus.NOT_CONNECTED
        assert report.bills_count == 1

    def test_reachable_remote(self):
        report = asyncio.run(make_gateway(remote=InMemoryBillStore([custom_bill()])).check_store())
        assert report.is_connected
        assert report.database == "available"

    @pytest.mark.parametrize("remote", [FailingStore(), SlowStore()])
    def test_unreachable_remote(self, remote):
        report = asyncio.run(make_gateway(remote=remote, timeout=0.05).check_store())
        assert not report.is_connected
        assert report.error
