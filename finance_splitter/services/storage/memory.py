"""In-memory bill store, created once per process and injected where needed."""

from typing import Optional

from finance_splitter.models.bill import Bill
from finance_splitter.services.storage.interface import BillStoreInterface


class InMemoryBillStore(BillStoreInterface):
    """Keeps bills in a dict keyed by id, preserving insertion order."""

    name = "memory"

    def __init__(self, bills: Optional[list[Bill]] = None):
        self._bills: dict[str, Bill] = {}
        for bill in bills or []:
            self._bills[bill.id] = bill

    async def list_bills(self) -> list[Bill]:
        return sorted(self._bills.values(), key=lambda b: (b.due_date, b.created_at))

    async def upsert_bill(self, bill: Bill) -> Bill:
        self._bills[bill.id] = bill
        return bill

    async def delete_bill(self, bill_id: str) -> None:
        self._bills.pop(bill_id, None)

    async def replace_all(self, bills: list[Bill]) -> None:
        self._bills = {bill.id: bill for bill in bills}

    async def clear(self) -> None:
        self._bills.clear()

    def __len__(self) -> int:
        return len(self._bills)
