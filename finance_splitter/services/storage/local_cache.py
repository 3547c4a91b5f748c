"""
JSON File Local Cache

Bills are kept in a single JSON file named after the fixed storage key
(``finance-splitter-bills.json``). The file holds a list of records with
camelCase field names, the same shape the remote store serves.

A missing file reads as an empty cache. A corrupt file is logged and
read as empty; individual malformed records are skipped.
"""

import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError

from finance_splitter.models.bill import Bill
from finance_splitter.services.storage.interface import (
    BillStoreInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileBillStore(BillStoreInterface):
    """Local cache backed by one JSON file."""

    name = "local_cache"

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Bill]:
        if not self._path.exists():
            return {}

        try:
            records = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("local_cache_unreadable", path=str(self._path), error=str(e))
            return {}

        if not isinstance(records, list):
            logger.error("local_cache_unreadable", path=str(self._path), error="not a list")
            return {}

        bills: dict[str, Bill] = {}
        for record in records:
            try:
                bill = Bill.model_validate(record)
            except ValidationError as e:
                logger.warning("local_cache_record_skipped", error=str(e))
                continue
            bills[bill.id] = bill
        return bills

    def _write(self, bills: dict[str, Bill]) -> None:
        payload = json.dumps(
            [bill.to_record() for bill in bills.values()],
            indent=2,
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
            )
        except OSError as e:
            raise StorageError(f"Failed to write local cache {self._path}: {e}")

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self._path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write local cache {self._path}: {e}")

    async def list_bills(self) -> list[Bill]:
        bills = self._read()
        return sorted(bills.values(), key=lambda b: (b.due_date, b.created_at))

    async def upsert_bill(self, bill: Bill) -> Bill:
        bills = self._read()
        bills[bill.id] = bill
        self._write(bills)
        return bill

    async def upsert_bills(self, bills: list[Bill]) -> list[Bill]:
        stored = self._read()
        for bill in bills:
            stored[bill.id] = bill
        self._write(stored)
        return bills

    async def delete_bill(self, bill_id: str) -> None:
        bills = self._read()
        if bills.pop(bill_id, None) is not None:
            self._write(bills)

    async def replace_all(self, bills: list[Bill]) -> None:
        self._write({bill.id: bill for bill in bills})

    async def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to clear local cache {self._path}: {e}")
