"""
Google Sheets Storage Implementation

The remote store keeps one bill per row in a worksheet whose header row
mirrors the bill record (``id, name, total_amount, due_date, ...``).
The worksheet is created with its header when absent.

TRADEOFFS:
- Lookups by id scan the sheet (fine for a household's few dozen bills)
- No transactions; an upsert rewrites the whole row, last writer wins

gspread is blocking, so every public operation runs in a worker thread.
That lets the gateway bound each call with ``asyncio.wait_for``.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional

import gspread
from gspread.utils import rowcol_to_a1
from google.oauth2.service_account import Credentials
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_splitter.config import GoogleSheetsSettings, get_settings
from finance_splitter.models.bill import Bill
from finance_splitter.services.storage.interface import (
    BillStoreInterface,
    StorageError,
    StoreUnavailableError,
)


# Column mappings for the Bills sheet
BILL_COLUMNS = [
    "id",
    "name",
    "total_amount",
    "due_date",
    "ire_paid",
    "ebe_paid",
    "ire_paid_date",
    "ebe_paid_date",
    "ire_paid_amount",
    "ebe_paid_amount",
    "created_at",
]

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and retries the connection handshake.
    """

    def __init__(
        self,
        settings: Optional[GoogleSheetsSettings] = None,
        connect_attempts: int = 2,
    ):
        if settings is None:
            try:
                settings = get_settings().google_sheets
            except ValidationError as e:
                raise StoreUnavailableError(f"Google Sheets is not configured: {e}")

        self._settings = settings
        self._connect_attempts = connect_attempts
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._bills_sheet: Optional[gspread.Worksheet] = None

    def _authorize(self) -> gspread.Client:
        try:
            credentials = Credentials.from_service_account_file(
                self._settings.credentials_path,
                scopes=SCOPES,
            )
        except FileNotFoundError:
            raise StoreUnavailableError(
                f"Google credentials file not found: {self._settings.credentials_path}"
            )
        return gspread.authorize(credentials)

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            retrying = Retrying(
                stop=stop_after_attempt(self._connect_attempts),
                wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
                retry=retry_if_not_exception_type(StoreUnavailableError),
                reraise=True,
            )
            try:
                self._client = retrying(self._authorize)
            except StoreUnavailableError:
                raise
            except Exception as e:
                raise StoreUnavailableError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StoreUnavailableError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_bills_sheet(self) -> gspread.Worksheet:
        """Get or create the Bills worksheet."""
        if self._bills_sheet is None:
            spreadsheet = self.get_spreadsheet()
            try:
                sheet = spreadsheet.worksheet(self._settings.bills_sheet_name)
            except gspread.WorksheetNotFound:
                sheet = spreadsheet.add_worksheet(
                    title=self._settings.bills_sheet_name,
                    rows=1000,
                    cols=len(BILL_COLUMNS),
                )
                sheet.append_row(BILL_COLUMNS)
            else:
                # An existing but empty worksheet still needs its header row
                if not sheet.row_values(1):
                    sheet.append_row(BILL_COLUMNS)
            self._bills_sheet = sheet
        return self._bills_sheet


def bill_to_row(bill: Bill) -> list[str]:
    """Convert a Bill to a spreadsheet row."""
    def opt(value) -> str:
        if value is None:
            return ""
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    return [
        bill.id,
        bill.name,
        str(bill.total_amount),
        bill.due_date.isoformat(),
        "TRUE" if bill.ire_paid else "FALSE",
        "TRUE" if bill.ebe_paid else "FALSE",
        opt(bill.ire_paid_date),
        opt(bill.ebe_paid_date),
        opt(bill.ire_paid_amount),
        opt(bill.ebe_paid_amount),
        str(bill.created_at),
    ]


def row_to_bill(row: list[str]) -> Bill:
    """
    Convert a spreadsheet row to a Bill.

    Raises:
        ValueError: If the row does not describe a valid bill
            (pydantic's ValidationError is a ValueError)
    """
    # Handle missing trailing columns gracefully
    def safe_get(column: str) -> str:
        index = BILL_COLUMNS.index(column)
        try:
            return row[index].strip() if row[index] else ""
        except IndexError:
            return ""

    def opt_date(column: str) -> Optional[date]:
        value = safe_get(column)
        return date.fromisoformat(value) if value else None

    def opt_decimal(column: str) -> Optional[Decimal]:
        value = safe_get(column)
        return Decimal(value) if value else None

    return Bill(
        id=safe_get("id"),
        name=safe_get("name"),
        total_amount=Decimal(safe_get("total_amount") or "0"),
        due_date=date.fromisoformat(safe_get("due_date")),
        ire_paid=safe_get("ire_paid").lower() == "true",
        ebe_paid=safe_get("ebe_paid").lower() == "true",
        ire_paid_date=opt_date("ire_paid_date"),
        ebe_paid_date=opt_date("ebe_paid_date"),
        ire_paid_amount=opt_decimal("ire_paid_amount"),
        ebe_paid_amount=opt_decimal("ebe_paid_amount"),
        created_at=int(safe_get("created_at") or 0),
    )


def _row_range(row_index: int) -> str:
    return f"A{row_index}:{rowcol_to_a1(row_index, len(BILL_COLUMNS))}"


class GoogleSheetsBillStore(BillStoreInterface):
    """
    Google Sheets implementation of the bill store.

    Row 1 is the header; data rows start at row 2.
    """

    name = "google_sheets"

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_index_by_id(self, all_rows: list[list[str]]) -> dict[str, int]:
        return {
            row[0]: idx
            for idx, row in enumerate(all_rows[1:], start=2)
            if row and row[0]
        }

    def _list_bills(self) -> list[Bill]:
        sheet = self._client.get_bills_sheet()
        all_rows = sheet.get_all_values()[1:]  # Skip header

        bills = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                bills.append(row_to_bill(row))
            except (ValueError, ArithmeticError):
                continue  # Skip malformed rows

        bills.sort(key=lambda b: (b.due_date, b.created_at))
        return bills

    def _upsert_bills(self, bills: list[Bill]) -> list[Bill]:
        sheet = self._client.get_bills_sheet()
        row_index = self._row_index_by_id(sheet.get_all_values())

        updates = []
        appends = []
        for bill in bills:
            row = bill_to_row(bill)
            if bill.id in row_index:
                updates.append({"range": _row_range(row_index[bill.id]), "values": [row]})
            else:
                appends.append(row)

        if updates:
            sheet.batch_update(updates, value_input_option="RAW")
        if appends:
            sheet.append_rows(appends, value_input_option="RAW")
        return bills

    def _delete_bill(self, bill_id: str) -> None:
        sheet = self._client.get_bills_sheet()
        row_index = self._row_index_by_id(sheet.get_all_values())
        if bill_id in row_index:
            sheet.delete_rows(row_index[bill_id])

    def _clear(self) -> None:
        sheet = self._client.get_bills_sheet()
        row_count = len(sheet.get_all_values())
        if row_count > 1:
            sheet.delete_rows(2, row_count)

    async def _run(self, operation: str, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to {operation}: {e}") from e

    async def list_bills(self) -> list[Bill]:
        """List every bill in the sheet, ordered by due date."""
        return await self._run("list bills", self._list_bills)

    async def upsert_bill(self, bill: Bill) -> Bill:
        """Update the row with this bill's id, or append a new row."""
        await self._run("save bill", self._upsert_bills, [bill])
        return bill

    async def upsert_bills(self, bills: list[Bill]) -> list[Bill]:
        """Upsert many bills with one read, one batch update and one append."""
        return await self._run("save bills", self._upsert_bills, bills)

    async def delete_bill(self, bill_id: str) -> None:
        await self._run("delete bill", self._delete_bill, bill_id)

    async def clear(self) -> None:
        await self._run("clear bills", self._clear)
