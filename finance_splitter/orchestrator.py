"""
Main Orchestrator for Finance Splitter

Ties the components together and defines the flows behind each UI action:
1. Load (gateway -> filter to upcoming bills -> regenerate when stale)
2. Payment toggles, per bill and per month
3. Edits, new bills, pot contributions and deletes

Every write is a read-modify-write of a single bill through the gateway.
Unknown bill ids are a no-op and invalid form input performs no write.
"""

from datetime import date
from typing import Optional

from finance_splitter.activity import ActivityLogger, configure_logging
from finance_splitter.billing import (
    apply_edit,
    calculate_bill_summary,
    group_bills,
    new_bill,
    record_pot_payment,
    set_month_payment,
    toggle_payment,
)
from finance_splitter.config import AppSettings, get_settings
from finance_splitter.models.bill import (
    Bill,
    BillSummary,
    BillType,
    Person,
    StoreStatusReport,
    ValidationResult,
)
from finance_splitter.services import (
    BillGateway,
    BillStoreInterface,
    GoogleSheetsBillStore,
    GoogleSheetsClient,
    InMemoryBillStore,
    JsonFileBillStore,
    StoreUnavailableError,
)
from finance_splitter.validation import BillInputValidator


EXPECTED_BILL_TYPES = {bill_type.value for bill_type in BillType}

# Fewer upcoming bills than this, with a type missing, means the schedule is incomplete
MIN_COMPLETE_SCHEDULE = 10


def upcoming_bills(bills: list[Bill], today: date) -> list[Bill]:
    """Bills due today or later."""
    return [bill for bill in bills if bill.due_date >= today]


def is_schedule_stale(bills: list[Bill], today: date) -> bool:
    """
    True when the stored schedule should be regenerated.

    That is when nothing is upcoming, or when a standard bill type is
    missing from the upcoming bills and fewer than
    ``MIN_COMPLETE_SCHEDULE`` of them remain.
    """
    upcoming = upcoming_bills(bills, today)
    if not upcoming:
        return True
    present = {bill.name for bill in upcoming}
    has_all_types = EXPECTED_BILL_TYPES <= present
    return not has_all_types and len(upcoming) < MIN_COMPLETE_SCHEDULE


class BillTracker:
    """
    Orchestrates the bill board.

    Flows return the stored Bill (or None when nothing was written) and,
    for form input, the ValidationResult so the UI can show issues.
    """

    def __init__(
        self,
        gateway: BillGateway,
        validator: Optional[BillInputValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._gateway = gateway
        self._validator = validator or BillInputValidator()
        self._log = activity_logger or ActivityLogger()

    @property
    def gateway(self) -> BillGateway:
        return self._gateway

    async def load_bills(self, today: Optional[date] = None) -> list[Bill]:
        """
        Load the bills to display.

        Normally the upcoming bills. When the stored schedule is stale it
        is regenerated and the display also keeps this year's past bills,
        so a board rolled over in November still shows the year just ended.
        """
        today = today or date.today()
        bills = await self._gateway.list_bills(today)

        if not is_schedule_stale(bills, today):
            return upcoming_bills(bills, today)

        regenerated = await self._gateway.regenerate(today)
        return [
            bill for bill in regenerated
            if bill.due_date >= today or bill.due_date.year == today.year
        ]

    def summarize(self, bills: list[Bill], today: Optional[date] = None) -> BillSummary:
        return calculate_bill_summary(bills, today)

    async def _find(self, bill_id: str, today: Optional[date] = None) -> Optional[Bill]:
        for bill in await self._gateway.list_bills(today):
            if bill.id == bill_id:
                return bill
        return None

    async def toggle_payment(
        self,
        bill_id: str,
        person: Person,
        today: Optional[date] = None,
    ) -> Optional[Bill]:
        """Flip one person's paid flag on one bill."""
        today = today or date.today()
        bill = await self._find(bill_id, today)
        if bill is None:
            return None

        updated = toggle_payment(bill, person, today)
        await self._gateway.upsert_bill(updated)
        self._log.log_payment_updated(bill_id, person.value, paid=updated.is_paid_by(person))
        return updated

    async def set_month_payment(
        self,
        bill_name: str,
        month: str,
        person: Person,
        paid: bool,
        today: Optional[date] = None,
    ) -> list[Bill]:
        """
        Mark every bill of one type in one ``yyyy-MM`` month paid or unpaid.

        Returns the bills that changed.
        """
        today = today or date.today()
        bills = await self._gateway.list_bills(today)
        month_bills = group_bills(bills).get(bill_name, {}).get(month, [])

        changed = set_month_payment(month_bills, person, paid, today)
        await self._gateway.upsert_bills(changed)
        for bill in changed:
            self._log.log_payment_updated(bill.id, person.value, paid=paid)
        return changed

    async def edit_bill(
        self,
        bill_id: str,
        name: Optional[str],
        amount,
        due_date: Optional[date],
    ) -> tuple[Optional[Bill], ValidationResult]:
        """Apply the edit form to an existing bill."""
        result = self._validator.validate_edit(bill_id, name, amount, due_date)
        if not result.is_valid:
            self._log.log_input_rejected("edit_bill", [i.model_dump() for i in result.issues])
            return None, result

        bill = await self._find(bill_id)
        if bill is None:
            return None, result

        cleaned = result.cleaned
        updated = apply_edit(bill, cleaned.name, cleaned.total_amount, cleaned.due_date)
        await self._gateway.upsert_bill(updated)
        return updated, result

    async def add_bill(
        self,
        name: Optional[str],
        amount,
        due_date: Optional[date],
    ) -> tuple[Optional[Bill], ValidationResult]:
        """Create a new custom bill from the add form."""
        result = self._validator.validate_new(name, amount, due_date)
        if not result.is_valid:
            self._log.log_input_rejected("add_bill", [i.model_dump() for i in result.issues])
            return None, result

        cleaned = result.cleaned
        bill = await self._gateway.upsert_bill(
            new_bill(cleaned.name, cleaned.total_amount, cleaned.due_date)
        )
        return bill, result

    async def record_pot_payment(
        self,
        bill_id: str,
        person: Person,
        amount,
    ) -> tuple[Optional[Bill], ValidationResult]:
        """Add a contribution to a person's cumulative pot amount."""
        result = self._validator.validate_pot_amount(bill_id, amount)
        if not result.is_valid:
            self._log.log_input_rejected("pot_payment", [i.model_dump() for i in result.issues])
            return None, result

        bill = await self._find(bill_id)
        if bill is None or not bill.is_pot:
            return None, result

        updated = record_pot_payment(bill, person, result.amount)
        await self._gateway.upsert_bill(updated)
        self._log.log_payment_updated(bill_id, person.value, amount=str(result.amount))
        return updated, result

    async def delete_bill(self, bill_id: str) -> None:
        await self._gateway.delete_bill(bill_id)

    async def store_status(self) -> StoreStatusReport:
        return await self._gateway.check_store()


def _build_remote_store(
    settings: AppSettings,
    activity_logger: ActivityLogger,
) -> Optional[BillStoreInterface]:
    if not settings.use_remote_store:
        return None
    try:
        client = GoogleSheetsClient(connect_attempts=settings.remote_connect_attempts)
    except StoreUnavailableError as e:
        # Not configured - continue on the local cache
        activity_logger.log_store_fallback("configure", "google_sheets", str(e))
        return None
    return GoogleSheetsBillStore(client)


def create_app_components(
    settings: Optional[AppSettings] = None,
    local_store: Optional[BillStoreInterface] = None,
    remote_store: Optional[BillStoreInterface] = None,
) -> tuple[BillTracker, BillGateway]:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings (defaults to the cached settings)
        local_store: Local cache handle; built from settings when omitted
        remote_store: Remote store; built from settings when omitted

    Returns:
        (bill_tracker, gateway)
    """
    settings = settings or get_settings().app
    configure_logging(settings.log_level)
    activity_logger = ActivityLogger()

    if local_store is None:
        cache_path = settings.local_cache_path
        local_store = JsonFileBillStore(cache_path) if cache_path else InMemoryBillStore()

    if remote_store is None:
        remote_store = _build_remote_store(settings, activity_logger)

    gateway = BillGateway(
        local_store=local_store,
        remote_store=remote_store,
        remote_timeout=settings.remote_timeout_seconds,
        activity_logger=activity_logger,
    )
    tracker = BillTracker(gateway, activity_logger=activity_logger)
    return tracker, gateway
