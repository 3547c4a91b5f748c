"""
Bill Schedule Generator

Produces the recurring bills for one fiscal window:

- Rent, Council Tax and Water on the 1st of January..October
- Electricity on the 19th of January..December
- A single Credit Card Pot due on October 31

The window targets the current year until October is over; from
November onwards it targets the next year. Output is deterministic for
a given ``today`` and ``created_at`` base, and ids are derived from the
bill type and due date, so regenerating never duplicates a bill.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from finance_splitter.models.bill import POT_BILL_ID, Bill, BillType


RENT_AMOUNT = Decimal("1420.00")
COUNCIL_TAX_AMOUNT = Decimal("153.00")
CREDIT_CARD_POT_TARGET = Decimal("5400.00")

# Last month (1-based) of the current year's window; later months roll over.
ROLLOVER_MONTH = 10

MONTHLY_DUE_DAY = 1
ELECTRICITY_DUE_DAY = 19

# (type, fixed amount) for bills due on the 1st through October.
_FIRST_OF_MONTH_BILLS = (
    (BillType.RENT, RENT_AMOUNT),
    (BillType.COUNCIL_TAX, COUNCIL_TAX_AMOUNT),
    (BillType.WATER, Decimal("0.00")),
)


def target_year(today: date) -> int:
    """Year the schedule covers: next year once ``today`` is past October."""
    if today.month > ROLLOVER_MONTH:
        return today.year + 1
    return today.year


def bill_id(bill_type: BillType, due_date: date) -> str:
    """Stable id for a recurring bill, e.g. ``bill-council-tax-2025-03-01``."""
    if bill_type is BillType.CREDIT_CARD_POT:
        return POT_BILL_ID
    return f"bill-{bill_type.slug}-{due_date.isoformat()}"


def _unpaid_bill(
    bill_type: BillType,
    amount: Decimal,
    due_date: date,
    created_at: int,
) -> Bill:
    return Bill(
        id=bill_id(bill_type, due_date),
        name=bill_type.value,
        total_amount=amount,
        due_date=due_date,
        created_at=created_at,
    )


def generate_default_bills(
    today: Optional[date] = None,
    created_at: Optional[int] = None,
) -> list[Bill]:
    """
    Generate the full default schedule for the window containing ``today``.

    Args:
        today: Reference date (defaults to the current date)
        created_at: Base creation marker in ms; each bill gets
            ``created_at + index`` (defaults to now)

    Returns:
        Bills in emission order: Rent, Council Tax, Water, Electricity
        (with a December carry-over first when in December), then the pot.
    """
    today = today or date.today()
    base = created_at if created_at is not None else int(datetime.now().timestamp() * 1000)
    year = target_year(today)

    bills: list[Bill] = []

    def emit(bill_type: BillType, amount: Decimal, due_date: date) -> None:
        bills.append(_unpaid_bill(bill_type, amount, due_date, base + len(bills)))

    for bill_type, amount in _FIRST_OF_MONTH_BILLS:
        for month in range(1, ROLLOVER_MONTH + 1):
            emit(bill_type, amount, date(year, month, MONTHLY_DUE_DAY))

    # Keep the in-progress December bill when the window has rolled over
    if today.month == 12 and year == today.year + 1:
        emit(BillType.ELECTRICITY, Decimal("0.00"), date(today.year, 12, ELECTRICITY_DUE_DAY))

    for month in range(1, 13):
        emit(BillType.ELECTRICITY, Decimal("0.00"), date(year, month, ELECTRICITY_DUE_DAY))

    pot = _unpaid_bill(
        BillType.CREDIT_CARD_POT,
        CREDIT_CARD_POT_TARGET,
        date(year, ROLLOVER_MONTH, 31),
        base + len(bills),
    )
    bills.append(pot.model_copy(update={
        "ire_paid_amount": Decimal("0"),
        "ebe_paid_amount": Decimal("0"),
    }))

    return bills


def merge_by_id(existing: list[Bill], generated: list[Bill]) -> list[Bill]:
    """
    Merge a generated schedule into existing bills.

    Existing records win; generated bills are added only when their id
    is not present yet. Order: existing bills, then new ones.
    """
    known = {bill.id for bill in existing}
    merged = list(existing)
    for bill in generated:
        if bill.id not in known:
            merged.append(bill)
            known.add(bill.id)
    return merged
