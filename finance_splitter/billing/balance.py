"""
Balance calculation for the settlement month.

The summary only looks at bills due in the calendar month of the
earliest due date in the collection (the settlement month), so the
balance card shows the next payment rather than the whole year.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from finance_splitter.models.bill import Bill, BillSummary, Person


DUE_SOON_DAYS = 3

_CENTS = Decimal("0.01")


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _round(amount: Decimal) -> Decimal:
    return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def days_until_due(bill: Bill, today: date) -> int:
    """Whole days until the due date; negative when overdue, 0 when due today."""
    return (bill.due_date - today).days


def is_overdue(bill: Bill, today: date) -> bool:
    return bill.due_date < today


def is_due_soon(bill: Bill, today: date) -> bool:
    """Due today or within the next ``DUE_SOON_DAYS`` days."""
    return 0 <= days_until_due(bill, today) <= DUE_SOON_DAYS


def settlement_month_bills(bills: Iterable[Bill]) -> list[Bill]:
    """Bills due in the same calendar month as the earliest due date."""
    bills = list(bills)
    if not bills:
        return []

    month = _month_start(min(bill.due_date for bill in bills))
    return [bill for bill in bills if _month_start(bill.due_date) == month]


def settlement_month_names(bills: Iterable[Bill]) -> Optional[tuple[str, Optional[str]]]:
    """
    Names of the settlement month and of the next month with bills.

    Returns None for an empty collection; the second name is None when
    every bill falls in the settlement month.
    """
    bills = list(bills)
    if not bills:
        return None

    current = _month_start(min(bill.due_date for bill in bills))
    later = sorted(
        _month_start(bill.due_date)
        for bill in bills
        if _month_start(bill.due_date) > current
    )
    next_name = later[0].strftime("%B") if later else None
    return current.strftime("%B"), next_name


def calculate_bill_summary(
    bills: Iterable[Bill],
    today: Optional[date] = None,
) -> BillSummary:
    """
    Compute per-person paid/outstanding totals for the settlement month.

    Standard bills accrue each half to the payer's paid total when their
    flag is set, otherwise to their outstanding total. The Credit Card Pot
    accrues each person's cumulative contribution (up to their share) as
    paid and the remainder of their share as outstanding.

    A bill counts as unpaid when it is due soon or overdue and someone has
    not settled it; as overdue when its due date is before today and
    someone has not settled it.
    """
    today = today or date.today()
    window = settlement_month_bills(bills)

    total_amount = Decimal("0")
    unpaid_bills = 0
    overdue_bills = 0
    paid = {person: Decimal("0") for person in Person}
    outstanding = {person: Decimal("0") for person in Person}

    for bill in window:
        total_amount += bill.total_amount
        share = bill.share

        open_bill = not bill.is_fully_settled
        if open_bill and (is_due_soon(bill, today) or is_overdue(bill, today)):
            unpaid_bills += 1
        if open_bill and is_overdue(bill, today):
            overdue_bills += 1

        for person in Person:
            if bill.is_pot:
                contributed = min(bill.paid_amount(person), share)
                paid[person] += contributed
                outstanding[person] += share - contributed
            elif bill.is_paid_by(person):
                paid[person] += share
            else:
                outstanding[person] += share

    return BillSummary(
        total_bills=len(window),
        total_amount=_round(total_amount),
        unpaid_bills=unpaid_bills,
        overdue_bills=overdue_bills,
        ire_outstanding=_round(outstanding[Person.IRE]),
        ebe_outstanding=_round(outstanding[Person.EBE]),
        ire_paid_total=_round(paid[Person.IRE]),
        ebe_paid_total=_round(paid[Person.EBE]),
    )
