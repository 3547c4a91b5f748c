"""
Presentation grouping: bills by type, then by month.

Builds the view models the UI renders. No formatting of currency happens
here; amounts stay Decimal.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from finance_splitter.billing.balance import DUE_SOON_DAYS, days_until_due, is_due_soon
from finance_splitter.models.bill import Bill, BillType, Person


STANDARD_BILL_ORDER = [bill_type.value for bill_type in BillType]


class MonthGroup(BaseModel):
    """Bills of one type due in one calendar month."""

    month_key: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    label: str
    bills: list[Bill]
    total: Decimal
    per_person: Decimal
    ire_paid: bool
    ebe_paid: bool
    ire_partial: bool
    ebe_partial: bool
    overdue: bool
    due_soon: bool

    @property
    def fully_paid(self) -> bool:
        return self.ire_paid and self.ebe_paid

    def paid_by(self, person: Person) -> bool:
        return getattr(self, f"{person.prefix}_paid")

    def partial_for(self, person: Person) -> bool:
        return getattr(self, f"{person.prefix}_partial")


class BillTypeGroup(BaseModel):
    """All months of one bill type, earliest month first."""

    name: str
    months: list[MonthGroup]
    next_month_total: Decimal
    next_month_count: int
    countdown: Optional[str] = None


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")


def countdown_text(days: int) -> str:
    """Human label for the number of days until a due date."""
    if days < 0:
        return "overdue"
    if days == 0:
        return "today"
    if days == 1:
        return "in 1 day"
    return f"in {days} days"


def group_bills(bills: Iterable[Bill]) -> dict[str, dict[str, list[Bill]]]:
    """
    Group bills by name, then by ``yyyy-MM`` month key.

    Month keys are sorted ascending and bills within a month by due date.
    """
    grouped: dict[str, dict[str, list[Bill]]] = defaultdict(lambda: defaultdict(list))
    for bill in bills:
        grouped[bill.name][month_key(bill.due_date)].append(bill)

    return {
        name: {
            key: sorted(months[key], key=lambda b: b.due_date)
            for key in sorted(months)
        }
        for name, months in grouped.items()
    }


def _has_due_soon(bills: list[Bill], today: date) -> bool:
    return any(
        is_due_soon(bill, today) and not bill.is_fully_settled
        for bill in bills
    )


def order_bill_types(
    grouped: dict[str, dict[str, list[Bill]]],
    today: date,
) -> list[str]:
    """
    Display order for bill type names.

    Standard types with an unsettled bill due soon come first, then by
    earliest due date. Non-standard names follow in first-seen order.
    """
    def sort_key(name: str) -> tuple[bool, date]:
        bills = [bill for month in grouped[name].values() for bill in month]
        earliest = min(bill.due_date for bill in bills)
        return (not _has_due_soon(bills, today), earliest)

    standard = sorted(
        (name for name in STANDARD_BILL_ORDER if grouped.get(name)),
        key=sort_key,
    )
    others = [name for name in grouped if name not in STANDARD_BILL_ORDER]
    return standard + others


def build_month_group(key: str, bills: list[Bill], today: date) -> MonthGroup:
    """Summarize one month of bills for display."""
    total = sum((bill.total_amount for bill in bills), Decimal("0"))
    latest = max(bill.due_date for bill in bills)

    paid = {person: all(bill.is_paid_by(person) for bill in bills) for person in Person}
    partial = {
        person: any(bill.is_paid_by(person) for bill in bills) and not paid[person]
        for person in Person
    }
    fully_paid = all(paid.values())
    days = (latest - today).days
    overdue = latest < today and not fully_paid

    return MonthGroup(
        month_key=key,
        label=bills[0].due_date.strftime("%B %Y"),
        bills=bills,
        total=total,
        per_person=total / 2 if total > 0 else Decimal("0"),
        ire_paid=paid[Person.IRE],
        ebe_paid=paid[Person.EBE],
        ire_partial=partial[Person.IRE],
        ebe_partial=partial[Person.EBE],
        overdue=overdue,
        due_soon=0 <= days <= DUE_SOON_DAYS and not fully_paid and not overdue,
    )


def build_bill_groups(bills: Iterable[Bill], today: Optional[date] = None) -> list[BillTypeGroup]:
    """Build ordered bill type groups ready for rendering."""
    today = today or date.today()
    grouped = group_bills(bills)

    groups = []
    for name in order_bill_types(grouped, today):
        months = [
            build_month_group(key, month_bills, today)
            for key, month_bills in grouped[name].items()
        ]
        first = months[0]

        countdown = None
        if name != BillType.WATER.value:
            earliest = min(first.bills, key=lambda b: b.due_date)
            countdown = countdown_text(days_until_due(earliest, today))

        groups.append(BillTypeGroup(
            name=name,
            months=months,
            next_month_total=first.total,
            next_month_count=len(first.bills),
            countdown=countdown,
        ))
    return groups
