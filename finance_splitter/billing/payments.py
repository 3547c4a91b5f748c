"""
Payment and edit operations on bills.

All functions return new Bill instances; inputs are never mutated.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional
from uuid import uuid4

from finance_splitter.models.bill import Bill, Person


class NotAPotBillError(ValueError):
    """Raised when a pot contribution targets a flag-based bill."""
    pass


def set_payment(
    bill: Bill,
    person: Person,
    paid: bool,
    today: Optional[date] = None,
) -> Bill:
    """
    Set a person's paid flag.

    The paid date becomes ``today`` when marking paid and is cleared
    when marking unpaid.
    """
    today = today or date.today()
    return bill.model_copy(update={
        f"{person.prefix}_paid": paid,
        f"{person.prefix}_paid_date": today if paid else None,
    })


def toggle_payment(
    bill: Bill,
    person: Person,
    today: Optional[date] = None,
) -> Bill:
    """Flip a person's paid flag."""
    return set_payment(bill, person, not bill.is_paid_by(person), today)


def set_month_payment(
    bills: Iterable[Bill],
    person: Person,
    paid: bool,
    today: Optional[date] = None,
) -> list[Bill]:
    """
    Mark every bill in a group paid or unpaid for one person.

    Returns only the bills whose flag actually changed.
    """
    return [
        set_payment(bill, person, paid, today)
        for bill in bills
        if bill.is_paid_by(person) != paid
    ]


def _require_pot(bill: Bill) -> None:
    if not bill.is_pot:
        raise NotAPotBillError(f"Bill {bill.id} is not a pot bill")


def set_pot_paid_amount(bill: Bill, person: Person, amount: Decimal) -> Bill:
    """Overwrite a person's cumulative pot contribution."""
    _require_pot(bill)
    if amount < 0:
        raise ValueError("Pot contribution cannot be negative")
    return bill.model_copy(update={f"{person.prefix}_paid_amount": amount})


def record_pot_payment(bill: Bill, person: Person, amount: Decimal) -> Bill:
    """Add a contribution to a person's cumulative pot amount."""
    _require_pot(bill)
    if amount < 0:
        raise ValueError("Pot contribution cannot be negative")
    return set_pot_paid_amount(bill, person, bill.paid_amount(person) + amount)


def apply_edit(
    bill: Bill,
    name: str,
    total_amount: Decimal,
    due_date: date,
) -> Bill:
    """Return a copy with an edited name, amount and due date."""
    # model_validate re-runs field constraints that model_copy skips
    return Bill.model_validate({
        **bill.model_dump(),
        "name": name,
        "total_amount": total_amount,
        "due_date": due_date,
    })


def new_bill(name: str, total_amount: Decimal, due_date: date) -> Bill:
    """Create an unpaid user-defined bill."""
    return Bill(
        id=f"bill-custom-{uuid4().hex[:12]}",
        name=name,
        total_amount=total_amount,
        due_date=due_date,
    )
