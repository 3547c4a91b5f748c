"""Tests for payment and edit operations."""

import pytest
from datetime import date
from decimal import Decimal

from finance_splitter.billing.payments import (
    NotAPotBillError,
    apply_edit,
    new_bill,
    record_pot_payment,
    set_month_payment,
    set_payment,
    set_pot_paid_amount,
    toggle_payment,
)
from finance_splitter.models.bill import POT_BILL_ID, Bill, Person


TODAY = date(2025, 3, 1)


@pytest.fixture
def rent() -> Bill:
    return Bill(
        id="bill-rent-2025-03-01",
        name="Rent",
        total_amount=Decimal("1420.00"),
        due_date=date(2025, 3, 1),
        created_at=0,
    )


@pytest.fixture
def pot() -> Bill:
    return Bill(
        id=POT_BILL_ID,
        name="Credit Card Pot",
        total_amount=Decimal("5400.00"),
        due_date=date(2025, 10, 31),
        ire_paid_amount=Decimal("0"),
        ebe_paid_amount=Decimal("0"),
        created_at=0,
    )


class TestSetPayment:
    """Tests for paid flags."""

    def test_mark_paid_sets_date(self, rent):
        paid = set_payment(rent, Person.IRE, True, TODAY)
        assert paid.ire_paid is True
        assert paid.ire_paid_date == TODAY
        assert paid.ebe_paid is False

    def test_mark_unpaid_clears_date(self, rent):
        paid = set_payment(rent, Person.EBE, True, TODAY)
        unpaid = set_payment(paid, Person.EBE, False, TODAY)
        assert unpaid.ebe_paid is False
        assert unpaid.ebe_paid_date is None

    def test_input_is_not_mutated(self, rent):
        set_payment(rent, Person.IRE, True, TODAY)
        assert rent.ire_paid is False

    def test_toggle_twice_restores(self, rent):
        toggled = toggle_payment(toggle_payment(rent, Person.IRE, TODAY), Person.IRE, TODAY)
        assert toggled == rent


class TestSetMonthPayment:
    def test_returns_only_changed_bills(self, rent):
        already = set_payment(
            rent.model_copy(update={"id": "bill-council-tax-2025-03-01", "name": "Council Tax"}),
            Person.IRE,
            True,
            TODAY,
        )
        changed = set_month_payment([rent, already], Person.IRE, True, TODAY)

        assert [bill.id for bill in changed] == [rent.id]
        assert changed[0].ire_paid

    def test_unmark_month(self, rent):
        paid = set_payment(rent, Person.EBE, True, TODAY)
        changed = set_month_payment([paid], Person.EBE, False, TODAY)
        assert changed[0].ebe_paid_date is None


class TestPotPayments:
    """Tests for cumulative pot contributions."""

    def test_contributions_accumulate(self, pot):
        pot = record_pot_payment(pot, Person.IRE, Decimal("100.00"))
        pot = record_pot_payment(pot, Person.IRE, Decimal("50.50"))
        assert pot.ire_paid_amount == Decimal("150.50")
        assert pot.ebe_paid_amount == Decimal("0")

    def test_set_overwrites(self, pot):
        pot = record_pot_payment(pot, Person.EBE, Decimal("100"))
        pot = set_pot_paid_amount(pot, Person.EBE, Decimal("20"))
        assert pot.ebe_paid_amount == Decimal("20")

    def test_rejects_non_pot_bill(self, rent):
        with pytest.raises(NotAPotBillError):
            record_pot_payment(rent, Person.IRE, Decimal("10"))

    def test_rejects_negative_contribution(self, pot):
        with pytest.raises(ValueError):
            record_pot_payment(pot, Person.IRE, Decimal("-10"))


class TestEdits:
    def test_apply_edit_keeps_payment_state(self, rent):
        paid = set_payment(rent, Person.IRE, True, TODAY)
        edited = apply_edit(paid, "Rent (new flat)", Decimal("1500.00"), date(2025, 3, 2))

        assert edited.id == rent.id
        assert edited.name == "Rent (new flat)"
        assert edited.total_amount == Decimal("1500.00")
        assert edited.due_date == date(2025, 3, 2)
        assert edited.ire_paid_date == TODAY

    def test_apply_edit_revalidates(self, rent):
        with pytest.raises(ValueError):
            apply_edit(rent, "Rent", Decimal("-5"), rent.due_date)

    def test_new_bill_is_unpaid_with_custom_id(self):
        bill = new_bill("Broadband", Decimal("45.00"), date(2025, 4, 2))
        assert bill.id.startswith("bill-custom-")
        assert not bill.ire_paid and not bill.ebe_paid
        assert new_bill("Broadband", Decimal("45.00"), date(2025, 4, 2)).id != bill.id
