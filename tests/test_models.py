"""
Tests for Finance Splitter

Test strategy:
1. Unit tests for individual components (models, billing, validators)
2. Integration tests for flows (with in-memory and mocked stores)
3. No real API calls in tests (use mocks)
"""

import pytest
from datetime import date
from decimal import Decimal

from finance_splitter.models.bill import (
    POT_BILL_ID,
    Bill,
    BillSummary,
    BillType,
    Person,
    StoreStatus,
    StoreStatusReport,
    ValidationIssue,
    ValidationResult,
)


def make_bill(**overrides) -> Bill:
    fields = dict(
        id="bill-rent-2025-03-01",
        name="Rent",
        total_amount=Decimal("1420.00"),
        due_date=date(2025, 3, 1),
        created_at=1,
    )
    fields.update(overrides)
    return Bill(**fields)


class TestBillModel:
    """Tests for the Bill record model."""

    def test_bill_defaults_to_unpaid(self):
        """A new bill is unpaid by both people."""
        bill = make_bill()
        assert bill.ire_paid is False
        assert bill.ebe_paid is False
        assert bill.ire_paid_date is None
        assert bill.ire_paid_amount is None

    def test_bill_strips_whitespace(self):
        """Test that whitespace is stripped from the name."""
        bill = make_bill(name="  Rent  ")
        assert bill.name == "Rent"

    def test_bill_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            make_bill(total_amount=Decimal("-1"))

    def test_bill_rejects_empty_name(self):
        with pytest.raises(ValueError):
            make_bill(name="   ")

    def test_paid_flag_requires_paid_date(self):
        """Marked paid without a date is invalid."""
        with pytest.raises(ValueError, match="no paid date"):
            make_bill(ire_paid=True)

    def test_paid_date_requires_paid_flag(self):
        with pytest.raises(ValueError, match="not marked paid"):
            make_bill(ebe_paid_date=date(2025, 3, 1))

    def test_share_is_half_of_total(self):
        assert make_bill(total_amount=Decimal("153.00")).share == Decimal("76.50")

    def test_record_uses_camel_case(self):
        """Persisted records use camelCase keys."""
        record = make_bill(ire_paid=True, ire_paid_date=date(2025, 2, 27)).to_record()

        assert record["totalAmount"] == "1420.00"
        assert record["dueDate"] == "2025-03-01"
        assert record["irePaid"] is True
        assert record["irePaidDate"] == "2025-02-27"
        assert record["ebePaidDate"] is None
        assert record["createdAt"] == 1
        assert "total_amount" not in record

    def test_record_parses_back(self):
        """Both camelCase and snake_case input is accepted."""
        bill = make_bill(ebe_paid=True, ebe_paid_date=date(2025, 2, 28))
        assert Bill.model_validate(bill.to_record()) == bill


class TestPotBill:
    """Tests for the cumulative-payment Credit Card Pot."""

    def test_pot_detected_by_id_or_name(self):
        assert make_bill(id=POT_BILL_ID, name="Pot").is_pot
        assert make_bill(id="bill-custom-1", name=BillType.CREDIT_CARD_POT.value).is_pot
        assert not make_bill().is_pot

    def test_pot_settled_by_amount_not_flag(self):
        """The pot is settled once the contribution covers the share."""
        pot = make_bill(
            id=POT_BILL_ID,
            name="Credit Card Pot",
            total_amount=Decimal("5400.00"),
            ire_paid_amount=Decimal("2700.00"),
            ebe_paid_amount=Decimal("2699.99"),
        )
        assert pot.is_settled_by(Person.IRE)
        assert not pot.is_settled_by(Person.EBE)
        assert not pot.is_fully_settled

    def test_paid_amount_defaults_to_zero(self):
        assert make_bill().paid_amount(Person.EBE) == Decimal("0")


class TestEnums:
    """Tests for enum helpers."""

    def test_person_prefix(self):
        assert Person.IRE.prefix == "ire"
        assert Person.EBE.prefix == "ebe"

    def test_bill_type_slug(self):
        assert BillType.COUNCIL_TAX.slug == "council-tax"
        assert BillType.CREDIT_CARD_POT.slug == "credit-card-pot"


class TestSummaryAndStatus:
    """Tests for summary and status models."""

    def test_summary_accessors(self):
        summary = BillSummary(
            ire_outstanding=Decimal("10.00"),
            ebe_paid_total=Decimal("5.00"),
        )
        assert summary.outstanding_for(Person.IRE) == Decimal("10.00")
        assert summary.paid_total_for(Person.EBE) == Decimal("5.00")
        assert summary.total_bills == 0

    def test_status_report_database_values(self):
        with pytest.raises(ValueError):
            StoreStatusReport(
                status=StoreStatus.CONNECTED,
                database="maybe",
                message="x",
            )

    def test_status_report_serializes_camel_case(self):
        report = StoreStatusReport(
            status=StoreStatus.NOT_CONNECTED,
            database="unavailable",
            bills_count=3,
            message="offline",
        )
        record = report.to_record()
        assert record["status"] == "not_connected"
        assert record["billsCount"] == 3
        assert not report.is_connected


class TestValidationModels:
    """Tests for validation models."""

    def test_validation_result_with_errors(self):
        """Test ValidationResult with errors."""
        result = ValidationResult(
            issues=[
                ValidationIssue(
                    field="total_amount",
                    issue_type="missing",
                    message="Amount is required",
                    severity="error",
                ),
                ValidationIssue(
                    field="name",
                    issue_type="invalid_format",
                    message="Odd name",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors
        assert not result.is_valid
        assert result.error_count == 1

    def test_validation_issue_rejects_unknown_severity(self):
        with pytest.raises(ValueError):
            ValidationIssue(
                field="name",
                issue_type="missing",
                message="x",
                severity="fatal",
            )
