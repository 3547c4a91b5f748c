"""
Core Data Models for Finance Splitter

These models define the fixed record shapes flowing through the system:
1. Bill records, as generated, edited and persisted
2. The per-person summary shown on the balance card
3. Store status reports
4. Validation results for form input

DESIGN DECISION: Persisted records use camelCase field names
(``totalAmount``, ``irePaid``...) while Python code uses snake_case.
Both names are accepted on input; ``to_record()`` always writes camelCase.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Person(str, Enum):
    """The two fixed parties sharing every bill."""
    IRE = "Ire"
    EBE = "Ebe"

    @property
    def prefix(self) -> str:
        """Attribute prefix used on Bill fields (``ire_paid``, ``ebe_paid``...)."""
        return self.value.lower()


class BillType(str, Enum):
    """
    Standard bill types produced by the schedule generator.

    User-created bills may carry any other name; those are not BillTypes.
    """
    RENT = "Rent"
    COUNCIL_TAX = "Council Tax"
    WATER = "Water"
    ELECTRICITY = "Electricity"
    CREDIT_CARD_POT = "Credit Card Pot"

    @property
    def slug(self) -> str:
        """Id fragment for this type, e.g. ``council-tax``."""
        return self.value.lower().replace(" ", "-")


class StoreStatus(str, Enum):
    """Reachability of the remote bill store."""
    CONNECTED = "connected"
    NOT_CONNECTED = "not_connected"


POT_BILL_ID = "bill-credit-card-pot"

Money = Annotated[Decimal, Field(ge=0)]


def _now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


class _RecordModel(BaseModel):
    """Base for models serialized with camelCase field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_record(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# CORE BILL MODEL
# =============================================================================

class Bill(_RecordModel):
    """
    A single billing obligation instance shared 50/50 by Ire and Ebe.

    The Credit Card Pot is the only bill settled through cumulative
    ``*_paid_amount`` values; every other bill uses the boolean flags.
    """

    id: str = Field(
        ...,
        min_length=1,
        max_length=120,
        description="Stable identifier, e.g. bill-rent-2025-03-01"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Bill type name or free-form user label"
    )
    total_amount: Money = Field(
        ...,
        description="Total amount in GBP"
    )
    due_date: date

    ire_paid: bool = False
    ebe_paid: bool = False
    ire_paid_date: Optional[date] = None
    ebe_paid_date: Optional[date] = None

    # Pot only
    ire_paid_amount: Optional[Money] = None
    ebe_paid_amount: Optional[Money] = None

    created_at: int = Field(
        default_factory=_now_ms,
        description="Creation marker in milliseconds; orders generated bills"
    )

    @model_validator(mode='after')
    def validate_paid_dates(self) -> 'Bill':
        """A paid date is present exactly when the paid flag is set."""
        for person in Person:
            paid = getattr(self, f"{person.prefix}_paid")
            paid_date = getattr(self, f"{person.prefix}_paid_date")
            if paid and paid_date is None:
                raise ValueError(f"{person.value} is marked paid but has no paid date")
            if not paid and paid_date is not None:
                raise ValueError(f"{person.value} has a paid date but is not marked paid")
        return self

    @property
    def is_pot(self) -> bool:
        """True for the cumulative-payment Credit Card Pot."""
        return self.id == POT_BILL_ID or self.name == BillType.CREDIT_CARD_POT.value

    @property
    def share(self) -> Decimal:
        """Each person's half of the total."""
        return self.total_amount / 2

    def is_paid_by(self, person: Person) -> bool:
        """Value of the person's paid flag."""
        return getattr(self, f"{person.prefix}_paid")

    def paid_amount(self, person: Person) -> Decimal:
        """Cumulative pot contribution for a person (zero when unset)."""
        return getattr(self, f"{person.prefix}_paid_amount") or Decimal("0")

    def is_settled_by(self, person: Person) -> bool:
        """
        Whether a person has covered their part of this bill.

        Pot bills are settled once the cumulative amount reaches the share;
        all other bills follow the paid flag.
        """
        if self.is_pot:
            return self.paid_amount(person) >= self.share
        return self.is_paid_by(person)

    @property
    def is_fully_settled(self) -> bool:
        return all(self.is_settled_by(person) for person in Person)


# =============================================================================
# SUMMARY & STATUS MODELS
# =============================================================================

class BillSummary(_RecordModel):
    """Balance card figures for the settlement month."""

    total_bills: int = Field(default=0, ge=0)
    total_amount: Decimal = Decimal("0.00")
    unpaid_bills: int = Field(default=0, ge=0)
    overdue_bills: int = Field(default=0, ge=0)
    ire_outstanding: Decimal = Decimal("0.00")
    ebe_outstanding: Decimal = Decimal("0.00")
    ire_paid_total: Decimal = Decimal("0.00")
    ebe_paid_total: Decimal = Decimal("0.00")

    def outstanding_for(self, person: Person) -> Decimal:
        return getattr(self, f"{person.prefix}_outstanding")

    def paid_total_for(self, person: Person) -> Decimal:
        return getattr(self, f"{person.prefix}_paid_total")


class StoreStatusReport(_RecordModel):
    """Result of probing the remote bill store."""

    status: StoreStatus
    database: str = Field(
        ...,
        pattern="^(available|unavailable)$",
    )
    bills_count: int = Field(default=0, ge=0)
    message: str
    error: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self.status == StoreStatus.CONNECTED


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class BillInput(BaseModel):
    """Cleaned form input for creating or editing a bill."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=200)
    total_amount: Money
    due_date: date


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating form input.

    ``cleaned`` holds the parsed input when there are no errors.
    """

    bill_id: Optional[str] = Field(
        default=None,
        description="Bill being edited, if any"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)
    cleaned: Optional[BillInput] = None
    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount for amount-only input (pot payments)"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
