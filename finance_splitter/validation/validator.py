"""
Form Input Validation

Raw form values (strings from the UI) are checked here before any bill
is created or changed. Validation NEVER silently fixes values beyond
stripping whitespace; it reports issues and the caller performs no write.

Rules:
- name must be non-empty after stripping
- amount must parse as a finite decimal
- edited bills may have a zero amount (placeholders such as Water);
  new bills must be strictly positive
- a due date is required
- pot contributions must be strictly positive
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from finance_splitter.models.bill import (
    BillInput,
    ValidationIssue,
    ValidationResult,
)


AmountInput = Union[str, int, float, Decimal, None]


class BillInputValidator:
    """Validates bill form input at the edit boundary."""

    def _parse_amount(
        self,
        raw: AmountInput,
        issues: list[ValidationIssue],
        allow_zero: bool,
    ) -> Optional[Decimal]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
            return None

        try:
            text = raw.strip().lstrip("£") if isinstance(raw, str) else str(raw)
            amount = Decimal(text)
        except InvalidOperation:
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_format",
                message=f"Amount is not a number: {raw!r}",
                severity="error",
            ))
            return None

        if not amount.is_finite():
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="invalid_format",
                message="Amount must be a finite number",
                severity="error",
            ))
            return None

        if amount < 0 or (amount == 0 and not allow_zero):
            issues.append(ValidationIssue(
                field="total_amount",
                issue_type="out_of_range",
                message=(
                    "Amount cannot be negative" if allow_zero
                    else "Amount must be greater than zero"
                ),
                severity="error",
            ))
            return None

        return amount

    def _validate_bill_form(
        self,
        name: Optional[str],
        amount: AmountInput,
        due_date: Optional[date],
        allow_zero: bool,
        bill_id: Optional[str] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []

        cleaned_name = (name or "").strip()
        if not cleaned_name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Bill name is required",
                severity="error",
            ))

        parsed_amount = self._parse_amount(amount, issues, allow_zero)

        if due_date is None:
            issues.append(ValidationIssue(
                field="due_date",
                issue_type="missing",
                message="Due date is required",
                severity="error",
            ))

        result = ValidationResult(bill_id=bill_id, issues=issues)
        if not result.has_errors:
            result.cleaned = BillInput(
                name=cleaned_name,
                total_amount=parsed_amount,
                due_date=due_date,
            )
        return result

    def validate_edit(
        self,
        bill_id: str,
        name: Optional[str],
        amount: AmountInput,
        due_date: Optional[date],
    ) -> ValidationResult:
        """Validate the edit form for an existing bill (zero allowed)."""
        return self._validate_bill_form(name, amount, due_date, allow_zero=True, bill_id=bill_id)

    def validate_new(
        self,
        name: Optional[str],
        amount: AmountInput,
        due_date: Optional[date],
    ) -> ValidationResult:
        """Validate the add-bill form (amount must be positive)."""
        return self._validate_bill_form(name, amount, due_date, allow_zero=False)

    def validate_pot_amount(self, bill_id: str, amount: AmountInput) -> ValidationResult:
        """Validate a pot contribution amount."""
        issues: list[ValidationIssue] = []
        parsed = self._parse_amount(amount, issues, allow_zero=False)
        return ValidationResult(bill_id=bill_id, issues=issues, amount=parsed)
