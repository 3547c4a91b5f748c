"""Form input validation package."""

from finance_splitter.validation.validator import BillInputValidator

__all__ = ["BillInputValidator"]
