"""
Data Models Package

This package contains all Pydantic models used in Finance Splitter.
All data flowing through the system must conform to these schemas.
"""

from finance_splitter.models.bill import (
    POT_BILL_ID,
    Bill,
    BillInput,
    BillSummary,
    BillType,
    Person,
    StoreStatus,
    StoreStatusReport,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "POT_BILL_ID",
    "Bill",
    "BillInput",
    "BillSummary",
    "BillType",
    "Person",
    "StoreStatus",
    "StoreStatusReport",
    "ValidationIssue",
    "ValidationResult",
]
