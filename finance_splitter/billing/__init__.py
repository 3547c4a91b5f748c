"""
Billing Package

Schedule generation, balance calculation, payment operations and
presentation grouping. Everything here is pure: no storage access.
"""

from finance_splitter.billing.balance import (
    DUE_SOON_DAYS,
    calculate_bill_summary,
    days_until_due,
    is_due_soon,
    is_overdue,
    settlement_month_bills,
    settlement_month_names,
)
from finance_splitter.billing.grouping import (
    BillTypeGroup,
    MonthGroup,
    build_bill_groups,
    countdown_text,
    group_bills,
    month_key,
    order_bill_types,
)
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
from finance_splitter.billing.schedule import (
    COUNCIL_TAX_AMOUNT,
    CREDIT_CARD_POT_TARGET,
    RENT_AMOUNT,
    bill_id,
    generate_default_bills,
    merge_by_id,
    target_year,
)

__all__ = [
    # Balance
    "DUE_SOON_DAYS",
    "calculate_bill_summary",
    "days_until_due",
    "is_due_soon",
    "is_overdue",
    "settlement_month_bills",
    "settlement_month_names",
    # Grouping
    "BillTypeGroup",
    "MonthGroup",
    "build_bill_groups",
    "countdown_text",
    "group_bills",
    "month_key",
    "order_bill_types",
    # Payments
    "NotAPotBillError",
    "apply_edit",
    "new_bill",
    "record_pot_payment",
    "set_month_payment",
    "set_payment",
    "set_pot_paid_amount",
    "toggle_payment",
    # Schedule
    "COUNCIL_TAX_AMOUNT",
    "CREDIT_CARD_POT_TARGET",
    "RENT_AMOUNT",
    "bill_id",
    "generate_default_bills",
    "merge_by_id",
    "target_year",
]
