"""
Activity Logger

Every store fallback, schedule generation and payment change is logged
as a structured event. Events are written to the local log only; nothing
is persisted.
"""

import logging
import sys
from typing import Optional

import structlog


_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for JSON output.

    Safe to call more than once; only the first call installs handlers.
    """
    global _configured

    logging.getLogger("finance_splitter").setLevel(level)
    if _configured:
        return

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


class ActivityLogger:
    """
    Central activity logging service.

    One method per event the application emits, so event names and
    fields stay consistent across the gateway and the flows.
    """

    def __init__(self, name: str = "finance_splitter"):
        self._logger = structlog.get_logger(name)

    def log_bills_loaded(self, source: str, count: int) -> None:
        """Log which store served a bill listing."""
        self._logger.info("bills_loaded", source=source, count=count)

    def log_store_fallback(
        self,
        operation: str,
        store: str,
        error: str,
    ) -> None:
        """Log a store failure that was absorbed by falling back."""
        self._logger.warning(
            "store_fallback",
            operation=operation,
            store=store,
            error=error,
        )

    def log_schedule_generated(self, target_year: int, count: int) -> None:
        self._logger.info(
            "schedule_generated",
            target_year=target_year,
            count=count,
        )

    def log_payment_updated(
        self,
        bill_id: str,
        person: str,
        paid: Optional[bool] = None,
        amount: Optional[str] = None,
    ) -> None:
        """Log a paid-flag change or a pot contribution."""
        self._logger.info(
            "payment_updated",
            bill_id=bill_id,
            person=person,
            paid=paid,
            amount=amount,
        )

    def log_bill_saved(self, bill_id: str, name: str, amount: str) -> None:
        self._logger.info("bill_saved", bill_id=bill_id, name=name, amount=amount)

    def log_bill_deleted(self, bill_id: str) -> None:
        self._logger.info("bill_deleted", bill_id=bill_id)

    def log_input_rejected(self, form: str, issues: list[dict]) -> None:
        """Log form input that failed validation."""
        self._logger.info("input_rejected", form=form, issues=issues)

    def log_store_status(self, status: str, bills_count: int) -> None:
        self._logger.info("store_status", status=status, bills_count=bills_count)
