"""
Audit Logger

DESIGN DECISION: Every change to the ledger, and every rejected
submission, is logged. This provides:
1. Traceability of every recorded transaction
2. Visible rejections instead of silent no-ops
3. A trail when persisted state is unreadable

The audit logger:
- Is synchronous, like the engine that calls it
- Writes structured JSON through structlog
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from personal_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
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


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service for the ledger engine.
    """

    def __init__(self, logger_name: str = "personal_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_state_restored(
        self,
        key: str,
        transaction_count: int,
        balance: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful restore from persisted state."""
        self.log(AuditEventBuilder.state_restored(
            key=key,
            transaction_count=transaction_count,
            balance=balance,
            correlation_id=correlation_id,
        ))

    def log_state_empty(
        self,
        key: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a restore that found nothing persisted."""
        self.log(AuditEventBuilder.state_empty(
            key=key,
            correlation_id=correlation_id,
        ))

    def log_persisted_state_malformed(
        self,
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log persisted data that could not be parsed."""
        self.log(AuditEventBuilder.persisted_state_malformed(
            key=key,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_load_failed(
        self,
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage failure during restore."""
        self.log(AuditEventBuilder.load_failed(
            key=key,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_transaction_recorded(
        self,
        transaction_id: int,
        transaction_type: str,
        amount: float,
        balance: float,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an accepted and persisted transaction."""
        self.log(AuditEventBuilder.transaction_recorded(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            balance=balance,
            correlation_id=correlation_id,
        ))

    def log_submission_rejected(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a submission that failed validation."""
        self.log(AuditEventBuilder.submission_rejected(
            issues=issues,
            correlation_id=correlation_id,
        ))

    def log_persist_failed(
        self,
        key: str,
        transaction_id: int,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed save and the rollback that followed."""
        self.log(AuditEventBuilder.persist_failed(
            key=key,
            transaction_id=transaction_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use one per engine operation (restore or submission).
    """
    return uuid4()
