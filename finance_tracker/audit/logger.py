"""
Audit Logger

Also the place where structlog is configured for the whole process.

DESIGN DECISION: Audit events are JSON lines on the application log, not
rows in the database. A failing log sink must never fail the request that
triggered the event, so every write is best effort.
"""

import logging
from typing import Optional
from uuid import UUID

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder


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
    """Route structlog output through stdlib logging at the given level."""
    logging.basicConfig(format="%(message)s", level=level.upper())


class AuditLogger:
    """
    Writes AuditEvents at the level their severity asks for.

    Events go to the structured local log. Nothing here ever raises into
    the caller.
    """

    def __init__(self):
        self._logger = structlog.get_logger("finance_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Emit one event.

        Returns True if the event was written.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
            return True
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).error(
                "audit logging failed for %s: %s", event.event_id, e
            )
            return False

    async def log_user_registered(self, user_id: UUID, email: str) -> None:
        """Log account creation."""
        await self.log(AuditEventBuilder.user_registered(user_id, email))

    async def log_user_logged_in(self, user_id: UUID) -> None:
        """Log a successful login."""
        await self.log(AuditEventBuilder.user_logged_in(user_id))

    async def log_login_failed(self, email: str) -> None:
        """Log a failed login attempt."""
        await self.log(AuditEventBuilder.login_failed(email))

    async def log_profile_updated(self, user_id: UUID, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.profile_updated(user_id, fields))

    async def log_password_changed(self, user_id: UUID) -> None:
        await self.log(AuditEventBuilder.password_changed(user_id))

    async def log_account_deleted(
        self,
        user_id: UUID,
        transactions_removed: int,
    ) -> None:
        await self.log(
            AuditEventBuilder.account_deleted(user_id, transactions_removed)
        )

    async def log_transaction_created(
        self,
        user_id: UUID,
        transaction_id: UUID,
        transaction_type: str,
        amount: str,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_created(
            user_id=user_id,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
        ))

    async def log_transaction_updated(
        self,
        user_id: UUID,
        transaction_id: UUID,
        fields: list[str],
    ) -> None:
        await self.log(
            AuditEventBuilder.transaction_updated(user_id, transaction_id, fields)
        )

    async def log_transaction_deleted(
        self,
        user_id: UUID,
        transaction_id: UUID,
    ) -> None:
        await self.log(
            AuditEventBuilder.transaction_deleted(user_id, transaction_id)
        )

    async def log_access_denied(
        self,
        user_id: UUID,
        entity_type: str,
        entity_id: UUID,
    ) -> None:
        """Log an ownership check failure."""
        await self.log(
            AuditEventBuilder.access_denied(user_id, entity_type, entity_id)
        )

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
