"""
Audit Models for Finance Tracker

Account changes, transaction writes, failed logins and denied access
are each described by one AuditEvent.

DESIGN DECISION: Events are write-once. Nothing reads them back or edits
them; they exist for whoever tails the log.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_tracker.models.base import utcnow


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    USER_REGISTERED = "user_registered"
    USER_LOGGED_IN = "user_logged_in"
    LOGIN_FAILED = "login_failed"
    PROFILE_UPDATED = "profile_updated"
    PASSWORD_CHANGED = "password_changed"
    ACCOUNT_DELETED = "account_deleted"

    # Transactions
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Access control
    ACCESS_DENIED = "access_denied"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One line of the audit trail.

    entity_type/entity_id point at the user or transaction concerned.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Who did it
    user_id: Optional[UUID] = None

    # What it was about
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction')"
    )
    entity_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "user_id": str(self.user_id) if self.user_id else None,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Named constructors, one per audited action.

    Example:
        event = AuditEventBuilder.user_registered(user_id, email)
        event = AuditEventBuilder.transaction_deleted(user_id, transaction_id)
    """

    @staticmethod
    def user_registered(user_id: UUID, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description=f"User registered: {email}",
        )

    @staticmethod
    def user_logged_in(user_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_LOGGED_IN,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="User logged in",
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Login failed",
            details={"email": email},
        )

    @staticmethod
    def profile_updated(user_id: UUID, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="Profile updated",
            details={"fields": fields},
        )

    @staticmethod
    def password_changed(user_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PASSWORD_CHANGED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="Password changed",
        )

    @staticmethod
    def account_deleted(user_id: UUID, transactions_removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DELETED,
            user_id=user_id,
            entity_type="user",
            entity_id=user_id,
            description="Account deleted",
            details={"transactions_removed": transactions_removed},
        )

    @staticmethod
    def transaction_created(
        user_id: UUID,
        transaction_id: UUID,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction created: {transaction_type} {amount}",
            details={"type": transaction_type, "amount": amount},
        )

    @staticmethod
    def transaction_updated(
        user_id: UUID,
        transaction_id: UUID,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction updated",
            details={"fields": fields},
        )

    @staticmethod
    def transaction_deleted(user_id: UUID, transaction_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            user_id=user_id,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction deleted",
        )

    @staticmethod
    def access_denied(
        user_id: UUID,
        entity_type: str,
        entity_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCESS_DENIED,
            severity=AuditSeverity.WARNING,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Access denied to {entity_type}",
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
