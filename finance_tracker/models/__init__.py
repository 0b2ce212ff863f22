"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.base import CamelModel, Money, utcnow
from finance_tracker.models.transaction import (
    SUGGESTED_CATEGORIES,
    Transaction,
    TransactionDraft,
    TransactionPatch,
    TransactionType,
    apply_patch,
    build_transaction,
)
from finance_tracker.models.user import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    User,
    UserPublic,
)
from finance_tracker.models.stats import (
    CategoryStat,
    DateRange,
    MonthlyStat,
    MonthlyTrendPoint,
    Summary,
    TransactionStats,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Shared
    "CamelModel",
    "Money",
    "utcnow",
    # Transaction models
    "SUGGESTED_CATEGORIES",
    "Transaction",
    "TransactionDraft",
    "TransactionPatch",
    "TransactionType",
    "apply_patch",
    "build_transaction",
    # User models
    "AuthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordChange",
    "ProfileUpdate",
    "RegisterRequest",
    "User",
    "UserPublic",
    # Statistics models
    "CategoryStat",
    "DateRange",
    "MonthlyStat",
    "MonthlyTrendPoint",
    "Summary",
    "TransactionStats",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
