"""
Request Validation

DESIGN DECISION: Validation is explicit and happens before any storage
call. Each check returns a tagged ValidationResult instead of raising,
so the caller can see every issue and decide what to report.

Issue types:
- missing:        a required field was not provided
- invalid_value:  provided, but outside what we accept
- invalid_format: provided, but could not be parsed

Bad input is rejected as-is; nothing is trimmed, rounded or defaulted here.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from finance_tracker.errors import ValidationError
from finance_tracker.models.stats import DateRange
from finance_tracker.models.transaction import (
    TransactionDraft,
    TransactionPatch,
    TransactionType,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult


MAX_CATEGORY_LENGTH = 100
MAX_NOTE_LENGTH = 500
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything past this

REQUIRED_FIELDS_MESSAGE = "Type, amount, and category are required"
INVALID_TYPE_MESSAGE = "Type must be either income or expense"
INVALID_AMOUNT_MESSAGE = "Amount must be greater than 0"

_TYPES = {t.value for t in TransactionType}


class TransactionValidator:
    """
    Validates transaction create and update bodies.

    The same type and amount rules apply to both; an update only checks
    the fields it actually carries.
    """

    def validate_draft(self, draft: TransactionDraft) -> ValidationResult:
        """Validate a create body."""
        issues: list[ValidationIssue] = []

        missing = [
            name for name in ("type", "amount", "category")
            if getattr(draft, name) in (None, "")
        ]
        if missing:
            issues.extend(
                ValidationIssue(
                    field=name,
                    issue_type="missing",
                    message=REQUIRED_FIELDS_MESSAGE,
                )
                for name in missing
            )
            return ValidationResult(issues=issues)

        issues.extend(self._check_type(draft.type))
        issues.extend(self._check_amount(draft.amount))
        issues.extend(self._check_category(draft.category))
        issues.extend(self._check_note(draft.note))

        return ValidationResult(issues=issues)

    def validate_patch(self, patch: TransactionPatch) -> ValidationResult:
        """Validate only the fields present in an update body."""
        issues: list[ValidationIssue] = []

        if patch.is_set("type"):
            issues.extend(self._check_type(patch.type))
        if patch.is_set("amount"):
            issues.extend(self._check_amount(patch.amount))
        if patch.is_set("category"):
            issues.extend(self._check_category(patch.category))
        if patch.is_set("note"):
            issues.extend(self._check_note(patch.note))
        if patch.is_set("date") and patch.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date cannot be empty",
            ))

        return ValidationResult(issues=issues)

    def _check_type(self, value: Optional[str]) -> list[ValidationIssue]:
        if value not in _TYPES:
            return [ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=INVALID_TYPE_MESSAGE,
            )]
        return []

    def _check_amount(self, value: Optional[Decimal]) -> list[ValidationIssue]:
        if value is None or value <= 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=INVALID_AMOUNT_MESSAGE,
            )]
        return []

    def _check_category(self, value: Optional[str]) -> list[ValidationIssue]:
        if not value:
            return [ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category cannot be empty",
            )]
        if len(value) > MAX_CATEGORY_LENGTH:
            return [ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=f"Category must be at most {MAX_CATEGORY_LENGTH} characters",
            )]
        return []

    def _check_note(self, value: Optional[str]) -> list[ValidationIssue]:
        if value and len(value) > MAX_NOTE_LENGTH:
            return [ValidationIssue(
                field="note",
                issue_type="invalid_value",
                message=f"Note must be at most {MAX_NOTE_LENGTH} characters",
            )]
        return []


def validate_password(password: str, min_length: int) -> ValidationResult:
    """Password rules shared by registration and password change."""
    issues = []
    if len(password) < min_length:
        issues.append(ValidationIssue(
            field="password",
            issue_type="invalid_value",
            message=f"Password must be at least {min_length} characters",
        ))
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        issues.append(ValidationIssue(
            field="password",
            issue_type="invalid_value",
            message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
        ))
    return ValidationResult(issues=issues)


def parse_range_bound(
    value: Optional[str],
    field: str,
    end_of_day: bool = False,
) -> Optional[datetime]:
    """
    Parse one bound of a stats date range.

    A bare YYYY-MM-DD covers the whole day: start bounds snap to midnight,
    end bounds to the last microsecond. Datetimes keep their wall-clock
    fields and lose any offset.
    """
    if value is None or not value.strip():
        return None

    raw = value.strip()
    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            return datetime.combine(day, time.max if end_of_day else time.min)
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).replace(tzinfo=None)
    except ValueError:
        raise ValidationError(
            f"{field} must be an ISO date (YYYY-MM-DD) or datetime"
        )


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str],
) -> DateRange:
    """Build the inclusive DateRange for a stats request."""
    start = parse_range_bound(start_date, "startDate")
    end = parse_range_bound(end_date, "endDate", end_of_day=True)
    try:
        return DateRange(start=start, end=end)
    except PydanticValidationError:
        raise ValidationError("startDate must not be after endDate")
