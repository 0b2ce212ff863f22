"""Request validation package."""

from finance_tracker.validation.validator import (
    INVALID_AMOUNT_MESSAGE,
    INVALID_TYPE_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    TransactionValidator,
    parse_date_range,
    parse_range_bound,
    validate_password,
)

__all__ = [
    "INVALID_AMOUNT_MESSAGE",
    "INVALID_TYPE_MESSAGE",
    "REQUIRED_FIELDS_MESSAGE",
    "TransactionValidator",
    "parse_date_range",
    "parse_range_bound",
    "validate_password",
]
