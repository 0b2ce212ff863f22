"""HTTP client for the Finance Tracker API."""

from finance_tracker.client.api_client import (
    REPORT_RANGES,
    ApiClientError,
    FinanceApiClient,
    Session,
    parse_amount,
    report_start_date,
)

__all__ = [
    "REPORT_RANGES",
    "ApiClientError",
    "FinanceApiClient",
    "Session",
    "parse_amount",
    "report_start_date",
]
