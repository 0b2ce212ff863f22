"""
Finance Tracker API Client

Synchronous httpx client for the REST API, used by the Streamlit app.

DESIGN DECISION: The client holds no login state. login() and register()
return a Session; every authenticated call takes that Session explicitly.
Where the Session lives (Streamlit session_state, a test variable) is
the caller's business.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx
import structlog

from finance_tracker.config import get_settings
from finance_tracker.models.stats import TransactionStats
from finance_tracker.models.transaction import (
    Transaction,
    TransactionDraft,
    TransactionPatch,
)
from finance_tracker.models.user import UserPublic


logger = structlog.get_logger("finance_tracker.client")

REPORT_RANGES = {
    "3m": "Last 3 Months",
    "6m": "Last 6 Months",
    "1y": "Last Year",
    "all": "All Time",
}


@dataclass(frozen=True)
class Session:
    """A logged-in user and the bearer token that proves it."""

    token: str
    user: UserPublic

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ApiClientError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


def _subtract_months(today: date, months: int) -> date:
    total = today.year * 12 + (today.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def parse_amount(text: str) -> Decimal:
    """
    Amount typed into a form, as a Decimal.

    Raises:
        ValueError: If the text is not a finite number greater than 0
    """
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError("Amount must be a number")
    # Decimal() happily parses "NaN" and "Infinity"
    if not amount.is_finite() or amount <= 0:
        raise ValueError("Amount must be greater than 0")
    return amount


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.text or response.reason_phrase


def report_start_date(range_key: str, today: Optional[date] = None) -> Optional[date]:
    """
    Start date for a report range.

    "3m", "6m" and "1y" go back that far from today, clamping the day to
    the end of shorter months (31 May minus 3 months is 28/29 Feb).
    "all" and unknown keys mean no lower bound.
    """
    today = today or date.today()
    if range_key == "3m":
        return _subtract_months(today, 3)
    if range_key == "6m":
        return _subtract_months(today, 6)
    if range_key == "1y":
        return _subtract_months(today, 12)
    return None


class FinanceApiClient:
    """Covers every endpoint of the Finance Tracker API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._base_url = (base_url or get_settings().app.api_base_url).rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[Session] = None,
        json: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        headers = session.headers if session else None
        try:
            response = self._http.request(
                method,
                f"{self._base_url}{path}",
                headers=headers,
                json=json,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.error("api_unreachable", method=method, path=path, error=str(e))
            raise ApiClientError(0, f"Could not reach the server: {e}")

        if response.is_error:
            raise ApiClientError(response.status_code, _error_message(response))

        return response.json()

    def _session_from(self, data: dict) -> Session:
        return Session(
            token=data["token"],
            user=UserPublic.model_validate(data["user"]),
        )

    # =========================================================================
    # Auth
    # =========================================================================

    def register(self, name: str, email: str, password: str) -> Session:
        data = self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        return self._session_from(data)

    def login(self, email: str, password: str) -> Session:
        data = self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
        )
        return self._session_from(data)

    def get_profile(self, session: Session) -> UserPublic:
        data = self._request("GET", "/auth/profile", session)
        return UserPublic.model_validate(data)

    def update_profile(
        self,
        session: Session,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Session:
        """Update the profile. Returns a Session carrying the new user details."""
        body = {}
        if name is not None:
            body["name"] = name
        if email is not None:
            body["email"] = email
        data = self._request("PUT", "/auth/profile", session, json=body)
        return Session(token=session.token, user=UserPublic.model_validate(data))

    def change_password(
        self,
        session: Session,
        current_password: str,
        new_password: str,
    ) -> str:
        data = self._request(
            "PUT",
            "/auth/password",
            session,
            json={"currentPassword": current_password, "newPassword": new_password},
        )
        return data["message"]

    def delete_account(self, session: Session) -> str:
        data = self._request("DELETE", "/auth/profile", session)
        return data["message"]

    # =========================================================================
    # Transactions
    # =========================================================================

    def list_transactions(self, session: Session) -> list[Transaction]:
        data = self._request("GET", "/transactions", session)
        return [Transaction.model_validate(item) for item in data]

    def get_transaction(self, session: Session, transaction_id: str) -> Transaction:
        data = self._request("GET", f"/transactions/{transaction_id}", session)
        return Transaction.model_validate(data)

    def create_transaction(
        self,
        session: Session,
        draft: TransactionDraft,
    ) -> Transaction:
        body = draft.model_dump(mode="json", by_alias=True, exclude_none=True)
        data = self._request("POST", "/transactions", session, json=body)
        return Transaction.model_validate(data)

    def update_transaction(
        self,
        session: Session,
        transaction_id: str,
        patch: TransactionPatch,
    ) -> Transaction:
        """Send only the fields set on the patch; an explicit None clears a note."""
        body = patch.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data = self._request(
            "PUT", f"/transactions/{transaction_id}", session, json=body
        )
        return Transaction.model_validate(data)

    def delete_transaction(self, session: Session, transaction_id: str) -> str:
        data = self._request("DELETE", f"/transactions/{transaction_id}", session)
        return data["message"]

    def get_stats(
        self,
        session: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TransactionStats:
        params = {}
        if start_date is not None:
            params["startDate"] = start_date.isoformat()
        if end_date is not None:
            params["endDate"] = end_date.isoformat()
        data = self._request(
            "GET", "/transactions/stats", session, params=params or None
        )
        return TransactionStats.model_validate(data)
