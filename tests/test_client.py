"""Tests for the httpx API client, run against the app through TestClient."""

from datetime import date, datetime
from decimal import Decimal

import httpx
import pytest

from finance_tracker.client import (
    ApiClientError,
    FinanceApiClient,
    parse_amount,
    report_start_date,
)
from finance_tracker.models import TransactionDraft, TransactionPatch


@pytest.fixture
def api(client):
    # TestClient is an httpx.Client, so the real client code runs unchanged
    return FinanceApiClient(base_url="http://testserver/api", http_client=client)


@pytest.fixture
def session(api):
    return api.register("Alice", "alice@example.com", "secret123")


class TestReportStartDate:
    """Tests for report range start dates."""

    def test_ranges(self):
        today = date(2024, 6, 15)
        assert report_start_date("3m", today) == date(2024, 3, 15)
        assert report_start_date("6m", today) == date(2023, 12, 15)
        assert report_start_date("1y", today) == date(2023, 6, 15)

    def test_all_has_no_bound(self):
        assert report_start_date("all", date(2024, 6, 15)) is None
        assert report_start_date("forever", date(2024, 6, 15)) is None

    def test_clamps_to_month_end(self):
        assert report_start_date("3m", date(2024, 5, 31)) == date(2024, 2, 29)
        assert report_start_date("3m", date(2023, 5, 31)) == date(2023, 2, 28)
        assert report_start_date("1y", date(2024, 2, 29)) == date(2023, 2, 28)


class TestParseAmount:
    """Tests for amounts typed into the transaction form."""

    def test_valid(self):
        assert parse_amount(" 12.50 ") == Decimal("12.50")

    @pytest.mark.parametrize("text", ["", "twelve", "1,5"])
    def test_not_a_number(self, text):
        with pytest.raises(ValueError, match="must be a number"):
            parse_amount(text)

    @pytest.mark.parametrize("text", ["NaN", "sNaN", "Infinity", "-Infinity", "0", "-3"])
    def test_not_positive_and_finite(self, text):
        with pytest.raises(ValueError, match="greater than 0"):
            parse_amount(text)


def client_answering(status_code, **response_kwargs):
    def handler(request):
        return httpx.Response(status_code, **response_kwargs)

    return FinanceApiClient(
        base_url="http://api.test/api",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


class TestErrorBodies:
    """Error messages are extracted from whatever body comes back."""

    def test_message_object(self):
        api = client_answering(404, json={"message": "Transaction not found"})
        with pytest.raises(ApiClientError) as exc_info:
            api.login("a@example.com", "secret123")
        assert exc_info.value.message == "Transaction not found"

    @pytest.mark.parametrize("body", [["bad", "gateway"], "upstream down", 42])
    def test_json_that_is_not_an_object(self, body):
        api = client_answering(502, json=body)
        with pytest.raises(ApiClientError) as exc_info:
            api.login("a@example.com", "secret123")
        assert exc_info.value.status_code == 502
        assert exc_info.value.message == httpx.Response(502, json=body).text

    def test_plain_text(self):
        api = client_answering(503, text="Service Unavailable")
        with pytest.raises(ApiClientError) as exc_info:
            api.login("a@example.com", "secret123")
        assert exc_info.value.message == "Service Unavailable"

    def test_empty_body_uses_reason(self):
        api = client_answering(500)
        with pytest.raises(ApiClientError) as exc_info:
            api.login("a@example.com", "secret123")
        assert exc_info.value.message == "Internal Server Error"


class TestFinanceApiClient:
    """Tests for FinanceApiClient."""

    def test_register_and_profile(self, api, session):
        assert session.token
        assert session.user.email == "alice@example.com"
        assert api.get_profile(session) == session.user

    def test_login(self, api, session):
        logged_in = api.login("alice@example.com", "secret123")
        assert logged_in.user.id == session.user.id

    def test_errors_carry_status_and_message(self, api, session):
        with pytest.raises(ApiClientError) as exc_info:
            api.login("alice@example.com", "wrong-password")
        assert exc_info.value.status_code == 401
        assert exc_info.value.is_auth_error
        assert exc_info.value.message == "Invalid email or password"

    def test_transaction_crud(self, api, session):
        created = api.create_transaction(session, TransactionDraft(
            type="expense",
            amount=Decimal("12.50"),
            category="Food",
            note="lunch",
            date=datetime(2024, 1, 10),
        ))
        assert created.amount == Decimal("12.5")
        assert created.user_id == session.user.id

        assert api.get_transaction(session, str(created.id)) == created
        assert [t.id for t in api.list_transactions(session)] == [created.id]

        updated = api.update_transaction(
            session, str(created.id), TransactionPatch(note=None)
        )
        assert updated.note is None
        assert updated.amount == created.amount

        assert api.delete_transaction(session, str(created.id)) == "Transaction deleted"
        with pytest.raises(ApiClientError) as exc_info:
            api.get_transaction(session, str(created.id))
        assert exc_info.value.status_code == 404

    def test_validation_error_message(self, api, session):
        with pytest.raises(ApiClientError) as exc_info:
            api.create_transaction(session, TransactionDraft(
                type="expense", amount=Decimal("0"), category="Food",
            ))
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Amount must be greater than 0"

    def test_stats_with_range(self, api, session):
        for day, amount in ((datetime(2024, 1, 31, 20), "10"), (datetime(2024, 2, 1), "20")):
            api.create_transaction(session, TransactionDraft(
                type="expense", amount=Decimal(amount), category="Food", date=day,
            ))

        stats = api.get_stats(session, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
        assert stats.summary.total_expense == Decimal("10")

        everything = api.get_stats(session)
        assert everything.summary.total_expense == Decimal("30")
        assert [m.month for m in everything.monthly_data] == ["2024-01", "2024-02"]

    def test_account_management(self, api, session):
        renamed = api.update_profile(session, name="Alicia")
        assert renamed.user.name == "Alicia"
        assert renamed.token == session.token

        assert api.change_password(session, "secret123", "brandnew1")
        api.login("alice@example.com", "brandnew1")

        assert api.delete_account(session)
        with pytest.raises(ApiClientError) as exc_info:
            api.get_profile(session)
        assert exc_info.value.status_code == 401
