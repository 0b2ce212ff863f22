"""End-to-end tests for the HTTP API over in-memory storage."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from finance_tracker.api import create_app
from finance_tracker.errors import InternalError
from finance_tracker.services.storage import StorageError


def create(client, auth, **overrides):
    body = {"type": "expense", "amount": 40, "category": "Food", "date": "2024-01-10"}
    body.update(overrides)
    response = client.post("/api/transactions", json=body, headers=auth["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestRootAndErrors:
    """Tests for the app shell."""

    def test_welcome(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Welcome to Finance Tracker API"}

    def test_malformed_json_is_400(self, client, alice):
        response = client.post(
            "/api/transactions",
            content="{not json",
            headers={**alice["headers"], "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "message" in response.json()

    def test_wrong_field_type_is_400(self, client, alice):
        response = client.post(
            "/api/transactions",
            json={"type": "expense", "amount": "lots", "category": "Food"},
            headers=alice["headers"],
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("amount")

    def test_storage_failure_is_generic_500(self, components, alice_token_app):
        client, auth = alice_token_app

        async def broken(*args, **kwargs):
            raise StorageError("connection reset by peer")

        components.transaction_storage.list_transactions = broken
        response = client.get("/api/transactions", headers=auth["headers"])
        assert response.status_code == InternalError.status_code == 500
        assert response.json() == {"message": InternalError.default_message}
        assert "connection reset" not in response.text

    def test_unexpected_failure_is_generic_500(self, components, auth_settings):
        async def exploding(*args, **kwargs):
            raise RuntimeError("internal detail")

        with TestClient(create_app(components), raise_server_exceptions=False) as client:
            auth = client.post(
                "/api/auth/register",
                json={"name": "Al", "email": "al@example.com", "password": "secret123"},
            ).json()
            components.transaction_storage.list_transactions = exploding
            response = client.get(
                "/api/transactions",
                headers={"Authorization": f"Bearer {auth['token']}"},
            )
        assert response.status_code == 500
        assert response.json() == {"message": "Something went wrong!"}
        assert "internal detail" not in response.text


@pytest.fixture
def alice_token_app(client, alice):
    return client, alice


class TestAuthRoutes:
    """Tests for /auth routes."""

    def test_register(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["token"]
        assert body["user"]["email"] == "alice@example.com"
        assert "createdAt" in body["user"]
        assert "passwordHash" not in body["user"]

    def test_register_duplicate_is_409(self, client, alice):
        response = client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "alice@example.com", "password": "another1"},
        )
        assert response.status_code == 409
        assert "message" in response.json()

    def test_register_invalid_email_is_400(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "not-an-email", "password": "secret123"},
        )
        assert response.status_code == 400

    def test_login(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "secret123"},
        )
        assert response.status_code == 200
        assert response.json()["user"]["id"] == alice["user"]["id"]

    def test_login_wrong_password(self, client, alice):
        response = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "wrong-one"},
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    def test_profile_requires_token(self, client):
        response = client.get("/api/auth/profile")
        assert response.status_code == 401
        assert response.json() == {"message": "No token, authorization denied"}
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, client, alice):
        response = client.get(
            "/api/auth/profile",
            headers={"Authorization": f"Basic {alice['token']}"},
        )
        assert response.status_code == 401
        assert response.json() == {"message": "No token, authorization denied"}

    def test_invalid_token(self, client):
        response = client.get(
            "/api/auth/profile",
            headers={"Authorization": "Bearer not.a.token"},
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Token is not valid"}

    def test_profile_round_trip(self, client, alice):
        response = client.put(
            "/api/auth/profile",
            json={"name": "Alicia"},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Alicia"

        profile = client.get("/api/auth/profile", headers=alice["headers"]).json()
        assert profile["name"] == "Alicia"
        assert profile["email"] == "alice@example.com"

    def test_profile_email_taken(self, client, alice, bob):
        response = client.put(
            "/api/auth/profile",
            json={"email": "bob@example.com"},
            headers=alice["headers"],
        )
        assert response.status_code == 409

    def test_change_password(self, client, alice):
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "secret123", "newPassword": "brandnew1"},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        assert "message" in response.json()

        login = client.post(
            "/api/auth/login",
            json={"email": "alice@example.com", "password": "brandnew1"},
        )
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, alice):
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "nope-nope", "newPassword": "brandnew1"},
            headers=alice["headers"],
        )
        assert response.status_code == 400
        assert response.json() == {"message": "Current password is incorrect"}

    def test_delete_account_cascades(self, client, alice, bob):
        create(client, alice)
        create(client, alice, type="income", amount=100, category="Salary")
        kept = create(client, bob)

        response = client.delete("/api/auth/profile", headers=alice["headers"])
        assert response.status_code == 200

        # Token still verifies, but the user is gone
        response = client.get("/api/transactions", headers=alice["headers"])
        assert response.status_code == 401
        assert response.json() == {"message": "Token is not valid"}

        # Re-registering the same email starts from nothing
        fresh = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        ).json()
        listing = client.get(
            "/api/transactions",
            headers={"Authorization": f"Bearer {fresh['token']}"},
        )
        assert listing.json() == []

        bob_listing = client.get("/api/transactions", headers=bob["headers"]).json()
        assert [t["id"] for t in bob_listing] == [kept["id"]]


class TestTransactionRoutes:
    """Tests for /transactions CRUD."""

    def test_requires_token(self, client):
        assert client.get("/api/transactions").status_code == 401
        assert client.post("/api/transactions", json={}).status_code == 401
        assert client.get("/api/transactions/stats").status_code == 401

    def test_create(self, client, alice):
        body = create(client, alice, note="groceries")
        assert body["userId"] == alice["user"]["id"]
        assert body["type"] == "expense"
        assert body["amount"] == 40
        assert body["note"] == "groceries"
        assert body["date"].startswith("2024-01-10T00:00:00")
        assert body["id"]

    def test_create_defaults_date(self, client, alice):
        response = client.post(
            "/api/transactions",
            json={"type": "income", "amount": 10.5, "category": "Freelance"},
            headers=alice["headers"],
        )
        assert response.status_code == 201
        assert response.json()["date"]

    @pytest.mark.parametrize("body, message", [
        ({"amount": 5, "category": "Food"}, "Type, amount, and category are required"),
        ({"type": "expense", "category": "Food"}, "Type, amount, and category are required"),
        ({"type": "expense", "amount": 5}, "Type, amount, and category are required"),
        ({"type": "refund", "amount": 5, "category": "Food"},
         "Type must be either income or expense"),
        ({"type": "expense", "amount": 0, "category": "Food"}, "Amount must be greater than 0"),
        ({"type": "expense", "amount": -3, "category": "Food"}, "Amount must be greater than 0"),
    ])
    def test_create_validation(self, client, alice, body, message):
        response = client.post("/api/transactions", json=body, headers=alice["headers"])
        assert response.status_code == 400
        assert response.json() == {"message": message}
        # Nothing persisted
        assert client.get("/api/transactions", headers=alice["headers"]).json() == []

    def test_list_is_newest_first_and_own_only(self, client, alice, bob):
        create(client, alice, date="2024-01-01")
        create(client, alice, date="2024-03-01")
        create(client, alice, date="2024-02-01")
        create(client, bob, date="2024-04-01")

        listing = client.get("/api/transactions", headers=alice["headers"]).json()
        assert [t["date"][:10] for t in listing] == ["2024-03-01", "2024-02-01", "2024-01-01"]
        assert {t["userId"] for t in listing} == {alice["user"]["id"]}

    def test_get_own(self, client, alice):
        created = create(client, alice)
        response = client.get(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json() == created

    def test_partial_update(self, client, alice):
        created = create(client, alice, note="lunch")
        response = client.put(
            f"/api/transactions/{created['id']}",
            json={"amount": 55.5},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["amount"] == 55.5
        assert updated["note"] == "lunch"
        assert updated["category"] == "Food"
        assert updated["date"] == created["date"]
        assert updated["createdAt"] == created["createdAt"]

    def test_update_null_note_clears_it(self, client, alice):
        created = create(client, alice, note="lunch")
        response = client.put(
            f"/api/transactions/{created['id']}",
            json={"note": None},
            headers=alice["headers"],
        )
        assert response.status_code == 200
        assert response.json()["note"] is None

    @pytest.mark.parametrize("body, message", [
        ({"amount": 0}, "Amount must be greater than 0"),
        ({"type": "other"}, "Type must be either income or expense"),
        ({"category": ""}, "Category cannot be empty"),
        ({"date": None}, "Date cannot be empty"),
    ])
    def test_update_validation(self, client, alice, body, message):
        created = create(client, alice)
        response = client.put(
            f"/api/transactions/{created['id']}",
            json=body,
            headers=alice["headers"],
        )
        assert response.status_code == 400
        assert response.json() == {"message": message}

        unchanged = client.get(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert unchanged.json() == created

    def test_delete(self, client, alice):
        created = create(client, alice)
        response = client.delete(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json() == {"message": "Transaction deleted"}

        again = client.delete(f"/api/transactions/{created['id']}", headers=alice["headers"])
        assert again.status_code == 404
        assert again.json() == {"message": "Transaction not found"}

    @pytest.mark.parametrize("transaction_id", [str(uuid4()), "not-a-uuid", "12345"])
    def test_missing_or_malformed_id_is_404(self, client, alice, transaction_id):
        for method in ("get", "put", "delete"):
            kwargs = {"json": {"note": "x"}} if method == "put" else {}
            response = getattr(client, method)(
                f"/api/transactions/{transaction_id}",
                headers=alice["headers"],
                **kwargs,
            )
            assert response.status_code == 404
            assert response.json() == {"message": "Transaction not found"}

    def test_foreign_transaction_is_403_everywhere(self, client, alice, bob):
        theirs = create(client, bob, note="private")
        url = f"/api/transactions/{theirs['id']}"
        forbidden = {"message": "Not authorized to access this transaction"}

        assert client.get(url, headers=alice["headers"]).json() == forbidden
        response = client.put(url, json={"amount": 1}, headers=alice["headers"])
        assert response.status_code == 403
        assert response.json() == forbidden
        response = client.delete(url, headers=alice["headers"])
        assert response.status_code == 403

        # Bob's record is untouched
        assert client.get(url, headers=bob["headers"]).json() == theirs


class TestStatsRoute:
    """Tests for /transactions/stats."""

    def test_worked_example(self, client, alice):
        create(client, alice, type="income", amount=100, category="Salary", date="2024-01-05")
        create(client, alice, type="expense", amount=40, category="Food", date="2024-01-10")
        create(client, alice, type="expense", amount=10, category="Food", date="2024-02-01")

        response = client.get("/api/transactions/stats", headers=alice["headers"])
        assert response.status_code == 200
        stats = response.json()

        assert stats["summary"] == {"totalIncome": 100, "totalExpense": 50, "netBalance": 50}
        assert stats["monthlyData"] == [
            {"month": "2024-01", "income": 100, "expense": 40, "balance": 60},
            {"month": "2024-02", "income": 0, "expense": 10, "balance": -10},
        ]
        assert stats["categoryData"] == [
            {"category": "Food", "income": 0, "expense": 50, "total": 50},
            {"category": "Salary", "income": 100, "expense": 0, "total": 100},
        ]
        assert [c["category"] for c in stats["topCategories"]] == ["Salary", "Food"]
        assert stats["monthlyTrend"] == [
            {"month": "2024-01", "balance": 60},
            {"month": "2024-02", "balance": -10},
        ]

    def test_empty(self, client, alice):
        stats = client.get("/api/transactions/stats", headers=alice["headers"]).json()
        assert stats["summary"] == {"totalIncome": 0, "totalExpense": 0, "netBalance": 0}
        assert stats["categoryData"] == []
        assert stats["monthlyData"] == []

    def test_only_own_transactions(self, client, alice, bob):
        create(client, alice, amount=5)
        create(client, bob, amount=500)
        stats = client.get("/api/transactions/stats", headers=alice["headers"]).json()
        assert stats["summary"]["totalExpense"] == 5

    def test_date_only_end_is_inclusive(self, client, alice):
        create(client, alice, amount=10, date="2024-01-31T18:45:00")
        create(client, alice, amount=20, date="2024-02-01T00:00:00")

        response = client.get(
            "/api/transactions/stats",
            params={"startDate": "2024-01-01", "endDate": "2024-01-31"},
            headers=alice["headers"],
        )
        assert response.json()["summary"]["totalExpense"] == 10

    def test_start_after_end_is_400(self, client, alice):
        response = client.get(
            "/api/transactions/stats",
            params={"startDate": "2024-03-01", "endDate": "2024-01-01"},
            headers=alice["headers"],
        )
        assert response.status_code == 400
        assert response.json() == {"message": "startDate must not be after endDate"}

    def test_unparseable_bound_is_400(self, client, alice):
        response = client.get(
            "/api/transactions/stats",
            params={"startDate": "yesterday"},
            headers=alice["headers"],
        )
        assert response.status_code == 400
