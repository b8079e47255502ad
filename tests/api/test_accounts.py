"""
Tests for the account and user-facing transaction endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business logic is tested in tests/services.
"""


def register(client, account_id, email=None, referral_code=None):
    """Helper: sign up through the API."""
    body = {
        "email": email or f"{account_id}@example.com",
        "full_name": f"User {account_id}",
    }
    if referral_code:
        body["referral_code"] = referral_code
    return client.post("/accounts", json=body, headers={"X-Account-Id": account_id})


class TestRegister:

    def test_register_returns_201(self, client):
        response = register(client, "user-1")
        assert response.status_code == 201

    def test_register_returns_data(self, client):
        data = register(client, "user-1").json()
        assert data["id"] == "user-1"
        assert data["email"] == "user-1@example.com"
        assert float(data["balance"]) == 0
        assert data["status"] == "ACTIVE"
        assert len(data["referral_code"]) == 8

    def test_register_without_principal_returns_401(self, client):
        response = client.post("/accounts", json={
            "email": "anon@example.com",
            "full_name": "Anonymous",
        })
        assert response.status_code == 401

    def test_duplicate_returns_409(self, client):
        register(client, "user-1")
        response = register(client, "user-1", email="other@example.com")
        assert response.status_code == 409

    def test_invalid_payload_returns_422(self, client):
        response = client.post(
            "/accounts", json={"email": "x"}, headers={"X-Account-Id": "user-1"}
        )
        assert response.status_code == 422

    def test_referral(self, client):
        code = register(client, "referrer").json()["referral_code"]
        data = register(client, "referred", referral_code=code).json()
        assert data["referred_by_id"] == "referrer"

        me = client.get("/accounts/me", headers={"X-Account-Id": "referrer"}).json()
        assert me["referral_count"] == 1


class TestMe:

    def test_get_me(self, client):
        register(client, "user-1")
        response = client.get("/accounts/me", headers={"X-Account-Id": "user-1"})
        assert response.status_code == 200
        assert response.json()["id"] == "user-1"

    def test_get_me_unregistered_returns_404(self, client):
        response = client.get("/accounts/me", headers={"X-Account-Id": "ghost"})
        assert response.status_code == 404

    def test_get_me_without_principal_returns_401(self, client):
        assert client.get("/accounts/me").status_code == 401

    def test_my_transactions(self, client):
        register(client, "user-1")
        headers = {"X-Account-Id": "user-1"}
        client.post("/transactions/deposit", json={"amount": 100}, headers=headers)
        client.post("/transactions/withdraw", json={"amount": 40}, headers=headers)

        data = client.get("/accounts/me/transactions", headers=headers).json()
        assert [t["kind"] for t in data] == ["WITHDRAW", "DEPOSIT"]


class TestCashRequests:

    def test_deposit_returns_pending(self, client):
        register(client, "user-1")
        response = client.post(
            "/transactions/deposit",
            json={"amount": "1000.50"},
            headers={"X-Account-Id": "user-1"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["kind"] == "DEPOSIT"
        assert data["status"] == "PENDING"
        assert float(data["amount"]) == 1000.50

    def test_deposit_does_not_change_balance(self, client):
        register(client, "user-1")
        headers = {"X-Account-Id": "user-1"}
        client.post("/transactions/deposit", json={"amount": 1000}, headers=headers)

        me = client.get("/accounts/me", headers=headers).json()
        assert float(me["balance"]) == 0

    def test_zero_amount_returns_422(self, client):
        register(client, "user-1")
        response = client.post(
            "/transactions/deposit",
            json={"amount": 0},
            headers={"X-Account-Id": "user-1"},
        )
        assert response.status_code == 422

    def test_unregistered_returns_404(self, client):
        response = client.post(
            "/transactions/withdraw",
            json={"amount": 10},
            headers={"X-Account-Id": "ghost"},
        )
        assert response.status_code == 404


class TestLoginAndActivity:

    def test_login_stamps_last_login(self, client):
        register(client, "user-1")
        headers = {"X-Account-Id": "user-1"}
        assert client.get("/accounts/me", headers=headers).json()["last_login_at"] is None

        response = client.post("/accounts/me/login", headers=headers)
        assert response.status_code == 200
        assert response.json()["last_login_at"] is not None

    def test_login_unregistered_returns_404(self, client):
        response = client.post("/accounts/me/login", headers={"X-Account-Id": "ghost"})
        assert response.status_code == 404

    def test_activity_lists_audit_entries(self, client):
        register(client, "user-1")
        response = client.get("/accounts/me/activity", headers={"X-Account-Id": "user-1"})
        assert response.status_code == 200
        data = response.json()
        assert [e["event_type"] for e in data] == ["AccountRegistered"]
        assert data[0]["details"]["account_id"] == "user-1"

    def test_activity_rejects_bad_limit(self, client):
        register(client, "user-1")
        response = client.get(
            "/accounts/me/activity?limit=0", headers={"X-Account-Id": "user-1"}
        )
        assert response.status_code == 422
