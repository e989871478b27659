"""Integration tests for /api/auth."""

import pytest

from rentledger.core.auth.models import JWTBlocklist

pytestmark = pytest.mark.integration


def _register(client, **overrides):
    body = {"username": "mary", "email": "Mary@Example.com", "password": "Landlord1", "currency": "usd"}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestRegister:
    def test_register_returns_token_and_cookie(self, client):
        resp = _register(client)
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["user"]["email"] == "mary@example.com"
        assert body["user"]["currency"] == "USD"
        assert body["access_token"]
        assert "access_token_cookie" in resp.headers.get("Set-Cookie", "")

    def test_duplicate_email(self, client):
        _register(client)
        resp = _register(client, username="mary2", email="mary@example.com")
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "email_already_exists"

    def test_duplicate_username(self, client):
        _register(client)
        resp = _register(client, email="other@example.com")
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "username_already_exists"

    def test_weak_password(self, client):
        resp = _register(client, password="password")
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"


class TestLogin:
    def test_login_by_email_or_username(self, client, user):
        for identifier in ("landlord@example.com", "LANDLORD"):
            resp = client.post("/api/auth/login", json={"email": identifier, "password": "Secret123"})
            assert resp.status_code == 200
            assert resp.get_json()["user"]["id"] == user.id

    def test_bad_password(self, client, user):
        resp = client.post("/api/auth/login", json={"email": "landlord@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json() == {"ok": False, "error": "invalid_credentials"}

    def test_me(self, client, auth_headers, user):
        body = client.get("/api/auth/me", headers=auth_headers).get_json()
        assert body["user"]["username"] == "landlord"
        assert body["user"]["currency"] == "KES"


class TestSession:
    def test_logout_revokes_token(self, app, client, user):
        token = client.post(
            "/api/auth/login", json={"email": "landlord", "password": "Secret123"}
        ).get_json()["access_token"]
        assert client.post("/api/auth/logout", headers=_bearer(token)).status_code == 200
        assert JWTBlocklist.query.count() == 1

        resp = client.get("/api/auth/me", headers=_bearer(token))
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "token_revoked"

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers=_bearer("not-a-jwt"))
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "unauthorized"


class TestProfile:
    def test_update_currency_changes_display(self, client, auth_headers, rental_property):
        resp = client.patch("/api/auth/profile", json={"currency": "gbp"}, headers=auth_headers)
        assert resp.get_json()["user"]["currency"] == "GBP"
        prop = client.get(f"/api/properties/{rental_property['id']}", headers=auth_headers).get_json()["property"]
        assert prop["monthly_rent_display"] == "£25,000.00"

    def test_email_taken(self, client, auth_headers, other_user):
        resp = client.patch("/api/auth/profile", json={"email": "neighbour@example.com"}, headers=auth_headers)
        assert resp.status_code == 409
        assert resp.get_json()["error"] == "email_already_exists"

    def test_unknown_field(self, client, auth_headers):
        resp = client.patch("/api/auth/profile", json={"is_active": False}, headers=auth_headers)
        assert resp.status_code == 400


class TestChangePassword:
    def test_change_password(self, client, auth_headers, user):
        resp = client.post(
            "/api/auth/change-password",
            json={"current_password": "Secret123", "new_password": "Fresh12345"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        login = client.post("/api/auth/login", json={"email": "landlord", "password": "Fresh12345"})
        assert login.status_code == 200

    def test_wrong_current_password(self, client, auth_headers, user):
        resp = client.post(
            "/api/auth/change-password",
            json={"current_password": "wrong", "new_password": "Fresh12345"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "invalid_credentials"


def test_health(client):
    body = client.get("/api/health").get_json()
    assert body == {"ok": True, "ledger_backend": "sqlalchemy"}
