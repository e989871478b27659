"""Integration tests for /api/tenant (tenant self-service)."""

import pytest

pytestmark = pytest.mark.integration


@pytest.fixture
def tenant_headers(make_user, headers_for, tenant):
    account = make_user("jane", "jane@example.com")
    return headers_for(account)


def test_me_matches_tenancy_by_email(client, tenant_headers, tenant):
    resp = client.get("/api/tenant/me", headers=tenant_headers)
    assert resp.status_code == 200
    assert resp.get_json()["tenant"]["id"] == tenant["id"]


def test_dashboard_shows_own_ledger(client, auth_headers, tenant_headers, tenant):
    body = client.get("/api/tenant/dashboard", headers=tenant_headers).get_json()
    assert body["ok"] is True
    assert body["property"]["name"] == "Riverside Apartments"
    assert len(body["payments"]) == 1
    assert body["next_payment"]["status"] == "overdue"

    payment_id = body["payments"][0]["id"]
    client.post(f"/api/payments/{payment_id}/transactions", json={"amount": 25000}, headers=auth_headers)
    body = client.get("/api/tenant/dashboard", headers=tenant_headers).get_json()
    assert body["payments"][0]["status"] == "paid"
    assert body["next_payment"] is None


def test_user_without_tenancy(client, auth_headers):
    resp = client.get("/api/tenant/me", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "tenant_not_found"
