"""Integration tests for /api/payments."""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from rentledger.core.activity.models import ActivityRecord
from rentledger.extensions import db

pytestmark = pytest.mark.integration


@pytest.fixture
def payment(client, auth_headers, tenant):
    """5,000 owed, due 30 days ago."""
    resp = client.post(
        "/api/payments",
        json={
            "tenant_id": tenant["id"],
            "amount": 5000,
            "due_date": (date.today() - timedelta(days=30)).isoformat(),
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["payment"]


def _pay(client, headers, payment_id, body):
    return client.post(f"/api/payments/{payment_id}/transactions", json=body, headers=headers)


class TestCreateAndRead:
    def test_requires_auth(self, client):
        resp = client.get("/api/payments")
        assert resp.status_code == 401
        assert resp.get_json()["error"] == "unauthorized"

    def test_create_derives_status_and_property(self, payment, tenant):
        assert payment["status"] == "overdue"
        assert payment["paid_amount"] == 0.0
        assert payment["balance"] == 5000.0
        assert payment["property_id"] == tenant["property_id"]
        assert payment["tenant_name"] == "Jane Wanjiku"
        assert payment["amount_display"] == "Ksh 5,000.00"

    def test_future_due_is_pending(self, client, auth_headers, tenant):
        resp = client.post(
            "/api/payments",
            json={"tenant_id": tenant["id"], "amount": 100, "due_date": (date.today() + timedelta(days=5)).isoformat()},
            headers=auth_headers,
        )
        assert resp.get_json()["payment"]["status"] == "pending"

    def test_unknown_tenant(self, client, auth_headers):
        resp = client.post(
            "/api/payments",
            json={"tenant_id": 999, "amount": 100, "due_date": "2024-01-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "tenant_not_found"

    def test_create_with_foreign_property(self, client, auth_headers, other_headers, tenant):
        resp = client.post(
            "/api/properties",
            json={
                "name": "Hillside Court",
                "address": "4 Hill Lane",
                "city": "Nakuru",
                "state": "Nakuru County",
                "zip_code": "20100",
                "type": "house",
                "monthly_rent": 9000,
            },
            headers=other_headers,
        )
        assert resp.status_code == 201
        foreign_id = resp.get_json()["property"]["id"]

        resp = client.post(
            "/api/payments",
            json={"tenant_id": tenant["id"], "property_id": foreign_id, "amount": 100, "due_date": "2024-01-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "property_not_found"
        listed = client.get("/api/payments", headers=auth_headers).get_json()["items"]
        assert all(p["property_id"] != foreign_id for p in listed)

    @pytest.mark.parametrize("amount", [0, -10])
    def test_create_rejects_non_positive_amount(self, client, auth_headers, tenant, amount):
        resp = client.post(
            "/api/payments",
            json={"tenant_id": tenant["id"], "amount": amount, "due_date": "2024-01-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"

    def test_list_filters(self, client, auth_headers, payment):
        resp = client.get("/api/payments?status=overdue", headers=auth_headers)
        ids = [p["id"] for p in resp.get_json()["items"]]
        assert payment["id"] in ids
        resp = client.get("/api/payments?status=paid", headers=auth_headers)
        assert resp.get_json()["items"] == []

    def test_other_owner_gets_404(self, client, other_headers, payment):
        resp = client.get(f"/api/payments/{payment['id']}", headers=other_headers)
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "not_found"


class TestRecordPayment:
    def test_partial_then_settling_payment(self, client, auth_headers, payment):
        resp = _pay(client, auth_headers, payment["id"], {"amount": 2000})
        assert resp.status_code == 201
        body = resp.get_json()["payment"]
        assert body["paid_amount"] == 2000.0
        assert body["status"] == "overdue"
        assert body["paid_date"] is None

        resp = _pay(client, auth_headers, payment["id"], {"amount": "3000", "date": "2024-02-05", "method": "mpesa"})
        body = resp.get_json()["payment"]
        assert body["paid_amount"] == 5000.0
        assert body["status"] == "paid"
        assert body["paid_date"] == "2024-02-05"
        assert body["method"] == "mpesa"
        assert body["balance"] == 0.0

    def test_paid_date_accepted_under_either_name(self, client, auth_headers, payment):
        resp = _pay(client, auth_headers, payment["id"], {"amount": 5000, "paid_date": "2024-03-01"})
        assert resp.get_json()["payment"]["paid_date"] == "2024-03-01"

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, "NaN", True])
    def test_invalid_amount_is_400_and_changes_nothing(self, client, auth_headers, payment, amount):
        resp = _pay(client, auth_headers, payment["id"], {"amount": amount})
        assert resp.status_code == 400
        assert resp.get_json() == {"ok": False, "error": "invalid_amount", "message": "Invalid payment amount"}

        current = client.get(f"/api/payments/{payment['id']}", headers=auth_headers).get_json()["payment"]
        assert current["paid_amount"] == 0.0
        txns = client.get(f"/api/payments/{payment['id']}/transactions", headers=auth_headers).get_json()
        assert txns["items"] == []

    def test_unknown_payment_is_404(self, client, auth_headers):
        resp = _pay(client, auth_headers, 424242, {"amount": 10})
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "not_found"

    def test_other_owner_cannot_record(self, client, auth_headers, other_headers, payment):
        resp = _pay(client, other_headers, payment["id"], {"amount": 10})
        assert resp.status_code == 404
        current = client.get(f"/api/payments/{payment['id']}", headers=auth_headers).get_json()["payment"]
        assert current["paid_amount"] == 0.0

    def test_overpayment_is_flagged(self, client, auth_headers, payment):
        body = _pay(client, auth_headers, payment["id"], {"amount": 6000}).get_json()["payment"]
        assert body["status"] == "paid"
        assert body["overpaid"] is True
        assert body["balance"] == -1000.0

    def test_transactions_history(self, client, auth_headers, payment):
        _pay(client, auth_headers, payment["id"], {"amount": 1000, "date": "2024-01-05", "reference": "ABC"})
        _pay(client, auth_headers, payment["id"], {"amount": 500, "date": "2024-01-20"})
        items = client.get(f"/api/payments/{payment['id']}/transactions", headers=auth_headers).get_json()["items"]
        assert [(i["amount"], i["date"]) for i in items] == [(500.0, "2024-01-20"), (1000.0, "2024-01-05")]
        assert items[1]["reference"] == "ABC"

    def test_recording_writes_activity(self, app, client, auth_headers, payment):
        _pay(client, auth_headers, payment["id"], {"amount": 250})
        types = [r.event_type for r in ActivityRecord.query.all()]
        assert "rentals.payment.recorded" in types

    def test_storage_failure_is_generic_500(self, client, auth_headers, payment, monkeypatch):
        real_execute = db.session.execute

        def flaky_execute(statement, *args, **kwargs):
            if getattr(statement, "is_dml", False) and statement.table.name == "rentals_payment":
                raise OperationalError(str(statement), {}, Exception("disk I/O error"))
            return real_execute(statement, *args, **kwargs)

        monkeypatch.setattr(db.session, "execute", flaky_execute)
        resp = _pay(client, auth_headers, payment["id"], {"amount": 100})
        assert resp.status_code == 500
        body = resp.get_json()
        assert body["error"] == "storage_failure"
        assert "disk I/O" not in body["message"]


class TestUpdateAndDelete:
    def test_paid_amount_is_not_patchable(self, client, auth_headers, payment):
        resp = client.patch(f"/api/payments/{payment['id']}", json={"paid_amount": 5000}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"

    def test_patch_amount_rederives_status(self, client, auth_headers, payment):
        _pay(client, auth_headers, payment["id"], {"amount": 5000})
        resp = client.patch(f"/api/payments/{payment['id']}", json={"amount": 6000}, headers=auth_headers)
        body = resp.get_json()["payment"]
        assert body["status"] == "overdue"
        assert body["paid_amount"] == 5000.0

    def test_patch_missing(self, client, auth_headers):
        resp = client.patch("/api/payments/999", json={"notes": "x"}, headers=auth_headers)
        assert resp.status_code == 404

    def test_delete(self, client, auth_headers, payment):
        resp = client.delete(f"/api/payments/{payment['id']}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.get_json() == {"ok": True}
        assert client.get(f"/api/payments/{payment['id']}", headers=auth_headers).status_code == 404
        assert client.delete(f"/api/payments/{payment['id']}", headers=auth_headers).status_code == 404
