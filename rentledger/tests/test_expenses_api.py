"""Integration tests for /api/expenses."""

from datetime import date, timedelta

import pytest

pytestmark = pytest.mark.integration


def _expense(client, headers, **overrides):
    body = {
        "title": "Water bill",
        "category": "water",
        "amount": 200,
        "due_date": (date.today() - timedelta(days=3)).isoformat(),
    }
    body.update(overrides)
    resp = client.post("/api/expenses", json=body, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["expense"]


class TestExpenseCrud:
    def test_create_and_get(self, client, auth_headers, rental_property):
        expense = _expense(client, auth_headers, property_id=rental_property["id"], is_recurring=True, frequency="monthly")
        assert expense["status"] == "overdue"
        assert expense["property_name"] == "Riverside Apartments"
        assert expense["is_recurring"] is True

        resp = client.get(f"/api/expenses/{expense['id']}", headers=auth_headers)
        assert resp.get_json()["expense"]["title"] == "Water bill"

    def test_create_with_foreign_property(self, client, auth_headers, other_headers, rental_property):
        resp = client.post(
            "/api/expenses",
            json={
                "title": "Tax",
                "category": "tax",
                "amount": 10,
                "due_date": "2024-01-01",
                "property_id": rental_property["id"],
            },
            headers=other_headers,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "property_not_found"

    def test_unknown_category(self, client, auth_headers):
        resp = client.post(
            "/api/expenses",
            json={"title": "Snacks", "category": "food", "amount": 10, "due_date": "2024-01-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 400

    def test_filter_by_category(self, client, auth_headers):
        _expense(client, auth_headers)
        _expense(client, auth_headers, title="Cover", category="insurance")
        items = client.get("/api/expenses?category=insurance", headers=auth_headers).get_json()["items"]
        assert [e["title"] for e in items] == ["Cover"]

    def test_delete(self, client, auth_headers):
        expense = _expense(client, auth_headers)
        assert client.delete(f"/api/expenses/{expense['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/expenses/{expense['id']}", headers=auth_headers).status_code == 404


class TestExpensePayments:
    def test_increments_settle_expense(self, client, auth_headers):
        expense = _expense(client, auth_headers)
        resp = client.post(f"/api/expenses/{expense['id']}/payments", json={"amount": 50}, headers=auth_headers)
        assert resp.status_code == 201
        assert resp.get_json()["expense"]["status"] == "overdue"

        resp = client.post(
            f"/api/expenses/{expense['id']}/payments",
            json={"amount": 150, "date": "2024-02-05"},
            headers=auth_headers,
        )
        body = resp.get_json()["expense"]
        assert body["paid_amount"] == 200.0
        assert body["status"] == "paid"
        assert body["paid_date"] == "2024-02-05"

        items = client.get(f"/api/expenses/{expense['id']}/payments", headers=auth_headers).get_json()["items"]
        assert sorted(i["amount"] for i in items) == [50.0, 150.0]

    def test_invalid_amount(self, client, auth_headers):
        expense = _expense(client, auth_headers)
        resp = client.post(f"/api/expenses/{expense['id']}/payments", json={"amount": "-1"}, headers=auth_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "invalid_amount"

    def test_missing_expense(self, client, auth_headers):
        resp = client.post("/api/expenses/999/payments", json={"amount": 5}, headers=auth_headers)
        assert resp.status_code == 404


class TestExpenseReport:
    def test_report_groups_by_category(self, client, auth_headers):
        today = date.today()
        paid = _expense(client, auth_headers, amount=100, due_date=(today - timedelta(days=20)).isoformat())
        client.post(f"/api/expenses/{paid['id']}/payments", json={"amount": 100}, headers=auth_headers)
        partly = _expense(client, auth_headers, title="Cover", category="insurance", amount=200)
        client.post(f"/api/expenses/{partly['id']}/payments", json={"amount": 50}, headers=auth_headers)
        _expense(client, auth_headers, title="Rates", category="tax", amount=50, due_date=(today + timedelta(days=20)).isoformat())

        report = client.get("/api/expenses/report", headers=auth_headers).get_json()["report"]
        assert report["count"] == 3
        assert report["totals"]["total_amount"] == 350.0
        assert report["totals"]["paid_amount"] == 150.0
        assert report["totals"]["pending_count"] == 1
        assert report["totals"]["overdue_count"] == 1
        assert report["percent_paid"] == 42.9
        assert set(report["by_category"]) == {"water", "insurance", "tax"}
        assert report["by_category"]["insurance"]["outstanding"] == 150.0

    def test_report_date_range(self, client, auth_headers):
        _expense(client, auth_headers, due_date="2024-01-15")
        _expense(client, auth_headers, due_date="2024-03-15")
        resp = client.get("/api/expenses/report?start_date=2024-01-01&end_date=2024-01-31", headers=auth_headers)
        report = resp.get_json()["report"]
        assert report["count"] == 1
        assert report["start_date"] == "2024-01-01"

    def test_empty_report(self, client, auth_headers):
        report = client.get("/api/expenses/report", headers=auth_headers).get_json()["report"]
        assert report["count"] == 0
        assert report["percent_paid"] == 0.0
        assert report["by_category"] == {}

    def test_inverted_range(self, client, auth_headers):
        resp = client.get("/api/expenses/report?start_date=2024-02-01&end_date=2024-01-01", headers=auth_headers)
        assert resp.status_code == 400
