"""Landlord expense service layer (expense ledger plus reporting)."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from rentledger.core.activity import services as activity
from rentledger.core.users.services import user_currency
from rentledger.domains.rentals.events import (
    EXPENSE_CREATED,
    EXPENSE_DELETED,
    EXPENSE_PAID,
    EXPENSE_UPDATED,
)
from rentledger.domains.rentals.ledger import get_ledgers
from rentledger.domains.rentals.ledger.currency import format_currency
from rentledger.domains.rentals.ledger.reconciliation import (
    PaymentMetadata,
    summarize,
    summarize_by,
    validate_increment,
)
from rentledger.domains.rentals.services.property_service import get_property
from rentledger.extensions import db

_EDITABLE = (
    "title",
    "category",
    "property_id",
    "amount",
    "due_date",
    "expiry_date",
    "is_recurring",
    "frequency",
    "method",
    "reference",
    "notes",
)


def _ledger():
    return get_ledgers().expenses


def _check_property(user_id: int, property_id: Optional[int]) -> None:
    if property_id is not None and not get_property(user_id, property_id):
        raise ValueError("property_not_found")


def list_expenses(user_id: int, **filters) -> List[Any]:
    return _ledger().list(user_id, **{k: v for k, v in filters.items() if v is not None})


def get_expense(user_id: int, expense_id: int):
    return _ledger().get(user_id, expense_id)


def create_expense(user_id: int, **fields):
    _check_property(user_id, fields.get("property_id"))
    values = {k: fields[k] for k in _EDITABLE if fields.get(k) is not None}
    expense = _ledger().create(user_id, values)
    activity.record(
        EXPENSE_CREATED,
        f"Expense {expense.title} of {format_currency(expense.amount, user_currency(user_id))} added",
        user_id=user_id,
        payload={
            "expense_id": expense.id,
            "category": expense.category,
            "amount": str(expense.amount),
            "due_date": expense.due_date.isoformat(),
        },
        property_id=expense.property_id,
    )
    db.session.commit()
    return expense


def update_expense(user_id: int, expense_id: int, **fields):
    _check_property(user_id, fields.get("property_id"))
    values = {k: fields[k] for k in _EDITABLE if fields.get(k) is not None}
    expense = _ledger().update(user_id, expense_id, values)
    activity.record(
        EXPENSE_UPDATED,
        f"Expense {expense.title} updated",
        user_id=user_id,
        payload={"expense_id": expense.id, "fields": sorted(values), "status": expense.status},
        property_id=expense.property_id,
    )
    db.session.commit()
    return expense


def delete_expense(user_id: int, expense_id: int) -> None:
    expense = _ledger().get(user_id, expense_id)
    _ledger().delete(user_id, expense_id)
    activity.record(
        EXPENSE_DELETED,
        f"Expense {expense.title} removed",
        user_id=user_id,
        payload={"expense_id": expense_id},
        property_id=expense.property_id,
    )
    db.session.commit()


def record_expense_payment(user_id: int, expense_id: int, payment_amount, metadata: PaymentMetadata | None = None):
    increment = validate_increment(payment_amount)

    def _log(expense):
        activity.record(
            EXPENSE_PAID,
            f"Paid {format_currency(increment, user_currency(user_id))} towards {expense.title}",
            user_id=user_id,
            payload={
                "expense_id": expense.id,
                "increment": str(increment),
                "paid_amount": str(expense.paid_amount),
                "status": expense.status,
            },
            property_id=expense.property_id,
        )

    expense = _ledger().record_payment(user_id, expense_id, increment, metadata, on_applied=_log)
    db.session.commit()
    return expense


def list_expense_payments(user_id: int, expense_id: int) -> List[Any]:
    return _ledger().entries(user_id, expense_id)


def expense_report(user_id: int, start_date: date | None = None, end_date: date | None = None) -> dict:
    """Totals and per-category ledger metrics for expenses due in the range."""
    ledger = _ledger()
    expenses = ledger.list(user_id, due_from=start_date, due_to=end_date)
    as_of = ledger.today()
    totals = summarize(expenses, as_of)
    by_category = summarize_by(expenses, lambda e: e.category, as_of)
    return {
        "start_date": start_date.isoformat() if start_date else None,
        "end_date": end_date.isoformat() if end_date else None,
        "totals": totals.to_dict(),
        "by_category": {category: metrics.to_dict() for category, metrics in sorted(by_category.items())},
        "percent_paid": totals.percent_paid,
        "count": totals.count,
    }
