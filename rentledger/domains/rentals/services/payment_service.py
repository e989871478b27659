"""Rent payment service layer.

Payments live in the payment ledger (see ``rentledger.domains.rentals.ledger``);
this module adds the tenancy checks and the activity feed around it.
"""

from __future__ import annotations

from typing import Any, List

from rentledger.core.activity import services as activity
from rentledger.core.users.services import user_currency
from rentledger.domains.rentals.events import (
    PAYMENT_CREATED,
    PAYMENT_DELETED,
    PAYMENT_RECORDED,
    PAYMENT_UPDATED,
)
from rentledger.domains.rentals.ledger import get_ledgers
from rentledger.domains.rentals.ledger.currency import format_currency
from rentledger.domains.rentals.ledger.reconciliation import PaymentMetadata, validate_increment
from rentledger.domains.rentals.models.tenant_models import Tenant
from rentledger.domains.rentals.services.property_service import get_property
from rentledger.extensions import db

_EDITABLE = ("amount", "due_date", "method", "reference", "notes")


def _ledger():
    return get_ledgers().payments


def _tenant(user_id: int, tenant_id: int | None) -> Tenant | None:
    if tenant_id is None:
        return None
    return Tenant.query.filter_by(id=tenant_id, user_id=user_id).first()


def list_payments(user_id: int, **filters) -> List[Any]:
    return _ledger().list(user_id, **{k: v for k, v in filters.items() if v is not None})


def get_payment(user_id: int, payment_id: int):
    """Raises ``NotFound`` for unknown ids."""
    return _ledger().get(user_id, payment_id)


def create_payment(user_id: int, *, tenant_id: int, amount, due_date, property_id: int | None = None, **extra):
    tenant = _tenant(user_id, tenant_id)
    if not tenant:
        raise ValueError("tenant_not_found")
    if property_id is not None and not get_property(user_id, property_id):
        raise ValueError("property_not_found")
    values = {
        "tenant_id": tenant.id,
        "property_id": property_id or tenant.property_id,
        "amount": amount,
        "due_date": due_date,
    }
    values.update({k: extra[k] for k in ("method", "reference", "notes") if extra.get(k) is not None})
    payment = _ledger().create(user_id, values)
    activity.record(
        PAYMENT_CREATED,
        f"Rent of {format_currency(payment.amount, user_currency(user_id))} due "
        f"{payment.due_date.isoformat()} for {tenant.full_name}",
        user_id=user_id,
        payload={
            "payment_id": payment.id,
            "tenant_id": tenant.id,
            "amount": str(payment.amount),
            "due_date": payment.due_date.isoformat(),
        },
        property_id=payment.property_id,
        tenant_id=tenant.id,
    )
    db.session.commit()
    return payment


def update_payment(user_id: int, payment_id: int, **fields):
    values = {k: fields[k] for k in _EDITABLE if fields.get(k) is not None}
    payment = _ledger().update(user_id, payment_id, values)
    activity.record(
        PAYMENT_UPDATED,
        f"Payment #{payment.id} updated",
        user_id=user_id,
        payload={"payment_id": payment.id, "fields": sorted(values), "status": payment.status},
        property_id=payment.property_id,
        tenant_id=payment.tenant_id,
    )
    db.session.commit()
    return payment


def delete_payment(user_id: int, payment_id: int) -> None:
    payment = _ledger().get(user_id, payment_id)
    _ledger().delete(user_id, payment_id)
    activity.record(
        PAYMENT_DELETED,
        f"Payment #{payment_id} removed",
        user_id=user_id,
        payload={"payment_id": payment_id},
        property_id=payment.property_id,
        tenant_id=payment.tenant_id,
    )
    db.session.commit()


def record_payment(user_id: int, payment_id: int, payment_amount, metadata: PaymentMetadata | None = None):
    """Record a rent increment. Raises ``InvalidAmount`` / ``NotFound``."""
    increment = validate_increment(payment_amount)

    def _log(payment):
        tenant = _tenant(user_id, payment.tenant_id)
        payer = tenant.full_name if tenant else f"tenant #{payment.tenant_id}"
        activity.record(
            PAYMENT_RECORDED,
            f"Payment of {format_currency(increment, user_currency(user_id))} received from {payer}",
            user_id=user_id,
            payload={
                "payment_id": payment.id,
                "increment": str(increment),
                "paid_amount": str(payment.paid_amount),
                "status": payment.status,
            },
            property_id=payment.property_id,
            tenant_id=payment.tenant_id,
        )

    payment = _ledger().record_payment(user_id, payment_id, increment, metadata, on_applied=_log)
    db.session.commit()
    return payment


def list_transactions(user_id: int, payment_id: int) -> List[Any]:
    return _ledger().entries(user_id, payment_id)


def payment_metrics(user_id: int, **filters):
    ledger = _ledger()
    ledger.sweep_overdue(user_id)
    return ledger.aggregate_metrics(user_id, **filters)
