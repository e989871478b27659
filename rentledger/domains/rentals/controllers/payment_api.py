"""Rent payment API controllers.

Ledger errors (``InvalidAmount``, ``NotFound``, ``StorageFailure``) are not
caught here; the app-level handlers turn them into 400 / 404 / 500.
"""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.users.services import user_currency
from rentledger.core.utils.validation import parse_json, parse_query
from rentledger.domains.rentals.ledger import PaymentMetadata
from rentledger.domains.rentals.mappers import map_ledger_entry, map_payment
from rentledger.domains.rentals.schemas.rental_schemas import (
    PaymentCreate,
    PaymentListFilter,
    PaymentRecordRequest,
    PaymentUpdate,
)
from rentledger.domains.rentals.services import payment_service, property_service, tenant_service

payment_api_bp = Blueprint("payment_api", __name__)


def _serialize(user_id: int, payments):
    tenants = tenant_service.tenant_names(user_id)
    props = property_service.property_names(user_id)
    currency = user_currency(user_id)
    return [map_payment(p, tenants.get(p.tenant_id), props.get(p.property_id), currency) for p in payments]


@payment_api_bp.get("")
@jwt_required()
def list_payments():
    params, err = parse_query(PaymentListFilter)
    if err:
        return err
    user_id = int(get_jwt_identity())
    payments = payment_service.list_payments(user_id, **params.model_dump())
    return jsonify({"ok": True, "items": _serialize(user_id, payments)})


@payment_api_bp.post("")
@jwt_required()
def create_payment():
    data, err = parse_json(PaymentCreate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        payment = payment_service.create_payment(user_id, **data.model_dump())
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "payment": _serialize(user_id, [payment])[0]}), 201


@payment_api_bp.get("/<int:payment_id>")
@jwt_required()
def get_payment(payment_id: int):
    user_id = int(get_jwt_identity())
    payment = payment_service.get_payment(user_id, payment_id)
    return jsonify({"ok": True, "payment": _serialize(user_id, [payment])[0]})


@payment_api_bp.patch("/<int:payment_id>")
@jwt_required()
def update_payment(payment_id: int):
    data, err = parse_json(PaymentUpdate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    payment = payment_service.update_payment(user_id, payment_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "payment": _serialize(user_id, [payment])[0]})


@payment_api_bp.delete("/<int:payment_id>")
@jwt_required()
def delete_payment(payment_id: int):
    user_id = int(get_jwt_identity())
    payment_service.delete_payment(user_id, payment_id)
    return jsonify({"ok": True})


@payment_api_bp.get("/<int:payment_id>/transactions")
@jwt_required()
def list_transactions(payment_id: int):
    user_id = int(get_jwt_identity())
    currency = user_currency(user_id)
    entries = payment_service.list_transactions(user_id, payment_id)
    return jsonify({"ok": True, "items": [map_ledger_entry(e, currency) for e in entries]})


@payment_api_bp.post("/<int:payment_id>/transactions")
@jwt_required()
def record_transaction(payment_id: int):
    data, err = parse_json(PaymentRecordRequest)
    if err:
        return err
    user_id = int(get_jwt_identity())
    metadata = PaymentMetadata(
        paid_date=data.paid_date,
        method=data.method,
        reference=data.reference,
        notes=data.notes,
    )
    payment = payment_service.record_payment(user_id, payment_id, data.amount, metadata)
    return jsonify({"ok": True, "payment": _serialize(user_id, [payment])[0]}), 201
