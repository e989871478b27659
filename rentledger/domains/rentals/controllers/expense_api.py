"""Expense API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.users.services import user_currency
from rentledger.core.utils.validation import parse_json, parse_query
from rentledger.domains.rentals.ledger import PaymentMetadata
from rentledger.domains.rentals.mappers import map_expense, map_ledger_entry
from rentledger.domains.rentals.schemas.rental_schemas import (
    ExpenseCreate,
    ExpenseListFilter,
    ExpenseReportQuery,
    ExpenseUpdate,
    PaymentRecordRequest,
)
from rentledger.domains.rentals.services import expense_service, property_service

expense_api_bp = Blueprint("expense_api", __name__)


def _serialize(user_id: int, expenses):
    props = property_service.property_names(user_id)
    currency = user_currency(user_id)
    return [map_expense(e, props.get(e.property_id), currency) for e in expenses]


@expense_api_bp.get("")
@jwt_required()
def list_expenses():
    params, err = parse_query(ExpenseListFilter)
    if err:
        return err
    user_id = int(get_jwt_identity())
    expenses = expense_service.list_expenses(user_id, **params.model_dump())
    return jsonify({"ok": True, "items": _serialize(user_id, expenses)})


@expense_api_bp.get("/report")
@jwt_required()
def expense_report():
    params, err = parse_query(ExpenseReportQuery)
    if err:
        return err
    user_id = int(get_jwt_identity())
    report = expense_service.expense_report(user_id, params.start_date, params.end_date)
    return jsonify({"ok": True, "report": report})


@expense_api_bp.post("")
@jwt_required()
def create_expense():
    data, err = parse_json(ExpenseCreate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        expense = expense_service.create_expense(user_id, **data.model_dump())
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "expense": _serialize(user_id, [expense])[0]}), 201


@expense_api_bp.get("/<int:expense_id>")
@jwt_required()
def get_expense(expense_id: int):
    user_id = int(get_jwt_identity())
    expense = expense_service.get_expense(user_id, expense_id)
    return jsonify({"ok": True, "expense": _serialize(user_id, [expense])[0]})


@expense_api_bp.patch("/<int:expense_id>")
@jwt_required()
def update_expense(expense_id: int):
    data, err = parse_json(ExpenseUpdate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        expense = expense_service.update_expense(user_id, expense_id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "expense": _serialize(user_id, [expense])[0]})


@expense_api_bp.delete("/<int:expense_id>")
@jwt_required()
def delete_expense(expense_id: int):
    user_id = int(get_jwt_identity())
    expense_service.delete_expense(user_id, expense_id)
    return jsonify({"ok": True})


@expense_api_bp.get("/<int:expense_id>/payments")
@jwt_required()
def list_expense_payments(expense_id: int):
    user_id = int(get_jwt_identity())
    currency = user_currency(user_id)
    entries = expense_service.list_expense_payments(user_id, expense_id)
    return jsonify({"ok": True, "items": [map_ledger_entry(e, currency) for e in entries]})


@expense_api_bp.post("/<int:expense_id>/payments")
@jwt_required()
def record_expense_payment(expense_id: int):
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
    expense = expense_service.record_expense_payment(user_id, expense_id, data.amount, metadata)
    return jsonify({"ok": True, "expense": _serialize(user_id, [expense])[0]}), 201
