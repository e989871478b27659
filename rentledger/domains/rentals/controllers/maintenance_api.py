"""Maintenance request API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.utils.validation import parse_json, parse_query
from rentledger.domains.rentals.mappers import map_maintenance
from rentledger.domains.rentals.schemas.rental_schemas import (
    MaintenanceCreate,
    MaintenanceListFilter,
    MaintenanceUpdate,
)
from rentledger.domains.rentals.services import maintenance_service, property_service, tenant_service

maintenance_api_bp = Blueprint("maintenance_api", __name__)


def _serialize(user_id: int, requests):
    props = property_service.property_names(user_id)
    tenants = tenant_service.tenant_names(user_id)
    return [map_maintenance(r, props.get(r.property_id), tenants.get(r.tenant_id)) for r in requests]


@maintenance_api_bp.get("")
@jwt_required()
def list_requests():
    params, err = parse_query(MaintenanceListFilter)
    if err:
        return err
    user_id = int(get_jwt_identity())
    items = maintenance_service.list_requests(user_id, status=params.status, property_id=params.property_id)
    return jsonify({"ok": True, "items": _serialize(user_id, items)})


@maintenance_api_bp.post("")
@jwt_required()
def create_request():
    data, err = parse_json(MaintenanceCreate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        req = maintenance_service.create_request(user_id, **data.model_dump())
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    return jsonify({"ok": True, "request": _serialize(user_id, [req])[0]}), 201


@maintenance_api_bp.get("/<int:request_id>")
@jwt_required()
def get_request(request_id: int):
    user_id = int(get_jwt_identity())
    req = maintenance_service.get_request(user_id, request_id)
    if not req:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "request": _serialize(user_id, [req])[0]})


@maintenance_api_bp.patch("/<int:request_id>")
@jwt_required()
def update_request(request_id: int):
    data, err = parse_json(MaintenanceUpdate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        req = maintenance_service.update_request(user_id, request_id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    if not req:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "request": _serialize(user_id, [req])[0]})


@maintenance_api_bp.delete("/<int:request_id>")
@jwt_required()
def delete_request(request_id: int):
    user_id = int(get_jwt_identity())
    if not maintenance_service.delete_request(user_id, request_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
