"""Tenant API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.users.services import user_currency
from rentledger.core.utils.validation import parse_json
from rentledger.domains.rentals.mappers import map_tenant
from rentledger.domains.rentals.schemas.rental_schemas import TenantCreate, TenantUpdate
from rentledger.domains.rentals.services import property_service, tenant_service

tenant_api_bp = Blueprint("tenant_api", __name__)


@tenant_api_bp.get("")
@jwt_required()
def list_tenants():
    user_id = int(get_jwt_identity())
    property_id = request.args.get("property_id", type=int)
    names = property_service.property_names(user_id)
    currency = user_currency(user_id)
    items = tenant_service.list_tenants(user_id, property_id=property_id)
    return jsonify({"ok": True, "items": [map_tenant(t, names.get(t.property_id), currency) for t in items]})


@tenant_api_bp.post("")
@jwt_required()
def create_tenant():
    data, err = parse_json(TenantCreate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        tenant = tenant_service.create_tenant(user_id, **data.model_dump())
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    prop = property_service.get_property(user_id, tenant.property_id)
    return (
        jsonify({"ok": True, "tenant": map_tenant(tenant, prop.name if prop else None, user_currency(user_id))}),
        201,
    )


@tenant_api_bp.get("/<int:tenant_id>")
@jwt_required()
def get_tenant(tenant_id: int):
    user_id = int(get_jwt_identity())
    tenant = tenant_service.get_tenant(user_id, tenant_id)
    if not tenant:
        return jsonify({"ok": False, "error": "not_found"}), 404
    prop = property_service.get_property(user_id, tenant.property_id)
    return jsonify({"ok": True, "tenant": map_tenant(tenant, prop.name if prop else None, user_currency(user_id))})


@tenant_api_bp.patch("/<int:tenant_id>")
@jwt_required()
def update_tenant(tenant_id: int):
    data, err = parse_json(TenantUpdate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        tenant = tenant_service.update_tenant(user_id, tenant_id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    if not tenant:
        return jsonify({"ok": False, "error": "not_found"}), 404
    prop = property_service.get_property(user_id, tenant.property_id)
    return jsonify({"ok": True, "tenant": map_tenant(tenant, prop.name if prop else None, user_currency(user_id))})


@tenant_api_bp.delete("/<int:tenant_id>")
@jwt_required()
def delete_tenant(tenant_id: int):
    user_id = int(get_jwt_identity())
    if not tenant_service.delete_tenant(user_id, tenant_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
