"""Tenant portal API: the signed-in user's own tenancy, matched by email."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.users.services import get_user
from rentledger.domains.rentals.mappers import map_maintenance, map_payment, map_property, map_tenant
from rentledger.domains.rentals.services import portal_service

tenant_portal_api_bp = Blueprint("tenant_portal_api", __name__)


def _current_tenant():
    user = get_user(int(get_jwt_identity()))
    if not user:
        return None
    return portal_service.find_tenant_by_email(user.email)


@tenant_portal_api_bp.get("/me")
@jwt_required()
def me():
    tenant = _current_tenant()
    if not tenant:
        return jsonify({"ok": False, "error": "tenant_not_found"}), 404
    return jsonify({"ok": True, "tenant": map_tenant(tenant)})


@tenant_portal_api_bp.get("/dashboard")
@jwt_required()
def dashboard():
    tenant = _current_tenant()
    if not tenant:
        return jsonify({"ok": False, "error": "tenant_not_found"}), 404
    landlord = get_user(tenant.user_id)
    currency = landlord.currency if landlord else "KES"
    view = portal_service.tenant_dashboard(tenant)
    prop = view["property"]
    property_name = prop.name if prop else None
    next_payment = view["next_payment"]
    return jsonify(
        {
            "ok": True,
            "tenant": map_tenant(tenant, property_name, currency),
            "property": map_property(prop, currency) if prop else None,
            "payments": [map_payment(p, tenant.full_name, property_name, currency) for p in view["payments"]],
            "maintenance": [map_maintenance(r, property_name, tenant.full_name) for r in view["maintenance"]],
            "next_payment": (
                map_payment(next_payment, tenant.full_name, property_name, currency) if next_payment else None
            ),
        }
    )
