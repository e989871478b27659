"""Dashboard API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.domains.rentals.services import dashboard_service

dashboard_api_bp = Blueprint("dashboard_api", __name__)


@dashboard_api_bp.get("/metrics")
@jwt_required()
def metrics():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "metrics": dashboard_service.get_metrics(user_id)})


@dashboard_api_bp.get("/revenue")
@jwt_required()
def revenue():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "items": dashboard_service.get_revenue(user_id)})


@dashboard_api_bp.get("/activities")
@jwt_required()
def activities():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "items": dashboard_service.get_recent_activities(user_id)})


@dashboard_api_bp.get("/upcoming-payments")
@jwt_required()
def upcoming_payments():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "items": dashboard_service.get_upcoming_payments(user_id)})


@dashboard_api_bp.get("/expiring-leases")
@jwt_required()
def expiring_leases():
    user_id = int(get_jwt_identity())
    return jsonify({"ok": True, "items": dashboard_service.get_expiring_leases(user_id)})
