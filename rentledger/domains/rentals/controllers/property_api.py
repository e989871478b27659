"""Property API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from rentledger.core.users.services import user_currency
from rentledger.core.utils.validation import parse_json
from rentledger.domains.rentals.mappers import map_property
from rentledger.domains.rentals.schemas.rental_schemas import PropertyCreate, PropertyUpdate
from rentledger.domains.rentals.services import property_service

property_api_bp = Blueprint("property_api", __name__)


@property_api_bp.get("")
@jwt_required()
def list_properties():
    user_id = int(get_jwt_identity())
    currency = user_currency(user_id)
    items = property_service.list_properties(user_id)
    return jsonify({"ok": True, "items": [map_property(p, currency) for p in items]})


@property_api_bp.post("")
@jwt_required()
def create_property():
    data, err = parse_json(PropertyCreate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    prop = property_service.create_property(user_id, **data.model_dump())
    return jsonify({"ok": True, "property": map_property(prop, user_currency(user_id))}), 201


@property_api_bp.get("/<int:property_id>")
@jwt_required()
def get_property(property_id: int):
    user_id = int(get_jwt_identity())
    prop = property_service.get_property(user_id, property_id)
    if not prop:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "property": map_property(prop, user_currency(user_id))})


@property_api_bp.patch("/<int:property_id>")
@jwt_required()
def update_property(property_id: int):
    data, err = parse_json(PropertyUpdate)
    if err:
        return err
    user_id = int(get_jwt_identity())
    try:
        prop = property_service.update_property(user_id, property_id, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 400
    if not prop:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "property": map_property(prop, user_currency(user_id))})


@property_api_bp.delete("/<int:property_id>")
@jwt_required()
def delete_property(property_id: int):
    user_id = int(get_jwt_identity())
    if not property_service.delete_property(user_id, property_id):
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True})
