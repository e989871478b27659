"""Auth HTTP controllers (API only)."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import (
    get_jwt,
    get_jwt_identity,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)

from rentledger.core.auth.auth_service import (
    authenticate_user,
    change_password,
    issue_access_token,
    register_user,
    revoke_token,
)
from rentledger.core.auth.schemas import ChangePasswordRequest, RegisterRequest
from rentledger.core.users.schemas import LoginRequest, ProfileUpdateRequest, serialize_user
from rentledger.core.users.services import get_user, update_profile
from rentledger.core.utils.validation import parse_json
from rentledger.extensions import limiter

auth_bp = Blueprint("auth_api", __name__)


def _auth_limit() -> str:
    return current_app.config.get("RATELIMIT_AUTH", "100 per 15 minutes")


def _session_response(user, status: int = 200):
    token = issue_access_token(user)
    resp = jsonify({"ok": True, "user": serialize_user(user).model_dump(), "access_token": token})
    set_access_cookies(resp, token)
    return resp, status


@auth_bp.post("/register")
@limiter.limit(_auth_limit)
def register():
    data, err = parse_json(RegisterRequest)
    if err:
        return err
    try:
        user = register_user(data)
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 409
    return _session_response(user, 201)


@auth_bp.post("/login")
@limiter.limit(_auth_limit)
def login():
    data, err = parse_json(LoginRequest)
    if err:
        return err
    user = authenticate_user(data.email, data.password)
    if not user:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401
    return _session_response(user)


@auth_bp.post("/logout")
@jwt_required()
def logout():
    jti = get_jwt().get("jti")
    if jti:
        revoke_token(jti, int(get_jwt_identity()))
    resp = jsonify({"ok": True})
    unset_jwt_cookies(resp)
    return resp


@auth_bp.get("/me")
@jwt_required()
def me():
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})


@auth_bp.patch("/profile")
@jwt_required()
def profile():
    data, err = parse_json(ProfileUpdateRequest)
    if err:
        return err
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    try:
        user = update_profile(user, **data.model_dump(exclude_unset=True))
    except ValueError as exc:
        return jsonify({"ok": False, "error": str(exc)}), 409
    return jsonify({"ok": True, "user": serialize_user(user).model_dump()})


@auth_bp.post("/change-password")
@jwt_required()
@limiter.limit(_auth_limit)
def change_password_route():
    data, err = parse_json(ChangePasswordRequest)
    if err:
        return err
    user = get_user(int(get_jwt_identity()))
    if not user:
        return jsonify({"ok": False, "error": "not_found"}), 404
    try:
        change_password(user, data.current_password, data.new_password)
    except ValueError:
        return jsonify({"ok": False, "error": "invalid_credentials"}), 400
    return jsonify({"ok": True})
