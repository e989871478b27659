"""RentLedger application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify

from rentledger.config import config_by_name
from rentledger.extensions import init_extensions, jwt


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the RentLedger Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    if db_uri.startswith("sqlite:///") and not db_uri.startswith("sqlite:////") and ":memory:" not in db_uri:
        abs_path = project_root / db_uri.replace("sqlite:///", "", 1)
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    logging.getLogger("rentledger").setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    init_extensions(app)
    _register_ledgers(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/api/health")
    def health():
        return {"ok": True, "ledger_backend": app.config["LEDGER_BACKEND"]}, 200

    # Register CLI commands
    from rentledger.scripts.cli import register_commands

    register_commands(app)

    return app


def _register_ledgers(app: Flask) -> None:
    """Pick the obligation storage once, at startup."""
    from rentledger.domains.rentals.ledger import build_ledgers

    backend = app.config.get("LEDGER_BACKEND", "sqlalchemy")
    app.extensions["ledgers"] = build_ledgers(backend)
    app.logger.info("Ledger backend: %s", backend)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from rentledger.core.auth.controllers import auth_bp  # local import to avoid circulars
    from rentledger.domains.rentals.controllers.dashboard_api import dashboard_api_bp
    from rentledger.domains.rentals.controllers.expense_api import expense_api_bp
    from rentledger.domains.rentals.controllers.maintenance_api import maintenance_api_bp
    from rentledger.domains.rentals.controllers.payment_api import payment_api_bp
    from rentledger.domains.rentals.controllers.property_api import property_api_bp
    from rentledger.domains.rentals.controllers.tenant_api import tenant_api_bp
    from rentledger.domains.rentals.controllers.tenant_portal_api import tenant_portal_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(property_api_bp, url_prefix="/api/properties")
    app.register_blueprint(tenant_api_bp, url_prefix="/api/tenants")
    app.register_blueprint(payment_api_bp, url_prefix="/api/payments")
    app.register_blueprint(expense_api_bp, url_prefix="/api/expenses")
    app.register_blueprint(maintenance_api_bp, url_prefix="/api/maintenance")
    app.register_blueprint(dashboard_api_bp, url_prefix="/api/dashboard")
    app.register_blueprint(tenant_portal_api_bp, url_prefix="/api/tenant")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    from rentledger.domains.rentals.ledger.errors import LedgerError, StorageFailure

    @app.errorhandler(LedgerError)
    def _ledger_error(exc: LedgerError):
        if isinstance(exc, StorageFailure):
            app.logger.error("Ledger storage failure: %r", exc.__cause__)
            return jsonify({"ok": False, "error": exc.code, "message": exc.message}), exc.status_code
        return jsonify({"ok": False, "error": exc.code, "message": str(exc)}), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """JWT session callbacks: revocation and JSON 401s."""
    from rentledger.core.auth.auth_service import is_token_revoked

    @jwt.token_in_blocklist_loader
    def _token_revoked(_jwt_header, jwt_payload: dict) -> bool:
        return is_token_revoked(jwt_payload.get("jti", ""))

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify({"ok": False, "error": "unauthorized", "message": reason}), 401

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return jsonify({"ok": False, "error": "token_expired"}), 401

    @jwt.revoked_token_loader
    def _revoked_token(_jwt_header, _jwt_payload):
        return jsonify({"ok": False, "error": "token_revoked"}), 401
