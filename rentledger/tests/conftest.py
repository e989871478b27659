import os
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rentledger import create_app  # noqa: E402
from rentledger.core.auth.password import hash_password  # noqa: E402
from rentledger.core.users.models import User  # noqa: E402
from rentledger.extensions import db  # noqa: E402


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


def _alembic_config() -> AlembicConfig:
    cfg = AlembicConfig(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "rentledger" / "migrations"))
    cfg.set_main_option("rentledger_env", "testing")
    return cfg


@pytest.fixture(scope="session")
def migrated_db():
    """Apply migrations once per session to mirror production schema."""
    os.environ.setdefault("APP_ENV", "testing")
    cfg = _alembic_config()
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture()
def app(migrated_db):
    """
    Per-test app on the migrated database.

    Rows are deleted after each test instead of wrapping the test in a
    savepoint: ledger writes commit through their own UPDATE statements and
    SQLite savepoints do not reliably isolate those.
    """
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


def _make_user(username: str, email: str, currency: str = "KES") -> User:
    user = User(
        username=username,
        email=email,
        currency=currency,
        password_hash=hash_password("Secret123"),
    )
    db.session.add(user)
    db.session.commit()
    return user


def _headers_for(user: User) -> dict:
    token = create_access_token(identity=str(user.id))
    return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}


@pytest.fixture
def make_user(app):
    """Factory for extra users: make_user("name", "mail@example.com")."""
    return _make_user


@pytest.fixture
def headers_for(app):
    return _headers_for


@pytest.fixture
def user(app):
    return _make_user("landlord", "landlord@example.com")


@pytest.fixture
def other_user(app):
    return _make_user("neighbour", "neighbour@example.com")


@pytest.fixture
def auth_headers(app, user):
    return _headers_for(user)


@pytest.fixture
def other_headers(app, other_user):
    return _headers_for(other_user)


# ==================== Rental fixtures ====================
@pytest.fixture
def rental_property(client, auth_headers):
    resp = client.post(
        "/api/properties",
        json={
            "name": "Riverside Apartments",
            "address": "12 River Road",
            "city": "Nairobi",
            "state": "Nairobi County",
            "zip_code": "00100",
            "type": "apartment",
            "units": 4,
            "monthly_rent": 25000,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["property"]


@pytest.fixture
def tenant(client, auth_headers, rental_property):
    """Active tenant whose lease started 10 days ago (first rent auto-billed)."""
    today = date.today()
    resp = client.post(
        "/api/tenants",
        json={
            "first_name": "Jane",
            "last_name": "Wanjiku",
            "email": "jane@example.com",
            "phone": "+254700000001",
            "property_id": rental_property["id"],
            "unit": "A1",
            "lease_start": (today - timedelta(days=10)).isoformat(),
            "lease_end": (today + timedelta(days=355)).isoformat(),
            "rent_amount": 25000,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 201
    return resp.get_json()["tenant"]
