"""Seed a demo landlord with properties, tenants and ledger history."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from rentledger.core.auth.password import hash_password
from rentledger.core.users.models import User
from rentledger.domains.rentals.ledger import PaymentMetadata
from rentledger.domains.rentals.services import (
    expense_service,
    maintenance_service,
    payment_service,
    property_service,
    tenant_service,
)
from rentledger.extensions import db

DEMO_USERNAME = "demo"
DEMO_EMAIL = "demo@rentledger.test"
DEMO_PASSWORD = "Demo12345"


def seed_demo_user() -> User:
    user = User.query.filter_by(email=DEMO_EMAIL).first()
    if not user:
        user = User(
            username=DEMO_USERNAME,
            email=DEMO_EMAIL,
            currency="KES",
            password_hash=hash_password(DEMO_PASSWORD),
        )
        db.session.add(user)
        db.session.commit()
    return user


def seed_portfolio(user_id: int, today: date | None = None) -> dict:
    """Create the demo portfolio unless the user already has properties."""
    today = today or date.today()
    if property_service.list_properties(user_id):
        return {"created": False}

    prop = property_service.create_property(
        user_id,
        name="Riverside Apartments",
        address="12 Riverside Drive",
        city="Nairobi",
        state="Nairobi",
        zip_code="00100",
        type="apartment",
        units=6,
        monthly_rent=Decimal("25000"),
    )
    alice = tenant_service.create_tenant(
        user_id,
        property_id=prop.id,
        first_name="Alice",
        last_name="Wanjiku",
        email="alice@example.com",
        phone="+254700000001",
        unit="A1",
        lease_start=today - timedelta(days=90),
        lease_end=today + timedelta(days=45),
        rent_amount=Decimal("25000"),
    )
    brian = tenant_service.create_tenant(
        user_id,
        property_id=prop.id,
        first_name="Brian",
        last_name="Otieno",
        email="brian@example.com",
        phone="+254700000002",
        unit="B2",
        lease_start=today - timedelta(days=30),
        lease_end=today + timedelta(days=335),
        rent_amount=Decimal("22000"),
    )

    # Alice: last month settled, this month partially paid.
    settled = payment_service.create_payment(
        user_id, tenant_id=alice.id, amount=Decimal("25000"), due_date=today - timedelta(days=30)
    )
    payment_service.record_payment(
        user_id, settled.id, Decimal("25000"), PaymentMetadata(method="mpesa", reference="QWE123")
    )
    partial = payment_service.create_payment(
        user_id, tenant_id=alice.id, amount=Decimal("25000"), due_date=today + timedelta(days=5)
    )
    payment_service.record_payment(user_id, partial.id, Decimal("10000"), PaymentMetadata(method="cash"))
    # Brian: one overdue invoice.
    payment_service.create_payment(
        user_id, tenant_id=brian.id, amount=Decimal("22000"), due_date=today - timedelta(days=3)
    )

    water = expense_service.create_expense(
        user_id,
        title="Water bill",
        category="water",
        property_id=prop.id,
        amount=Decimal("3500"),
        due_date=today - timedelta(days=10),
        is_recurring=True,
        frequency="monthly",
    )
    expense_service.record_expense_payment(user_id, water.id, Decimal("3500"))
    expense_service.create_expense(
        user_id,
        title="Building insurance",
        category="insurance",
        property_id=prop.id,
        amount=Decimal("48000"),
        due_date=today + timedelta(days=20),
        is_recurring=True,
        frequency="yearly",
    )

    maintenance_service.create_request(
        user_id,
        property_id=prop.id,
        tenant_id=brian.id,
        title="Leaking kitchen tap",
        description="Tap drips constantly",
        priority="medium",
        category="plumbing",
    )
    return {"created": True, "property_id": prop.id, "tenant_ids": [alice.id, brian.id]}
