"""Tenant portal: a tenant's own view of their tenancy."""

from __future__ import annotations

from sqlalchemy import func

from rentledger.domains.rentals.ledger import get_ledgers
from rentledger.domains.rentals.ledger.reconciliation import STATUS_OVERDUE, STATUS_PENDING
from rentledger.domains.rentals.models.maintenance_models import MaintenanceRequest
from rentledger.domains.rentals.models.tenant_models import Tenant
from rentledger.domains.rentals.services.property_service import get_property


def find_tenant_by_email(email: str) -> Tenant | None:
    """Most recent tenancy registered under ``email`` (any landlord)."""
    return (
        Tenant.query.filter(func.lower(Tenant.email) == (email or "").strip().lower())
        .order_by(Tenant.created_at.desc(), Tenant.id.desc())
        .first()
    )


def tenant_dashboard(tenant: Tenant) -> dict:
    landlord_id = tenant.user_id
    payments = get_ledgers().payments.list(landlord_id, tenant_id=tenant.id)
    maintenance = (
        MaintenanceRequest.query.filter_by(user_id=landlord_id, tenant_id=tenant.id)
        .order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc())
        .all()
    )
    next_payment = next((p for p in payments if p.status in (STATUS_PENDING, STATUS_OVERDUE)), None)
    return {
        "tenant": tenant,
        "property": get_property(landlord_id, tenant.property_id),
        "payments": payments,
        "maintenance": maintenance,
        "next_payment": next_payment,
    }
