"""Tenant (tenancy) service layer."""

from __future__ import annotations

import logging
from typing import Dict, List

from flask import current_app

from rentledger.core.activity import services as activity
from rentledger.domains.rentals.events import TENANT_CREATED, TENANT_DELETED, TENANT_UPDATED
from rentledger.domains.rentals.models.tenant_models import Tenant
from rentledger.domains.rentals.services import payment_service
from rentledger.domains.rentals.services.property_service import adjust_occupancy, get_property
from rentledger.extensions import db

logger = logging.getLogger(__name__)

_EDITABLE = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "unit",
    "lease_start",
    "lease_end",
    "rent_amount",
    "status",
)


def list_tenants(user_id: int, property_id: int | None = None) -> List[Tenant]:
    query = Tenant.query.filter_by(user_id=user_id)
    if property_id is not None:
        query = query.filter_by(property_id=property_id)
    return query.order_by(Tenant.last_name.asc(), Tenant.first_name.asc(), Tenant.id.asc()).all()


def get_tenant(user_id: int, tenant_id: int) -> Tenant | None:
    return Tenant.query.filter_by(id=tenant_id, user_id=user_id).first()


def tenant_names(user_id: int) -> Dict[int, str]:
    rows = (
        db.session.query(Tenant.id, Tenant.first_name, Tenant.last_name)
        .filter(Tenant.user_id == user_id)
        .all()
    )
    return {tid: f"{first} {last}" for tid, first, last in rows}


def create_tenant(user_id: int, **fields) -> Tenant:
    """Create a tenancy, occupy a unit and (optionally) bill the first rent.

    Raises ValueError("property_not_found") when the property is not the caller's.
    """
    prop = get_property(user_id, fields["property_id"])
    if not prop:
        raise ValueError("property_not_found")
    tenant = Tenant(
        user_id=user_id,
        property_id=prop.id,
        **{k: fields[k] for k in _EDITABLE if k in fields},
    )
    tenant.email = tenant.email.strip().lower()
    db.session.add(tenant)
    adjust_occupancy(prop, 1)
    db.session.flush()
    activity.record(
        TENANT_CREATED,
        f"{tenant.full_name} moved into {prop.name}",
        user_id=user_id,
        payload={
            "tenant_id": tenant.id,
            "property_id": prop.id,
            "lease_start": tenant.lease_start.isoformat(),
            "lease_end": tenant.lease_end.isoformat(),
        },
        property_id=prop.id,
        tenant_id=tenant.id,
    )
    db.session.commit()

    if current_app.config.get("AUTO_BILL_LEASE_START", True):
        bill_lease_start(user_id, tenant)
    return tenant


def bill_lease_start(user_id: int, tenant: Tenant):
    """Create the first rent obligation, due on the lease start date."""
    payment = payment_service.create_payment(
        user_id,
        tenant_id=tenant.id,
        property_id=tenant.property_id,
        amount=tenant.rent_amount,
        due_date=tenant.lease_start,
        notes="First month rent",
    )
    logger.info("Billed lease start for tenant %s as payment %s", tenant.id, payment.id)
    return payment


def update_tenant(user_id: int, tenant_id: int, **fields) -> Tenant | None:
    tenant = get_tenant(user_id, tenant_id)
    if not tenant:
        return None
    changed = []
    for key in _EDITABLE:
        if key in fields and fields[key] is not None:
            value = fields[key].strip().lower() if key == "email" else fields[key]
            setattr(tenant, key, value)
            changed.append(key)
    if tenant.lease_end < tenant.lease_start:
        db.session.rollback()
        raise ValueError("invalid_lease_dates")
    activity.record(
        TENANT_UPDATED,
        f"Tenant {tenant.full_name} updated",
        user_id=user_id,
        payload={"tenant_id": tenant.id, "fields": changed},
        property_id=tenant.property_id,
        tenant_id=tenant.id,
    )
    db.session.commit()
    return tenant


def delete_tenant(user_id: int, tenant_id: int) -> bool:
    tenant = get_tenant(user_id, tenant_id)
    if not tenant:
        return False
    prop = get_property(user_id, tenant.property_id)
    if prop:
        adjust_occupancy(prop, -1)
    activity.record(
        TENANT_DELETED,
        f"{tenant.full_name} moved out",
        user_id=user_id,
        payload={"tenant_id": tenant.id, "property_id": tenant.property_id},
        property_id=tenant.property_id,
        tenant_id=tenant.id,
    )
    db.session.delete(tenant)
    db.session.commit()
    return True
