"""Maintenance request service layer."""

from __future__ import annotations

from datetime import date
from typing import List

from rentledger.core.activity import services as activity
from rentledger.domains.rentals.events import (
    MAINTENANCE_COMPLETED,
    MAINTENANCE_CREATED,
    MAINTENANCE_DELETED,
    MAINTENANCE_UPDATED,
)
from rentledger.domains.rentals.models.maintenance_models import MaintenanceRequest
from rentledger.domains.rentals.models.tenant_models import Tenant
from rentledger.domains.rentals.services.property_service import get_property
from rentledger.extensions import db

STATUS_COMPLETED = "completed"
_EDITABLE = ("tenant_id", "title", "description", "priority", "status", "category", "assigned_to", "completed_at")


def _check_tenant(user_id: int, tenant_id: int | None) -> None:
    if tenant_id is not None and not Tenant.query.filter_by(id=tenant_id, user_id=user_id).first():
        raise ValueError("tenant_not_found")


def list_requests(user_id: int, status: str | None = None, property_id: int | None = None) -> List[MaintenanceRequest]:
    query = MaintenanceRequest.query.filter_by(user_id=user_id)
    if status:
        query = query.filter_by(status=status)
    if property_id is not None:
        query = query.filter_by(property_id=property_id)
    return query.order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc()).all()


def get_request(user_id: int, request_id: int) -> MaintenanceRequest | None:
    return MaintenanceRequest.query.filter_by(id=request_id, user_id=user_id).first()


def count_open(user_id: int) -> int:
    return MaintenanceRequest.query.filter(
        MaintenanceRequest.user_id == user_id,
        MaintenanceRequest.status != STATUS_COMPLETED,
    ).count()


def create_request(user_id: int, **fields) -> MaintenanceRequest:
    prop = get_property(user_id, fields["property_id"])
    if not prop:
        raise ValueError("property_not_found")
    _check_tenant(user_id, fields.get("tenant_id"))
    req = MaintenanceRequest(
        user_id=user_id,
        property_id=prop.id,
        **{k: fields[k] for k in _EDITABLE if fields.get(k) is not None},
    )
    if req.status == STATUS_COMPLETED and not req.completed_at:
        req.completed_at = date.today()
    db.session.add(req)
    db.session.flush()
    activity.record(
        MAINTENANCE_CREATED,
        f"Maintenance request '{req.title}' logged for {prop.name}",
        user_id=user_id,
        payload={"request_id": req.id, "property_id": prop.id, "priority": req.priority, "category": req.category},
        property_id=prop.id,
        tenant_id=req.tenant_id,
    )
    db.session.commit()
    return req


def update_request(user_id: int, request_id: int, **fields) -> MaintenanceRequest | None:
    req = get_request(user_id, request_id)
    if not req:
        return None
    _check_tenant(user_id, fields.get("tenant_id"))
    was_completed = req.status == STATUS_COMPLETED
    changed = []
    for key in _EDITABLE:
        if key in fields and fields[key] is not None:
            setattr(req, key, fields[key])
            changed.append(key)
    if req.status == STATUS_COMPLETED and not req.completed_at:
        req.completed_at = date.today()
    if req.status == STATUS_COMPLETED and not was_completed:
        activity.record(
            MAINTENANCE_COMPLETED,
            f"Maintenance request '{req.title}' completed",
            user_id=user_id,
            payload={"request_id": req.id, "completed_at": req.completed_at.isoformat()},
            property_id=req.property_id,
            tenant_id=req.tenant_id,
        )
    else:
        activity.record(
            MAINTENANCE_UPDATED,
            f"Maintenance request '{req.title}' updated",
            user_id=user_id,
            payload={"request_id": req.id, "fields": changed},
            property_id=req.property_id,
            tenant_id=req.tenant_id,
        )
    db.session.commit()
    return req


def delete_request(user_id: int, request_id: int) -> bool:
    req = get_request(user_id, request_id)
    if not req:
        return False
    activity.record(
        MAINTENANCE_DELETED,
        f"Maintenance request '{req.title}' removed",
        user_id=user_id,
        payload={"request_id": req.id},
        property_id=req.property_id,
        tenant_id=req.tenant_id,
    )
    db.session.delete(req)
    db.session.commit()
    return True
