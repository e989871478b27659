"""Activity feed: append-only log of domain events shown on the dashboard."""

from __future__ import annotations

from typing import List, Optional

from rentledger.core.activity.models import ActivityRecord
from rentledger.extensions import db


def record(
    event_type: str,
    description: str,
    user_id: int,
    payload: Optional[dict] = None,
    property_id: Optional[int] = None,
    tenant_id: Optional[int] = None,
) -> ActivityRecord:
    """
    Stage an activity record. Caller should commit alongside domain changes.
    """
    entry = ActivityRecord(
        event_type=event_type,
        description=description,
        user_id=user_id,
        payload=payload or {},
        property_id=property_id,
        tenant_id=tenant_id,
    )
    db.session.add(entry)
    return entry


def list_recent(user_id: int, limit: int = 10) -> List[ActivityRecord]:
    return (
        ActivityRecord.query.filter_by(user_id=user_id)
        .order_by(ActivityRecord.created_at.desc(), ActivityRecord.id.desc())
        .limit(limit)
        .all()
    )
