"""Property service layer."""

from __future__ import annotations

from typing import Dict, List

from rentledger.core.activity import services as activity
from rentledger.domains.rentals.events import PROPERTY_CREATED, PROPERTY_DELETED, PROPERTY_UPDATED
from rentledger.domains.rentals.models.property_models import Property
from rentledger.extensions import db

_EDITABLE = (
    "name",
    "address",
    "city",
    "state",
    "zip_code",
    "type",
    "units",
    "occupied_units",
    "monthly_rent",
    "image_url",
)


def list_properties(user_id: int) -> List[Property]:
    return Property.query.filter_by(user_id=user_id).order_by(Property.name.asc(), Property.id.asc()).all()


def get_property(user_id: int, property_id: int) -> Property | None:
    return Property.query.filter_by(id=property_id, user_id=user_id).first()


def property_names(user_id: int) -> Dict[int, str]:
    rows = db.session.query(Property.id, Property.name).filter(Property.user_id == user_id).all()
    return {pid: name for pid, name in rows}


def create_property(user_id: int, **fields) -> Property:
    prop = Property(user_id=user_id, **{k: fields[k] for k in _EDITABLE if k in fields})
    prop.name = prop.name.strip()
    db.session.add(prop)
    db.session.flush()
    activity.record(
        PROPERTY_CREATED,
        f"Property {prop.name} added",
        user_id=user_id,
        payload={"property_id": prop.id, "name": prop.name, "units": prop.units},
        property_id=prop.id,
    )
    db.session.commit()
    return prop


def update_property(user_id: int, property_id: int, **fields) -> Property | None:
    prop = get_property(user_id, property_id)
    if not prop:
        return None
    changed = []
    for key in _EDITABLE:
        if key in fields and fields[key] is not None:
            setattr(prop, key, fields[key])
            changed.append(key)
    if prop.occupied_units > prop.units:
        db.session.rollback()
        raise ValueError("occupied_units_exceed_units")
    activity.record(
        PROPERTY_UPDATED,
        f"Property {prop.name} updated",
        user_id=user_id,
        payload={"property_id": prop.id, "fields": changed},
        property_id=prop.id,
    )
    db.session.commit()
    return prop


def delete_property(user_id: int, property_id: int) -> bool:
    prop = get_property(user_id, property_id)
    if not prop:
        return False
    activity.record(
        PROPERTY_DELETED,
        f"Property {prop.name} removed",
        user_id=user_id,
        payload={"property_id": prop.id},
        property_id=prop.id,
    )
    db.session.delete(prop)
    db.session.commit()
    return True


def adjust_occupancy(prop: Property, delta: int) -> None:
    """Move ``occupied_units`` by ``delta``, kept within ``0..units``. Caller commits."""
    prop.occupied_units = max(0, min(prop.units, (prop.occupied_units or 0) + delta))
