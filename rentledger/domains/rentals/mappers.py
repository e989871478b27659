"""DTO mappers for the rentals domain."""

from __future__ import annotations

from typing import Any, Optional

from rentledger.domains.rentals.ledger.currency import format_currency
from rentledger.domains.rentals.ledger.reconciliation import balance, is_overpaid, to_money


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _money(value) -> float:
    return float(to_money(value))


def map_property(prop, currency: str = "KES") -> dict:
    return {
        "id": prop.id,
        "name": prop.name,
        "address": prop.address,
        "city": prop.city,
        "state": prop.state,
        "zip_code": prop.zip_code,
        "type": prop.type,
        "units": prop.units,
        "occupied_units": prop.occupied_units,
        "vacant_units": max(prop.units - prop.occupied_units, 0),
        "monthly_rent": _money(prop.monthly_rent),
        "monthly_rent_display": format_currency(prop.monthly_rent, currency),
        "image_url": prop.image_url,
        "created_at": _iso(prop.created_at),
        "updated_at": _iso(prop.updated_at),
    }


def map_tenant(tenant, property_name: Optional[str] = None, currency: str = "KES") -> dict:
    return {
        "id": tenant.id,
        "property_id": tenant.property_id,
        "property_name": property_name,
        "first_name": tenant.first_name,
        "last_name": tenant.last_name,
        "full_name": tenant.full_name,
        "email": tenant.email,
        "phone": tenant.phone,
        "unit": tenant.unit,
        "lease_start": _iso(tenant.lease_start),
        "lease_end": _iso(tenant.lease_end),
        "rent_amount": _money(tenant.rent_amount),
        "rent_amount_display": format_currency(tenant.rent_amount, currency),
        "status": tenant.status,
        "created_at": _iso(tenant.created_at),
    }


def _map_obligation(obligation: Any, currency: str) -> dict:
    owed = balance(obligation)
    return {
        "id": obligation.id,
        "amount": _money(obligation.amount),
        "paid_amount": _money(obligation.paid_amount),
        "balance": float(owed),
        "overpaid": is_overpaid(obligation),
        "amount_display": format_currency(obligation.amount, currency),
        "paid_amount_display": format_currency(obligation.paid_amount, currency),
        "balance_display": format_currency(owed, currency),
        "due_date": _iso(obligation.due_date),
        "paid_date": _iso(obligation.paid_date),
        "status": obligation.status,
        "method": obligation.method,
        "reference": obligation.reference,
        "notes": obligation.notes,
        "created_at": _iso(obligation.created_at),
    }


def map_payment(
    payment,
    tenant_name: Optional[str] = None,
    property_name: Optional[str] = None,
    currency: str = "KES",
) -> dict:
    data = _map_obligation(payment, currency)
    data.update(
        {
            "tenant_id": payment.tenant_id,
            "property_id": payment.property_id,
            "tenant_name": tenant_name,
            "property_name": property_name,
        }
    )
    return data


def map_expense(expense, property_name: Optional[str] = None, currency: str = "KES") -> dict:
    data = _map_obligation(expense, currency)
    data.update(
        {
            "title": expense.title,
            "category": expense.category,
            "property_id": expense.property_id,
            "property_name": property_name,
            "is_recurring": bool(expense.is_recurring),
            "frequency": expense.frequency,
            "expiry_date": _iso(expense.expiry_date),
        }
    )
    return data


def map_ledger_entry(entry, currency: str = "KES") -> dict:
    return {
        "id": entry.id,
        "kind": entry.kind,
        "obligation_id": entry.obligation_id,
        "amount": _money(entry.amount),
        "amount_display": format_currency(entry.amount, currency),
        "date": _iso(entry.entry_date),
        "method": entry.method,
        "reference": entry.reference,
        "notes": entry.notes,
        "created_at": _iso(entry.created_at),
    }


def map_maintenance(request, property_name: Optional[str] = None, tenant_name: Optional[str] = None) -> dict:
    return {
        "id": request.id,
        "property_id": request.property_id,
        "property_name": property_name,
        "tenant_id": request.tenant_id,
        "tenant_name": tenant_name,
        "title": request.title,
        "description": request.description,
        "priority": request.priority,
        "status": request.status,
        "category": request.category,
        "assigned_to": request.assigned_to,
        "created_at": _iso(request.created_at),
        "completed_at": _iso(request.completed_at),
    }


def map_activity(record) -> dict:
    return {
        "id": record.id,
        "type": record.event_type,
        "description": record.description,
        "property_id": record.property_id,
        "tenant_id": record.tenant_id,
        "payload": record.payload or {},
        "timestamp": _iso(record.created_at),
    }
