"""Landlord dashboard aggregations."""

from __future__ import annotations

import datetime as dt
from collections import OrderedDict
from decimal import Decimal
from typing import List

from flask import current_app

from rentledger.core.activity import services as activity
from rentledger.core.users.services import user_currency
from rentledger.domains.rentals.ledger import get_ledgers
from rentledger.domains.rentals.ledger.currency import format_currency
from rentledger.domains.rentals.ledger.reconciliation import STATUS_OVERDUE, STATUS_PENDING, to_money
from rentledger.domains.rentals.mappers import map_activity, map_payment
from rentledger.domains.rentals.models.property_models import Property
from rentledger.domains.rentals.models.tenant_models import Tenant
from rentledger.domains.rentals.services.maintenance_service import count_open
from rentledger.domains.rentals.services.property_service import property_names
from rentledger.domains.rentals.services.tenant_service import tenant_names


def get_metrics(user_id: int) -> dict:
    ledgers = get_ledgers()
    properties: List[Property] = Property.query.filter_by(user_id=user_id).all()
    total_units = sum(p.units or 0 for p in properties)
    occupied_units = sum(p.occupied_units or 0 for p in properties)
    occupancy_rate = round(occupied_units / total_units * 100, 1) if total_units else 0.0
    monthly_revenue = sum((to_money(p.monthly_rent) * (p.occupied_units or 0) for p in properties), Decimal("0"))

    ledgers.payments.sweep_overdue(user_id)
    ledgers.expenses.sweep_overdue(user_id)
    payment_metrics = ledgers.payments.aggregate_metrics(user_id)
    expense_metrics = ledgers.expenses.aggregate_metrics(user_id)
    currency = user_currency(user_id)

    return {
        "total_properties": len(properties),
        "total_units": total_units,
        "occupied_units": occupied_units,
        "occupancy_rate": occupancy_rate,
        "active_tenants": Tenant.query.filter_by(user_id=user_id, status="active").count(),
        "monthly_revenue": float(monthly_revenue),
        "monthly_revenue_display": format_currency(monthly_revenue, currency),
        "pending_payments": payment_metrics.pending_count,
        "overdue_payments": payment_metrics.overdue_count,
        "open_maintenance_requests": count_open(user_id),
        "payments": payment_metrics.to_dict(),
        "expenses": expense_metrics.to_dict(),
        "currency": currency,
    }


def _month_starts(today: dt.date, months: int) -> List[dt.date]:
    starts = []
    year, month = today.year, today.month
    for _ in range(months):
        starts.append(dt.date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def get_revenue(user_id: int, months: int | None = None) -> List[dict]:
    """Collected rent vs paid expenses per calendar month, oldest first."""
    ledgers = get_ledgers()
    months = months or current_app.config.get("REVENUE_MONTHS", 6)
    today = ledgers.payments.today()
    starts = _month_starts(today, months)
    buckets: "OrderedDict[tuple, dict]" = OrderedDict(
        ((s.year, s.month), {"revenue": Decimal("0"), "expenses": Decimal("0"), "start": s}) for s in starts
    )
    for field, ledger in (("revenue", ledgers.payments), ("expenses", ledgers.expenses)):
        for entry in ledger.entries_between(user_id, starts[0], today):
            bucket = buckets.get((entry.entry_date.year, entry.entry_date.month))
            if bucket is not None:
                bucket[field] += to_money(entry.amount)
    return [
        {
            "month": b["start"].strftime("%b"),
            "period": b["start"].strftime("%Y-%m"),
            "revenue": float(b["revenue"]),
            "expenses": float(b["expenses"]),
            "net": float(b["revenue"] - b["expenses"]),
        }
        for b in buckets.values()
    ]


def get_recent_activities(user_id: int, limit: int | None = None) -> List[dict]:
    limit = limit or current_app.config.get("RECENT_ACTIVITY_LIMIT", 10)
    return [map_activity(r) for r in activity.list_recent(user_id, limit=limit)]


def get_upcoming_payments(user_id: int, limit: int | None = None) -> List[dict]:
    """Unpaid rent, earliest due first (overdue items naturally lead)."""
    limit = limit or current_app.config.get("UPCOMING_PAYMENTS_LIMIT", 5)
    payments = [p for p in get_ledgers().payments.list(user_id) if p.status in (STATUS_PENDING, STATUS_OVERDUE)]
    payments.sort(key=lambda p: (p.due_date, p.id))
    tenants = tenant_names(user_id)
    props = property_names(user_id)
    currency = user_currency(user_id)
    return [
        map_payment(p, tenants.get(p.tenant_id), props.get(p.property_id), currency)
        for p in payments[:limit]
    ]


def get_expiring_leases(user_id: int, days: int | None = None, limit: int | None = None) -> List[dict]:
    days = days or current_app.config.get("EXPIRING_LEASE_DAYS", 60)
    limit = limit or current_app.config.get("UPCOMING_PAYMENTS_LIMIT", 5)
    today = get_ledgers().payments.today()
    horizon = today + dt.timedelta(days=days)
    tenants = (
        Tenant.query.filter(
            Tenant.user_id == user_id,
            Tenant.status == "active",
            Tenant.lease_end >= today,
            Tenant.lease_end <= horizon,
        )
        .order_by(Tenant.lease_end.asc(), Tenant.id.asc())
        .limit(limit)
        .all()
    )
    props = property_names(user_id)
    return [
        {
            "tenant_id": t.id,
            "tenant_name": t.full_name,
            "property_id": t.property_id,
            "property_name": props.get(t.property_id),
            "unit": t.unit,
            "lease_end": t.lease_end.isoformat(),
            "days_remaining": (t.lease_end - today).days,
        }
        for t in tenants
    ]
