"""Rentals domain event catalog (activity record types)."""

from __future__ import annotations

PROPERTY_CREATED = "rentals.property.created"
PROPERTY_UPDATED = "rentals.property.updated"
PROPERTY_DELETED = "rentals.property.deleted"
TENANT_CREATED = "rentals.tenant.created"
TENANT_UPDATED = "rentals.tenant.updated"
TENANT_DELETED = "rentals.tenant.deleted"
PAYMENT_CREATED = "rentals.payment.created"
PAYMENT_UPDATED = "rentals.payment.updated"
PAYMENT_RECORDED = "rentals.payment.recorded"
PAYMENT_DELETED = "rentals.payment.deleted"
EXPENSE_CREATED = "rentals.expense.created"
EXPENSE_UPDATED = "rentals.expense.updated"
EXPENSE_PAID = "rentals.expense.paid"
EXPENSE_DELETED = "rentals.expense.deleted"
MAINTENANCE_CREATED = "rentals.maintenance.created"
MAINTENANCE_UPDATED = "rentals.maintenance.updated"
MAINTENANCE_COMPLETED = "rentals.maintenance.completed"
MAINTENANCE_DELETED = "rentals.maintenance.deleted"

EVENT_CATALOG = {
    PROPERTY_CREATED: {"version": "v1", "payload": {"property_id": "int", "name": "str", "units": "int"}},
    PROPERTY_UPDATED: {"version": "v1", "payload": {"property_id": "int", "fields": "list"}},
    PROPERTY_DELETED: {"version": "v1", "payload": {"property_id": "int"}},
    TENANT_CREATED: {
        "version": "v1",
        "payload": {"tenant_id": "int", "property_id": "int", "lease_start": "date", "lease_end": "date"},
    },
    TENANT_UPDATED: {"version": "v1", "payload": {"tenant_id": "int", "fields": "list"}},
    TENANT_DELETED: {"version": "v1", "payload": {"tenant_id": "int", "property_id": "int"}},
    PAYMENT_CREATED: {
        "version": "v1",
        "payload": {"payment_id": "int", "tenant_id": "int", "amount": "str", "due_date": "date"},
    },
    PAYMENT_UPDATED: {"version": "v1", "payload": {"payment_id": "int", "fields": "list", "status": "str"}},
    PAYMENT_RECORDED: {
        "version": "v1",
        "payload": {"payment_id": "int", "increment": "str", "paid_amount": "str", "status": "str"},
    },
    PAYMENT_DELETED: {"version": "v1", "payload": {"payment_id": "int"}},
    EXPENSE_CREATED: {
        "version": "v1",
        "payload": {"expense_id": "int", "category": "str", "amount": "str", "due_date": "date"},
    },
    EXPENSE_UPDATED: {"version": "v1", "payload": {"expense_id": "int", "fields": "list", "status": "str"}},
    EXPENSE_PAID: {
        "version": "v1",
        "payload": {"expense_id": "int", "increment": "str", "paid_amount": "str", "status": "str"},
    },
    EXPENSE_DELETED: {"version": "v1", "payload": {"expense_id": "int"}},
    MAINTENANCE_CREATED: {
        "version": "v1",
        "payload": {"request_id": "int", "property_id": "int", "priority": "str", "category": "str"},
    },
    MAINTENANCE_UPDATED: {"version": "v1", "payload": {"request_id": "int", "fields": "list"}},
    MAINTENANCE_COMPLETED: {"version": "v1", "payload": {"request_id": "int", "completed_at": "date"}},
    MAINTENANCE_DELETED: {"version": "v1", "payload": {"request_id": "int"}},
}

__all__ = [
    "EVENT_CATALOG",
    "PROPERTY_CREATED",
    "PROPERTY_UPDATED",
    "PROPERTY_DELETED",
    "TENANT_CREATED",
    "TENANT_UPDATED",
    "TENANT_DELETED",
    "PAYMENT_CREATED",
    "PAYMENT_UPDATED",
    "PAYMENT_RECORDED",
    "PAYMENT_DELETED",
    "EXPENSE_CREATED",
    "EXPENSE_UPDATED",
    "EXPENSE_PAID",
    "EXPENSE_DELETED",
    "MAINTENANCE_CREATED",
    "MAINTENANCE_UPDATED",
    "MAINTENANCE_COMPLETED",
    "MAINTENANCE_DELETED",
]
