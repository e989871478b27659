"""Request schemas for the rentals domain."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

PropertyType = Literal["apartment", "house", "condo", "townhouse"]
TenantStatus = Literal["active", "pending", "ended"]
ObligationStatus = Literal["pending", "overdue", "paid"]
ExpenseCategory = Literal["electricity", "water", "maintenance", "insurance", "tax", "other"]
ExpenseFrequency = Literal["monthly", "quarterly", "yearly"]
MaintenancePriority = Literal["low", "medium", "high", "urgent"]
MaintenanceStatus = Literal["new", "in_progress", "completed"]
MaintenanceCategory = Literal["plumbing", "electrical", "hvac", "appliance", "other"]

Money = Decimal


# --- Properties ---


class PropertyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=128)
    state: str = Field(min_length=1, max_length=64)
    zip_code: str = Field(min_length=1, max_length=16)
    type: PropertyType
    units: int = Field(default=1, ge=1)
    occupied_units: int = Field(default=0, ge=0)
    monthly_rent: Money = Field(ge=0, max_digits=12, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def check_occupancy(self):
        if self.occupied_units > self.units:
            raise ValueError("occupied_units cannot exceed units")
        return self


class PropertyUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    city: Optional[str] = Field(default=None, max_length=128)
    state: Optional[str] = Field(default=None, max_length=64)
    zip_code: Optional[str] = Field(default=None, max_length=16)
    type: Optional[PropertyType] = None
    units: Optional[int] = Field(default=None, ge=1)
    occupied_units: Optional[int] = Field(default=None, ge=0)
    monthly_rent: Optional[Money] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)


# --- Tenants ---


class TenantCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=32)
    property_id: int
    unit: Optional[str] = Field(default=None, max_length=32)
    lease_start: dt.date
    lease_end: dt.date
    rent_amount: Money = Field(gt=0, max_digits=12, decimal_places=2)
    status: TenantStatus = "active"

    @model_validator(mode="after")
    def check_lease(self):
        if self.lease_end < self.lease_start:
            raise ValueError("lease_end must be on or after lease_start")
        return self


class TenantUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    unit: Optional[str] = Field(default=None, max_length=32)
    lease_start: Optional[dt.date] = None
    lease_end: Optional[dt.date] = None
    rent_amount: Optional[Money] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    status: Optional[TenantStatus] = None


# --- Payments and expenses ---


class ObligationListFilter(BaseModel):
    status: Optional[ObligationStatus] = None
    due_from: Optional[dt.date] = None
    due_to: Optional[dt.date] = None


class PaymentListFilter(ObligationListFilter):
    tenant_id: Optional[int] = None


class ExpenseListFilter(ObligationListFilter):
    category: Optional[ExpenseCategory] = None


class PaymentCreate(BaseModel):
    tenant_id: int
    property_id: Optional[int] = None
    amount: Money = Field(gt=0, max_digits=12, decimal_places=2)
    due_date: dt.date
    method: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=4096)


class PaymentUpdate(BaseModel):
    """Editable payment fields. ``paid_amount`` and ``status`` are not among them."""

    model_config = ConfigDict(extra="forbid")

    amount: Optional[Money] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    due_date: Optional[dt.date] = None
    method: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=4096)


class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    category: ExpenseCategory
    property_id: Optional[int] = None
    amount: Money = Field(gt=0, max_digits=12, decimal_places=2)
    due_date: dt.date
    expiry_date: Optional[dt.date] = None
    is_recurring: bool = False
    frequency: Optional[ExpenseFrequency] = None
    method: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=4096)


class ExpenseUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[ExpenseCategory] = None
    property_id: Optional[int] = None
    amount: Optional[Money] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    due_date: Optional[dt.date] = None
    expiry_date: Optional[dt.date] = None
    is_recurring: Optional[bool] = None
    frequency: Optional[ExpenseFrequency] = None
    method: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=4096)


class PaymentRecordRequest(BaseModel):
    """A payment increment against a payment or expense.

    ``amount`` is deliberately untyped here: the ledger owns amount validation
    and answers with ``invalid_amount``.
    """

    amount: Any = None
    paid_date: Optional[dt.date] = Field(default=None, validation_alias="date")
    method: Optional[str] = Field(default=None, max_length=32)
    reference: Optional[str] = Field(default=None, max_length=128)
    notes: Optional[str] = Field(default=None, max_length=4096)

    model_config = ConfigDict(populate_by_name=True)


class ExpenseReportQuery(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


# --- Maintenance ---


class MaintenanceCreate(BaseModel):
    property_id: int
    tenant_id: Optional[int] = None
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=4096)
    priority: MaintenancePriority = "medium"
    status: MaintenanceStatus = "new"
    category: MaintenanceCategory
    assigned_to: Optional[str] = Field(default=None, max_length=255)


class MaintenanceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tenant_id: Optional[int] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=4096)
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    category: Optional[MaintenanceCategory] = None
    assigned_to: Optional[str] = Field(default=None, max_length=255)
    completed_at: Optional[dt.date] = None


class MaintenanceListFilter(BaseModel):
    status: Optional[MaintenanceStatus] = None
    property_id: Optional[int] = None
