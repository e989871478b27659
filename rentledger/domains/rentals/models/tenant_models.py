"""Tenant (tenancy) model."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.users.models import TimestampMixin
from rentledger.extensions import db


class Tenant(db.Model, TimestampMixin):
    __tablename__ = "rentals_tenant"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    property_id: Mapped[int] = mapped_column(index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(db.String(128), nullable=False)
    last_name: Mapped[str] = mapped_column(db.String(128), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(db.String(32), nullable=False)
    unit: Mapped[str | None] = mapped_column(db.String(32))
    lease_start: Mapped[date] = mapped_column(nullable=False)
    lease_end: Mapped[date] = mapped_column(nullable=False)
    rent_amount: Mapped[float] = mapped_column(db.Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="active")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
