"""Maintenance request model."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Mapped, mapped_column

from rentledger.extensions import db


class MaintenanceRequest(db.Model):
    __tablename__ = "rentals_maintenance_request"
    __table_args__ = (db.Index("ix_rentals_maintenance_user_status", "user_id", "status"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    property_id: Mapped[int] = mapped_column(index=True, nullable=False)
    tenant_id: Mapped[int | None] = mapped_column(index=True, nullable=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False)
    priority: Mapped[str] = mapped_column(db.String(16), nullable=False, default="medium")
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="new")
    category: Mapped[str] = mapped_column(db.String(32), nullable=False)
    created_at: Mapped[date] = mapped_column(nullable=False, default=date.today)
    completed_at: Mapped[date | None] = mapped_column(nullable=True)
    assigned_to: Mapped[str | None] = mapped_column(db.String(255))
