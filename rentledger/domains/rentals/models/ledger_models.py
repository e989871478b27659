"""Obligation models: rent payments, landlord expenses and their payment history."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.orm import Mapped, mapped_column

from rentledger.extensions import db


class ObligationMixin:
    amount: Mapped[Decimal] = mapped_column(db.Numeric(12, 2), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(db.Numeric(12, 2), nullable=False, default=Decimal("0"))
    due_date: Mapped[date] = mapped_column(nullable=False, index=True)
    paid_date: Mapped[date | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default="pending", index=True)
    method: Mapped[str | None] = mapped_column(db.String(32))
    reference: Mapped[str | None] = mapped_column(db.String(128))
    notes: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)


class Payment(db.Model, ObligationMixin):
    """Rent owed by a tenant."""

    __tablename__ = "rentals_payment"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    tenant_id: Mapped[int] = mapped_column(index=True, nullable=False)
    property_id: Mapped[int] = mapped_column(index=True, nullable=False)


class Expense(db.Model, ObligationMixin):
    """A cost the landlord owes (utilities, insurance, tax...)."""

    __tablename__ = "rentals_expense"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    property_id: Mapped[int | None] = mapped_column(index=True, nullable=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False)
    category: Mapped[str] = mapped_column(db.String(32), nullable=False, index=True)
    is_recurring: Mapped[bool] = mapped_column(default=False)
    frequency: Mapped[str | None] = mapped_column(db.String(16))
    expiry_date: Mapped[date | None] = mapped_column(nullable=True)


class LedgerEntry(db.Model):
    """One recorded payment increment against a payment or an expense."""

    __tablename__ = "rentals_ledger_entry"
    __table_args__ = (db.Index("ix_rentals_ledger_entry_obligation", "kind", "obligation_id"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    kind: Mapped[str] = mapped_column(db.String(16), nullable=False)
    obligation_id: Mapped[int] = mapped_column(nullable=False)
    amount: Mapped[Decimal] = mapped_column(db.Numeric(12, 2), nullable=False)
    entry_date: Mapped[date] = mapped_column(nullable=False)
    method: Mapped[str | None] = mapped_column(db.String(32))
    reference: Mapped[str | None] = mapped_column(db.String(128))
    notes: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
