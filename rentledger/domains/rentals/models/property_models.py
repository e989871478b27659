"""Property model."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from rentledger.core.users.models import TimestampMixin
from rentledger.extensions import db


class Property(db.Model, TimestampMixin):
    __tablename__ = "rentals_property"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    address: Mapped[str] = mapped_column(db.String(255), nullable=False)
    city: Mapped[str] = mapped_column(db.String(128), nullable=False)
    state: Mapped[str] = mapped_column(db.String(64), nullable=False)
    zip_code: Mapped[str] = mapped_column(db.String(16), nullable=False)
    type: Mapped[str] = mapped_column(db.String(32), nullable=False)
    units: Mapped[int] = mapped_column(nullable=False, default=1)
    occupied_units: Mapped[int] = mapped_column(nullable=False, default=0)
    monthly_rent: Mapped[float] = mapped_column(db.Numeric(12, 2), nullable=False)
    image_url: Mapped[str | None] = mapped_column(db.String(500))
