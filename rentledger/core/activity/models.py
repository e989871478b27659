"""Activity feed record model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from rentledger.extensions import db


class ActivityRecord(db.Model):
    __tablename__ = "activity_record"
    __table_args__ = (db.Index("ix_activity_record_user_created_at", "user_id", "created_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(db.ForeignKey("user.id"), index=True, nullable=False)
    event_type: Mapped[str] = mapped_column(db.String(128), nullable=False, index=True)
    description: Mapped[str] = mapped_column(db.String(512), nullable=False)
    payload: Mapped[dict] = mapped_column(db.JSON, nullable=False, default=dict)
    property_id: Mapped[int | None] = mapped_column(nullable=True)
    tenant_id: Mapped[int | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
