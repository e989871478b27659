"""Rentals schema: properties, tenants, maintenance, payment and expense ledgers."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261012_rentals_initial"
down_revision = "20261010_core_initial"
branch_labels = None
depends_on = None


def _owner_column():
    return sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False)


def _obligation_columns():
    return [
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("paid_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("method", sa.String(length=32), nullable=True),
        sa.Column("reference", sa.String(length=128), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "rentals_property",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=128), nullable=False),
        sa.Column("state", sa.String(length=64), nullable=False),
        sa.Column("zip_code", sa.String(length=16), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("units", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("occupied_units", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_rentals_property_user_id", "rentals_property", ["user_id"])

    op.create_table(
        "rentals_tenant",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=128), nullable=False),
        sa.Column("last_name", sa.String(length=128), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=32), nullable=False),
        sa.Column("unit", sa.String(length=32), nullable=True),
        sa.Column("lease_start", sa.Date(), nullable=False),
        sa.Column("lease_end", sa.Date(), nullable=False),
        sa.Column("rent_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_rentals_tenant_user_id", "rentals_tenant", ["user_id"])
    op.create_index("ix_rentals_tenant_property_id", "rentals_tenant", ["property_id"])
    op.create_index("ix_rentals_tenant_email", "rentals_tenant", ["email"])

    op.create_table(
        "rentals_maintenance_request",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="new"),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.Date(), nullable=False),
        sa.Column("completed_at", sa.Date(), nullable=True),
        sa.Column("assigned_to", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_rentals_maintenance_request_user_id", "rentals_maintenance_request", ["user_id"])
    op.create_index("ix_rentals_maintenance_request_property_id", "rentals_maintenance_request", ["property_id"])
    op.create_index("ix_rentals_maintenance_request_tenant_id", "rentals_maintenance_request", ["tenant_id"])
    op.create_index("ix_rentals_maintenance_user_status", "rentals_maintenance_request", ["user_id", "status"])

    op.create_table(
        "rentals_payment",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("tenant_id", sa.Integer(), nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        *_obligation_columns(),
    )
    for column in ("user_id", "tenant_id", "property_id", "due_date", "status"):
        op.create_index(f"ix_rentals_payment_{column}", "rentals_payment", [column])

    op.create_table(
        "rentals_expense",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("property_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("frequency", sa.String(length=16), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        *_obligation_columns(),
    )
    for column in ("user_id", "property_id", "category", "due_date", "status"):
        op.create_index(f"ix_rentals_expense_{column}", "rentals_expense", [column])

    op.create_table(
        "rentals_ledger_entry",
        sa.Column("id", sa.Integer(), primary_key=True),
        _owner_column(),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("obligation_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("method", sa.String(length=32), nullable=True),
        sa.Column("reference", sa.String(length=128), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_rentals_ledger_entry_user_id", "rentals_ledger_entry", ["user_id"])
    op.create_index("ix_rentals_ledger_entry_obligation", "rentals_ledger_entry", ["kind", "obligation_id"])


def downgrade():
    op.drop_table("rentals_ledger_entry")
    op.drop_table("rentals_expense")
    op.drop_table("rentals_payment")
    op.drop_table("rentals_maintenance_request")
    op.drop_table("rentals_tenant")
    op.drop_table("rentals_property")
