"""init schema

Revision ID: 0001_init_schema
Revises: None
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "0001_init_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # gen_random_uuid() is built in from PostgreSQL 13; pgcrypto covers older servers.
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "customers",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=False),
    )

    op.create_table(
        "invoices",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("customers.id"), nullable=False),
        # Integer cents; never a float.
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
    )

    op.create_table(
        "revenue",
        sa.Column("month", sa.String(4), primary_key=True),
        sa.Column("revenue", sa.Integer(), nullable=False),
    )

    op.create_index("idx_invoices_customer", "invoices", ["customer_id"])
    op.create_index("idx_invoices_date", "invoices", ["date"])


def downgrade() -> None:
    op.drop_index("idx_invoices_date", table_name="invoices")
    op.drop_index("idx_invoices_customer", table_name="invoices")

    op.drop_table("revenue")
    op.drop_table("invoices")
    op.drop_table("customers")
