"""Initial catalog and client schema.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from erpcore.adapters.sqlalchemy.mappings import FixedDecimal, UTCDateTime

revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column[object]]:
    return [
        sa.Column("created_at", UTCDateTime(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "input",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("unit_of_measure", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_input")),
        sa.UniqueConstraint("name", name=op.f("uq_input_name")),
    )
    op.create_table(
        "process",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_process")),
    )
    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("custom_id", sa.String(length=64), nullable=True),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.Column("barcode", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("storage_conditions", sa.Text(), nullable=True),
        sa.Column("unit_of_measure", sa.String(length=64), nullable=True),
        sa.Column("presentation", sa.String(length=255), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=True),
        sa.Column("production_cost", FixedDecimal(), nullable=True),
        sa.Column("sale_price", FixedDecimal(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_draft", sa.Boolean(), nullable=False),
        sa.Column("photo", sa.String(length=512), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product")),
        sa.UniqueConstraint("name", name=op.f("uq_product_name")),
        sa.UniqueConstraint("custom_id", name=op.f("uq_product_custom_id")),
        sa.UniqueConstraint("sku", name=op.f("uq_product_sku")),
        sa.UniqueConstraint("barcode", name=op.f("uq_product_barcode")),
    )
    op.create_table(
        "product_input",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("input_id", sa.Integer(), nullable=False),
        sa.Column("equivalence", FixedDecimal(), nullable=True),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_product_input_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["input_id"], ["input.id"], name=op.f("fk_product_input_input_id_input")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product_input")),
        sa.UniqueConstraint(
            "product_id", "input_id", name=op.f("uq_product_input_product_id_input_id")
        ),
    )
    op.create_index(
        op.f("ix_product_input_product_id"), "product_input", ["product_id"], unique=False
    )
    op.create_table(
        "product_process",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("process_id", sa.Integer(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_product_process_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["process_id"], ["process.id"], name=op.f("fk_product_process_process_id_process")
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product_process")),
        sa.UniqueConstraint(
            "product_id", "sort_order", name=op.f("uq_product_process_product_id_sort_order")
        ),
    )
    op.create_index(
        op.f("ix_product_process_product_id"), "product_process", ["product_id"], unique=False
    )
    op.create_table(
        "product_discount_range",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("min_qty", sa.Integer(), nullable=False),
        sa.Column("max_qty", sa.Integer(), nullable=False),
        sa.Column("unit_price", FixedDecimal(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_product_discount_range_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product_discount_range")),
    )
    op.create_index(
        op.f("ix_product_discount_range_product_id"),
        "product_discount_range",
        ["product_id"],
        unique=False,
    )
    op.create_table(
        "client",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("tax_id", sa.String(length=32), nullable=True),
        sa.Column("cfdi", sa.String(length=64), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("street", sa.String(length=255), nullable=True),
        sa.Column("street_number", sa.Integer(), nullable=True),
        sa.Column("neighborhood", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("state", sa.String(length=128), nullable=True),
        sa.Column("country", sa.String(length=128), nullable=True),
        sa.Column("zip_code", sa.Integer(), nullable=True),
        sa.Column("payment_terms", sa.String(length=128), nullable=True),
        sa.Column("payment_method", sa.String(length=128), nullable=True),
        sa.Column("tax_regimen", sa.String(length=128), nullable=True),
        sa.Column("credit_limit", FixedDecimal(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_client")),
        sa.UniqueConstraint("company_name", name=op.f("uq_client_company_name")),
        sa.UniqueConstraint("tax_id", name=op.f("uq_client_tax_id")),
        sa.UniqueConstraint("cfdi", name=op.f("uq_client_cfdi")),
    )
    op.create_table(
        "product_discount_client",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("discount_percentage", FixedDecimal(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["client_id"],
            ["client.id"],
            name=op.f("fk_product_discount_client_client_id_client"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["product.id"],
            name=op.f("fk_product_discount_client_product_id_product"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_product_discount_client")),
        sa.UniqueConstraint(
            "client_id",
            "product_id",
            name=op.f("uq_product_discount_client_client_id_product_id"),
        ),
    )
    op.create_index(
        op.f("ix_product_discount_client_client_id"),
        "product_discount_client",
        ["client_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        op.f("ix_product_discount_client_client_id"), table_name="product_discount_client"
    )
    op.drop_table("product_discount_client")
    op.drop_table("client")
    op.drop_index(
        op.f("ix_product_discount_range_product_id"), table_name="product_discount_range"
    )
    op.drop_table("product_discount_range")
    op.drop_index(op.f("ix_product_process_product_id"), table_name="product_process")
    op.drop_table("product_process")
    op.drop_index(op.f("ix_product_input_product_id"), table_name="product_input")
    op.drop_table("product_input")
    op.drop_table("product")
    op.drop_table("process")
    op.drop_table("input")
