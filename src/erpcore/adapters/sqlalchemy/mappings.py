"""SQLAlchemy mapping metadata for the erpcore domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from decimal import Decimal
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from erpcore.domain.model import (
    DECIMAL_PRECISION,
    DECIMAL_SCALE,
    Client,
    Entity,
    Input,
    Process,
    Product,
    ProductDiscountClient,
    ProductDiscountRange,
    ProductInput,
    ProductProcess,
)

if TYPE_CHECKING:
    from sqlalchemy.types import TypeEngine

log = logging.getLogger(__name__)

_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-DECIMAL_SCALE)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class FixedDecimal(TypeDecorator[Decimal]):
    """``NUMERIC(14, 4)`` that round-trips exact decimals on every dialect.

    SQLite has no fixed-point storage, so values are kept as quantised strings
    there; other dialects use their native numeric type.
    """

    impl = Numeric(DECIMAL_PRECISION, DECIMAL_SCALE, asdecimal=True)
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[object]:
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(DECIMAL_PRECISION + 2))
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value: object, dialect: Dialect) -> Decimal | str | None:
        if value is None:
            return None
        quantised = Decimal(str(value)).quantize(_QUANTUM)
        return str(quantised) if dialect.name == "sqlite" else quantised

    def process_result_value(self, value: object, dialect: Dialect) -> Decimal | None:
        _ = dialect
        if value is None:
            return None
        return Decimal(str(value))


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _timestamps() -> tuple[Column[datetime], Column[datetime]]:
    return (
        Column("created_at", UTCDateTime(), nullable=True),
        Column("updated_at", UTCDateTime(), nullable=True),
    )


# Catalog tables --------------------------------------------------------------

input_table = Table(
    "input",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("unit_of_measure", String(64), nullable=True),
    *_timestamps(),
)

process_table = Table(
    "process",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
    *_timestamps(),
)

product_table = Table(
    "product",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("custom_id", String(64), nullable=True, unique=True),
    Column("sku", String(64), nullable=True, unique=True),
    Column("barcode", String(64), nullable=True, unique=True),
    Column("description", Text, nullable=True),
    Column("storage_conditions", Text, nullable=True),
    Column("unit_of_measure", String(64), nullable=True),
    Column("presentation", String(255), nullable=True),
    Column("type", String(64), nullable=True),
    Column("production_cost", FixedDecimal(), nullable=True),
    Column("sale_price", FixedDecimal(), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("is_draft", Boolean, nullable=False, default=False),
    Column("photo", String(512), nullable=True),
    *_timestamps(),
)

product_input_table = Table(
    "product_input",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "product_id",
        Integer,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("input_id", Integer, ForeignKey("input.id"), nullable=False),
    Column("equivalence", FixedDecimal(), nullable=True),
    UniqueConstraint("product_id", "input_id"),
)

product_process_table = Table(
    "product_process",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "product_id",
        Integer,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("process_id", Integer, ForeignKey("process.id"), nullable=False),
    Column("sort_order", Integer, nullable=False),
    UniqueConstraint("product_id", "sort_order"),
)

product_discount_range_table = Table(
    "product_discount_range",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "product_id",
        Integer,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("min_qty", Integer, nullable=False),
    Column("max_qty", Integer, nullable=False),
    Column("unit_price", FixedDecimal(), nullable=True),
    *_timestamps(),
)

# Client tables ---------------------------------------------------------------

client_table = Table(
    "client",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("company_name", String(255), nullable=False, unique=True),
    Column("tax_id", String(32), nullable=True, unique=True),
    Column("cfdi", String(64), nullable=True, unique=True),
    Column("email", String(255), nullable=True),
    Column("phone", String(32), nullable=True),
    Column("street", String(255), nullable=True),
    Column("street_number", Integer, nullable=True),
    Column("neighborhood", String(255), nullable=True),
    Column("city", String(128), nullable=True),
    Column("state", String(128), nullable=True),
    Column("country", String(128), nullable=True),
    Column("zip_code", Integer, nullable=True),
    Column("payment_terms", String(128), nullable=True),
    Column("payment_method", String(128), nullable=True),
    Column("tax_regimen", String(128), nullable=True),
    Column("credit_limit", FixedDecimal(), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    *_timestamps(),
)

product_discount_client_table = Table(
    "product_discount_client",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "client_id",
        Integer,
        ForeignKey("client.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "product_id",
        Integer,
        ForeignKey("product.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("discount_percentage", FixedDecimal(), nullable=True),
    *_timestamps(),
    UniqueConstraint("client_id", "product_id"),
)

TABLE_BY_CLASS: Final[dict[type[Entity], Table]] = {
    Input: input_table,
    Process: process_table,
    Product: product_table,
    ProductInput: product_input_table,
    ProductProcess: product_process_table,
    ProductDiscountRange: product_discount_range_table,
    Client: client_table,
    ProductDiscountClient: product_discount_client_table,
}


@cache
def start_mappers() -> orm.registry:
    """Map every domain entity imperatively onto its table (idempotent)."""

    for entity_cls, table in TABLE_BY_CLASS.items():
        mapper_registry.map_imperatively(entity_cls, table)
    configure_mappers()
    log.debug("Mapped %s entity classes", len(TABLE_BY_CLASS))
    return mapper_registry

