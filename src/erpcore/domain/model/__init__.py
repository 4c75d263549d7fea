"""Public domain model surface."""

from __future__ import annotations

from erpcore.domain.model.base import Entity, Timestamped, snapshot, utcnow
from erpcore.domain.model.catalog import (
    Input,
    Process,
    Product,
    ProductDiscountRange,
    ProductInput,
    ProductProcess,
)
from erpcore.domain.model.client import Client, ProductDiscountClient
from erpcore.domain.model.enums import EntityKind
from erpcore.domain.model.fields import (
    DECIMAL_FIELDS,
    DECIMAL_PRECISION,
    DECIMAL_SCALE,
    EDITABLE_FIELDS,
    UNIQUE_FIELDS,
    decimal_fields,
    editable_fields,
    unique_fields,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "Timestamped",
    "snapshot",
    "utcnow",
    "EntityKind",
    # catalog
    "Input",
    "Process",
    "Product",
    "ProductInput",
    "ProductProcess",
    "ProductDiscountRange",
    # clients
    "Client",
    "ProductDiscountClient",
    # field configuration
    "DECIMAL_FIELDS",
    "DECIMAL_PRECISION",
    "DECIMAL_SCALE",
    "EDITABLE_FIELDS",
    "UNIQUE_FIELDS",
    "decimal_fields",
    "editable_fields",
    "unique_fields",
]
