"""Product catalog entities and their child collection items."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal  # noqa: TC003
from typing import ClassVar

from erpcore.domain.model.base import Entity, Timestamped
from erpcore.domain.model.enums import EntityKind


@dataclass(eq=False, kw_only=True)
class Input(Entity, Timestamped):
    """Raw material that products consume."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.INPUT

    name: str
    unit_of_measure: str | None = None


@dataclass(eq=False, kw_only=True)
class Process(Entity, Timestamped):
    """Manufacturing step that products run through."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PROCESS

    name: str
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class Product(Entity, Timestamped):
    """Aggregate root of the catalog."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT

    name: str
    custom_id: str | None = None
    sku: str | None = None
    barcode: str | None = None
    description: str | None = None
    storage_conditions: str | None = None
    unit_of_measure: str | None = None
    presentation: str | None = None
    type: str | None = None
    production_cost: Decimal | None = None
    sale_price: Decimal | None = None
    is_active: bool = True
    is_draft: bool = False
    photo: str | None = None


@dataclass(eq=False, kw_only=True)
class ProductInput(Entity):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT_INPUT

    product_id: int
    input_id: int
    equivalence: Decimal | None = None


@dataclass(eq=False, kw_only=True)
class ProductProcess(Entity):
    """Ordered process step; ``sort_order`` is unique per product."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT_PROCESS

    product_id: int
    process_id: int
    sort_order: int


@dataclass(eq=False, kw_only=True)
class ProductDiscountRange(Entity, Timestamped):
    """Volume price applying to quantities in ``[min_qty, max_qty]``."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT_DISCOUNT_RANGE

    product_id: int
    min_qty: int
    max_qty: int
    unit_price: Decimal | None = None
