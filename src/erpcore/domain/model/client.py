"""Client entities and per-product client discounts."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal  # noqa: TC003
from typing import ClassVar

from erpcore.domain.model.base import Entity, Timestamped
from erpcore.domain.model.enums import EntityKind


@dataclass(eq=False, kw_only=True)
class Client(Entity, Timestamped):
    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.CLIENT

    company_name: str
    tax_id: str | None = None
    cfdi: str | None = None
    email: str | None = None
    phone: str | None = None
    street: str | None = None
    street_number: int | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    zip_code: int | None = None
    payment_terms: str | None = None
    payment_method: str | None = None
    tax_regimen: str | None = None
    credit_limit: Decimal | None = None
    is_active: bool = True


@dataclass(eq=False, kw_only=True)
class ProductDiscountClient(Entity, Timestamped):
    """Percentage discount a client gets on one product."""

    ENTITY_KIND: ClassVar[EntityKind] = EntityKind.PRODUCT_DISCOUNT_CLIENT

    client_id: int
    product_id: int
    discount_percentage: Decimal | None = None
