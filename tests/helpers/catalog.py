"""Seed data for SQLite backed tests."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from erpcore.domain.model import (
    Input,
    Process,
    Product,
    ProductDiscountRange,
    ProductInput,
    ProductProcess,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


@dataclass(slots=True)
class SeededCatalog:
    flour: Input
    sugar: Input
    butter: Input
    mixing: Process
    baking: Process
    packing: Process
    cookie: Product


def seed_catalog(session: Session) -> SeededCatalog:
    """Store three inputs, three processes and a cookie product with children."""

    flour = Input(name="Flour", unit_of_measure="kg")
    sugar = Input(name="Sugar", unit_of_measure="kg")
    butter = Input(name="Butter", unit_of_measure="kg")
    mixing = Process(name="Mixing", description="Blend the dough")
    baking = Process(name="Baking", description="Bake at 180C")
    packing = Process(name="Packing")
    cookie = Product(name="Cookie", sku="CK-1", sale_price=Decimal("19.99"))
    session.add_all([flour, sugar, butter, mixing, baking, packing, cookie])
    session.flush()
    assert cookie.id is not None
    session.add_all(
        [
            ProductInput(product_id=cookie.id, input_id=_id(flour), equivalence=Decimal("0.25")),
            ProductInput(product_id=cookie.id, input_id=_id(sugar), equivalence=Decimal("0.1")),
            ProductProcess(product_id=cookie.id, process_id=_id(mixing), sort_order=1),
            ProductProcess(product_id=cookie.id, process_id=_id(baking), sort_order=2),
            ProductDiscountRange(
                product_id=cookie.id, min_qty=1, max_qty=9, unit_price=Decimal("19.99")
            ),
            ProductDiscountRange(
                product_id=cookie.id, min_qty=10, max_qty=99, unit_price=Decimal("17.50")
            ),
        ]
    )
    session.commit()
    return SeededCatalog(
        flour=flour,
        sugar=sugar,
        butter=butter,
        mixing=mixing,
        baking=baking,
        packing=packing,
        cookie=cookie,
    )


def _id(entity: Input | Process) -> int:
    assert entity.id is not None
    return entity.id
