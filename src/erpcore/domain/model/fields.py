"""Per entity kind field configuration.

Allowlists never contain identity, the owning parent's foreign key, or audit
timestamps. Decimal fields are the fixed-point columns whose stored representation
may differ from what clients submit.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from erpcore.domain.model.enums import EntityKind

if TYPE_CHECKING:
    from collections.abc import Mapping

# every decimal field is stored as NUMERIC(14, 4)
DECIMAL_PRECISION: Final[int] = 14
DECIMAL_SCALE: Final[int] = 4

EDITABLE_FIELDS: Final[Mapping[EntityKind, frozenset[str]]] = MappingProxyType(
    {
        EntityKind.PRODUCT: frozenset(
            {
                "name",
                "custom_id",
                "sku",
                "barcode",
                "description",
                "storage_conditions",
                "unit_of_measure",
                "presentation",
                "type",
                "production_cost",
                "sale_price",
                "is_active",
                "is_draft",
                "photo",
            }
        ),
        EntityKind.INPUT: frozenset({"name", "unit_of_measure"}),
        EntityKind.PROCESS: frozenset({"name", "description"}),
        EntityKind.PRODUCT_INPUT: frozenset({"input_id", "equivalence"}),
        EntityKind.PRODUCT_PROCESS: frozenset({"process_id", "sort_order"}),
        EntityKind.PRODUCT_DISCOUNT_RANGE: frozenset({"min_qty", "max_qty", "unit_price"}),
        EntityKind.CLIENT: frozenset(
            {
                "company_name",
                "tax_id",
                "cfdi",
                "email",
                "phone",
                "street",
                "street_number",
                "neighborhood",
                "city",
                "state",
                "country",
                "zip_code",
                "payment_terms",
                "payment_method",
                "tax_regimen",
                "credit_limit",
                "is_active",
            }
        ),
        EntityKind.PRODUCT_DISCOUNT_CLIENT: frozenset({"product_id", "discount_percentage"}),
    }
)

DECIMAL_FIELDS: Final[Mapping[EntityKind, frozenset[str]]] = MappingProxyType(
    {
        EntityKind.PRODUCT: frozenset({"production_cost", "sale_price"}),
        EntityKind.INPUT: frozenset(),
        EntityKind.PROCESS: frozenset(),
        EntityKind.PRODUCT_INPUT: frozenset({"equivalence"}),
        EntityKind.PRODUCT_PROCESS: frozenset(),
        EntityKind.PRODUCT_DISCOUNT_RANGE: frozenset({"unit_price"}),
        EntityKind.CLIENT: frozenset({"credit_limit"}),
        EntityKind.PRODUCT_DISCOUNT_CLIENT: frozenset({"discount_percentage"}),
    }
)

UNIQUE_FIELDS: Final[Mapping[EntityKind, tuple[str, ...]]] = MappingProxyType(
    {
        EntityKind.PRODUCT: ("name", "sku", "custom_id", "barcode"),
        EntityKind.INPUT: ("name",),
        EntityKind.PROCESS: (),
        EntityKind.CLIENT: ("company_name", "tax_id", "cfdi"),
    }
)


def editable_fields(kind: EntityKind) -> frozenset[str]:
    return EDITABLE_FIELDS[kind]


def decimal_fields(kind: EntityKind) -> frozenset[str]:
    return DECIMAL_FIELDS[kind]


def unique_fields(kind: EntityKind) -> tuple[str, ...]:
    return UNIQUE_FIELDS.get(kind, ())
