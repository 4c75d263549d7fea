"""Product aggregate: product, inputs, process steps and volume discount ranges."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Final

from erpcore.domain.aggregates.orchestrator import AggregateOrchestrator
from erpcore.domain.model import EntityKind, Product
from erpcore.domain.ports.unit_of_work import ProductRepositories
from erpcore.domain.reconciliation import CollectionSpec

if TYPE_CHECKING:
    from collections.abc import Mapping

    from erpcore.domain.ports.persistence import ChildRepository, EntityRepository

PRODUCT_INPUTS: Final = CollectionSpec(
    name="product_inputs",
    kind=EntityKind.PRODUCT_INPUT,
    parent_key="product_id",
    assignment_key="input_id",
)
PRODUCT_PROCESSES: Final = CollectionSpec(
    name="product_processes",
    kind=EntityKind.PRODUCT_PROCESS,
    parent_key="product_id",
    ordering_key="sort_order",
    reference_key="process_id",
)
PRODUCT_DISCOUNT_RANGES: Final = CollectionSpec(
    name="product_discount_ranges",
    kind=EntityKind.PRODUCT_DISCOUNT_RANGE,
    parent_key="product_id",
    range_keys=("min_qty", "max_qty"),
)


class ProductOrchestrator(AggregateOrchestrator[Product, ProductRepositories]):
    root_kind: ClassVar[EntityKind] = EntityKind.PRODUCT
    collections: ClassVar[tuple[CollectionSpec, ...]] = (
        PRODUCT_INPUTS,
        PRODUCT_PROCESSES,
        PRODUCT_DISCOUNT_RANGES,
    )

    def _root_repository(self, repositories: ProductRepositories) -> EntityRepository[Product]:
        return repositories.products

    def _child_repository(
        self, repositories: ProductRepositories, spec: CollectionSpec
    ) -> ChildRepository[Any]:
        match spec.name:
            case PRODUCT_INPUTS.name:
                return repositories.product_inputs
            case PRODUCT_PROCESSES.name:
                return repositories.product_processes
            case PRODUCT_DISCOUNT_RANGES.name:
                return repositories.product_discount_ranges
            case _:
                raise ValueError(f"Unknown product collection {spec.name}")

    def _inline_repository(
        self, repositories: ProductRepositories, spec: CollectionSpec
    ) -> EntityRepository[Any] | None:
        return repositories.processes if spec.name == PRODUCT_PROCESSES.name else None

    def _reference_repositories(
        self, repositories: ProductRepositories, spec: CollectionSpec
    ) -> Mapping[str, EntityRepository[Any]]:
        if spec.name == PRODUCT_INPUTS.name:
            return {"input_id": repositories.inputs}
        if spec.name == PRODUCT_PROCESSES.name:
            return {"process_id": repositories.processes}
        return {}
