"""Client aggregate: client record and its per-product discounts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Final

from erpcore.domain.aggregates.orchestrator import AggregateOrchestrator
from erpcore.domain.model import Client, EntityKind
from erpcore.domain.ports.unit_of_work import ClientRepositories
from erpcore.domain.reconciliation import CollectionSpec

if TYPE_CHECKING:
    from collections.abc import Mapping

    from erpcore.domain.ports.persistence import ChildRepository, EntityRepository

PRODUCT_DISCOUNTS: Final = CollectionSpec(
    name="product_discounts",
    kind=EntityKind.PRODUCT_DISCOUNT_CLIENT,
    parent_key="client_id",
    assignment_key="product_id",
)


class ClientOrchestrator(AggregateOrchestrator[Client, ClientRepositories]):
    root_kind: ClassVar[EntityKind] = EntityKind.CLIENT
    collections: ClassVar[tuple[CollectionSpec, ...]] = (PRODUCT_DISCOUNTS,)

    def _root_repository(self, repositories: ClientRepositories) -> EntityRepository[Client]:
        return repositories.clients

    def _child_repository(
        self, repositories: ClientRepositories, spec: CollectionSpec
    ) -> ChildRepository[Any]:
        if spec.name != PRODUCT_DISCOUNTS.name:
            raise ValueError(f"Unknown client collection {spec.name}")
        return repositories.product_discounts

    def _reference_repositories(
        self, repositories: ClientRepositories, spec: CollectionSpec
    ) -> Mapping[str, EntityRepository[Any]]:
        _ = spec
        return {"product_id": repositories.products}
