"""Payload and result objects exchanged with aggregate orchestrators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from erpcore.domain.model import Entity, snapshot
from erpcore.domain.reconciliation import ItemUpdate, ReconciliationIntent

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from erpcore.domain.reconciliation import NewItem


@dataclass(slots=True, kw_only=True)
class Aggregate[TRoot: Entity]:
    """An aggregate root together with every child collection it owns."""

    root: TRoot
    collections: dict[str, list[Entity]] = field(default_factory=dict)

    def collection(self, name: str) -> list[Entity]:
        return self.collections[name]


@dataclass(frozen=True, slots=True, kw_only=True)
class AggregateCreate:
    fields: Mapping[str, object]
    collections: Mapping[str, Sequence[NewItem]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True, kw_only=True)
class AggregateUpdate:
    """Desired root fields plus one reconciliation intent per child collection."""

    fields: Mapping[str, object] = field(default_factory=dict)
    collections: Mapping[str, ReconciliationIntent] = field(default_factory=dict)

    @classmethod
    def from_aggregate(cls, aggregate: Aggregate[Any]) -> AggregateUpdate:
        """Restate ``aggregate`` verbatim; applying the result must change nothing."""

        return cls(
            fields=snapshot(aggregate.root),
            collections={
                name: ReconciliationIntent(
                    updated=[
                        ItemUpdate(id=item.id, fields=snapshot(item))
                        for item in items
                        if item.id is not None
                    ]
                )
                for name, items in aggregate.collections.items()
            },
        )
