"""Ports for persisting aggregate roots and their child collections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from erpcore.domain.model import Entity

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class EntityRepository[TEntity: Entity](Protocol):
    """Repository contract bound to the transaction of the owning unit of work.

    Writes take effect immediately inside that transaction so that statement order
    equals call order.
    """

    def find_by_id(self, entity_id: int) -> TEntity | None: ...

    def find_by_unique(self, field: str, value: object) -> TEntity | None: ...

    def create(self, data: Mapping[str, object]) -> TEntity: ...

    def update(self, entity_id: int, data: Mapping[str, object]) -> TEntity | None:
        """Apply ``data`` and return the entity, or ``None`` when nothing was affected."""
        ...

    def delete(self, entity_id: int) -> bool: ...


@runtime_checkable
class ChildRepository[TEntity: Entity](EntityRepository[TEntity], Protocol):
    """Repository contract for items owned by an aggregate root."""

    def find_all_by_parent(self, parent_id: int) -> Sequence[TEntity]: ...
