"""
Base building blocks:
storage-assigned identity, entity kind contract, audit timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from erpcore.domain.model.enums import EntityKind


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False, kw_only=True)
class Entity:
    """Identity is assigned by storage on insert and never changes afterwards."""

    id: int | None = None

    # class-level discriminator; subclasses must override
    ENTITY_KIND: ClassVar[EntityKind]

    @property
    def entity_kind(self) -> EntityKind:
        return self.ENTITY_KIND


@dataclass(eq=False, kw_only=True)
class Timestamped:
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def touch(self, *, created: bool = False, now: datetime | None = None) -> None:
        moment = now or utcnow()
        if created or self.created_at is None:
            self.created_at = moment
        self.updated_at = moment


def snapshot(entity: Entity) -> dict[str, object]:
    """Return the plain field mapping of an entity."""

    return {item.name: getattr(entity, item.name) for item in fields(entity)}
