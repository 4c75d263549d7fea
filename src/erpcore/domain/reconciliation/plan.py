"""Value objects describing reconciliation intents and the plans derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from erpcore.domain.model import EntityKind


# Reference targets -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ByReference:
    """Point a new child at an existing entity."""

    id: int


@dataclass(frozen=True, slots=True)
class ByInlineDefinition:
    """Create the referenced entity inside the same transaction as the child."""

    name: str
    description: str | None = None


type ReferenceTarget = ByReference | ByInlineDefinition


# Intent ------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class NewItem:
    fields: Mapping[str, object]
    reference: ReferenceTarget | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemUpdate:
    id: int
    fields: Mapping[str, object]


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationIntent:
    """Client-declared add/update/delete changes to one child collection."""

    added: Sequence[NewItem] = ()
    updated: Sequence[ItemUpdate] = ()
    deleted: Sequence[int] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.deleted)


# Collection description --------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionSpec:
    """Static description of a child collection owned by an aggregate root.

    ``ordering_key`` names a column unique per parent; updates that change it are
    applied in two phases. ``assignment_key`` names a column that may hold a given
    value at most once per parent. ``range_keys`` names the ``(min, max)`` columns
    of a range set that must stay free of overlaps. ``reference_key`` receives the
    id of a :class:`ByReference` or freshly created :class:`ByInlineDefinition`.
    """

    name: str
    kind: EntityKind
    parent_key: str
    ordering_key: str | None = None
    assignment_key: str | None = None
    range_keys: tuple[str, str] | None = None
    reference_key: str | None = None


# Plan --------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class UpdateOperation:
    id: int
    changes: Mapping[str, object]


@dataclass(frozen=True, slots=True)
class CreateOperation:
    data: Mapping[str, object]
    inline: ByInlineDefinition | None = None


@dataclass(slots=True, kw_only=True)
class ReconciliationPlan:
    """Minimal ordered operations that move a collection to its desired state."""

    collection: str
    to_delete: list[int] = field(default_factory=list)
    to_update: list[UpdateOperation] = field(default_factory=list)
    to_create: list[CreateOperation] = field(default_factory=list)
    ordering_key: str | None = None
    # id -> out-of-range ordering value written before the final values
    temporary_keys: dict[int, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not (self.to_delete or self.to_update or self.to_create)

    @property
    def is_two_phase(self) -> bool:
        return bool(self.temporary_keys)


@dataclass(slots=True)
class ApplyResult:
    deleted: int = 0
    updated: int = 0
    created: int = 0

    @property
    def writes(self) -> int:
        return self.deleted + self.updated + self.created
