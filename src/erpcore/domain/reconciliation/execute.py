"""Ordered application of reconciliation plans through child repositories."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from erpcore.domain.errors import InternalError
from erpcore.domain.reconciliation.plan import ApplyResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from erpcore.domain.ports.persistence import ChildRepository, EntityRepository
    from erpcore.domain.reconciliation.plan import (
        CollectionSpec,
        CreateOperation,
        ReconciliationPlan,
    )

log = logging.getLogger(__name__)


def apply_plan(
    plan: ReconciliationPlan,
    spec: CollectionSpec,
    repository: ChildRepository[Any],
    *,
    inline_repository: EntityRepository[Any] | None = None,
) -> ApplyResult:
    """Apply ``plan`` in the order delete, update, create.

    Updates that move an ordering key first park every moving row on its temporary
    key so that no intermediate state collides with the per-parent unique
    constraint, then write the final values.
    """

    result = ApplyResult()

    for item_id in plan.to_delete:
        if not repository.delete(item_id):
            raise InternalError(f"Failed to delete {spec.kind} {item_id}")
        result.deleted += 1

    if plan.is_two_phase and plan.ordering_key is not None:
        for item_id, temporary in plan.temporary_keys.items():
            _update(repository, spec, item_id, {plan.ordering_key: temporary})
        log.debug("Parked %s %s rows on temporary keys", len(plan.temporary_keys), spec.name)

    for operation in plan.to_update:
        _update(repository, spec, operation.id, operation.changes)
        result.updated += 1

    for operation in plan.to_create:
        repository.create(_resolve_inline(operation, spec, inline_repository))
        result.created += 1

    return result


def _update(
    repository: ChildRepository[Any],
    spec: CollectionSpec,
    item_id: int,
    changes: Mapping[str, object],
) -> None:
    if repository.update(item_id, changes) is None:
        raise InternalError(f"Failed to update {spec.kind} {item_id}")


def _resolve_inline(
    operation: CreateOperation,
    spec: CollectionSpec,
    inline_repository: EntityRepository[Any] | None,
) -> dict[str, object]:
    data = dict(operation.data)
    if operation.inline is None:
        return data
    if inline_repository is None or spec.reference_key is None:
        raise InternalError(f"{spec.name} cannot resolve inline definitions")
    created = inline_repository.create(
        {"name": operation.inline.name, "description": operation.inline.description}
    )
    data[spec.reference_key] = created.id
    return data
