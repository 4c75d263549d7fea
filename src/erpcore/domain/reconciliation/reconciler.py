"""Planning of child collection changes against the persisted collection.

The reconciler is pure: it receives the items currently stored for a parent and a
client intent, validates the intent, and returns a :class:`ReconciliationPlan`
whose application leaves the collection in a state that satisfies the ordering,
assignment and range invariants of the collection.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from erpcore.domain.errors import ConflictError, NotFoundError, RangeConflictError
from erpcore.domain.model import decimal_fields, editable_fields, snapshot
from erpcore.domain.reconciliation.diff import diff_fields
from erpcore.domain.reconciliation.editable import pick_editable
from erpcore.domain.reconciliation.normalize import normalize_decimals
from erpcore.domain.reconciliation.plan import (
    ByInlineDefinition,
    ByReference,
    CreateOperation,
    ReconciliationPlan,
    UpdateOperation,
)
from erpcore.domain.reconciliation.ranges import check_range_conflicts

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from erpcore.domain.model import Entity
    from erpcore.domain.reconciliation.plan import (
        CollectionSpec,
        NewItem,
        ReconciliationIntent,
    )

log = logging.getLogger(__name__)


@dataclass(slots=True)
class _FinalRow:
    values: dict[str, object]
    touched: frozenset[str]


def reconcile(
    parent_id: int,
    existing_items: Sequence[Entity],
    intent: ReconciliationIntent,
    spec: CollectionSpec,
) -> ReconciliationPlan:
    """Compute the plan that moves ``existing_items`` to the state ``intent`` declares."""

    _check_disjoint(intent, spec)
    owned = _owned_items(parent_id, existing_items, spec)
    for item_id in (*(update.id for update in intent.updated), *intent.deleted):
        if item_id not in owned:
            raise NotFoundError(
                spec.kind,
                item_id,
                f"{spec.kind} {item_id} does not belong to parent {parent_id}",
            )

    allowed = editable_fields(spec.kind)
    decimals = decimal_fields(spec.kind)
    current = {
        item_id: normalize_decimals(snapshot(item), decimals) for item_id, item in owned.items()
    }

    plan = ReconciliationPlan(collection=spec.name, ordering_key=spec.ordering_key)
    plan.to_delete = list(intent.deleted)
    for update in intent.updated:
        desired = normalize_decimals(pick_editable(update.fields, allowed), decimals)
        changes = diff_fields(current[update.id], desired)
        if changes:
            plan.to_update.append(UpdateOperation(update.id, changes))
    for item in intent.added:
        plan.to_create.append(_create_operation(parent_id, item, spec, allowed, decimals))

    if plan.is_empty:
        return plan

    rows = _final_state(current, plan)
    _check_ordering(rows, spec)
    _check_assignments(rows, spec)
    _check_ranges(rows, spec)
    plan.temporary_keys = _temporary_keys(current, plan, spec)
    log.debug(
        "Planned %s: delete=%s update=%s create=%s two_phase=%s",
        spec.name,
        len(plan.to_delete),
        len(plan.to_update),
        len(plan.to_create),
        plan.is_two_phase,
    )
    return plan


def _check_disjoint(intent: ReconciliationIntent, spec: CollectionSpec) -> None:
    counts = Counter([*(update.id for update in intent.updated), *intent.deleted])
    repeated = sorted(item_id for item_id, count in counts.items() if count > 1)
    if repeated:
        raise ConflictError(
            f"{spec.name}: ids {repeated} appear more than once in updated/deleted",
            field="id",
            value=repeated[0],
        )


def _owned_items(
    parent_id: int,
    existing_items: Sequence[Entity],
    spec: CollectionSpec,
) -> dict[int, Entity]:
    return {
        item.id: item
        for item in existing_items
        if item.id is not None and getattr(item, spec.parent_key) == parent_id
    }


def _create_operation(
    parent_id: int,
    item: NewItem,
    spec: CollectionSpec,
    allowed: frozenset[str],
    decimals: frozenset[str],
) -> CreateOperation:
    data = normalize_decimals(pick_editable(item.fields, allowed), decimals)
    data[spec.parent_key] = parent_id
    if item.reference is None:
        return CreateOperation(data)
    if spec.reference_key is None:
        raise ValueError(f"{spec.name} items do not accept references")
    match item.reference:
        case ByReference(id=reference_id):
            data[spec.reference_key] = reference_id
            return CreateOperation(data)
        case ByInlineDefinition():
            return CreateOperation(data, inline=item.reference)


def _final_state(
    current: Mapping[int, dict[str, object]],
    plan: ReconciliationPlan,
) -> list[_FinalRow]:
    deleted = set(plan.to_delete)
    changes_by_id = {operation.id: operation.changes for operation in plan.to_update}
    rows: list[_FinalRow] = []
    for item_id, values in current.items():
        if item_id in deleted:
            continue
        changes = changes_by_id.get(item_id, {})
        rows.append(_FinalRow({**values, **changes}, frozenset(changes)))
    rows.extend(
        _FinalRow(dict(operation.data), frozenset(operation.data)) for operation in plan.to_create
    )
    return rows


def _check_ordering(rows: Sequence[_FinalRow], spec: CollectionSpec) -> None:
    key = spec.ordering_key
    if key is None:
        return
    counts = Counter(row.values.get(key) for row in rows if row.values.get(key) is not None)
    for value, count in counts.items():
        if count > 1:
            raise ConflictError(
                f"{spec.name}: {key} {value} is used by {count} items",
                field=key,
                value=value,
            )


def _check_assignments(rows: Sequence[_FinalRow], spec: CollectionSpec) -> None:
    key = spec.assignment_key
    if key is None:
        return
    counts = Counter(row.values.get(key) for row in rows if row.values.get(key) is not None)
    for row in rows:
        value = row.values.get(key)
        if key in row.touched and value is not None and counts[value] > 1:
            raise ConflictError(
                f"{spec.name}: {key} {value} is already assigned",
                field=key,
                value=value,
            )


def _check_ranges(rows: Sequence[_FinalRow], spec: CollectionSpec) -> None:
    if spec.range_keys is None:
        return
    low_key, high_key = spec.range_keys
    bounds: list[tuple[int, int]] = []
    for row in rows:
        low = row.values.get(low_key)
        high = row.values.get(high_key)
        if low is None or high is None:
            continue
        bounds.append((int(low), int(high)))  # pyright: ignore[reportArgumentType]
    reason = check_range_conflicts(bounds)
    if reason is not None:
        raise RangeConflictError(reason, entity=spec.kind)


def _temporary_keys(
    current: Mapping[int, dict[str, object]],
    plan: ReconciliationPlan,
    spec: CollectionSpec,
) -> dict[int, int]:
    key = spec.ordering_key
    if key is None:
        return {}
    moving = [operation.id for operation in plan.to_update if key in operation.changes]
    if not moving:
        return {}
    known = [values.get(key) for values in current.values()]
    known.extend(operation.changes.get(key) for operation in plan.to_update)
    known.extend(operation.data.get(key) for operation in plan.to_create)
    offset = 1 + max((abs(int(value)) for value in known if value is not None), default=0)  # pyright: ignore[reportArgumentType]
    return {item_id: -(offset + position) for position, item_id in enumerate(moving)}
