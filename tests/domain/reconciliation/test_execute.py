from __future__ import annotations

import pytest

from erpcore.domain.aggregates import PRODUCT_PROCESSES
from erpcore.domain.errors import ConflictError, InternalError
from erpcore.domain.model import Process, ProductProcess
from erpcore.domain.reconciliation import (
    ByInlineDefinition,
    ItemUpdate,
    NewItem,
    ReconciliationIntent,
    ReconciliationPlan,
    UpdateOperation,
    apply_plan,
    reconcile,
)
from tests.helpers.memory import InMemoryRepository, Journal


def _repositories() -> tuple[InMemoryRepository[ProductProcess], InMemoryRepository[Process], Journal]:
    journal = Journal()
    steps = InMemoryRepository(
        ProductProcess, journal, parent_key="product_id", unique=[("product_id", "sort_order")]
    )
    processes = InMemoryRepository(Process, journal)
    for order in (1, 2, 3):
        steps.add(ProductProcess(product_id=1, process_id=100 + order, sort_order=order))
    return steps, processes, journal


def test_swap_applies_without_hitting_the_unique_key() -> None:
    steps, processes, journal = _repositories()
    intent = ReconciliationIntent(
        updated=[
            ItemUpdate(id=1, fields={"sort_order": 2}),
            ItemUpdate(id=2, fields={"sort_order": 1}),
        ]
    )
    plan = reconcile(1, steps.find_all_by_parent(1), intent, PRODUCT_PROCESSES)

    result = apply_plan(plan, PRODUCT_PROCESSES, steps, inline_repository=processes)

    assert result.updated == 2
    assert {row.id: row.sort_order for row in steps.rows.values()} == {1: 2, 2: 1, 3: 3}
    # two temporary writes followed by two final writes
    assert [action for action, _, _ in journal.writes] == ["update"] * 4


def test_single_phase_swap_would_violate_the_unique_key() -> None:
    steps, _, _ = _repositories()
    plan = ReconciliationPlan(
        collection=PRODUCT_PROCESSES.name,
        to_update=[UpdateOperation(1, {"sort_order": 2}), UpdateOperation(2, {"sort_order": 1})],
        ordering_key="sort_order",
    )

    with pytest.raises(ConflictError):
        apply_plan(plan, PRODUCT_PROCESSES, steps)


def test_operations_run_delete_update_create() -> None:
    steps, processes, journal = _repositories()
    intent = ReconciliationIntent(
        added=[NewItem(fields={"sort_order": 3}, reference=ByInlineDefinition(name="Glazing"))],
        updated=[ItemUpdate(id=2, fields={"sort_order": 4})],
        deleted=[3],
    )
    plan = reconcile(1, steps.find_all_by_parent(1), intent, PRODUCT_PROCESSES)

    apply_plan(plan, PRODUCT_PROCESSES, steps, inline_repository=processes)

    assert [(action, kind) for action, kind, _ in journal.writes] == [
        ("delete", "product_process"),
        ("update", "product_process"),
        ("update", "product_process"),
        ("create", "process"),
        ("create", "product_process"),
    ]
    glazing = next(iter(processes.rows.values()))
    created = steps.rows[4]
    assert glazing.name == "Glazing"
    assert created.process_id == glazing.id
    assert created.sort_order == 3


def test_update_affecting_nothing_is_an_internal_error() -> None:
    steps, _, _ = _repositories()
    plan = ReconciliationPlan(
        collection=PRODUCT_PROCESSES.name,
        to_update=[UpdateOperation(42, {"process_id": 7})],
    )

    with pytest.raises(InternalError):
        apply_plan(plan, PRODUCT_PROCESSES, steps)


def test_delete_affecting_nothing_is_an_internal_error() -> None:
    steps, _, _ = _repositories()
    plan = ReconciliationPlan(collection=PRODUCT_PROCESSES.name, to_delete=[42])

    with pytest.raises(InternalError):
        apply_plan(plan, PRODUCT_PROCESSES, steps)
