from __future__ import annotations

from decimal import Decimal

import pytest

from erpcore.domain.aggregates import (
    PRODUCT_DISCOUNT_RANGES,
    PRODUCT_DISCOUNTS,
    PRODUCT_INPUTS,
    PRODUCT_PROCESSES,
)
from erpcore.domain.errors import ConflictError, NotFoundError, RangeConflictError
from erpcore.domain.model import (
    ProductDiscountClient,
    ProductDiscountRange,
    ProductInput,
    ProductProcess,
)
from erpcore.domain.reconciliation import (
    ByInlineDefinition,
    ByReference,
    ItemUpdate,
    NewItem,
    ReconciliationIntent,
    UpdateOperation,
    reconcile,
)


def _steps() -> list[ProductProcess]:
    return [
        ProductProcess(id=10, product_id=1, process_id=100, sort_order=1),
        ProductProcess(id=11, product_id=1, process_id=101, sort_order=2),
        ProductProcess(id=12, product_id=1, process_id=102, sort_order=3),
    ]


def _inputs() -> list[ProductInput]:
    return [
        ProductInput(id=20, product_id=1, input_id=7, equivalence=Decimal("0.2500")),
        ProductInput(id=21, product_id=1, input_id=8, equivalence=Decimal("1.0000")),
    ]


def test_empty_intent_produces_empty_plan() -> None:
    plan = reconcile(1, _steps(), ReconciliationIntent(), PRODUCT_PROCESSES)

    assert plan.is_empty
    assert not plan.is_two_phase


def test_id_owned_by_another_parent_is_not_found() -> None:
    foreign = ProductProcess(id=99, product_id=2, process_id=100, sort_order=1)
    intent = ReconciliationIntent(updated=[ItemUpdate(id=99, fields={"sort_order": 4})])

    with pytest.raises(NotFoundError) as excinfo:
        reconcile(1, [*_steps(), foreign], intent, PRODUCT_PROCESSES)

    assert excinfo.value.entity_id == 99
    assert excinfo.value.status_code == 404


def test_unknown_deleted_id_is_not_found() -> None:
    intent = ReconciliationIntent(deleted=[404])

    with pytest.raises(NotFoundError):
        reconcile(1, _steps(), intent, PRODUCT_PROCESSES)


def test_id_in_updated_and_deleted_is_rejected() -> None:
    intent = ReconciliationIntent(
        updated=[ItemUpdate(id=10, fields={"sort_order": 5})],
        deleted=[10],
    )

    with pytest.raises(ConflictError) as excinfo:
        reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    assert excinfo.value.field == "id"


def test_noop_updates_are_dropped() -> None:
    intent = ReconciliationIntent(
        updated=[
            ItemUpdate(id=20, fields={"equivalence": "0.25", "input_id": 7}),
            ItemUpdate(id=21, fields={"equivalence": 2}),
        ]
    )

    plan = reconcile(1, _inputs(), intent, PRODUCT_INPUTS)

    assert plan.to_update == [UpdateOperation(21, {"equivalence": Decimal(2)})]


def test_created_rows_are_filtered_and_linked_to_parent() -> None:
    intent = ReconciliationIntent(
        added=[NewItem(fields={"id": 5, "product_id": 77, "input_id": 9, "equivalence": "3"})]
    )

    plan = reconcile(1, _inputs(), intent, PRODUCT_INPUTS)

    assert [operation.data for operation in plan.to_create] == [
        {"input_id": 9, "equivalence": Decimal(3), "product_id": 1}
    ]


def test_reference_targets_are_resolved_for_process_steps() -> None:
    intent = ReconciliationIntent(
        added=[
            NewItem(fields={"sort_order": 4}, reference=ByReference(100)),
            NewItem(fields={"sort_order": 5}, reference=ByInlineDefinition(name="Glazing")),
        ]
    )

    plan = reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    by_reference, inline = plan.to_create
    assert by_reference.data == {"sort_order": 4, "product_id": 1, "process_id": 100}
    assert by_reference.inline is None
    assert inline.data == {"sort_order": 5, "product_id": 1}
    assert inline.inline == ByInlineDefinition(name="Glazing")


def test_reference_on_collection_without_reference_key_is_rejected() -> None:
    intent = ReconciliationIntent(
        added=[NewItem(fields={"input_id": 9}, reference=ByReference(3))]
    )

    with pytest.raises(ValueError, match="do not accept references"):
        reconcile(1, _inputs(), intent, PRODUCT_INPUTS)


def test_swap_is_planned_with_temporary_keys() -> None:
    intent = ReconciliationIntent(
        updated=[
            ItemUpdate(id=10, fields={"sort_order": 2}),
            ItemUpdate(id=11, fields={"sort_order": 1}),
        ]
    )

    plan = reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    assert plan.is_two_phase
    assert set(plan.temporary_keys) == {10, 11}
    temporaries = list(plan.temporary_keys.values())
    assert len(set(temporaries)) == 2
    assert all(value < -3 for value in temporaries)


def test_updates_without_ordering_change_are_single_phase() -> None:
    intent = ReconciliationIntent(updated=[ItemUpdate(id=10, fields={"process_id": 105})])

    plan = reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    assert not plan.is_two_phase


def test_final_ordering_collision_is_rejected_before_any_write() -> None:
    intent = ReconciliationIntent(updated=[ItemUpdate(id=10, fields={"sort_order": 3})])

    with pytest.raises(ConflictError) as excinfo:
        reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    assert excinfo.value.field == "sort_order"
    assert excinfo.value.value == 3


def test_moving_into_a_deleted_slot_is_allowed() -> None:
    intent = ReconciliationIntent(
        updated=[ItemUpdate(id=10, fields={"sort_order": 3})],
        deleted=[12],
    )

    plan = reconcile(1, _steps(), intent, PRODUCT_PROCESSES)

    assert plan.to_delete == [12]
    assert plan.temporary_keys.keys() == {10}


def test_duplicate_input_assignment_is_rejected() -> None:
    intent = ReconciliationIntent(added=[NewItem(fields={"input_id": 7})])

    with pytest.raises(ConflictError) as excinfo:
        reconcile(1, _inputs(), intent, PRODUCT_INPUTS)

    assert excinfo.value.field == "input_id"


def test_reassigning_a_deleted_input_is_allowed() -> None:
    intent = ReconciliationIntent(added=[NewItem(fields={"input_id": 7})], deleted=[20])

    plan = reconcile(1, _inputs(), intent, PRODUCT_INPUTS)

    assert len(plan.to_create) == 1


def test_duplicate_client_discount_is_rejected() -> None:
    existing = [ProductDiscountClient(id=1, client_id=5, product_id=3)]
    intent = ReconciliationIntent(
        added=[NewItem(fields={"product_id": 3, "discount_percentage": "10"})]
    )

    with pytest.raises(ConflictError):
        reconcile(5, existing, intent, PRODUCT_DISCOUNTS)


@pytest.mark.parametrize(
    ("added", "reason"),
    [
        ({"min_qty": 5, "max_qty": 20}, "overlap"),
        ({"min_qty": 1, "max_qty": 9}, "duplicate"),
        ({"min_qty": 200, "max_qty": 100}, "invalid_range"),
    ],
)
def test_discount_range_conflicts(added: dict[str, object], reason: str) -> None:
    existing = [
        ProductDiscountRange(id=1, product_id=1, min_qty=1, max_qty=9),
        ProductDiscountRange(id=2, product_id=1, min_qty=10, max_qty=99),
    ]
    intent = ReconciliationIntent(added=[NewItem(fields=added)])

    with pytest.raises(RangeConflictError) as excinfo:
        reconcile(1, existing, intent, PRODUCT_DISCOUNT_RANGES)

    assert excinfo.value.reason == reason
    assert excinfo.value.status_code == 409


def test_discount_range_update_checks_the_final_set() -> None:
    existing = [
        ProductDiscountRange(id=1, product_id=1, min_qty=1, max_qty=9),
        ProductDiscountRange(id=2, product_id=1, min_qty=10, max_qty=99),
    ]
    intent = ReconciliationIntent(
        updated=[ItemUpdate(id=1, fields={"max_qty": 19})],
        added=[NewItem(fields={"min_qty": 100, "max_qty": 500})],
        deleted=[2],
    )

    plan = reconcile(1, existing, intent, PRODUCT_DISCOUNT_RANGES)

    assert plan.to_update == [UpdateOperation(1, {"max_qty": 19})]
    assert plan.to_delete == [2]
