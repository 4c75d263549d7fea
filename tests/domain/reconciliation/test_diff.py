from __future__ import annotations

from decimal import Decimal

import pytest

from erpcore.domain.model import Product, snapshot
from erpcore.domain.reconciliation import diff_fields, normalize_decimals


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"name": "Cookie", "sale_price": Decimal("1.5")},
        {"id": 4, "is_active": False, "photo": None},
    ],
)
def test_diff_of_snapshot_with_itself_is_empty(data: dict[str, object]) -> None:
    assert diff_fields(data, data) == {}


def test_diff_contains_only_changed_keys() -> None:
    existing = {"name": "Cookie", "sku": "CK-1", "photo": None}
    desired = {"name": "Cookie", "sku": "CK-2"}

    assert diff_fields(existing, desired) == {"sku": "CK-2"}


def test_key_missing_from_existing_is_a_change() -> None:
    assert diff_fields({"name": "Cookie"}, {"photo": None}) == {"photo": None}


def test_identity_is_never_diffed() -> None:
    assert diff_fields({"id": 1}, {"id": 2, "name": "x"}) == {"name": "x"}


def test_normalized_representations_do_not_diff() -> None:
    decimals = {"sale_price"}
    existing = normalize_decimals({"sale_price": "19.9900"}, decimals)
    desired = normalize_decimals({"sale_price": "19.99"}, decimals)

    assert diff_fields(existing, desired) == {}


def test_boolean_stored_as_integer_does_not_diff() -> None:
    assert diff_fields({"is_active": 1}, {"is_active": True}) == {}


def test_entity_snapshot_round_trips_through_diff() -> None:
    product = Product(id=3, name="Cookie", sale_price=Decimal("2.00"))

    assert diff_fields(snapshot(product), snapshot(product)) == {}
