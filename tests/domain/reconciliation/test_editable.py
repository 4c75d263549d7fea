from __future__ import annotations

import pytest

from erpcore.domain.model import EDITABLE_FIELDS, EntityKind, editable_fields
from erpcore.domain.reconciliation import pick_editable


def test_non_allowlisted_keys_are_dropped() -> None:
    payload = {"id": 999, "created_at": "2020-01-01", "name": "N"}

    assert pick_editable(payload, editable_fields(EntityKind.PRODUCT)) == {"name": "N"}


def test_absent_keys_are_not_materialised() -> None:
    result = pick_editable({"sku": None}, editable_fields(EntityKind.PRODUCT))

    assert result == {"sku": None}
    assert "name" not in result


@pytest.mark.parametrize("kind", list(EntityKind))
def test_allowlists_never_expose_identity_or_audit_fields(kind: EntityKind) -> None:
    allowed = EDITABLE_FIELDS[kind]

    assert not allowed & {"id", "created_at", "updated_at"}


@pytest.mark.parametrize(
    ("kind", "parent_key"),
    [
        (EntityKind.PRODUCT_INPUT, "product_id"),
        (EntityKind.PRODUCT_PROCESS, "product_id"),
        (EntityKind.PRODUCT_DISCOUNT_RANGE, "product_id"),
        (EntityKind.PRODUCT_DISCOUNT_CLIENT, "client_id"),
    ],
)
def test_child_allowlists_exclude_parent_key(kind: EntityKind, parent_key: str) -> None:
    assert parent_key not in EDITABLE_FIELDS[kind]
