"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session  # noqa: TC002

from erpcore.adapters.sqlalchemy.repositories import (
    SqlAlchemyProductDiscountRangeRepository,
    SqlAlchemyProductProcessRepository,
    SqlAlchemyProductRepository,
)
from erpcore.domain.errors import ConflictError, InternalError
from tests.helpers.catalog import seed_catalog


def test_create_assigns_identity_and_timestamps(sqlite_session: Session) -> None:
    repository = SqlAlchemyProductRepository(sqlite_session)

    product = repository.create({"name": "Muffin", "sale_price": Decimal("12.5")})

    assert product.id is not None
    assert product.created_at is not None
    assert product.updated_at == product.created_at


def test_find_by_unique(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    repository = SqlAlchemyProductRepository(sqlite_session)

    assert repository.find_by_unique("sku", "CK-1") is catalog.cookie
    assert repository.find_by_unique("sku", "missing") is None


def test_unique_violation_becomes_conflict(sqlite_session: Session) -> None:
    seed_catalog(sqlite_session)
    repository = SqlAlchemyProductRepository(sqlite_session)

    with pytest.raises(ConflictError):
        repository.create({"name": "Cookie"})


def test_update_touches_only_given_columns(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    repository = SqlAlchemyProductRepository(sqlite_session)
    assert catalog.cookie.id is not None

    updated = repository.update(catalog.cookie.id, {"sale_price": Decimal("21")})

    assert updated is catalog.cookie
    assert updated.sale_price == Decimal(21)
    assert updated.sku == "CK-1"
    assert updated.updated_at is not None


def test_written_rows_show_what_storage_kept(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    repository = SqlAlchemyProductRepository(sqlite_session)
    assert catalog.cookie.id is not None

    created = repository.create({"name": "Muffin", "production_cost": Decimal("3.00004")})
    updated = repository.update(catalog.cookie.id, {"sale_price": Decimal("19.12346")})

    assert created.production_cost == Decimal("3.0000")
    assert updated is not None
    assert updated.sale_price == Decimal("19.1235")


def test_update_missing_row_returns_none(sqlite_session: Session) -> None:
    repository = SqlAlchemyProductRepository(sqlite_session)

    assert repository.update(404, {"name": "x"}) is None
    assert repository.delete(404) is False


def test_update_unknown_column_is_internal_error(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    repository = SqlAlchemyProductRepository(sqlite_session)
    assert catalog.cookie.id is not None

    with pytest.raises(InternalError):
        repository.update(catalog.cookie.id, {"colour": "brown"})


def test_children_are_listed_in_their_natural_order(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    assert catalog.cookie.id is not None
    steps = SqlAlchemyProductProcessRepository(sqlite_session)
    ranges = SqlAlchemyProductDiscountRangeRepository(sqlite_session)

    assert [step.sort_order for step in steps.find_all_by_parent(catalog.cookie.id)] == [1, 2]
    assert [item.min_qty for item in ranges.find_all_by_parent(catalog.cookie.id)] == [1, 10]
    assert steps.find_all_by_parent(404) == []


def test_duplicate_sort_order_violates_the_unique_key(sqlite_session: Session) -> None:
    catalog = seed_catalog(sqlite_session)
    assert catalog.cookie.id is not None
    steps = SqlAlchemyProductProcessRepository(sqlite_session)

    with pytest.raises(ConflictError):
        steps.create(
            {"product_id": catalog.cookie.id, "process_id": catalog.packing.id, "sort_order": 2}
        )
