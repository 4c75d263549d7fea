"""Application entry points wiring orchestrators to the SQLAlchemy adapter."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import Any

from erpcore.adapters.payloads import (
    parse_client_create,
    parse_client_update,
    parse_product_create,
    parse_product_update,
)
from erpcore.adapters.sqlalchemy.migrations import current_revision
from erpcore.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClientUnitOfWork,
    SqlAlchemyProductUnitOfWork,
    configured_engine,
    is_started,
    startup,
)
from erpcore.domain.aggregates import Aggregate, ClientOrchestrator, ProductOrchestrator
from erpcore.domain.model import Client, Product
from erpcore.domain.ports.unit_of_work import ClientUnitOfWork, ProductUnitOfWork

ProductUnitOfWorkFactory = Callable[[], ProductUnitOfWork]
ClientUnitOfWorkFactory = Callable[[], ClientUnitOfWork]


log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def _product_orchestrator(factory: ProductUnitOfWorkFactory | None) -> ProductOrchestrator:
    if factory is None:
        _ensure_started()
        factory = SqlAlchemyProductUnitOfWork
    return ProductOrchestrator(factory)


def _client_orchestrator(factory: ClientUnitOfWorkFactory | None) -> ClientOrchestrator:
    if factory is None:
        _ensure_started()
        factory = SqlAlchemyClientUnitOfWork
    return ClientOrchestrator(factory)


def create_product(
    payload: Any,
    *,
    unit_of_work_factory: ProductUnitOfWorkFactory | None = None,
) -> Aggregate[Product]:
    """Create a product with its inputs, process steps and discount ranges."""

    return _product_orchestrator(unit_of_work_factory).create(parse_product_create(payload))


def update_product(
    product_id: int,
    payload: Any,
    *,
    unit_of_work_factory: ProductUnitOfWorkFactory | None = None,
) -> Aggregate[Product]:
    """Reconcile a product aggregate with a client payload."""

    return _product_orchestrator(unit_of_work_factory).update(
        product_id, parse_product_update(payload)
    )


def delete_product(
    product_id: int,
    *,
    unit_of_work_factory: ProductUnitOfWorkFactory | None = None,
) -> None:
    _product_orchestrator(unit_of_work_factory).delete(product_id)


def create_client(
    payload: Any,
    *,
    unit_of_work_factory: ClientUnitOfWorkFactory | None = None,
) -> Aggregate[Client]:
    """Create a client with its per-product discounts."""

    return _client_orchestrator(unit_of_work_factory).create(parse_client_create(payload))


def update_client(
    client_id: int,
    payload: Any,
    *,
    unit_of_work_factory: ClientUnitOfWorkFactory | None = None,
) -> Aggregate[Client]:
    return _client_orchestrator(unit_of_work_factory).update(
        client_id, parse_client_update(payload)
    )


def delete_client(
    client_id: int,
    *,
    unit_of_work_factory: ClientUnitOfWorkFactory | None = None,
) -> None:
    _client_orchestrator(unit_of_work_factory).delete(client_id)


def initialise_database(database_uri: str | None = None) -> None:
    """Start the adapter, applying migrations to the configured database."""

    if is_started():
        log.info("Database already initialised")
        return
    startup(database_uri=database_uri)
    engine = configured_engine()
    if engine is not None:
        log.info("Database schema at revision %s", current_revision(engine))
