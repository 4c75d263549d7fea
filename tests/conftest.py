from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from erpcore.adapters.sqlalchemy import start_mappers
from erpcore.adapters.sqlalchemy.migrations import upgrade_head
from erpcore.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyClientUnitOfWork,
    SqlAlchemyProductUnitOfWork,
    enable_sqlite_foreign_keys,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    enable_sqlite_foreign_keys(engine)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def adapter_started(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def product_unit_of_work(
    adapter_started: Engine,
) -> Callable[[], SqlAlchemyProductUnitOfWork]:
    _ = adapter_started
    return SqlAlchemyProductUnitOfWork


@pytest.fixture
def client_unit_of_work(
    adapter_started: Engine,
) -> Callable[[], SqlAlchemyClientUnitOfWork]:
    _ = adapter_started
    return SqlAlchemyClientUnitOfWork
