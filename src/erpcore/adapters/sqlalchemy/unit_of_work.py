"""SQLAlchemy-backed units of work for the product and client aggregates."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from erpcore.adapters.sqlalchemy.mappings import start_mappers
from erpcore.adapters.sqlalchemy.migrations import upgrade_head
from erpcore.adapters.sqlalchemy.repositories import (
    SqlAlchemyClientRepository,
    SqlAlchemyInputRepository,
    SqlAlchemyProcessRepository,
    SqlAlchemyProductDiscountClientRepository,
    SqlAlchemyProductDiscountRangeRepository,
    SqlAlchemyProductInputRepository,
    SqlAlchemyProductProcessRepository,
    SqlAlchemyProductRepository,
)
from erpcore.config import get_database_config
from erpcore.domain.ports.unit_of_work import (
    ClientRepositories,
    ProductRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before startup() or configured twice without force."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError("erpcore storage is not started; call startup() first")
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for new SQLite connections of ``engine``."""

    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _enable_sqlite_foreign_keys):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)


def build_engine(database_uri: str | None = None) -> Engine:
    """Create an engine from an explicit URI or the environment configuration."""

    config = get_database_config()
    options: dict[str, Any] = {"future": True, "echo": config.echo}
    if config.isolation_level is not None:
        options["isolation_level"] = config.isolation_level
    engine = create_engine(database_uri or config.uri, **options)
    enable_sqlite_foreign_keys(engine)
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, schema, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError("erpcore storage already started; pass force=True to replace the engine")

    resolved_engine = engine or build_engine(database_uri)
    enable_sqlite_foreign_keys(resolved_engine)
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine
    log.debug("SQLAlchemy adapter started on %s", resolved_engine.url)


def configured_engine() -> Engine | None:
    """Engine bound by the last startup(), or None."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the engine bound by startup() and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session and one transaction, shared by every repository it builds."""

    def __init__(self) -> None:
        self._factory = _STATE.session_factory
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("unit of work is already open")
        self._session = self._factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            log.debug("Rolling back unit of work after %s", exc_type.__name__)
            self.rollback()
        self.session.close()
        self._session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("unit of work is not open")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("unit of work is not open")
        return self._session


class SqlAlchemyProductUnitOfWork(BaseSqlAlchemyUnitOfWork[ProductRepositories]):
    """Unit of work for product aggregate use cases."""

    def _build_repositories(self, session: Session) -> ProductRepositories:
        return ProductRepositories(
            products=SqlAlchemyProductRepository(session),
            inputs=SqlAlchemyInputRepository(session),
            processes=SqlAlchemyProcessRepository(session),
            product_inputs=SqlAlchemyProductInputRepository(session),
            product_processes=SqlAlchemyProductProcessRepository(session),
            product_discount_ranges=SqlAlchemyProductDiscountRangeRepository(session),
        )


class SqlAlchemyClientUnitOfWork(BaseSqlAlchemyUnitOfWork[ClientRepositories]):
    """Unit of work for client aggregate use cases."""

    def _build_repositories(self, session: Session) -> ClientRepositories:
        return ClientRepositories(
            clients=SqlAlchemyClientRepository(session),
            products=SqlAlchemyProductRepository(session),
            product_discounts=SqlAlchemyProductDiscountClientRepository(session),
        )


if TYPE_CHECKING:
    from erpcore.domain.ports.unit_of_work import ClientUnitOfWork, ProductUnitOfWork

    _uow_product_check: ProductUnitOfWork = SqlAlchemyProductUnitOfWork()
    _uow_client_check: ClientUnitOfWork = SqlAlchemyClientUnitOfWork()
