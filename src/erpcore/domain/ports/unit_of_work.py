"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from erpcore.domain.model import (
        Client,
        Input,
        Process,
        Product,
        ProductDiscountClient,
        ProductDiscountRange,
        ProductInput,
        ProductProcess,
    )
    from erpcore.domain.ports.persistence import ChildRepository, EntityRepository


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary owning exactly one transaction."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class ProductRepositories(RepositoryCollection):
    """Repositories required to reconcile the product aggregate."""

    products: EntityRepository[Product]
    inputs: EntityRepository[Input]
    processes: EntityRepository[Process]
    product_inputs: ChildRepository[ProductInput]
    product_processes: ChildRepository[ProductProcess]
    product_discount_ranges: ChildRepository[ProductDiscountRange]


@dataclass(slots=True)
class ClientRepositories(RepositoryCollection):
    """Repositories required to reconcile the client aggregate."""

    clients: EntityRepository[Client]
    products: EntityRepository[Product]
    product_discounts: ChildRepository[ProductDiscountClient]


type ProductUnitOfWork = UnitOfWork[ProductRepositories]
type ClientUnitOfWork = UnitOfWork[ClientRepositories]
