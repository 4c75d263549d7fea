"""Domain ports (protocols) for adapters to implement."""

from __future__ import annotations

from .persistence import ChildRepository, EntityRepository
from .unit_of_work import (
    ClientRepositories,
    ClientUnitOfWork,
    ProductRepositories,
    ProductUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ChildRepository",
    "ClientRepositories",
    "ClientUnitOfWork",
    "EntityRepository",
    "ProductRepositories",
    "ProductUnitOfWork",
    "RepositoryCollection",
    "UnitOfWork",
]
