"""SQLAlchemy adapter package for erpcore."""

from __future__ import annotations

from .mappings import TABLE_BY_CLASS, mapper_registry, start_mappers
from .migrations import upgrade_head
from .repositories import (
    SqlAlchemyChildRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyInputRepository,
    SqlAlchemyProcessRepository,
    SqlAlchemyProductDiscountClientRepository,
    SqlAlchemyProductDiscountRangeRepository,
    SqlAlchemyProductInputRepository,
    SqlAlchemyProductProcessRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyRepository,
)
from .unit_of_work import (
    SqlAlchemyClientUnitOfWork,
    SqlAlchemyProductUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_CLASS",
    "SqlAlchemyChildRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyClientUnitOfWork",
    "SqlAlchemyInputRepository",
    "SqlAlchemyProcessRepository",
    "SqlAlchemyProductDiscountClientRepository",
    "SqlAlchemyProductDiscountRangeRepository",
    "SqlAlchemyProductInputRepository",
    "SqlAlchemyProductProcessRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyProductUnitOfWork",
    "SqlAlchemyRepository",
    "StartupError",
    "mapper_registry",
    "shutdown",
    "startup",
    "upgrade_head",
]
