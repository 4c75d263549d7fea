"""Repository implementations backed by SQLAlchemy sessions.

Every write flushes immediately so that statements reach the database in the
order the orchestrator issues them; the ORM's own flush ordering would otherwise
run deletes after inserts and break per-parent unique keys.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from erpcore.adapters.sqlalchemy.mappings import (
    TABLE_BY_CLASS,
    product_discount_client_table,
    product_discount_range_table,
    product_input_table,
    product_process_table,
)
from erpcore.domain.errors import ConflictError, InternalError
from erpcore.domain.model import (
    Client,
    Entity,
    Input,
    Process,
    Product,
    ProductDiscountClient,
    ProductDiscountRange,
    ProductInput,
    ProductProcess,
    Timestamped,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Column
    from sqlalchemy.orm import Session

log = logging.getLogger(__name__)


class SqlAlchemyRepository[TEntity: Entity]:
    entity_cls: type[TEntity]

    def __init__(self, session: Session) -> None:
        self.session = session
        self.table = TABLE_BY_CLASS[self.entity_cls]

    def find_by_id(self, entity_id: int) -> TEntity | None:
        return self.session.get(self.entity_cls, entity_id)

    def find_by_unique(self, field: str, value: object) -> TEntity | None:
        column = self.table.c[field]
        stmt = select(self.entity_cls).where(column == value).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()

    def create(self, data: Mapping[str, object]) -> TEntity:
        entity = self.entity_cls(**data)
        if isinstance(entity, Timestamped):
            entity.touch(created=True)
        self.session.add(entity)
        self._flush(f"create {entity.entity_kind}", refresh=entity)
        return entity

    def update(self, entity_id: int, data: Mapping[str, object]) -> TEntity | None:
        entity = self.find_by_id(entity_id)
        if entity is None:
            return None
        for key, value in data.items():
            if key not in self.table.c:
                raise InternalError(f"{self.entity_cls.__name__} has no column {key!r}")
            setattr(entity, key, value)
        if isinstance(entity, Timestamped):
            entity.touch()
        self._flush(f"update {entity.entity_kind} {entity_id}", refresh=entity)
        return entity

    def delete(self, entity_id: int) -> bool:
        entity = self.find_by_id(entity_id)
        if entity is None:
            return False
        self.session.delete(entity)
        self._flush(f"delete {entity.entity_kind} {entity_id}")
        return True

    def _flush(self, action: str, *, refresh: TEntity | None = None) -> None:
        """Flush pending writes; ``refresh`` is reloaded so it shows what storage kept."""
        try:
            self.session.flush()
            if refresh is not None:
                self.session.refresh(refresh)
        except IntegrityError as exc:
            log.debug("Integrity violation during %s: %s", action, exc.orig)
            raise ConflictError(f"Storage constraint violated during {action}") from exc
        except SQLAlchemyError as exc:
            raise InternalError(f"Storage failure during {action}") from exc


class SqlAlchemyChildRepository[TEntity: Entity](SqlAlchemyRepository[TEntity]):
    parent_column: Column[int]
    order_column: Column[int] | None = None

    def find_all_by_parent(self, parent_id: int) -> Sequence[TEntity]:
        order_by = [self.table.c.id]
        if self.order_column is not None:
            order_by.insert(0, self.order_column)
        stmt = select(self.entity_cls).where(self.parent_column == parent_id).order_by(*order_by)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyInputRepository(SqlAlchemyRepository[Input]):
    entity_cls = Input


class SqlAlchemyProcessRepository(SqlAlchemyRepository[Process]):
    entity_cls = Process


class SqlAlchemyProductRepository(SqlAlchemyRepository[Product]):
    entity_cls = Product


class SqlAlchemyClientRepository(SqlAlchemyRepository[Client]):
    entity_cls = Client


class SqlAlchemyProductInputRepository(SqlAlchemyChildRepository[ProductInput]):
    entity_cls = ProductInput
    parent_column = product_input_table.c.product_id


class SqlAlchemyProductProcessRepository(SqlAlchemyChildRepository[ProductProcess]):
    entity_cls = ProductProcess
    parent_column = product_process_table.c.product_id
    order_column = product_process_table.c.sort_order


class SqlAlchemyProductDiscountRangeRepository(SqlAlchemyChildRepository[ProductDiscountRange]):
    entity_cls = ProductDiscountRange
    parent_column = product_discount_range_table.c.product_id
    order_column = product_discount_range_table.c.min_qty


class SqlAlchemyProductDiscountClientRepository(SqlAlchemyChildRepository[ProductDiscountClient]):
    entity_cls = ProductDiscountClient
    parent_column = product_discount_client_table.c.client_id
