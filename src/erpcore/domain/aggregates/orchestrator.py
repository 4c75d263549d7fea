"""Transactional create/update/delete of an aggregate root and its child collections.

An orchestrator owns exactly one unit of work per invocation. Repositories borrow
its transaction; nothing is committed unless every step succeeds, and any failure
rolls the whole invocation back.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from erpcore.domain.aggregates.dto import Aggregate
from erpcore.domain.errors import ConflictError, DomainError, InternalError, NotFoundError
from erpcore.domain.model import (
    Entity,
    decimal_fields,
    editable_fields,
    snapshot,
    unique_fields,
)
from erpcore.domain.ports.unit_of_work import RepositoryCollection
from erpcore.domain.reconciliation import (
    ApplyResult,
    ReconciliationIntent,
    apply_plan,
    diff_fields,
    normalize_decimals,
    pick_editable,
    reconcile,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from erpcore.domain.aggregates.dto import AggregateCreate, AggregateUpdate
    from erpcore.domain.model import EntityKind
    from erpcore.domain.ports.persistence import ChildRepository, EntityRepository
    from erpcore.domain.ports.unit_of_work import UnitOfWork
    from erpcore.domain.reconciliation import CollectionSpec, ReconciliationPlan

log = logging.getLogger(__name__)


class AggregateOrchestrator[TRoot: Entity, TRepositories: RepositoryCollection](ABC):
    """Generic aggregate use cases parameterised by root kind and collections."""

    root_kind: ClassVar[EntityKind]
    collections: ClassVar[tuple[CollectionSpec, ...]]

    def __init__(self, unit_of_work_factory: Callable[[], UnitOfWork[TRepositories]]) -> None:
        self._unit_of_work_factory = unit_of_work_factory

    # Adapter seams ---------------------------------------------------------------

    @abstractmethod
    def _root_repository(self, repositories: TRepositories) -> EntityRepository[TRoot]: ...

    @abstractmethod
    def _child_repository(
        self, repositories: TRepositories, spec: CollectionSpec
    ) -> ChildRepository[Any]: ...

    def _inline_repository(
        self, repositories: TRepositories, spec: CollectionSpec
    ) -> EntityRepository[Any] | None:
        _ = repositories, spec
        return None

    def _reference_repositories(
        self, repositories: TRepositories, spec: CollectionSpec
    ) -> Mapping[str, EntityRepository[Any]]:
        """Return repositories that must contain the ids written to each reference field."""
        _ = repositories, spec
        return {}

    # Use cases -------------------------------------------------------------------

    def create(self, payload: AggregateCreate) -> Aggregate[TRoot]:
        """Create a root with its initial children in one transaction."""

        self._check_collection_names(payload.collections)
        kind = self.root_kind
        with self._unit_of_work_factory() as uow:
            try:
                repositories = uow.repositories
                root_repository = self._root_repository(repositories)
                fields = normalize_decimals(
                    pick_editable(payload.fields, editable_fields(kind)), decimal_fields(kind)
                )
                self._check_unique_fields(root_repository, fields, current_id=None)
                root_id = _identity(root_repository.create(fields))

                results: dict[str, ApplyResult] = {}
                for spec in self.collections:
                    items = payload.collections.get(spec.name, ())
                    if not items:
                        continue
                    plan = reconcile(root_id, [], ReconciliationIntent(added=items), spec)
                    results[spec.name] = self._apply(repositories, spec, plan)

                aggregate = self._load(repositories, root_id)
                uow.commit()
            except DomainError:
                raise
            except Exception as exc:
                raise InternalError(f"Failed to create {kind}") from exc

        log.info("Created %s %s (%s)", kind, root_id, _describe(results))
        return aggregate

    def update(self, root_id: int, payload: AggregateUpdate) -> Aggregate[TRoot]:
        """Reconcile a root and its collections with the desired state in ``payload``.

        When neither the root fields nor any collection change, the loaded aggregate
        is returned and nothing is written.
        """

        self._check_collection_names(payload.collections)
        kind = self.root_kind
        with self._unit_of_work_factory() as uow:
            try:
                repositories = uow.repositories
                root_repository = self._root_repository(repositories)
                root = root_repository.find_by_id(root_id)
                if root is None:
                    raise NotFoundError(kind, root_id)
                existing = self._load_children(repositories, root_id)

                decimals = decimal_fields(kind)
                desired = normalize_decimals(
                    pick_editable(payload.fields, editable_fields(kind)), decimals
                )
                changes = diff_fields(normalize_decimals(snapshot(root), decimals), desired)

                plans: list[tuple[CollectionSpec, ReconciliationPlan]] = []
                for spec in self.collections:
                    intent = payload.collections.get(spec.name)
                    if intent is None or intent.is_empty:
                        continue
                    plan = reconcile(root_id, existing[spec.name], intent, spec)
                    if not plan.is_empty:
                        plans.append((spec, plan))

                if not changes and not plans:
                    log.info("No changes for %s %s", kind, root_id)
                    return Aggregate(root=root, collections=existing)

                self._check_unique_fields(root_repository, changes, current_id=root_id)
                if changes and root_repository.update(root_id, changes) is None:
                    raise InternalError(f"Failed to update {kind} {root_id}")
                results = {spec.name: self._apply(repositories, spec, plan) for spec, plan in plans}

                aggregate = self._load(repositories, root_id)
                uow.commit()
            except DomainError:
                raise
            except Exception as exc:
                raise InternalError(f"Failed to update {kind} {root_id}") from exc

        log.info(
            "Updated %s %s: fields=%s (%s)",
            kind,
            root_id,
            sorted(changes),
            _describe(results),
        )
        return aggregate

    def delete(self, root_id: int) -> None:
        """Delete a root after every child of its declared collections."""

        kind = self.root_kind
        with self._unit_of_work_factory() as uow:
            try:
                repositories = uow.repositories
                root_repository = self._root_repository(repositories)
                if root_repository.find_by_id(root_id) is None:
                    raise NotFoundError(kind, root_id)
                for spec in reversed(self.collections):
                    repository = self._child_repository(repositories, spec)
                    for item in repository.find_all_by_parent(root_id):
                        if not repository.delete(_identity(item)):
                            raise InternalError(f"Failed to delete {spec.kind} {item.id}")
                if not root_repository.delete(root_id):
                    raise InternalError(f"Failed to delete {kind} {root_id}")
                uow.commit()
            except DomainError:
                raise
            except Exception as exc:
                raise InternalError(f"Failed to delete {kind} {root_id}") from exc

        log.info("Deleted %s %s", kind, root_id)

    # Helpers ---------------------------------------------------------------------

    def _check_collection_names(self, names: Iterable[str]) -> None:
        known = {spec.name for spec in self.collections}
        unknown = sorted(set(names) - known)
        if unknown:
            raise ValueError(f"Unknown {self.root_kind} collections: {', '.join(unknown)}")

    def _check_unique_fields(
        self,
        repository: EntityRepository[TRoot],
        values: Mapping[str, object],
        *,
        current_id: int | None,
    ) -> None:
        for field in unique_fields(self.root_kind):
            value = values.get(field)
            if value is None or value == "":
                continue
            other = repository.find_by_unique(field, value)
            if other is not None and other.id != current_id:
                raise ConflictError(
                    f"{self.root_kind} with {field} {value!r} already exists",
                    field=field,
                    value=value,
                )

    def _check_references(
        self,
        repositories: TRepositories,
        spec: CollectionSpec,
        plan: ReconciliationPlan,
    ) -> None:
        for field, repository in self._reference_repositories(repositories, spec).items():
            written = [operation.data.get(field) for operation in plan.to_create]
            written.extend(operation.changes.get(field) for operation in plan.to_update)
            for value in dict.fromkeys(written):
                if value is None:
                    continue
                if repository.find_by_id(value) is None:  # pyright: ignore[reportArgumentType]
                    raise NotFoundError(field.removesuffix("_id"), value)

    def _apply(
        self,
        repositories: TRepositories,
        spec: CollectionSpec,
        plan: ReconciliationPlan,
    ) -> ApplyResult:
        self._check_references(repositories, spec, plan)
        return apply_plan(
            plan,
            spec,
            self._child_repository(repositories, spec),
            inline_repository=self._inline_repository(repositories, spec),
        )

    def _load_children(self, repositories: TRepositories, root_id: int) -> dict[str, list[Entity]]:
        return {
            spec.name: list(self._child_repository(repositories, spec).find_all_by_parent(root_id))
            for spec in self.collections
        }

    def _load(self, repositories: TRepositories, root_id: int) -> Aggregate[TRoot]:
        root = self._root_repository(repositories).find_by_id(root_id)
        if root is None:
            raise InternalError(f"{self.root_kind} {root_id} vanished during reconciliation")
        return Aggregate(root=root, collections=self._load_children(repositories, root_id))


def _identity(entity: Entity) -> int:
    if entity.id is None:
        raise InternalError(f"{entity.entity_kind} has no identity after write")
    return entity.id


def _describe(results: Mapping[str, ApplyResult]) -> str:
    if not results:
        return "no collection changes"
    return ", ".join(
        f"{name}: -{result.deleted} ~{result.updated} +{result.created}"
        for name, result in results.items()
    )
