"""Reconciliation engine: normalisation, diffing, collection planning and execution."""

from __future__ import annotations

from .diff import DiffResult, diff_fields
from .editable import pick_editable
from .execute import apply_plan
from .normalize import normalize_decimals, to_canonical_decimal
from .plan import (
    ApplyResult,
    ByInlineDefinition,
    ByReference,
    CollectionSpec,
    CreateOperation,
    ItemUpdate,
    NewItem,
    ReconciliationIntent,
    ReconciliationPlan,
    ReferenceTarget,
    UpdateOperation,
)
from .ranges import check_range_conflicts
from .reconciler import reconcile

__all__ = [
    "ApplyResult",
    "ByInlineDefinition",
    "ByReference",
    "CollectionSpec",
    "CreateOperation",
    "DiffResult",
    "ItemUpdate",
    "NewItem",
    "ReconciliationIntent",
    "ReconciliationPlan",
    "ReferenceTarget",
    "UpdateOperation",
    "apply_plan",
    "check_range_conflicts",
    "diff_fields",
    "normalize_decimals",
    "pick_editable",
    "reconcile",
    "to_canonical_decimal",
]
