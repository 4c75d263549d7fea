"""Field level change detection between a stored and a desired snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

IDENTITY_FIELD: Final[str] = "id"

type DiffResult = dict[str, object]


def diff_fields(existing: Mapping[str, object], desired: Mapping[str, object]) -> DiffResult:
    """Return the fields of ``desired`` whose value differs from ``existing``.

    Only keys of ``desired`` are considered; a key missing from ``existing`` always
    counts as a change. Identity is never part of a diff. Both sides are expected
    to be normalised already.
    """

    changes: DiffResult = {}
    for key, value in desired.items():
        if key == IDENTITY_FIELD:
            continue
        if key not in existing or existing[key] != value:
            changes[key] = value
    return changes
