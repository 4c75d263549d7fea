"""Validation of quantity range sets such as volume discounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from erpcore.domain.errors import RangeConflictReason


def check_range_conflicts(ranges: Iterable[tuple[int, int]]) -> RangeConflictReason | None:
    """Return why a set of inclusive ``(min, max)`` ranges is invalid, or ``None``.

    Fewer than two ranges never conflict; the bounds of a lone range are checked where
    the payload is parsed. Otherwise a range with ``min > max`` is ``invalid_range``.
    After sorting by lower bound, two identical ranges are a ``duplicate`` and a range
    starting at or before the end of its predecessor is an ``overlap``.
    """

    items = list(ranges)
    if len(items) < 2:
        return None
    if any(low > high for low, high in items):
        return "invalid_range"
    ordered = sorted(items)
    for previous, current in zip(ordered, ordered[1:], strict=False):
        if previous == current:
            return "duplicate"
        if current[0] <= previous[1]:
            return "overlap"
    return None
