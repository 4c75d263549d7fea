"""Canonicalisation of decimal-like fields before comparison.

Storage drivers may hand back fixed-point columns as strings (``"19.9900"``) while
clients submit numbers or strings with different scale. Both sides of a comparison
are projected through :func:`normalize_decimals` so that only real value changes
survive diffing.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection


def to_canonical_decimal(value: object) -> object:
    """Coerce a single decimal-like value; anything unrecognised is returned as-is."""

    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, Decimal):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        parsed = Decimal(repr(value))
        return parsed if parsed.is_finite() else value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            parsed = Decimal(stripped)
        except InvalidOperation:
            return value
        return parsed if parsed.is_finite() else value
    return value


def _normalize_value(value: object, decimal_fields: Collection[str]) -> object:
    if isinstance(value, Mapping):
        return normalize_decimals(value, decimal_fields)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(value, list | tuple):
        return [_normalize_value(item, decimal_fields) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def normalize_decimals(
    data: Mapping[str, object],
    decimal_fields: Collection[str],
) -> dict[str, object]:
    """Return a copy of ``data`` with every decimal field in canonical form.

    Recurses through nested mappings and lists; keys named in ``decimal_fields``
    are coerced at any depth. The input is never mutated and the projection is
    idempotent.
    """

    normalized: dict[str, object] = {}
    for key, value in data.items():
        if key in decimal_fields and not isinstance(value, Mapping | list | tuple):
            normalized[key] = to_canonical_decimal(value)
        else:
            normalized[key] = _normalize_value(value, decimal_fields)
    return normalized
