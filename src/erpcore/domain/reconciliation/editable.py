"""Allowlist projection of client payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping


def pick_editable(payload: Mapping[str, object], allowed: Collection[str]) -> dict[str, object]:
    """Return only the allowlisted keys that are present in ``payload``.

    Keys outside the allowlist are dropped silently; absent keys are not
    materialised, so a missing field never reads as "set to null".
    """

    return {key: value for key, value in payload.items() if key in allowed}
