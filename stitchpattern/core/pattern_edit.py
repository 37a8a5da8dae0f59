from __future__ import annotations

from typing import Any, Mapping

from ..models.pattern import Pattern

_TOP_LEVEL_FIELDS = ("title", "clothCount")


def apply_meta_updates(pattern: Pattern, updates: Mapping[str, Any]) -> Pattern:
    """
    Return a copy of ``pattern`` with title, cloth count or free-form meta updated.
    Cells and usedColors are shared with the original and left untouched.
    """
    changes: dict[str, Any] = {}
    meta = dict(pattern.meta)
    for key, value in updates.items():
        if value is None:
            continue
        if key in _TOP_LEVEL_FIELDS:
            changes[key] = value
        else:
            meta[key] = value

    if "clothCount" in changes and int(changes["clothCount"]) <= 0:
        raise ValueError("clothCount must be positive")

    changes["meta"] = meta
    return pattern.model_copy(update=changes)
