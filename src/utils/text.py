"""Small text normalisation helpers shared across components."""

from __future__ import annotations

import re
from collections.abc import Iterable

_NON_WORD = re.compile(r"[^0-9a-z]+")


def to_snake_case(value: str | None) -> str:
    """Lowercase snake_case form of a tag ("Machine Learning" -> "machine_learning")."""
    if not value:
        return ""
    return _NON_WORD.sub("_", str(value).strip().lower()).strip("_")


def normalize_tags(values: Iterable[object] | None) -> list[str]:
    """snake_case every value, dropping blanks and duplicates (first one wins)."""
    tags: list[str] = []
    for value in values or []:
        if value is None:
            continue
        tag = to_snake_case(str(value))
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def truncate_text(value: str, limit: int) -> str:
    """Trim ``value`` to ``limit`` characters, ending with an ellipsis if cut."""
    value = value.strip()
    if len(value) <= limit:
        return value
    return value[: max(0, limit - 1)].rstrip() + "…"
