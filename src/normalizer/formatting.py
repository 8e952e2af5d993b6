"""Post-resolution format limits for free-text profile fields."""

from __future__ import annotations

from src.resolver.models import DataPoint
from src.utils.outcome import Degradation, FailureKind
from src.utils.text import truncate_text

HEADLINE_MAX_CHARS = 80
BIO_MAX_CHARS = 280

FIELD_LIMITS: dict[str, int] = {
    "headline": HEADLINE_MAX_CHARS,
    "bio": BIO_MAX_CHARS,
}


def enforce_limit(field: str, point: DataPoint) -> tuple[DataPoint, Degradation | None]:
    """Truncate an over-long value to its field limit.

    Over-long values are never rejected; the cut is recorded as a
    VALIDATION degradation instead.
    """
    limit = FIELD_LIMITS.get(field)
    if limit is None or point.value is None or len(point.value) <= limit:
        return point, None

    truncated = point.model_copy(update={"value": truncate_text(point.value, limit)})
    return truncated, Degradation(
        kind=FailureKind.VALIDATION,
        field=field,
        detail=f"truncated from {len(point.value)} to {limit} characters",
    )
