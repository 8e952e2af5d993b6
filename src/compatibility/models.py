"""Data models for the Compatibility Scorer."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from src.signals.models import MatchSignals

MIN_SCORE = 30
MAX_SCORE = 100


@dataclass
class CompatibilityScore:
    """Bounded, explainable fit estimate between two members."""

    score: int
    reasons: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(
                f"score must be between {MIN_SCORE} and {MAX_SCORE}, got {self.score}"
            )

    def to_dict(self) -> dict:
        return {"score": self.score, "reasons": list(self.reasons)}


def _as_tags(values: Any) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, Iterable):
        return []
    return [str(v) for v in values if v is not None and str(v).strip()]


def _as_title(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ScoringSubject:
    """The title and tags one side of a comparison exposes."""

    title: str | None = None
    tags: list[str] = field(default_factory=list)

    @classmethod
    def coerce(cls, value: Any) -> ScoringSubject:
        """Adapt a subject, a mapping or any object with ``title``/``tags``."""
        if isinstance(value, ScoringSubject):
            return value
        if isinstance(value, MatchSignals):
            return cls.from_signals(value)
        if isinstance(value, Mapping):
            return cls(title=_as_title(value.get("title")), tags=_as_tags(value.get("tags")))
        return cls(
            title=_as_title(getattr(value, "title", None)),
            tags=_as_tags(getattr(value, "tags", None)),
        )

    @classmethod
    def from_signals(cls, signals: MatchSignals, title: str | None = None) -> ScoringSubject:
        """Use every tag family of stored signals as the tag list."""
        return cls(title=_as_title(title), tags=signals.all_tags())


@dataclass
class AnonymizedPreview:
    """Pre-reveal preview of a member."""

    handle: str
    location: str

    def to_dict(self) -> dict:
        return {"handle": self.handle, "location": self.location}
