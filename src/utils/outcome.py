"""Explicit result type threaded through the pipeline stages.

Each stage returns an :class:`Outcome` instead of relying on exception
interception, so callers can tell a fully resolved value from a
best-effort one. Only persistence errors are raised (see ``StoreFailure``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class OutcomeStatus(str, Enum):
    """How trustworthy a stage's output is."""

    RESOLVED = "resolved"
    DEGRADED = "degraded"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Failure classes recorded against a stage's output."""

    COLLECTION = "collection"
    RESOLUTION = "resolution"
    VALIDATION = "validation"
    BUILD = "build"
    STORE = "store"


@dataclass(frozen=True)
class Degradation:
    """One recovered failure affecting a single field (or the whole build)."""

    kind: FailureKind
    field: str | None = None
    detail: str = ""

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "field": self.field, "detail": self.detail}


@dataclass
class Outcome(Generic[T]):
    """A stage result carrying its value, status and recovered failures."""

    value: T
    status: OutcomeStatus = OutcomeStatus.RESOLVED
    degradations: list[Degradation] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.status == OutcomeStatus.RESOLVED and self.degradations:
            self.status = OutcomeStatus.DEGRADED

    @property
    def ok(self) -> bool:
        """True when the value was produced without any degradation."""
        return self.status == OutcomeStatus.RESOLVED

    @classmethod
    def resolved(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def degraded(cls, value: T, degradations: list[Degradation]) -> Outcome[T]:
        status = OutcomeStatus.DEGRADED if degradations else OutcomeStatus.RESOLVED
        return cls(value=value, status=status, degradations=list(degradations))

    @classmethod
    def failed(cls, value: T, degradation: Degradation) -> Outcome[T]:
        return cls(value=value, status=OutcomeStatus.FAILED, degradations=[degradation])


class StoreFailure(Exception):
    """Raised when match signals cannot be persisted.

    This is the one failure class that propagates to callers; losing
    signals silently would break downstream matching.
    """

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
