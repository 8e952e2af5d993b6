"""Data models for the Field Resolver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from src.utils.outcome import Degradation, OutcomeStatus

MAX_SOURCE_URLS = 3

# Fields whose values identify the member; resolution may never invent them.
IDENTITY_FIELDS = frozenset(
    {
        "name",
        "email",
        "links",
        "links.website",
        "links.github",
        "links.x",
        "links.linkedin",
        "links.company",
    }
)

# Fields the reasoning service may summarise instead of picking verbatim.
FREE_TEXT_FIELDS = frozenset({"bio", "headline"})


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class SourceType(str, Enum):
    """Kind of source a candidate value was collected from."""

    USER_PROVIDED = "user_provided"
    FIRST_PARTY = "first_party"
    VENDOR = "vendor"
    PRESS = "press"
    SOCIAL = "social"
    PRIOR_PROFILE = "prior_profile"
    DIRECTORY = "directory"


class DataPoint(BaseModel):
    """A fused, confidence-scored fact."""

    value: str | None = Field(default=None, description="Canonical value")
    confidence: float = Field(default=0.0, description="Confidence in [0, 1]")
    source_urls: list[str] = Field(
        default_factory=list,
        description="Supporting sources, most decisive first (max 3)",
    )

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: object) -> float:
        if v is None:
            return 0.0
        return _clamp(v)  # type: ignore[arg-type]

    @field_validator("source_urls", mode="before")
    @classmethod
    def cap_source_urls(cls, v: object) -> list[str]:
        if not v:
            return []
        seen: list[str] = []
        for url in v:  # type: ignore[union-attr]
            url = str(url).strip()
            if url and url not in seen:
                seen.append(url)
        return seen[:MAX_SOURCE_URLS]

    @classmethod
    def empty(cls) -> DataPoint:
        return cls()

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")


class CandidateValue(BaseModel):
    """One collector's unconfirmed value for a field."""

    value: str | None = Field(default=None, description="Candidate value")
    confidence: float = Field(default=0.5, description="Collector confidence")
    source_url: str = Field(default="", description="Where the value was found")
    source_type: SourceType = Field(
        default=SourceType.DIRECTORY, description="Kind of source"
    )

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: object) -> str | None:
        if v is None:
            return None
        return str(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v: object) -> float:
        if v is None:
            return 0.0
        return _clamp(v)  # type: ignore[arg-type]

    @field_validator("source_url", mode="before")
    @classmethod
    def default_source_url(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("source_type", mode="before")
    @classmethod
    def coerce_source_type(cls, v: object) -> SourceType:
        if isinstance(v, SourceType):
            return v
        try:
            return SourceType(str(v).strip().lower())
        except ValueError:
            return SourceType.DIRECTORY


class ReasoningDecision(BaseModel):
    """Output schema the reasoning service must satisfy."""

    value: str | None = Field(..., description="The single chosen value")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence in [0, 1]")
    source_urls: list[str] = Field(
        default_factory=list,
        max_length=MAX_SOURCE_URLS,
        description="Up to 3 supporting source URLs",
    )
    explanation: str = Field(default="", description="Short resolution rationale")


class ResolutionMethod(str, Enum):
    """How a field's value was decided."""

    EMPTY = "empty"
    PASSTHROUGH = "passthrough"
    PREFERENCE = "preference"
    REASONING = "reasoning"
    FALLBACK = "fallback"


@dataclass
class FieldResolution:
    """Result of resolving one field."""

    field: str
    data_point: DataPoint
    method: ResolutionMethod
    rationale: str = ""
    degradations: list[Degradation] = field(default_factory=list)

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.DEGRADED if self.degradations else OutcomeStatus.RESOLVED
