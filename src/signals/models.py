"""Data models for match signals."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.normalizer.models import CanonicalProfile
from src.personas.models import OtherPersona, Persona, parse_persona

MATCH_SCORE_THRESHOLD = 70

# Platforms whose profile links count as verified trust signals.
VERIFIED_LINK_PLATFORMS: tuple[str, ...] = ("linkedin", "github", "website", "x")


class MemberProfile(BaseModel):
    """A member's canonical profile plus the inputs signal rules need."""

    user_id: str = Field(..., min_length=1)
    profile: CanonicalProfile = Field(default_factory=CanonicalProfile)
    persona: Persona = Field(default_factory=OtherPersona)
    goal_statement: str | None = Field(default=None, description="Primary networking intent")
    email_verified: bool = False
    phone_verified: bool = False
    completion_pct: float = Field(default=0.0, ge=0.0, le=100.0)
    opt_out_ids: list[str] = Field(default_factory=list)

    @field_validator("persona", mode="before")
    @classmethod
    def classify_persona_label(cls, v: Any) -> Any:
        return parse_persona(v)

    @property
    def display_name(self) -> str | None:
        return self.profile.name.value

    @property
    def location(self) -> str | None:
        return self.profile.geo.value

    @classmethod
    def from_dict(cls, data: dict) -> MemberProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class VerifiedLink(BaseModel):
    """A profile link with the time it was confirmed."""

    url: str
    verified_at: datetime


class TrustSignals(BaseModel):
    """Indicators of how trustworthy a member's profile is."""

    verified_email: bool = False
    verified_phone: bool = False
    profile_completion: float = 0.0
    connections_count: int = 0
    recommendations_count: int = 0
    event_attendance: int = 0
    response_rate: float = 0.0
    verified_links: dict[str, VerifiedLink] = Field(default_factory=dict)


class NumericFeatures(BaseModel):
    """Normalized numeric features; unknown values are omitted, never zeroed."""

    experience_years: float | None = None
    company_size: int | None = None
    funding_amount: float | None = Field(default=None, description="USD")
    investment_capacity: float | None = Field(default=None, description="USD")
    match_score_threshold: int = MATCH_SCORE_THRESHOLD

    def to_dict(self) -> dict:
        """Serialize, omitting features that could not be derived."""
        return self.model_dump(mode="json", exclude_none=True)


class MatchSignals(BaseModel):
    """Derived signals for one member, rebuilt wholesale on every regeneration."""

    user_id: str = Field(..., min_length=1)
    embedding_ready_text: str = ""
    primary_intent: str | None = None
    supply_tags: list[str] = Field(default_factory=list)
    demand_tags: list[str] = Field(default_factory=list)
    icp_tags: list[str] = Field(default_factory=list)
    geo_tags: list[str] = Field(default_factory=list)
    stage_tags: list[str] = Field(default_factory=list)
    trust_signals: TrustSignals = Field(default_factory=TrustSignals)
    numeric_features: NumericFeatures = Field(default_factory=NumericFeatures)
    recency_weight: datetime
    opt_out_ids: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def all_tags(self) -> list[str]:
        """Every tag family merged, first occurrence wins."""
        merged: list[str] = []
        for family in (
            self.supply_tags,
            self.demand_tags,
            self.icp_tags,
            self.geo_tags,
            self.stage_tags,
        ):
            for tag in family:
                if tag not in merged:
                    merged.append(tag)
        return merged

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        data = self.model_dump(mode="json")
        data["numeric_features"] = self.numeric_features.to_dict()
        return data
