"""Data models for the Profile Normalizer."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.resolver.models import DataPoint
from src.utils.text import normalize_tags


class CurrentRole(BaseModel):
    """Current job title and employer."""

    title: DataPoint = Field(default_factory=DataPoint)
    company: DataPoint = Field(default_factory=DataPoint)


class ProfileLinks(BaseModel):
    """Direct, non-conflicting profile links."""

    website: str | None = None
    github: str | None = None
    x: str | None = None
    linkedin: str | None = None
    company: str | None = None


class CanonicalProfile(BaseModel):
    """The single fused, confidence-scored profile of a member."""

    name: DataPoint = Field(default_factory=DataPoint)
    email: DataPoint = Field(default_factory=DataPoint)
    avatar_url: DataPoint = Field(default_factory=DataPoint)
    headline: DataPoint = Field(default_factory=DataPoint)
    current_role: CurrentRole = Field(default_factory=CurrentRole)
    geo: DataPoint = Field(default_factory=DataPoint)
    bio: DataPoint = Field(default_factory=DataPoint)
    links: ProfileLinks = Field(default_factory=ProfileLinks)
    industries: list[str] = Field(
        default_factory=list, description="Normalized industry tags"
    )
    skills_keywords: list[str] = Field(
        default_factory=list, description="Normalized skill tags"
    )
    interests_topics: list[str] = Field(
        default_factory=list, description="Normalized interest tags"
    )

    @field_validator("industries", "skills_keywords", "interests_topics", mode="before")
    @classmethod
    def normalize_tag_sets(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            v = [v]
        return normalize_tags(v)

    def data_points(self) -> dict[str, DataPoint]:
        """Resolvable fields keyed by their dotted field name."""
        return {
            "name": self.name,
            "email": self.email,
            "avatar_url": self.avatar_url,
            "headline": self.headline,
            "current_role.title": self.current_role.title,
            "current_role.company": self.current_role.company,
            "geo": self.geo,
            "bio": self.bio,
        }

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> CanonicalProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class ConnectionTarget(BaseModel):
    """A suggested member to meet."""

    member_id: str | None = None
    reason: str = ""
    overlap_tags: list[str] = Field(default_factory=list)


class SponsorTarget(BaseModel):
    """A suggested event sponsor."""

    sponsor_id: str | None = None
    reason: str = ""
    overlap_tags: list[str] = Field(default_factory=list)


class Recommendations(BaseModel):
    """Rule-based recommendations derived from the canonical profile."""

    goal_suggestions: list[str] = Field(default_factory=list)
    mission_pack: list[str] = Field(default_factory=list)
    connection_targets: list[ConnectionTarget] = Field(default_factory=list)
    sponsor_targets: list[SponsorTarget] = Field(default_factory=list)


class NormalizedProfile(BaseModel):
    """Normalizer output: canonical profile plus recommendations."""

    person: CanonicalProfile = Field(default_factory=CanonicalProfile)
    recommendations: Recommendations = Field(default_factory=Recommendations)

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")


class EventContext(BaseModel):
    """Event the member is being profiled for."""

    event_id: str = "default_event"
    event_topics: list[str] = Field(
        default_factory=lambda: ["networking", "business"]
    )


class Gravatar(BaseModel):
    """Result of an avatar lookup by email hash."""

    avatar_url: str | None = None
    name: str | None = None


class SearchSnippet(BaseModel):
    """A public search hit mentioning the member."""

    url: str
    title: str | None = None
    snippet: str | None = None


class NormalizerInput(BaseModel):
    """Deterministic side inputs for building a canonical profile."""

    email: str = Field(..., description="User-supplied email (authoritative)")
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    email_domain: str | None = Field(default=None)
    company_guess: str | None = Field(default=None)
    company_site: str | None = Field(default=None)
    opengraph: dict[str, Any] = Field(
        default_factory=dict,
        description="OpenGraph tags scraped from the company site",
    )
    gravatar: Gravatar | None = Field(default=None)
    search_snippets: list[SearchSnippet] = Field(default_factory=list)
    vendor_enrichment: dict[str, Any] = Field(
        default_factory=dict,
        description="Vendor enrichment payload (Clearbit / PDL / FullContact style)",
    )
    event_context: EventContext = Field(default_factory=EventContext)

    @field_validator("opengraph", "vendor_enrichment", mode="before")
    @classmethod
    def default_mapping(cls, v: Any) -> dict[str, Any]:
        return v or {}

    @classmethod
    def from_dict(cls, data: dict) -> NormalizerInput:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class MemberIndexEntry(BaseModel):
    """Mini-profile of another member, used for connection targets."""

    member_id: str
    title: str | None = None
    company: str | None = None
    industries: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)

    @field_validator("industries", "skills", "interests", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> list[str]:
        return normalize_tags(v)


class SponsorIndexEntry(BaseModel):
    """Sponsor catalogue entry, used for sponsor targets."""

    sponsor_id: str
    name: str = ""
    category_tags: list[str] = Field(default_factory=list)
    short_value_prop: str = ""
    target_audience: list[str] = Field(default_factory=list)

    @field_validator("category_tags", "target_audience", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> list[str]:
        return normalize_tags(v)
