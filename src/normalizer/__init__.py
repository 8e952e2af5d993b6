"""Profile normalization.

Public API:
    - ProfileNormalizer: Build a canonical profile plus recommendations
    - NormalizerInput: Deterministic side inputs for one member
    - CanonicalProfile / NormalizedProfile: Output data models
    - collect_candidates: Per-field candidate collection
    - build_recommendations: Rule-based goals, missions and targets
"""

from src.normalizer.candidates import collect_candidates, collect_links, collect_tags
from src.normalizer.models import (
    CanonicalProfile,
    ConnectionTarget,
    CurrentRole,
    EventContext,
    Gravatar,
    MemberIndexEntry,
    NormalizedProfile,
    NormalizerInput,
    ProfileLinks,
    Recommendations,
    SearchSnippet,
    SponsorIndexEntry,
    SponsorTarget,
)
from src.normalizer.recommendations import build_recommendations
from src.normalizer.service import ProfileNormalizer

__all__ = [
    "ProfileNormalizer",
    "NormalizerInput",
    "CanonicalProfile",
    "NormalizedProfile",
    "CurrentRole",
    "ProfileLinks",
    "Recommendations",
    "ConnectionTarget",
    "SponsorTarget",
    "EventContext",
    "Gravatar",
    "SearchSnippet",
    "MemberIndexEntry",
    "SponsorIndexEntry",
    "collect_candidates",
    "collect_links",
    "collect_tags",
    "build_recommendations",
]
