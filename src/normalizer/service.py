"""Profile Normalizer service.

Builds one canonical, confidence-scored profile from the deterministic
side inputs collected for a member, resolving every field through the
Field Resolver, then derives rule-based recommendations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.normalizer.candidates import (
    RESOLVED_FIELDS,
    collect_candidates,
    collect_links,
    collect_tags,
)
from src.normalizer.formatting import enforce_limit
from src.normalizer.models import (
    CanonicalProfile,
    CurrentRole,
    MemberIndexEntry,
    NormalizedProfile,
    NormalizerInput,
    SponsorIndexEntry,
)
from src.normalizer.recommendations import build_recommendations
from src.resolver.models import DataPoint
from src.resolver.service import FieldResolver
from src.resolver.weights import normalize_value
from src.utils.outcome import Degradation, FailureKind, Outcome

logger = logging.getLogger(__name__)

USER_PROVIDED_SOURCE = "user_provided"
FALLBACK_SOURCE = "fallback"
ERROR_FALLBACK_SOURCE = "error_fallback"

# Confidence ceiling for values kept after a field-level failure.
DEGRADED_CONFIDENCE = 0.1

PLACEHOLDER_BIO = "Profile building encountered an error. Please try again or contact support."


class ProfileNormalizer:
    """Fuse side inputs and candidates into a NormalizedProfile."""

    def __init__(self, resolver: FieldResolver | None = None) -> None:
        self.resolver = resolver or FieldResolver()

    def normalize(
        self,
        payload: NormalizerInput | Mapping[str, Any],
        candidates: Mapping[str, Iterable[Any]] | None = None,
        prior: CanonicalProfile | None = None,
        member_index: Iterable[MemberIndexEntry] = (),
        sponsor_index: Iterable[SponsorIndexEntry] = (),
    ) -> Outcome[NormalizedProfile]:
        """Build a normalized profile.

        Always returns a profile. Field-level problems leave the outcome
        DEGRADED; an unexpected failure of the build itself returns a
        FAILED outcome wrapping a low-confidence placeholder profile.
        """
        try:
            if not isinstance(payload, NormalizerInput):
                payload = NormalizerInput.from_dict(dict(payload))
            return self._build(payload, candidates, prior, member_index, sponsor_index)
        except Exception as e:
            logger.exception("Profile build failed: %s", e)
            return Outcome.failed(
                self._placeholder(payload),
                Degradation(kind=FailureKind.BUILD, detail=f"{type(e).__name__}: {e}"),
            )

    def _build(
        self,
        payload: NormalizerInput,
        candidates: Mapping[str, Iterable[Any]] | None,
        prior: CanonicalProfile | None,
        member_index: Iterable[MemberIndexEntry],
        sponsor_index: Iterable[SponsorIndexEntry],
    ) -> Outcome[NormalizedProfile]:
        pool = collect_candidates(payload, prior=prior, extra=candidates)
        degradations: list[Degradation] = []
        points: dict[str, DataPoint] = {}

        for field in RESOLVED_FIELDS:
            field_candidates = pool.get(field) or []
            if not field_candidates:
                degradations.append(
                    Degradation(
                        kind=FailureKind.COLLECTION,
                        field=field,
                        detail="no candidates collected",
                    )
                )
            point, field_degradations = self._resolve_field(field, field_candidates)
            point, limit_degradation = enforce_limit(field, point)
            if limit_degradation is not None:
                field_degradations.append(limit_degradation)
            points[field] = point
            degradations.extend(field_degradations)

        tags = collect_tags(payload, prior)
        person = CanonicalProfile(
            name=points["name"],
            email=DataPoint(
                value=payload.email.strip(),
                confidence=1.0,
                source_urls=[USER_PROVIDED_SOURCE],
            ),
            avatar_url=points["avatar_url"],
            headline=points["headline"],
            current_role=CurrentRole(
                title=points["current_role.title"],
                company=points["current_role.company"],
            ),
            geo=points["geo"],
            bio=points["bio"],
            links=collect_links(payload, prior),
            industries=tags["industries"],
            skills_keywords=tags["skills_keywords"],
            interests_topics=tags["interests_topics"],
        )

        recommendations = build_recommendations(person, member_index, sponsor_index)
        outcome = Outcome.degraded(
            NormalizedProfile(person=person, recommendations=recommendations),
            degradations,
        )
        logger.info(
            "Normalized profile for %s: status=%s, %d degradation(s)",
            payload.email,
            outcome.status.value,
            len(outcome.degradations),
        )
        return outcome

    def _resolve_field(
        self, field: str, candidates: list[Any]
    ) -> tuple[DataPoint, list[Degradation]]:
        try:
            resolution = self.resolver.resolve(field, candidates)
        except Exception as e:
            logger.warning("Resolving %s failed, degrading field: %s", field, e)
            return self._degraded_point(candidates), [
                Degradation(kind=FailureKind.RESOLUTION, field=field, detail=str(e))
            ]
        return resolution.data_point, list(resolution.degradations)

    @staticmethod
    def _degraded_point(candidates: list[Any]) -> DataPoint:
        """First usable candidate value, at floor confidence."""
        for candidate in candidates:
            value = (
                candidate.get("value")
                if isinstance(candidate, Mapping)
                else getattr(candidate, "value", None)
            )
            if normalize_value(value):
                return DataPoint(
                    value=str(value),
                    confidence=DEGRADED_CONFIDENCE,
                    source_urls=[FALLBACK_SOURCE],
                )
        return DataPoint(value=None, confidence=0.0, source_urls=[FALLBACK_SOURCE])

    @staticmethod
    def _placeholder(payload: NormalizerInput | Mapping[str, Any]) -> NormalizedProfile:
        if isinstance(payload, NormalizerInput):
            email = payload.email
            name = f"{payload.first_name} {payload.last_name}".strip()
        else:
            email = str(payload.get("email") or "") if isinstance(payload, Mapping) else ""
            name = ""
            if isinstance(payload, Mapping):
                name = f"{payload.get('first_name') or ''} {payload.get('last_name') or ''}".strip()

        person = CanonicalProfile(
            name=DataPoint(
                value=name or None,
                confidence=DEGRADED_CONFIDENCE if name else 0.0,
                source_urls=[ERROR_FALLBACK_SOURCE],
            ),
            email=DataPoint(
                value=email or None,
                confidence=1.0 if email else 0.0,
                source_urls=[USER_PROVIDED_SOURCE] if email else [],
            ),
            bio=DataPoint(
                value=PLACEHOLDER_BIO,
                confidence=DEGRADED_CONFIDENCE,
                source_urls=[ERROR_FALLBACK_SOURCE],
            ),
        )
        return NormalizedProfile(person=person)
