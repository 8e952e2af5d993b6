"""End-to-end pipeline: normalize a profile, then regenerate its signals."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from src.normalizer.models import (
    CanonicalProfile,
    MemberIndexEntry,
    NormalizedProfile,
    NormalizerInput,
    SponsorIndexEntry,
)
from src.normalizer.service import ProfileNormalizer
from src.personas.models import Persona, parse_persona
from src.signals.models import MatchSignals, MemberProfile
from src.signals.service import SignalService
from src.utils.outcome import Outcome

logger = logging.getLogger(__name__)


def profile_completion(profile: CanonicalProfile) -> float:
    """Percentage of resolvable profile fields that hold a value."""
    points = profile.data_points()
    filled = sum(1 for point in points.values() if point.value)
    return round(100.0 * filled / len(points), 1)


@dataclass
class PipelineResult:
    """Outputs of one end-to-end run."""

    normalized: Outcome[NormalizedProfile]
    member: MemberProfile
    signals: MatchSignals


class ProfilePipeline:
    """Normalize -> assemble member -> regenerate signals for one user."""

    def __init__(self, normalizer: ProfileNormalizer, signal_service: SignalService) -> None:
        self.normalizer = normalizer
        self.signal_service = signal_service

    async def run(
        self,
        user_id: str,
        payload: NormalizerInput | Mapping[str, Any],
        *,
        persona: Persona | Mapping[str, Any] | str | None = None,
        goal_statement: str | None = None,
        email_verified: bool = False,
        phone_verified: bool = False,
        candidates: Mapping[str, Iterable[Any]] | None = None,
        prior: CanonicalProfile | None = None,
        member_index: Iterable[MemberIndexEntry] = (),
        sponsor_index: Iterable[SponsorIndexEntry] = (),
    ) -> PipelineResult:
        """Run the whole pipeline for ``user_id``.

        Raises:
            StoreFailure: If the regenerated signals could not be stored.
        """
        # Resolution may block on the reasoning service.
        normalized = await asyncio.to_thread(
            self.normalizer.normalize,
            payload,
            candidates,
            prior,
            list(member_index),
            list(sponsor_index),
        )
        profile = normalized.value.person

        member = MemberProfile(
            user_id=user_id,
            profile=profile,
            persona=parse_persona(persona if persona is not None else profile.current_role.title.value),
            goal_statement=goal_statement,
            email_verified=email_verified,
            phone_verified=phone_verified,
            completion_pct=profile_completion(profile),
        )
        logger.info(
            "Pipeline for %s: normalize=%s, persona=%s, completion=%.1f%%",
            user_id,
            normalized.status.value,
            member.persona.kind,
            member.completion_pct,
        )

        signals = await self.signal_service.regenerate(member)
        return PipelineResult(normalized=normalized, member=member, signals=signals)
