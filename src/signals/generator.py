"""Signal Generator: derive match signals from a member profile.

Every derivation is null-safe: missing profile data yields empty or
default output rather than an exception. Persona-specific rules dispatch
on the persona variant, never on substrings of its label.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.personas.models import (
    AdvisorPersona,
    FounderPersona,
    InvestorPersona,
    OperatorPersona,
    Persona,
)
from src.signals.gazetteer import geo_tags
from src.signals.models import (
    VERIFIED_LINK_PLATFORMS,
    MatchSignals,
    MemberProfile,
    NumericFeatures,
    TrustSignals,
    VerifiedLink,
)
from src.signals.money import parse_money
from src.utils.text import normalize_tags, to_snake_case

logger = logging.getLogger(__name__)

EMBEDDING_DELIMITER = " | "

# Fixed vocabularies contributed by each persona kind.
INVESTOR_SUPPLY = ("funding", "capital", "investment")
INVESTOR_THESIS_SUPPLY = ("strategic_advice", "mentorship")
INVESTOR_DEMAND = ("deal_flow", "investment_opportunities")
FOUNDER_SUPPLY = ("startup_opportunity", "innovation")
FOUNDER_DEMAND = ("capital", "funding", "advisors", "mentorship")
OPERATOR_SUPPLY = ("technical_expertise", "execution", "product_development")
OPERATOR_OPEN_DEMAND = ("job_opportunities", "career_growth")
ADVISOR_SUPPLY = ("advisory", "consulting", "expertise")
ADVISOR_DEMAND = ("clients", "consulting_opportunities")

# Founder stage keyword -> stage tag. ``None`` keeps the full stage as the tag.
FOUNDER_STAGE_TAGS: tuple[tuple[str, str | None], ...] = (
    ("idea", "idea_stage"),
    ("mvp", "mvp"),
    ("seed", "seed"),
    ("series", None),
    ("growth", "growth_stage"),
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: object) -> str:
    return str(value).strip() if value is not None else ""


def _joined(values: list[str]) -> str:
    return " ".join(v.strip() for v in values if v and v.strip())


@dataclass
class TagFamilies:
    """Working lists for the five tag families."""

    supply: list[str] = field(default_factory=list)
    demand: list[str] = field(default_factory=list)
    icp: list[str] = field(default_factory=list)
    geo: list[str] = field(default_factory=list)
    stage: list[str] = field(default_factory=list)

    def deduplicated(self) -> TagFamilies:
        return TagFamilies(
            supply=normalize_tags(self.supply),
            demand=normalize_tags(self.demand),
            icp=normalize_tags(self.icp),
            geo=normalize_tags(self.geo),
            stage=normalize_tags(self.stage),
        )


def persona_block(persona: Persona) -> list[str]:
    """Embedding-text parts specific to the persona variant."""
    parts: list[str] = []
    if isinstance(persona, InvestorPersona):
        parts += [
            _text(persona.thesis),
            _joined(persona.sectors),
            _joined(persona.stages),
            _text(persona.notable_wins),
        ]
    elif isinstance(persona, FounderPersona):
        parts += [_text(persona.company), _text(persona.problem)]
        if _text(persona.funding_raised):
            parts.append(f"Raised {_text(persona.funding_raised)}")
    elif isinstance(persona, OperatorPersona):
        parts += [
            _text(persona.current_role),
            _text(persona.current_company),
            _joined(persona.expertise),
        ]
        if _text(persona.ideal_next_role):
            parts.append(f"Looking for {_text(persona.ideal_next_role)}")
    elif isinstance(persona, AdvisorPersona):
        parts.append(_joined(persona.services))
        if _joined(persona.client_types):
            parts.append(f"Works with {_joined(persona.client_types)}")
    return [p for p in parts if p]


def build_embedding_text(member: MemberProfile) -> str:
    """Deterministic " | "-joined text for embedding."""
    profile = member.profile
    label = _text(member.persona.label)
    location = _text(member.location)

    parts = [_text(member.display_name), _text(profile.headline.value)]
    if label and location:
        parts.append(f"{label} in {location}")
    elif label:
        parts.append(label)
    parts.append(_text(member.goal_statement))
    parts += persona_block(member.persona)

    industries = _joined(profile.industries)
    if industries:
        parts.append(f"Industries: {industries}")
    skills = _joined(profile.skills_keywords)
    if skills:
        parts.append(f"Skills: {skills}")

    return EMBEDDING_DELIMITER.join(p for p in parts if p)


def founder_stage_tags(stage: str | None) -> list[str]:
    words = to_snake_case(stage).split("_")
    tags: list[str] = []
    for keyword, tag in FOUNDER_STAGE_TAGS:
        if keyword in words:
            tags.append(tag or to_snake_case(stage))
    return tags


def build_tags(member: MemberProfile) -> TagFamilies:
    """Supply, demand, ICP, geo and stage tags, each deduplicated."""
    tags = TagFamilies()
    persona = member.persona

    if isinstance(persona, InvestorPersona):
        tags.supply += INVESTOR_SUPPLY
        if _text(persona.thesis):
            tags.supply += INVESTOR_THESIS_SUPPLY
        tags.demand += INVESTOR_DEMAND
        tags.icp += persona.sectors
        tags.stage += persona.stages
    elif isinstance(persona, FounderPersona):
        tags.demand += FOUNDER_DEMAND
        tags.demand += persona.looking_for
        tags.supply += FOUNDER_SUPPLY
        tags.stage += founder_stage_tags(persona.stage)
    elif isinstance(persona, OperatorPersona):
        tags.supply += OPERATOR_SUPPLY
        tags.supply += persona.expertise
        if persona.open_to_opportunities:
            tags.demand += OPERATOR_OPEN_DEMAND
    elif isinstance(persona, AdvisorPersona):
        tags.supply += ADVISOR_SUPPLY
        tags.supply += persona.services
        tags.demand += ADVISOR_DEMAND
        tags.icp += persona.client_types

    tags.geo += geo_tags(member.location)
    return tags.deduplicated()


def build_trust_signals(member: MemberProfile, now: datetime) -> TrustSignals:
    links = member.profile.links
    verified: dict[str, VerifiedLink] = {}
    for platform in VERIFIED_LINK_PLATFORMS:
        url = _text(getattr(links, platform, None))
        if url:
            verified[platform] = VerifiedLink(url=url, verified_at=now)

    return TrustSignals(
        verified_email=member.email_verified,
        verified_phone=member.phone_verified,
        profile_completion=member.completion_pct,
        verified_links=verified,
    )


def build_numeric_features(member: MemberProfile) -> NumericFeatures:
    """Persona-specific numeric features in USD / counts / years."""
    features = NumericFeatures()
    persona = member.persona

    if isinstance(persona, InvestorPersona):
        features.investment_capacity = parse_money(persona.aum)
        features.funding_amount = parse_money(persona.check_size_min)
    elif isinstance(persona, FounderPersona):
        features.company_size = persona.team_size or None
        features.funding_amount = parse_money(persona.funding_raised)
    elif isinstance(persona, OperatorPersona):
        features.experience_years = persona.years_experience or None

    return features


class SignalGenerator:
    """Build MatchSignals for a member.

    ``clock`` supplies the timestamp used for recency and link
    verification, so output is reproducible under test.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self.clock = clock or utc_now

    def generate(self, member: MemberProfile) -> MatchSignals:
        now = self.clock()
        text = build_embedding_text(member)
        tags = build_tags(member)
        trust = build_trust_signals(member, now)
        numeric = build_numeric_features(member)

        signals = MatchSignals(
            user_id=member.user_id,
            embedding_ready_text=text,
            primary_intent=_text(member.goal_statement) or None,
            supply_tags=tags.supply,
            demand_tags=tags.demand,
            icp_tags=tags.icp,
            geo_tags=tags.geo,
            stage_tags=tags.stage,
            trust_signals=trust,
            numeric_features=numeric,
            recency_weight=now,
            opt_out_ids=list(member.opt_out_ids),
        )
        logger.info(
            "Generated signals for %s: text=%d chars, supply=%d, demand=%d, icp=%d, "
            "geo=%d, stage=%d, verified_links=%d, numeric=%d",
            member.user_id,
            len(text),
            len(tags.supply),
            len(tags.demand),
            len(tags.icp),
            len(tags.geo),
            len(tags.stage),
            len(trust.verified_links),
            len(numeric.to_dict()),
        )
        return signals
