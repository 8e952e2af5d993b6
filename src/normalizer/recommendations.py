"""Rule-based networking recommendations for a canonical profile."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from src.normalizer.models import (
    CanonicalProfile,
    ConnectionTarget,
    MemberIndexEntry,
    Recommendations,
    SponsorIndexEntry,
    SponsorTarget,
)
from src.personas.models import PersonaKind, classify_persona
from src.utils.text import to_snake_case

logger = logging.getLogger(__name__)

MAX_CONNECTION_TARGETS = 5
MAX_SPONSOR_TARGETS = 3

GOAL_SUGGESTIONS: dict[PersonaKind, list[str]] = {
    PersonaKind.FOUNDER: [
        "Seeking strategic investors and venture capital partners for growth acceleration",
        "Looking for experienced mentors and industry advisors to guide strategic decisions",
        "Connecting with exceptional technical talent and potential co-founders",
    ],
    PersonaKind.INVESTOR: [
        "Sourcing high-quality deal flow and innovative startups in emerging sectors",
        "Building relationships with institutional LPs and family offices for fund development",
        "Connecting with co-investment partners for syndicated opportunities",
    ],
}

DEFAULT_GOAL_SUGGESTIONS: list[str] = [
    "Building strategic partnerships and collaborations to drive innovation",
    "Exploring board and advisory opportunities in growth-stage companies",
    "Connecting with industry leaders and innovators for knowledge sharing",
]

MISSION_PACKS: dict[PersonaKind, list[str]] = {
    PersonaKind.FOUNDER: [
        "Strategic leadership in {industries} transformation",
        "Building category-defining companies that reshape markets",
        "Driving innovation through collaborative entrepreneurial ecosystems",
        "Creating sustainable value and meaningful impact for all stakeholders",
        "Leveraging cutting-edge technology to solve complex global challenges",
    ],
    PersonaKind.INVESTOR: [
        "Identifying breakthrough opportunities in {industries} innovation",
        "Building portfolios of exceptional founders and transformative companies",
        "Providing strategic capital and guidance for sustainable growth",
        "Creating value through deep industry expertise and network effects",
        "Supporting visionary entrepreneurs who are changing the world",
    ],
}

DEFAULT_MISSION_PACK: list[str] = [
    "Excellence and thought leadership in {industries}",
    "Building strategic partnerships that drive meaningful innovation",
    "Contributing expertise to collaborative growth initiatives",
    "Creating sustainable value through strategic decision-making",
    "Leveraging technology and insights to solve industry challenges",
]

# Company-name words that mark an investment firm when the title is generic.
_INVESTOR_COMPANY_WORDS = frozenset({"capital", "ventures", "partners"})

# Weights for connection-target scoring.
INDUSTRY_WEIGHT = 3
SKILL_WEIGHT = 2
INTEREST_WEIGHT = 1
SAME_COMPANY_PENALTY = 5

# Weights for sponsor-target scoring.
AUDIENCE_WEIGHT = 3
SPONSOR_SKILL_WEIGHT = 2
SPONSOR_TOPIC_WEIGHT = 1


def profile_persona(profile: CanonicalProfile) -> PersonaKind:
    """Persona implied by the profile's current title and company."""
    kind = classify_persona(profile.current_role.title.value)
    if kind == PersonaKind.OTHER:
        company_words = set(to_snake_case(profile.current_role.company.value).split("_"))
        if company_words & _INVESTOR_COMPANY_WORDS:
            return PersonaKind.INVESTOR
    return kind


def _industry_context(profile: CanonicalProfile) -> str:
    if not profile.industries:
        return "technology"
    return " and ".join(tag.replace("_", " ") for tag in profile.industries[:2])


def goal_suggestions(profile: CanonicalProfile) -> list[str]:
    return list(GOAL_SUGGESTIONS.get(profile_persona(profile), DEFAULT_GOAL_SUGGESTIONS))


def mission_pack(profile: CanonicalProfile) -> list[str]:
    templates = MISSION_PACKS.get(profile_persona(profile), DEFAULT_MISSION_PACK)
    context = _industry_context(profile)
    return [t.format(industries=context) for t in templates]


def _overlap(ours: Sequence[str], theirs: Iterable[str]) -> list[str]:
    their_set = set(theirs)
    return [tag for tag in ours if tag in their_set]


def _singular(word: str) -> str:
    return word[:-1] if len(word) > 3 and word.endswith("s") else word


def _audience_matches(title: str | None, audience: Sequence[str]) -> list[str]:
    """Audience tags whose words all appear in the title ("ctos" ~ "CTO")."""
    title_words = {_singular(w) for w in to_snake_case(title).split("_") if w}
    if not title_words:
        return []
    return [
        tag
        for tag in audience
        if all(_singular(w) in title_words for w in tag.split("_") if w)
    ]


def connection_targets(
    profile: CanonicalProfile,
    members: Iterable[MemberIndexEntry],
    limit: int = MAX_CONNECTION_TARGETS,
) -> list[ConnectionTarget]:
    """Rank other members by weighted tag overlap, index order on ties."""
    company = to_snake_case(profile.current_role.company.value)
    scored: list[tuple[int, int, ConnectionTarget]] = []

    for position, member in enumerate(members):
        industries = _overlap(profile.industries, member.industries)
        skills = _overlap(profile.skills_keywords, member.skills)
        interests = _overlap(profile.interests_topics, member.interests)

        score = (
            len(industries) * INDUSTRY_WEIGHT
            + len(skills) * SKILL_WEIGHT
            + len(interests) * INTEREST_WEIGHT
        )
        if company and to_snake_case(member.company) == company:
            score -= SAME_COMPANY_PENALTY
        if score <= 0:
            continue

        reasons = []
        if industries:
            reasons.append(f"shared industries: {', '.join(industries)}")
        if skills:
            reasons.append(f"shared skills: {', '.join(skills)}")
        if interests:
            reasons.append(f"shared interests: {', '.join(interests)}")

        overlap_tags: list[str] = []
        for tag in industries + skills + interests:
            if tag not in overlap_tags:
                overlap_tags.append(tag)

        scored.append(
            (
                score,
                position,
                ConnectionTarget(
                    member_id=member.member_id,
                    reason="; ".join(reasons).capitalize(),
                    overlap_tags=overlap_tags,
                ),
            )
        )

    scored.sort(key=lambda s: (-s[0], s[1]))
    return [target for _, _, target in scored[:limit]]


def sponsor_targets(
    profile: CanonicalProfile,
    sponsors: Iterable[SponsorIndexEntry],
    limit: int = MAX_SPONSOR_TARGETS,
) -> list[SponsorTarget]:
    """Rank sponsors by audience, skill and topic relevance."""
    topics = list(profile.interests_topics) + [
        t for t in profile.industries if t not in profile.interests_topics
    ]
    scored: list[tuple[int, int, SponsorTarget]] = []

    for position, sponsor in enumerate(sponsors):
        audience = _audience_matches(profile.current_role.title.value, sponsor.target_audience)
        skills = _overlap(sponsor.category_tags, profile.skills_keywords)
        topic_hits = _overlap(sponsor.category_tags, topics)

        score = (
            len(audience) * AUDIENCE_WEIGHT
            + len(skills) * SPONSOR_SKILL_WEIGHT
            + len(topic_hits) * SPONSOR_TOPIC_WEIGHT
        )
        if score <= 0:
            continue

        overlap_tags: list[str] = []
        for tag in skills + topic_hits:
            if tag not in overlap_tags:
                overlap_tags.append(tag)

        if audience:
            reason = f"{sponsor.name or sponsor.sponsor_id} serves {', '.join(audience)}"
        else:
            reason = f"{sponsor.name or sponsor.sponsor_id} matches {', '.join(overlap_tags)}"
        if sponsor.short_value_prop:
            reason = f"{reason}: {sponsor.short_value_prop}"

        scored.append(
            (
                score,
                position,
                SponsorTarget(
                    sponsor_id=sponsor.sponsor_id,
                    reason=reason,
                    overlap_tags=overlap_tags,
                ),
            )
        )

    scored.sort(key=lambda s: (-s[0], s[1]))
    return [target for _, _, target in scored[:limit]]


def build_recommendations(
    profile: CanonicalProfile,
    member_index: Iterable[MemberIndexEntry] = (),
    sponsor_index: Iterable[SponsorIndexEntry] = (),
) -> Recommendations:
    """Goal suggestions, mission pack and ranked targets for a profile."""
    recommendations = Recommendations(
        goal_suggestions=goal_suggestions(profile),
        mission_pack=mission_pack(profile),
        connection_targets=connection_targets(profile, member_index),
        sponsor_targets=sponsor_targets(profile, sponsor_index),
    )
    logger.debug(
        "Built recommendations: %d connection target(s), %d sponsor target(s)",
        len(recommendations.connection_targets),
        len(recommendations.sponsor_targets),
    )
    return recommendations
