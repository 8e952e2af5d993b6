"""Compatibility Scorer: explainable pairwise fit between two members.

Pure and CPU-only. ``score_pair`` never raises; missing titles or tags
degrade to the floor score with the catch-all reason.
"""

from __future__ import annotations

from typing import Any

from src.compatibility.models import (
    MAX_SCORE,
    MIN_SCORE,
    AnonymizedPreview,
    CompatibilityScore,
    ScoringSubject,
)

TAG_POINTS = 10
TAG_POINTS_CAP = 40
ROLE_POINTS = 20
SERENDIPITY_POINTS = 10

# Tag overlap needed before shared tags count as a reason.
SHARED_TAGS_REASON_THRESHOLD = 20

REASON_SHARED_TAGS = "Shared interests or skills"
REASON_SIMILAR_ROLES = "Similar roles/seniority"
REASON_COMPLEMENTARY = "Complementary backgrounds"
REASON_CATCH_ALL = "Overlapping event context"

DEFAULT_ROLE = "Professional"
LOCATION_PLACEHOLDER = "Undisclosed region"
COMPANY_PREVIEW_CHARS = 10
COMPANY_PREVIEW_MAX = 12


def shared_tag_count(a: list[str], b: list[str]) -> int:
    """Distinct tags present in both lists, compared case-insensitively."""
    return len({t.casefold() for t in a} & {t.casefold() for t in b})


def _first_token(title: str | None) -> str:
    if not title:
        return ""
    tokens = title.split()
    return tokens[0] if tokens else ""


def score_pair(a: Any, b: Any) -> CompatibilityScore:
    """Score two members from their titles and tags.

    base 30, plus 10 per shared tag (capped at 40), plus 20 when the
    titles' first words match exactly, plus 10 when both titles exist and
    differ; capped at 100.
    """
    left = ScoringSubject.coerce(a)
    right = ScoringSubject.coerce(b)

    tag_score = min(TAG_POINTS_CAP, shared_tag_count(left.tags, right.tags) * TAG_POINTS)

    left_token = _first_token(left.title)
    role_score = ROLE_POINTS if left_token and left_token == _first_token(right.title) else 0

    serendipity_score = (
        SERENDIPITY_POINTS
        if left.title and right.title and left.title != right.title
        else 0
    )

    score = min(MAX_SCORE, MIN_SCORE + tag_score + role_score + serendipity_score)

    reasons: list[str] = []
    if tag_score >= SHARED_TAGS_REASON_THRESHOLD:
        reasons.append(REASON_SHARED_TAGS)
    if role_score > 0:
        reasons.append(REASON_SIMILAR_ROLES)
    if serendipity_score > 0:
        reasons.append(REASON_COMPLEMENTARY)
    if not reasons:
        reasons.append(REASON_CATCH_ALL)

    return CompatibilityScore(score=score, reasons=reasons)


def anonymize(title: str | None, company: str | None) -> AnonymizedPreview:
    """Build a pre-reveal handle such as "VP Engineering @ Acme Corpo…"."""
    role = (title or "").split(",")[0].strip() or DEFAULT_ROLE

    company = (company or "").strip()
    if len(company) > COMPANY_PREVIEW_MAX:
        company = company[:COMPANY_PREVIEW_CHARS] + "…"

    handle = f"{role} @ {company}" if company else role
    return AnonymizedPreview(handle=handle, location=LOCATION_PLACEHOLDER)
