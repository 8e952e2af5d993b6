"""Pure ranking heuristics over an explicit source-weight table."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from src.resolver.config import DEFAULT_SOURCE_WEIGHTS
from src.resolver.models import CandidateValue


@dataclass(frozen=True)
class RankedCandidate:
    """A candidate with its preference weight and collection position."""

    candidate: CandidateValue
    weight: float
    position: int


def normalize_value(value: str | None) -> str:
    """Comparison key for candidate values (case and whitespace insensitive)."""
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip().casefold()


def candidate_weight(
    candidate: CandidateValue, weights: Mapping[str, float] | None = None
) -> float:
    """Preference weight of a candidate: source-type weight times confidence."""
    table = weights if weights is not None else DEFAULT_SOURCE_WEIGHTS
    source_weight = table.get(candidate.source_type.value, 0.0)
    return source_weight * candidate.confidence


def rank_candidates(
    candidates: Sequence[CandidateValue],
    weights: Mapping[str, float] | None = None,
) -> list[RankedCandidate]:
    """Order candidates by weight, earliest collected first on ties.

    Candidates without a usable value are dropped.
    """
    ranked = [
        RankedCandidate(candidate=c, weight=candidate_weight(c, weights), position=i)
        for i, c in enumerate(candidates)
        if normalize_value(c.value)
    ]
    ranked.sort(key=lambda r: (-r.weight, r.position))
    return ranked


def is_near_tie(ranked: Sequence[RankedCandidate], margin: float) -> bool:
    """True when the top two candidates disagree and their weights are close."""
    if len(ranked) < 2:
        return False
    first, second = ranked[0], ranked[1]
    if normalize_value(first.candidate.value) == normalize_value(second.candidate.value):
        return False
    return (first.weight - second.weight) <= margin + 1e-9


def most_confident(candidates: Sequence[CandidateValue]) -> CandidateValue | None:
    """Highest input confidence, earliest collected on ties."""
    best: CandidateValue | None = None
    for candidate in candidates:
        if not normalize_value(candidate.value):
            continue
        if best is None or candidate.confidence > best.confidence:
            best = candidate
    return best


def supporting_urls(
    value: str | None,
    ranked: Sequence[RankedCandidate],
    limit: int = 3,
) -> list[str]:
    """URLs of every candidate agreeing with ``value``, in rank order."""
    key = normalize_value(value)
    urls: list[str] = []
    for entry in ranked:
        url = entry.candidate.source_url
        if url and normalize_value(entry.candidate.value) == key and url not in urls:
            urls.append(url)
        if len(urls) >= limit:
            break
    return urls
