"""Turn deterministic side inputs into per-field candidate values."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from src.normalizer.models import CanonicalProfile, NormalizerInput, ProfileLinks
from src.resolver.models import CandidateValue, SourceType
from src.resolver.sources import classify_source, email_domain, link_slot, url_domain

# Fields resolved through the Field Resolver, in build order.
RESOLVED_FIELDS: tuple[str, ...] = (
    "name",
    "avatar_url",
    "headline",
    "current_role.title",
    "current_role.company",
    "geo",
    "bio",
)

# Collector confidence by source kind, before source-preference weighting.
COLLECTOR_CONFIDENCE: dict[SourceType, float] = {
    SourceType.USER_PROVIDED: 0.95,
    SourceType.FIRST_PARTY: 0.85,
    SourceType.VENDOR: 0.8,
    SourceType.PRESS: 0.7,
    SourceType.SOCIAL: 0.6,
    SourceType.PRIOR_PROFILE: 0.5,
    SourceType.DIRECTORY: 0.4,
}

_VENDOR_FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "name": ("name", "full_name"),
    "avatar_url": ("avatar", "avatar_url", "photo_url"),
    "headline": ("headline",),
    "current_role.title": ("title", "job_title"),
    "current_role.company": ("company", "company_name"),
    "geo": ("location", "geo"),
    "bio": ("bio", "summary"),
}

_VENDOR_LINK_KEYS: dict[str, tuple[str, ...]] = {
    "linkedin": ("linkedin", "linkedin_url"),
    "github": ("github", "github_url"),
    "x": ("x", "twitter", "twitter_url"),
    "website": ("website", "site"),
}


def _first(mapping: Mapping[str, Any], keys: Iterable[str]) -> str | None:
    for key in keys:
        value = mapping.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


class CandidateCollector:
    """Accumulates candidates per field in collection order."""

    def __init__(self) -> None:
        self._pool: dict[str, list[CandidateValue]] = {f: [] for f in RESOLVED_FIELDS}

    def add(
        self,
        field: str,
        value: Any,
        source_type: SourceType,
        source_url: str | None = "",
        confidence: float | None = None,
    ) -> None:
        if value is None or not str(value).strip():
            return
        self._pool.setdefault(field, []).append(
            CandidateValue(
                value=str(value).strip(),
                confidence=(
                    COLLECTOR_CONFIDENCE[source_type] if confidence is None else confidence
                ),
                source_url=source_url or "",
                source_type=source_type,
            )
        )

    def extend(self, field: str, candidates: Iterable[Any]) -> None:
        self._pool.setdefault(field, []).extend(candidates)

    def as_dict(self) -> dict[str, list[Any]]:
        return {field: list(values) for field, values in self._pool.items()}


def collect_candidates(
    payload: NormalizerInput,
    prior: CanonicalProfile | None = None,
    extra: Mapping[str, Iterable[Any]] | None = None,
) -> dict[str, list[Any]]:
    """Collect candidate values for every resolvable field.

    Sources are appended in a fixed order (user, gravatar, vendor, company
    guess, company site, search snippets, prior profile) so ties in the
    preference ranking resolve the same way on every run. ``extra``
    candidates, possibly raw mappings, are appended last.
    """
    collector = CandidateCollector()
    company_domain = payload.company_site or payload.email_domain or email_domain(payload.email)

    full_name = " ".join(p for p in (payload.first_name.strip(), payload.last_name.strip()) if p)
    collector.add("name", full_name, SourceType.USER_PROVIDED)

    if payload.gravatar is not None:
        gravatar_url = payload.gravatar.avatar_url or ""
        collector.add("name", payload.gravatar.name, SourceType.SOCIAL, gravatar_url)
        collector.add("avatar_url", payload.gravatar.avatar_url, SourceType.SOCIAL, gravatar_url)

    vendor = payload.vendor_enrichment
    if vendor:
        vendor_url = _first(vendor, ("source_url", "url")) or ""
        for field, keys in _VENDOR_FIELD_KEYS.items():
            collector.add(field, _first(vendor, keys), SourceType.VENDOR, vendor_url)

    collector.add(
        "current_role.company",
        payload.company_guess,
        SourceType.DIRECTORY,
        payload.company_site or "",
    )

    og = payload.opengraph
    if og:
        site_url = _first(og, ("url",)) or payload.company_site or ""
        collector.add("current_role.company", _first(og, ("site_name",)), SourceType.FIRST_PARTY, site_url)
        collector.add("avatar_url", _first(og, ("image",)), SourceType.FIRST_PARTY, site_url)

    for snippet in payload.search_snippets:
        source_type = classify_source(snippet.url, company_domain)
        collector.add("headline", snippet.title, source_type, snippet.url)
        collector.add("bio", snippet.snippet, source_type, snippet.url)

    if prior is not None:
        for field, point in prior.data_points().items():
            if field == "email" or point.value is None:
                continue
            collector.add(
                field,
                point.value,
                SourceType.PRIOR_PROFILE,
                point.source_urls[0] if point.source_urls else "",
                confidence=point.confidence,
            )

    for field, candidates in (extra or {}).items():
        collector.extend(field, candidates)

    return collector.as_dict()


def collect_links(
    payload: NormalizerInput,
    prior: CanonicalProfile | None = None,
) -> ProfileLinks:
    """Fill each link slot from the first source that has one."""
    links: dict[str, str | None] = {slot: None for slot in ("website", "github", "x", "linkedin", "company")}

    def offer(slot: str, url: str | None) -> None:
        if url and not links[slot]:
            links[slot] = url.strip()

    vendor = payload.vendor_enrichment
    for slot, keys in _VENDOR_LINK_KEYS.items():
        offer(slot, _first(vendor, keys))

    if url_domain(payload.company_site):
        offer("company", payload.company_site)

    for snippet in payload.search_snippets:
        slot = link_slot(snippet.url)
        if slot is not None:
            offer(slot, snippet.url)

    if prior is not None:
        for slot, url in prior.links.model_dump().items():
            offer(slot, url)

    return ProfileLinks(**links)


def collect_tags(
    payload: NormalizerInput,
    prior: CanonicalProfile | None = None,
) -> dict[str, list[str]]:
    """Raw (un-normalized) industry, skill and interest tags."""
    vendor = payload.vendor_enrichment

    def listed(*keys: str) -> list[str]:
        values: list[str] = []
        for key in keys:
            raw = vendor.get(key)
            if isinstance(raw, str):
                values.append(raw)
            elif isinstance(raw, Iterable):
                values.extend(str(v) for v in raw if v is not None)
        return values

    industries = listed("industries", "industry")
    skills = listed("skills", "skills_keywords")
    interests = list(payload.event_context.event_topics) + listed("interests", "topics")

    if prior is not None:
        industries += prior.industries
        skills += prior.skills_keywords
        interests += prior.interests_topics

    return {
        "industries": industries,
        "skills_keywords": skills,
        "interests_topics": interests,
    }
