"""Location tags: comma-separated parts plus a small built-in gazetteer."""

from __future__ import annotations

from collections.abc import Sequence

from src.utils.text import normalize_tags, to_snake_case

# (aliases, expansion). Aliases are snake_case phrases matched on whole words.
REGIONS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("sf", "san_francisco"), ("san_francisco", "bay_area", "california", "usa")),
    (("nyc", "new_york"), ("new_york", "nyc", "east_coast", "usa")),
    (("la", "los_angeles"), ("los_angeles", "socal", "california", "usa")),
    (("austin",), ("austin", "texas", "usa")),
    (("seattle",), ("seattle", "washington", "pacific_northwest", "usa")),
    (("boston",), ("boston", "massachusetts", "east_coast", "usa")),
)


def _contains_phrase(words: Sequence[str], phrase: Sequence[str]) -> bool:
    size = len(phrase)
    return any(list(words[i : i + size]) == list(phrase) for i in range(len(words) - size + 1))


def region_tags(location: str | None) -> list[str]:
    """Expansion of the first gazetteer region named in ``location``.

    Aliases must appear as whole words: "LA" and "Los Angeles, CA" match,
    "Atlanta" and "Dallas" do not.
    """
    words = [w for w in to_snake_case(location).split("_") if w]
    if not words:
        return []
    for aliases, expansion in REGIONS:
        if any(_contains_phrase(words, alias.split("_")) for alias in aliases):
            return list(expansion)
    return []


def geo_tags(location: str | None) -> list[str]:
    """Location parts as tags, followed by any gazetteer expansion."""
    if not location:
        return []
    parts = [part.strip() for part in location.split(",")]
    return normalize_tags(parts + region_tags(location))
