"""Prompt builders for reasoning-service field resolution."""

from __future__ import annotations

import json
from collections.abc import Sequence

from src.resolver.models import FREE_TEXT_FIELDS, CandidateValue

FIELD_RESOLVER_SYSTEM_PROMPT = """You are a profile field resolver.

Given multiple candidate values for one profile field, choose ONE best value
with a 0-1 confidence and cite up to 3 supporting source_urls.

You must follow these rules:
- Prefer first-party and company bios, verified vendor APIs and reputable press
  over generic social profiles and directories.
- Only cite source_urls that appear in the candidate list.
- If candidates disagree, give the short resolution rationale in "explanation".
- Output MUST be valid JSON only (no markdown), matching the required schema.
"""

OUTPUT_SCHEMA = {
    "value": None,
    "confidence": 0,
    "source_urls": [],
    "explanation": "",
}


def build_field_resolution_prompt(
    *,
    field: str,
    candidates: Sequence[CandidateValue],
    max_chars: int,
) -> str:
    """Build the user prompt for resolving one field."""
    payload = [c.model_dump(mode="json") for c in candidates]

    if field in FREE_TEXT_FIELDS:
        value_rule = (
            "- You may write a concise summary of the candidates "
            f"(at most {max_chars} characters) instead of copying one verbatim."
        )
    else:
        value_rule = (
            "- \"value\" MUST be copied exactly from one of the candidates. "
            "Never invent or merge values for this field."
        )

    return "\n".join(
        [
            f"FIELD: {field}",
            "",
            "Resolution rules:",
            value_rule,
            "- confidence reflects source quality and agreement between candidates.",
            "",
            "CANDIDATES (JSON, in collection order):",
            json.dumps(payload, ensure_ascii=True),
            "",
            "OUTPUT_SCHEMA:",
            json.dumps(OUTPUT_SCHEMA, ensure_ascii=True),
        ]
    )
