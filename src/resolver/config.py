"""Configuration settings for the Field Resolver."""

from __future__ import annotations

import json
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.resolver.models import SourceType

DEFAULT_SOURCE_WEIGHTS: dict[str, float] = {
    SourceType.USER_PROVIDED.value: 1.0,
    SourceType.FIRST_PARTY.value: 1.0,
    SourceType.VENDOR.value: 0.9,
    SourceType.PRESS.value: 0.75,
    SourceType.SOCIAL.value: 0.5,
    SourceType.PRIOR_PROFILE.value: 0.4,
    SourceType.DIRECTORY.value: 0.3,
}


class ResolverConfig(BaseSettings):
    """Field resolver configuration settings.

    All settings have sensible defaults and can be overridden via
    environment variables with `RESOLVER_` prefix or a .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESOLVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Heuristic settings
    source_weights: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SOURCE_WEIGHTS),
        description="Preference weight per source type (merged over defaults)",
    )
    tie_margin: Annotated[float, Field(ge=0.0, le=1.0)] = Field(
        default=0.05,
        description="Weight gap under which the top two candidates count as tied",
    )
    max_source_urls: Annotated[int, Field(ge=1, le=3)] = Field(
        default=3,
        description="Maximum supporting source URLs per resolved field",
    )
    free_text_max_chars: Annotated[int, Field(gt=0)] = Field(
        default=280,
        description="Upper bound for synthesized free-text values",
    )

    # Reasoning service settings
    reasoning_enabled: bool = Field(
        default=True,
        description="Delegate near-ties to the reasoning service",
    )
    llm_provider: str = Field(
        default="openai",
        description="LLM provider for LiteLLM routing (openai, anthropic, ...)",
    )
    llm_model: str = Field(
        default="gpt-4o",
        description="Model ID used for tie-break resolution",
    )
    llm_api_key: str | None = Field(
        default=None,
        description="API key for the LLM provider",
    )
    llm_base_url: str | None = Field(
        default=None,
        description="Base URL for OpenAI-compatible endpoints",
    )
    llm_timeout: Annotated[float, Field(gt=0)] = Field(
        default=30.0,
        description="Timeout per reasoning call in seconds",
    )
    llm_max_retries: Annotated[int, Field(ge=0)] = Field(
        default=0,
        description="Retries before falling back to the deterministic choice",
    )
    llm_reasoning_effort: str | None = Field(
        default=None,
        description="Reasoning effort for supported models (e.g. 'low', 'medium')",
    )
    llm_min_interval_seconds: Annotated[float, Field(ge=0.0)] = Field(
        default=0.5,
        description="Minimum delay between sequential reasoning calls",
    )

    @field_validator("source_weights", mode="before")
    @classmethod
    def parse_source_weights(cls, v: object) -> dict[str, float]:
        """Merge overrides over the defaults.

        Supports a mapping or a JSON object string, e.g.
        RESOLVER_SOURCE_WEIGHTS='{"press": 0.95}'.
        """
        if v is None or v == "":
            return dict(DEFAULT_SOURCE_WEIGHTS)

        if isinstance(v, str):
            try:
                v = json.loads(v)
            except json.JSONDecodeError as e:
                raise ValueError("source_weights must be a JSON object") from e

        if not isinstance(v, dict):
            raise ValueError("source_weights must be a mapping of source type to weight")

        valid = {member.value for member in SourceType}
        merged = dict(DEFAULT_SOURCE_WEIGHTS)
        for key, weight in v.items():
            name = str(key).strip().lower()
            if name not in valid:
                raise ValueError(
                    f"Unknown source type in source_weights: {key}. "
                    f"Must be one of {sorted(valid)}"
                )
            weight = float(weight)
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"Weight for {name} must be between 0.0 and 1.0")
            merged[name] = weight
        return merged


_resolver_config: ResolverConfig | None = None


def get_resolver_config() -> ResolverConfig:
    """Get the resolver configuration singleton."""
    global _resolver_config
    if _resolver_config is None:
        _resolver_config = ResolverConfig()
    return _resolver_config


def reset_resolver_config() -> None:
    """Reset the resolver configuration singleton (useful for testing)."""
    global _resolver_config
    _resolver_config = None
