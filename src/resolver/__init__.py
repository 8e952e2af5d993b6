"""Field-level conflict resolution.

Public API:
    - FieldResolver: Reduce candidate values to one DataPoint per field
    - ReasoningClient: Injected reasoning-service (LLM) client
    - CandidateValue / DataPoint / SourceType: Resolution data models
    - ResolverConfig: Configuration settings
"""

from src.resolver.config import (
    DEFAULT_SOURCE_WEIGHTS,
    ResolverConfig,
    get_resolver_config,
    reset_resolver_config,
)
from src.resolver.llm import ReasoningClient, ReasoningServiceError
from src.resolver.models import (
    CandidateValue,
    DataPoint,
    FieldResolution,
    ReasoningDecision,
    ResolutionMethod,
    SourceType,
)
from src.resolver.service import FieldResolver

__all__ = [
    "FieldResolver",
    "ReasoningClient",
    "ReasoningServiceError",
    "CandidateValue",
    "DataPoint",
    "FieldResolution",
    "ReasoningDecision",
    "ResolutionMethod",
    "SourceType",
    "ResolverConfig",
    "DEFAULT_SOURCE_WEIGHTS",
    "get_resolver_config",
    "reset_resolver_config",
]
