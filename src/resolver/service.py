"""Field resolution service.

Reduces the candidate values collected for one profile field to a single
canonical ``DataPoint``. Deterministic source preference decides most
conflicts; near-ties go to the reasoning service, and any failure there
falls back to the most confident candidate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from src.resolver.config import ResolverConfig, get_resolver_config
from src.resolver.llm import ReasoningClient, ReasoningServiceError
from src.resolver.models import (
    FREE_TEXT_FIELDS,
    CandidateValue,
    DataPoint,
    FieldResolution,
    ReasoningDecision,
    ResolutionMethod,
)
from src.resolver.prompts import (
    FIELD_RESOLVER_SYSTEM_PROMPT,
    build_field_resolution_prompt,
)
from src.resolver.weights import (
    RankedCandidate,
    is_near_tie,
    most_confident,
    normalize_value,
    rank_candidates,
    supporting_urls,
)
from src.utils.logging import get_audit_logger
from src.utils.outcome import Degradation, FailureKind
from src.utils.text import truncate_text

logger = logging.getLogger(__name__)


class FieldResolver:
    """Resolve conflicting candidate values into one DataPoint per field."""

    def __init__(
        self,
        config: ResolverConfig | None = None,
        client: ReasoningClient | None = None,
    ) -> None:
        self.config = config or get_resolver_config()
        self.client = client
        self._audit = get_audit_logger()

    def resolve(
        self,
        field: str,
        candidates: Iterable[CandidateValue | Mapping[str, Any]] | None,
    ) -> FieldResolution:
        """Resolve ``candidates`` for ``field``. Never raises."""
        degradations: list[Degradation] = []
        pool = self._coerce(field, candidates, degradations)

        if not pool:
            return FieldResolution(
                field=field,
                data_point=DataPoint.empty(),
                method=ResolutionMethod.EMPTY,
                degradations=degradations,
            )

        if len(pool) == 1:
            only = pool[0]
            return FieldResolution(
                field=field,
                data_point=DataPoint(
                    value=only.value,
                    confidence=only.confidence,
                    source_urls=[only.source_url] if only.source_url else [],
                ),
                method=ResolutionMethod.PASSTHROUGH,
                degradations=degradations,
            )

        ranked = rank_candidates(pool, self.config.source_weights)
        if not ranked:
            return FieldResolution(
                field=field,
                data_point=DataPoint.empty(),
                method=ResolutionMethod.EMPTY,
                degradations=degradations,
            )

        if (
            self.config.reasoning_enabled
            and self.client is not None
            and is_near_tie(ranked, self.config.tie_margin)
        ):
            resolution = self._resolve_with_reasoning(self.client, field, pool, ranked)
            resolution.degradations[:0] = degradations
            return resolution

        top = ranked[0]
        rationale = (
            f"preferred {top.candidate.source_type.value} source "
            f"(weight {top.weight:.2f})"
        )
        return FieldResolution(
            field=field,
            data_point=DataPoint(
                value=top.candidate.value,
                confidence=top.candidate.confidence,
                source_urls=supporting_urls(
                    top.candidate.value, ranked, self.config.max_source_urls
                ),
            ),
            method=ResolutionMethod.PREFERENCE,
            rationale=rationale,
            degradations=degradations,
        )

    def _coerce(
        self,
        field: str,
        candidates: Iterable[CandidateValue | Mapping[str, Any]] | None,
        degradations: list[Degradation],
    ) -> list[CandidateValue]:
        pool: list[CandidateValue] = []
        for raw in candidates or []:
            if isinstance(raw, CandidateValue):
                pool.append(raw)
                continue
            try:
                pool.append(CandidateValue.model_validate(raw))
            except ValidationError as e:
                degradations.append(
                    Degradation(
                        kind=FailureKind.COLLECTION,
                        field=field,
                        detail=f"discarded malformed candidate: {e.error_count()} error(s)",
                    )
                )
        return pool

    def _resolve_with_reasoning(
        self,
        client: ReasoningClient,
        field: str,
        pool: list[CandidateValue],
        ranked: list[RankedCandidate],
    ) -> FieldResolution:
        prompt = build_field_resolution_prompt(
            field=field,
            candidates=pool,
            max_chars=self.config.free_text_max_chars,
        )
        try:
            decision = client.generate_structured(
                prompt=prompt,
                output_model=ReasoningDecision,
                system_prompt=FIELD_RESOLVER_SYSTEM_PROMPT,
            )
        except ReasoningServiceError as e:
            logger.warning("Reasoning step failed for %s: %s", field, e)
            return self._fallback(field, pool, ranked, f"reasoning error: {e}")
        except Exception as e:
            logger.exception("Unexpected reasoning failure for %s", field)
            return self._fallback(
                field, pool, ranked, f"reasoning error: {type(e).__name__}: {e}"
            )

        data_point, problem = self._accept_decision(field, decision, pool, ranked)
        if data_point is None:
            logger.warning("Rejected reasoning output for %s: %s", field, problem)
            return self._fallback(field, pool, ranked, f"rejected output: {problem}")

        self._audit.info(
            "field=%s method=reasoning value=%r confidence=%.2f rationale=%s",
            field,
            data_point.value,
            data_point.confidence,
            decision.explanation,
        )
        return FieldResolution(
            field=field,
            data_point=data_point,
            method=ResolutionMethod.REASONING,
            rationale=decision.explanation,
        )

    def _accept_decision(
        self,
        field: str,
        decision: ReasoningDecision,
        pool: list[CandidateValue],
        ranked: list[RankedCandidate],
    ) -> tuple[DataPoint | None, str]:
        """Apply the no-invention guardrail to a schema-valid decision."""
        key = normalize_value(decision.value)
        if not key:
            return None, "empty value"

        known_urls = {c.source_url for c in pool if c.source_url}
        cited = [url for url in decision.source_urls if url in known_urls]

        if field in FREE_TEXT_FIELDS:
            value = truncate_text(str(decision.value), self.config.free_text_max_chars)
            return (
                DataPoint(
                    value=value,
                    confidence=decision.confidence,
                    source_urls=cited or [r.candidate.source_url for r in ranked],
                ),
                "",
            )

        match = next((c for c in pool if normalize_value(c.value) == key), None)
        if match is None:
            return None, "value not present among candidates"

        return (
            DataPoint(
                value=match.value,
                confidence=decision.confidence,
                source_urls=cited
                or supporting_urls(match.value, ranked, self.config.max_source_urls),
            ),
            "",
        )

    def _fallback(
        self,
        field: str,
        pool: list[CandidateValue],
        ranked: list[RankedCandidate],
        reason: str,
    ) -> FieldResolution:
        best = most_confident(pool)
        degradation = Degradation(kind=FailureKind.RESOLUTION, field=field, detail=reason)

        if best is None:
            return FieldResolution(
                field=field,
                data_point=DataPoint.empty(),
                method=ResolutionMethod.FALLBACK,
                rationale=reason,
                degradations=[degradation],
            )

        self._audit.info(
            "field=%s method=fallback value=%r confidence=%.2f rationale=%s",
            field,
            best.value,
            best.confidence,
            reason,
        )
        return FieldResolution(
            field=field,
            data_point=DataPoint(
                value=best.value,
                confidence=best.confidence,
                source_urls=supporting_urls(
                    best.value, ranked, self.config.max_source_urls
                ),
            ),
            method=ResolutionMethod.FALLBACK,
            rationale=reason,
            degradations=[degradation],
        )
