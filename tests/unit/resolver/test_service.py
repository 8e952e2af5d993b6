"""Tests for FieldResolver."""

import logging

import pytest


def _candidate(value, source_type="vendor", confidence=0.8, url=""):
    from src.resolver.models import CandidateValue

    return CandidateValue(
        value=value, source_type=source_type, confidence=confidence, source_url=url
    )


class TestTrivialCases:
    """Zero and one candidate."""

    def test_no_candidates_returns_empty_point(self, resolver_config):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve("bio", [])

        assert resolution.data_point.value is None
        assert resolution.data_point.confidence == 0.0
        assert resolution.method == ResolutionMethod.EMPTY

    def test_none_candidates_is_treated_as_empty(self, resolver_config):
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve("bio", None)

        assert resolution.data_point.value is None

    def test_single_candidate_passes_through_unchanged(self, resolver_config):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        only = _candidate("Ada Lovelace", "directory", 0.37, "https://dir.example/ada")

        resolution = FieldResolver(config=resolver_config).resolve("name", [only])

        assert resolution.data_point.value == "Ada Lovelace"
        assert resolution.data_point.confidence == 0.37
        assert resolution.data_point.source_urls == ["https://dir.example/ada"]
        assert resolution.method == ResolutionMethod.PASSTHROUGH
        assert resolution.degradations == []

    def test_accepts_raw_mappings(self, resolver_config):
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve(
            "name",
            [{"value": "Ada", "confidence": 0.9, "source_url": "u", "source_type": "vendor"}],
        )

        assert resolution.data_point.value == "Ada"

    def test_malformed_candidate_is_dropped_with_degradation(self, resolver_config):
        from src.resolver.service import FieldResolver
        from src.utils.outcome import FailureKind

        resolution = FieldResolver(config=resolver_config).resolve(
            "name",
            [{"value": "Ada", "confidence": "very"}, _candidate("Ada L.", "vendor", 0.5)],
        )

        assert resolution.data_point.value == "Ada L."
        assert resolution.degradations[0].kind == FailureKind.COLLECTION


class TestPreference:
    """Deterministic source preference."""

    def test_prefers_first_party_over_social(self, resolver_config):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve(
            "current_role.company",
            [
                _candidate("Acme Inc", "social", 0.9, "https://linkedin.com/in/ada"),
                _candidate("Acme", "first_party", 0.9, "https://acme.io"),
            ],
        )

        assert resolution.data_point.value == "Acme"
        assert resolution.data_point.confidence == 0.9
        assert resolution.data_point.source_urls == ["https://acme.io"]
        assert resolution.method == ResolutionMethod.PREFERENCE

    def test_agreeing_candidates_contribute_urls(self, resolver_config):
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve(
            "geo",
            [
                _candidate("Austin, TX", "social", 0.7, "https://x.com/ada"),
                _candidate("austin, tx", "vendor", 0.9, "https://api.clearbit.com/ada"),
                _candidate("Boston", "directory", 0.4, "https://dir.example"),
            ],
        )

        assert resolution.data_point.value == "austin, tx"
        assert resolution.data_point.source_urls == [
            "https://api.clearbit.com/ada",
            "https://x.com/ada",
        ]

    def test_near_tie_without_client_uses_preference(self, resolver_config):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        resolution = FieldResolver(config=resolver_config).resolve(
            "name", [_candidate("Ada"), _candidate("Ada King")]
        )

        assert resolution.data_point.value == "Ada"
        assert resolution.method == ResolutionMethod.PREFERENCE

    def test_clear_winner_never_calls_reasoning(self, resolver_config, fake_client_factory):
        from src.resolver.service import FieldResolver

        client = fake_client_factory(error=AssertionError("should not be called"))

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "name",
            [_candidate("Ada", "first_party", 0.9), _candidate("Bob", "directory", 0.9)],
        )

        assert resolution.data_point.value == "Ada"
        assert client.calls == []

    @pytest.mark.parametrize("count", [0, 1, 2, 5])
    def test_confidence_always_in_range(self, resolver_config, count):
        from src.resolver.service import FieldResolver

        candidates = [
            {"value": f"v{i}", "confidence": 3.0 - i, "source_type": "press"} for i in range(count)
        ]

        resolution = FieldResolver(config=resolver_config).resolve("headline", candidates)

        assert 0.0 <= resolution.data_point.confidence <= 1.0


class TestReasoningPath:
    """Near-ties delegated to the reasoning service."""

    def test_valid_decision_is_used_and_audited(
        self, resolver_config, fake_client_factory, caplog
    ):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        client = fake_client_factory(
            decision={
                "value": "Ada King",
                "confidence": 0.85,
                "source_urls": ["https://b.example", "https://invented.example"],
                "explanation": "married name is more recent",
            }
        )

        with caplog.at_level(logging.INFO, logger="signal_fuse.audit"):
            resolution = FieldResolver(config=resolver_config, client=client).resolve(
                "name",
                [
                    _candidate("Ada Lovelace", url="https://a.example"),
                    _candidate("Ada King", url="https://b.example"),
                ],
            )

        assert resolution.method == ResolutionMethod.REASONING
        assert resolution.data_point.value == "Ada King"
        assert resolution.data_point.confidence == 0.85
        assert resolution.data_point.source_urls == ["https://b.example"]
        assert resolution.rationale == "married name is more recent"
        assert len(client.calls) == 1
        assert "married name is more recent" in caplog.text

    def test_identity_field_rejects_invented_value(self, resolver_config, fake_client_factory):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver
        from src.utils.outcome import FailureKind

        client = fake_client_factory(
            decision={"value": "Augusta Ada King-Noel", "confidence": 0.99, "source_urls": []}
        )

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "name",
            [_candidate("Ada Lovelace", confidence=0.8), _candidate("Ada King", confidence=0.79)],
        )

        assert resolution.method == ResolutionMethod.FALLBACK
        assert resolution.data_point.value == "Ada Lovelace"
        assert resolution.degradations[0].kind == FailureKind.RESOLUTION

    def test_chosen_value_uses_candidate_spelling(self, resolver_config, fake_client_factory):
        from src.resolver.service import FieldResolver

        client = fake_client_factory(decision={"value": "ada king", "confidence": 0.7})

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "name", [_candidate("Ada Lovelace"), _candidate("Ada King")]
        )

        assert resolution.data_point.value == "Ada King"

    def test_free_text_may_be_summarised_within_limit(
        self, resolver_config, fake_client_factory
    ):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        config = resolver_config.model_copy(update={"free_text_max_chars": 40})
        summary = "Mathematician and writer who pioneered computing programs. " * 3
        client = fake_client_factory(decision={"value": summary, "confidence": 0.6})

        resolution = FieldResolver(config=config, client=client).resolve(
            "bio",
            [
                _candidate("Mathematician.", url="https://a"),
                _candidate("Wrote the first program.", url="https://b"),
            ],
        )

        assert resolution.method == ResolutionMethod.REASONING
        assert len(resolution.data_point.value) <= 40
        assert resolution.data_point.value.endswith("…")
        assert resolution.data_point.source_urls == ["https://a", "https://b"]

    def test_service_error_falls_back_to_most_confident(
        self, resolver_config, fake_client_factory
    ):
        from src.resolver.llm import ReasoningServiceError
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        client = fake_client_factory(error=ReasoningServiceError("timed out"))

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "headline",
            [
                _candidate("Builder", "vendor", 0.80, "https://v1"),
                _candidate("Engineer", "first_party", 0.72, "https://site"),
                _candidate("Founder", "press", 0.95, "https://press"),
            ],
        )

        assert resolution.method == ResolutionMethod.FALLBACK
        assert resolution.data_point.value == "Founder"
        assert resolution.data_point.confidence == 0.95
        assert "timed out" in resolution.rationale

    def test_fallback_ties_go_to_earliest_candidate(self, resolver_config, fake_client_factory):
        from src.resolver.llm import ReasoningServiceError
        from src.resolver.service import FieldResolver

        client = fake_client_factory(error=ReasoningServiceError("boom"))

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "name", [_candidate("First", confidence=0.8), _candidate("Second", confidence=0.8)]
        )

        assert resolution.data_point.value == "First"

    def test_unexpected_client_error_falls_back(self, resolver_config, fake_client_factory):
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        client = fake_client_factory(error=RuntimeError("boom"))

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "current_role.company",
            [_candidate("Acme", url="https://v1"), _candidate("Acme Corp", url="https://v2")],
        )

        assert resolution.method == ResolutionMethod.FALLBACK
        assert resolution.data_point.value == "Acme"
        assert "RuntimeError: boom" in resolution.rationale
        assert resolution.degradations[0].kind.value == "resolution"

    def test_malformed_completion_envelope_falls_back(self, resolver_config, monkeypatch):
        from types import SimpleNamespace

        from src.resolver.llm import ReasoningClient
        from src.resolver.models import ResolutionMethod
        from src.resolver.service import FieldResolver

        client = ReasoningClient(config=resolver_config)
        monkeypatch.setattr(
            client,
            "_call_completion",
            lambda *, messages, response_format: SimpleNamespace(choices=[]),  # noqa: ARG005
        )

        resolution = FieldResolver(config=resolver_config, client=client).resolve(
            "current_role.company",
            [_candidate("Acme", url="https://v1"), _candidate("Acme Corp", url="https://v2")],
        )

        assert resolution.method == ResolutionMethod.FALLBACK
        assert resolution.data_point.value == "Acme"
        assert "malformed response" in resolution.rationale

    def test_reasoning_disabled_skips_client(self, resolver_config, fake_client_factory):
        from src.resolver.service import FieldResolver

        config = resolver_config.model_copy(update={"reasoning_enabled": False})
        client = fake_client_factory(error=AssertionError("should not be called"))

        FieldResolver(config=config, client=client).resolve(
            "name", [_candidate("Ada"), _candidate("Ada King")]
        )

        assert client.calls == []
