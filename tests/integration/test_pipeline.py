"""Integration tests for the normalize -> signals -> score flow."""

import pytest


@pytest.fixture
async def pipeline(tmp_path, resolver_config, fixed_now):
    from src.normalizer.service import ProfileNormalizer
    from src.pipeline.service import ProfilePipeline
    from src.resolver.service import FieldResolver
    from src.signals.generator import SignalGenerator
    from src.signals.repository import SignalRepository
    from src.signals.service import SignalService

    repository = SignalRepository(tmp_path / "signals.db")
    await repository.initialize()
    service = SignalService(repository, SignalGenerator(clock=lambda: fixed_now))
    yield ProfilePipeline(ProfileNormalizer(FieldResolver(config=resolver_config)), service)
    await repository.close()


class TestProfilePipeline:
    """End-to-end pipeline runs against a real SQLite store."""

    @pytest.mark.asyncio
    async def test_founder_from_title(self, pipeline, sample_payload):
        result = await pipeline.run(
            "u_ada",
            sample_payload,
            goal_statement="Raise a seed round",
            email_verified=True,
        )

        assert result.normalized.ok
        assert result.member.persona.kind == "founder"
        assert result.member.completion_pct == 100.0

        signals = result.signals
        assert signals.user_id == "u_ada"
        assert signals.primary_intent == "Raise a seed round"
        assert "capital" in signals.demand_tags
        assert signals.geo_tags[:2] == ["san_francisco", "ca"]
        assert set(signals.trust_signals.verified_links) == {"github", "linkedin"}
        assert signals.trust_signals.verified_email is True
        assert signals.embedding_ready_text.startswith(
            "Ada Lovelace | Ada Lovelace - Founder & CEO at Acme | Founder & CEO in San Francisco, CA"
        )

    @pytest.mark.asyncio
    async def test_rerun_keeps_one_record_with_latest_values(self, pipeline, sample_payload):
        await pipeline.run("u_ada", sample_payload, goal_statement="Raise a seed round")
        second = await pipeline.run("u_ada", sample_payload, goal_statement="Hire engineers")

        repository = pipeline.signal_service.repository
        stored = await repository.get_by_user_id("u_ada")

        assert await repository.count() == 1
        assert stored.primary_intent == "Hire engineers"
        assert stored.embedding_ready_text == second.signals.embedding_ready_text

    @pytest.mark.asyncio
    async def test_explicit_persona_and_degraded_profile(self, pipeline):
        result = await pipeline.run(
            "u_min",
            {"email": "min@example.com", "first_name": "Min"},
            persona={"label": "Angel", "aum": "$20M"},
        )

        assert result.normalized.status.value == "degraded"
        assert result.member.persona.kind == "investor"
        assert result.signals.numeric_features.investment_capacity == 20_000_000.0
        assert result.signals.geo_tags == []

    @pytest.mark.asyncio
    async def test_stored_signals_feed_the_scorer(self, pipeline, sample_payload):
        from src.compatibility.models import ScoringSubject
        from src.compatibility.scorer import score_pair

        ada = await pipeline.run("u_ada", sample_payload)
        investor = await pipeline.run(
            "u_vc",
            {
                "email": "vc@harbor.vc",
                "first_name": "Grace",
                "vendor_enrichment": {"title": "Partner", "location": "San Francisco"},
            },
            persona={"kind": "investor", "sectors": ["AI"], "stages": ["Seed"]},
        )

        result = score_pair(
            ScoringSubject.from_signals(ada.signals, title="Founder & CEO"),
            ScoringSubject.from_signals(investor.signals, title="Partner"),
        )

        # capital, funding, san_francisco, bay_area, california, usa are shared
        assert result.score == 80
        assert result.reasons == ["Shared interests or skills", "Complementary backgrounds"]
