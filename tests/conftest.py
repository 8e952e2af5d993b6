"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Give every test fresh config singletons and logging state."""
    from src.config.settings import reset_settings
    from src.resolver.config import reset_resolver_config
    from src.utils.logging import reset_logging

    reset_settings()
    reset_resolver_config()
    reset_logging()
    yield
    reset_settings()
    reset_resolver_config()
    reset_logging()


@pytest.fixture
def resolver_config():
    """Resolver config isolated from the environment, with no throttling."""
    from src.resolver.config import ResolverConfig

    return ResolverConfig(_env_file=None, llm_min_interval_seconds=0.0)  # type: ignore[call-arg]


class FakeReasoningClient:
    """Stands in for ReasoningClient; returns a canned decision or raises."""

    def __init__(self, decision=None, error: Exception | None = None):
        self.decision = decision
        self.error = error
        self.calls: list[dict] = []

    def generate_structured(self, *, prompt, output_model, system_prompt=None):
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt})
        if self.error is not None:
            raise self.error
        if isinstance(self.decision, dict):
            return output_model.model_validate(self.decision)
        return self.decision


@pytest.fixture
def fake_client_factory():
    return FakeReasoningClient


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def sample_payload() -> dict:
    """Normalizer input for a founder with vendor and search data."""
    return {
        "email": "ada@acme.io",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email_domain": "acme.io",
        "company_guess": "Acme",
        "company_site": "https://acme.io",
        "opengraph": {"site_name": "Acme", "url": "https://acme.io"},
        "gravatar": {"avatar_url": "https://gravatar.com/avatar/abc", "name": None},
        "search_snippets": [
            {
                "url": "https://www.linkedin.com/in/ada",
                "title": "Ada Lovelace - Founder & CEO at Acme",
                "snippet": "Founder building analytical engines for fintech.",
            }
        ],
        "vendor_enrichment": {
            "source_url": "https://api.clearbit.com/v2/people/ada",
            "title": "Founder & CEO",
            "company": "Acme",
            "location": "San Francisco, CA",
            "industries": ["FinTech", "AI"],
            "skills": ["Machine Learning", "Python"],
            "github": "https://github.com/ada",
        },
        "event_context": {"event_id": "summit_2025", "event_topics": ["AI", "Networking"]},
    }


@pytest.fixture
def investor_member_data() -> dict:
    """MemberProfile input for an investor with a thesis and a LinkedIn link."""
    return {
        "user_id": "u_grace",
        "profile": {
            "name": {"value": "Grace Hopper", "confidence": 0.95},
            "headline": {"value": "Partner at Harbor Ventures", "confidence": 0.8},
            "geo": {"value": "New York, NY", "confidence": 0.8},
            "links": {"linkedin": "https://www.linkedin.com/in/grace"},
            "industries": ["FinTech", "AI"],
            "skills_keywords": ["Due Diligence"],
        },
        "persona": {
            "label": "Investor",
            "thesis": "Backing infrastructure founders",
            "sectors": ["AI", "Fintech"],
            "stages": ["Seed", "Series A"],
            "aum": "$150M",
            "check_size_min": "$250K",
        },
        "goal_statement": "Meet seed-stage AI founders",
        "email_verified": True,
        "completion_pct": 80,
    }


@pytest.fixture
def investor_member(investor_member_data):
    from src.signals.models import MemberProfile

    return MemberProfile.from_dict(investor_member_data)
