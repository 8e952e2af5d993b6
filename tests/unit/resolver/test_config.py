"""Tests for ResolverConfig."""

import pytest


class TestResolverConfigDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        from src.resolver.config import DEFAULT_SOURCE_WEIGHTS, ResolverConfig

        config = ResolverConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.source_weights == DEFAULT_SOURCE_WEIGHTS
        assert config.tie_margin == 0.05
        assert config.max_source_urls == 3
        assert config.free_text_max_chars == 280
        assert config.reasoning_enabled is True
        assert config.llm_max_retries == 0

    def test_first_party_outranks_directory(self):
        from src.resolver.config import DEFAULT_SOURCE_WEIGHTS

        order = ["first_party", "vendor", "press", "social", "directory"]
        weights = [DEFAULT_SOURCE_WEIGHTS[name] for name in order]

        assert weights == sorted(weights, reverse=True)


class TestSourceWeightOverrides:
    """Test source_weights parsing and validation."""

    def test_overrides_merge_over_defaults(self):
        from src.resolver.config import ResolverConfig

        config = ResolverConfig(_env_file=None, source_weights={"press": 0.95})  # type: ignore[call-arg]

        assert config.source_weights["press"] == 0.95
        assert config.source_weights["vendor"] == 0.9

    def test_reads_json_from_environment(self, monkeypatch):
        from src.resolver.config import ResolverConfig

        monkeypatch.setenv("RESOLVER_SOURCE_WEIGHTS", '{"social": 0.8}')

        config = ResolverConfig(_env_file=None)  # type: ignore[call-arg]

        assert config.source_weights["social"] == 0.8

    def test_rejects_unknown_source_type(self):
        from pydantic import ValidationError

        from src.resolver.config import ResolverConfig

        with pytest.raises(ValidationError):
            ResolverConfig(_env_file=None, source_weights={"tabloid": 0.5})  # type: ignore[call-arg]

    def test_rejects_weight_out_of_range(self):
        from pydantic import ValidationError

        from src.resolver.config import ResolverConfig

        with pytest.raises(ValidationError):
            ResolverConfig(_env_file=None, source_weights={"press": 1.5})  # type: ignore[call-arg]


class TestResolverConfigSingleton:
    """Test get/reset helpers."""

    def test_get_returns_same_instance_until_reset(self):
        from src.resolver.config import get_resolver_config, reset_resolver_config

        first = get_resolver_config()
        assert get_resolver_config() is first

        reset_resolver_config()
        assert get_resolver_config() is not first
