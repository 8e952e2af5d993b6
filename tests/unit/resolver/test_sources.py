"""Tests for source classification."""

import pytest


class TestClassifySource:
    """Test classify_source."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://techcrunch.com/2024/01/acme-raises", "press"),
            ("https://www.forbes.com/profile/ada", "press"),
            ("https://api.clearbit.com/v2/people", "vendor"),
            ("https://api.example.com/enrich", "vendor"),
            ("https://www.linkedin.com/in/ada", "social"),
            ("https://github.com/ada", "social"),
            ("https://crunchbase-clone.example/ada", "directory"),
        ],
    )
    def test_known_domains(self, url, expected):
        from src.resolver.sources import classify_source

        assert classify_source(url).value == expected

    def test_company_domain_is_first_party(self):
        from src.resolver.sources import classify_source

        assert classify_source("https://blog.acme.io/team", "https://acme.io").value == "first_party"

    def test_missing_url_is_directory(self):
        from src.resolver.models import SourceType
        from src.resolver.sources import classify_source

        assert classify_source(None) == SourceType.DIRECTORY
        assert classify_source("") == SourceType.DIRECTORY


class TestUrlHelpers:
    """Test url_domain, email_domain and link_slot."""

    def test_url_domain_strips_www_and_accepts_bare_hosts(self):
        from src.resolver.sources import url_domain

        assert url_domain("https://www.Example.com/a") == "example.com"
        assert url_domain("example.com/path") == "example.com"

    def test_email_domain(self):
        from src.resolver.sources import email_domain

        assert email_domain("Ada@Acme.IO") == "acme.io"
        assert email_domain("not-an-email") == ""

    @pytest.mark.parametrize(
        "url,slot",
        [
            ("https://linkedin.com/in/ada", "linkedin"),
            ("https://uk.linkedin.com/in/ada", "linkedin"),
            ("https://x.com/ada", "x"),
            ("https://twitter.com/ada", "x"),
            ("https://github.com/ada", "github"),
            ("https://netflix.com/ada", None),
        ],
    )
    def test_link_slot(self, url, slot):
        from src.resolver.sources import link_slot

        assert link_slot(url) == slot
