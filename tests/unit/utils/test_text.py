"""Tests for text helpers."""

import pytest


class TestToSnakeCase:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Machine Learning", "machine_learning"),
            ("  B2B SaaS ", "b2b_saas"),
            ("Co-Founder & CEO", "co_founder_ceo"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_values(self, raw, expected):
        from src.utils.text import to_snake_case

        assert to_snake_case(raw) == expected


class TestNormalizeTags:
    def test_dedupes_after_normalizing(self):
        from src.utils.text import normalize_tags

        assert normalize_tags(["AI", "ai", " Fintech", None, "", "---"]) == ["ai", "fintech"]

    def test_none(self):
        from src.utils.text import normalize_tags

        assert normalize_tags(None) == []


class TestTruncateText:
    def test_short_text_is_stripped_only(self):
        from src.utils.text import truncate_text

        assert truncate_text("  hello  ", 10) == "hello"

    def test_long_text_ends_with_ellipsis(self):
        from src.utils.text import truncate_text

        result = truncate_text("abcdefghij", 5)

        assert result == "abcd…"
        assert len(result) == 5

    def test_trailing_space_before_ellipsis_is_dropped(self):
        from src.utils.text import truncate_text

        assert truncate_text("abc defgh", 5) == "abc…"
