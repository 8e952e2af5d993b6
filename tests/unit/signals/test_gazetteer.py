"""Tests for location tags."""

import pytest


class TestRegionTags:
    """Test region_tags whole-word matching."""

    @pytest.mark.parametrize(
        "location,first",
        [
            ("SF", "san_francisco"),
            ("San Francisco, CA", "san_francisco"),
            ("New York City", "new_york"),
            ("LA", "los_angeles"),
            ("Seattle, WA", "seattle"),
        ],
    )
    def test_known_regions(self, location, first):
        from src.signals.gazetteer import region_tags

        tags = region_tags(location)

        assert tags[0] == first
        assert tags[-1] == "usa"

    @pytest.mark.parametrize("location", ["Atlanta, GA", "Dallas", "Lagos", "", None])
    def test_substrings_do_not_match(self, location):
        from src.signals.gazetteer import region_tags

        assert region_tags(location) == []


class TestGeoTags:
    """Test geo_tags."""

    def test_parts_then_expansion_without_duplicates(self):
        from src.signals.gazetteer import geo_tags

        assert geo_tags("New York, NY") == ["new_york", "ny", "nyc", "east_coast", "usa"]

    def test_unknown_location_keeps_parts(self):
        from src.signals.gazetteer import geo_tags

        assert geo_tags("Berlin, Germany") == ["berlin", "germany"]

    def test_empty_location(self):
        from src.signals.gazetteer import geo_tags

        assert geo_tags(None) == []
        assert geo_tags("") == []
