"""
Tests for the stored-row parsing helpers.

These tests verify that parse_json_column recovers structured columns from
the formats persistence layers hand back: decoded objects, JSON strings and
JSON wrapped in stray text.
"""
import pytest

from crawlworth.utils.records import coerce_bool, parse_json_column, safe_get_field


class TestParseJsonColumn:
    """Tests for structured column recovery."""

    def test_decoded_dict(self):
        """Already-decoded dicts are returned as-is."""
        value = {"content_type": "image"}
        assert parse_json_column(value, {}) is value

    def test_clean_json_object(self):
        """Clean JSON object parses directly."""
        assert parse_json_column('{"rate_key": "academic", "base_rate": "8.00"}', {}) == {
            "rate_key": "academic",
            "base_rate": "8.00",
        }

    def test_clean_json_array(self):
        """Clean JSON array parses directly."""
        assert parse_json_column("[1, 2, 3]", []) == [1, 2, 3]

    def test_bytes(self):
        """Byte strings from binary columns are decoded."""
        assert parse_json_column(b'{"a": 1}', {}) == {"a": 1}

    def test_json_with_whitespace(self):
        """Surrounding whitespace is ignored."""
        assert parse_json_column('  \n {"a": 1} \n', {}) == {"a": 1}

    def test_json_with_text_around(self):
        """JSON with text before and after is recovered."""
        value = 'exported: {"company_tier": "Tier 2"} (legacy)'
        assert parse_json_column(value, {}) == {"company_tier": "Tier 2"}

    def test_nested_json(self):
        """Nested objects survive extraction."""
        value = 'row {"comparable_rates": {"news_syndication": "$5-$50"}}'
        assert parse_json_column(value, {})["comparable_rates"]["news_syndication"] == "$5-$50"

    @pytest.mark.parametrize("value", [None, "", "   ", "not json at all", "{broken", 42])
    def test_default_returned(self, value):
        """Unusable values return the default."""
        assert parse_json_column(value, {"fallback": True}) == {"fallback": True}


class TestSafeGetField:
    """Tests for typed field extraction."""

    def test_present_field(self):
        """Present fields of the right type are returned."""
        assert safe_get_field({"company": "OpenAI"}, "company", None, str) == "OpenAI"

    def test_missing_field(self):
        """Missing fields return the default."""
        assert safe_get_field({}, "company", "Unknown") == "Unknown"

    def test_none_value(self):
        """NULL columns return the default."""
        assert safe_get_field({"company": None}, "company", "Unknown", str) == "Unknown"

    def test_wrong_type(self):
        """Wrongly typed values return the default."""
        assert safe_get_field({"confidence": "high"}, "confidence", 0, int) == 0

    def test_multiple_types(self):
        """A tuple of types accepts any of them."""
        assert safe_get_field({"value": 2.5}, "value", 0, (int, float)) == 2.5


class TestCoerceBool:
    """Tests for flag columns."""

    @pytest.mark.parametrize("value,expected", [
        (1, True), (0, False), ("1", True), ("0", False),
        ("true", True), ("False", False), (None, False), (True, True),
    ])
    def test_flags(self, value, expected):
        """Integer and string flags are interpreted."""
        assert coerce_bool(value) is expected
