"""
Unit tests for content-lookup collaborators.
"""
import pytest

from crawlworth.content.lookup import ContentLookup, StaticContentLookup
from crawlworth.core.exceptions import ContentLookupError
from crawlworth.models.domain import ExternalContentMetadata


class FailingLookup(ContentLookup):
    """Lookup whose backend is down."""

    def lookup(self, request_uri):
        raise ContentLookupError(request_uri, "backend unavailable")


class TestStaticContentLookup:
    """Test the in-memory lookup."""

    def test_lookup_by_path(self):
        """Entries are found by path regardless of host, query or trailing slash."""
        lookup = StaticContentLookup({"/guides/setup/": {"title": "Setup", "word_count": 800}})

        result = lookup.lookup("https://example.com/guides/setup?utm=feed")
        assert isinstance(result, ExternalContentMetadata)
        assert result.title == "Setup"
        assert result.word_count == 800

    def test_unknown_path(self):
        """Unknown paths return None."""
        assert StaticContentLookup({}).lookup("/missing") is None

    def test_invalid_entries_skipped(self):
        """Entries that fail validation are dropped."""
        lookup = StaticContentLookup({
            "/good": {"title": "Good"},
            "/bad": {"word_count": -5},
        })
        assert len(lookup) == 1
        assert lookup.lookup("/bad") is None


class TestLookupWithFallback:
    """Test fallback across sources."""

    def test_primary_hit(self):
        """The primary answer is used when present."""
        primary = StaticContentLookup({"/a": {"title": "primary"}})
        fallback = StaticContentLookup({"/a": {"title": "fallback"}})
        assert primary.lookup_with_fallback("/a", [fallback]).title == "primary"

    def test_fallback_after_failure(self):
        """A failing primary falls through to the next source."""
        fallback = StaticContentLookup({"/a": {"title": "fallback"}})
        assert FailingLookup().lookup_with_fallback("/a", [fallback]).title == "fallback"

    def test_fallback_after_miss(self):
        """A primary miss also falls through."""
        primary = StaticContentLookup({})
        fallback = StaticContentLookup({"/a": {"title": "fallback"}})
        assert primary.lookup_with_fallback("/a", [fallback]).title == "fallback"

    def test_all_missing(self):
        """Misses everywhere return None."""
        assert StaticContentLookup({}).lookup_with_fallback("/a", [FailingLookup()]) is None

    def test_all_failed(self):
        """Failures everywhere raise ContentLookupError."""
        with pytest.raises(ContentLookupError) as exc_info:
            FailingLookup().lookup_with_fallback("/a", [FailingLookup()])
        assert "/a" in str(exc_info.value)
