"""
Custom exceptions for the crawler valuation engine.

Only ConfigurationError is meant to escape to callers, and only at startup.
Everything else is caught inside the engine and downgraded to a safe default.
"""


class CrawlWorthError(Exception):
    """Base exception for all engine errors."""
    pass


class ConfigurationError(CrawlWorthError):
    """Engine configuration is invalid or cannot be loaded."""
    pass


class ContentLookupError(CrawlWorthError):
    """Content-lookup collaborator failed to supply metadata."""

    def __init__(self, request_uri: str, message: str, original_error: Exception | None = None):
        self.request_uri = request_uri
        self.original_error = original_error
        super().__init__(f"Content lookup failed for '{request_uri}': {message}")


class RecordError(CrawlWorthError):
    """A stored detection row could not be converted back into a detection."""

    def __init__(self, message: str, record: dict | None = None):
        self.record = record
        super().__init__(message)
