"""
Content-lookup collaborators.
A lookup supplies enriched metadata (word count, publish date, categories,
body) for a request URI. The engine works without one; defaults apply.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping
from urllib.parse import urlsplit

from pydantic import ValidationError

from crawlworth.core.exceptions import ContentLookupError
from crawlworth.models.domain import ExternalContentMetadata
from crawlworth.utils.logging import get_logger


class ContentLookup(ABC):
    """Abstract base class for all content lookups."""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def lookup(self, request_uri: str) -> ExternalContentMetadata | None:
        """
        Fetch metadata for a request URI.

        Args:
            request_uri: Requested path or URL

        Returns:
            Metadata, or None when the resource is unknown to this source

        Raises:
            ContentLookupError: If the source itself fails
        """
        pass

    def lookup_with_fallback(
        self,
        request_uri: str,
        fallback_sources: list["ContentLookup"]
    ) -> ExternalContentMetadata | None:
        """
        Look up with fallback to alternative sources.

        A source returning None is a valid answer ("unknown here"), so the
        next source is only tried after a failure or a miss.

        Raises:
            ContentLookupError: If every source failed
        """
        failures = 0
        for index, source in enumerate([self, *fallback_sources]):
            try:
                result = source.lookup(request_uri)
            except ContentLookupError as e:
                failures += 1
                self.logger.warning(
                    "content_source_failed",
                    source_index=index,
                    error=str(e)
                )
                continue
            if result is not None:
                return result

        if failures == 1 + len(fallback_sources):
            raise ContentLookupError(request_uri, "All content sources failed")
        return None


class StaticContentLookup(ContentLookup):
    """In-memory lookup keyed by request path, for CMS exports and tests."""

    def __init__(self, entries: Mapping[str, ExternalContentMetadata | dict[str, Any]]):
        super().__init__()
        self._entries: dict[str, ExternalContentMetadata] = {}
        for uri, metadata in entries.items():
            try:
                self._entries[self._key(uri)] = (
                    metadata if isinstance(metadata, ExternalContentMetadata)
                    else ExternalContentMetadata.model_validate(metadata)
                )
            except ValidationError as e:
                self.logger.warning("static_entry_invalid", uri=uri[:100], error=str(e))

    @staticmethod
    def _key(request_uri: str) -> str:
        try:
            path = urlsplit(request_uri).path
        except ValueError:
            path = request_uri
        return (path or "/").rstrip("/") or "/"

    def lookup(self, request_uri: str) -> ExternalContentMetadata | None:
        return self._entries.get(self._key(request_uri))

    def __len__(self) -> int:
        return len(self._entries)
