"""
Engine facade.

Wires the registry, detector, analyzer, calculator and aggregator around one
immutable EngineConfig and exposes the operations integrators call.
"""
from datetime import datetime
from typing import Any, Iterable, Mapping, Sequence

from crawlworth.config import Settings, settings
from crawlworth.content.analyzer import ContentAnalyzer
from crawlworth.content.lookup import ContentLookup
from crawlworth.core.exceptions import ContentLookupError, RecordError
from crawlworth.detection.detector import BotDetector
from crawlworth.detection.registry import SignatureRegistry
from crawlworth.models.config import EngineConfig, engine_config_from_settings
from crawlworth.models.domain import (
    ContentMetadata,
    Detection,
    EnhancedDetection,
    ExternalContentMetadata,
    Valuation,
)
from crawlworth.models.portfolio import PortfolioAnalysis
from crawlworth.portfolio.aggregator import PortfolioAggregator
from crawlworth.portfolio.records import enhanced_detection_from_record
from crawlworth.utils.logging import get_logger
from crawlworth.valuation.calculator import ValueCalculator

logger = get_logger(__name__)


class ValuationEngine:
    """
    Detects AI crawlers and values what they take.

    Components hold no mutable state, so one engine can be shared freely.

    Example:
        >>> engine = ValuationEngine()
        >>> detection = engine.detect("Mozilla/5.0 (compatible; GPTBot/1.0)")
        >>> detection.company
        'OpenAI'
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        content_lookups: Sequence[ContentLookup] = ()
    ):
        """
        Initialize the engine.

        Args:
            config: Engine tables and thresholds (defaults when omitted)
            content_lookups: Optional metadata sources, tried in order
        """
        self.config = config or EngineConfig()
        self.registry = SignatureRegistry(self.config.signatures)
        self.detector = BotDetector(self.registry, self.config)
        self.analyzer = ContentAnalyzer(self.config)
        self.calculator = ValueCalculator(self.config)
        self.aggregator = PortfolioAggregator(self.config)
        self.content_lookups = list(content_lookups)

    @classmethod
    def from_settings(
        cls,
        app_settings: Settings | None = None,
        content_lookups: Sequence[ContentLookup] = ()
    ) -> "ValuationEngine":
        """
        Build an engine from application settings.

        Raises:
            ConfigurationError: If the configured engine tables are invalid
        """
        return cls(engine_config_from_settings(app_settings or settings), content_lookups)

    def detect(self, user_agent: str | None) -> Detection:
        detection = self.detector.analyze(user_agent)
        if detection.is_bot:
            logger.info(
                "bot_detected",
                company=detection.company,
                bot_type=detection.bot_type,
                confidence=detection.confidence,
                risk_level=detection.risk_level.value
            )
        return detection

    def analyze_content(
        self,
        request_uri: str | None,
        external_metadata: ExternalContentMetadata | Mapping[str, Any] | None = None,
        now: datetime | None = None
    ) -> ContentMetadata:
        """
        Classify a requested resource.

        When no metadata is passed in, the configured content lookups are
        consulted; a failing lookup is logged and URL heuristics apply.
        """
        if external_metadata is None and self.content_lookups and request_uri:
            external_metadata = self._lookup(request_uri)
        return self.analyzer.analyze_content(request_uri, external_metadata, now)

    def value_detection(self, detection: Detection, content: ContentMetadata) -> Valuation:
        """
        Value one detection.

        Non-bot detections and unexpected calculator failures both produce a
        zero valuation rather than an exception.
        """
        if not detection.is_bot:
            logger.warning("non_bot_valuation_requested", request_uri=content.request_uri[:100])
            return self.calculator.zero_valuation(content.content_type, reason="not_a_bot")

        try:
            return self.calculator.calculate_content_value(detection, content)
        except Exception as e:
            logger.error(
                "valuation_failed",
                company=detection.company,
                content_type=content.content_type,
                error=str(e),
                error_type=type(e).__name__
            )
            return self.calculator.zero_valuation(content.content_type, reason="valuation_failed")

    def aggregate_portfolio(
        self,
        items: Iterable[EnhancedDetection],
        now: datetime | None = None,
        period_days: int | None = None
    ) -> PortfolioAnalysis:
        return self.aggregator.calculate_portfolio_value(items, now, period_days)

    def process_request(
        self,
        user_agent: str | None,
        request_uri: str | None,
        detected_at: datetime
    ) -> EnhancedDetection | None:
        """
        Detect, classify and value one request.

        Args:
            user_agent: Raw User-Agent header value
            request_uri: Requested path or URL
            detected_at: Time of the request (also the staleness reference)

        Returns:
            EnhancedDetection, or None when the request is not from a bot
        """
        detection = self.detect(user_agent)
        if not detection.is_bot:
            return None

        content = self.analyze_content(request_uri, now=detected_at)
        return EnhancedDetection(
            detection=detection,
            valuation=self.value_detection(detection, content),
            detected_at=detected_at,
            request_uri=request_uri or "",
            content=content,
        )

    def aggregate_records(
        self,
        rows: Iterable[Mapping[str, Any]],
        now: datetime | None = None,
        period_days: int | None = None
    ) -> PortfolioAnalysis:
        """Aggregate stored detection rows, skipping malformed ones."""
        return self.aggregate_portfolio(self._iter_records(rows), now, period_days)

    def _iter_records(self, rows: Iterable[Mapping[str, Any]]) -> Iterable[EnhancedDetection]:
        for index, row in enumerate(rows):
            try:
                yield enhanced_detection_from_record(row)
            except RecordError as e:
                logger.warning("record_skipped", row_index=index, error=str(e))

    def _lookup(self, request_uri: str) -> ExternalContentMetadata | None:
        primary, *fallbacks = self.content_lookups
        try:
            return primary.lookup_with_fallback(request_uri, fallbacks)
        except ContentLookupError as e:
            logger.warning("content_lookup_failed", request_uri=request_uri[:100], error=str(e))
            return None
