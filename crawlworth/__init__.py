"""
crawlworth: AI crawler detection and content valuation.

Detects AI training crawlers from user-agent strings, estimates what each
access to a resource is worth in licensing terms, and rolls detections up
into portfolio analytics.
"""
from crawlworth.core.engine import ValuationEngine
from crawlworth.core.exceptions import (
    ConfigurationError,
    ContentLookupError,
    CrawlWorthError,
    RecordError,
)
from crawlworth.models.config import EngineConfig, load_engine_config
from crawlworth.models.domain import (
    ContentMetadata,
    Detection,
    EnhancedDetection,
    Valuation,
)
from crawlworth.models.portfolio import PortfolioAnalysis, RevenueForecast

__version__ = "0.1.0"

__all__ = [
    "ValuationEngine",
    "EngineConfig",
    "load_engine_config",
    "Detection",
    "ContentMetadata",
    "Valuation",
    "EnhancedDetection",
    "PortfolioAnalysis",
    "RevenueForecast",
    "CrawlWorthError",
    "ConfigurationError",
    "ContentLookupError",
    "RecordError",
]
