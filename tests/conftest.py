"""
Shared pytest fixtures for all tests.
Provides the default engine configuration, a fixed clock and builders for
detections and enhanced detections.
"""
from datetime import datetime
from decimal import Decimal

import pytest

from crawlworth.models.config import EngineConfig
from crawlworth.models.domain import (
    ContentMetadata,
    Detection,
    EnhancedDetection,
    LicensingPotential,
    LicensingTier,
    RiskLevel,
    Valuation,
)


@pytest.fixture
def config():
    """Default engine configuration."""
    return EngineConfig()


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def openai_detection():
    """Signature detection for OpenAI's GPTBot."""
    return Detection(
        is_bot=True,
        confidence=95,
        bot_type="OpenAI",
        company="OpenAI",
        risk_level=RiskLevel.HIGH,
        commercial_risk=True,
        evidence=["User Agent matches GPTBot"],
    )


@pytest.fixture
def common_crawl_detection():
    """Signature detection for the non-commercial Common Crawl bot."""
    return Detection(
        is_bot=True,
        confidence=95,
        bot_type="CommonCrawl",
        company="Common Crawl",
        risk_level=RiskLevel.HIGH,
        commercial_risk=False,
    )


@pytest.fixture
def make_item():
    """Factory for EnhancedDetection with just the fields aggregation reads."""

    def _make(
        value: str,
        detected_at: datetime,
        company: str | None = "OpenAI",
        content_type: str = "article",
        request_uri: str = "/article",
        quality: int = 50,
        rate_key: str | None = None,
    ) -> EnhancedDetection:
        breakdown = {"content_type": content_type}
        if rate_key:
            breakdown["rate_key"] = rate_key
        return EnhancedDetection(
            detection=Detection(is_bot=True, confidence=95, company=company, bot_type=company),
            valuation=Valuation(
                estimated_value=Decimal(value),
                breakdown=breakdown,
                licensing_potential=LicensingPotential(
                    potential=LicensingTier.LOW,
                    recommendation="Monitor for patterns",
                ),
            ),
            detected_at=detected_at,
            request_uri=request_uri,
            content=ContentMetadata(
                request_uri=request_uri,
                content_type=content_type,
                quality_score=quality,
            ),
        )

    return _make
