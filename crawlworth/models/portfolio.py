"""
Portfolio analysis models.
A PortfolioAnalysis is a view recomputed from the current detection set, never stored.
"""
from decimal import Decimal
from typing import Any
from pydantic import BaseModel, Field

from crawlworth.models.domain import ContentSummary


ZERO = Decimal("0.00")


class RevenueForecast(BaseModel):
    """Trend-based revenue projection plus its licensing-adjusted share."""

    daily_average: Decimal = ZERO
    weekly_projection: Decimal = ZERO
    monthly_projection: Decimal = ZERO
    annual_projection: Decimal = ZERO
    conservative_annual: Decimal = ZERO
    optimistic_annual: Decimal = ZERO
    expected_licensing_revenue: Decimal = ZERO
    growth_rate: float = 0.0
    trend_direction: str = "Insufficient Data"
    peak_season: str = "N/A"
    peak_season_explanation: str = "Not enough data to determine seasonal patterns"
    data_confidence: str = "Low"
    days_of_data: int = 0
    licensing_conversion_rate: float = 0.15


class CompanyInsight(BaseModel):
    """How one company's crawlers behave across the portfolio."""

    total_accesses: int = 0
    total_value: Decimal = ZERO
    avg_session_value: Decimal = ZERO
    unique_pages: int = 0
    avg_quality_focus: float = 0.0
    content_type_preference: dict[str, int] = Field(default_factory=dict)
    strategy: str = "General Data Collection"


class PageStats(BaseModel):
    """Value accrued by one accessed page."""

    request_uri: str
    total_value: Decimal = ZERO
    access_count: int = 0
    avg_value_per_access: Decimal = ZERO
    companies: list[str] = Field(default_factory=list)
    content_type: str = "article"


class LicensingRecommendation(BaseModel):
    """Portfolio-level licensing route with an indicative value."""

    type: str
    description: str
    next_steps: str
    estimated_value: Decimal | None = None


class PortfolioAnalysis(BaseModel):
    """Aggregate over an ordered sequence of enhanced detections."""

    total_portfolio_value: Decimal = ZERO
    average_value_per_access: Decimal = ZERO
    detection_count: int = 0
    company_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    content_type_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    top_value_companies: dict[str, Decimal] = Field(default_factory=dict)
    licensing_candidates: int = 0
    estimated_annual_revenue: Decimal = ZERO
    expected_licensing_revenue: Decimal = ZERO
    forecast: RevenueForecast = Field(default_factory=RevenueForecast)
    period_days: int | None = None
    content_summary: ContentSummary = Field(default_factory=ContentSummary)

    # Trend series
    daily_values: dict[str, Decimal] = Field(default_factory=dict)
    seasonal_patterns: dict[str, Decimal] = Field(default_factory=dict)
    hourly_activity: dict[int, int] = Field(default_factory=dict)

    company_insights: dict[str, CompanyInsight] = Field(default_factory=dict)
    top_pages: list[PageStats] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    licensing_recommendations: list[LicensingRecommendation] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
