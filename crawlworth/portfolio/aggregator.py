"""
Portfolio aggregation.

Rolls an ordered sequence of enhanced detections up into totals, per-company
and per-type breakdowns, trend series, a revenue forecast and licensing
recommendations. Everything is computed in one pass over the input; the
forecast and rankings are derived from the accumulated state afterwards.
"""
import calendar
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable

from crawlworth.content.analyzer import ContentAnalyzer
from crawlworth.models.config import EngineConfig
from crawlworth.models.domain import ContentMetadata, EnhancedDetection
from crawlworth.models.portfolio import (
    CompanyInsight,
    PageStats,
    PortfolioAnalysis,
    RevenueForecast,
)
from crawlworth.utils.logging import get_logger
from crawlworth.valuation import market
from crawlworth.valuation.calculator import ZERO, to_cents

logger = get_logger(__name__)

TOP_COMPANIES = 5
TOP_PAGES = 20
DEFAULT_QUALITY = 50
BROAD_HARVEST_PAGES = 10
PREMIUM_QUALITY_FOCUS = 80
TRAILING_DAYS = 7


def _dec(value: float | int) -> Decimal:
    return Decimal(str(value))


def _is_after(moment: datetime, cutoff: datetime) -> bool:
    # Compare naive with naive when only one side carries a timezone
    if (moment.tzinfo is None) != (cutoff.tzinfo is None):
        moment = moment.replace(tzinfo=None)
        cutoff = cutoff.replace(tzinfo=None)
    return moment > cutoff


@dataclass
class _CompanyTally:
    accesses: int = 0
    value: Decimal = ZERO
    pages: set[str] = field(default_factory=set)
    quality_sum: int = 0
    content_types: Counter = field(default_factory=Counter)


@dataclass
class _PageTally:
    value: Decimal = ZERO
    accesses: int = 0
    companies: list[str] = field(default_factory=list)
    content_type: str = "article"


def trend_label(growth_rate: float) -> str:
    """Describe a growth percentage."""
    if growth_rate > 10:
        return "Strong Growth"
    if growth_rate > 5:
        return "Growing"
    if growth_rate < -10:
        return "Declining"
    if growth_rate < -5:
        return "Slight Decline"
    return "Stable"


def data_confidence(days_of_data: int) -> str:
    if days_of_data >= 30:
        return "High"
    if days_of_data >= 14:
        return "Medium"
    return "Low"


def company_strategy(insight: CompanyInsight, high_value_threshold: Decimal) -> str:
    """Label what a company's crawling pattern appears to target."""
    if insight.avg_quality_focus > PREMIUM_QUALITY_FOCUS:
        return "Premium Content Focus"
    if insight.unique_pages > BROAD_HARVEST_PAGES:
        return "Broad Content Harvesting"
    if insight.avg_session_value > high_value_threshold:
        return "High-Value Targeting"
    return "General Data Collection"


class PortfolioAggregator:
    """Aggregates enhanced detections into a PortfolioAnalysis."""

    def __init__(self, config: EngineConfig):
        self.config = config
        self.analyzer = ContentAnalyzer(config)

    def calculate_portfolio_value(
        self,
        items: Iterable[EnhancedDetection],
        now: datetime | None = None,
        period_days: int | None = None
    ) -> PortfolioAnalysis:
        """
        Aggregate detections into portfolio analytics.

        Args:
            items: Enhanced detections, in any order
            now: Anchor for the trailing forecast windows (defaults to the
                 latest detection) and for the period window
            period_days: Only count detections newer than now - period_days;
                 ignored without `now`

        Returns:
            PortfolioAnalysis; a zeroed analysis for empty input
        """
        cutoff = None
        if period_days is not None:
            if now is None:
                logger.warning("period_window_ignored", period_days=period_days, reason="no_anchor")
                period_days = None
            else:
                cutoff = now - timedelta(days=period_days)

        total = ZERO
        count = 0
        candidates = 0
        company_totals: dict[str, Decimal] = {}
        type_totals: dict[str, Decimal] = {}
        daily: dict[date, Decimal] = {}
        monthly: dict[str, Decimal] = {}
        hourly: Counter = Counter()
        companies: dict[str, _CompanyTally] = {}
        pages: dict[str, _PageTally] = {}
        rate_keys: set[str] = set()
        contents: list[ContentMetadata] = []

        for item in items:
            if cutoff is not None and not _is_after(item.detected_at, cutoff):
                continue

            value = item.valuation.estimated_value
            company = item.company
            content_type = item.content_type
            day = item.detected_at.date()
            month = f"{item.detected_at.month:02d}"
            quality = item.content.quality_score if item.content else DEFAULT_QUALITY

            total += value
            count += 1
            if value > self.config.high_value_threshold:
                candidates += 1

            company_totals[company] = company_totals.get(company, ZERO) + value
            type_totals[content_type] = type_totals.get(content_type, ZERO) + value
            daily[day] = daily.get(day, ZERO) + value
            monthly[month] = monthly.get(month, ZERO) + value
            hourly[item.detected_at.hour] += 1

            rate_key = item.valuation.breakdown.get("rate_key")
            if rate_key:
                rate_keys.add(str(rate_key))

            tally = companies.setdefault(company, _CompanyTally())
            tally.accesses += 1
            tally.value += value
            tally.pages.add(item.request_uri)
            tally.quality_sum += quality
            tally.content_types[content_type] += 1

            page = pages.setdefault(item.request_uri, _PageTally(content_type=content_type))
            page.value += value
            page.accesses += 1
            if company not in page.companies:
                page.companies.append(company)

            contents.append(item.content or self.analyzer.analyze_content(item.request_uri))

        if count == 0:
            logger.info("portfolio_calculated", detection_count=0, total_value="0.00")
            return PortfolioAnalysis(
                period_days=period_days,
                recommendations=market.portfolio_recommendations(ZERO, 0),
                metadata=self._metadata(now, 0),
            )

        forecast = self.forecast_revenue(daily, monthly, now)
        company_insights = {
            name: self._company_insight(tally) for name, tally in companies.items()
        }
        ranked_companies = sorted(company_totals.items(), key=lambda kv: (-kv[1], kv[0]))

        analysis = PortfolioAnalysis(
            total_portfolio_value=total,
            average_value_per_access=to_cents(total / count),
            detection_count=count,
            company_breakdown=company_totals,
            content_type_breakdown=type_totals,
            top_value_companies=dict(ranked_companies[:TOP_COMPANIES]),
            licensing_candidates=candidates,
            estimated_annual_revenue=forecast.annual_projection,
            expected_licensing_revenue=forecast.expected_licensing_revenue,
            forecast=forecast,
            period_days=period_days,
            content_summary=self.analyzer.summarize(contents),
            daily_values={day.isoformat(): amount for day, amount in sorted(daily.items())},
            seasonal_patterns=dict(sorted(monthly.items())),
            hourly_activity=dict(sorted(hourly.items())),
            company_insights=company_insights,
            top_pages=self._top_pages(pages),
            recommendations=market.portfolio_recommendations(total, candidates),
            licensing_recommendations=market.licensing_recommendations(total, rate_keys),
            metadata=self._metadata(now, count),
        )

        logger.info(
            "portfolio_calculated",
            detection_count=count,
            total_value=str(total),
            companies=len(company_totals),
            licensing_candidates=candidates
        )
        return analysis

    def forecast_revenue(
        self,
        daily: dict[date, Decimal],
        monthly: dict[str, Decimal],
        now: datetime | None = None
    ) -> RevenueForecast:
        """
        Project revenue from a daily value series.

        Days without detections count as zero between the first detection
        and the anchor day. Projections extrapolate the trailing-week daily
        average (or the whole series when shorter) adjusted by growth;
        expected_licensing_revenue applies the licensing conversion rate.
        """
        conversion_rate = self.config.licensing_conversion_rate
        if not daily:
            return RevenueForecast(licensing_conversion_rate=conversion_rate)

        first_day = min(daily)
        anchor = max(daily)
        if now is not None:
            anchor = max(anchor, now.date())

        days = (anchor - first_day).days + 1
        series = [daily.get(first_day + timedelta(days=offset), ZERO) for offset in range(days)]
        window = min(TRAILING_DAYS, days)
        daily_average = sum(series[-window:], ZERO) / window

        growth_rate, trend = self._growth(series)

        growth_factor = max(ZERO, 1 + _dec(growth_rate) / 100)
        annual = to_cents(daily_average * 365 * growth_factor)

        peak_season = "N/A"
        explanation = "Not enough data to determine seasonal patterns"
        if len(monthly) >= 3:
            peak_month = max(monthly, key=lambda month: (monthly[month], month))
            peak_season = calendar.month_name[int(peak_month)]
            explanation = f"Highest AI bot activity recorded in {peak_season}"

        return RevenueForecast(
            daily_average=to_cents(daily_average),
            weekly_projection=to_cents(daily_average * 7),
            monthly_projection=to_cents(daily_average * 30),
            annual_projection=annual,
            expected_licensing_revenue=to_cents(annual * _dec(conversion_rate)),
            conservative_annual=to_cents(annual * _dec(self.config.conservative_factor)),
            optimistic_annual=to_cents(annual * _dec(self.config.optimistic_factor)),
            growth_rate=growth_rate,
            trend_direction=trend,
            peak_season=peak_season,
            peak_season_explanation=explanation,
            data_confidence=data_confidence(days),
            days_of_data=days,
            licensing_conversion_rate=conversion_rate,
        )

    @staticmethod
    def _growth(series: list[Decimal]) -> tuple[float, str]:
        """
        Growth rate in percent and a trend label.

        Growth needs two full weeks. With 7-13 days only the label describes
        how the later half compares with the earlier one; the rate stays 0.
        """
        days = len(series)

        if days >= 2 * TRAILING_DAYS:
            recent = sum(series[-TRAILING_DAYS:], ZERO) / TRAILING_DAYS
            previous = sum(series[-2 * TRAILING_DAYS:-TRAILING_DAYS], ZERO) / TRAILING_DAYS
            if previous <= 0:
                return 0.0, "Stable"
            growth_rate = round(float((recent - previous) / previous * 100), 2)
            return growth_rate, trend_label(growth_rate)

        if days >= TRAILING_DAYS:
            half = days // 2
            first = sum(series[:days - half], ZERO) / (days - half)
            second = sum(series[-half:], ZERO) / half
            if second > first * Decimal("1.1"):
                return 0.0, "Growing"
            if second < first * Decimal("0.9"):
                return 0.0, "Declining"
            return 0.0, "Stable"

        return 0.0, "Insufficient Data"

    def _company_insight(self, tally: _CompanyTally) -> CompanyInsight:
        insight = CompanyInsight(
            total_accesses=tally.accesses,
            total_value=tally.value,
            avg_session_value=to_cents(tally.value / tally.accesses),
            unique_pages=len(tally.pages),
            avg_quality_focus=round(tally.quality_sum / tally.accesses, 1),
            content_type_preference=dict(tally.content_types.most_common()),
        )
        insight.strategy = company_strategy(insight, self.config.high_value_threshold)
        return insight

    @staticmethod
    def _top_pages(pages: dict[str, _PageTally]) -> list[PageStats]:
        ranked = sorted(pages.items(), key=lambda kv: (-kv[1].value, kv[0]))[:TOP_PAGES]
        return [
            PageStats(
                request_uri=uri,
                total_value=page.value,
                access_count=page.accesses,
                avg_value_per_access=to_cents(page.value / page.accesses),
                companies=page.companies,
                content_type=page.content_type,
            )
            for uri, page in ranked
        ]

    def _metadata(self, now: datetime | None, count: int) -> dict:
        return {
            "detection_count": count,
            "anchor": now.isoformat() if now else None,
            "high_value_threshold": str(self.config.high_value_threshold),
            "licensing_conversion_rate": self.config.licensing_conversion_rate,
        }
