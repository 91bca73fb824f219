"""
Licensing market reference data.

Traditional licensing benchmarks (stock imagery, music, academic publishing,
news syndication) and what is publicly known about each AI company's
licensing activity. Used to explain valuations, not to compute them.
"""
from decimal import Decimal
from typing import Any, Iterable, Mapping

from crawlworth.models.config import ReferenceMarket
from crawlworth.models.portfolio import LicensingRecommendation


TIER_1_COMPANIES = ("OpenAI", "Google", "Anthropic", "Meta")
TIER_2_COMPANIES = ("Apple", "Amazon", "Perplexity", "ByteDance/TikTok", "Cohere", "Microsoft")

MARKET_POSITIONS = {
    "OpenAI": "ChatGPT commercial leader, premium licensing rates",
    "Anthropic": "Claude enterprise focus, high-value use cases",
    "Google": "Largest search/AI revenue, Gemini training",
    "Meta": "Llama models, social media integration",
    "Microsoft": "Copilot and Azure AI distribution",
    "Perplexity": "AI search engine, growing user base",
    "Apple": "iOS AI features, premium market",
    "Amazon": "Alexa, AWS AI services",
    "Cohere": "Enterprise AI, B2B focus",
    "ByteDance/TikTok": "TikTok AI, global reach",
    "Common Crawl": "Non-profit, research dataset",
}
UNKNOWN_MARKET_POSITION = "Unknown commercial intent"

LICENSING_PRECEDENTS = {
    "OpenAI": "Associated Press deal, multiple publisher agreements",
    "Google": "News licensing deals, YouTube creator payments",
    "Meta": "Music licensing, news partnerships",
    "Anthropic": "Ethical data sourcing commitments",
}

CONTENT_DEMAND = {
    "article": "Very High - Core training data for language models",
    "image": "High - Visual AI training and multimodal models",
    "video": "Growing - Video AI and multimedia training",
    "audio": "Moderate - Voice and audio AI applications",
    "code": "High - Code generation and programming AI",
    "data": "High - Structured data for AI training",
}

COMPARABLE_DEALS = {
    "news": {
        "AP + OpenAI": "Multi-year news content licensing deal",
        "Axel Springer + OpenAI": "Business Insider content licensing",
        "Reuters + Multiple": "Professional news syndication",
    },
    "academic": {
        "Taylor & Francis + Microsoft": "$10M academic content deal",
        "Wiley + Undisclosed": "$23M academic publishing deal",
        "Nature + Various": "Premium academic content licensing",
    },
}

# Portfolio value thresholds (USD) for recommendation tiers
ENTERPRISE_THRESHOLD = Decimal("50000")
SUBSCRIPTION_THRESHOLD = Decimal("10000")
CONSULTATION_THRESHOLD = Decimal("10000")
DOCUMENTATION_THRESHOLD = Decimal("1000")
BULK_CANDIDATE_COUNT = 10


def company_tier(company: str | None) -> str:
    if company in TIER_1_COMPANIES:
        return "Tier 1 - Major AI Companies"
    if company in TIER_2_COMPANIES:
        return "Tier 2 - Commercial AI Companies"
    return "Tier 3 - Emerging/Unknown"


def market_position_label(value: Decimal, market: ReferenceMarket) -> str:
    """Position a per-access value against one market's range."""
    if value < market.low:
        return "below market"
    if value > market.high:
        return "premium"
    return "at market"


def compare_to_markets(
    value: Decimal,
    markets: Mapping[str, ReferenceMarket]
) -> dict[str, str]:
    """Map each reference market to the position of `value` within it."""
    return {
        name: market_position_label(value, market)
        for name, market in markets.items()
    }


def build_market_context(
    company: str | None,
    content_type: str,
    content_category: str,
    markets: Mapping[str, ReferenceMarket]
) -> dict[str, Any]:
    """Descriptive context that travels with a valuation."""
    return {
        "company_tier": company_tier(company),
        "market_position": MARKET_POSITIONS.get(company or "", UNKNOWN_MARKET_POSITION),
        "content_demand": CONTENT_DEMAND.get(content_type, "Moderate"),
        "licensing_precedent": LICENSING_PRECEDENTS.get(company or "", "Limited public precedent"),
        "comparable_rates": {name: market.label for name, market in markets.items()},
        "comparable_deals": comparable_deals(content_category),
    }


def comparable_deals(content_category: str) -> dict[str, str]:
    """Public licensing deals comparable to a content category."""
    return dict(COMPARABLE_DEALS.get(content_category, {}))


def portfolio_recommendations(total_value: Decimal, licensing_candidates: int) -> list[str]:
    recommendations = []

    if total_value > CONSULTATION_THRESHOLD:
        recommendations.append(
            "High-value portfolio - Consider professional licensing consultation"
        )
    if licensing_candidates > BULK_CANDIDATE_COUNT:
        recommendations.append(
            "Multiple licensing opportunities - Explore bulk licensing deals"
        )
    if total_value > DOCUMENTATION_THRESHOLD:
        recommendations.append(
            "Significant content value - Document all AI bot activity for licensing negotiations"
        )
    recommendations.append(
        "Keep logging AI crawler activity to build evidence for licensing discussions"
    )
    return recommendations


def licensing_recommendations(
    portfolio_value: Decimal,
    rate_keys: Iterable[str]
) -> list[LicensingRecommendation]:
    """
    Licensing routes suited to a portfolio of the given size and mix.

    Args:
        portfolio_value: Total detected value
        rate_keys: Market-rate keys present in the portfolio (e.g. "academic")
    """
    recommendations = []

    if portfolio_value > ENTERPRISE_THRESHOLD:
        recommendations.append(LicensingRecommendation(
            type="enterprise_licensing",
            description="Pursue direct enterprise licensing deals",
            next_steps="Contact AI companies directly or through a licensing platform",
            estimated_value=(portfolio_value * Decimal("0.25")).quantize(Decimal("0.01")),
        ))

    if portfolio_value > SUBSCRIPTION_THRESHOLD:
        recommendations.append(LicensingRecommendation(
            type="subscription_model",
            description="Offer subscription access to the content portfolio",
            next_steps="Set up content licensing platform",
            estimated_value=(portfolio_value * Decimal("0.15") / 12).quantize(Decimal("0.01")),
        ))

    if "academic" in set(rate_keys):
        recommendations.append(LicensingRecommendation(
            type="academic_premium",
            description="Premium rates for research content",
            next_steps="Highlight research credentials and citations",
        ))

    return recommendations
