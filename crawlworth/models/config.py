"""
Engine configuration: signature table, heuristic word lists, market rates,
multiplier bands and thresholds.

Built once at startup and injected into every component. Operators tune the
numbers through a JSON file or keyword overrides without touching core logic.
"""
import json
from decimal import Decimal
from pathlib import Path
from typing import Any
from pydantic import BaseModel, Field, ConfigDict, ValidationError, model_validator

from crawlworth.core.exceptions import ConfigurationError
from crawlworth.models.domain import BotSignature, RiskLevel, TemporalValue


class RateBand(BaseModel):
    """Per-access base rate range for one content type (USD)."""
    model_config = ConfigDict(frozen=True)

    low: Decimal = Field(ge=0)
    mid: Decimal = Field(ge=0)
    high: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> "RateBand":
        if not (self.low <= self.mid <= self.high):
            raise ValueError(f"rate band must satisfy low <= mid <= high, got {self.low}/{self.mid}/{self.high}")
        return self


class MultiplierBand(BaseModel):
    """Linear multiplier that is neutral (x1.0) at `baseline` and clamped to [floor, ceiling]."""
    model_config = ConfigDict(frozen=True)

    baseline: float = Field(default=50.0, gt=0)
    floor: float = Field(default=0.5, ge=0)
    ceiling: float = Field(default=2.0, ge=0)


class CategoryRule(BaseModel):
    """Trigger substrings that classify a URI path into a category."""
    model_config = ConfigDict(frozen=True)

    triggers: tuple[str, ...]
    category: str
    temporal_value: TemporalValue | None = None


class ReferenceMarket(BaseModel):
    """A traditional licensing market used to position per-access values."""
    model_config = ConfigDict(frozen=True)

    label: str
    low: Decimal = Field(ge=0)
    high: Decimal = Field(ge=0)


def _default_signatures() -> tuple[BotSignature, ...]:
    # Order is priority: the first company whose pattern matches wins.
    return (
        BotSignature(
            key="OpenAI", company="OpenAI",
            patterns=("GPTBot", "ChatGPT-User", "OAI-SearchBot"),
            purpose="LLM Training & Chat Browsing", risk_level=RiskLevel.HIGH, commercial=True,
        ),
        BotSignature(
            key="Anthropic", company="Anthropic",
            patterns=("ClaudeBot", "anthropic-ai", "Claude-Web", "Claude-SearchBot", "Claude-User"),
            purpose="Claude Training Data", risk_level=RiskLevel.HIGH, commercial=True,
        ),
        BotSignature(
            key="Google", company="Google",
            patterns=("Google-Extended", "Google-CloudVertexBot", "GoogleOther"),
            purpose="Gemini & Vertex AI Training", risk_level=RiskLevel.HIGH, commercial=True,
        ),
        BotSignature(
            key="Meta", company="Meta",
            patterns=("Meta-ExternalAgent", "Meta-ExternalFetcher", "FacebookBot"),
            purpose="AI Model Training", risk_level=RiskLevel.HIGH, commercial=True,
        ),
        BotSignature(
            key="Microsoft", company="Microsoft",
            patterns=("Microsoft-Bing", "BingBot-Extended", "MSN-Bot"),
            purpose="Copilot & Azure AI", risk_level=RiskLevel.HIGH, commercial=True,
        ),
        BotSignature(
            key="CommonCrawl", company="Common Crawl",
            patterns=("CCBot",),
            purpose="Dataset for AI Training", risk_level=RiskLevel.HIGH, commercial=False,
        ),
        BotSignature(
            key="Perplexity", company="Perplexity",
            patterns=("PerplexityBot", "Perplexity-User"),
            purpose="AI Search Engine", risk_level=RiskLevel.MEDIUM, commercial=True,
        ),
        BotSignature(
            key="Apple", company="Apple",
            patterns=("Applebot", "Applebot-Extended"),
            purpose="AI Features Training", risk_level=RiskLevel.MEDIUM, commercial=True,
        ),
        BotSignature(
            key="ByteDance", company="ByteDance/TikTok",
            patterns=("Bytespider",),
            purpose="AI Model Training", risk_level=RiskLevel.MEDIUM, commercial=True,
        ),
        BotSignature(
            key="Amazon", company="Amazon",
            patterns=("Amazonbot",),
            purpose="Alexa & AI Services", risk_level=RiskLevel.MEDIUM, commercial=True,
        ),
        BotSignature(
            key="Cohere", company="Cohere",
            patterns=("cohere-ai", "cohere-training-data-crawler"),
            purpose="LLM Training", risk_level=RiskLevel.MEDIUM, commercial=True,
        ),
        BotSignature(
            key="Other", company="Various",
            patterns=("Diffbot", "AI2Bot", "ImagesiftBot", "DuckAssistBot", "Kangaroo Bot", "PanguBot"),
            purpose="Data Scraping & AI Training", risk_level=RiskLevel.LOW, commercial=True,
        ),
    )


def _default_category_rules() -> tuple[CategoryRule, ...]:
    return (
        CategoryRule(triggers=("tutorial", "guide"), category="educational",
                     temporal_value=TemporalValue.EVERGREEN),
        CategoryRule(triggers=("news", "press"), category="news",
                     temporal_value=TemporalValue.CURRENT),
        CategoryRule(triggers=("research", "study"), category="academic",
                     temporal_value=TemporalValue.EVERGREEN),
    )


def _default_market_rates() -> dict[str, RateBand]:
    # Per-access AI licensing rates; academic is used for article content in the academic category.
    return {
        "article": RateBand(low=Decimal("0.50"), mid=Decimal("2.00"), high=Decimal("5.00")),
        "image": RateBand(low=Decimal("0.10"), mid=Decimal("0.75"), high=Decimal("2.00")),
        "video": RateBand(low=Decimal("1.00"), mid=Decimal("5.00"), high=Decimal("20.00")),
        "audio": RateBand(low=Decimal("0.50"), mid=Decimal("3.00"), high=Decimal("10.00")),
        "academic": RateBand(low=Decimal("2.00"), mid=Decimal("8.00"), high=Decimal("50.00")),
        "code": RateBand(low=Decimal("0.50"), mid=Decimal("2.50"), high=Decimal("8.00")),
        "data": RateBand(low=Decimal("0.25"), mid=Decimal("1.50"), high=Decimal("6.00")),
    }


def _default_reference_markets() -> dict[str, ReferenceMarket]:
    return {
        "stock_imagery": ReferenceMarket(
            label="$130-$575 per image", low=Decimal("130"), high=Decimal("575")),
        "music_licensing": ReferenceMarket(
            label="$250-$2,000 annual", low=Decimal("250"), high=Decimal("2000")),
        "academic_publishing": ReferenceMarket(
            label="$20-$60 per article access", low=Decimal("20"), high=Decimal("60")),
        "news_syndication": ReferenceMarket(
            label="$5-$50 per article", low=Decimal("5"), high=Decimal("50")),
    }


class EngineConfig(BaseModel):
    """Immutable configuration shared by detector, analyzer, calculator and aggregator."""
    model_config = ConfigDict(frozen=True)

    # Detection
    signatures: tuple[BotSignature, ...] = Field(default_factory=_default_signatures)
    bot_indicators: tuple[str, ...] = ("bot", "crawler", "spider", "scraper", "fetch")
    browser_indicators: tuple[str, ...] = ("Mozilla", "Chrome", "Safari", "Firefox", "Edge")
    signature_confidence: int = Field(default=95, ge=0, le=100)
    indicator_weight: int = Field(default=30, ge=0)
    no_browser_weight: int = Field(default=25, ge=0)
    bot_score_threshold: int = Field(default=50, ge=0)
    medium_risk_score: int = Field(default=70, ge=0)
    heuristic_confidence_cap: int = Field(default=85, ge=0, le=100)

    # Content analysis
    category_rules: tuple[CategoryRule, ...] = Field(default_factory=_default_category_rules)
    media_extensions: dict[str, tuple[str, ...]] = Field(default_factory=lambda: {
        "image": ("jpg", "jpeg", "png", "gif", "svg", "webp"),
        "video": ("mp4", "avi", "mov", "wmv", "flv", "webm"),
        "audio": ("mp3", "wav", "flac", "aac", "ogg"),
    })
    path_segment_types: dict[str, tuple[str, ...]] = Field(default_factory=lambda: {
        "data": ("api", "data", "json", "xml", "csv"),
        "code": ("code", "github", "programming"),
    })
    stale_after_days: int = Field(default=365, ge=1)

    # Valuation
    market_rates: dict[str, RateBand] = Field(default_factory=_default_market_rates)
    default_content_type: str = "article"
    risk_multipliers: dict[RiskLevel, float] = Field(default_factory=lambda: {
        RiskLevel.LOW: 0.9,
        RiskLevel.MEDIUM: 1.3,
        RiskLevel.HIGH: 1.8,
    })
    commercial_uplift: float = Field(default=2.2, ge=0)
    quality_band: MultiplierBand = Field(default_factory=lambda: MultiplierBand(
        baseline=50.0, floor=0.5, ceiling=2.0))
    authority_band: MultiplierBand = Field(default_factory=lambda: MultiplierBand(
        baseline=50.0, floor=0.75, ceiling=1.5))
    temporal_multipliers: dict[TemporalValue, float] = Field(default_factory=lambda: {
        TemporalValue.EVERGREEN: 1.5,
        TemporalValue.CURRENT: 1.0,
        TemporalValue.STALE: 0.55,
    })
    licensing_medium_threshold: Decimal = Field(default=Decimal("5.00"), ge=0)
    licensing_high_threshold: Decimal = Field(default=Decimal("20.00"), ge=0)
    reference_markets: dict[str, ReferenceMarket] = Field(default_factory=_default_reference_markets)

    # Portfolio
    high_value_threshold: Decimal = Field(default=Decimal("20.00"), ge=0)
    licensing_conversion_rate: float = Field(default=0.15, ge=0, le=1)
    conservative_factor: float = Field(default=0.7, ge=0)
    optimistic_factor: float = Field(default=1.5, ge=0)

    @model_validator(mode="after")
    def _consistent(self) -> "EngineConfig":
        if self.default_content_type not in self.market_rates:
            raise ValueError(f"default content type '{self.default_content_type}' has no market rate")
        if self.licensing_medium_threshold > self.licensing_high_threshold:
            raise ValueError("licensing_medium_threshold must not exceed licensing_high_threshold")
        keys = [s.key for s in self.signatures]
        if len(keys) != len(set(keys)):
            raise ValueError("signature keys must be unique")
        return self


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge mapping overrides into base; non-mapping values replace."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_engine_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None
) -> EngineConfig:
    """
    Build an EngineConfig from defaults, an optional JSON file and keyword overrides.

    Mappings (market_rates, temporal_multipliers, ...) merge key by key, so a
    file only needs to name the entries it changes. Sequences replace wholesale.

    Args:
        path: Optional JSON file with overrides
        overrides: Optional dict applied after the file

    Returns:
        Validated EngineConfig

    Raises:
        ConfigurationError: If the file is missing, not JSON, or fails validation
    """
    data = EngineConfig().model_dump(mode="json")

    if path is not None:
        config_path = Path(path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                file_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read engine config '{config_path}': {e}") from e
        if not isinstance(file_data, dict):
            raise ConfigurationError(f"Engine config '{config_path}' must be a JSON object")
        data = _merge(data, file_data)

    if overrides:
        data = _merge(data, overrides)

    try:
        return EngineConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid engine configuration: {e}") from e


def engine_config_from_settings(app_settings: Any) -> EngineConfig:
    """Load the engine config named by Settings and apply its threshold overrides."""
    return load_engine_config(
        path=app_settings.engine_config_file,
        overrides={
            "high_value_threshold": str(app_settings.high_value_threshold),
            "licensing_medium_threshold": str(app_settings.licensing_medium_threshold),
            "licensing_high_threshold": str(app_settings.licensing_high_threshold),
            "licensing_conversion_rate": app_settings.licensing_conversion_rate,
        }
    )
