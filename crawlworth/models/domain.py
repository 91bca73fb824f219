"""
Domain models for detections, content metadata and valuations.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from pydantic import BaseModel, Field, ConfigDict


# Enums for structured choices
class RiskLevel(str, Enum):
    """Commercial risk posed by a crawler."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TemporalValue(str, Enum):
    """How long accessed content keeps its reuse value."""
    EVERGREEN = "evergreen"
    CURRENT = "current"
    STALE = "stale"


class LicensingTier(str, Enum):
    """Strength of a licensing opportunity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ContentCategory(str, Enum):
    """Known content categories. Fields accept any string."""
    EDUCATIONAL = "educational"
    NEWS = "news"
    ACADEMIC = "academic"
    COMMERCIAL = "commercial"
    GENERAL = "general"


class ContentType(str, Enum):
    """Known content types. Fields accept any string."""
    ARTICLE = "article"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    CODE = "code"
    DATA = "data"


class TechnicalDepth(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SEOLevel(str, Enum):
    BASIC = "basic"
    OPTIMIZED = "optimized"


class EngagementLevel(str, Enum):
    """Interactive and media richness of a page."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Detection
class BotSignature(BaseModel):
    """A known AI crawler: who runs it and the user-agent tokens that identify it."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Registry id, reported as bot_type")
    company: str
    patterns: tuple[str, ...] = Field(description="Case-insensitive substring tokens")
    purpose: str
    risk_level: RiskLevel
    commercial: bool


class SignatureMatch(BaseModel):
    """Registry hit for a single user agent."""
    model_config = ConfigDict(frozen=True)

    company: str
    bot_type: str
    risk_level: RiskLevel
    commercial: bool
    matched_pattern: str
    purpose: str | None = None


class Detection(BaseModel):
    """Result of analyzing one user-agent string."""
    model_config = ConfigDict(frozen=True)

    is_bot: bool = False
    confidence: int = Field(default=0, ge=0, le=100)
    bot_type: str | None = None
    company: str | None = None
    risk_level: RiskLevel = RiskLevel.LOW
    commercial_risk: bool = False
    purpose: str | None = None
    evidence: list[str] = Field(default_factory=list)


# Content
class ExternalContentMetadata(BaseModel):
    """
    Enrichment supplied by a content-lookup collaborator (e.g. a CMS).

    Every field is optional; whatever is present overrides the URI heuristics.
    """
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    content: str | None = Field(default=None, description="HTML or plain-text body")
    excerpt: str | None = None
    publish_date: datetime | None = None
    word_count: int | None = Field(default=None, ge=0)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    has_images: bool | None = None
    content_type: str | None = None
    content_category: str | None = None
    temporal_value: TemporalValue | None = None
    quality_score: int | None = Field(default=None, ge=0, le=100)
    domain_authority: int | None = Field(default=None, ge=0, le=100)


class ContentMetadata(BaseModel):
    """Describes the resource a crawler accessed."""
    model_config = ConfigDict(frozen=True)

    request_uri: str = ""
    content_category: str = ContentCategory.GENERAL.value
    content_type: str = ContentType.ARTICLE.value
    quality_score: int = Field(default=50, ge=0, le=100)
    word_count: int = Field(default=0, ge=0)
    has_images: bool = False
    temporal_value: TemporalValue | None = None
    domain_authority: int = Field(default=50, ge=0, le=100)
    publish_date: datetime | None = None

    title: str | None = None
    technical_depth: TechnicalDepth = TechnicalDepth.BASIC
    characteristics: list[str] = Field(default_factory=list)
    seo_optimization: SEOLevel = SEOLevel.BASIC
    engagement_potential: EngagementLevel = EngagementLevel.LOW
    estimated_read_time: int = Field(default=0, ge=0, description="Minutes at 200 wpm")
    analysis_method: str = "url_only"


class ContentSummary(BaseModel):
    """Roll-up of many content analyses for dashboards."""

    total_analyzed: int = 0
    content_types: dict[str, int] = Field(default_factory=dict)
    avg_quality_score: float = 0.0
    high_value_content: int = 0
    technical_content: int = 0
    research_content: int = 0


# Valuation
class LicensingPotential(BaseModel):
    """Licensing tier for one valued access plus the suggested next step."""
    model_config = ConfigDict(frozen=True)

    potential: LicensingTier
    recommendation: str
    estimated_annual_value: Decimal = Field(default=Decimal("0.00"), ge=0)


class Valuation(BaseModel):
    """
    Per-detection valuation.

    breakdown and market maps are open explanation payloads; breakdown always
    carries content_type plus every factor that produced estimated_value.
    """
    model_config = ConfigDict(frozen=True)

    estimated_value: Decimal = Field(default=Decimal("0.00"), ge=0)
    breakdown: dict[str, Any] = Field(default_factory=dict)
    licensing_potential: LicensingPotential
    market_comparison: dict[str, str] = Field(default_factory=dict)
    market_context: dict[str, Any] = Field(default_factory=dict)


class EnhancedDetection(BaseModel):
    """A detection together with its valuation and when it happened."""

    detection: Detection
    valuation: Valuation
    detected_at: datetime
    request_uri: str = ""
    content: ContentMetadata | None = None

    @property
    def company(self) -> str:
        return self.detection.company or "Unknown"

    @property
    def content_type(self) -> str:
        return str(self.valuation.breakdown.get("content_type", ContentType.ARTICLE.value))
