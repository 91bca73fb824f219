"""
Content classification for accessed resources.

URI heuristics give every request a category, content type and temporal
value. Richer metadata from a content-lookup collaborator (word count,
publish date, categories, an HTML body) overrides those heuristics field by
field; the heuristics are only the fallback for missing data.
"""
import math
import re
from datetime import datetime
from typing import Any, Iterable
from urllib.parse import urlsplit

from bs4 import BeautifulSoup
from pydantic import ValidationError

from crawlworth.models.config import EngineConfig
from crawlworth.models.domain import (
    ContentMetadata,
    ContentSummary,
    ContentType,
    EngagementLevel,
    ExternalContentMetadata,
    SEOLevel,
    TechnicalDepth,
    TemporalValue,
)
from crawlworth.utils.logging import get_logger

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200

SEO_TITLE_LENGTH = (30, 60)
SEO_MIN_WORDS = 300
SEO_OPTIMIZED_SCORE = 40

RESEARCH_KEYWORDS = (
    "study", "research", "analysis", "methodology", "findings",
    "conclusion", "abstract", "peer-reviewed", "citation", "bibliography",
    "experiment", "hypothesis", "data", "results", "statistical",
)

TECHNICAL_KEYWORDS = (
    "algorithm", "implementation", "architecture", "framework",
    "optimization", "performance", "scalability", "api", "database",
    "security", "encryption", "authentication", "protocol",
)

ADVANCED_TERMS = (
    "algorithm", "implementation", "architecture", "scalability",
    "optimization", "performance", "security", "encryption",
    "machine learning", "artificial intelligence", "neural network",
    "api", "rest", "graphql", "microservices", "containerization",
)

HIGH_VALUE_PATTERNS: dict[str, tuple[re.Pattern, ...]] = {
    "original_research": (
        re.compile(r"\b(our study|our research|we found|we analyzed)\b", re.I),
        re.compile(r"\b(methodology|participants|sample size|statistical significance)\b", re.I),
        re.compile(r"\b(peer.?review|journal|publication|doi:)", re.I),
    ),
    "exclusive_content": (
        re.compile(r"\b(exclusive|first.?time|never.?before|breaking)\b", re.I),
        re.compile(r"\b(interview|investigation|expose|reveal)\b", re.I),
    ),
    "technical_depth": (
        re.compile(r"\b(algorithm|implementation|architecture|framework)\b", re.I),
        re.compile(r"\b(code|programming|development|software)\b", re.I),
        re.compile(r"\b(api|database|server|infrastructure)\b", re.I),
    ),
    "multimedia_rich": (
        re.compile(r"<img[^>]+>", re.I),
        re.compile(r"<video[^>]+>", re.I),
        re.compile(r"<audio[^>]+>", re.I),
        re.compile(r"\b(chart|graph|diagram|infographic)\b", re.I),
    ),
}

_WORD_RE = re.compile(r"[A-Za-z]+(?:['-][A-Za-z]+)*")
_MATH_RE = re.compile(r"\$[^$\n]+\$|\\\[.*?\\\]", re.S)
_HEADING_RE = re.compile(r"^h[1-6]$")
_EXTERNAL_LINK_RE = re.compile(r"^https?://", re.I)


def _request_path(request_uri: str) -> str:
    """Lower-cased path component of a request URI."""
    try:
        path = urlsplit(request_uri).path
    except ValueError:
        path = request_uri
    return (path or request_uri).lower()


def _age_days(now: datetime, published: datetime) -> int:
    # Compare naive with naive when only one side carries a timezone
    if (now.tzinfo is None) != (published.tzinfo is None):
        now = now.replace(tzinfo=None)
        published = published.replace(tzinfo=None)
    return (now - published).days


class ContentAnalyzer:
    """
    Derives ContentMetadata from a request URI and optional external metadata.

    Stateless: the same inputs always give the same metadata.
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    def analyze_content(
        self,
        request_uri: str | None,
        external: ExternalContentMetadata | dict[str, Any] | None = None,
        now: datetime | None = None
    ) -> ContentMetadata:
        """
        Classify the resource behind a request URI.

        Args:
            request_uri: Requested path or URL
            external: Optional collaborator metadata; present fields win
            now: Reference time for staleness; without it age is ignored

        Returns:
            ContentMetadata (minimal defaults for empty or malformed input)
        """
        request_uri = request_uri or ""
        extra = self._coerce_external(external, request_uri)

        url = self.analyze_url(request_uri)
        content_category = url["content_category"]
        temporal_value = url["temporal_value"]
        content_type = url["content_type"]
        has_images = content_type == ContentType.IMAGE.value

        word_count = 0
        quality_score = 50
        technical_depth = TechnicalDepth.BASIC
        engagement = EngagementLevel.LOW
        characteristics = list(url["characteristics"])
        analysis_method = "url_only"

        if extra is not None and extra.content:
            body = self.analyze_body(extra.content)
            word_count = body["word_count"]
            quality_score = body["quality_score"]
            technical_depth = body["technical_depth"]
            has_images = has_images or body["has_images"]
            engagement = body["engagement_potential"]
            characteristics.extend(
                c for c in body["characteristics"] if c not in characteristics
            )
            analysis_method = "content"

        publish_date = None
        title = None
        domain_authority = 50
        seo = SEOLevel.BASIC

        if extra is not None:
            if extra.categories:
                rule = self._match_rule(" ".join(extra.categories).lower())
                if rule is not None:
                    content_category = rule.category
                    temporal_value = rule.temporal_value
            if extra.content_category:
                content_category = extra.content_category
            if extra.temporal_value is not None:
                temporal_value = extra.temporal_value
            if extra.content_type:
                content_type = extra.content_type
            if extra.word_count is not None:
                word_count = extra.word_count
            if extra.quality_score is not None:
                quality_score = extra.quality_score
            if extra.domain_authority is not None:
                domain_authority = extra.domain_authority
            if extra.has_images is not None:
                has_images = extra.has_images
            publish_date = extra.publish_date
            title = extra.title
            seo = self.check_seo(extra, word_count)

        if (
            now is not None
            and publish_date is not None
            and temporal_value != TemporalValue.EVERGREEN
            and _age_days(now, publish_date) > self.config.stale_after_days
        ):
            temporal_value = TemporalValue.STALE

        return ContentMetadata(
            request_uri=request_uri,
            content_category=content_category,
            content_type=content_type,
            quality_score=quality_score,
            word_count=word_count,
            has_images=has_images,
            temporal_value=temporal_value,
            domain_authority=domain_authority,
            publish_date=publish_date,
            title=title,
            technical_depth=technical_depth,
            seo_optimization=seo,
            engagement_potential=engagement,
            characteristics=characteristics,
            estimated_read_time=math.ceil(word_count / WORDS_PER_MINUTE),
            analysis_method=analysis_method,
        )

    def analyze_url(self, request_uri: str) -> dict[str, Any]:
        """
        URI-only heuristics.

        Returns:
            Dict with content_category, temporal_value, content_type, characteristics
        """
        path = _request_path(request_uri)

        rule = self._match_rule(path)
        content_category = rule.category if rule else "general"
        temporal_value = rule.temporal_value if rule else None

        characteristics = []
        if rule is not None and rule.category == "academic":
            characteristics.append("original_research")
        if re.search(r"/(breaking|exclusive|investigation)", path):
            characteristics.append("exclusive_content")

        return {
            "content_category": content_category,
            "temporal_value": temporal_value,
            "content_type": self._classify_type(path),
            "characteristics": characteristics,
        }

    def _match_rule(self, text: str):
        for rule in self.config.category_rules:
            if any(trigger in text for trigger in rule.triggers):
                return rule
        return None

    def _classify_type(self, path: str) -> str:
        last_segment = path.rstrip("/").rsplit("/", 1)[-1]
        extension = last_segment.rsplit(".", 1)[-1] if "." in last_segment else ""

        if extension:
            for content_type, extensions in self.config.media_extensions.items():
                if extension in extensions:
                    return content_type

        segments = [s for s in path.split("/") if s]
        for content_type, names in self.config.path_segment_types.items():
            if extension in names or any(segment in names for segment in segments):
                return content_type

        return ContentType.ARTICLE.value

    def analyze_body(self, body: str) -> dict[str, Any]:
        """
        Measure an HTML or plain-text body.

        Args:
            body: Page content as supplied by the content lookup

        Returns:
            Dict with word_count, quality_score, technical_depth,
            characteristics, has_images, engagement_potential
        """
        soup = BeautifulSoup(body, "lxml")
        for element in soup(["script", "style", "noscript"]):
            element.decompose()

        text = soup.get_text(separator=" ", strip=True)
        text_lower = text.lower()
        word_count = len(_WORD_RE.findall(text))

        # Quality (0-100, base 50)
        score = 50
        score += 3 * sum(1 for keyword in RESEARCH_KEYWORDS if keyword in text_lower)
        score += 2 * sum(1 for keyword in TECHNICAL_KEYWORDS if keyword in text_lower)
        if soup.find(_HEADING_RE):
            score += 5
        if soup.find(["ul", "ol"]):
            score += 3
        if soup.find("img", alt=True):
            score += 4
        external_links = len(soup.find_all("a", href=_EXTERNAL_LINK_RE))
        score += min(external_links * 2, 10)
        if word_count > 1000:
            score += 5
        if word_count > 2000:
            score += 5
        if word_count > 5000:
            score += 10

        # Technical depth
        technical_score = 2 * sum(1 for term in ADVANCED_TERMS if term in text_lower)
        if soup.find(["code", "pre"]) or "```" in body:
            technical_score += 10
        if _MATH_RE.search(body):
            technical_score += 8

        if technical_score >= 20:
            depth = TechnicalDepth.EXPERT
        elif technical_score >= 12:
            depth = TechnicalDepth.ADVANCED
        elif technical_score >= 6:
            depth = TechnicalDepth.INTERMEDIATE
        else:
            depth = TechnicalDepth.BASIC

        characteristics = [
            name for name, patterns in HIGH_VALUE_PATTERNS.items()
            if any(pattern.search(body) for pattern in patterns)
        ]

        return {
            "word_count": word_count,
            "quality_score": min(score, 100),
            "technical_depth": depth,
            "characteristics": characteristics,
            "has_images": soup.find("img") is not None,
            "engagement_potential": self.assess_engagement(body, soup),
        }

    @staticmethod
    def check_seo(extra: ExternalContentMetadata, word_count: int) -> SEOLevel:
        """Score title length, length, taxonomy and excerpt."""
        score = 0
        low, high = SEO_TITLE_LENGTH
        if extra.title and low <= len(extra.title) <= high:
            score += 20
        if word_count >= SEO_MIN_WORDS:
            score += 20
        if extra.categories or extra.tags:
            score += 15
        if extra.excerpt:
            score += 10
        return SEOLevel.OPTIMIZED if score >= SEO_OPTIMIZED_SCORE else SEOLevel.BASIC

    @staticmethod
    def assess_engagement(body: str, soup: BeautifulSoup) -> EngagementLevel:
        """Score interactive elements, media and structure."""
        body_lower = body.lower()
        score = 0
        if "comment" in body_lower:
            score += 10
        if "share" in body_lower:
            score += 10
        if soup.find("form"):
            score += 15
        if soup.find("img"):
            score += 10
        if soup.find("video"):
            score += 20
        if soup.find(_HEADING_RE):
            score += 10
        if soup.find(["ul", "ol"]):
            score += 5

        if score >= 40:
            return EngagementLevel.HIGH
        if score >= 20:
            return EngagementLevel.MEDIUM
        return EngagementLevel.LOW

    def summarize(self, analyses: Iterable[ContentMetadata]) -> ContentSummary:
        """Roll up many analyses for dashboards."""
        summary = ContentSummary()
        total_quality = 0

        for analysis in analyses:
            summary.total_analyzed += 1
            summary.content_types[analysis.content_type] = (
                summary.content_types.get(analysis.content_type, 0) + 1
            )
            total_quality += analysis.quality_score
            if analysis.quality_score >= 80:
                summary.high_value_content += 1
            if analysis.technical_depth in (TechnicalDepth.ADVANCED, TechnicalDepth.EXPERT):
                summary.technical_content += 1
            if "original_research" in analysis.characteristics:
                summary.research_content += 1

        if summary.total_analyzed:
            summary.avg_quality_score = round(total_quality / summary.total_analyzed, 1)
        return summary

    def _coerce_external(
        self,
        external: ExternalContentMetadata | dict[str, Any] | None,
        request_uri: str
    ) -> ExternalContentMetadata | None:
        if external is None or isinstance(external, ExternalContentMetadata):
            return external
        try:
            return ExternalContentMetadata.model_validate(external)
        except ValidationError as e:
            logger.warning(
                "external_metadata_invalid",
                request_uri=request_uri[:100],
                error=str(e)
            )
            return None
