"""
Unit tests for content classification.
Tests URI heuristics, body analysis, external metadata overrides and staleness.
"""
from datetime import datetime

import pytest

from crawlworth.content.analyzer import ContentAnalyzer
from crawlworth.models.domain import (
    ContentMetadata,
    EngagementLevel,
    ExternalContentMetadata,
    SEOLevel,
    TechnicalDepth,
    TemporalValue,
)


@pytest.fixture
def analyzer(config):
    return ContentAnalyzer(config)


RESEARCH_HTML = """
<html>
  <head><title>Crawler study</title><script>var tracking = "algorithm";</script></head>
  <body>
    <h1>Findings from our study</h1>
    <p>Our research used a clear methodology and statistical analysis of the results.
       We found the experiment confirmed the hypothesis.</p>
    <ul><li>Abstract</li><li>Conclusion</li></ul>
    <img src="/chart.png" alt="Results chart">
    <a href="https://example.org/paper">Paper</a>
    <pre><code>def crawl(): pass</code></pre>
  </body>
</html>
"""


class TestUrlHeuristics:
    """Test classification from the request URI alone."""

    def test_plain_article(self, analyzer):
        """Unremarkable paths are general articles with neutral defaults."""
        content = analyzer.analyze_content("/blog/hello-world")

        assert content.content_category == "general"
        assert content.content_type == "article"
        assert content.temporal_value is None
        assert content.quality_score == 50
        assert content.domain_authority == 50
        assert content.word_count == 0
        assert content.analysis_method == "url_only"

    @pytest.mark.parametrize("uri,category,temporal", [
        ("/guides/python-tutorial", "educational", TemporalValue.EVERGREEN),
        ("/news/2025/launch", "news", TemporalValue.CURRENT),
        ("/press/release", "news", TemporalValue.CURRENT),
        ("/research/crawler-study", "academic", TemporalValue.EVERGREEN),
    ])
    def test_category_rules(self, analyzer, uri, category, temporal):
        """Path keywords pick the category and temporal value."""
        content = analyzer.analyze_content(uri)
        assert content.content_category == category
        assert content.temporal_value == temporal

    def test_first_rule_wins(self, analyzer):
        """Tutorial beats news when both keywords appear."""
        content = analyzer.analyze_content("/news/tutorial-roundup")
        assert content.content_category == "educational"

    @pytest.mark.parametrize("uri,content_type", [
        ("/images/photo.JPG", "image"),
        ("/media/clip.mp4", "video"),
        ("/podcast/episode.mp3", "audio"),
        ("/api/v1/items", "data"),
        ("/exports/report.csv", "data"),
        ("/github/project", "code"),
        ("/blog/post.html", "article"),
        ("/data-science-basics", "article"),
    ])
    def test_content_types(self, analyzer, uri, content_type):
        """Extensions and exact path segments select the content type."""
        assert analyzer.analyze_content(uri).content_type == content_type

    def test_image_sets_has_images(self, analyzer):
        """Image URIs are marked as carrying images."""
        assert analyzer.analyze_content("/img/banner.png").has_images is True

    def test_full_url_and_query(self, analyzer):
        """Scheme, host and query string are ignored."""
        content = analyzer.analyze_content("https://example.com/research/paper?ref=feed")
        assert content.content_category == "academic"
        assert content.request_uri == "https://example.com/research/paper?ref=feed"

    def test_characteristics(self, analyzer):
        """Academic and investigative paths carry characteristics."""
        assert "original_research" in analyzer.analyze_content("/research/x").characteristics
        assert "exclusive_content" in analyzer.analyze_content("/exclusive/leak").characteristics

    @pytest.mark.parametrize("uri", [None, "", "::::", "/" * 500])
    def test_malformed_uri(self, analyzer, uri):
        """Empty and malformed URIs yield minimal defaults."""
        content = analyzer.analyze_content(uri)
        assert content.content_type == "article"
        assert content.content_category == "general"


class TestBodyAnalysis:
    """Test analysis of content bodies supplied by a lookup."""

    def test_research_body(self, analyzer):
        """Research vocabulary, structure and code raise quality and depth."""
        body = analyzer.analyze_body(RESEARCH_HTML)

        assert body["word_count"] > 20
        assert body["quality_score"] > 70
        assert body["has_images"] is True
        assert "original_research" in body["characteristics"]
        assert "multimedia_rich" in body["characteristics"]
        assert body["technical_depth"] in (TechnicalDepth.INTERMEDIATE, TechnicalDepth.ADVANCED)

    def test_scripts_are_ignored(self, analyzer):
        """Script text does not count as words."""
        body = analyzer.analyze_body("<p>two words</p><script>one two three four</script>")
        assert body["word_count"] == 2

    def test_quality_capped(self, analyzer):
        """Quality never exceeds 100."""
        text = " ".join(["study research analysis methodology findings algorithm"] * 1200)
        assert analyzer.analyze_body(f"<h2>T</h2><p>{text}</p>")["quality_score"] == 100

    def test_body_drives_metadata(self, analyzer):
        """A body switches analysis to content mode with a read time."""
        content = analyzer.analyze_content("/post", {"content": RESEARCH_HTML})

        assert content.analysis_method == "content"
        assert content.word_count > 0
        assert content.estimated_read_time == 1


class TestExternalMetadata:
    """Test collaborator metadata overriding heuristics."""

    def test_fields_override(self, analyzer):
        """Present external fields replace heuristic values."""
        external = ExternalContentMetadata(
            title="Deep dive",
            word_count=2400,
            quality_score=90,
            domain_authority=80,
            content_type="code",
        )
        content = analyzer.analyze_content("/blog/post", external)

        assert content.title == "Deep dive"
        assert content.word_count == 2400
        assert content.estimated_read_time == 12
        assert content.quality_score == 90
        assert content.domain_authority == 80
        assert content.content_type == "code"

    def test_categories_use_rules(self, analyzer):
        """CMS categories run through the same category rules."""
        content = analyzer.analyze_content("/p/123", {"categories": ["Research Papers"]})
        assert content.content_category == "academic"
        assert content.temporal_value == TemporalValue.EVERGREEN

    def test_invalid_external_ignored(self, analyzer):
        """Malformed metadata falls back to URI heuristics."""
        content = analyzer.analyze_content("/guides/setup", {"quality_score": 500})
        assert content.quality_score == 50
        assert content.content_category == "educational"

    def test_stale_content(self, analyzer):
        """Old non-evergreen content becomes stale."""
        content = analyzer.analyze_content(
            "/news/old-story",
            {"publish_date": "2020-01-01T00:00:00"},
            now=datetime(2025, 1, 1),
        )
        assert content.temporal_value == TemporalValue.STALE

    def test_evergreen_never_stale(self, analyzer):
        """Evergreen content keeps its value regardless of age."""
        content = analyzer.analyze_content(
            "/guides/setup",
            {"publish_date": "2015-01-01T00:00:00+00:00"},
            now=datetime(2025, 1, 1),
        )
        assert content.temporal_value == TemporalValue.EVERGREEN

    def test_age_ignored_without_now(self, analyzer):
        """Without a reference time age is not evaluated."""
        content = analyzer.analyze_content("/news/old", {"publish_date": "2000-01-01T00:00:00"})
        assert content.temporal_value == TemporalValue.CURRENT


class TestSeoAndEngagement:
    """Test SEO optimization and engagement scoring."""

    def test_url_only_defaults(self, analyzer):
        """Without metadata a page is basic with low engagement."""
        content = analyzer.analyze_content("/blog/hello-world")

        assert content.seo_optimization == SEOLevel.BASIC
        assert content.engagement_potential == EngagementLevel.LOW

    def test_optimized(self, analyzer):
        """A well-sized title plus enough words is optimized."""
        content = analyzer.analyze_content("/p/1", {
            "title": "How AI crawlers read your site in 2025",
            "word_count": 1200,
        })
        assert content.seo_optimization == SEOLevel.OPTIMIZED

    def test_taxonomy_and_excerpt(self, analyzer):
        """Tags and an excerpt alone fall short of optimized."""
        content = analyzer.analyze_content("/p/1", {"tags": ["ai"], "excerpt": "Short summary"})
        assert content.seo_optimization == SEOLevel.BASIC

    def test_title_too_long(self, analyzer):
        """Titles over sixty characters earn nothing."""
        content = analyzer.analyze_content("/p/1", {
            "title": "x" * 61,
            "word_count": 500,
            "excerpt": "Summary",
        })
        assert content.seo_optimization == SEOLevel.BASIC

    def test_research_body_engagement(self, analyzer):
        """Headings, lists and images give medium engagement."""
        content = analyzer.analyze_content("/research/x", {"content": RESEARCH_HTML})
        assert content.engagement_potential == EngagementLevel.MEDIUM

    def test_interactive_body(self, analyzer):
        """Video, forms and comments give high engagement."""
        body = (
            "<h2>Watch</h2><video src='/clip.mp4'></video>"
            "<form><textarea name='comment'></textarea></form>"
        )
        assert analyzer.analyze_body(body)["engagement_potential"] == EngagementLevel.HIGH

    def test_plain_text_body(self, analyzer):
        """Unstructured text has low engagement."""
        assert analyzer.analyze_body("just some words")["engagement_potential"] == EngagementLevel.LOW


class TestSummary:
    """Test the analysis roll-up."""

    def test_summarize(self, analyzer):
        """Summary counts types, quality tiers and research content."""
        summary = analyzer.summarize([
            ContentMetadata(content_type="article", quality_score=90, characteristics=["original_research"]),
            ContentMetadata(content_type="article", quality_score=60, technical_depth=TechnicalDepth.EXPERT),
            ContentMetadata(content_type="image", quality_score=30),
        ])

        assert summary.total_analyzed == 3
        assert summary.content_types == {"article": 2, "image": 1}
        assert summary.avg_quality_score == 60.0
        assert summary.high_value_content == 1
        assert summary.technical_content == 1
        assert summary.research_content == 1

    def test_summarize_empty(self, analyzer):
        """Empty input gives an empty summary."""
        assert analyzer.summarize([]).total_analyzed == 0
