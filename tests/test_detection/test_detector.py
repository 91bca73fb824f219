"""
Unit tests for bot detection.
Covers signature matches, heuristic scoring and the non-bot default.
"""
import pytest

from crawlworth.detection.detector import UNKNOWN_BOT_TYPE, BotDetector
from crawlworth.detection.registry import SignatureRegistry
from crawlworth.models.config import EngineConfig
from crawlworth.models.domain import Detection, RiskLevel


DEFAULT_PATTERNS = [
    (signature.company, pattern)
    for signature in EngineConfig().signatures
    for pattern in signature.patterns
]


@pytest.fixture
def detector(config):
    return BotDetector(SignatureRegistry(config.signatures), config)


class TestSignatureDetection:
    """Test detection of known crawlers."""

    @pytest.mark.parametrize("company,pattern", DEFAULT_PATTERNS, ids=[p for _, p in DEFAULT_PATTERNS])
    def test_every_known_pattern(self, detector, company, pattern):
        """Every pattern in the default table is a confident hit for its company."""
        detection = detector.analyze(f"Mozilla/5.0 (compatible; {pattern}/1.0)")

        assert detection.is_bot is True
        assert detection.company == company
        assert detection.confidence == 95

    def test_gptbot(self, detector):
        """GPTBot is a high-risk commercial OpenAI crawler."""
        detection = detector.analyze("Mozilla/5.0 (compatible; GPTBot/1.0; +https://openai.com/gptbot)")

        assert detection.is_bot is True
        assert detection.company == "OpenAI"
        assert detection.bot_type == "OpenAI"
        assert detection.confidence == 95
        assert detection.risk_level == RiskLevel.HIGH
        assert detection.commercial_risk is True
        assert detection.evidence == ["User Agent matches GPTBot"]

    @pytest.mark.parametrize("user_agent", ["ClaudeBot/1.0", "Google-Extended/1.0", "Amazonbot/0.1"])
    def test_known_patterns_confidence(self, detector, user_agent):
        """Every signature hit reports the signature confidence."""
        detection = detector.analyze(user_agent)
        assert detection.is_bot is True
        assert detection.confidence == 95

    def test_signature_beats_browser_tokens(self, detector):
        """A signature inside a browser-like agent is still a bot."""
        detection = detector.analyze("Mozilla/5.0 AppleWebKit Chrome/120 Safari ClaudeBot/1.0")
        assert detection.company == "Anthropic"


class TestHeuristicDetection:
    """Test suspicion scoring for unknown agents."""

    def test_unknown_scraper(self, detector):
        """Two indicators plus no browser tokens score 85, medium risk."""
        detection = detector.analyze("SomeScraperBot/2.0")

        assert detection.is_bot is True
        assert detection.bot_type == UNKNOWN_BOT_TYPE
        assert detection.company is None
        assert detection.confidence == 85
        assert detection.risk_level == RiskLevel.MEDIUM
        assert detection.commercial_risk is False
        assert "No typical browser identifiers" in detection.evidence

    def test_curl_is_not_a_bot(self, detector):
        """No indicators and no browser tokens score 25, under the threshold."""
        assert detector.analyze("curl/7.68.0") == Detection()

    def test_indicator_with_browser_tokens(self, detector):
        """A single indicator inside a browser agent stays under the threshold."""
        detection = detector.analyze("Mozilla/5.0 (compatible; Googlebot/2.1)")
        assert detection.is_bot is False

    def test_single_indicator_without_browser(self, detector):
        """30 + 25 = 55 crosses the threshold with low risk."""
        detection = detector.analyze("my-crawler/1.0")

        assert detection.is_bot is True
        assert detection.confidence == 55
        assert detection.risk_level == RiskLevel.LOW

    def test_confidence_is_capped(self, detector):
        """Scores above the cap report the cap."""
        detection = detector.analyze("bot crawler spider scraper fetch")
        assert detection.confidence == 85

    @pytest.mark.parametrize("user_agent", [
        None,
        "",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ])
    def test_no_signal(self, detector, user_agent):
        """Empty and ordinary browser agents are not bots."""
        detection = detector.analyze(user_agent)
        assert detection.is_bot is False
        assert detection.confidence == 0
        assert detection.evidence == []

    def test_custom_weights(self):
        """Heuristic weights and threshold come from configuration."""
        config = EngineConfig(bot_score_threshold=20)
        detector = BotDetector(SignatureRegistry(config.signatures), config)
        assert detector.analyze("curl/7.68.0").is_bot is True


class TestDeterminism:
    """Test that analysis is a pure function of its input."""

    def test_same_input_same_output(self, detector):
        """Repeated analysis gives equal detections."""
        user_agent = "SomeScraperBot/2.0"
        assert detector.analyze(user_agent) == detector.analyze(user_agent)
