"""
Bot detection from user-agent strings.
Known signatures first, heuristic scoring for everything else.
"""
from crawlworth.detection.registry import SignatureRegistry
from crawlworth.models.config import EngineConfig
from crawlworth.models.domain import Detection, RiskLevel
from crawlworth.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_BOT_TYPE = "Unknown Bot"


class BotDetector:
    """
    Classifies a user agent as an AI crawler or not.

    1. Registry signature match -> confident detection with company metadata
    2. Otherwise a suspicion score from bot-indicator words and the absence
       of browser identifiers; above the threshold it is an unknown bot
    """

    def __init__(self, registry: SignatureRegistry, config: EngineConfig):
        self.registry = registry
        self.config = config
        self._bot_indicators = tuple(i.lower() for i in config.bot_indicators)
        self._browser_indicators = tuple(i.lower() for i in config.browser_indicators)

    def analyze(self, user_agent: str | None) -> Detection:
        """
        Analyze one user-agent string.

        Args:
            user_agent: Raw User-Agent header value (None or empty is allowed)

        Returns:
            Detection (is_bot=False with empty fields when nothing fires)
        """
        match = self.registry.lookup(user_agent)
        if match is not None:
            logger.debug(
                "signature_matched",
                company=match.company,
                pattern=match.matched_pattern
            )
            return Detection(
                is_bot=True,
                confidence=self.config.signature_confidence,
                bot_type=match.bot_type,
                company=match.company,
                risk_level=match.risk_level,
                commercial_risk=match.commercial,
                purpose=match.purpose,
                evidence=[f"User Agent matches {match.matched_pattern}"],
            )

        return self._heuristic_analysis(user_agent or "")

    def _heuristic_analysis(self, user_agent: str) -> Detection:
        """Score an agent no signature recognised."""
        agent = user_agent.lower()
        suspicion_score = 0
        evidence: list[str] = []

        for indicator, lowered in zip(self.config.bot_indicators, self._bot_indicators):
            if lowered and lowered in agent:
                suspicion_score += self.config.indicator_weight
                evidence.append(f"Contains '{indicator}' in user agent")

        has_browser_indicator = any(
            lowered in agent for lowered in self._browser_indicators if lowered
        )
        # Empty agents never count as "missing browser identifiers"
        if not has_browser_indicator and user_agent:
            suspicion_score += self.config.no_browser_weight
            evidence.append("No typical browser identifiers")

        if suspicion_score <= self.config.bot_score_threshold:
            return Detection()

        risk_level = (
            RiskLevel.MEDIUM if suspicion_score > self.config.medium_risk_score
            else RiskLevel.LOW
        )
        logger.debug("heuristic_bot_detected", score=suspicion_score, risk_level=risk_level.value)

        return Detection(
            is_bot=True,
            confidence=min(suspicion_score, self.config.heuristic_confidence_cap),
            bot_type=UNKNOWN_BOT_TYPE,
            risk_level=risk_level,
            commercial_risk=False,
            evidence=evidence,
        )
