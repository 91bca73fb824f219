"""
Per-detection content valuation.

    estimated_value = base_rate x risk x quality x authority x temporal

The base rate comes from the market-rate table keyed by content type; each
multiplier is computed independently and clamped to its configured band.
All arithmetic is Decimal so portfolio sums stay exact to the cent.
"""
from decimal import Decimal, ROUND_HALF_UP

from crawlworth.models.config import EngineConfig, MultiplierBand
from crawlworth.models.domain import (
    ContentMetadata,
    Detection,
    LicensingPotential,
    LicensingTier,
    TemporalValue,
    Valuation,
)
from crawlworth.utils.logging import get_logger
from crawlworth.valuation import market

logger = get_logger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
ONE = Decimal("1")


def _dec(value: float | int) -> Decimal:
    return Decimal(str(value))


def to_cents(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class ValueCalculator:
    """
    Estimates what one crawler access to one resource is worth.

    Deterministic and total: unknown content types fall back to the default
    rate, missing multipliers to neutral, and the result is never negative.
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    def calculate_content_value(self, detection: Detection, content: ContentMetadata) -> Valuation:
        """
        Value a detection of a bot accessing a resource.

        Args:
            detection: Bot detection (callers only pass is_bot=True detections)
            content: Metadata for the accessed resource

        Returns:
            Valuation with breakdown, licensing potential and market comparison
        """
        rate_key, base_rate = self._base_rate(content)
        risk_multiplier = self._risk_multiplier(detection)
        quality_multiplier = self._band_multiplier(content.quality_score, self.config.quality_band)
        authority_multiplier = self._band_multiplier(content.domain_authority, self.config.authority_band)
        temporal_multiplier = self._temporal_multiplier(content.temporal_value)

        raw_value = (
            base_rate
            * risk_multiplier
            * quality_multiplier
            * authority_multiplier
            * temporal_multiplier
        )
        estimated_value = to_cents(max(raw_value, ZERO))

        logger.debug(
            "content_valued",
            company=detection.company,
            content_type=content.content_type,
            estimated_value=str(estimated_value)
        )

        return Valuation(
            estimated_value=estimated_value,
            breakdown={
                "content_type": content.content_type,
                "rate_key": rate_key,
                "base_rate": base_rate,
                "risk_level": detection.risk_level.value,
                "commercial_risk": detection.commercial_risk,
                "risk_multiplier": float(risk_multiplier),
                "quality_multiplier": float(quality_multiplier),
                "authority_multiplier": float(authority_multiplier),
                "temporal_multiplier": float(temporal_multiplier),
            },
            licensing_potential=self.assess_licensing_potential(estimated_value, detection.company),
            market_comparison=market.compare_to_markets(estimated_value, self.config.reference_markets),
            market_context=market.build_market_context(
                detection.company,
                content.content_type,
                content.content_category,
                self.config.reference_markets
            ),
        )

    def zero_valuation(self, content_type: str | None = None, reason: str | None = None) -> Valuation:
        """Valuation used when nothing should be (or could be) valued."""
        content_type = content_type or self.config.default_content_type
        breakdown = {"content_type": content_type, "base_rate": ZERO}
        if reason:
            breakdown["reason"] = reason
        return Valuation(
            estimated_value=ZERO,
            breakdown=breakdown,
            licensing_potential=LicensingPotential(
                potential=LicensingTier.LOW,
                recommendation="Monitor for patterns",
            ),
        )

    def assess_licensing_potential(self, estimated_value: Decimal, company: str | None) -> LicensingPotential:
        """Tier a value against the configured licensing thresholds."""
        name = company or "this crawler's operator"

        if estimated_value >= self.config.licensing_high_threshold:
            tier = LicensingTier.HIGH
            recommendation = f"Strong candidate for licensing negotiation with {name}"
        elif estimated_value >= self.config.licensing_medium_threshold:
            tier = LicensingTier.MEDIUM
            recommendation = f"Consider bulk licensing for multiple assets accessed by {name}"
        else:
            tier = LicensingTier.LOW
            recommendation = "Monitor for patterns"

        # Higher-value content is accessed less often
        annual_accesses = max(ONE, (estimated_value / 10).quantize(ONE, rounding=ROUND_HALF_UP))

        return LicensingPotential(
            potential=tier,
            recommendation=recommendation,
            estimated_annual_value=to_cents(estimated_value * annual_accesses),
        )

    def _base_rate(self, content: ContentMetadata) -> tuple[str, Decimal]:
        rate_key = content.content_type
        if rate_key == "article" and content.content_category == "academic" and "academic" in self.config.market_rates:
            rate_key = "academic"

        band = self.config.market_rates.get(rate_key)
        if band is None:
            logger.warning(
                "unknown_content_type",
                content_type=rate_key,
                fallback=self.config.default_content_type
            )
            rate_key = self.config.default_content_type
            band = self.config.market_rates[rate_key]

        return rate_key, band.mid

    def _risk_multiplier(self, detection: Detection) -> Decimal:
        multiplier = _dec(self.config.risk_multipliers.get(detection.risk_level, 1.0))
        if detection.commercial_risk:
            multiplier *= _dec(self.config.commercial_uplift)
        return multiplier

    @staticmethod
    def _band_multiplier(score: int, band: MultiplierBand) -> Decimal:
        multiplier = Decimal(score) / _dec(band.baseline)
        return min(max(multiplier, _dec(band.floor)), _dec(band.ceiling))

    def _temporal_multiplier(self, temporal_value: TemporalValue | None) -> Decimal:
        if temporal_value is None:
            return ONE
        return _dec(self.config.temporal_multipliers.get(temporal_value, 1.0))
