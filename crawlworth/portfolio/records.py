"""
Conversion between stored detection rows and EnhancedDetection.

The persistence collaborator owns storage; it hands rows over as plain
mappings (one column per key) and stores whatever to_record produces.
"""
import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from crawlworth.core.exceptions import RecordError
from crawlworth.models.domain import (
    ContentMetadata,
    Detection,
    EnhancedDetection,
    LicensingPotential,
    LicensingTier,
    RiskLevel,
    TechnicalDepth,
    Valuation,
)
from crawlworth.utils.records import coerce_bool, parse_json_column, safe_get_field


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise RecordError(f"Invalid detected_at '{value}'") from e
    raise RecordError("Record has no detected_at")


def _parse_value(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value if value is not None else "0"))
    except InvalidOperation as e:
        raise RecordError(f"Invalid estimated_value '{value}'") from e
    if not amount.is_finite() or amount < 0:
        raise RecordError(f"estimated_value must be a non-negative amount, got '{value}'")
    return amount


def _enum_or_default(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def enhanced_detection_from_record(row: Mapping[str, Any]) -> EnhancedDetection:
    """
    Rebuild an EnhancedDetection from a stored row.

    Args:
        row: Mapping with the detection columns (company, risk_level,
             confidence, commercial_risk, estimated_value, content_type,
             value_breakdown, market_context, detected_at, ...)

    Returns:
        EnhancedDetection

    Raises:
        RecordError: If detected_at or estimated_value is missing or invalid
    """
    data = dict(row)
    detected_at = _parse_datetime(data.get("detected_at"))
    estimated_value = _parse_value(data.get("estimated_value"))
    request_uri = safe_get_field(data, "request_uri", "", str)

    confidence = _clamp(_as_int(data.get("confidence"), 0), 0, 100)

    detection = Detection(
        is_bot=True,
        confidence=confidence,
        bot_type=safe_get_field(data, "bot_type", None, str),
        company=safe_get_field(data, "company", None, str),
        risk_level=_enum_or_default(RiskLevel, data.get("risk_level"), RiskLevel.LOW),
        commercial_risk=coerce_bool(data.get("commercial_risk")),
    )

    breakdown = parse_json_column(data.get("value_breakdown"), {})
    if not isinstance(breakdown, dict):
        breakdown = {}
    column_type = safe_get_field(data, "content_type", None, str)
    if not breakdown.get("content_type"):
        breakdown["content_type"] = column_type or "article"

    market_context = parse_json_column(data.get("market_context"), {})
    if not isinstance(market_context, dict):
        market_context = {}

    content = ContentMetadata(
        request_uri=request_uri,
        content_type=str(breakdown["content_type"]),
        quality_score=_clamp(_as_int(data.get("content_quality"), 50), 0, 100),
        word_count=max(0, _as_int(data.get("word_count"), 0)),
        technical_depth=_enum_or_default(
            TechnicalDepth, data.get("technical_depth"), TechnicalDepth.BASIC
        ),
    )

    valuation = Valuation(
        estimated_value=estimated_value,
        breakdown=breakdown,
        licensing_potential=LicensingPotential(
            potential=_enum_or_default(LicensingTier, data.get("licensing_potential"), LicensingTier.LOW),
            recommendation="",
        ),
        market_context=market_context,
    )

    return EnhancedDetection(
        detection=detection,
        valuation=valuation,
        detected_at=detected_at,
        request_uri=request_uri,
        content=content,
    )


def enhanced_detection_to_record(item: EnhancedDetection) -> dict[str, Any]:
    """Flatten an EnhancedDetection into storable columns."""
    valuation = item.valuation.model_dump(mode="json")
    content = item.content or ContentMetadata(request_uri=item.request_uri)

    return {
        "request_uri": item.request_uri,
        "bot_type": item.detection.bot_type,
        "company": item.detection.company,
        "risk_level": item.detection.risk_level.value,
        "confidence": item.detection.confidence,
        "commercial_risk": 1 if item.detection.commercial_risk else 0,
        "estimated_value": str(item.valuation.estimated_value),
        "content_type": item.content_type,
        "content_quality": content.quality_score,
        "word_count": content.word_count,
        "technical_depth": content.technical_depth.value,
        "licensing_potential": item.valuation.licensing_potential.potential.value,
        "value_breakdown": json.dumps(valuation["breakdown"]),
        "market_context": json.dumps(valuation["market_context"]),
        "detected_at": item.detected_at.isoformat(sep=" "),
    }
