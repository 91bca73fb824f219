"""
Parsing helpers for stored detection rows.

Persistence collaborators hand back rows as plain mappings. Structured
columns (value breakdowns, market context) may arrive as dicts, as JSON
strings, or as JSON wrapped in stray text from older exports. These helpers
recover the structure without ever raising.
"""
import json
import re
from typing import Any


def parse_json_column(value: Any, default: dict[str, Any] | list[Any]) -> dict[str, Any] | list[Any]:
    """
    Recover a JSON object or array from a stored column.

    Handles:
    - Already-decoded dicts and lists (returned as-is)
    - Clean JSON strings
    - JSON with extra text before/after

    Args:
        value: Raw column value
        default: Returned when nothing usable is found

    Returns:
        Parsed JSON or default

    Examples:
        >>> parse_json_column('{"content_type": "image"}', {})
        {'content_type': 'image'}
        >>> parse_json_column(None, {})
        {}
    """
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str) or not value.strip():
        return default

    try:
        return json.loads(value.strip())
    except json.JSONDecodeError:
        pass

    # Match from first { to last } (or [ to ])
    for pattern in (r'\{[\s\S]*\}', r'\[[\s\S]*\]'):
        match = re.search(pattern, value)
        if match:
            try:
                return json.loads(match.group().strip())
            except json.JSONDecodeError:
                continue

    return default


def safe_get_field(
    data: dict[str, Any],
    field: str,
    default: Any = None,
    expected_type: type | tuple[type, ...] | None = None
) -> Any:
    """
    Safely extract a field from a row with type validation.

    Examples:
        >>> safe_get_field({"confidence": 95}, "confidence", 0, int)
        95
        >>> safe_get_field({"confidence": "high"}, "confidence", 0, int)
        0
    """
    value = data.get(field, default)

    if value is None:
        return default

    if expected_type is not None and value is not default:
        if not isinstance(value, expected_type):
            return default

    return value


def coerce_bool(value: Any) -> bool:
    """Interpret tinyint / string flags from SQL rows."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return bool(value)
