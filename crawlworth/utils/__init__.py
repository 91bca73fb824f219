"""
Utility modules for the crawler valuation engine.
"""
from crawlworth.utils.logging import get_logger
from crawlworth.utils.records import (
    coerce_bool,
    parse_json_column,
    safe_get_field,
)

__all__ = [
    "get_logger",
    "parse_json_column",
    "safe_get_field",
    "coerce_bool",
]
