"""
Per-detection valuation and licensing market reference data.
"""
from crawlworth.valuation.calculator import ValueCalculator

__all__ = ["ValueCalculator"]
