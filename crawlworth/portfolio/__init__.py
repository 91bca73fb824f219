"""
Portfolio aggregation and stored-row conversion.
"""
from crawlworth.portfolio.aggregator import PortfolioAggregator
from crawlworth.portfolio.records import (
    enhanced_detection_from_record,
    enhanced_detection_to_record,
)

__all__ = [
    "PortfolioAggregator",
    "enhanced_detection_from_record",
    "enhanced_detection_to_record",
]
