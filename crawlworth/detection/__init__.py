"""
Crawler detection: signature registry and heuristic scoring.
"""
from crawlworth.detection.detector import BotDetector
from crawlworth.detection.registry import SignatureRegistry

__all__ = ["BotDetector", "SignatureRegistry"]
