"""
Content classification and metadata lookups.
"""
from crawlworth.content.analyzer import ContentAnalyzer
from crawlworth.content.lookup import ContentLookup, StaticContentLookup

__all__ = ["ContentAnalyzer", "ContentLookup", "StaticContentLookup"]
