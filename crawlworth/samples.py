"""
Sample crawler traffic for demos and smoke tests.
"""
from datetime import datetime, timedelta

from crawlworth.models.domain import EnhancedDetection

# (user agent, request URI, hours before now)
SAMPLE_REQUESTS = (
    ("Mozilla/5.0 (compatible; GPTBot/1.0; +https://openai.com/gptbot)", "/sample-article-1", 2),
    ("ClaudeBot/1.0", "/guides/python-tutorial", 4),
    ("Google-Extended/1.0", "/research/crawler-licensing-study", 6),
    ("Meta-ExternalAgent/1.0", "/images/product-shot.png", 8),
    ("CCBot/2.0", "/news/press-release", 10),
)


def sample_detections(engine, now: datetime) -> list[EnhancedDetection]:
    """Run the sample requests through an engine."""
    detections = []
    for user_agent, request_uri, hours_ago in SAMPLE_REQUESTS:
        item = engine.process_request(user_agent, request_uri, now - timedelta(hours=hours_ago))
        if item is not None:
            detections.append(item)
    return detections
