"""
Example usage of the crawler valuation engine.
Runs the sample crawler traffic through the engine and prints the results.
"""
import json
from datetime import datetime

from crawlworth.core.engine import ValuationEngine
from crawlworth.core.exceptions import ConfigurationError
from crawlworth.samples import sample_detections
from crawlworth.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def show_detections(detections):
    """Print one line per valued detection."""
    print("\n=== Sample Detections ===\n")
    for item in detections:
        print(f"{item.company:<15} {item.request_uri:<40} ${item.valuation.estimated_value}")
        print(f"  Licensing: {item.valuation.licensing_potential.potential.value} - "
              f"{item.valuation.licensing_potential.recommendation}")
    print()


def show_portfolio(engine, detections, now):
    """Print the portfolio analysis as JSON."""
    print("=== Portfolio ===\n")
    analysis = engine.aggregate_portfolio(detections, now=now)
    print(json.dumps(analysis.model_dump(mode="json"), indent=2))
    print()


def main():
    """Run the demo."""
    setup_logging(force=True)

    print("=" * 60)
    print("AI Crawler Valuation Engine - Demo")
    print("=" * 60)

    try:
        engine = ValuationEngine.from_settings()
    except ConfigurationError as e:
        logger.error("engine_config_invalid", error=str(e))
        print(f"Configuration error: {e}")
        return

    now = datetime.now()
    detections = sample_detections(engine, now)

    show_detections(detections)
    show_portfolio(engine, detections, now)

    print("=" * 60)
    print("Demo complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
