"""
Pydantic models for detections, valuations, portfolios and engine configuration.
"""
