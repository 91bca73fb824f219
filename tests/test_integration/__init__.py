"""
Integration tests for the crawler valuation engine.

These tests run requests and stored rows through the full
detect -> analyze -> value -> aggregate pipeline.
"""
