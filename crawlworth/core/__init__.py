"""
Core engine: facade and exception hierarchy.
"""
