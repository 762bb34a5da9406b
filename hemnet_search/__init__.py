"""Structured Hemnet listing search: location lookup, query building, fetching and extraction."""

__version__ = "2.0.0"
