"""Poster attribution: entity resolution, enrichment and attribution for a poster catalog."""

__version__ = "0.1.0"
