"""Utility modules for poster attribution."""

from poster_attribution.utils.names import (
    clean_display_name,
    dedupe_names,
    extract_root_domain,
    normalize_name,
    require_name,
)

__all__ = [
    "clean_display_name",
    "dedupe_names",
    "extract_root_domain",
    "normalize_name",
    "require_name",
]
