"""Administrative services for poster attribution."""

from poster_attribution.services.catalog import CatalogService, entity_to_dict

__all__ = [
    "CatalogService",
    "entity_to_dict",
]
