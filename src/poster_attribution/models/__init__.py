"""Database models for poster attribution."""

from poster_attribution.models.base import Base
from poster_attribution.models.entity import (
    ENTITY_MODELS,
    Artist,
    CanonicalEntity,
    Platform,
    Printer,
    Publisher,
    Seller,
    model_for,
)
from poster_attribution.models.enums import (
    AttributionBasis,
    AttributionOrigin,
    ConfidenceTier,
    EntityKind,
    LinkField,
    LinkStatus,
    MatchedBy,
    PlatformType,
    SellerType,
)
from poster_attribution.models.item import ITEM_LINK_COLUMNS, AttributionLink, InventoryItem

__all__ = [
    "Artist",
    "AttributionBasis",
    "AttributionLink",
    "AttributionOrigin",
    "Base",
    "CanonicalEntity",
    "ConfidenceTier",
    "ENTITY_MODELS",
    "EntityKind",
    "ITEM_LINK_COLUMNS",
    "InventoryItem",
    "LinkField",
    "LinkStatus",
    "MatchedBy",
    "Platform",
    "PlatformType",
    "Printer",
    "Publisher",
    "Seller",
    "SellerType",
    "model_for",
]
