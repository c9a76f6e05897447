"""Attribution of inventory items to canonical entities."""

from poster_attribution.attribution.linker import (
    AttributionLinker,
    EnrichmentRequest,
    FieldOutcome,
    LinkResults,
    tier_score,
)
from poster_attribution.attribution.queue import EnrichmentQueue, EnrichmentStats
from poster_attribution.attribution.schemas import AnalysisResult
from poster_attribution.attribution.service import AttributionService

__all__ = [
    "AnalysisResult",
    "AttributionLinker",
    "AttributionService",
    "EnrichmentQueue",
    "EnrichmentRequest",
    "EnrichmentStats",
    "FieldOutcome",
    "LinkResults",
    "tier_score",
]
