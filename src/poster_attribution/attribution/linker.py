"""Apply analysis or dealer-research attribution to an inventory item.

For each of artist / printer / publisher:
1. Resolve-or-create the proposed name (inside its own savepoint)
2. Replace the item's link for that field: entity id, confidence score,
   attribution basis, source description
3. Queue an enrichment request if the entity was newly created

A failure on one field rolls back that field's savepoint only and is
reported as ``failed``; the other fields still link. Fields the analysis
does not mention are ``skipped`` and keep their existing link.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.attribution.schemas import AnalysisResult
from poster_attribution.config import settings
from poster_attribution.errors import ConflictError, StorageError
from poster_attribution.models.entity import CanonicalEntity
from poster_attribution.models.enums import (
    AttributionBasis,
    AttributionOrigin,
    ConfidenceTier,
    EntityKind,
    LinkField,
    LinkStatus,
)
from poster_attribution.models.item import AttributionLink, InventoryItem
from poster_attribution.resolution.alias_merge import AliasMergeEngine
from poster_attribution.utils.names import clean_display_name

logger = logging.getLogger(__name__)

# Basis used when the analysis does not state one
DEFAULT_BASIS: dict[LinkField, AttributionBasis] = {
    LinkField.ARTIST: AttributionBasis.STYLISTIC_ANALYSIS,
    LinkField.PRINTER: AttributionBasis.PRINTED_CREDIT,
    LinkField.PUBLISHER: AttributionBasis.PRINTED_CREDIT,
}


def tier_score(tier: ConfidenceTier) -> int:
    """Numeric confidence (0-100) for a categorical tier."""
    return {
        ConfidenceTier.CONFIRMED: settings.score_confirmed,
        ConfidenceTier.LIKELY: settings.score_likely,
        ConfidenceTier.UNCERTAIN: settings.score_uncertain,
        ConfidenceTier.UNKNOWN: settings.score_unknown,
    }[ConfidenceTier(tier)]


@dataclass
class EnrichmentRequest:
    """A newly created entity that should be enriched after commit."""

    kind: EntityKind
    entity_id: UUID
    name: str
    source_url: str | None = None


@dataclass
class FieldOutcome:
    field: LinkField
    status: LinkStatus
    entity_id: UUID | None = None
    created: bool = False
    confidence_score: int | None = None
    error: str | None = None


@dataclass
class LinkResults:
    """Per-field outcomes of one attribution run."""

    item_id: UUID
    outcomes: list[FieldOutcome] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    enrichment_requests: list[EnrichmentRequest] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    def outcome(self, link_field: LinkField) -> FieldOutcome | None:
        for outcome in self.outcomes:
            if outcome.field == link_field:
                return outcome
        return None

    @property
    def linked(self) -> list[LinkField]:
        return [o.field for o in self.outcomes if o.status == LinkStatus.LINKED]

    @property
    def failed(self) -> list[LinkField]:
        return [o.field for o in self.outcomes if o.status == LinkStatus.FAILED]


class AttributionLinker:
    """Resolve proposed names and write attribution links onto items.

    Usage:
        linker = AttributionLinker(session)
        results = await linker.apply_analysis_attribution(item, analysis)
        await session.commit()
        # then hand results.enrichment_requests to an EnrichmentQueue

    The linker never commits.
    """

    def __init__(self, session: AsyncSession, *, engine: AliasMergeEngine | None = None) -> None:
        self._session = session
        self._engine = engine or AliasMergeEngine(session)

    async def apply_analysis_attribution(
        self,
        item: InventoryItem,
        analysis: AnalysisResult,
        *,
        origin: AttributionOrigin = AttributionOrigin.ANALYSIS,
    ) -> LinkResults:
        """Link an item's artist, printer and publisher from one analysis.

        Args:
            item: The item to update (attached to this session).
            analysis: Proposed names, tiers and provenance.
            origin: Who proposed the names; dealer research always records
                ``external_research`` as the basis.

        Returns:
            LinkResults with one outcome per field, in artist/printer/publisher order.
        """
        item_id = item.id
        results = LinkResults(item_id=item_id)

        for link_field in LinkField:
            name = clean_display_name(analysis.name_for(link_field))
            if not name:
                results.outcomes.append(FieldOutcome(field=link_field, status=LinkStatus.SKIPPED))
                continue

            try:
                async with self._session.begin_nested():
                    outcome = await self._engine.resolve_or_create(link_field.kind, name)
                    link = self._build_link(link_field, outcome.entity, name, analysis, origin)
                    item.set_link(link_field, link)
            except (StorageError, ConflictError, SQLAlchemyError) as e:
                logger.error("[LINK] %s %r on item %s failed: %s", link_field.value, name, item_id, e)
                results.outcomes.append(
                    FieldOutcome(field=link_field, status=LinkStatus.FAILED, error=str(e))
                )
                continue

            results.outcomes.append(
                FieldOutcome(
                    field=link_field,
                    status=LinkStatus.LINKED,
                    entity_id=outcome.entity.id,
                    created=outcome.created,
                    confidence_score=link.confidence_score,
                )
            )
            if outcome.created:
                results.enrichment_requests.append(
                    EnrichmentRequest(
                        kind=link_field.kind,
                        entity_id=outcome.entity.id,
                        name=outcome.entity.name,
                        source_url=analysis.source_url_for(link_field),
                    )
                )
            logger.info(
                "[LINK] item %s %s -> %r (score %d, %s)",
                item_id,
                link_field.value,
                outcome.entity.name,
                link.confidence_score,
                link.attribution_basis.value,
            )

        return results

    async def link_acquisition(
        self,
        item: InventoryItem,
        *,
        seller: str | None = None,
        seller_website: str | None = None,
        platform: str | None = None,
        platform_identity: str | None = None,
    ) -> list[EnrichmentRequest]:
        """Resolve-or-create the seller and platform and link them to the item.

        Returns enrichment requests for any entities that were created.
        """
        requests: list[EnrichmentRequest] = []

        if clean_display_name(seller):
            seller_entity, created = await self._resolve_acquisition(
                EntityKind.SELLER, seller, website=seller_website
            )
            item.seller_id = seller_entity.id
            if created:
                requests.append(
                    EnrichmentRequest(EntityKind.SELLER, seller_entity.id, seller_entity.name)
                )

        if clean_display_name(platform):
            platform_entity, created = await self._resolve_acquisition(EntityKind.PLATFORM, platform)
            item.platform_id = platform_entity.id
            if created:
                requests.append(
                    EnrichmentRequest(EntityKind.PLATFORM, platform_entity.id, platform_entity.name)
                )

        if platform_identity is not None:
            item.platform_identity = clean_display_name(platform_identity) or None

        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to link acquisition for item {item.id}: {e}") from e
        return requests

    async def _resolve_acquisition(
        self,
        kind: EntityKind,
        name: str | None,
        *,
        website: str | None = None,
    ) -> tuple[CanonicalEntity, bool]:
        if website:
            # Same seller under a different trading name, same domain
            ref = await self._engine.matcher.resolve(kind, name, website=website)
            if ref is not None:
                return ref.entity, False

        outcome = await self._engine.resolve_or_create(kind, name)
        if website and kind == EntityKind.SELLER and outcome.entity.website is None:
            outcome.entity.website = website
        return outcome.entity, outcome.created

    @staticmethod
    def _build_link(
        link_field: LinkField,
        entity: CanonicalEntity,
        name: str,
        analysis: AnalysisResult,
        origin: AttributionOrigin,
    ) -> AttributionLink:
        tier = analysis.tier_for(link_field)
        score = analysis.score_for(link_field)
        if score is None:
            score = tier_score(tier)

        if origin == AttributionOrigin.DEALER_RESEARCH:
            basis = AttributionBasis.EXTERNAL_RESEARCH
        else:
            basis = analysis.basis_for(link_field) or DEFAULT_BASIS[link_field]

        description = analysis.source_description
        if not description:
            prefix = "Dealer research" if origin == AttributionOrigin.DEALER_RESEARCH else "AI analysis"
            description = f"{prefix}: {link_field.value} identified as {name} ({tier.value})"

        return AttributionLink(
            entity_id=entity.id,
            confidence_score=score,
            attribution_basis=basis,
            source_description=description,
            name=name,
        )
