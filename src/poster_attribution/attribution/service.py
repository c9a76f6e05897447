"""Transactional entry point for attributing an item."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from poster_attribution.attribution.linker import AttributionLinker, LinkResults
from poster_attribution.attribution.queue import EnrichmentQueue
from poster_attribution.attribution.schemas import AnalysisResult
from poster_attribution.errors import NotFoundError, StorageError
from poster_attribution.models.enums import AttributionOrigin
from poster_attribution.models.item import InventoryItem

logger = logging.getLogger(__name__)


class AttributionService:
    """Attribute an item in one transaction, then enrich in the background.

    Usage:
        service = AttributionService(async_session_factory, queue)
        results = await service.attribute(item_id, analysis)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        queue: EnrichmentQueue | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._queue = queue

    async def attribute(
        self,
        item_id: UUID,
        analysis: AnalysisResult,
        *,
        origin: AttributionOrigin = AttributionOrigin.ANALYSIS,
    ) -> LinkResults:
        """Apply an analysis to an item and commit.

        Enrichment requests are submitted to the queue only after the commit
        succeeds.

        Raises:
            NotFoundError: If the item does not exist.
            StorageError: If the commit fails.
        """
        async with self._session_factory() as session:
            item = await session.get(InventoryItem, item_id)
            if item is None:
                raise NotFoundError(f"No inventory item with id {item_id}")

            results = await AttributionLinker(session).apply_analysis_attribution(
                item, analysis, origin=origin
            )
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError(f"Failed to commit attribution for item {item_id}: {e}") from e

        logger.info(
            "[ATTRIBUTE] item %s linked=%s failed=%s new=%d",
            item_id,
            [f.value for f in results.linked],
            [f.value for f in results.failed],
            len(results.enrichment_requests),
        )
        if self._queue is not None and results.enrichment_requests:
            self._queue.submit(results.enrichment_requests)
        return results
