"""Background enrichment of newly created entities.

Jobs are submitted only after the attribution transaction has committed, so
an enrichment failure can never roll back a link. Each job:
- runs in its own session
- is bounded by ``enrichment_timeout_seconds``
- is retried with linear backoff, up to ``enrichment_max_attempts`` times,
  only after a timeout, a crash or an unreachable source
- is counted in ``EnrichmentStats`` whatever the outcome
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from poster_attribution.attribution.linker import EnrichmentRequest
from poster_attribution.config import settings
from poster_attribution.enrichment.service import EnrichmentResult, EnrichmentService
from poster_attribution.enrichment.wikipedia import WikipediaClient
from poster_attribution.models.entity import model_for

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentStats:
    submitted: int = 0
    succeeded: int = 0
    failed: int = 0
    timed_out: int = 0
    """Attempts that hit the timeout (a job may time out more than once)."""


class EnrichmentQueue:
    """Fire-and-forget enrichment with bounded concurrency.

    Usage:
        queue = EnrichmentQueue(async_session_factory)
        queue.submit(results.enrichment_requests)
        ...
        await queue.aclose()  # waits for outstanding jobs
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        wiki: WikipediaClient | None = None,
        timeout: float | None = None,
        max_attempts: int | None = None,
        backoff: float | None = None,
        concurrency: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._owns_wiki = wiki is None
        self._wiki = wiki or WikipediaClient()
        self._timeout = timeout or settings.enrichment_timeout_seconds
        self._max_attempts = max(1, max_attempts or settings.enrichment_max_attempts)
        self._backoff = settings.enrichment_retry_backoff_seconds if backoff is None else backoff
        self._semaphore = asyncio.Semaphore(concurrency or settings.enrichment_concurrency)
        self._tasks: set[asyncio.Task[EnrichmentResult | None]] = set()
        self.stats = EnrichmentStats()

    def submit(self, requests: Iterable[EnrichmentRequest]) -> int:
        """Schedule enrichment jobs; returns how many were scheduled."""
        count = 0
        for request in requests:
            task = asyncio.create_task(self._run(request))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            self.stats.submitted += 1
            count += 1
        if count:
            logger.debug("[QUEUE] Scheduled %d enrichment job(s)", count)
        return count

    async def drain(self) -> EnrichmentStats:
        """Wait until every scheduled job has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self.stats

    async def aclose(self) -> None:
        await self.drain()
        if self._owns_wiki:
            await self._wiki.aclose()

    async def _run(self, request: EnrichmentRequest) -> EnrichmentResult | None:
        async with self._semaphore:
            attempt = 0
            last_error: str | None = None
            for attempt in range(1, self._max_attempts + 1):
                try:
                    result = await asyncio.wait_for(self._enrich_once(request), self._timeout)
                except asyncio.TimeoutError:
                    self.stats.timed_out += 1
                    last_error = f"timed out after {self._timeout:.0f}s"
                except Exception as e:  # background job: record and keep going
                    logger.exception("[QUEUE] Enrichment of %r crashed", request.name)
                    last_error = str(e)
                else:
                    if result.ok:
                        self.stats.succeeded += 1
                        return result
                    last_error = result.error
                    if not result.retryable:
                        break

                if attempt < self._max_attempts:
                    await asyncio.sleep(self._backoff * attempt)

            self.stats.failed += 1
            logger.warning(
                "[QUEUE] Gave up enriching %s %r after %d attempt(s): %s",
                request.kind.value,
                request.name,
                attempt,
                last_error,
            )
            return None

    async def _enrich_once(self, request: EnrichmentRequest) -> EnrichmentResult:
        async with self._session_factory() as session:
            entity = await session.get(model_for(request.kind), request.entity_id)
            if entity is None:
                return EnrichmentResult(entity_id=request.entity_id, error="Entity no longer exists")
            # No transaction is held across network calls
            await session.commit()

            service = EnrichmentService(session, self._wiki)
            result = await service.enrich(entity, request.source_url)
            if result.ok:
                await session.commit()
            return result
