"""Enrich canonical entities from Wikipedia.

Population rule: a field is written only when it is currently null, unless
``force=True``. ``verified`` is set once a source page has been fetched and
applied, and is never cleared here.

``enrich`` never raises for source problems: an unreachable page, a missing
infobox or a storage failure comes back as an ``EnrichmentResult`` with
``error`` set, and the entity is left as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.config import settings
from poster_attribution.enrichment.fields import EnrichmentFields, extract_fields
from poster_attribution.enrichment.infobox import parse_infobox
from poster_attribution.enrichment.wikipedia import SearchHit, WikipediaClient, page_title_from_url
from poster_attribution.errors import EnrichmentUnavailable
from poster_attribution.models.entity import CanonicalEntity
from poster_attribution.models.enums import EntityKind
from poster_attribution.utils.names import normalize_name

logger = logging.getLogger(__name__)

# Title keywords that identify the right page among search hits
_KIND_TITLE_KEYWORDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.PRINTER: ("print", "lithograph", "imprimerie"),
    EntityKind.PUBLISHER: ("magazine", "newspaper", "publication"),
}


@dataclass
class EnrichmentResult:
    """Outcome of enriching one entity."""

    entity_id: UUID
    source_url: str | None = None
    fields_updated: list[str] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    verified: bool = False
    error: str | None = None
    retryable: bool = False
    """True when the failure may clear on a later attempt (the source was unreachable)."""

    @property
    def ok(self) -> bool:
        return self.error is None


def choose_search_hit(name: str, kind: EntityKind, hits: list[SearchHit]) -> SearchHit | None:
    """Pick the page most likely to describe ``name``.

    Order: exact title match, then a title carrying a kind keyword
    ("... (printer)", "... magazine"), then the first title containing the
    name. Returns None rather than guessing at an unrelated page.
    """
    key = normalize_name(name)
    for hit in hits:
        if normalize_name(hit.title) == key:
            return hit

    for keyword in _KIND_TITLE_KEYWORDS.get(kind, ()):
        for hit in hits:
            if keyword in hit.title.lower():
                return hit

    for hit in hits:
        if key in normalize_name(hit.title):
            return hit
    return None


class EnrichmentService:
    """Fetch, parse and apply Wikipedia data to canonical entities.

    Usage:
        async with WikipediaClient() as wiki:
            service = EnrichmentService(session, wiki)
            result = await service.enrich(printer, "https://en.wikipedia.org/wiki/Imprimerie_Chaix")
            await session.commit()
    """

    def __init__(
        self,
        session: AsyncSession,
        wiki: WikipediaClient,
        *,
        auto_discover: bool | None = None,
    ) -> None:
        self._session = session
        self._wiki = wiki
        self._auto_discover = (
            settings.enrichment_auto_discover if auto_discover is None else auto_discover
        )

    async def fetch(self, source_url: str, kind: EntityKind | str) -> EnrichmentFields:
        """Fetch a page and extract fields for ``kind``.

        A page without usable wikitext still yields summary-based fields.

        Raises:
            EnrichmentUnavailable: If the URL is not a Wikipedia page or the
                summary cannot be fetched.
        """
        kind = EntityKind(kind)
        title = page_title_from_url(source_url)
        if title is None:
            raise EnrichmentUnavailable(f"Not a Wikipedia article URL: {source_url}")

        summary = await self._wiki.fetch_summary(title)
        try:
            wikitext = await self._wiki.fetch_wikitext(summary.title)
        except EnrichmentUnavailable as e:
            logger.info("[ENRICH] No wikitext for %r, using summary only: %s", summary.title, e)
            wikitext = ""

        infobox = parse_infobox(wikitext)
        fields = extract_fields(kind, infobox, summary.extract)
        fields.title = summary.title
        fields.wikipedia_url = summary.page_url
        fields.image_url = summary.thumbnail_url

        logger.debug(
            "[ENRICH] %s %r: %d infobox keys, found %s",
            kind.value,
            summary.title,
            len(infobox),
            sorted(fields.found()),
        )
        return fields

    async def discover_source(self, name: str, kind: EntityKind | str) -> str | None:
        """Search Wikipedia for a page about ``name``; return its URL or None."""
        kind = EntityKind(kind)
        try:
            hits = await self._wiki.search(name)
        except EnrichmentUnavailable as e:
            logger.warning("[ENRICH] Search failed for %s %r: %s", kind.value, name, e)
            return None

        hit = choose_search_hit(name, kind, hits)
        if hit is None:
            logger.info("[ENRICH] No page found for %s %r", kind.value, name)
            return None
        return hit.url

    async def enrich(
        self,
        entity: CanonicalEntity,
        source_url: str | None = None,
        *,
        force: bool = False,
    ) -> EnrichmentResult:
        """Fetch and apply enrichment to one entity.

        Args:
            entity: The entity to enrich (attached to this service's session).
            source_url: Page to use. Defaults to the entity's stored
                ``wikipedia_url``, then to search discovery if enabled.
            force: Overwrite non-null fields too.

        Returns:
            EnrichmentResult; ``error`` is set instead of raising.
        """
        result = EnrichmentResult(entity_id=entity.id)
        url = source_url or entity.wikipedia_url
        if url is None and self._auto_discover:
            url = await self.discover_source(entity.name, entity.kind)
        if url is None:
            result.error = "No source page"
            return result
        result.source_url = url
        if page_title_from_url(url) is None:
            result.error = f"Not a Wikipedia article URL: {url}"
            return result

        try:
            fields = await self.fetch(url, entity.kind)
        except EnrichmentUnavailable as e:
            logger.warning("[ENRICH] %s %r: %s", entity.kind.value, entity.name, e)
            result.error = str(e)
            result.retryable = True
            return result

        result.fields_updated = self.apply(entity, fields, force=force)
        if not entity.verified:
            entity.verified = True
        result.verified = True

        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.error("[ENRICH] Failed to store enrichment for %r: %s", entity.name, e)
            result.fields_updated = []
            result.verified = False
            result.error = f"Storage failure: {e}"
            return result

        logger.info(
            "[ENRICH] %s %r updated %s from %s",
            entity.kind.value,
            entity.name,
            result.fields_updated or "nothing",
            url,
        )
        return result

    @staticmethod
    def apply(
        entity: CanonicalEntity,
        fields: EnrichmentFields,
        *,
        force: bool = False,
    ) -> list[str]:
        """Copy found values onto the entity; return the names of changed fields."""
        updated: list[str] = []
        for name in entity.all_enrichment_fields():
            value: Any = getattr(fields, name, None)
            if value is None:
                continue
            current = getattr(entity, name)
            if current is not None and not force:
                continue
            if current != value:
                setattr(entity, name, value)
                updated.append(name)
        return updated
