"""Find the canonical entity a free-text name refers to.

Lookup order (first hit wins):
1. Canonical name: ``name_key`` equality (indexed, unique per kind)
2. Alias membership: any stored alias with the same normalized key,
   scanning entities in creation order
3. Website domain (Seller/Platform only, when a website is supplied)

The matcher never writes. Creation and alias union belong to
``AliasMergeEngine``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.errors import StorageError
from poster_attribution.models.entity import CanonicalEntity, Platform, Seller, model_for
from poster_attribution.models.enums import EntityKind, MatchedBy
from poster_attribution.utils.names import extract_root_domain, normalize_name

logger = logging.getLogger(__name__)


@dataclass
class EntityRef:
    """A resolved reference to a canonical entity."""

    kind: EntityKind
    entity_id: UUID
    name: str
    matched_by: MatchedBy
    entity: CanonicalEntity


class EntityMatcher:
    """Resolve candidate names against one kind's canonical entities.

    Usage:
        matcher = EntityMatcher(session)
        ref = await matcher.resolve(EntityKind.ARTIST, "herouard")
        if ref is not None:
            print(ref.name, ref.matched_by)
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def resolve(
        self,
        kind: EntityKind | str,
        candidate_name: str | None,
        *,
        website: str | None = None,
    ) -> EntityRef | None:
        """Return the entity a name refers to, or None if nothing matches.

        Args:
            kind: Entity kind to search within.
            candidate_name: Free-text name (any casing/spacing).
            website: Optional website, used for Seller/Platform only.

        Raises:
            StorageError: If the database query fails.
        """
        kind = EntityKind(kind)
        key = normalize_name(candidate_name)

        try:
            if key:
                entity = await self.find_by_key(kind, key)
                if entity is not None:
                    return self._ref(entity, MatchedBy.NAME)

                entity = await self.find_by_alias(kind, key)
                if entity is not None:
                    return self._ref(entity, MatchedBy.ALIAS)

            if website and kind in (EntityKind.SELLER, EntityKind.PLATFORM):
                entity = await self.find_by_website(kind, website)
                if entity is not None:
                    return self._ref(entity, MatchedBy.WEBSITE)
        except SQLAlchemyError as e:
            raise StorageError(f"Lookup of {kind.value} {candidate_name!r} failed: {e}") from e

        return None

    async def find_by_key(self, kind: EntityKind, key: str) -> CanonicalEntity | None:
        """Exact lookup on the normalized canonical name."""
        model = model_for(kind)
        stmt = select(model).where(model.name_key == key)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_alias(self, kind: EntityKind, key: str) -> CanonicalEntity | None:
        """First entity (oldest first) carrying an alias with this key."""
        model = model_for(kind)
        stmt = select(model).order_by(model.created_at, model.name_key)
        result = await self._session.execute(stmt)
        for entity in result.scalars():
            if not entity.aliases:
                continue
            if any(normalize_name(alias) == key for alias in entity.aliases):
                return entity
        return None

    async def find_by_website(self, kind: EntityKind, website: str) -> CanonicalEntity | None:
        """First Seller/Platform whose website shares the root domain."""
        domain = extract_root_domain(website)
        if not domain:
            return None

        if kind == EntityKind.SELLER:
            column = Seller.website
            stmt = select(Seller).where(column.is_not(None)).order_by(Seller.created_at)
        else:
            column = Platform.url
            stmt = select(Platform).where(column.is_not(None)).order_by(Platform.created_at)

        result = await self._session.execute(stmt)
        for entity in result.scalars():
            stored = entity.website if isinstance(entity, Seller) else entity.url
            if extract_root_domain(stored) == domain:
                logger.debug("[MATCH] %s matched by domain %s", entity.name, domain)
                return entity
        return None

    @staticmethod
    def _ref(entity: CanonicalEntity, matched_by: MatchedBy) -> EntityRef:
        return EntityRef(
            kind=entity.kind,
            entity_id=entity.id,
            name=entity.name,
            matched_by=matched_by,
            entity=entity,
        )
