"""Read and administrative operations on the canonical entity store.

Deletion is explicit only: ``delete_entity`` nulls every item link that
points at the entity before removing the row, so items never reference a
missing entity regardless of backend foreign-key support.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.errors import NotFoundError, StorageError, ValidationError
from poster_attribution.models.entity import CanonicalEntity, model_for
from poster_attribution.models.enums import EntityKind
from poster_attribution.models.item import ITEM_LINK_COLUMNS, InventoryItem
from poster_attribution.utils.names import dedupe_names, normalize_name

logger = logging.getLogger(__name__)


def entity_to_dict(entity: CanonicalEntity) -> dict[str, Any]:
    """Display fields for an entity (as pushed to the storefront)."""
    data: dict[str, Any] = {
        "id": str(entity.id),
        "kind": entity.kind.value,
        "name": entity.name,
        "aliases": list(entity.aliases or []),
        "verified": entity.verified,
        "notes": entity.notes,
    }
    for name in entity.all_enrichment_fields():
        data[name] = getattr(entity, name)
    for extra in ("seller_type", "website", "platform_type", "url"):
        if hasattr(entity, extra):
            data[extra] = getattr(entity, extra)
    return {k: v.value if isinstance(v, Enum) else v for k, v in data.items()}


class CatalogService:
    """Query and administer canonical entities.

    Usage:
        catalog = CatalogService(session)
        artists = await catalog.list_entities(EntityKind.ARTIST, search="cheret")
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_entities(
        self,
        kind: EntityKind | str,
        *,
        verified: bool | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[CanonicalEntity]:
        """List entities of a kind ordered by name.

        Args:
            kind: Entity kind.
            verified: Filter on the verified flag when given.
            search: Substring matched against the normalized name and aliases.
            limit: Maximum number of results.
        """
        model = model_for(kind)
        stmt = select(model).order_by(model.name_key)
        if verified is not None:
            stmt = stmt.where(model.verified == verified)
        result = await self._session.execute(stmt)
        entities = list(result.scalars())

        key = normalize_name(search)
        if key:
            entities = [
                e
                for e in entities
                if key in e.name_key or any(key in normalize_name(a) for a in e.aliases or [])
            ]
        return entities[:limit] if limit else entities

    async def get_entity(self, kind: EntityKind | str, entity_id: UUID) -> CanonicalEntity:
        kind = EntityKind(kind)
        entity = await self._session.get(model_for(kind), entity_id)
        if entity is None:
            raise NotFoundError(f"No {kind.value} with id {entity_id}")
        return entity

    async def count_links(self, kind: EntityKind | str, entity_id: UUID) -> int:
        """Number of items linking to an entity."""
        column = getattr(InventoryItem, ITEM_LINK_COLUMNS[EntityKind(kind)])
        result = await self._session.execute(select(InventoryItem.id).where(column == entity_id))
        return len(result.all())

    async def delete_entity(self, kind: EntityKind | str, entity_id: UUID) -> int:
        """Delete an entity, nulling item links to it first.

        Returns:
            Number of items whose link was cleared.
        """
        kind = EntityKind(kind)
        entity = await self.get_entity(kind, entity_id)
        try:
            cleared = await self._repoint_links(kind, entity_id, None)
            await self._session.delete(entity)
            await self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {kind.value} {entity_id}: {e}") from e

        logger.info("[CATALOG] Deleted %s %r (%d links cleared)", kind.value, entity.name, cleared)
        return cleared

    async def clear_enrichment(self, kind: EntityKind | str, entity_id: UUID) -> CanonicalEntity:
        """Reset enrichment fields and ``verified`` so the entity can be re-enriched.

        Used when enrichment attached the wrong page (e.g. a namesake).
        """
        entity = await self.get_entity(kind, entity_id)
        for name in entity.all_enrichment_fields():
            setattr(entity, name, None)
        entity.verified = False
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to clear enrichment for {entity.name!r}: {e}") from e
        logger.info("[CATALOG] Cleared enrichment for %s %r", entity.kind.value, entity.name)
        return entity

    async def merge_entities(
        self,
        kind: EntityKind | str,
        source_id: UUID,
        target_id: UUID,
    ) -> CanonicalEntity:
        """Fold ``source`` into ``target`` and delete ``source``.

        - Item links to source are repointed to target
        - Source name and aliases become target aliases
        - Target's null enrichment fields are filled from source
        - Target is verified if either was
        """
        kind = EntityKind(kind)
        if source_id == target_id:
            raise ValidationError("Cannot merge an entity into itself")
        source = await self.get_entity(kind, source_id)
        target = await self.get_entity(kind, target_id)

        known = {target.name_key, *(normalize_name(a) for a in target.aliases or [])}
        new_aliases = dedupe_names([source.name, *(source.aliases or [])], exclude=known)
        for name in target.all_enrichment_fields():
            if getattr(target, name) is None and getattr(source, name) is not None:
                setattr(target, name, getattr(source, name))
        if source.verified:
            target.verified = True
        source_name = source.name

        try:
            moved = await self._repoint_links(kind, source_id, target_id)
            await self._session.delete(source)
            await self._session.flush()
            if new_aliases:
                target.aliases = [*(target.aliases or []), *new_aliases]
                await self._session.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to merge {kind.value} {source_id} into {target_id}: {e}") from e

        logger.info(
            "[CATALOG] Merged %s %r into %r (%d links moved, aliases +%s)",
            kind.value,
            source_name,
            target.name,
            moved,
            new_aliases,
        )
        return target

    async def _repoint_links(
        self,
        kind: EntityKind,
        old_id: UUID,
        new_id: UUID | None,
    ) -> int:
        column_name = ITEM_LINK_COLUMNS[kind]
        column = getattr(InventoryItem, column_name)
        stmt = (
            update(InventoryItem)
            .where(column == old_id)
            .values({column_name: new_id})
            .execution_options(synchronize_session="fetch")
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
