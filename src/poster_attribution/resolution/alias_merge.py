"""Idempotent resolve-or-create with alias union.

``AliasMergeEngine.resolve_or_create`` is the only way new canonical entities
enter the store, whether from seeding, image analysis or dealer research.

Algorithm:
1. Canonical name resolves (by name or alias) -> union the supplied aliases
   into that entity and return it.
2. Otherwise, if an alias resolves -> union the canonical name and the other
   aliases into the entity the alias belongs to. The entity is never renamed.
   This fallback can merge two distinct real-world entities that share a
   nickname, so it is flagged as ``cross_boundary`` and logged at WARNING.
   Disabled when ``settings.alias_fallback_merge`` is False.
3. Otherwise create the entity inside a savepoint. Losing a race on the
   unique ``name_key`` surfaces as ``ConflictError``, after which the engine
   re-resolves and returns the winner.

An alias that already belongs to a different entity is never copied;
it is reported in ``MergeOutcome.aliases_skipped`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.config import settings
from poster_attribution.errors import ConflictError, NotFoundError, StorageError
from poster_attribution.models.entity import CanonicalEntity, model_for
from poster_attribution.models.enums import EntityKind, MatchedBy
from poster_attribution.resolution.matcher import EntityMatcher
from poster_attribution.utils.names import dedupe_names, normalize_name, require_name

logger = logging.getLogger(__name__)


@dataclass
class MergeOutcome:
    """Result of one resolve-or-create call."""

    entity: CanonicalEntity
    created: bool
    """True if a new row was inserted."""

    aliases_added: list[str] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    """Aliases newly stored on the entity by this call."""

    aliases_skipped: list[str] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    """Aliases not stored because another entity already owns them."""

    matched_by: MatchedBy | None = None
    """How an existing entity was found (None when created)."""

    cross_boundary: bool = False
    """True if the entity was found through one of the supplied aliases."""


class AliasMergeEngine:
    """Resolve a canonical name and its aliases to exactly one entity.

    Usage:
        engine = AliasMergeEngine(session)
        outcome = await engine.resolve_or_create(
            EntityKind.ARTIST, "Chéri Hérouard", ["Cheri Herouard", "Herouard"]
        )
        await session.commit()

    The engine flushes but never commits; the caller owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        matcher: EntityMatcher | None = None,
        fallback_merge: bool | None = None,
        retry_attempts: int | None = None,
    ) -> None:
        self._session = session
        self._matcher = matcher or EntityMatcher(session)
        self._fallback_merge = (
            settings.alias_fallback_merge if fallback_merge is None else fallback_merge
        )
        self._retry_attempts = (
            settings.conflict_retry_attempts if retry_attempts is None else retry_attempts
        )

    @property
    def matcher(self) -> EntityMatcher:
        return self._matcher

    async def resolve_or_create(
        self,
        kind: EntityKind | str,
        canonical_name: str | None,
        aliases: Iterable[str] = (),
    ) -> MergeOutcome:
        """Return the entity for a name, creating it if nothing matches.

        Args:
            kind: Entity kind.
            canonical_name: Preferred display name (must be non-empty).
            aliases: Alternate spellings to record on the entity.

        Returns:
            MergeOutcome describing what happened.

        Raises:
            ValidationError: If canonical_name is empty after trimming.
            ConflictError: If creation kept losing races past the retry bound.
            StorageError: On any other persistence failure.
        """
        kind = EntityKind(kind)
        name = require_name(canonical_name, what=f"{kind.value} name")
        alias_list = dedupe_names(aliases, exclude={normalize_name(name)})

        for attempt in range(self._retry_attempts + 1):
            ref = await self._matcher.resolve(kind, name)
            if ref is not None:
                added, skipped = await self._union_aliases(ref.entity, alias_list)
                return MergeOutcome(
                    entity=ref.entity,
                    created=False,
                    aliases_added=added,
                    aliases_skipped=skipped,
                    matched_by=ref.matched_by,
                )

            if self._fallback_merge:
                for alias in alias_list:
                    ref = await self._matcher.resolve(kind, alias)
                    if ref is None:
                        continue
                    logger.warning(
                        "[MERGE] %s %r unknown; merged into %r via alias %r",
                        kind.value,
                        name,
                        ref.name,
                        alias,
                    )
                    added, skipped = await self._union_aliases(ref.entity, [name, *alias_list])
                    return MergeOutcome(
                        entity=ref.entity,
                        created=False,
                        aliases_added=added,
                        aliases_skipped=skipped,
                        matched_by=ref.matched_by,
                        cross_boundary=True,
                    )

            try:
                return await self._create(kind, name, alias_list)
            except ConflictError:
                logger.info(
                    "[MERGE] Lost create race for %s %r (attempt %d), re-resolving",
                    kind.value,
                    name,
                    attempt + 1,
                )

        raise ConflictError(
            f"Could not create or resolve {kind.value} {name!r} after "
            f"{self._retry_attempts + 1} attempts"
        )

    async def add_alias(
        self,
        kind: EntityKind | str,
        entity_id: UUID,
        alias: str | None,
    ) -> MergeOutcome:
        """Attach one alias to an existing entity.

        Raises:
            ValidationError: If the alias is empty.
            NotFoundError: If the entity does not exist.
            ConflictError: If the alias already belongs to another entity.
        """
        kind = EntityKind(kind)
        cleaned = require_name(alias, what="alias")
        entity = await self._session.get(model_for(kind), entity_id)
        if entity is None:
            raise NotFoundError(f"No {kind.value} with id {entity_id}")

        added, skipped = await self._union_aliases(entity, [cleaned])
        if skipped:
            raise ConflictError(f"Alias {cleaned!r} already belongs to another {kind.value}")
        return MergeOutcome(entity=entity, created=False, aliases_added=added)

    async def _union_aliases(
        self,
        entity: CanonicalEntity,
        candidates: Iterable[str],
    ) -> tuple[list[str], list[str]]:
        """Append unseen aliases to an entity; return (added, skipped)."""
        known = {entity.name_key, *(normalize_name(a) for a in entity.aliases or [])}
        added: list[str] = []
        skipped: list[str] = []

        for alias in dedupe_names(candidates, exclude=known):
            owner = await self._matcher.resolve(entity.kind, alias)
            if owner is not None and owner.entity_id != entity.id:
                logger.info(
                    "[MERGE] Alias %r of %r already belongs to %r, skipped",
                    alias,
                    entity.name,
                    owner.name,
                )
                skipped.append(alias)
                continue
            added.append(alias)

        if added:
            # Reassign so the JSON column is marked dirty
            entity.aliases = [*(entity.aliases or []), *added]
            try:
                await self._session.flush()
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to store aliases for {entity.name!r}: {e}") from e
            logger.debug("[MERGE] %r += %s", entity.name, added)

        return added, skipped

    async def _create(
        self,
        kind: EntityKind,
        name: str,
        aliases: list[str],
    ) -> MergeOutcome:
        stored: list[str] = []
        skipped: list[str] = []
        for alias in aliases:
            if await self._matcher.resolve(kind, alias) is not None:
                skipped.append(alias)
            else:
                stored.append(alias)

        entity = model_for(kind)(name=name, aliases=stored)
        try:
            async with self._session.begin_nested():
                self._session.add(entity)
        except IntegrityError as e:
            raise ConflictError(f"{kind.value} {name!r} already exists") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to create {kind.value} {name!r}: {e}") from e

        logger.info("[MERGE] Created %s %r (aliases: %s)", kind.value, name, stored)
        return MergeOutcome(
            entity=entity,
            created=True,
            aliases_added=list(stored),
            aliases_skipped=skipped,
        )
