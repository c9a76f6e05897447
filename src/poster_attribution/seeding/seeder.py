"""Load seed data through the alias merge engine.

Every entry goes through ``AliasMergeEngine.resolve_or_create``, so seeding
twice creates nothing the second time and never duplicates an alias.
Seed attributes (seller type, website, ...) only fill null columns.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from poster_attribution.errors import StorageError
from poster_attribution.models.enums import EntityKind
from poster_attribution.resolution.alias_merge import AliasMergeEngine
from poster_attribution.seeding.seed_data import (
    EXCLUDED_ARTIST_NAMES,
    SEED_DATA,
    SEED_VERSION,
    SeedEntry,
)
from poster_attribution.utils.names import normalize_name

logger = logging.getLogger(__name__)

_EXCLUDED_KEYS = frozenset(normalize_name(n) for n in EXCLUDED_ARTIST_NAMES)


@dataclass
class KindReport:
    created: int = 0
    merged: int = 0
    aliases_added: int = 0
    skipped: list[str] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    """Entries or aliases that were not stored, with the reason."""


@dataclass
class SeedReport:
    version: str
    kinds: dict[EntityKind, KindReport] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]

    @property
    def created(self) -> int:
        return sum(r.created for r in self.kinds.values())

    @property
    def merged(self) -> int:
        return sum(r.merged for r in self.kinds.values())

    @property
    def aliases_added(self) -> int:
        return sum(r.aliases_added for r in self.kinds.values())

    @property
    def skipped(self) -> list[str]:
        return [s for r in self.kinds.values() for s in r.skipped]


class Seeder:
    """Seed canonical entities for one or more kinds.

    Usage:
        report = await Seeder(session).run()
        await session.commit()
    """

    def __init__(self, session: AsyncSession, *, engine: AliasMergeEngine | None = None) -> None:
        self._session = session
        self._engine = engine or AliasMergeEngine(session)

    async def run(
        self,
        kinds: Iterable[EntityKind] | None = None,
        *,
        data: Mapping[EntityKind, Iterable[SeedEntry]] | None = None,
    ) -> SeedReport:
        """Seed the given kinds (default: all) and report what changed."""
        data = data if data is not None else SEED_DATA
        report = SeedReport(version=SEED_VERSION)

        for kind in kinds or list(data):
            kind = EntityKind(kind)
            kind_report = report.kinds.setdefault(kind, KindReport())
            for entry in data.get(kind, ()):
                await self._seed_entry(kind, entry, kind_report)

        logger.info(
            "[SEED] v%s: %d created, %d merged, %d aliases added, %d skipped",
            report.version,
            report.created,
            report.merged,
            report.aliases_added,
            len(report.skipped),
        )
        return report

    async def _seed_entry(self, kind: EntityKind, entry: SeedEntry, report: KindReport) -> None:
        if kind == EntityKind.ARTIST and normalize_name(entry.name) in _EXCLUDED_KEYS:
            report.skipped.append(f"{entry.name}: placeholder name")
            return

        outcome = await self._engine.resolve_or_create(kind, entry.name, entry.aliases)
        if outcome.created:
            report.created += 1
        else:
            # Aliases stored on an existing entity; a new entity's aliases count as creation
            report.merged += 1
            report.aliases_added += len(outcome.aliases_added)
            if outcome.aliases_added:
                logger.debug("[SEED] %r gained aliases %s", outcome.entity.name, outcome.aliases_added)
        report.skipped.extend(
            f"{entry.name}: alias {alias!r} belongs to another {kind.value}"
            for alias in outcome.aliases_skipped
        )

        for column, value in entry.attributes.items():
            if getattr(outcome.entity, column) is None:
                setattr(outcome.entity, column, value)
        if entry.attributes:
            try:
                await self._session.flush()
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to store seed attributes for {entry.name!r}: {e}") from e
