"""Canonical entity models: one table per entity kind.

All five kinds share the same base shape (name, normalized key, aliases,
verification flag, shared enrichment fields, timestamps) via
``CanonicalEntityMixin``. Kind-specific enrichment columns live on each
concrete class, and ``ENTITY_MODELS`` maps the ``EntityKind`` discriminator
to its table so that callers dispatch on kind rather than on field presence.

Uniqueness: ``name_key`` holds ``normalize_name(name)`` and carries a UNIQUE
constraint, so two writers racing to create the same entity produce one row
and one ``IntegrityError``. The alias invariant (no alias shared across
entities) is maintained by the alias merge engine, not the database.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from poster_attribution.models.base import JSON_TYPE, Base, utcnow
from poster_attribution.models.enums import EntityKind, PlatformType, SellerType
from poster_attribution.utils.names import normalize_name

# Enrichment columns shared by every kind
SHARED_ENRICHMENT_FIELDS: tuple[str, ...] = ("bio", "wikipedia_url", "image_url")


class CanonicalEntityMixin:
    """Columns shared by every canonical entity table."""

    kind: ClassVar[EntityKind]
    enrichment_fields: ClassVar[tuple[str, ...]] = ()

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255))
    name_key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    aliases: Mapped[list[str]] = mapped_column(JSON_TYPE, default=list)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    bio: Mapped[str | None] = mapped_column(Text)
    wikipedia_url: Mapped[str | None] = mapped_column(String(1024))
    image_url: Mapped[str | None] = mapped_column(String(1024))
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    def __init__(self, **kwargs: Any) -> None:
        # Keep name_key in step with name for every construction path
        if "name" in kwargs and "name_key" not in kwargs:
            kwargs["name_key"] = normalize_name(kwargs["name"])
        kwargs.setdefault("id", uuid4())
        kwargs.setdefault("aliases", [])
        kwargs.setdefault("verified", False)
        super().__init__(**kwargs)

    @classmethod
    def all_enrichment_fields(cls) -> tuple[str, ...]:
        return SHARED_ENRICHMENT_FIELDS + cls.enrichment_fields

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} id={self.id}>"


class Artist(CanonicalEntityMixin, Base):
    """An artist or illustrator credited on a poster."""

    __tablename__ = "artists"

    kind = EntityKind.ARTIST
    enrichment_fields = ("nationality", "birth_year", "death_year")

    nationality: Mapped[str | None] = mapped_column(String(100))
    birth_year: Mapped[int | None] = mapped_column(Integer)
    death_year: Mapped[int | None] = mapped_column(Integer)


class Printer(CanonicalEntityMixin, Base):
    """A printing house or lithographer ("Imprimerie Chaix", "DAN")."""

    __tablename__ = "printers"

    kind = EntityKind.PRINTER
    enrichment_fields = ("location", "country", "founded_year", "closed_year")

    location: Mapped[str | None] = mapped_column(String(255))
    country: Mapped[str | None] = mapped_column(String(100))
    founded_year: Mapped[int | None] = mapped_column(Integer)
    closed_year: Mapped[int | None] = mapped_column(Integer)


class Publisher(CanonicalEntityMixin, Base):
    """A magazine, newspaper, or publishing house."""

    __tablename__ = "publishers"

    kind = EntityKind.PUBLISHER
    enrichment_fields = ("publication_type", "country", "founded_year", "ceased_year")

    publication_type: Mapped[str | None] = mapped_column(String(100))
    country: Mapped[str | None] = mapped_column(String(100))
    founded_year: Mapped[int | None] = mapped_column(Integer)
    ceased_year: Mapped[int | None] = mapped_column(Integer)


class Seller(CanonicalEntityMixin, Base):
    """WHO an item was bought from: auction houses, dealers, galleries."""

    __tablename__ = "sellers"

    kind = EntityKind.SELLER
    enrichment_fields = ("location", "country", "founded_year", "closed_year")

    seller_type: Mapped[SellerType | None] = mapped_column()
    website: Mapped[str | None] = mapped_column(String(1024))
    location: Mapped[str | None] = mapped_column(String(255))
    country: Mapped[str | None] = mapped_column(String(100))
    founded_year: Mapped[int | None] = mapped_column(Integer)
    closed_year: Mapped[int | None] = mapped_column(Integer)


class Platform(CanonicalEntityMixin, Base):
    """WHERE an item was bought: marketplaces, aggregators, venues."""

    __tablename__ = "platforms"

    kind = EntityKind.PLATFORM
    enrichment_fields = ("country", "founded_year")

    platform_type: Mapped[PlatformType | None] = mapped_column()
    url: Mapped[str | None] = mapped_column(String(1024))
    country: Mapped[str | None] = mapped_column(String(100))
    founded_year: Mapped[int | None] = mapped_column(Integer)


CanonicalEntity = Artist | Printer | Publisher | Seller | Platform

ENTITY_MODELS: dict[EntityKind, type[CanonicalEntity]] = {
    EntityKind.ARTIST: Artist,
    EntityKind.PRINTER: Printer,
    EntityKind.PUBLISHER: Publisher,
    EntityKind.SELLER: Seller,
    EntityKind.PLATFORM: Platform,
}


def model_for(kind: EntityKind | str) -> type[CanonicalEntity]:
    """Return the table class for an entity kind."""
    return ENTITY_MODELS[EntityKind(kind)]
