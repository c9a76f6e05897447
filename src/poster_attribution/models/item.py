"""Inventory item model with embedded attribution links."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from poster_attribution.models.base import Base, utcnow
from poster_attribution.models.enums import AttributionBasis, EntityKind, LinkField


@dataclass(frozen=True)
class AttributionLink:
    """A confidence-scored, source-attributed link from an item to an entity."""

    entity_id: UUID | None
    confidence_score: int
    attribution_basis: AttributionBasis
    source_description: str | None = None
    name: str | None = None
    """Raw name string as proposed (before resolution)."""


class InventoryItem(Base):
    """A catalogued item (poster, print, plate).

    Each resolvable field (artist, printer, publisher) is stored as a group
    of columns ``<field>_id``, ``<field>_confidence_score``,
    ``<field>_attribution_basis``, ``<field>_source_description`` and the raw
    ``<field>_name``. Use ``get_link``/``set_link`` rather than touching the
    columns one at a time: a link is always replaced as a whole.
    """

    __tablename__ = "inventory_items"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    title: Mapped[str | None] = mapped_column(String(512))
    sku: Mapped[str | None] = mapped_column(String(128), unique=True)

    artist_name: Mapped[str | None] = mapped_column(String(255))
    artist_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("artists.id", ondelete="SET NULL"), index=True
    )
    artist_confidence_score: Mapped[int | None] = mapped_column(Integer)
    artist_attribution_basis: Mapped[AttributionBasis | None] = mapped_column()
    artist_source_description: Mapped[str | None] = mapped_column(Text)

    printer_name: Mapped[str | None] = mapped_column(String(255))
    printer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("printers.id", ondelete="SET NULL"), index=True
    )
    printer_confidence_score: Mapped[int | None] = mapped_column(Integer)
    printer_attribution_basis: Mapped[AttributionBasis | None] = mapped_column()
    printer_source_description: Mapped[str | None] = mapped_column(Text)

    publisher_name: Mapped[str | None] = mapped_column(String(255))
    publisher_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("publishers.id", ondelete="SET NULL"), index=True
    )
    publisher_confidence_score: Mapped[int | None] = mapped_column(Integer)
    publisher_attribution_basis: Mapped[AttributionBasis | None] = mapped_column()
    publisher_source_description: Mapped[str | None] = mapped_column(Text)

    # Acquisition: who it was bought from, and where
    seller_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("sellers.id", ondelete="SET NULL"), index=True
    )
    platform_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("platforms.id", ondelete="SET NULL"), index=True
    )
    platform_identity: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    def get_link(self, field: LinkField) -> AttributionLink | None:
        """Return the attribution link for a field, or None if never attributed."""
        field = LinkField(field)
        score = getattr(self, f"{field.value}_confidence_score")
        entity_id = getattr(self, f"{field.value}_id")
        if entity_id is None and score is None:
            return None
        return AttributionLink(
            entity_id=entity_id,
            confidence_score=score or 0,
            attribution_basis=getattr(self, f"{field.value}_attribution_basis")
            or AttributionBasis.UNKNOWN,
            source_description=getattr(self, f"{field.value}_source_description"),
            name=getattr(self, f"{field.value}_name"),
        )

    def set_link(self, field: LinkField, link: AttributionLink) -> None:
        """Replace the link for a field entirely (no merging with the old link)."""
        field = LinkField(field)
        setattr(self, f"{field.value}_id", link.entity_id)
        setattr(self, f"{field.value}_confidence_score", link.confidence_score)
        setattr(self, f"{field.value}_attribution_basis", link.attribution_basis)
        setattr(self, f"{field.value}_source_description", link.source_description)
        setattr(self, f"{field.value}_name", link.name)


# Item columns that reference each entity kind
ITEM_LINK_COLUMNS: dict[EntityKind, str] = {
    EntityKind.ARTIST: "artist_id",
    EntityKind.PRINTER: "printer_id",
    EntityKind.PUBLISHER: "publisher_id",
    EntityKind.SELLER: "seller_id",
    EntityKind.PLATFORM: "platform_id",
}
