"""Tests for CatalogService (listing, deletion, merging)."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from poster_attribution.errors import NotFoundError, ValidationError
from poster_attribution.models import (
    Artist,
    AttributionBasis,
    AttributionLink,
    EntityKind,
    LinkField,
    SellerType,
)
from poster_attribution.services import CatalogService, entity_to_dict

if TYPE_CHECKING:
    from conftest import MakeEntity, MakeItem
    from sqlalchemy.ext.asyncio import AsyncSession


def link_to(entity: Artist, score: int = 75) -> AttributionLink:
    return AttributionLink(
        entity_id=entity.id,
        confidence_score=score,
        attribution_basis=AttributionBasis.VISIBLE_SIGNATURE,
        source_description="test",
        name=entity.name,
    )


class TestListEntities:
    """Listing and searching."""

    async def test_search_matches_names_and_aliases(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        db_session.add_all(
            [
                make_entity(EntityKind.ARTIST, "Jules Chéret", aliases=["Cheret"]),
                make_entity(EntityKind.ARTIST, "Leonetto Cappiello"),
                make_entity(EntityKind.ARTIST, "Alphonse Mucha", verified=True),
            ]
        )
        await db_session.flush()
        catalog = CatalogService(db_session)

        by_alias = await catalog.list_entities(EntityKind.ARTIST, search="cheret")
        verified = await catalog.list_entities(EntityKind.ARTIST, verified=True)
        limited = await catalog.list_entities(EntityKind.ARTIST, limit=2)

        assert [e.name for e in by_alias] == ["Jules Chéret"]
        assert [e.name for e in verified] == ["Alphonse Mucha"]
        assert [e.name for e in limited] == ["Alphonse Mucha", "Jules Chéret"]

    async def test_get_missing_entity(self, db_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await CatalogService(db_session).get_entity(EntityKind.PRINTER, uuid4())


class TestDeleteEntity:
    """Deletion clears item links."""

    async def test_links_are_nulled(
        self, db_session: AsyncSession, make_entity: MakeEntity, make_item: MakeItem
    ) -> None:
        artist = make_entity(EntityKind.ARTIST, "Restoration Artist")
        db_session.add(artist)
        await db_session.flush()
        items = [make_item(sku=f"R-{i}") for i in range(2)]
        for item in items:
            item.set_link(LinkField.ARTIST, link_to(artist, score=40))
        db_session.add_all(items)
        await db_session.flush()
        catalog = CatalogService(db_session)

        assert await catalog.count_links(EntityKind.ARTIST, artist.id) == 2
        cleared = await catalog.delete_entity(EntityKind.ARTIST, artist.id)

        assert cleared == 2
        for item in items:
            await db_session.refresh(item)
            assert item.artist_id is None
            assert item.artist_confidence_score == 40
        assert await db_session.get(Artist, artist.id) is None


class TestClearEnrichment:
    async def test_resets_fields_and_verified(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        artist = make_entity(
            EntityKind.ARTIST,
            "William Steig",
            verified=True,
            bio="A namesake's biography.",
            birth_year=1850,
            nationality="German",
        )
        db_session.add(artist)
        await db_session.flush()

        entity = await CatalogService(db_session).clear_enrichment(EntityKind.ARTIST, artist.id)

        assert not entity.verified
        assert entity.bio is None
        assert entity.birth_year is None
        assert entity.nationality is None
        assert entity.name == "William Steig"


class TestMergeEntities:
    """Folding a duplicate into its canonical entity."""

    async def test_merge(
        self, db_session: AsyncSession, make_entity: MakeEntity, make_item: MakeItem
    ) -> None:
        target = make_entity(EntityKind.ARTIST, "Jean-Jacques Sempé", aliases=["Sempé"])
        source = make_entity(
            EntityKind.ARTIST, "J.J. Sempe", aliases=["Sempe", "sempé"], birth_year=1932, verified=True
        )
        db_session.add_all([target, source])
        await db_session.flush()
        item = make_item(sku="SEMPE-1")
        item.set_link(LinkField.ARTIST, link_to(source))
        db_session.add(item)
        await db_session.flush()

        merged = await CatalogService(db_session).merge_entities(
            EntityKind.ARTIST, source.id, target.id
        )
        await db_session.refresh(item)

        assert merged.id == target.id
        assert merged.aliases == ["Sempé", "J.J. Sempe", "Sempe"]
        assert merged.birth_year == 1932
        assert merged.verified
        assert item.artist_id == target.id
        assert await db_session.get(Artist, source.id) is None

    async def test_self_merge_rejected(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        artist = make_entity(EntityKind.ARTIST, "Mucha")
        db_session.add(artist)
        await db_session.flush()

        with pytest.raises(ValidationError):
            await CatalogService(db_session).merge_entities(EntityKind.ARTIST, artist.id, artist.id)


class TestEntityToDict:
    def test_seller_fields(self, make_entity: MakeEntity) -> None:
        seller = make_entity(
            EntityKind.SELLER,
            "Christie's",
            seller_type=SellerType.AUCTION_HOUSE,
            website="https://www.christies.com",
            country="United Kingdom",
        )

        data = entity_to_dict(seller)

        assert data["kind"] == "seller"
        assert data["seller_type"] == "auction_house"
        assert data["website"] == "https://www.christies.com"
        assert data["country"] == "United Kingdom"
        assert data["id"] == str(seller.id)
        assert "platform_type" not in data
