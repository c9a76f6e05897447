"""Tests for EntityMatcher (name, alias and website lookup)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from poster_attribution.models import EntityKind, MatchedBy, PlatformType
from poster_attribution.resolution.matcher import EntityMatcher

if TYPE_CHECKING:
    from conftest import MakeEntity
    from sqlalchemy.ext.asyncio import AsyncSession


class TestEntityMatcher:
    """Lookup precedence and normalization."""

    async def test_matches_canonical_name_any_casing(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        artist = make_entity(EntityKind.ARTIST, "Leonetto Cappiello")
        db_session.add(artist)
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(EntityKind.ARTIST, "  leonetto   CAPPIELLO ")

        assert ref is not None
        assert ref.entity_id == artist.id
        assert ref.matched_by == MatchedBy.NAME
        assert ref.kind == EntityKind.ARTIST

    async def test_matches_alias(self, db_session: AsyncSession, make_entity: MakeEntity) -> None:
        artist = make_entity(EntityKind.ARTIST, "Chéri Hérouard", aliases=["Cheri Herouard", "Herouard"])
        db_session.add(artist)
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(EntityKind.ARTIST, "HEROUARD")

        assert ref is not None
        assert ref.entity_id == artist.id
        assert ref.matched_by == MatchedBy.ALIAS

    async def test_name_beats_alias(self, db_session: AsyncSession, make_entity: MakeEntity) -> None:
        # "Masson" is an alias of one entity and the name of another
        andre = make_entity(EntityKind.ARTIST, "André Masson", aliases=["Masson"])
        db_session.add(andre)
        await db_session.flush()
        other = make_entity(EntityKind.ARTIST, "Masson")
        db_session.add(other)
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(EntityKind.ARTIST, "masson")

        assert ref is not None
        assert ref.entity_id == other.id
        assert ref.matched_by == MatchedBy.NAME

    async def test_kinds_are_separate(self, db_session: AsyncSession, make_entity: MakeEntity) -> None:
        db_session.add(make_entity(EntityKind.PUBLISHER, "Fortune"))
        await db_session.flush()

        matcher = EntityMatcher(db_session)
        assert await matcher.resolve(EntityKind.ARTIST, "Fortune") is None
        assert await matcher.resolve(EntityKind.PUBLISHER, "fortune") is not None

    async def test_no_match_and_empty(self, db_session: AsyncSession) -> None:
        matcher = EntityMatcher(db_session)
        assert await matcher.resolve(EntityKind.PRINTER, "Unknown Printer") is None
        assert await matcher.resolve(EntityKind.PRINTER, "   ") is None
        assert await matcher.resolve(EntityKind.PRINTER, None) is None

    async def test_accented_variant_needs_alias(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        db_session.add(make_entity(EntityKind.ARTIST, "Jules Chéret"))
        await db_session.flush()

        assert await EntityMatcher(db_session).resolve(EntityKind.ARTIST, "Jules Cheret") is None


class TestWebsiteMatching:
    """Seller and platform lookup by root domain."""

    async def test_seller_by_domain(self, db_session: AsyncSession, make_entity: MakeEntity) -> None:
        seller = make_entity(EntityKind.SELLER, "Christie's", website="https://www.christies.com")
        db_session.add(seller)
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(
            EntityKind.SELLER, "Christie's New York", website="https://christies.com/lot/1"
        )

        assert ref is not None
        assert ref.entity_id == seller.id
        assert ref.matched_by == MatchedBy.WEBSITE

    async def test_platform_by_url(self, db_session: AsyncSession, make_entity: MakeEntity) -> None:
        platform = make_entity(
            EntityKind.PLATFORM,
            "eBay",
            url="https://www.ebay.com",
            platform_type=PlatformType.MARKETPLACE,
        )
        db_session.add(platform)
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(
            EntityKind.PLATFORM, None, website="http://ebay.com/itm/42"
        )

        assert ref is not None
        assert ref.entity_id == platform.id

    async def test_website_ignored_for_artists(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        db_session.add(make_entity(EntityKind.ARTIST, "Alphonse Mucha"))
        await db_session.flush()

        ref = await EntityMatcher(db_session).resolve(
            EntityKind.ARTIST, "Someone Else", website="https://mucha.example.com"
        )
        assert ref is None
