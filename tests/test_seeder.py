"""Tests for seeding canonical entities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from poster_attribution.models import Artist, EntityKind, PlatformType, Seller, SellerType
from poster_attribution.resolution.matcher import EntityMatcher
from poster_attribution.seeding import Seeder
from poster_attribution.seeding.seed_data import SEED_DATA, SEED_VERSION, SeedEntry

if TYPE_CHECKING:
    from conftest import MakeEntity
    from sqlalchemy.ext.asyncio import AsyncSession


async def count(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestSeeder:
    """Seeding is idempotent and goes through alias merging."""

    async def test_seeds_everything(self, db_session: AsyncSession) -> None:
        report = await Seeder(db_session).run()

        assert report.version == SEED_VERSION
        assert report.created == sum(len(entries) for entries in SEED_DATA.values())
        assert report.merged == 0
        assert await count(db_session, Artist) == len(SEED_DATA[EntityKind.ARTIST])

    async def test_second_run_is_a_noop(self, db_session: AsyncSession) -> None:
        await Seeder(db_session).run()

        report = await Seeder(db_session).run()

        assert report.created == 0
        assert report.aliases_added == 0
        assert report.merged == sum(len(entries) for entries in SEED_DATA.values())

    async def test_seeded_aliases_resolve(self, db_session: AsyncSession) -> None:
        await Seeder(db_session).run([EntityKind.ARTIST, EntityKind.PRINTER])
        matcher = EntityMatcher(db_session)

        herouard = await matcher.resolve(EntityKind.ARTIST, "herouard")
        danesi = await matcher.resolve(EntityKind.PRINTER, "Stabilimento Danesi")

        assert herouard is not None and herouard.name == "Chéri Hérouard"
        assert danesi is not None and danesi.name == "DAN"

    async def test_catalog_variant_spellings_resolve(self, db_session: AsyncSession) -> None:
        await Seeder(db_session).run([EntityKind.ARTIST])
        matcher = EntityMatcher(db_session)

        for variant, canonical in [
            ("Troxler Niklaus", "Niklaus Troxler"),
            ("Ryszard Kuba Grzbowski", "Ryszard Kuba Grzybowski"),
            ("Sherman Foote Dentone", "Sherman Foote Denton"),
            ("mieczyslaw wasilewski", "Mieczysław Wasilewski"),
            ("SEPO (SEVERO POZZATI)", "Sepo"),
        ]:
            ref = await matcher.resolve(EntityKind.ARTIST, variant)
            assert ref is not None and ref.name == canonical, variant

    async def test_only_requested_kinds(self, db_session: AsyncSession) -> None:
        report = await Seeder(db_session).run([EntityKind.PUBLISHER])

        assert list(report.kinds) == [EntityKind.PUBLISHER]
        assert await count(db_session, Artist) == 0

    async def test_placeholder_artists_are_skipped(self, db_session: AsyncSession) -> None:
        data = {
            EntityKind.ARTIST: (
                SeedEntry("Restoration Artist"),
                SeedEntry("Not In Managed List Artist"),
                SeedEntry("Jules Chéret", ("Cheret",)),
            )
        }

        report = await Seeder(db_session).run(data=data)

        assert report.created == 1
        assert len(report.skipped) == 2
        assert await count(db_session, Artist) == 1

    async def test_new_aliases_are_merged(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        db_session.add(make_entity(EntityKind.ARTIST, "Alphonse Mucha"))
        await db_session.flush()

        report = await Seeder(db_session).run(
            data={EntityKind.ARTIST: (SeedEntry("alphonse mucha", ("Mucha", "A. Mucha")),)}
        )

        assert report.created == 0
        assert report.merged == 1
        assert report.aliases_added == 2

    async def test_attributes_fill_only_nulls(
        self, db_session: AsyncSession, make_entity: MakeEntity
    ) -> None:
        bonhams = make_entity(EntityKind.SELLER, "Bonhams", website="https://www.bonhams.co.uk")
        db_session.add(bonhams)
        await db_session.flush()

        await Seeder(db_session).run([EntityKind.SELLER, EntityKind.PLATFORM])

        assert bonhams.website == "https://www.bonhams.co.uk"
        assert bonhams.seller_type == SellerType.AUCTION_HOUSE
        ebay = await EntityMatcher(db_session).resolve(EntityKind.PLATFORM, "Ebay")
        assert ebay is not None
        assert ebay.entity.platform_type == PlatformType.MARKETPLACE
        assert await count(db_session, Seller) == len(SEED_DATA[EntityKind.SELLER])
