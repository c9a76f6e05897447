"""Tests for AttributionLinker (per-field resolve and link replacement)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from poster_attribution.attribution.linker import AttributionLinker, tier_score
from poster_attribution.attribution.schemas import AnalysisResult
from poster_attribution.errors import StorageError
from poster_attribution.models import (
    Artist,
    AttributionBasis,
    AttributionOrigin,
    ConfidenceTier,
    EntityKind,
    LinkField,
    LinkStatus,
    Printer,
    Seller,
)
from poster_attribution.resolution.alias_merge import AliasMergeEngine

if TYPE_CHECKING:
    from conftest import MakeEntity, MakeItem
    from sqlalchemy.ext.asyncio import AsyncSession

    from poster_attribution.models import InventoryItem


async def count(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
async def item(db_session: AsyncSession, make_item: MakeItem) -> InventoryItem:
    item = make_item(title="Bal Tabarin", sku="HER-001")
    db_session.add(item)
    await db_session.flush()
    return item


class TestApplyAnalysisAttribution:
    """Resolving and linking artist, printer and publisher."""

    async def test_alias_resolves_to_seeded_artist(
        self, db_session: AsyncSession, make_entity: MakeEntity, item: InventoryItem
    ) -> None:
        herouard = make_entity(EntityKind.ARTIST, "Chéri Hérouard", aliases=["Herouard"])
        db_session.add(herouard)
        await db_session.flush()
        analysis = AnalysisResult(
            artist="Herouard",
            artist_confidence="likely",
            attribution_basis="visible_signature",
        )

        results = await AttributionLinker(db_session).apply_analysis_attribution(item, analysis)

        artist = results.outcome(LinkField.ARTIST)
        assert artist is not None
        assert artist.status == LinkStatus.LINKED
        assert artist.entity_id == herouard.id
        assert not artist.created
        assert artist.confidence_score == tier_score(ConfidenceTier.LIKELY)

        link = item.get_link(LinkField.ARTIST)
        assert link is not None
        assert link.entity_id == herouard.id
        assert link.attribution_basis == AttributionBasis.VISIBLE_SIGNATURE
        assert link.name == "Herouard"
        assert link.source_description == "AI analysis: artist identified as Herouard (likely)"
        assert results.enrichment_requests == []
        assert await count(db_session, Artist) == 1

    async def test_missing_fields_are_skipped(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        results = await AttributionLinker(db_session).apply_analysis_attribution(
            item, AnalysisResult(printer="Imprimerie Chaix", printer_confidence="confirmed")
        )

        assert [o.status for o in results.outcomes] == [
            LinkStatus.SKIPPED,
            LinkStatus.LINKED,
            LinkStatus.SKIPPED,
        ]
        assert item.get_link(LinkField.ARTIST) is None
        assert item.get_link(LinkField.PUBLISHER) is None
        printer_link = item.get_link(LinkField.PRINTER)
        assert printer_link is not None
        assert printer_link.confidence_score == tier_score(ConfidenceTier.CONFIRMED)
        assert printer_link.attribution_basis == AttributionBasis.PRINTED_CREDIT

    async def test_new_entities_request_enrichment(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        analysis = AnalysisResult(
            printer="Imprimerie Chaix",
            publication="Le Rire",
            source_urls={"printer": "https://en.wikipedia.org/wiki/Imprimerie_Chaix"},
        )

        results = await AttributionLinker(db_session).apply_analysis_attribution(item, analysis)

        requests = {r.kind: r for r in results.enrichment_requests}
        assert set(requests) == {EntityKind.PRINTER, EntityKind.PUBLISHER}
        assert requests[EntityKind.PRINTER].source_url == (
            "https://en.wikipedia.org/wiki/Imprimerie_Chaix"
        )
        assert requests[EntityKind.PUBLISHER].source_url is None
        assert requests[EntityKind.PUBLISHER].name == "Le Rire"

    async def test_reattribution_replaces_whole_link(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        linker = AttributionLinker(db_session)
        await linker.apply_analysis_attribution(
            item,
            AnalysisResult(
                artist="Jules Chéret",
                artist_confidence="uncertain",
                attribution_basis="stylistic_analysis",
                source_description="Looks like Chéret",
            ),
        )

        await linker.apply_analysis_attribution(
            item,
            AnalysisResult(
                artist="Leonetto Cappiello",
                artist_confidence="confirmed",
                attribution_basis="visible_signature",
            ),
        )

        link = item.get_link(LinkField.ARTIST)
        assert link is not None
        assert link.name == "Leonetto Cappiello"
        assert link.confidence_score == tier_score(ConfidenceTier.CONFIRMED)
        assert link.attribution_basis == AttributionBasis.VISIBLE_SIGNATURE
        assert link.source_description == (
            "AI analysis: artist identified as Leonetto Cappiello (confirmed)"
        )

    async def test_explicit_score_overrides_tier(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        analysis = AnalysisResult(
            artist="Jean-Michel Folon", artist_confidence="likely", artist_confidence_score=88
        )

        results = await AttributionLinker(db_session).apply_analysis_attribution(item, analysis)

        assert results.outcome(LinkField.ARTIST).confidence_score == 88
        assert item.artist_confidence_score == 88

    async def test_dealer_research_basis(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        analysis = AnalysisResult(
            artist="Pierre Fix-Masseau",
            artist_confidence="confirmed",
            attribution_basis="visible_signature",
        )

        await AttributionLinker(db_session).apply_analysis_attribution(
            item, analysis, origin=AttributionOrigin.DEALER_RESEARCH
        )

        link = item.get_link(LinkField.ARTIST)
        assert link is not None
        assert link.attribution_basis == AttributionBasis.EXTERNAL_RESEARCH
        assert link.source_description.startswith("Dealer research:")

    async def test_one_field_failure_does_not_block_others(
        self,
        db_session: AsyncSession,
        item: InventoryItem,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        engine = AliasMergeEngine(db_session)
        real_resolve = engine.resolve_or_create

        async def flaky(kind, name, aliases=()):
            if kind == EntityKind.PRINTER:
                raise StorageError("printers table unavailable")
            return await real_resolve(kind, name, aliases)

        monkeypatch.setattr(engine, "resolve_or_create", flaky)
        analysis = AnalysisResult(
            artist="Jean Carlu", printer="Bedos", publisher="Vogue", publisher_confidence="likely"
        )

        results = await AttributionLinker(db_session, engine=engine).apply_analysis_attribution(
            item, analysis
        )
        await db_session.refresh(item)

        assert results.linked == [LinkField.ARTIST, LinkField.PUBLISHER]
        assert results.failed == [LinkField.PRINTER]
        assert "unavailable" in results.outcome(LinkField.PRINTER).error
        assert item.artist_id is not None
        assert item.publisher_id is not None
        assert item.printer_id is None
        assert await count(db_session, Printer) == 0


class TestLinkAcquisition:
    """Seller and platform linking."""

    async def test_creates_seller_and_platform(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        requests = await AttributionLinker(db_session).link_acquisition(
            item,
            seller="Swann Auction Galleries",
            seller_website="https://www.swanngalleries.com",
            platform="Live Auctioneers",
            platform_identity=" swann_lot_204 ",
        )

        assert item.seller_id is not None
        assert item.platform_id is not None
        assert item.platform_identity == "swann_lot_204"
        assert {r.kind for r in requests} == {EntityKind.SELLER, EntityKind.PLATFORM}
        seller = await db_session.get(Seller, item.seller_id)
        assert seller.website == "https://www.swanngalleries.com"

    async def test_seller_matched_by_website(
        self, db_session: AsyncSession, make_entity: MakeEntity, item: InventoryItem
    ) -> None:
        swann = make_entity(
            EntityKind.SELLER, "Swann Auction Galleries", website="https://www.swanngalleries.com"
        )
        db_session.add(swann)
        await db_session.flush()

        requests = await AttributionLinker(db_session).link_acquisition(
            item,
            seller="Swann Galleries NYC",
            seller_website="https://catalogue.swanngalleries.com/lots/123",
        )

        assert item.seller_id == swann.id
        assert requests == []
        assert await count(db_session, Seller) == 1

    async def test_blank_names_leave_links_alone(
        self, db_session: AsyncSession, item: InventoryItem
    ) -> None:
        requests = await AttributionLinker(db_session).link_acquisition(item, seller="  ")

        assert requests == []
        assert item.seller_id is None
        assert item.platform_id is None
