"""Tests for the analysis result schema."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from poster_attribution.attribution.schemas import AnalysisResult
from poster_attribution.models import AttributionBasis, ConfidenceTier, LinkField


class TestAnalysisResult:
    def test_tiers_are_case_insensitive(self) -> None:
        analysis = AnalysisResult(artist="Mucha", artist_confidence=" CONFIRMED ")
        assert analysis.tier_for(LinkField.ARTIST) == ConfidenceTier.CONFIRMED

    def test_unrecognised_values_degrade_to_unknown(self) -> None:
        analysis = AnalysisResult(
            printer="DAN", printer_confidence="probably", printer_basis="hunch"
        )

        assert analysis.tier_for(LinkField.PRINTER) == ConfidenceTier.UNKNOWN
        assert analysis.basis_for(LinkField.PRINTER) == AttributionBasis.UNKNOWN

    def test_publication_alias(self) -> None:
        analysis = AnalysisResult.model_validate({"publication": "The New Yorker"})
        assert analysis.name_for(LinkField.PUBLISHER) == "The New Yorker"

    def test_artist_basis_uses_attribution_basis(self) -> None:
        analysis = AnalysisResult(artist="Folon", attribution_basis="Visible_Signature")
        assert analysis.basis_for(LinkField.ARTIST) == AttributionBasis.VISIBLE_SIGNATURE
        assert analysis.basis_for(LinkField.PUBLISHER) is None

    def test_score_out_of_range(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisResult(artist="Folon", artist_confidence_score=101)

    def test_source_urls_keyed_by_field(self) -> None:
        analysis = AnalysisResult.model_validate(
            {"source_urls": {"printer": "https://en.wikipedia.org/wiki/Imprimerie_Chaix"}}
        )
        assert analysis.source_url_for(LinkField.PRINTER).endswith("Imprimerie_Chaix")
        assert analysis.source_url_for(LinkField.ARTIST) is None
