"""Pydantic schema for the upstream image-analysis result.

The analysis service is external; this schema only accepts what it sends.
Tier and basis strings are matched case-insensitively and anything
unrecognised degrades to ``unknown`` rather than failing validation.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from poster_attribution.models.enums import AttributionBasis, ConfidenceTier, LinkField


def _coerce_tier(v: Any) -> ConfidenceTier:
    if isinstance(v, ConfidenceTier):
        return v
    try:
        return ConfidenceTier(str(v).strip().lower())
    except ValueError:
        return ConfidenceTier.UNKNOWN


def _coerce_basis(v: Any) -> AttributionBasis | None:
    if v is None or isinstance(v, AttributionBasis):
        return v
    try:
        return AttributionBasis(str(v).strip().lower())
    except ValueError:
        return AttributionBasis.UNKNOWN


Tier = Annotated[ConfidenceTier, BeforeValidator(_coerce_tier)]
Basis = Annotated[AttributionBasis | None, BeforeValidator(_coerce_basis)]
Score = Annotated[int | None, Field(ge=0, le=100)]


class AnalysisResult(BaseModel):
    """Names and provenance proposed for one item.

    Example:
        AnalysisResult(
            artist="Chéri Hérouard",
            artist_confidence="likely",
            attribution_basis="visible_signature",
            printer="Imprimerie Chaix",
        )
    """

    model_config = ConfigDict(populate_by_name=True)

    artist: str | None = None
    artist_confidence: Tier = ConfidenceTier.UNKNOWN
    artist_confidence_score: Score = None
    attribution_basis: Basis = Field(
        default=None,
        description="How the artist was identified (signature, style, ...)",
    )

    printer: str | None = None
    printer_confidence: Tier = ConfidenceTier.UNKNOWN
    printer_confidence_score: Score = None
    printer_basis: Basis = None

    publisher: str | None = Field(
        default=None,
        validation_alias=AliasChoices("publisher", "publication"),
    )
    publisher_confidence: Tier = ConfidenceTier.UNKNOWN
    publisher_confidence_score: Score = None
    publisher_basis: Basis = None

    source_description: str | None = Field(
        default=None,
        description="Free-text provenance applied to every linked field",
    )
    source_urls: dict[LinkField, str] = Field(  # pyright: ignore[reportUnknownVariableType]
        default_factory=dict,
        description="Reference page per field, used to enrich newly created entities",
    )

    def name_for(self, field: LinkField) -> str | None:
        return getattr(self, LinkField(field).value)

    def tier_for(self, field: LinkField) -> ConfidenceTier:
        return getattr(self, f"{LinkField(field).value}_confidence")

    def score_for(self, field: LinkField) -> int | None:
        return getattr(self, f"{LinkField(field).value}_confidence_score")

    def basis_for(self, field: LinkField) -> AttributionBasis | None:
        field = LinkField(field)
        if field == LinkField.ARTIST:
            return self.attribution_basis
        return getattr(self, f"{field.value}_basis")

    def source_url_for(self, field: LinkField) -> str | None:
        return self.source_urls.get(LinkField(field))
