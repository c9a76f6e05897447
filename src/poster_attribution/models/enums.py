"""Enumerations for the poster attribution data model."""

from enum import Enum


class EntityKind(str, Enum):
    """Which canonical entity table a record lives in."""

    ARTIST = "artist"
    PRINTER = "printer"
    PUBLISHER = "publisher"
    SELLER = "seller"  # WHO the item was bought from
    PLATFORM = "platform"  # WHERE the item was bought


class LinkField(str, Enum):
    """Item fields that carry a confidence-scored attribution link."""

    ARTIST = "artist"
    PRINTER = "printer"
    PUBLISHER = "publisher"

    @property
    def kind(self) -> EntityKind:
        return EntityKind(self.value)


class ConfidenceTier(str, Enum):
    """Categorical confidence reported by image analysis."""

    CONFIRMED = "confirmed"
    LIKELY = "likely"
    UNCERTAIN = "uncertain"
    UNKNOWN = "unknown"


class AttributionBasis(str, Enum):
    """The evidentiary reason a name was assigned to an item."""

    VISIBLE_SIGNATURE = "visible_signature"  # Signature visible on the piece
    PRINTED_CREDIT = "printed_credit"  # Name printed in the text
    EXTERNAL_KNOWLEDGE = "external_knowledge"  # Art-historical knowledge
    STYLISTIC_ANALYSIS = "stylistic_analysis"  # Recognizable style only
    EXTERNAL_RESEARCH = "external_research"  # Manual dealer research
    UNKNOWN = "unknown"


class AttributionOrigin(str, Enum):
    """Who proposed the names being attributed."""

    ANALYSIS = "analysis"
    DEALER_RESEARCH = "dealer_research"


class MatchedBy(str, Enum):
    """How the matcher found an entity."""

    NAME = "name"
    ALIAS = "alias"
    WEBSITE = "website"


class LinkStatus(str, Enum):
    """Per-field outcome of an attribution run."""

    LINKED = "linked"
    FAILED = "failed"
    SKIPPED = "skipped"


class SellerType(str, Enum):
    """WHO you can buy from."""

    AUCTION_HOUSE = "auction_house"
    DEALER = "dealer"
    GALLERY = "gallery"
    BOOKSTORE = "bookstore"
    INDIVIDUAL = "individual"
    OTHER = "other"


class PlatformType(str, Enum):
    """WHERE you buy."""

    MARKETPLACE = "marketplace"
    AGGREGATOR = "aggregator"
    VENUE = "venue"
    DIRECT = "direct"
