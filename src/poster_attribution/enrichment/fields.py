"""Per-kind mapping from infobox keys and summary text to entity fields.

Extraction is layered:
1. Structured: for each target field, an ordered list of candidate infobox
   keys. The first key with a usable value wins (for years: the first key
   that yields a year). No cross-validation between keys.
2. Text fallback: only for fields still empty, simple patterns over the
   page summary ("founded in 1875", "dissolved in 1942", "(1875–1942)",
   "based in Paris, France", demonyms, publication keywords).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass

from poster_attribution.enrichment.infobox import YEAR_PATTERN, extract_year
from poster_attribution.models.enums import EntityKind


@dataclass
class EnrichmentFields:
    """Values proposed for an entity. None means "nothing found"."""

    title: str | None = None
    bio: str | None = None
    wikipedia_url: str | None = None
    image_url: str | None = None

    nationality: str | None = None
    birth_year: int | None = None
    death_year: int | None = None
    location: str | None = None
    country: str | None = None
    publication_type: str | None = None
    founded_year: int | None = None
    closed_year: int | None = None
    ceased_year: int | None = None

    def found(self) -> dict[str, str | int]:
        """Return only the fields that carry a value."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def is_empty(self) -> bool:
        return not self.found()


@dataclass(frozen=True)
class FieldRule:
    """Candidate infobox keys for one target field."""

    field: str
    keys: tuple[str, ...]
    parse: Callable[[str], str | int | None] | None = None


def _text(value: str) -> str | None:
    return value or None


_LOCATION_KEYS = ("location", "headquarters", "location_city", "city", "hq_location", "place")
_COUNTRY_KEYS = ("country", "location_country", "hq_country", "nation")
_FOUNDED_KEYS = ("founded", "foundation", "established", "formed", "opened")
_CLOSED_KEYS = ("defunct", "closed", "dissolved", "fate")

FIELD_RULES: dict[EntityKind, tuple[FieldRule, ...]] = {
    EntityKind.ARTIST: (
        FieldRule("nationality", ("nationality", "citizenship", "country")),
        FieldRule("birth_year", ("birth_date", "born", "birth_year"), extract_year),
        FieldRule("death_year", ("death_date", "died", "death_year"), extract_year),
    ),
    EntityKind.PRINTER: (
        FieldRule("location", _LOCATION_KEYS),
        FieldRule("country", _COUNTRY_KEYS),
        FieldRule("founded_year", _FOUNDED_KEYS, extract_year),
        FieldRule("closed_year", _CLOSED_KEYS, extract_year),
    ),
    EntityKind.PUBLISHER: (
        FieldRule("publication_type", ("type", "format", "category")),
        FieldRule("country", ("country", "location_country", "hq_country", "based")),
        FieldRule(
            "founded_year",
            ("founded", "first_issue", "firstdate", "publication_date", "established"),
            extract_year,
        ),
        FieldRule(
            "ceased_year",
            ("final_issue", "finaldate", "ceased_publication", "defunct", "last_issue"),
            extract_year,
        ),
    ),
    EntityKind.SELLER: (
        FieldRule("location", _LOCATION_KEYS),
        FieldRule("country", _COUNTRY_KEYS),
        FieldRule("founded_year", _FOUNDED_KEYS, extract_year),
        FieldRule("closed_year", _CLOSED_KEYS, extract_year),
    ),
    EntityKind.PLATFORM: (
        FieldRule("country", _COUNTRY_KEYS),
        FieldRule("founded_year", ("founded", "launched", "established"), extract_year),
    ),
}

# Fields that the "closed/ceased" text fallback fills, per kind
_CLOSURE_FIELD: dict[EntityKind, str] = {
    EntityKind.PRINTER: "closed_year",
    EntityKind.PUBLISHER: "ceased_year",
    EntityKind.SELLER: "closed_year",
}

DEMONYM_COUNTRIES: dict[str, str] = {
    "American": "United States",
    "Argentine": "Argentina",
    "Austrian": "Austria",
    "Belgian": "Belgium",
    "Brazilian": "Brazil",
    "British": "United Kingdom",
    "Canadian": "Canada",
    "Czech": "Czech Republic",
    "Danish": "Denmark",
    "Dutch": "Netherlands",
    "English": "United Kingdom",
    "Finnish": "Finland",
    "French": "France",
    "German": "Germany",
    "Greek": "Greece",
    "Hungarian": "Hungary",
    "Irish": "Ireland",
    "Italian": "Italy",
    "Japanese": "Japan",
    "Mexican": "Mexico",
    "Norwegian": "Norway",
    "Polish": "Poland",
    "Portuguese": "Portugal",
    "Romanian": "Romania",
    "Russian": "Russia",
    "Scottish": "United Kingdom",
    "Spanish": "Spain",
    "Swedish": "Sweden",
    "Swiss": "Switzerland",
}

_DEMONYM = re.compile(r"\b(" + "|".join(DEMONYM_COUNTRIES) + r")\b")
_FOUNDED_TEXT = re.compile(r"\b(?:founded|established|opened|formed)\b[^.]{0,40}", re.IGNORECASE)
_CLOSED_TEXT = re.compile(
    r"\b(?:defunct|dissolved|closed|ceased|liquidated)\b[^.]{0,40}", re.IGNORECASE
)
_LIFE_SPAN = re.compile(
    r"\([^()]*?\b(1[5-9]\d{2}|20[0-2]\d)\b[^()\d]*?[–—-]\s*[^()]*?\b(1[5-9]\d{2}|20[0-2]\d)\b[^()]*\)"
)
_BASED_IN = re.compile(r"\b(?:based|located|headquartered) in ([^.;()]+)", re.IGNORECASE)
_BASED_IN_STOP = re.compile(r"\s+(?:and|which|that|where|since|from|until)\b.*$")
_PUBLICATION_TYPES = (
    ("book publisher", "book publisher"),
    ("magazine", "magazine"),
    ("newspaper", "newspaper"),
    ("journal", "journal"),
)


def first_sentence(text: str) -> str:
    match = re.search(r"(?<!\b[A-Z])\.\s", text)
    return text[: match.start() + 1] if match else text


def year_near_keyword(text: str, pattern: re.Pattern[str]) -> int | None:
    """First year inside a short window after a keyword ("dissolved in 1942")."""
    for match in pattern.finditer(text):
        year = extract_year(match.group(0))
        if year is not None:
            return year
    return None


def life_span(text: str) -> tuple[int, int] | None:
    """Birth/death years from "(1875–1942)" or "(14 March 1875 – 1 May 1942)"."""
    match = _LIFE_SPAN.search(text)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def based_in(text: str) -> tuple[str, str | None] | None:
    """Location and optional country from "based in Paris, France"."""
    match = _BASED_IN.search(text)
    if match is None:
        return None
    phrase = _BASED_IN_STOP.sub("", match.group(1)).strip(" ,")
    if not phrase or YEAR_PATTERN.search(phrase):
        return None
    parts = [p.strip() for p in phrase.split(",") if p.strip()]
    if not parts:
        return None
    country = parts[-1] if len(parts) > 1 else None
    return parts[0], country


def demonym(text: str) -> str | None:
    """First demonym in the opening sentence ("was a French poster artist")."""
    match = _DEMONYM.search(first_sentence(text))
    return match.group(1) if match else None


def publication_type(text: str) -> str | None:
    lowered = text.lower()
    for keyword, label in _PUBLICATION_TYPES:
        if keyword in lowered:
            return label
    return None


def _apply_rules(
    kind: EntityKind, infobox: Mapping[str, str], fields: EnrichmentFields
) -> None:
    for rule in FIELD_RULES[kind]:
        parse = rule.parse or _text
        for key in rule.keys:
            raw = infobox.get(key)
            if not raw:
                continue
            value = parse(raw)
            if value is not None:
                setattr(fields, rule.field, value)
                break


def _apply_text_fallbacks(kind: EntityKind, summary: str, fields: EnrichmentFields) -> None:
    if kind == EntityKind.ARTIST:
        span = life_span(summary)
        if span is not None:
            if fields.birth_year is None:
                fields.birth_year = span[0]
            if fields.death_year is None:
                fields.death_year = span[1]
        if fields.nationality is None:
            fields.nationality = demonym(summary)
        return

    if fields.founded_year is None:
        fields.founded_year = year_near_keyword(summary, _FOUNDED_TEXT)

    closure_field = _CLOSURE_FIELD.get(kind)
    if closure_field is not None and getattr(fields, closure_field) is None:
        setattr(fields, closure_field, year_near_keyword(summary, _CLOSED_TEXT))

    if kind in (EntityKind.PRINTER, EntityKind.SELLER) and fields.location is None:
        place = based_in(summary)
        if place is not None:
            fields.location = place[0]
            if fields.country is None:
                fields.country = place[1]

    if fields.country is None:
        found = demonym(summary)
        if found is not None:
            fields.country = DEMONYM_COUNTRIES[found]

    if kind == EntityKind.PUBLISHER and fields.publication_type is None:
        fields.publication_type = publication_type(summary)


def extract_fields(
    kind: EntityKind | str,
    infobox: Mapping[str, str] | None,
    summary: str | None,
) -> EnrichmentFields:
    """Map a parsed infobox and a summary extract to kind-specific fields.

    Args:
        kind: Entity kind, selecting the field rules.
        infobox: Output of ``parse_infobox`` (may be empty).
        summary: Plain-text page extract (may be None).

    Returns:
        EnrichmentFields with kind-specific values filled where found.
        ``bio`` is set to the summary.
    """
    kind = EntityKind(kind)
    fields = EnrichmentFields(bio=summary or None)
    _apply_rules(kind, infobox or {}, fields)
    if summary:
        _apply_text_fallbacks(kind, summary, fields)
    return fields
