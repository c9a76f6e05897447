"""Wikipedia enrichment for canonical entities.

Submodules:
- wikipedia: async HTTP client (summary, wikitext, search)
- infobox: infobox wikitext parser
- fields: per-kind field extraction with text fallbacks
- service: fetch + non-destructive application to entities
"""

from poster_attribution.enrichment.fields import EnrichmentFields, extract_fields
from poster_attribution.enrichment.infobox import clean_wiki_markup, extract_year, parse_infobox
from poster_attribution.enrichment.service import EnrichmentResult, EnrichmentService
from poster_attribution.enrichment.wikipedia import (
    PageSummary,
    SearchHit,
    WikipediaClient,
    page_title_from_url,
)

__all__ = [
    "EnrichmentFields",
    "EnrichmentResult",
    "EnrichmentService",
    "PageSummary",
    "SearchHit",
    "WikipediaClient",
    "clean_wiki_markup",
    "extract_fields",
    "extract_year",
    "page_title_from_url",
    "parse_infobox",
]
