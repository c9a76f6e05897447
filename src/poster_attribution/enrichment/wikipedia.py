"""Async client for the Wikipedia endpoints used by enrichment.

Endpoints:
    - REST summary: ``{rest}/page/summary/{title}`` (title, extract, thumbnail)
    - Parse API: ``api.php?action=parse&prop=wikitext`` (raw markup with infobox)
    - OpenSearch: ``api.php?action=opensearch`` (title search for discovery)

Every failure (transport error, non-2xx status, missing page, unexpected
payload) is raised as ``EnrichmentUnavailable`` so callers handle a single
exception type.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from types import TracebackType
from typing import Any
from urllib.parse import parse_qs, quote, unquote, urlsplit

import httpx

from poster_attribution.config import settings
from poster_attribution.errors import EnrichmentUnavailable

logger = logging.getLogger(__name__)


@dataclass
class SearchHit:
    title: str
    url: str
    description: str = ""


@dataclass
class PageSummary:
    """Plain-text summary of a Wikipedia page."""

    title: str
    extract: str
    page_url: str
    thumbnail_url: str | None = None


def page_title_from_url(url: str | None) -> str | None:
    """Return the page title from a Wikipedia article URL.

    Examples:
        "https://en.wikipedia.org/wiki/Imprimerie_Chaix" -> "Imprimerie Chaix"
        "https://en.wikipedia.org/w/index.php?title=Jules_Ch%C3%A9ret" -> "Jules Chéret"
        "https://example.com/wiki/Foo" -> None
    """
    if not url:
        return None
    parts = urlsplit(url.strip())
    host = (parts.hostname or "").lower()
    if not host.endswith("wikipedia.org"):
        return None

    raw: str | None = None
    if parts.path.startswith("/wiki/"):
        raw = parts.path[len("/wiki/") :]
    else:
        titles = parse_qs(parts.query).get("title")
        raw = titles[0] if titles else None

    if not raw:
        return None
    return unquote(raw).replace("_", " ").strip() or None


def page_url_for_title(title: str) -> str:
    return f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}"


class WikipediaClient:
    """Async Wikipedia client.

    Usage:
        async with WikipediaClient() as wiki:
            summary = await wiki.fetch_summary("Imprimerie Chaix")
            markup = await wiki.fetch_wikitext("Imprimerie Chaix")

    Pass ``transport`` (e.g. ``httpx.MockTransport``) to serve canned
    responses in tests.
    """

    def __init__(
        self,
        *,
        api_url: str | None = None,
        rest_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url or settings.wikipedia_api_url
        self._rest_url = (rest_url or settings.wikipedia_rest_url).rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=timeout or settings.wikipedia_timeout_seconds,
            headers={"User-Agent": user_agent or settings.wikipedia_user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> WikipediaClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, query: str, *, limit: int | None = None) -> list[SearchHit]:
        """Title search via OpenSearch. Returns hits in relevance order."""
        data = await self._get_json(
            self._api_url,
            {
                "action": "opensearch",
                "search": query,
                "limit": limit or settings.wikipedia_search_limit,
                "namespace": 0,
                "format": "json",
            },
        )
        # [query, [titles], [descriptions], [urls]]
        if not isinstance(data, list) or len(data) < 4:
            raise EnrichmentUnavailable(f"Unexpected search payload for {query!r}")

        titles, descriptions, urls = data[1], data[2], data[3]
        hits: list[SearchHit] = []
        for i, title in enumerate(titles):
            url = urls[i] if i < len(urls) else page_url_for_title(title)
            description = descriptions[i] if i < len(descriptions) else ""
            hits.append(SearchHit(title=title, url=url, description=description or ""))
        return hits

    async def fetch_summary(self, title: str) -> PageSummary:
        """Fetch the REST page summary for a title."""
        url = f"{self._rest_url}/page/summary/{quote(title.replace(' ', '_'), safe='')}"
        data = await self._get_json(url)
        if not isinstance(data, dict) or "title" not in data:
            raise EnrichmentUnavailable(f"Unexpected summary payload for {title!r}")

        page_url = (
            data.get("content_urls", {}).get("desktop", {}).get("page")
            or page_url_for_title(data["title"])
        )
        thumbnail = data.get("thumbnail") or {}
        return PageSummary(
            title=data["title"],
            extract=data.get("extract") or "",
            page_url=page_url,
            thumbnail_url=thumbnail.get("source"),
        )

    async def fetch_wikitext(self, title: str) -> str:
        """Fetch raw wikitext for a title via the parse API."""
        data = await self._get_json(
            self._api_url,
            {
                "action": "parse",
                "page": title,
                "prop": "wikitext",
                "redirects": 1,
                "format": "json",
            },
        )
        if not isinstance(data, dict):
            raise EnrichmentUnavailable(f"Unexpected parse payload for {title!r}")
        if "error" in data:
            info = data["error"].get("info", "unknown error")
            raise EnrichmentUnavailable(f"Wikipedia parse failed for {title!r}: {info}")
        try:
            return data["parse"]["wikitext"]["*"]
        except (KeyError, TypeError) as e:
            raise EnrichmentUnavailable(f"No wikitext in parse payload for {title!r}") from e

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        start_time = time.time()
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise EnrichmentUnavailable(
                f"Wikipedia returned {e.response.status_code} for {url}"
            ) from e
        except httpx.HTTPError as e:
            raise EnrichmentUnavailable(f"Wikipedia request failed for {url}: {e}") from e
        except ValueError as e:
            raise EnrichmentUnavailable(f"Wikipedia returned invalid JSON for {url}") from e

        if settings.log_api_calls:
            elapsed = (time.time() - start_time) * 1000  # ms
            logger.info("[WIKI] GET %s %s (%.0fms)", url, params or "", elapsed)
        return data
