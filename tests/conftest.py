"""Shared pytest fixtures for poster attribution tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from poster_attribution.db import build_engine, build_session_factory
from poster_attribution.enrichment.wikipedia import WikipediaClient
from poster_attribution.models import (
    Base,
    CanonicalEntity,
    EntityKind,
    InventoryItem,
    model_for,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """File-backed SQLite so several sessions can share one database."""
    return f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"


@pytest.fixture
async def test_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine with all tables."""
    engine = build_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for code that opens and commits its own sessions."""
    return build_session_factory(test_engine)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session with transaction rollback.

    Each test gets its own transaction that is rolled back at the end.
    """
    async with session_factory() as session:
        async with session.begin():
            yield session
            await session.rollback()


# Type aliases for factory fixtures
MakeEntity = Callable[..., CanonicalEntity]
MakeItem = Callable[..., InventoryItem]


@pytest.fixture
def make_entity() -> MakeEntity:
    """Factory fixture for creating canonical entities of any kind."""

    def _make(
        kind: EntityKind = EntityKind.ARTIST,
        name: str = "Test Artist",
        *,
        aliases: list[str] | None = None,
        **fields: Any,
    ) -> CanonicalEntity:
        return model_for(kind)(name=name, aliases=list(aliases or []), **fields)

    return _make


@pytest.fixture
def make_item() -> MakeItem:
    """Factory fixture for creating InventoryItem instances."""

    def _make(*, title: str = "Test poster", sku: str | None = None, **fields: Any) -> InventoryItem:
        return InventoryItem(title=title, sku=sku, **fields)

    return _make


@dataclass
class FakePage:
    extract: str = ""
    wikitext: str | None = None
    thumbnail: str | None = None


@dataclass
class FakeWikipedia:
    """Canned Wikipedia served through ``httpx.MockTransport``.

    ``pages`` maps a title to its content; ``search_results`` overrides
    OpenSearch hits per query. Every request is recorded in ``requests``.
    """

    pages: dict[str, FakePage] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]
    search_results: dict[str, list[str]] = field(default_factory=dict)  # pyright: ignore[reportUnknownVariableType]
    fail_with: int | None = None
    requests: list[httpx.Request] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    def add(self, title: str, extract: str = "", wikitext: str | None = None, **kw: Any) -> None:
        self.pages[title] = FakePage(extract=extract, wikitext=wikitext, **kw)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": "unavailable"})

        path = request.url.path
        if "/page/summary/" in path:
            title = unquote(path.rsplit("/", 1)[1]).replace("_", " ")
            page = self.pages.get(title)
            if page is None:
                return httpx.Response(404, json={"title": "Not found."})
            payload: dict[str, Any] = {
                "title": title,
                "extract": page.extract,
                "content_urls": {
                    "desktop": {"page": f"https://en.wikipedia.org/wiki/{title.replace(' ', '_')}"}
                },
            }
            if page.thumbnail:
                payload["thumbnail"] = {"source": page.thumbnail}
            return httpx.Response(200, json=payload)

        params = request.url.params
        if params.get("action") == "parse":
            page = self.pages.get(params["page"])
            if page is None or page.wikitext is None:
                return httpx.Response(
                    200,
                    json={"error": {"code": "missingtitle", "info": "The page does not exist."}},
                )
            return httpx.Response(
                200, json={"parse": {"title": params["page"], "wikitext": {"*": page.wikitext}}}
            )

        if params.get("action") == "opensearch":
            query = params["search"]
            titles = self.search_results.get(
                query, [t for t in self.pages if query.lower() in t.lower()]
            )
            urls = [f"https://en.wikipedia.org/wiki/{t.replace(' ', '_')}" for t in titles]
            return httpx.Response(200, json=[query, titles, [""] * len(titles), urls])

        return httpx.Response(400, json={"error": "unexpected request"})

    def client(self) -> WikipediaClient:
        return WikipediaClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_wiki() -> FakeWikipedia:
    return FakeWikipedia()


@pytest.fixture
async def wiki(fake_wiki: FakeWikipedia) -> AsyncGenerator[WikipediaClient, None]:
    async with fake_wiki.client() as client:
        yield client

