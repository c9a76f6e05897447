"""CLI for poster attribution.

Commands:
    init-db                         - Create tables
    seed                            - Load versioned seed entities
    resolve <kind> <name>           - Look up a name (no writes)
    create <kind> <name>            - Resolve-or-create with aliases
    add-alias <kind> <id> <alias>   - Attach an alias to an entity
    add-item                        - Create an inventory item
    attribute <item-id> <json>      - Apply an analysis result to an item
    acquire <item-id>               - Link seller / platform to an item
    enrich <kind> <id>              - Enrich an entity from Wikipedia
    show-entity <kind> <id>         - Show entity details
    list-entities <kind>            - List / search entities
    clear-enrichment <kind> <id>    - Reset enrichment and verification
    merge <kind> <source> <target>  - Fold one entity into another
    delete-entity <kind> <id>       - Delete an entity (links set to null)
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated
from uuid import UUID

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from poster_attribution import db
from poster_attribution.attribution import (
    AnalysisResult,
    AttributionLinker,
    AttributionService,
    EnrichmentQueue,
)
from poster_attribution.config import settings
from poster_attribution.enrichment import EnrichmentService, WikipediaClient
from poster_attribution.errors import AttributionError
from poster_attribution.models import AttributionOrigin, EntityKind, InventoryItem
from poster_attribution.resolution import AliasMergeEngine, EntityMatcher
from poster_attribution.seeding import Seeder
from poster_attribution.services import CatalogService, entity_to_dict

app = typer.Typer(
    name="poster-attribution",
    help="Poster attribution: resolve, enrich and attribute catalog entities",
    no_args_is_help=True,
)
console = Console()


def run_async(coro):
    """Run an async coroutine in sync context."""
    return asyncio.run(coro)


def configure_logging(level: str) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid UUID: {value}")
        raise typer.Exit(1) from None


def fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


@app.callback()
def callback(
    log_level: Annotated[
        str, typer.Option("--log-level", help="Logging level (DEBUG, INFO, WARNING)")
    ] = settings.log_level,
):
    """Poster attribution command line."""
    configure_logging(log_level)


@app.command("init-db")
def init_database():
    """Create all tables if they don't exist."""
    async def _init():
        await db.init_db()
        console.print("[green]Database initialized.[/green]")

    run_async(_init())


@app.command()
def seed(
    kind: Annotated[
        list[EntityKind] | None, typer.Option("--kind", "-k", help="Kind(s) to seed (default: all)")
    ] = None,
):
    """Load seed entities. Safe to run repeatedly."""
    async def _seed():
        await db.init_db()
        async with db.async_session_factory() as session:
            try:
                report = await Seeder(session).run(kind or None)
                await session.commit()
            except AttributionError as e:
                fail(e)

        table = Table(title=f"Seed v{report.version}")
        table.add_column("Kind", style="cyan")
        table.add_column("Created", justify="right")
        table.add_column("Merged", justify="right")
        table.add_column("Aliases added", justify="right")
        table.add_column("Skipped", justify="right")
        for k, r in report.kinds.items():
            table.add_row(k.value, str(r.created), str(r.merged), str(r.aliases_added), str(len(r.skipped)))
        console.print(table)
        for line in report.skipped:
            console.print(f"  [yellow]skipped[/yellow] {line}")

    run_async(_seed())


@app.command()
def resolve(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    name: Annotated[str, typer.Argument(help="Name to look up")],
    website: Annotated[
        str | None, typer.Option(help="Website (sellers and platforms only)")
    ] = None,
):
    """Look up a name without creating anything."""
    async def _resolve():
        await db.init_db()
        async with db.async_session_factory() as session:
            try:
                ref = await EntityMatcher(session).resolve(kind, name, website=website)
            except AttributionError as e:
                fail(e)
            if ref is None:
                console.print(f"[yellow]No {kind.value} matches[/yellow] {name!r}")
                raise typer.Exit(1)
            console.print(
                f"[green]{ref.name}[/green] ({ref.entity_id}) matched by {ref.matched_by.value}"
            )

    run_async(_resolve())


@app.command()
def create(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    name: Annotated[str, typer.Argument(help="Canonical name")],
    alias: Annotated[
        list[str] | None, typer.Option("--alias", "-a", help="Known variant spelling")
    ] = None,
):
    """Resolve a name, creating the entity if it doesn't exist."""
    async def _create():
        await db.init_db()
        async with db.async_session_factory() as session:
            try:
                outcome = await AliasMergeEngine(session).resolve_or_create(kind, name, alias or [])
                await session.commit()
            except AttributionError as e:
                fail(e)

        status = "[green]created[/green]" if outcome.created else "[blue]existing[/blue]"
        console.print(f"{status} {outcome.entity.name} ({outcome.entity.id})")
        if outcome.cross_boundary:
            console.print("[yellow]Matched through an alias; check this is the same entity.[/yellow]")
        if outcome.aliases_added:
            console.print(f"  aliases added: {', '.join(outcome.aliases_added)}")
        if outcome.aliases_skipped:
            console.print(f"  aliases skipped: {', '.join(outcome.aliases_skipped)}")

    run_async(_create())


@app.command("add-alias")
def add_alias(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    entity_id: Annotated[str, typer.Argument(help="Entity ID (UUID)")],
    alias: Annotated[str, typer.Argument(help="Alias to add")],
):
    """Attach an alias to an existing entity."""
    eid = parse_uuid(entity_id)

    async def _add():
        async with db.async_session_factory() as session:
            try:
                outcome = await AliasMergeEngine(session).add_alias(kind, eid, alias)
                await session.commit()
            except AttributionError as e:
                fail(e)
        if outcome.aliases_added:
            console.print(f"[green]Added[/green] {alias!r} to {outcome.entity.name}")
        else:
            console.print(f"{outcome.entity.name} already has {alias!r}")

    run_async(_add())


@app.command("add-item")
def add_item(
    title: Annotated[str | None, typer.Option(help="Item title")] = None,
    sku: Annotated[str | None, typer.Option(help="Item SKU")] = None,
):
    """Create an inventory item and print its ID."""
    async def _add():
        await db.init_db()
        async with db.async_session_factory() as session:
            item = InventoryItem(title=title, sku=sku)
            session.add(item)
            await session.commit()
            console.print(str(item.id))

    run_async(_add())


@app.command()
def attribute(
    item_id: Annotated[str, typer.Argument(help="Inventory item ID (UUID)")],
    analysis_path: Annotated[Path, typer.Argument(help="JSON file with the analysis result")],
    dealer_research: Annotated[
        bool, typer.Option("--dealer-research", help="Names come from manual dealer research")
    ] = False,
    enrich: Annotated[
        bool, typer.Option("--enrich/--no-enrich", help="Enrich newly created entities")
    ] = True,
):
    """Apply an analysis result to an item's artist, printer and publisher."""
    iid = parse_uuid(item_id)
    try:
        analysis = AnalysisResult.model_validate(json.loads(analysis_path.read_text()))
    except (OSError, ValueError, PydanticValidationError) as e:
        fail(e)

    origin = AttributionOrigin.DEALER_RESEARCH if dealer_research else AttributionOrigin.ANALYSIS

    async def _attribute():
        queue = EnrichmentQueue(db.async_session_factory) if enrich else None
        try:
            service = AttributionService(db.async_session_factory, queue)
            results = await service.attribute(iid, analysis, origin=origin)
        except AttributionError as e:
            fail(e)
        finally:
            if queue is not None:
                await queue.aclose()

        table = Table(title=f"Attribution for {iid}")
        table.add_column("Field", style="cyan")
        table.add_column("Status")
        table.add_column("Score", justify="right")
        table.add_column("Entity")
        for outcome in results.outcomes:
            color = {"linked": "green", "failed": "red"}.get(outcome.status.value, "dim")
            entity = str(outcome.entity_id) if outcome.entity_id else (outcome.error or "")
            if outcome.created:
                entity += " (new)"
            table.add_row(
                outcome.field.value,
                f"[{color}]{outcome.status.value}[/{color}]",
                "" if outcome.confidence_score is None else str(outcome.confidence_score),
                entity,
            )
        console.print(table)
        if queue is not None:
            stats = queue.stats
            console.print(
                f"Enrichment: {stats.succeeded} succeeded, {stats.failed} failed "
                f"({stats.timed_out} timeouts)"
            )

    run_async(_attribute())


@app.command()
def acquire(
    item_id: Annotated[str, typer.Argument(help="Inventory item ID (UUID)")],
    seller: Annotated[str | None, typer.Option(help="Who the item was bought from")] = None,
    website: Annotated[str | None, typer.Option(help="Seller website")] = None,
    platform: Annotated[str | None, typer.Option(help="Where the item was bought")] = None,
    identity: Annotated[
        str | None, typer.Option(help="Seller handle on the platform")
    ] = None,
):
    """Link an item to the seller and platform it was acquired from."""
    iid = parse_uuid(item_id)

    async def _acquire():
        async with db.async_session_factory() as session:
            item = await session.get(InventoryItem, iid)
            if item is None:
                console.print(f"[red]Error:[/red] Item not found: {item_id}")
                raise typer.Exit(1)
            try:
                await AttributionLinker(session).link_acquisition(
                    item,
                    seller=seller,
                    seller_website=website,
                    platform=platform,
                    platform_identity=identity,
                )
                await session.commit()
            except AttributionError as e:
                fail(e)
            console.print(f"[green]Linked[/green] seller={item.seller_id} platform={item.platform_id}")

    run_async(_acquire())


@app.command()
def enrich(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    entity_id: Annotated[str, typer.Argument(help="Entity ID (UUID)")],
    url: Annotated[str | None, typer.Option(help="Wikipedia page URL")] = None,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite fields that already have values")
    ] = False,
):
    """Enrich an entity from Wikipedia."""
    eid = parse_uuid(entity_id)

    async def _enrich():
        async with db.async_session_factory() as session, WikipediaClient() as wiki:
            try:
                entity = await CatalogService(session).get_entity(kind, eid)
            except AttributionError as e:
                fail(e)
            result = await EnrichmentService(session, wiki).enrich(entity, url, force=force)
            if not result.ok:
                console.print(f"[red]Enrichment failed:[/red] {result.error}")
                raise typer.Exit(1)
            await session.commit()
            updated = ", ".join(result.fields_updated) or "nothing new"
            console.print(f"[green]Enriched[/green] {entity.name} from {result.source_url}: {updated}")

    run_async(_enrich())


@app.command("show-entity")
def show_entity(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    entity_id: Annotated[str, typer.Argument(help="Entity ID (UUID)")],
):
    """Show details for a specific entity."""
    eid = parse_uuid(entity_id)

    async def _show():
        async with db.async_session_factory() as session:
            catalog = CatalogService(session)
            try:
                entity = await catalog.get_entity(kind, eid)
            except AttributionError as e:
                fail(e)
            links = await catalog.count_links(kind, eid)

            data = entity_to_dict(entity)
            panel_content = [f"[bold]{k}:[/bold] {v}" for k, v in data.items() if v not in (None, [])]
            panel_content.append(f"[bold]Linked items:[/bold] {links}")
            console.print(Panel("\n".join(panel_content), title=f"{kind.value.title()}: {entity.name}"))

    run_async(_show())


@app.command("list-entities")
def list_entities(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    search: Annotated[str | None, typer.Option("--search", "-s", help="Name or alias substring")] = None,
    verified: Annotated[
        bool | None, typer.Option("--verified/--unverified", help="Filter on verification")
    ] = None,
    limit: Annotated[int, typer.Option(help="Max results")] = 50,
):
    """List entities of one kind."""
    async def _list():
        await db.init_db()
        async with db.async_session_factory() as session:
            entities = await CatalogService(session).list_entities(
                kind, verified=verified, search=search, limit=limit
            )

        if not entities:
            console.print(f"[yellow]No {kind.value} entities found.[/yellow]")
            return

        table = Table(title=f"{kind.value.title()} entities")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Aliases")
        table.add_column("Verified")
        for entity in entities:
            table.add_row(
                str(entity.id),
                entity.name,
                ", ".join(entity.aliases or []),
                "[green]yes[/green]" if entity.verified else "no",
            )
        console.print(table)

    run_async(_list())


@app.command("clear-enrichment")
def clear_enrichment(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    entity_id: Annotated[str, typer.Argument(help="Entity ID (UUID)")],
):
    """Reset enrichment fields (e.g. after a wrong page was matched)."""
    eid = parse_uuid(entity_id)

    async def _clear():
        async with db.async_session_factory() as session:
            try:
                entity = await CatalogService(session).clear_enrichment(kind, eid)
                await session.commit()
            except AttributionError as e:
                fail(e)
            console.print(f"[green]Cleared[/green] enrichment for {entity.name}")

    run_async(_clear())


@app.command()
def merge(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    source_id: Annotated[str, typer.Argument(help="Entity to fold in (will be deleted)")],
    target_id: Annotated[str, typer.Argument(help="Entity to keep")],
):
    """Merge a duplicate entity into another."""
    source = parse_uuid(source_id)
    target = parse_uuid(target_id)

    async def _merge():
        async with db.async_session_factory() as session:
            try:
                entity = await CatalogService(session).merge_entities(kind, source, target)
                await session.commit()
            except AttributionError as e:
                fail(e)
            console.print(f"[green]Merged[/green] into {entity.name}; aliases: {', '.join(entity.aliases)}")

    run_async(_merge())


@app.command("delete-entity")
def delete_entity(
    kind: Annotated[EntityKind, typer.Argument(help="Entity kind")],
    entity_id: Annotated[str, typer.Argument(help="Entity ID (UUID)")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Skip confirmation prompt")
    ] = False,
):
    """Delete an entity. Items linking to it keep their other fields."""
    eid = parse_uuid(entity_id)
    if not force:
        confirm = typer.confirm(f"Delete {kind.value} {eid}?", default=False)
        if not confirm:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)

    async def _delete():
        async with db.async_session_factory() as session:
            try:
                cleared = await CatalogService(session).delete_entity(kind, eid)
                await session.commit()
            except AttributionError as e:
                fail(e)
            console.print(f"[green]Deleted.[/green] {cleared} item link(s) cleared.")

    run_async(_delete())


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
