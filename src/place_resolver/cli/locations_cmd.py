"""Location CLI commands: resolve one address, enrich a file, and cache stats."""

import asyncio
from pathlib import Path

import typer

locations_app = typer.Typer()


@locations_app.command("resolve")
def resolve(
    address: str = typer.Argument(..., help="Freeform address to resolve"),  # noqa: B008
    name: str | None = typer.Option(None, "--name", help="Known venue name (skips lookup)"),
) -> None:
    """Resolve one address to a venue name."""
    asyncio.run(_resolve(address, name))


@locations_app.command("enrich")
def enrich(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File with one address per line"),  # noqa: B008
    sequential: bool = typer.Option(False, "--sequential", help="Resolve one address at a time"),  # noqa: FBT001
    dry_run: bool = typer.Option(False, "--dry-run", help="Resolve without reporting as applied"),  # noqa: FBT001
) -> None:
    """Resolve venue names for every address in a file."""
    asyncio.run(_enrich(file, sequential, dry_run))


@locations_app.command("cache-stats")
def cache_stats() -> None:
    """Show location cache statistics."""
    asyncio.run(_cache_stats())


def _read_addresses(file: Path) -> list[str]:
    """Read non-empty, non-comment lines from an address file."""
    lines = file.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]


async def _resolve(address: str, name: str | None) -> None:
    """Async implementation of single-address resolution."""
    from place_resolver.core.config import get_settings
    from place_resolver.core.database import dispose_engine, get_session_factory, init_engine
    from place_resolver.services.location_service import build_resolver, resolve_location

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        resolver = build_resolver(settings, get_session_factory())
        result = await resolve_location(
            resolver,
            address,
            api_key=settings.google_maps_api_key,
            location_name=name,
        )
        typer.echo(f"Location name:     {result.location_name or '-'}")
        typer.echo(f"Formatted address: {result.formatted_address or '-'}")
        if result.has_coordinates:
            typer.echo(f"Lat/Lon:           {result.latitude}, {result.longitude}")
    finally:
        await dispose_engine()


async def _enrich(file: Path, sequential: bool, dry_run: bool) -> None:
    """Async implementation of file enrichment."""
    from place_resolver.core.config import get_settings
    from place_resolver.core.database import dispose_engine, get_session_factory, init_engine
    from place_resolver.services.location_service import EnrichmentItem, build_resolver, enrich_locations

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    addresses = _read_addresses(file)
    items = [EnrichmentItem(key=str(i), address=a) for i, a in enumerate(addresses, start=1)]

    try:
        resolver = build_resolver(settings, get_session_factory())
        summary = await enrich_locations(
            resolver,
            items,
            api_key=settings.google_maps_api_key,
            concurrent=not sequential,
            delay=settings.enrich_batch_delay,
            dry_run=dry_run,
        )
        names = {r.key: r.location_name for r in summary.results}
        for item in items:
            typer.echo(f"{item.address} -> {names.get(item.key) or '-'}")

        typer.echo(f"\nEnrichment batch {summary.batch_id}{' (dry run)' if dry_run else ''}:")
        typer.echo(f"  Processed:  {summary.processed}")
        typer.echo(f"  Enriched:   {summary.enriched}")
        typer.echo(f"  Cache hits: {summary.cached}")
        typer.echo(f"  Failed:     {summary.failed}")
        typer.echo(f"  Skipped:    {summary.skipped}")
    finally:
        await dispose_engine()


async def _cache_stats() -> None:
    """Async implementation of cache statistics."""
    from place_resolver.core.config import get_settings
    from place_resolver.core.database import dispose_engine, get_session_factory, init_engine
    from place_resolver.services.location_service import get_cache_stats

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        async with get_session_factory()() as session:
            stats = await get_cache_stats(session)
        typer.echo(f"Cached entries:          {stats['total_entries']}")
        typer.echo(f"Entries with coordinates: {stats['entries_with_coordinates']}")
        typer.echo(f"Oldest entry:            {stats['oldest_entry'] or '-'}")
        typer.echo(f"Newest entry:            {stats['newest_entry'] or '-'}")
    finally:
        await dispose_engine()
