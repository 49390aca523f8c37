"""Click CLI for recipebox — browse the feed and maintain the image cache."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from recipebox.config.settings import Settings

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, base_level: str = "WARNING") -> None:
    """Configure logging from the configured level and the -v count."""
    level = logging.getLevelNamesMapping().get(base_level.upper(), logging.WARNING)
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_settings(cache_dir: str | None = None, **overrides: object) -> Settings:
    return Settings.load(cache_dir=cache_dir, **overrides)


_verbose_option = click.option(
    "-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)."
)
_cache_dir_option = click.option(
    "--cache-dir", type=click.Path(file_okay=False), default=None, help="Image cache directory."
)


@click.group()
@click.version_option(package_name="recipebox")
def cli() -> None:
    """recipebox — recipe feed browser with a two-tier image cache."""


@cli.command()
@click.option("--local", "local_feed", type=click.Path(exists=True, dir_okay=False),
              help="Read recipes from a local JSON file instead of the feed URL.")
@click.option("-s", "--search", "query", type=str, default=None, help="Filter by cuisine/name.")
@click.option("--skip-invalid", is_flag=True, default=False,
              help="Drop invalid records instead of rejecting the whole feed.")
@_cache_dir_option
@_verbose_option
def recipes(
    local_feed: str | None,
    query: str | None,
    skip_invalid: bool,
    cache_dir: str | None,
    verbose: int,
) -> None:
    """List recipes from the feed."""
    from recipebox.core import Recipebox
    from recipebox.errors.exceptions import RecipeServiceError

    settings = _load_settings(cache_dir, skip_invalid=skip_invalid or None)
    _setup_logging(verbose, settings.log_level)

    async def _run() -> list:
        async with Recipebox(settings, local_feed=local_feed) as app:
            return await app.load_recipes(query)

    try:
        found = asyncio.run(_run())
    except RecipeServiceError as e:
        error_console.print(f"[red]Error ({e.kind}):[/red] {e.message}")
        sys.exit(1)

    table = Table(title=f"Recipes ({len(found)})", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Cuisine")
    table.add_column("Source")
    table.add_column("Video")
    for recipe in found:
        table.add_row(
            recipe.name,
            recipe.cuisine,
            recipe.site_url or "-",
            "yes" if recipe.video_url else "no",
        )
    console.print(table)


@cli.command("fetch-image")
@click.argument("url")
@_cache_dir_option
@_verbose_option
def fetch_image(url: str, cache_dir: str | None, verbose: int) -> None:
    """Load one image through the cache."""
    from recipebox.cache.loader import LoaderState
    from recipebox.core import Recipebox

    settings = _load_settings(cache_dir)
    _setup_logging(verbose, settings.log_level)

    async def _run() -> tuple[bool, object]:
        async with Recipebox(settings) as app:
            was_cached = await app.cache.aimage_for(url) is not None
            loader = app.image_loader(url)
            await loader.load()
            return was_cached, loader

    was_cached, loader = asyncio.run(_run())
    if loader.state != LoaderState.LOADED:
        error_console.print(f"[red]Error:[/red] {loader.error.message if loader.error else url}")
        sys.exit(1)

    width, height = loader.image.size
    source = "cache" if was_cached else "network"
    console.print(f"[green]Loaded {width}x{height} image from {source}[/green]")


@cli.command()
@click.option("--local", "local_feed", type=click.Path(exists=True, dir_okay=False),
              help="Read recipes from a local JSON file instead of the feed URL.")
@click.option("--size", type=click.Choice(["small", "large"]), default="small",
              help="Which photo to prefetch.")
@click.option("--concurrency", type=int, default=None, help="Parallel downloads.")
@_cache_dir_option
@_verbose_option
def prefetch(
    local_feed: str | None,
    size: str,
    concurrency: int | None,
    cache_dir: str | None,
    verbose: int,
) -> None:
    """Warm the image cache with every recipe photo."""
    from recipebox.core import Recipebox
    from recipebox.errors.exceptions import RecipeServiceError

    settings = _load_settings(cache_dir, prefetch_concurrency=concurrency)
    _setup_logging(verbose, settings.log_level)

    async def _run():
        async with Recipebox(settings, local_feed=local_feed) as app:
            found = await app.load_recipes()
            return await app.prefetch_images(found, size=size)

    try:
        result = asyncio.run(_run())
    except RecipeServiceError as e:
        error_console.print(f"[red]Error ({e.kind}):[/red] {e.message}")
        sys.exit(1)

    console.print(
        f"[green]{result.downloaded} downloaded[/green], "
        f"{result.cached} already cached, "
        f"[red]{result.failed} failed[/red]"
    )


@cli.group()
def cache() -> None:
    """Image cache management commands."""


def _open_cache(cache_dir: str | None, verbose: int = 0, sweep_on_start: bool = False):
    from datetime import timedelta

    from recipebox.cache.manager import ImageCache

    settings = _load_settings(cache_dir)
    _setup_logging(verbose, settings.log_level)
    return ImageCache(
        directory=settings.cache_dir,
        max_age=timedelta(days=settings.max_age_days),
        key_scheme=settings.key_scheme,
        sweep_on_start=sweep_on_start,
    )


@cache.command("stats")
@_cache_dir_option
@_verbose_option
def cache_stats(cache_dir: str | None, verbose: int) -> None:
    """Show disk cache statistics."""
    image_cache = _open_cache(cache_dir, verbose)
    stats = image_cache.stats()

    table = Table(title="Image Cache", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Directory", str(image_cache.directory))
    table.add_row("Available", "yes" if stats.disk_available else "[red]no[/red]")
    table.add_row("Entries", str(stats.disk_entries))
    table.add_row("Size (MB)", f"{stats.disk_size_mb:.1f}")
    table.add_row("Max age (days)", f"{image_cache.max_age.total_seconds() / 86400:g}")
    console.print(table)


@cache.command("sweep")
@_cache_dir_option
@_verbose_option
def cache_sweep(cache_dir: str | None, verbose: int) -> None:
    """Delete expired images from the disk cache."""
    removed = _open_cache(cache_dir, verbose).sweep_expired()
    console.print(f"[green]Removed {removed} expired image(s).[/green]")


@cache.command("clear")
@_cache_dir_option
@_verbose_option
@click.confirmation_option(prompt="Are you sure you want to clear the image cache?")
def cache_clear(cache_dir: str | None, verbose: int) -> None:
    """Clear all cached images."""
    _open_cache(cache_dir, verbose).clear_all_cache()
    console.print("[green]Cache cleared.[/green]")


if __name__ == "__main__":
    cli()
