"""Click CLI for mjmlcache — render MJML files and manage the cache."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mjmlcache.config.hierarchy import load_config_hierarchy
from mjmlcache.config.loader import build_render_config, load_render_config
from mjmlcache.config.schema import RenderConfig

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str | None = None) -> None:
    """Configure logging from -v flags, falling back to the configured level."""
    level = logging.getLevelName((default_level or "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _resolve_config(config_path: str | None) -> tuple[RenderConfig, dict]:
    merged = load_config_hierarchy()
    if config_path:
        return load_render_config(config_path), merged
    return build_render_config(merged), merged


def _cache_path(merged: dict, db: str | None) -> Path | None:
    value = db or merged.get("cache_db_path")
    return Path(value) if value else None


@click.group()
@click.version_option(package_name="mjmlcache")
def cli() -> None:
    """mjmlcache — MJML rendering with identity-scoped caching."""


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Output file path.")
@click.option("--page-id", type=int, default=None, help="Cache the result under this page id.")
@click.option("--lang", type=str, default=None, help="Language code for the cache key.")
@click.option("--raw", is_flag=True, default=False, help="Request plain-text framing.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable caching.")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config YAML.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def render(
    input_path: str,
    output: str | None,
    page_id: int | None,
    lang: str | None,
    raw: bool,
    no_cache: bool,
    config_path: str | None,
    verbose: int,
) -> None:
    """Render an MJML file to HTML."""
    config, merged = _resolve_config(config_path)
    _setup_logging(verbose, merged.get("log_level"))

    if not config.has_credentials:
        error_console.print(
            "[red]Error:[/red] set MJML_APP_ID and MJML_SECRET_KEY (or app_id/secret_key in config)."
        )
        sys.exit(1)

    if page_id is None:
        body, failed = _render_uncached(input_path, config)
    else:
        body, failed = _render_cached(
            input_path, config, merged, page_id, lang, raw, no_cache
        )

    if output:
        Path(output).write_text(body, encoding="utf-8")
        console.print(f"[green]Written to {output}[/green]")
    else:
        click.echo(body)

    if failed:
        sys.exit(2)


def _render_uncached(input_path: str, config: RenderConfig) -> tuple[str, bool]:
    from mjmlcache.core import render_file

    result, body = render_file(input_path, config)
    failed = not result.ok
    if failed:
        error_console.print(
            f"[red]Rendering failed ({result.http_status}):[/red] {result.error_message}"
        )
    elif result.warnings:
        error_console.print(f"[yellow]{len(result.warnings)} warnings reported by the API[/yellow]")
    return body, failed


def _render_cached(
    input_path: str,
    config: RenderConfig,
    merged: dict,
    page_id: int,
    lang: str | None,
    raw: bool,
    no_cache: bool,
) -> tuple[str, bool]:
    from mjmlcache.core import MjmlRenderer
    from mjmlcache.types import CallerContext, Page, RenderOutcome

    path = Path(input_path)
    page = Page(
        page_id=page_id,
        content_type=config.allowed_content_types[0] if config.allowed_content_types else "page",
        title=path.stem,
        body=path.read_text(encoding="utf-8"),
        last_modified=int(path.stat().st_mtime),
    )
    renderer = MjmlRenderer(
        config,
        cache_db_path=_cache_path(merged, None),
        cache_memory_mb=merged.get("cache_memory_mb") or 100,
        no_cache=no_cache or bool(merged.get("cache_disabled")),
    )
    try:
        response = renderer.render(
            page,
            CallerContext(is_privileged=True),
            language=lang,
            query={"raw": ""} if raw else None,
        )
    finally:
        renderer.close()

    if response.outcome == RenderOutcome.CACHED:
        error_console.print("[cyan]Served from cache[/cyan]")
    return response.body, response.outcome in (RenderOutcome.DIAGNOSTIC, RenderOutcome.FALLBACK)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
def check(input_path: str) -> None:
    """Check an MJML file for unclosed or mismatched tags."""
    from mjmlcache.api.normalize import normalize_source
    from mjmlcache.diagnostics.validator import check_structure

    source = normalize_source(Path(input_path).read_text(encoding="utf-8"))
    diagnostics = check_structure(source)
    if not diagnostics:
        console.print("[green]No structural issues found.[/green]")
        return

    lines = source.split("\n")
    table = Table(title="Structural Issues", show_header=True)
    table.add_column("Line", style="cyan", justify="right")
    table.add_column("Severity")
    table.add_column("Message")
    table.add_column("Source")

    for diag in sorted(diagnostics, key=lambda d: d.line):
        text = lines[diag.line - 1].strip() if diag.line <= len(lines) else ""
        color = "red" if diag.severity == "error" else "yellow"
        table.add_row(
            str(diag.line),
            f"[{color}]{diag.severity.value}[/{color}]",
            diag.message,
            text,
        )

    console.print(table)
    sys.exit(1)


@cli.command()
@click.argument("page_id", type=int)
@click.option("--lang", type=str, default=None, help="Language code.")
@click.option("--query", "queries", multiple=True, help="Query parameter as name=value.")
@click.option("--pattern", type=str, default=None, help="Variant allow-list pattern.")
def key(page_id: int, lang: str | None, queries: tuple[str, ...], pattern: str | None) -> None:
    """Print the cache key for a content identity."""
    from mjmlcache.cache.keys import build_cache_key, derive_query_variant
    from mjmlcache.types import ContentIdentity

    query: dict[str, str] = {}
    for item in queries:
        name, _, value = item.partition("=")
        query[name] = value

    if pattern is None:
        pattern = build_render_config(load_config_hierarchy()).cache_variant_pattern

    identity = ContentIdentity(
        page_id=page_id,
        language=lang,
        query_variant=derive_query_variant(query, pattern),
    )
    click.echo(build_cache_key(identity))


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.option("--db", type=click.Path(), default=None, help="Cache database path.")
def cache_stats(db: str | None) -> None:
    """Show cache statistics."""
    from mjmlcache.cache.manager import CacheManager

    mgr = CacheManager(disk_path=_cache_path(load_config_hierarchy(), db))

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    stats = mgr.stats()
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.2f}")
    table.add_row("Hits", str(stats.hits))
    table.add_row("Misses", str(stats.misses))
    table.add_row("Writes", str(stats.writes))
    table.add_row("Invalidations", str(stats.invalidations))
    table.add_row("Hit rate", f"{stats.hit_rate:.1%}")

    console.print(table)
    mgr.close()


@cache.command("clear")
@click.option("--db", type=click.Path(), default=None, help="Cache database path.")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(db: str | None) -> None:
    """Clear all cached data."""
    from mjmlcache.cache.manager import CacheManager

    mgr = CacheManager(disk_path=_cache_path(load_config_hierarchy(), db))
    mgr.clear()
    mgr.close()
    console.print("[green]Cache cleared.[/green]")


@cache.command("invalidate")
@click.argument("page_id", type=int)
@click.option("--db", type=click.Path(), default=None, help="Cache database path.")
def cache_invalidate(page_id: int, db: str | None) -> None:
    """Drop every cached variant of a page."""
    from mjmlcache.cache.keys import invalidation_patterns
    from mjmlcache.cache.manager import CacheManager

    mgr = CacheManager(disk_path=_cache_path(load_config_hierarchy(), db))
    count = sum(mgr.delete_matching(p) for p in invalidation_patterns(page_id))
    mgr.close()
    console.print(f"[green]Removed {count} entries for page {page_id}.[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
