"""
CLI for viewcache.

Commands:
    viewcache render TEMPLATE - Render a template (through the cache if enabled)
    viewcache is-cached TEMPLATE - Exit 0 if a fresh cache entry exists
    viewcache clear-cache - Delete all cache entries
    viewcache config - Show current configuration
    viewcache version - Print version
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from viewcache import __version__
from viewcache.config import Settings, clear_settings_cache, get_settings
from viewcache.exceptions import ViewCacheError
from viewcache.logging import setup_logging
from viewcache.view import CacheConfig, TemplateCache

app = typer.Typer(
    name="viewcache",
    help="Render templates with a disk-backed output cache",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except Exception:
        return None


def _parse_vars(values: list[str]) -> dict[str, str]:
    """Parse NAME=VALUE pairs."""
    variables: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--var")
        variables[name.strip()] = value
    return variables


def _build_view(
    template_dir: Path | None = None,
    cache_dir: Path | None = None,
    lifetime: int | None = None,
    caching: bool | None = None,
) -> TemplateCache:
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'viewcache config' to see what's wrong."
        )
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL, log_file=settings.LOG_FILE)

    view = TemplateCache(CacheConfig.from_settings(settings), settings=settings)
    if template_dir is not None:
        view.set_template_dir(template_dir)
    if cache_dir is not None:
        view.set_cache_dir(cache_dir)
    if lifetime is not None:
        view.set_cache_lifetime(lifetime)
    if caching is not None:
        view.set_caching(caching)
    return view


@app.command()
def render(
    template: Annotated[str, typer.Argument(help="Template file to render")],
    cache_id: Annotated[
        Optional[str],
        typer.Option("--id", "-i", help="Cache id for this variant of the template"),
    ] = None,
    var: Annotated[
        Optional[list[str]],
        typer.Option("--var", "-v", help="Template variable as NAME=VALUE (repeatable)"),
    ] = None,
    template_dir: Annotated[
        Optional[Path],
        typer.Option("--template-dir", "-t", help="Template directory"),
    ] = None,
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--cache-dir", "-c", help="Cache directory"),
    ] = None,
    lifetime: Annotated[
        Optional[int],
        typer.Option("--lifetime", "-l", min=0, help="Cache lifetime in seconds"),
    ] = None,
    caching: Annotated[
        Optional[bool],
        typer.Option("--cache/--no-cache", help="Enable or disable the output cache"),
    ] = None,
) -> None:
    """Render a template and print the output."""
    variables = _parse_vars(var or [])
    try:
        view = _build_view(template_dir, cache_dir, lifetime, caching)
        output = view.fetch(template, cache_id=cache_id, variables=variables)
    except ViewCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    typer.echo(output, nl=False)


@app.command("is-cached")
def is_cached(
    template: Annotated[str, typer.Argument(help="Template file")],
    cache_id: Annotated[
        Optional[str],
        typer.Option("--id", "-i", help="Cache id"),
    ] = None,
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--cache-dir", "-c", help="Cache directory"),
    ] = None,
) -> None:
    """Check whether a fresh cache entry exists (exit code 0 if so)."""
    try:
        view = _build_view(cache_dir=cache_dir)
    except ViewCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if view.is_cached(template, cache_id):
        console.print(f"[green]cached[/green] {view.store.entry_path(view.resolve(template), cache_id)}")
        return
    console.print("[yellow]not cached[/yellow]")
    raise typer.Exit(1)


@app.command("clear-cache")
def clear_cache(
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--cache-dir", "-c", help="Cache directory"),
    ] = None,
) -> None:
    """Delete every cached entry."""
    try:
        view = _build_view(cache_dir=cache_dir)
        removed = view.clear_cache()
    except ViewCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"Removed {removed} entries from {view.config.cache_dir}")


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid.[/red]")
        error_console.print("Check the VIEWCACHE_* environment variables and your .env file.")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.redacted_display().items():
        display_value = str(value) if value is not None else "[dim]not set[/dim]"
        table.add_row(key, display_value)

    console.print(table)
    console.print(f"[bold]Page cache directory:[/bold] {settings.page_cache_dir}")


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"viewcache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
