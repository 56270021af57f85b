"""
CLI for the gallery provider.

Provides command-line access to chosen photos and the metadata cache.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gallery_provider.core.config import configure_logging
from gallery_provider.infrastructure.gallery_store import (
    ChosenPhoto,
    GalleryProviderError,
    MetadataCacheEntry,
    count_rows,
    get_user_version,
)
from gallery_provider.services import BatchOperation, ServicesContainer, create_services

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="gallery",
    help="Gallery provider - chosen photos and photo metadata",
    add_completion=False,
)

_options: dict[str, Optional[Path]] = {"config": None, "db": None}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file (.yaml, .yml or .json)"
    ),
    db: Optional[Path] = typer.Option(None, "--db", help="Database file to use"),
):
    """Gallery provider command line."""
    _options["config"] = config
    _options["db"] = db


def get_services() -> ServicesContainer:
    """Build the provider from the global CLI options."""
    container = create_services(config_path=_options["config"], db_path=_options["db"])
    configure_logging(container.config.logging)
    return container


@app.command()
def add(
    uris: List[str] = typer.Argument(..., help="Photo URIs to add"),
):
    """Add photos to the chosen photos list in one batch."""
    try:
        container = get_services()
        provider = container.provider
        try:
            table_uri = provider.contract.chosen_photos.content_uri
            results = provider.apply_batch(
                [BatchOperation.insert(table_uri, {"uri": uri}) for uri in uris]
            )
        finally:
            container.close()

        for uri, result in zip(uris, results):
            console.print(f"[green]Added[/green] {uri} -> {result.uri}")
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("list")
def list_photos():
    """List chosen photos."""
    try:
        container = get_services()
        provider = container.provider
        try:
            cursor = provider.query(provider.contract.chosen_photos.content_uri)
            photos = [ChosenPhoto.from_row(row) for row in cursor] if cursor is not None else []
        finally:
            container.close()

        if not photos:
            console.print("[yellow]No chosen photos.[/yellow]")
            return

        table = Table(title="Chosen Photos", border_style="blue")
        table.add_column("ID", style="cyan", justify="right", no_wrap=True)
        table.add_column("URI", style="green")
        for photo in photos:
            table.add_row(str(photo.id), photo.uri)
        console.print(table)
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def remove(
    where: Optional[str] = typer.Option(None, "--where", "-w", help="SQL filter, e.g. \"uri = ?\""),
    args: Optional[List[str]] = typer.Option(None, "--arg", "-a", help="Filter argument"),
):
    """Remove chosen photos matching a filter (all photos if no filter)."""
    try:
        container = get_services()
        provider = container.provider
        try:
            count = provider.delete(provider.contract.chosen_photos.content_uri, where, args)
        finally:
            container.close()
        console.print(f"Removed [bold]{count}[/bold] photo(s)")
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def cache(
    uri: str = typer.Argument(..., help="Photo URI"),
    datetime_ms: Optional[int] = typer.Option(
        None, "--datetime", "-d", help="Capture time in milliseconds since the epoch"
    ),
    location: Optional[str] = typer.Option(None, "--location", "-l", help="Free-form location"),
):
    """Store metadata for a photo in the metadata cache."""
    try:
        container = get_services()
        provider = container.provider
        try:
            row_uri = provider.insert(
                provider.contract.metadata_cache.content_uri,
                {"uri": uri, "datetime": datetime_ms, "location": location},
            )
        finally:
            container.close()
        console.print(f"[green]Cached[/green] {uri} -> {row_uri}")
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def metadata():
    """List the metadata cache."""
    try:
        container = get_services()
        provider = container.provider
        try:
            cursor = provider.query(provider.contract.metadata_cache.content_uri)
            entries = (
                [MetadataCacheEntry.from_row(row) for row in cursor] if cursor is not None else []
            )
        finally:
            container.close()

        if not entries:
            console.print("[yellow]Metadata cache is empty.[/yellow]")
            return

        table = Table(title="Metadata Cache", border_style="blue")
        table.add_column("ID", style="cyan", justify="right", no_wrap=True)
        table.add_column("URI", style="green")
        table.add_column("Datetime", style="magenta", justify="right")
        table.add_column("Location", style="yellow")
        for entry in entries:
            table.add_row(
                str(entry.id),
                entry.uri,
                "" if entry.datetime is None else str(entry.datetime),
                entry.location or "",
            )
        console.print(table)
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("type")
def type_of(
    uri: str = typer.Argument(..., help="Resource URI"),
):
    """Print the content type of a resource URI."""
    try:
        container = get_services()
        try:
            console.print(container.provider.get_type(uri))
        finally:
            container.close()
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def info():
    """Show database location, schema version and row counts."""
    try:
        container = get_services()
        provider = container.provider
        try:
            conn = provider.database.get_readable_database()
            version = get_user_version(conn)
            chosen = count_rows(conn, provider.contract.chosen_photos.table_name)
            cached = count_rows(conn, provider.contract.metadata_cache.table_name)
        finally:
            container.close()

        grid = Table.grid(padding=1)
        grid.add_column(style="bold")
        grid.add_column()
        grid.add_row("Database:", str(provider.database.db_path))
        grid.add_row("Authority:", provider.contract.authority)
        grid.add_row("Schema Version:", str(version))
        grid.add_row("Chosen Photos:", str(chosen))
        grid.add_row("Metadata Cache:", str(cached))
        console.print(Panel(grid, title="Gallery Provider", border_style="blue", expand=False))
    except GalleryProviderError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
