"""Data access CLI commands: browse, query and export."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from queryly.cli.utils import console, context_objects, fail, resolve_profile
from queryly.exceptions import QuerylyError
from queryly.export import ExportFormat, export_table, exporter_registry
from queryly.session import BrowseSession, QuerySession, SessionState


@click.command(name="browse")
@click.argument("name")
@click.argument("table")
@click.option("--page-size", type=click.IntRange(1, 1000), help="Rows per page (default from settings)")
@click.pass_context
def browse_command(ctx: click.Context, name: str, table: str, page_size: Optional[int]) -> None:
    """📖 Browse a table page by page."""
    settings, store, _ = context_objects(ctx)
    try:
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            session = BrowseSession(
                provider,
                connection,
                table,
                console=console,
                page_size=page_size or settings.page_size,
                max_rows=settings.max_display_rows,
                max_cell_width=settings.max_cell_width,
            )
            try:
                state = session.run()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[grey50]Exited browse mode.[/grey50]")
                state = SessionState.EXITED
        if state is SessionState.EXITED:
            store.touch(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    if state is SessionState.ERROR:
        raise SystemExit(1)


@click.command(name="query")
@click.argument("name")
@click.pass_context
def query_command(ctx: click.Context, name: str) -> None:
    """💬 Run SQL statements interactively ('exit' to quit)."""
    settings, store, _ = context_objects(ctx)
    try:
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            console.print(
                f"[bold blue]Connected to {escape(profile.name)}[/bold blue] "
                f"([grey50]{provider.display_name}[/grey50]). Type 'exit' to quit.\n"
            )
            session = QuerySession(
                connection,
                console=console,
                max_rows=settings.max_display_rows,
                max_cell_width=settings.max_cell_width,
            )
            try:
                session.run()
            except (KeyboardInterrupt, EOFError):
                console.print("\n[grey50]Exited query mode.[/grey50]")
        store.touch(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)


@click.command(name="export")
@click.argument("name")
@click.argument("table")
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice([f.value for f in exporter_registry.list_available_formats()], case_sensitive=False),
    default=ExportFormat.CSV.value,
    show_default=True,
    help="Export file format",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the export file (default from settings)",
)
@click.pass_context
def export_command(ctx: click.Context, name: str, table: str, fmt: str, output_dir: Optional[Path]) -> None:
    """💾 Export a whole table to CSV or JSON."""
    settings, store, _ = context_objects(ctx)
    try:
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            with console.status(f"[yellow]Exporting {escape(table)}...[/yellow]", spinner="dots"):
                result = export_table(provider, connection, table, fmt, output_dir or settings.export_dir)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    if not result.success:
        console.print(f"[red]✗ Export failed: {escape(result.error_message or 'unknown error')}[/red]")
        raise SystemExit(1)

    store.touch(profile.name)
    console.print(
        f"[green]✓ Exported {result.row_count:,} row(s) to[/green] {escape(str(result.output_path))} "
        f"[grey50]({result.file_size or 0:,} bytes, {result.generation_time:.2f}s)[/grey50]"
    )
