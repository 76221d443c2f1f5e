"""Main CLI entry point for Queryly."""

from __future__ import annotations

from typing import Optional

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.text import Text

from queryly import __version__
from queryly.cli.commands import register_commands
from queryly.cli.commands.connect import connect_group
from queryly.cli.commands.data import browse_command, export_command, query_command
from queryly.cli.commands.schema import schema_group
from queryly.cli.utils import configure_logging, console, print_exception
from queryly.config.models import Settings
from queryly.config.store import ProfileStore
from queryly.db.registry import default_registry


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.option(
    "--connections-file",
    type=click.Path(dir_okay=False),
    envvar="QUERYLY_CONNECTIONS_FILE",
    help="Path to the saved connections file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    connections_file: Optional[str],
    verbose: bool,
) -> None:
    """Queryly - browse, query and export relational databases from the terminal."""
    try:
        settings = Settings()
    except ValidationError as exc:
        print_exception("Configuration Error", exc, verbose)
        raise SystemExit(1) from exc

    configure_logging("DEBUG" if verbose else settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj.setdefault("registry", default_registry())
    ctx.obj.update(
        {
            "settings": settings,
            "store": ProfileStore(connections_file or settings.connections_file),
            "verbose": verbose,
        }
    )

    if version:
        console.print(f"Queryly v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        show_dashboard()


# Commands are registered in workflow order:
# 1) Connections, 2) Schema inspection, 3) Data access.
COMMAND_REGISTRY = [
    connect_group,
    schema_group,
    browse_command,
    query_command,
    export_command,
]

register_commands(cli, COMMAND_REGISTRY)


def show_dashboard() -> None:
    """Display the main dashboard."""
    title = Text("Queryly", style="bold blue")
    subtitle = Text("Relational databases from the terminal", style="italic")

    dashboard_content = Text()
    dashboard_content.append("🔌 connect   Manage saved connections\n", style="bold")
    dashboard_content.append("🗂️  schema    Inspect tables and columns\n", style="bold")
    dashboard_content.append("📖 browse    Page through a table\n", style="bold")
    dashboard_content.append("💬 query     Run SQL interactively\n", style="bold")
    dashboard_content.append("💾 export    Save a table as CSV or JSON\n", style="bold")
    dashboard_content.append("\nRun 'queryly --help' for available commands", style="dim")

    panel = Panel(
        dashboard_content,
        title=title,
        subtitle=subtitle,
        border_style="blue",
        padding=(1, 2),
    )

    console.print(panel)


if __name__ == "__main__":
    cli()
