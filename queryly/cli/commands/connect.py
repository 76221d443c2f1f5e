"""Connection profile management CLI commands."""

from __future__ import annotations

import click
from pydantic import ValidationError
from rich.markup import escape
from rich.prompt import Confirm

from queryly.cli.utils import console, context_objects, fail, resolve_profile
from queryly.config.models import ConnectionProfile
from queryly.exceptions import QuerylyError
from queryly.render import render_profiles


@click.group(name="connect")
@click.pass_context
def connect_group(ctx: click.Context) -> None:
    """🔌 Manage saved database connections."""
    pass


@connect_group.command(name="list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List saved connections."""
    try:
        _, store, _ = context_objects(ctx)
        profiles = store.list_profiles()
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    if not profiles:
        console.print("[yellow]No saved connections. Use 'queryly connect add' to create one.[/yellow]")
        return

    console.print("[bold blue]Saved Connections[/bold blue]\n")
    render_profiles(console, profiles)


@connect_group.command(name="add")
@click.option("--name", "-n", prompt="Connection name", help="Unique name for the connection")
@click.option(
    "--type", "-t", "db_type", prompt="Database type (SQLite, PostgreSQL, MySQL, SQLServer)",
    help="Database engine",
)
@click.option("--connection-string", "-c", prompt="Connection string", help="Engine connection string")
@click.option("--no-test", is_flag=True, help="Save without testing the connection first")
@click.pass_context
def add_command(
    ctx: click.Context,
    name: str,
    db_type: str,
    connection_string: str,
    no_test: bool,
) -> None:
    """Add a connection. It is saved only if a test connection succeeds."""
    try:
        _, store, registry = context_objects(ctx)
        profile = ConnectionProfile(name=name, db_type=db_type, connection_string=connection_string)
        if store.get(profile.name) is not None:
            console.print(f"[red]✗ Connection '{escape(profile.name)}' already exists.[/red]")
            raise SystemExit(1)

        provider = registry.get(profile.db_type)
        if not no_test:
            expanded = store.expand_env_vars(profile.connection_string)
            with console.status("[yellow]Testing connection...[/yellow]", spinner="dots"):
                ok = provider.test_connection(expanded)
            if not ok:
                console.print("[red]✗ Connection test failed. Connection not saved.[/red]")
                raise SystemExit(1)
            console.print("[green]✓ Connection test successful![/green]")

        store.add(profile)
    except ValidationError as exc:
        fail("Invalid connection", exc, ctx)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    console.print(f"[green]✓ Connection '{escape(profile.name)}' saved successfully![/green]")


@connect_group.command(name="test")
@click.argument("name")
@click.pass_context
def test_command(ctx: click.Context, name: str) -> None:
    """Test a saved connection."""
    try:
        profile, provider = resolve_profile(ctx, name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    with console.status(f"[yellow]Testing connection '{escape(profile.name)}'...[/yellow]", spinner="dots"):
        ok = provider.test_connection(profile.connection_string)

    if not ok:
        console.print(f"[red]✗ Connection '{escape(profile.name)}' failed.[/red]")
        raise SystemExit(1)
    console.print(f"[green]✓ Connection '{escape(profile.name)}' is working![/green]")


@connect_group.command(name="remove")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def remove_command(ctx: click.Context, name: str, yes: bool) -> None:
    """Remove a saved connection."""
    try:
        _, store, _ = context_objects(ctx)
        profile = store.require(name)
        if not yes and not Confirm.ask(
            f"Are you sure you want to remove '{escape(profile.name)}'?", console=console, default=False
        ):
            console.print("[grey50]Cancelled.[/grey50]")
            return
        store.remove(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    console.print(f"[green]✓ Connection '{escape(profile.name)}' removed.[/green]")


@connect_group.command(name="favorite")
@click.argument("name")
@click.option("--off", is_flag=True, help="Unmark the connection as favorite")
@click.pass_context
def favorite_command(ctx: click.Context, name: str, off: bool) -> None:
    """Mark a connection as favorite so it is listed first."""
    try:
        _, store, _ = context_objects(ctx)
        profile = store.set_favorite(name, favorite=not off)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    state = "no longer a favorite" if off else "marked as favorite"
    console.print(f"[green]✓ Connection '{escape(profile.name)}' {state}.[/green]")
