"""Schema inspection CLI commands."""

from __future__ import annotations

import click
from rich.markup import escape

from queryly.cli.utils import console, context_objects, fail, resolve_profile
from queryly.exceptions import QuerylyError
from queryly.render import build_schema_tree, render_columns, render_tables


@click.group(name="schema")
@click.pass_context
def schema_group(ctx: click.Context) -> None:
    """🗂️  Inspect tables and columns."""
    pass


@schema_group.command(name="list")
@click.argument("name")
@click.pass_context
def list_tables_command(ctx: click.Context, name: str) -> None:
    """List the tables of a saved connection with their row counts."""
    try:
        _, store, _ = context_objects(ctx)
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            with console.status("[yellow]Loading tables...[/yellow]", spinner="dots"):
                tables = provider.list_tables(connection, connection.database)
        store.touch(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    console.print(f"[bold blue]Tables in {escape(profile.name)}[/bold blue]\n")
    if not tables:
        console.print("[yellow]No tables found.[/yellow]")
        return
    render_tables(console, tables)


@schema_group.command(name="info")
@click.argument("name")
@click.argument("table")
@click.pass_context
def info_command(ctx: click.Context, name: str, table: str) -> None:
    """Show the columns of one table."""
    try:
        _, store, _ = context_objects(ctx)
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            columns = provider.list_columns(connection, connection.database, table)
        store.touch(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    if not columns:
        console.print(f"[yellow]Table '{escape(table)}' not found or has no columns.[/yellow]")
        raise SystemExit(1)
    render_columns(console, table, columns)


@schema_group.command(name="tree")
@click.argument("name")
@click.pass_context
def tree_command(ctx: click.Context, name: str) -> None:
    """Show every table and its columns as a tree."""
    try:
        _, store, _ = context_objects(ctx)
        profile, provider = resolve_profile(ctx, name)
        with provider.open_connection(profile.connection_string) as connection:
            with console.status("[yellow]Loading schema...[/yellow]", spinner="dots"):
                tables = provider.list_tables(connection, connection.database)
                entries = [
                    (descriptor, provider.list_columns(connection, connection.database, descriptor.qualified_name))
                    for descriptor in tables
                ]
            database = provider.list_databases(connection)[0]
        store.touch(profile.name)
    except QuerylyError as exc:
        fail("Error", exc, ctx)

    console.print(build_schema_tree(database, provider.display_name, entries))
