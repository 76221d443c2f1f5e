"""Rich rendering for results, schemas and profiles."""

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from queryly.config.models import ConnectionProfile
from queryly.db.models import Cell, CellKind, ColumnDescriptor, QueryResult, TableDescriptor

if TYPE_CHECKING:
    from queryly.session.pagination import PaginationState

MAX_DISPLAY_ROWS = 50
MAX_CELL_WIDTH = 50
ELLIPSIS = "..."
RULE = "─" * 62

_NUMERIC_KINDS = {CellKind.INTEGER, CellKind.FLOAT, CellKind.DECIMAL}


def truncate(value: str, max_width: int = MAX_CELL_WIDTH) -> str:
    """Cut ``value`` to ``max_width`` characters, ending in '...' when cut."""
    if len(value) <= max_width:
        return value
    return value[:max_width - len(ELLIPSIS)] + ELLIPSIS


def format_cell(cell: Cell, max_width: int = MAX_CELL_WIDTH) -> Text:
    """Display text for one cell; never interpreted as rich markup."""
    if cell.kind is CellKind.NULL:
        return Text("NULL", style="grey50")
    text = Text(truncate(cell.to_text(), max_width))
    if cell.kind in _NUMERIC_KINDS:
        text.justify = "right"
    return text


def render_result(
    console: Console,
    result: QueryResult,
    title: str = "Results",
    max_rows: int = MAX_DISPLAY_ROWS,
    max_cell_width: int = MAX_CELL_WIDTH,
) -> None:
    """Draw a successful result as a table, capped for display.

    At most ``max_rows`` rows and ``max_cell_width`` characters per cell are
    shown; the data itself is not modified.
    """
    if not result.columns:
        console.print(
            f"[green]✓ Statement executed[/green] [grey50]({result.execution_time_ms:.2f}ms)[/grey50]"
        )
        return

    if result.is_empty:
        console.print("[yellow]No data found.[/yellow]")
        return

    table = Table(box=box.ROUNDED, title=f"[bold]{escape(title)}[/bold]")
    for column in result.columns:
        table.add_column(Text(column), overflow="fold")

    shown = result.rows[:max_rows]
    for row in shown:
        table.add_row(*(format_cell(cell, max_cell_width) for cell in row))

    console.print(table)
    console.print(
        f"\n[grey50]Showing {len(shown)} of {result.row_count} row(s) | "
        f"Query time: {result.execution_time_ms:.2f}ms[/grey50]"
    )


def render_pagination_footer(console: Console, state: "PaginationState") -> None:
    console.print(f"[grey50]{RULE}[/grey50]")
    console.print(
        f"[bold] Page {state.page_number} of {max(state.total_pages, 1)}[/bold]    "
        f"[grey50]Rows {state.first_row}–{state.last_row} of {state.total_rows}[/grey50]"
    )
    console.print(f"[grey50]{RULE}[/grey50]")
    console.print(
        "Commands:  [blue]\\[N][/blue]ext  •  [blue]\\[P][/blue]rev  •  "
        "[blue]\\[G][/blue]o to page  •  [blue]\\[H][/blue]elp  •  [red]\\[Q][/red]uit"
    )
    console.print(f"[grey50]{RULE}[/grey50]\n")


BROWSE_COMMANDS: List[Tuple[str, str]] = [
    ("[blue]n[/blue]", "Go to next page"),
    ("[blue]p[/blue]", "Go to previous page"),
    ("[blue]g[/blue] or [blue]go[/blue]", "Go to specific page number (e.g. 'g 3')"),
    ("[blue]h[/blue] or [blue]help[/blue]", "Show this help"),
    ("[blue]q[/blue]", "Quit and return to terminal"),
]


def render_browse_help(console: Console) -> None:
    table = Table(box=box.ROUNDED, title="[bold]Navigation Commands[/bold]")
    table.add_column("Command")
    table.add_column("Description")
    for command, description in BROWSE_COMMANDS:
        table.add_row(command, description)
    console.print(table)


def render_tables(console: Console, tables: Sequence[TableDescriptor]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Table Name", style="cyan")
    table.add_column("Rows", justify="right")
    for descriptor in tables:
        table.add_row(Text(descriptor.qualified_name), f"{descriptor.row_count:,}")
    console.print(table)
    console.print(f"\n[grey50]Total: {len(tables)} table(s)[/grey50]")


def render_columns(console: Console, table_name: str, columns: Sequence[ColumnDescriptor]) -> None:
    console.print(f"[bold]Table:[/bold] {escape(table_name)}\n")
    console.print("[bold]Columns:[/bold]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Column Name", style="cyan")
    table.add_column("Data Type", style="green")
    table.add_column("Is Nullable", justify="center")
    table.add_column("Is Primary Key", justify="center")
    table.add_column("Default Value", justify="center")
    for column in columns:
        table.add_row(
            Text(column.name),
            Text(column.data_type),
            "[green]Yes[/green]" if column.is_nullable else "[red]No[/red]",
            "[blue]PK[/blue]" if column.is_primary_key else "",
            Text(column.default_value or ""),
        )
    console.print(table)
    console.print(f"\n[grey50]Total: {len(columns)} column(s)[/grey50]")


def build_schema_tree(
    label: str,
    db_type_name: str,
    tables: Iterable[Tuple[TableDescriptor, Sequence[ColumnDescriptor]]],
) -> Tree:
    """Tree of tables (with row counts) and their columns."""
    tree = Tree(f"[bold blue]{escape(label)}[/bold blue] ([grey50]{escape(db_type_name)}[/grey50])")
    for descriptor, columns in tables:
        node = tree.add(
            f"[bold]{escape(descriptor.qualified_name)}[/bold] [grey50]({descriptor.row_count:,} rows)[/grey50]"
        )
        for column in columns:
            pk_marker = " [blue](PK)[/blue]" if column.is_primary_key else ""
            null_marker = " [grey50](nullable)[/grey50]" if column.is_nullable else ""
            node.add(f"{escape(column.name)} [yellow]{escape(column.data_type)}[/yellow]{pk_marker}{null_marker}")
    return tree


def render_profiles(console: Console, profiles: Sequence[ConnectionProfile]) -> None:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Last Used")
    table.add_column("Favorite", justify="center")
    for profile in profiles:
        table.add_row(
            Text(profile.name),
            profile.db_type.display_name,
            profile.last_used.astimezone().strftime("%Y-%m-%d %H:%M"),
            "⭐" if profile.is_favorite else "",
        )
    console.print(table)


def print_warning(console: Console, message: str) -> None:
    console.print(f"[yellow]! {escape(message)}[/yellow]")


def print_error(console: Console, message: str, prefix: Optional[str] = None) -> None:
    text = f"{prefix}: {message}" if prefix else message
    console.print(f"[red]✗ {escape(text)}[/red]")
