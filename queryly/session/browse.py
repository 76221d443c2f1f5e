"""Interactive, paginated table browsing."""

import logging
from enum import Enum
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from queryly.db.base import BaseProvider
from queryly.db.connection import DatabaseConnection
from queryly.db.executor import QueryExecutor
from queryly.db.models import QueryResult
from queryly.exceptions import QuerylyError
from queryly.render import (
    MAX_CELL_WIDTH,
    MAX_DISPLAY_ROWS,
    print_error,
    print_warning,
    render_browse_help,
    render_pagination_footer,
    render_result,
)
from queryly.session.pagination import DEFAULT_PAGE_SIZE, PaginationState

logger = logging.getLogger(__name__)

PromptFunc = Callable[[str], str]


class SessionState(str, Enum):
    """States of a browse session."""
    INITIALIZING = "initializing"
    DISPLAYING = "displaying"
    AWAITING_COMMAND = "awaiting_command"
    LOADING = "loading"
    SHOWING_HELP = "showing_help"
    EXITED = "exited"
    ERROR = "error"


class BrowseSession:
    """Page through one table with single-letter commands.

    The session counts the table's rows once, then loops: fetch the current
    page with the provider's pagination clause, render it, read a command.
    A failed count or page query ends the session in ``ERROR``; ``q`` ends
    it in ``EXITED``. Bad commands only produce a warning.
    """

    def __init__(
        self,
        provider: BaseProvider,
        connection: DatabaseConnection,
        table: str,
        *,
        console: Optional[Console] = None,
        prompt: Optional[PromptFunc] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_rows: int = MAX_DISPLAY_ROWS,
        max_cell_width: int = MAX_CELL_WIDTH,
        clear_screen: bool = True,
    ) -> None:
        self.provider = provider
        self.connection = connection
        self.table = table
        self.console = console or Console()
        self._prompt = prompt or (lambda message: Prompt.ask(message, console=self.console))
        self.page_size = page_size
        self.max_rows = max_rows
        self.max_cell_width = max_cell_width
        self.clear_screen = clear_screen

        self.executor = QueryExecutor(connection)
        self.pagination: Optional[PaginationState] = None
        self.current_page: Optional[QueryResult] = None
        self.error_message: Optional[str] = None
        self.state = SessionState.INITIALIZING
        self.transitions: List[SessionState] = [SessionState.INITIALIZING]
        self._notices: List[str] = []

    def run(self) -> SessionState:
        """Run until the user quits or a query fails.

        Returns:
            The terminal state, ``EXITED`` or ``ERROR``.
        """
        try:
            total_rows = self.executor.execute_scalar(self.provider.count_query(self.table))
        except QuerylyError as e:
            return self._fail(f"Failed to count rows in '{self.table}': {e.message}")

        self.pagination = PaginationState(total_rows, self.page_size)
        logger.debug("Browsing '%s': %s", self.table, self.pagination)

        while True:
            self._enter(SessionState.DISPLAYING)
            if not self._display_page():
                return self.state

            self._enter(SessionState.AWAITING_COMMAND)
            if not self.handle_command(self._prompt("[blue]Command>[/blue]")):
                break

        self._enter(SessionState.EXITED)
        self.console.print("[grey50]Exited browse mode.[/grey50]")
        return self.state

    def handle_command(self, raw: str) -> bool:
        """Apply one command to the pagination state.

        Returns:
            False when the session should end, True to redisplay.
        """
        parts = (raw or "").strip().lower().split()
        command = parts[0] if parts else ""
        argument = parts[1] if len(parts) > 1 else None
        pagination = self.pagination

        if command == "n":
            if not pagination.has_next_page:
                self._notices.append("Already on last page.")
            else:
                self._enter(SessionState.LOADING)
                pagination.next_page()
        elif command == "p":
            if not pagination.has_previous_page:
                self._notices.append("Already on first page.")
            else:
                self._enter(SessionState.LOADING)
                pagination.previous_page()
        elif command in ("g", "go"):
            if argument is None:
                argument = self._prompt(f"Enter page number (1-{pagination.last_page}):")
            page_number = _parse_int(argument)
            if page_number is None or not pagination.is_valid_page(page_number):
                self._notices.append("Invalid page number.")
            else:
                self._enter(SessionState.LOADING)
                pagination.go_to_page(page_number)
        elif command in ("h", "help"):
            self._enter(SessionState.SHOWING_HELP)
            render_browse_help(self.console)
            self._prompt("\n[grey50]Press Enter to continue...[/grey50]")
        elif command == "q":
            return False
        else:
            self._notices.append("Unknown command. Type 'h' for help.")
        return True

    def _display_page(self) -> bool:
        pagination = self.pagination
        sql = self.provider.select_page_query(self.table, pagination.page_size, pagination.offset)

        with self.console.status("Loading page data...", spinner="dots", spinner_style="yellow"):
            result = self.executor.execute_query(sql)

        if not result.succeeded:
            self.current_page = None
            self._fail(f"Query failed: {result.error_message}")
            return False

        self.current_page = result
        if self.clear_screen:
            self.console.clear()
        self.console.print(
            f"[bold blue]Browsing Table:[/bold blue] {escape(self.table)} "
            f"([grey50]{pagination.total_rows:,} rows, {pagination.total_pages} pages[/grey50])\n",
            highlight=False,
        )
        render_result(self.console, result, self.table, self.max_rows, self.max_cell_width)
        render_pagination_footer(self.console, pagination)

        for notice in self._notices:
            print_warning(self.console, notice)
        self._notices.clear()
        return True

    def _enter(self, state: SessionState) -> None:
        self.state = state
        self.transitions.append(state)

    def _fail(self, message: str) -> SessionState:
        self.error_message = message
        self._enter(SessionState.ERROR)
        logger.warning("Browse session for '%s' ended: %s", self.table, message)
        print_error(self.console, message)
        return self.state


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None
