"""Interactive SQL prompt."""

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from queryly.db.connection import DatabaseConnection
from queryly.db.executor import QueryExecutor
from queryly.render import MAX_CELL_WIDTH, MAX_DISPLAY_ROWS, print_error, render_result

logger = logging.getLogger(__name__)

EXIT_TOKEN = "exit"


class QuerySession:
    """Read SQL one line at a time and show each result.

    Every statement is independent; a rejected statement prints the engine's
    error and the prompt comes back.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        *,
        console: Optional[Console] = None,
        prompt: Optional[Callable[[str], str]] = None,
        max_rows: int = MAX_DISPLAY_ROWS,
        max_cell_width: int = MAX_CELL_WIDTH,
        exit_token: str = EXIT_TOKEN,
    ) -> None:
        self.connection = connection
        self.console = console or Console()
        self._prompt = prompt or (lambda message: Prompt.ask(message, console=self.console))
        self.max_rows = max_rows
        self.max_cell_width = max_cell_width
        self.exit_token = exit_token.lower()
        self.executor = QueryExecutor(connection)
        self.failures = 0

    def run(self) -> int:
        """Loop until the exit token is entered.

        Returns:
            Number of statements executed (failed ones included).
        """
        executed = 0
        while True:
            sql = self._prompt("[blue]SQL>[/blue]") or ""
            if sql.strip().lower() == self.exit_token:
                break
            if not sql.strip():
                continue

            result = self.executor.execute_query(sql)
            executed += 1
            if not result.succeeded:
                self.failures += 1
                print_error(self.console, result.error_message, prefix="Error")
                continue

            render_result(self.console, result, "Results", self.max_rows, self.max_cell_width)
            self.console.print()

        logger.debug("Query mode ended after %d statement(s), %d failed", executed, self.failures)
        self.console.print("[grey50]Exited query mode.[/grey50]")
        return executed
