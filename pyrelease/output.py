"""Output formatting for CLI and engine messages."""

import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


def running_in_github_actions() -> bool:
    """Check whether we run inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


class OutputFormatter:
    """Formats user-facing output.

    Messages go to stdout through a rich console, errors and warnings to
    stderr. Inside GitHub Actions, warnings, errors and groups are emitted as
    workflow commands so they show up as annotations and collapsible groups.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        github_actions: Optional[bool] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine readable JSON instead of tables
            quiet: Suppress informational output
            github_actions: Force workflow command output on or off
                (auto-detected from GITHUB_ACTIONS when None)
            console: Console used for regular output
            err_console: Console used for warnings and errors
        """
        self.json_output = json_output
        self.quiet = quiet
        self.github_actions = (
            running_in_github_actions() if github_actions is None else github_actions
        )
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def print(self, message: str = "") -> None:
        """Print a plain message."""
        if self.quiet:
            return
        self.console.print(message, markup=False)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if self.quiet or self.json_output:
            return
        self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        """Print a success message."""
        if self.quiet or self.json_output:
            return
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Print a warning message (always shown)."""
        if self.github_actions:
            self.err_console.print(f"::warning::{_escape(message)}", markup=False)
            return
        self.err_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print an error message (always shown)."""
        if self.github_actions:
            self.err_console.print(f"::error::{_escape(message)}", markup=False)
            return
        self.err_console.print(f"[red]Error:[/red] {escape(message)}")

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Group the messages emitted inside the block under a title."""
        if self.quiet or self.json_output:
            yield
            return

        if self.github_actions:
            self.console.print(f"::group::{title}", markup=False)
            try:
                yield
            finally:
                self.console.print("::endgroup::", markup=False)
            return

        self.console.print(f"[bold]{escape(title)}[/bold]")
        yield

    def output_json(self, data: Any) -> None:
        """Print data as JSON."""
        self.console.print_json(json.dumps(data))

    def print_table(
        self, title: str, columns: list[str], rows: list[list[str]]
    ) -> None:
        """Print rows as a rich table."""
        if self.quiet:
            return
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)


def _escape(message: str) -> str:
    """Escape a message for use in a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
