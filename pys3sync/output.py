"""Console output formatting for the CLI and the sync engine."""

import json
from typing import Any, Optional

from rich.console import Console

from .utils import format_size


class OutputFormatter:
    """Formats user-facing messages with rich.

    Informational messages are suppressed in quiet mode and in JSON mode
    (so that stdout only carries the JSON document). Errors always go to
    stderr.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)

    @property
    def silent(self) -> bool:
        """True when informational output is suppressed."""
        return self.quiet or self.json_output

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        self.console.print(message, style=style, markup=False, soft_wrap=True)

    def print(self, message: str = "") -> None:
        """Print a plain line."""
        if not self.silent:
            self._emit(message)

    def info(self, message: str) -> None:
        """Print an informational message."""
        if not self.silent:
            self._emit(message)

    def success(self, message: str) -> None:
        """Print a success message."""
        if not self.silent:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        if not self.silent:
            self._emit(message, style="yellow")

    def error(self, message: str) -> None:
        """Print an error message to stderr (never suppressed)."""
        self.error_console.print(
            f"Error: {message}", style="bold red", markup=False, soft_wrap=True
        )

    def format_size(self, size_bytes: int) -> str:
        """Format a byte count for display."""
        return format_size(size_bytes)

    def output_json(self, data: Any) -> None:
        """Print data as a JSON document on stdout."""
        self.console.print_json(json.dumps(data, default=str))
