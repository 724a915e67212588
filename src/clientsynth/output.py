"""Terminal output with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- data only (the model JSON, tables, document summaries), so
  output can be piped into a renderer.
* **stderr** -- diagnostics (status, warnings, errors, suggestions) and log
  records.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped.
* **Colour control** -- ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``.

:class:`OutputManager` is created once in :func:`~clientsynth.app.main_callback`
and installed with :func:`set_output`; commands fetch it with
:func:`get_output`.  :func:`configure_logging` routes the library's log
records through the same stderr console.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` resolves to ``RICH`` on an interactive, colour-capable terminal
    and to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data to stdout and diagnostics to stderr.

    Args:
        format: Desired output format.
        no_color: Disable colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Show debug messages and DEBUG log records.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def log_handler(self) -> logging.Handler:
        """Return a handler that writes log records to the stderr console."""
        handler = RichHandler(
            console=self._stderr,
            show_time=False,
            show_path=self._verbose,
            markup=False,
            rich_tracebacks=self._verbose,
        )
        handler.setLevel(logging.DEBUG if self._verbose else logging.WARNING)
        return handler

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unformatted."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Write JSON-compatible *data* to stdout.

        Rich mode highlights it; JSON and plain modes write it verbatim so
        it stays machine-readable.
        """
        text = json.dumps(data, indent=2, ensure_ascii=False)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_record(self, data: dict[str, Any]) -> None:
        """Write one record: JSON in JSON mode, ``key<TAB>value`` lines otherwise."""
        if self._format == OutputFormat.JSON:
            self.print_json(data)
            return
        self._emit_rows(None, [[key, value] for key, value in data.items()], None)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[Any]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data in the active format.

        JSON mode emits an array of objects keyed by header; plain mode emits
        a tab-separated header line followed by one line per row.
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])
            return
        self._emit_rows(headers, rows, title)

    def _emit_rows(
        self, headers: Optional[list[str]], rows: list[list[Any]], title: Optional[str]
    ) -> None:
        # Without headers the first column is a key column.
        if self._format == OutputFormat.PLAIN:
            lines = [headers] if headers else []
            lines.extend([_cell(value) for value in row] for row in rows)
            for line in lines:
                self.print_data("\t".join(line))
            return

        if headers:
            grid = Table(title=title, header_style="bold cyan")
            for header in headers:
                grid.add_column(header)
        else:
            grid = Table(title=title, show_header=False, box=None)
            grid.add_column(style="bold cyan")
            grid.add_column()
        for row in rows:
            grid.add_row(*(_cell(value) for value in row))
        self._stdout.print(grid)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, message)

    def success(self, message: str) -> None:
        """Success message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        """Warning. Shown even with ``--quiet``."""
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {message}")

    def error(self, message: str) -> None:
        """Error. Always shown."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {message}")

    def suggest(self, message: str) -> None:
        """Next-step hint. Suppressed by ``--quiet``."""
        if not self._quiet:
            formatted = f"→ {message}"
            self._emit(formatted, f"[dim]{formatted}[/dim]")

    def _emit(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=False)


def _cell(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global instance and its log handler (used by the test suite)."""
    global _output, _log_handler
    _output = None
    if _log_handler is not None:
        logger = logging.getLogger(_LOGGER_NAME)
        logger.removeHandler(_log_handler)
        logger.setLevel(logging.NOTSET)
        _log_handler = None


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #

_LOGGER_NAME = "clientsynth"
_log_handler: Optional[logging.Handler] = None


def configure_logging(output: OutputManager) -> None:
    """Send ``clientsynth.*`` log records to *output*'s stderr console.

    Replaces any handler installed by an earlier call.
    """
    global _log_handler
    logger = logging.getLogger(_LOGGER_NAME)
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
    _log_handler = output.log_handler()
    logger.addHandler(_log_handler)
    logger.setLevel(logging.DEBUG if output.is_verbose else logging.WARNING)
