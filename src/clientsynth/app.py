"""Typer application and CLI entry point for clientsynth.

The root :data:`app` carries the global output flags and registers the
built-in commands (``generate``, ``info``, ``init``, ``inspect``).

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler and invokes the app;
:class:`~clientsynth.exceptions.ClientsynthError` exits with the error's
code, and any other exception is written to a crash log under the data
directory.

See Also:
    :mod:`clientsynth.output`: Output and logging set up in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any

import typer

from clientsynth import __version__
from clientsynth.commands.generate import generate_command
from clientsynth.commands.init import init_command
from clientsynth.commands.inspect import info_command, inspect_app
from clientsynth.exit_codes import EXIT_GENERIC_FAILURE
from clientsynth.output import (
    OutputFormat,
    OutputManager,
    configure_logging,
    get_output,
    set_output,
)


app = typer.Typer(
    name="clientsynth",
    help="Synthesize a typed client model from OpenAPI 3.0/3.1 and Swagger 2.0 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"clientsynth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Set up output formatting and logging before every sub-command."""
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    configure_logging(output)


app.command("generate")(generate_command)
app.command("info")(info_command)
app.command("init")(init_command)
app.add_typer(inspect_app, name="inspect", help="Inspect the types and operations of a document.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to the data directory and return its path."""
    from clientsynth.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``clientsynth`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from clientsynth.exceptions import ClientsynthError

        if isinstance(exc, ClientsynthError):
            get_output().error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log()
        get_output().error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
