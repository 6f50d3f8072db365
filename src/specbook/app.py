"""Typer application factory and CLI entry point for specbook.

This module wires together the top-level Typer application and registers
the built-in sub-commands (``build``, ``inspect``, ``config``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`specbook.config`: Configuration resolution.
    :mod:`specbook.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specbook import __version__
from specbook.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="specbook",
    help="Turn OpenAPI 3.x specs into GitBook documentation bundles.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from specbook.commands.build import build_command  # noqa: E402
from specbook.commands.config import config_app  # noqa: E402
from specbook.commands.inspect import inspect_app  # noqa: E402

app.command("build")(build_command)
app.add_typer(inspect_app, name="inspect", help="Preview tag pages and bundle contents.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specbook {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite files and skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~specbook.output.OutputManager` and
    library logging, and stores shared options in ``ctx.obj`` so that
    sub-commands can read them. The output format comes from ``--json`` or
    ``--plain``, else from the ``output.format`` setting.

    A broken config file only produces a warning here so that
    ``specbook config reset`` can still repair it.
    """
    from specbook.config import resolve_config
    from specbook.exceptions import ConfigError
    from specbook.output import OutputFormat, OutputManager, configure_logging, set_output

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    config_error: Optional[ConfigError] = None
    try:
        fmt = OutputFormat(resolve_config(cli_format=cli_format).output.format)
    except ConfigError as exc:
        fmt = OutputFormat(cli_format or OutputFormat.AUTO.value)
        config_error = exc

    output = OutputManager(
        format=fmt,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)
    configure_logging(output)
    if config_error is not None:
        output.warning(str(config_error))

    ctx.ensure_object(dict)
    ctx.obj["force"] = force
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specbook.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specbook`` console script.

    Unhandled :class:`~specbook.exceptions.SpecbookError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

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
        from specbook.exceptions import SpecbookError
        from specbook.output import error

        if isinstance(exc, SpecbookError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
