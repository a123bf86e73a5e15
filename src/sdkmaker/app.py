"""Typer application and console-script entry point for sdkmaker.

Registers the built-in commands (``generate``, ``inspect``, ``config``),
configures output and logging from the global flags, and maps
:class:`~sdkmaker.exceptions.SdkmakerError` onto process exit codes in
:func:`main`. Unexpected exceptions are written to a crash log under the
data directory.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from sdkmaker import __version__
from sdkmaker.commands.config import config_app
from sdkmaker.commands.generate import generate_command
from sdkmaker.commands.inspect import inspect_app
from sdkmaker.exit_codes import EXIT_GENERIC_FAILURE

if TYPE_CHECKING:
    from sdkmaker.output import OutputFormat


app = typer.Typer(
    name="sdkmaker",
    help="Generate typed TypeScript clients from Swagger 2.0 / OpenAPI 3.x documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("generate")(generate_command)
app.add_typer(inspect_app, name="inspect", help="Inspect a document without generating code.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"sdkmaker {__version__}")
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
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~sdkmaker.output.OutputManager` and the
    log handler, and records the format flag in ``ctx.obj`` so commands
    can pass it to :func:`~sdkmaker.config.resolve_config`. Without
    ``--json`` or ``--plain`` the configured ``output.format`` applies.
    """
    from sdkmaker.output import OutputFormat, OutputManager, set_output

    flag: Optional[OutputFormat] = None
    if json_output:
        flag = OutputFormat.JSON
    elif plain_output:
        flag = OutputFormat.PLAIN

    fmt = flag or _configured_format()
    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    _setup_logging(verbose=verbose, no_color=no_color)

    ctx.ensure_object(dict)
    ctx.obj["format"] = flag.value if flag else None


def _configured_format() -> "OutputFormat":
    """Return ``output.format`` from the config layers.

    A broken configuration yields ``AUTO`` here; the sub-command resolves
    the configuration again and reports the error with its exit code.
    """
    from sdkmaker.config import resolve_config
    from sdkmaker.exceptions import ConfigError
    from sdkmaker.output import OutputFormat

    try:
        return OutputFormat(resolve_config().output.format)
    except ConfigError:
        return OutputFormat.AUTO


def _setup_logging(verbose: bool, no_color: bool) -> None:
    """Route ``sdkmaker.*`` loggers to stderr through Rich."""
    logger = logging.getLogger("sdkmaker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True, no_color=no_color),
        show_time=False,
        show_path=verbose,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _setup_signal_handlers() -> None:
    """Exit with 130 on Ctrl-C instead of a traceback."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data dir>/logs`` and return the path."""
    from sdkmaker.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    :class:`~sdkmaker.exceptions.SdkmakerError` exits with the error's
    ``exit_code``; any other exception writes a crash log and exits 1.
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
        from sdkmaker.exceptions import SdkmakerError
        from sdkmaker.output import error

        if isinstance(exc, SdkmakerError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
