"""Typer application and CLI entry point for restwrap.

The CLI is a thin layer over the library: it loads a configuration, compiles
it with :func:`~restwrap.compiler.create`, and either inspects the routes or
dispatches one of them through :class:`~restwrap.transport.HttpxTransport`.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. It registers the sub-commands, installs a SIGINT
handler, and turns :class:`~restwrap.exceptions.RestwrapError` into the
matching exit code.
"""

from __future__ import annotations

import signal
import sys
from typing import Any

import typer

from restwrap import __version__
from restwrap.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="restwrap",
    help="Compile declarative API descriptions into HTTP clients.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"restwrap {__version__}")
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
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests instead of sending them."
    ),
) -> None:
    """Install the global output manager and stash shared flags in ``ctx.obj``."""
    from restwrap.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.ensure_object(dict)
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose


_registered = False


def register_commands() -> None:
    """Attach the built-in commands to :data:`app` (idempotent)."""
    global _registered
    if _registered:
        return
    from restwrap.commands.call import call_command
    from restwrap.commands.inspect import routes_command, uri_command

    app.command("routes")(routes_command)
    app.command("uri")(uri_command)
    app.command("call")(call_command)
    _registered = True


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``restwrap`` console script.

    :class:`~restwrap.exceptions.RestwrapError` exits with the error's
    ``exit_code``; any other exception prints its message and exits with
    :data:`~restwrap.exit_codes.EXIT_GENERIC_FAILURE`.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    register_commands()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from restwrap.exceptions import RestwrapError
        from restwrap.output import error

        if isinstance(exc, RestwrapError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
