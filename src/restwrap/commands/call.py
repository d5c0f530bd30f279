"""The ``call`` command -- dispatch one route and print its response."""

from __future__ import annotations

from typing import Any, Optional

import httpx
import typer

from restwrap.commands.common import load_cli_config, parse_assignments
from restwrap.compiler import create
from restwrap.exceptions import (
    AuthError,
    InvalidUsageError,
    NotFoundError,
    RestwrapError,
    ServerError,
)
from restwrap.output import format_response, info, success
from restwrap.transport import HttpxTransport


def _check_status(response: httpx.Response, body: Any) -> None:
    """Raise a typed exception for HTTP error statuses."""
    status = response.status_code
    if status < 400:
        return

    if isinstance(body, dict):
        msg = body.get("message") or body.get("error") or body.get("detail") or ""
    else:
        msg = str(body or "")[:200]
    full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

    if status in (401, 403):
        raise AuthError(full_msg)
    if status == 404:
        raise NotFoundError(full_msg)
    raise ServerError(full_msg)


def call_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Short name of the route."),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file, URL, or '-' for stdin."
    ),
    arg: Optional[list[str]] = typer.Option(
        None, "--arg", "-a", help="Path variable or query parameter as key=value."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="Request body (PATCH, POST and PUT routes)."
    ),
    option: Optional[list[str]] = typer.Option(
        None, "--option", "-O", help="Extra request option as key=value (value may be JSON)."
    ),
) -> None:
    """Send one request through a route and print the response.

    The status line goes to stderr and the body to stdout.

    Example::

        restwrap call search -a zc=11746 -a rd=30
        restwrap call upload -a id=7 --body '{"name": "x"}' -O json=true
    """
    obj = ctx.obj or {}
    transport = HttpxTransport(dry_run=bool(obj.get("dry_run")))
    client = create(load_cli_config(config), transport=transport)
    if name not in client:
        raise InvalidUsageError(
            f"Unknown route '{name}'. Available: {', '.join(client) or '(none)'}"
        )

    route = client[name]
    if body is not None and not route.has_body:
        raise InvalidUsageError(
            f"{route.method.value.upper()} route '{name}' does not take --body"
        )

    outcome: dict[str, Any] = {}

    def _on_response(error: Any, message: Any, response_body: Any) -> None:
        outcome["error"] = error
        outcome["message"] = message
        outcome["body"] = response_body

    path_args = parse_assignments(arg, "--arg")
    extra = parse_assignments(option, "--option")
    if route.has_body:
        route.call(path_args, body=body, request_options=extra, callback=_on_response)
    else:
        route.call(path_args, request_options=extra, callback=_on_response)

    error = outcome.get("error")
    if isinstance(error, RestwrapError):
        raise error
    if error:
        raise RestwrapError(str(error))

    response = outcome.get("message")
    if isinstance(response, httpx.Response):
        status_line = f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip()
        if response.is_success:
            success(status_line)
        else:
            info(status_line)
        _check_status(response, outcome.get("body"))
    format_response(outcome.get("body"))
