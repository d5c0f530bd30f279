"""Inspect commands -- examine a configuration without sending requests.

``restwrap routes`` lists every compiled route and ``restwrap uri`` shows the
URI a route would be called with for a given set of arguments.
"""

from __future__ import annotations

from typing import Optional

import typer

from restwrap.commands.common import load_cli_config, parse_assignments
from restwrap.compiler import create
from restwrap.exceptions import InvalidUsageError
from restwrap.output import print_data, print_table, warning


def routes_command(
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file, URL, or '-' for stdin."
    ),
) -> None:
    """List every route declared in the configuration.

    Example::

        restwrap routes --config api.yaml
    """
    client_config = load_cli_config(config)

    headers = ["Method", "Name", "Template", "Path variables", "Query parameters", "Options"]
    rows: list[list[str]] = []
    for route in client_config.routes():
        pattern = route.pattern
        rows.append([
            route.method.value.upper(),
            route.name,
            route.template,
            ", ".join(dict.fromkeys(pattern.path_variable_names)) or "-",
            ", ".join(sorted(pattern.query_parameter_names)) or "-",
            ", ".join(sorted(route.request_options)) or "-",
        ])

    print_table(
        headers, rows, title=f"{client_config.root} -- Routes ({len(rows)})"
    )


def uri_command(
    name: str = typer.Argument(..., help="Short name of the route."),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file, URL, or '-' for stdin."
    ),
    arg: Optional[list[str]] = typer.Option(
        None, "--arg", "-a", help="Path variable or query parameter as key=value."
    ),
) -> None:
    """Print the URI a route builds for the given arguments.

    Example::

        restwrap uri search -a mode=cool -a id=1337
    """
    client = create(load_cli_config(config))
    if name not in client:
        raise InvalidUsageError(
            f"Unknown route '{name}'. Available: {', '.join(client) or '(none)'}"
        )

    result = client[name].build_uri(parse_assignments(arg, "--arg"))
    for placeholder in result.unresolved:
        warning(f"Path variable '{placeholder}' was not supplied")
    for key in result.ignored:
        warning(f"Argument '{key}' is neither a path variable nor a query parameter")
    print_data(result.uri)
