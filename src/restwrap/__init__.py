"""restwrap -- compile declarative API descriptions into HTTP client functions.

A configuration names a root URI and, per HTTP method, short names mapped to
URI templates. :func:`create` turns it into a client exposing one callable
per route::

    from restwrap import create

    client = create({
        "root": "https://example.com/api/",
        "get": {"search": "/search/${mode}/${id}/?page"},
    })

    def on_done(error, response, body):
        ...

    client.search({"mode": "cool", "id": 1337, "page": 2}, on_done)

Modules:
    template: URI template parser.
    uri: URI builder.
    synth: Route function synthesizer.
    response: JSON response decoding for callbacks.
    compiler: Configuration compiler (:func:`create`).
    transport: Default transport backed by httpx.
    config: Configuration file loading and resolution.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
    app: Typer CLI.
"""

__version__ = "0.1.0"

from restwrap.compiler import GeneratedClient, create  # noqa: E402
from restwrap.models import ClientConfig, HTTPMethod, RoutePattern  # noqa: E402
from restwrap.synth import RouteFunction  # noqa: E402
from restwrap.template import parse  # noqa: E402
from restwrap.uri import build  # noqa: E402

__all__ = [
    "ClientConfig",
    "GeneratedClient",
    "HTTPMethod",
    "RouteFunction",
    "RoutePattern",
    "build",
    "create",
    "parse",
]
