"""Compile a :class:`~restwrap.models.ClientConfig` into a generated client.

:func:`create` is the package's main entry point::

    from restwrap import create

    client = create({
        "root": "https://example.com/api/",
        "parseJson": True,
        "get": {"search": "/search/${mode}?page"},
        "put": {"upload": "/upload/${id}"},
    })

    client.search({"mode": "fast", "page": 2}, on_done)
    client.upload({"id": 7}, "payload", on_done)

Every template is parsed once here; calls only substitute values.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from restwrap.exceptions import ConfigError
from restwrap.models import ClientConfig
from restwrap.output import debug
from restwrap.synth import RouteFunction, Transport, synthesize


class GeneratedClient(Mapping[str, RouteFunction]):
    """Read-only mapping of short names to :class:`~restwrap.synth.RouteFunction`.

    Routes are also reachable as attributes (``client.search``). Route names
    win over inherited attributes, so a route called ``get`` or ``keys`` is
    what ``client.get`` or ``client.keys`` returns. The set of routes is fixed
    at construction.
    """

    __slots__ = ("_routes",)

    def __init__(self, routes: Mapping[str, RouteFunction]) -> None:
        object.__setattr__(self, "_routes", dict(routes))

    def __getattribute__(self, name: str) -> Any:
        routes = object.__getattribute__(self, "_routes")
        if name in routes:
            return routes[name]
        return object.__getattribute__(self, name)

    def __getattr__(self, name: str) -> RouteFunction:
        raise AttributeError(f"Client has no route named '{name}'")

    def __getitem__(self, name: str) -> RouteFunction:
        return _routes_of(self)[name]

    def __iter__(self) -> Iterator[str]:
        return iter(_routes_of(self))

    def __len__(self) -> int:
        return len(_routes_of(self))

    def __contains__(self, name: object) -> bool:
        return name in _routes_of(self)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GeneratedClient):
            return _routes_of(self) == _routes_of(other)
        if isinstance(other, Mapping):
            return _routes_of(self) == {key: other[key] for key in other}
        return NotImplemented

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("GeneratedClient routes cannot be changed after creation")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("GeneratedClient routes cannot be changed after creation")

    def __dir__(self) -> list[str]:
        return sorted(set(object.__dir__(self)) | set(_routes_of(self)))

    def __repr__(self) -> str:
        return f"GeneratedClient({', '.join(_routes_of(self))})"


def _routes_of(client: GeneratedClient) -> dict[str, RouteFunction]:
    return object.__getattribute__(client, "_routes")


def load_client_config(config: Union[ClientConfig, Mapping[str, Any]]) -> ClientConfig:
    """Validate *config* into a :class:`~restwrap.models.ClientConfig`.

    Raises:
        ConfigError: If the mapping is missing ``root`` or has invalid values.
    """
    if isinstance(config, ClientConfig):
        return config
    try:
        return ClientConfig.model_validate(dict(config))
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc


def resolve_transport(
    transport: Optional[Transport],
    request_defaults: Optional[Mapping[str, Any]],
) -> Transport:
    """Pick the transport every route function will use.

    Falls back to :class:`~restwrap.transport.HttpxTransport`. When
    *request_defaults* is set, the transport's ``defaults`` factory is used to
    build a pre-configured variant.

    Raises:
        ConfigError: If defaults are requested but the transport has no
            ``defaults`` factory.
    """
    if transport is None:
        from restwrap.transport import HttpxTransport

        transport = HttpxTransport()

    if request_defaults is not None:
        factory = getattr(transport, "defaults", None)
        if not callable(factory):
            raise ConfigError(
                "requestDefaults is set but the transport has no defaults() factory"
            )
        transport = factory(dict(request_defaults))
    return transport


def create(
    config: Union[ClientConfig, Mapping[str, Any]],
    transport: Optional[Transport] = None,
) -> GeneratedClient:
    """Compile *config* into a :class:`GeneratedClient`.

    Routes are compiled in method order DELETE, GET, HEAD, PATCH, POST, PUT.
    A short name reused by a later method replaces the earlier route.

    Args:
        config: A :class:`~restwrap.models.ClientConfig` or a mapping in the
            configuration file format.
        transport: Callable with the ``(request_options, callback)``
            contract. Defaults to :class:`~restwrap.transport.HttpxTransport`.

    Returns:
        The generated client.

    Raises:
        ConfigError: On invalid configuration.
    """
    client_config = load_client_config(config)
    active_transport = resolve_transport(transport, client_config.request_defaults)

    routes: dict[str, RouteFunction] = {}
    for route in client_config.routes():
        if route.name in routes:
            previous = routes[route.name]
            debug(
                f"Route '{route.name}' ({route.method.value.upper()}) replaces "
                f"{previous.method.value.upper()} route of the same name"
            )
        routes[route.name] = synthesize(
            client_config.root,
            route.pattern,
            route.method,
            active_transport,
            route_options=route.request_options,
            parse_json=client_config.parse_json,
            encode_values=client_config.encode_values,
            name=route.name,
        )
        debug(f"Compiled {route.method.value.upper()} {route.name} -> {route.template}")

    return GeneratedClient(routes)
