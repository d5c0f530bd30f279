"""Synthesize callable route functions from compiled route patterns.

Every route in a configuration becomes a :class:`RouteFunction`. Calling it
builds the URI, merges request options, and hands the finished options to
the transport together with the caller's callback.

Two positional call shapes exist, selected by the route's HTTP method and
the number of arguments::

    # DELETE, GET, HEAD
    client.search(args, callback)
    client.search(args, extra_options, callback)

    # PATCH, POST, PUT
    client.upload(args, body, callback)
    client.upload(args, body, extra_options, callback)

:meth:`RouteFunction.call` offers the same thing with named fields.

Route options are deep-copied and frozen when the function is built; each
call works on a fresh deep copy merged with its extra options, so nothing a
call or transport changes leaks into the next call.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Optional

from restwrap.exceptions import InvalidUsageError
from restwrap.models import HTTPMethod, RoutePattern, UriBuildResult
from restwrap.output import debug
from restwrap.response import Callback, wrap
from restwrap.uri import build_result

Transport = Callable[[dict[str, Any], Optional[Callback]], Any]

_NO_BODY: Any = object()


class RouteFunction:
    """A generated client function for one route.

    Args:
        root: Base URI of the API.
        pattern: The route's parsed template.
        method: HTTP method of the route.
        transport: Callable with the ``(request_options, callback)`` contract.
        route_options: Per-route request options; copied and frozen.
        parse_json: Decode response bodies as JSON before the callback.
        encode_values: Percent-encode substituted path and query values.
        name: Short name, used in messages and ``repr``.
    """

    def __init__(
        self,
        root: str,
        pattern: RoutePattern,
        method: HTTPMethod,
        transport: Transport,
        route_options: Optional[Mapping[str, Any]] = None,
        parse_json: bool = False,
        encode_values: bool = False,
        name: Optional[str] = None,
    ) -> None:
        self.root = root
        self.pattern = pattern
        self.method = HTTPMethod(method)
        self.transport = transport
        self.route_options: Mapping[str, Any] = MappingProxyType(
            copy.deepcopy(dict(route_options or {}))
        )
        self.parse_json = parse_json
        self.encode_values = encode_values
        self.name = name or pattern.literal_path
        self.__name__ = self.name

    def __repr__(self) -> str:
        return f"<RouteFunction {self.method.value.upper()} {self.name}>"

    @property
    def has_body(self) -> bool:
        return self.method.has_body

    # ------------------------------------------------------------------ #
    # Calling conventions
    # ------------------------------------------------------------------ #

    def __call__(self, *args: Any) -> Any:
        """Positional shorthand; see the module docstring for the accepted shapes.

        Raises:
            InvalidUsageError: If the argument count matches neither shape.
        """
        if self.has_body:
            if len(args) == 3:
                path_args, body, callback = args
                extra = None
            elif len(args) == 4:
                path_args, body, extra, callback = args
            else:
                raise InvalidUsageError(
                    f"{self.name}() takes (args, body, callback) or "
                    f"(args, body, options, callback), got {len(args)} arguments"
                )
            return self.call(path_args, body=body, request_options=extra, callback=callback)

        if len(args) == 2:
            path_args, callback = args
            extra = None
        elif len(args) == 3:
            path_args, extra, callback = args
        else:
            raise InvalidUsageError(
                f"{self.name}() takes (args, callback) or "
                f"(args, options, callback), got {len(args)} arguments"
            )
        return self.call(path_args, request_options=extra, callback=callback)

    def call(
        self,
        path_args: Optional[Mapping[str, Any]] = None,
        body: Any = _NO_BODY,
        request_options: Optional[Mapping[str, Any]] = None,
        callback: Optional[Callback] = None,
    ) -> Any:
        """Dispatch the route with named fields.

        Args:
            path_args: Values for path variables and declared query parameters.
                Unknown keys are ignored.
            body: Request body. Only accepted by PATCH, POST and PUT routes;
                omitting it on those sends ``body=None``.
            request_options: Per-call options merged over the route options.
            callback: ``(error, message, body)`` callback passed to the
                transport, wrapped for JSON decoding when enabled.

        Returns:
            Whatever the transport returns.

        Raises:
            InvalidUsageError: If *body* is given to a DELETE, GET or HEAD route.
        """
        options = self.build_request(path_args, body=body, request_options=request_options)
        next_callback = callback
        if callback is not None and self.parse_json:
            next_callback = wrap(callback)

        debug(f"{options['method']} {options['uri']}")
        return self.transport(options, next_callback)

    # ------------------------------------------------------------------ #
    # Request construction
    # ------------------------------------------------------------------ #

    def build_uri(self, path_args: Optional[Mapping[str, Any]] = None) -> UriBuildResult:
        """Build the URI for *path_args* without dispatching."""
        return build_result(self.root, path_args, self.pattern, encode=self.encode_values)

    def build_request(
        self,
        path_args: Optional[Mapping[str, Any]] = None,
        body: Any = _NO_BODY,
        request_options: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        """Return the request options a call would hand to the transport.

        The result is a new dict: route options, then *request_options*,
        then ``uri``, ``method`` and (body methods only) ``body``.
        """
        if body is not _NO_BODY and not self.has_body:
            raise InvalidUsageError(
                f"{self.method.value.upper()} route '{self.name}' does not take a body"
            )

        # Nested values such as headers are copied too; a transport may edit them.
        options: dict[str, Any] = copy.deepcopy(dict(self.route_options))
        options.update(request_options or {})
        options["uri"] = self.build_uri(path_args).uri
        options["method"] = self.method.value.upper()
        if self.has_body:
            options["body"] = None if body is _NO_BODY else body
        return options


def synthesize(
    root: str,
    pattern: RoutePattern,
    method: HTTPMethod | str,
    transport: Transport,
    route_options: Optional[Mapping[str, Any]] = None,
    parse_json: bool = False,
    encode_values: bool = False,
    name: Optional[str] = None,
) -> RouteFunction:
    """Build the :class:`RouteFunction` for one route."""
    return RouteFunction(
        root,
        pattern,
        method if isinstance(method, HTTPMethod) else HTTPMethod(method.lower()),
        transport,
        route_options=route_options,
        parse_json=parse_json,
        encode_values=encode_values,
        name=name,
    )
