"""Default transport backed by :mod:`httpx`.

:class:`HttpxTransport` implements the contract every generated route
function relies on::

    transport(request_options, callback) -> httpx.Response | None
    transport.defaults(options) -> transport

It understands the following request options:

- ``uri`` / ``url`` and ``method`` -- set by the route function.
- ``body`` -- ``str``/``bytes`` are sent as-is; other values as JSON.
- ``json`` -- ``True`` sends a non-text body as JSON and decodes a JSON
  response body (left to the callback when it is a ``parseJson`` wrapper);
  any other non-bool value is itself sent as the JSON body.
- ``headers``, ``qs`` (query parameters merged into the URI query), ``form``
  (form-encoded body), ``timeout`` (seconds), ``followRedirect``,
  ``strictSSL``.

Unknown options are ignored. Network failures are delivered to the
callback as :class:`~restwrap.exceptions.TransportError`; HTTP error
statuses are ordinary responses.
"""

from __future__ import annotations

import json as json_mod
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from restwrap.exceptions import InvalidUsageError, TransportError
from restwrap.output import debug, info
from restwrap.response import Callback, decodes_json

DEFAULT_TIMEOUT = 30.0

_KNOWN_OPTIONS = frozenset({
    "uri", "url", "method", "body", "json", "headers", "qs", "form",
    "timeout", "followRedirect", "strictSSL",
})


def merge_options(
    base: Mapping[str, Any],
    override: Mapping[str, Any],
) -> dict[str, Any]:
    """Shallow-merge *override* over *base*, merging ``headers`` key by key."""
    merged = {**base, **override}
    if "headers" in base and "headers" in override:
        merged["headers"] = {**base["headers"], **override["headers"]}
    return merged


class HttpxTransport:
    """Callable transport issuing each request through :class:`httpx.Client`.

    Args:
        defaults: Options applied under every request's own options.
        dry_run: Print requests to stderr and answer with a synthetic 200
            response instead of sending them.
        transport: Optional :class:`httpx.BaseTransport` handed to the client,
            e.g. :class:`httpx.MockTransport` in tests.

    Example::

        transport = HttpxTransport().defaults({"headers": {"Accept": "application/json"}})
        response = transport({"uri": "https://example.com/api/ping", "method": "GET"}, None)
    """

    def __init__(
        self,
        defaults: Optional[Mapping[str, Any]] = None,
        dry_run: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._defaults: dict[str, Any] = dict(defaults or {})
        self._dry_run = dry_run
        self._transport = transport

    @property
    def default_options(self) -> dict[str, Any]:
        return dict(self._defaults)

    def defaults(self, options: Mapping[str, Any]) -> HttpxTransport:
        """Return a new transport whose defaults include *options*."""
        return HttpxTransport(
            defaults=merge_options(self._defaults, options),
            dry_run=self._dry_run,
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Transport contract
    # ------------------------------------------------------------------ #

    def __call__(
        self,
        request_options: Mapping[str, Any],
        callback: Optional[Callback] = None,
    ) -> Optional[httpx.Response]:
        """Send one request and report it to *callback*.

        Returns:
            The :class:`httpx.Response`, or ``None`` when the request failed
            at the network level.
        """
        options = merge_options(self._defaults, request_options)
        for key in options.keys() - _KNOWN_OPTIONS:
            debug(f"Ignoring unsupported request option '{key}'")

        method, url, kwargs = self._request_args(options)

        if self._dry_run:
            response = self._print_dry_run(httpx.Request(method, url, **kwargs))
        else:
            try:
                response = self._send(method, url, kwargs, options)
            except httpx.HTTPError as exc:
                error = TransportError(
                    f"{method} {url} failed: {exc}"
                )
                error.__cause__ = exc
                debug(str(error))
                if callback is not None:
                    callback(error, None, None)
                return None

        debug(f"HTTP {response.status_code} from {method} {url}")
        if callback is not None:
            callback(None, response, self._response_body(response, options, callback))
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _request_args(
        self, options: Mapping[str, Any],
    ) -> tuple[str, str, dict[str, Any]]:
        """Translate request options into ``httpx`` request arguments."""
        url = options.get("uri") or options.get("url")
        if not url:
            raise InvalidUsageError("Request options must include 'uri'")
        method = str(options.get("method") or "GET").upper()

        kwargs: dict[str, Any] = {}
        if options.get("headers"):
            kwargs["headers"] = dict(options["headers"])
        if options.get("qs"):
            # Merged into the query string the URI already carries.
            url = str(httpx.URL(url).copy_merge_params(dict(options["qs"])))

        json_option = options.get("json")
        body = options.get("body")
        if options.get("form") is not None:
            kwargs["data"] = options["form"]
        elif json_option is not None and not isinstance(json_option, bool):
            kwargs["json"] = json_option
        elif body is not None:
            if isinstance(body, (str, bytes, bytearray)):
                kwargs["content"] = body
            else:
                kwargs["json"] = body
        return method, url, kwargs

    def _send(
        self,
        method: str,
        url: str,
        kwargs: dict[str, Any],
        options: Mapping[str, Any],
    ) -> httpx.Response:
        with httpx.Client(
            timeout=options.get("timeout", DEFAULT_TIMEOUT),
            verify=options.get("strictSSL", True),
            follow_redirects=options.get("followRedirect", True),
            transport=self._transport,
        ) as client:
            return client.request(method, url, **kwargs)

    def _response_body(
        self,
        response: httpx.Response,
        options: Mapping[str, Any],
        callback: Optional[Callback],
    ) -> Any:
        """Return the body text, decoded as JSON when the ``json`` option asks for it.

        Callbacks that decode JSON themselves always get the text.
        """
        text = response.text
        if options.get("json") is True and text and not decodes_json(callback):
            try:
                return json_mod.loads(text)
            except json_mod.JSONDecodeError:
                return text
        return text

    def _print_dry_run(self, request: httpx.Request) -> httpx.Response:
        """Print the request to stderr and return a synthetic 200 response."""
        info(f"[dry-run] {request.method} {request.url}")
        for key, value in request.headers.items():
            info(f"  Header: {key}: {value}")
        content = request.content
        if content:
            info(f"  Body: {content.decode('utf-8', errors='replace')}")

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=request,
        )

