"""JSON decoding for route callbacks.

When a client is compiled with ``parseJson`` enabled, every callback is
wrapped by :func:`wrap` before it reaches the transport. The wrapper keeps
the ``(error, message, body)`` contract and only changes ``body``: the raw
text the transport delivered becomes the decoded JSON value.

A body that is not valid JSON produces a single call with
:class:`~restwrap.exceptions.ResponseParseError` as the error. The callback
is never invoked a second time for the same response.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from restwrap.exceptions import ResponseParseError
from restwrap.output import debug

Callback = Callable[[Any, Any, Any], Any]


def decode_body(raw: Any) -> Any:
    """Decode *raw* as JSON.

    ``str``, ``bytes`` and ``bytearray`` are parsed; values a transport has
    already decoded (``dict``, ``list``, numbers) are returned as they are.

    Raises:
        ResponseParseError: If *raw* is text that is not valid JSON, or
            ``None``.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ResponseParseError() from exc
    if raw is None:
        raise ResponseParseError()
    return raw


def wrap(callback: Callback) -> Callback:
    """Return a callback that decodes the response body before calling *callback*.

    Args:
        callback: The caller's ``(error, message, body)`` callback.

    Returns:
        A callback with the same contract. Transport errors are forwarded as
        ``callback(error, None, None)``; decode failures as
        ``callback(ResponseParseError(), None, None)``; successes as
        ``callback(None, message, decoded_body)``.
    """

    def _parse_json_callback(error: Any, message: Any = None, body: Any = None) -> Any:
        if error:
            return callback(error, None, None)
        try:
            parsed = decode_body(body)
        except ResponseParseError as exc:
            debug(f"Response body is not JSON: {exc.__cause__ or exc}")
            return callback(exc, None, None)
        return callback(None, message, parsed)

    _parse_json_callback.__wrapped__ = callback  # type: ignore[attr-defined]
    _parse_json_callback.decodes_json = True  # type: ignore[attr-defined]
    return _parse_json_callback


def decodes_json(callback: Any) -> bool:
    """Whether *callback* was produced by :func:`wrap` and decodes bodies itself.

    Transports use this to hand such callbacks the raw body text, so a body
    is decoded exactly once.
    """
    return getattr(callback, "decodes_json", False) is True
