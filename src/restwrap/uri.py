"""Build absolute URIs from a parsed route pattern and call-time arguments.

Each key of the argument mapping is resolved against the pattern:

1. a declared path variable replaces every ``${key}`` in the path;
2. otherwise a declared query parameter is appended as ``key=value``,
   in the order the keys appear in the mapping;
3. otherwise the key is dropped.

Values are inserted verbatim unless encoding is requested, in which case
they are percent-encoded with :func:`urllib.parse.quote`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

from restwrap.models import PlaceholderOutcome, RoutePattern, UriBuildResult
from restwrap.template import placeholder


def join_uri(root: str, path: str) -> str:
    """Join *root* and *path* with exactly one ``/`` between them.

    Example::

        >>> join_uri("https://x/api", "/search")
        'https://x/api/search'
        >>> join_uri("https://x/api/", "search")
        'https://x/api/search'
    """
    if not root.endswith("/"):
        root = root + "/"
    if path.startswith("/"):
        path = path[1:]
    return root + path


def stringify(value: Any) -> str:
    """Render a call-time value the way it appears in a URI.

    Booleans become ``true``/``false`` and ``None`` becomes ``null`` so that
    values round-trip with their JSON spelling.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _render(value: Any, encode: bool) -> str:
    text = stringify(value)
    return quote(text, safe="") if encode else text


def build_result(
    root: str,
    args: Mapping[str, Any] | None,
    pattern: RoutePattern,
    encode: bool = False,
) -> UriBuildResult:
    """Build the URI for *pattern* and report how every key was resolved.

    Args:
        root: Base URI of the API.
        args: Call-time arguments. ``None`` is treated as empty.
        pattern: Pattern produced by :func:`~restwrap.template.parse`.
        encode: Percent-encode substituted values.

    Returns:
        A :class:`~restwrap.models.UriBuildResult`. Declared path variables
        missing from *args* stay as literal ``${name}`` text and are reported
        as :attr:`~restwrap.models.PlaceholderOutcome.LEFT_AS_LITERAL`.
    """
    uri = join_uri(root, pattern.literal_path)
    outcomes = {
        name: PlaceholderOutcome.LEFT_AS_LITERAL for name in pattern.path_variable_names
    }
    query: list[tuple[str, str]] = []
    ignored: list[str] = []

    for key, value in (args or {}).items():
        if pattern.is_path_variable(key):
            uri = uri.replace(placeholder(key), _render(value, encode))
            outcomes[key] = PlaceholderOutcome.SUBSTITUTED
        elif pattern.is_query_parameter(key):
            query.append((key, _render(value, encode)))
        else:
            ignored.append(key)

    if query:
        uri = uri + "?" + "&".join(f"{key}={value}" for key, value in query)

    return UriBuildResult(
        uri=uri,
        placeholders=outcomes,
        query=tuple(query),
        ignored=tuple(ignored),
    )


def build(
    root: str,
    args: Mapping[str, Any] | None,
    pattern: RoutePattern,
    encode: bool = False,
) -> str:
    """Return only the URI string of :func:`build_result`."""
    return build_result(root, args, pattern, encode=encode).uri
