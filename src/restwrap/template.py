"""Parse URI templates into :class:`~restwrap.models.RoutePattern` objects.

A template is a path with ``${name}`` placeholders, optionally followed by
``?`` and a pipe-delimited list of accepted query parameter names::

    /search/${mode}/${id}/?page|size

Parsing is permissive. Malformed templates (an unbalanced ``${``, an empty
``${}``, an empty path) never raise; they produce whatever pattern the text
supports and the caller owns template correctness.
"""

from __future__ import annotations

import re

from restwrap.models import RoutePattern

# ${name} -- anything up to the closing brace, at least one character.
_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

QUERY_SEPARATOR = "?"
QUERY_NAME_SEPARATOR = "|"


def placeholder(name: str) -> str:
    """Return the literal placeholder text for *name* (``${name}``)."""
    return "${" + name + "}"


def extract_path_variables(template: str) -> tuple[str, ...]:
    """Return every ``${name}`` capture in *template*, in order, duplicates kept.

    The whole string is scanned, including any text after ``?``.
    """
    return tuple(_PLACEHOLDER_RE.findall(template))


def parse(template: str) -> RoutePattern:
    """Parse *template* into a :class:`~restwrap.models.RoutePattern`.

    Args:
        template: URI template, e.g. ``"/search/${mode}?zc|rd"``.

    Returns:
        The pattern with the literal path (text before the first ``?``),
        the ordered path variable names, and the set of query names.

    Example::

        >>> p = parse("/search/${mode}?zc|rd")
        >>> p.literal_path, p.path_variable_names, sorted(p.query_parameter_names)
        ('/search/${mode}', ('mode',), ['rd', 'zc'])
    """
    literal_path, sep, query_part = template.partition(QUERY_SEPARATOR)
    query_names: frozenset[str] = frozenset()
    if sep:
        query_names = frozenset(query_part.split(QUERY_NAME_SEPARATOR))

    return RoutePattern(
        literal_path=literal_path,
        path_variable_names=extract_path_variables(template),
        query_parameter_names=query_names,
    )
