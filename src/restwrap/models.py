"""Pydantic models shared across restwrap.

The models fall into two groups:

**Configuration models** -- what a user writes in ``restwrap.json`` /
``restwrap.yaml`` or passes to :func:`~restwrap.compiler.create`:
    :class:`RouteSpec` and :class:`ClientConfig`.

**Compiled models** -- produced once at compile time and consumed per call:
    :class:`HTTPMethod`, :class:`RoutePattern`, :class:`RouteDefinition`,
    :class:`PlaceholderOutcome`, and :class:`UriBuildResult`.

Configuration models accept both the camelCase keys of the file format
(``parseJson``, ``pathPattern``) and the snake_case field names.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Compiled models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a configuration may declare routes under.

    Declaration order is the order routes are compiled in, which decides
    which route wins when two methods reuse a short name.
    """

    DELETE = "delete"
    GET = "get"
    HEAD = "head"
    PATCH = "patch"
    POST = "post"
    PUT = "put"

    @property
    def has_body(self) -> bool:
        """Whether generated functions for this method take a request body."""
        return self in _BODY_METHODS


_BODY_METHODS = frozenset({HTTPMethod.PATCH, HTTPMethod.POST, HTTPMethod.PUT})


class RoutePattern(BaseModel):
    """Parsed form of a URI template such as ``/users/${id}?page|size``.

    Built by :func:`~restwrap.template.parse` and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    literal_path: str = Field(
        description="Template text before the first '?', placeholders still inline"
    )
    path_variable_names: tuple[str, ...] = Field(
        default=(), description="${name} captures in order, duplicates kept"
    )
    query_parameter_names: frozenset[str] = Field(
        default=frozenset(), description="Pipe-delimited names after '?'"
    )

    def is_path_variable(self, name: str) -> bool:
        return name in self.path_variable_names

    def is_query_parameter(self, name: str) -> bool:
        return name in self.query_parameter_names


class PlaceholderOutcome(str, enum.Enum):
    """What happened to a declared path variable while building a URI."""

    SUBSTITUTED = "substituted"
    LEFT_AS_LITERAL = "left_as_literal"


class UriBuildResult(BaseModel):
    """A built URI together with how each call-time key was resolved."""

    model_config = ConfigDict(frozen=True)

    uri: str
    placeholders: dict[str, PlaceholderOutcome] = Field(default_factory=dict)
    query: tuple[tuple[str, str], ...] = ()
    ignored: tuple[str, ...] = ()

    @property
    def unresolved(self) -> list[str]:
        """Path variables that were left as literal ``${name}`` text."""
        return [
            name
            for name, outcome in self.placeholders.items()
            if outcome is PlaceholderOutcome.LEFT_AS_LITERAL
        ]


class RouteDefinition(BaseModel):
    """One (method, short name) pair with its template and per-route options."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    name: str
    template: str
    request_options: dict[str, Any] = Field(default_factory=dict)
    pattern: RoutePattern


# --- Configuration models ---


class RouteSpec(BaseModel):
    """Structured route entry carrying its own request options.

    Example::

        RouteSpec(pathPattern="/search", requestOptions={"timeout": 5})
    """

    model_config = ConfigDict(populate_by_name=True)

    path_pattern: str = Field(alias="pathPattern")
    request_options: dict[str, Any] = Field(
        default_factory=dict, alias="requestOptions"
    )


RouteEntry = Union[str, RouteSpec]


class ClientConfig(BaseModel):
    """Declarative description of an HTTP API.

    Example::

        ClientConfig.model_validate({
            "root": "https://example.com/api/",
            "parseJson": True,
            "get": {"search": "/search/${mode}?page"},
            "put": {"upload": {"pathPattern": "/upload", "requestOptions": {}}},
        })
    """

    model_config = ConfigDict(populate_by_name=True)

    root: str = Field(description="Base URI every route template is joined to")
    parse_json: bool = Field(default=False, alias="parseJson")
    encode_values: bool = Field(
        default=False,
        alias="encodeValues",
        description="Percent-encode substituted path and query values",
    )
    request_defaults: Optional[dict[str, Any]] = Field(
        default=None, alias="requestDefaults"
    )
    delete: dict[str, RouteEntry] = Field(default_factory=dict)
    get: dict[str, RouteEntry] = Field(default_factory=dict)
    head: dict[str, RouteEntry] = Field(default_factory=dict)
    patch: dict[str, RouteEntry] = Field(default_factory=dict)
    post: dict[str, RouteEntry] = Field(default_factory=dict)
    put: dict[str, RouteEntry] = Field(default_factory=dict)

    @field_validator("root")
    @classmethod
    def _root_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("root must not be empty")
        return value

    def route_entries(self) -> Iterator[tuple[HTTPMethod, str, RouteEntry]]:
        """Yield ``(method, name, entry)`` in compile order."""
        for method in HTTPMethod:
            for name, entry in getattr(self, method.value).items():
                yield method, name, entry

    def routes(self) -> Iterator[RouteDefinition]:
        """Yield a :class:`RouteDefinition` for every declared route, in compile order."""
        from restwrap.template import parse

        for method, name, entry in self.route_entries():
            if isinstance(entry, str):
                template, options = entry, {}
            else:
                template, options = entry.path_pattern, entry.request_options
            yield RouteDefinition(
                method=method,
                name=name,
                template=template,
                request_options=options,
                pattern=parse(template),
            )
