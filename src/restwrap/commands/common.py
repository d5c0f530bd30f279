"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
from typing import Any, Optional

from restwrap.config import load_config, resolve_config_path
from restwrap.exceptions import InvalidUsageError
from restwrap.models import ClientConfig
from restwrap.output import debug


def load_cli_config(config_path: Optional[str]) -> ClientConfig:
    """Resolve and load the configuration named by ``--config`` (or its fallbacks)."""
    source = resolve_config_path(config_path)
    debug(f"Loading configuration from {source}")
    return load_config(source)


def parse_value(raw: str) -> Any:
    """Decode *raw* as JSON when possible, otherwise keep the string."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw


def parse_assignments(pairs: Optional[list[str]], flag: str) -> dict[str, Any]:
    """Turn repeated ``key=value`` flags into a dict, in the order given.

    Raises:
        InvalidUsageError: If an item has no ``=`` or an empty key.
    """
    result: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"{flag} expects key=value, got '{pair}'")
        result[key] = parse_value(value)
    return result
