"""Load client configurations from files, URLs, or stdin.

A configuration is the declarative API description consumed by
:func:`~restwrap.compiler.create`. It can be written as JSON or YAML::

    root: https://example.com/api/
    parseJson: true
    get:
      search: /search/${mode}?page|size
    put:
      upload:
        pathPattern: /upload/${id}
        requestOptions:
          headers: {Content-Type: text/plain}

:func:`resolve_config_path` decides which file the CLI reads, and
:func:`load_config` turns a source into a validated
:class:`~restwrap.models.ClientConfig`.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from pydantic import ValidationError

from restwrap.exceptions import ConfigError
from restwrap.models import ClientConfig

CONFIG_ENV_VAR = "RESTWRAP_CONFIG"
PROJECT_CONFIG_FILENAMES = ("restwrap.json", "restwrap.yaml", "restwrap.yml")


# --- Path resolution ---


def find_project_config(directory: Optional[Path] = None) -> Optional[Path]:
    """Return the first project-local config file in *directory* (default: cwd)."""
    base = directory or Path.cwd()
    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = base / filename
        if candidate.is_file():
            return candidate
    return None


def resolve_config_path(cli_path: Optional[str] = None) -> str:
    """Resolve which configuration source to load.

    Precedence (high to low):
        1. ``cli_path`` (the ``--config`` flag)
        2. The ``RESTWRAP_CONFIG`` environment variable
        3. ``restwrap.json``, ``restwrap.yaml`` or ``restwrap.yml`` in the
           working directory

    Returns:
        A file path, URL, or ``-`` for stdin.

    Raises:
        ConfigError: If no source can be found.
    """
    if cli_path:
        return cli_path

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return env_path

    project = find_project_config()
    if project is not None:
        return str(project)

    raise ConfigError(
        f"No configuration found. Pass --config, set {CONFIG_ENV_VAR}, "
        f"or create one of: {', '.join(PROJECT_CONFIG_FILENAMES)}"
    )


# --- Loading ---


def load_config(source: str) -> ClientConfig:
    """Load and validate a configuration from a URL, file path, or ``-`` (stdin).

    Raises:
        ConfigError: If the source cannot be read, parsed, or validated.
    """
    data = load_config_data(source)
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source}: {exc}") from exc


def load_config_data(source: str) -> dict[str, Any]:
    """Load the raw configuration mapping from *source* without validating it."""
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        return _load_from_url(source)
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    content = sys.stdin.read()
    if not content.strip():
        raise ConfigError("No configuration received on stdin")
    return parse_content(content, hint="", source="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a configuration over HTTP(S)."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise ConfigError(
            f"HTTP {exc.response.status_code} fetching configuration from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise ConfigError(f"Failed to fetch configuration from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return parse_content(response.text, hint=hint, source=url)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a configuration file; the extension is used as a format hint."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration file {path}: {exc}") from exc

    if not content.strip():
        raise ConfigError(f"Configuration file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    return parse_content(content, hint=hint, source=path)


def parse_content(content: str, hint: str = "", source: str = "<string>") -> dict[str, Any]:
    """Parse *content* as JSON, falling back to YAML.

    Args:
        content: Raw text.
        hint: ``"json"`` disables the YAML fallback, ``"yaml"`` skips JSON.
        source: Where the text came from, for error messages.

    Raises:
        ConfigError: If neither format yields a mapping.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content), source)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ConfigError(f"Invalid JSON in {source}: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content), source)
    except yaml.YAMLError as exc:
        msg = f"Failed to parse {source} as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise ConfigError(msg) from exc


def _require_mapping(data: Any, source: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        kind = type(data).__name__ if data is not None else "empty document"
        raise ConfigError(f"Configuration in {source} must be an object (got {kind})")
    return data
