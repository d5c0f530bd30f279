"""Shared test fixtures for restwrap.

Provides a recording transport that stands in for the network, helpers for
writing configuration files, and automatic reset of the global output
manager between tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from restwrap.output import OutputFormat, OutputManager, reset_output, set_output


ROOT = "https://michaeljperri.com/api/"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time, which
    goes stale once CliRunner or capsys swaps the streams.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, plain-format OutputManager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


class RecordingTransport:
    """Transport double that records every call.

    Each call appends ``(request_options, callback)`` to :attr:`calls`. When
    a ``reply`` is configured, the callback is invoked with it. ``defaults``
    returns a child transport and records the options it was given.
    """

    def __init__(
        self,
        reply: Optional[tuple[Any, Any, Any]] = None,
        returns: Any = None,
    ) -> None:
        self.reply = reply
        self.returns = returns
        self.calls: list[tuple[dict[str, Any], Optional[Callable[..., Any]]]] = []
        self.defaults_calls: list[dict[str, Any]] = []
        self.children: list[RecordingTransport] = []

    def __call__(self, options: dict[str, Any], callback: Optional[Callable[..., Any]]) -> Any:
        self.calls.append((options, callback))
        if self.reply is not None and callback is not None:
            callback(*self.reply)
        return self.returns

    def defaults(self, options: dict[str, Any]) -> "RecordingTransport":
        self.defaults_calls.append(options)
        child = RecordingTransport(reply=self.reply, returns=self.returns)
        self.children.append(child)
        return child

    @property
    def last_options(self) -> dict[str, Any]:
        return self.calls[-1][0]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def recording_transport_cls() -> type[RecordingTransport]:
    return RecordingTransport


# ---------------------------------------------------------------------------
# Config file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    return {
        "root": ROOT,
        "parseJson": True,
        "get": {
            "search": "/search/${mode}/${customerId}/?page",
            "list": {
                "pathPattern": "/items?zc|rd",
                "requestOptions": {"timeout": 5},
            },
        },
        "put": {"upload": "/upload/${id}"},
    }


@pytest.fixture
def isolated_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty working directory with no RESTWRAP_* env vars."""
    monkeypatch.delenv("RESTWRAP_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config_file(isolated_dir: Path, sample_config_data: dict[str, Any]) -> Path:
    """Write the sample configuration as restwrap.json in the working directory."""
    path = isolated_dir / "restwrap.json"
    path.write_text(json.dumps(sample_config_data, indent=2), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner with the built-in commands registered."""
    from typer.testing import CliRunner

    from restwrap.app import register_commands

    register_commands()
    return CliRunner()
