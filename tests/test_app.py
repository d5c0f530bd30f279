"""CLI tests for the ``routes``, ``uri`` and ``call`` commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from restwrap import __version__
from restwrap.app import app, main
from restwrap.exceptions import ConfigError, InvalidUsageError, NotFoundError, ServerError
from restwrap.transport import HttpxTransport


# ---------------------------------------------------------------------------
# Global flags
# ---------------------------------------------------------------------------


class TestGlobalFlags:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"restwrap {__version__}" in result.stdout

    def test_help_lists_commands(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("routes", "uri", "call"):
            assert command in result.stdout


# ---------------------------------------------------------------------------
# routes
# ---------------------------------------------------------------------------


class TestRoutesCommand:
    def test_plain(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--no-color", "routes", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Method\tName\tTemplate\tPath variables\tQuery parameters\tOptions"
        assert lines[1] == "GET\tsearch\t/search/${mode}/${customerId}/?page\tmode, customerId\tpage\t-"
        assert lines[2] == "GET\tlist\t/items?zc|rd\t-\trd, zc\ttimeout"
        assert lines[3] == "PUT\tupload\t/upload/${id}\tid\t-\t-"

    def test_json(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "routes", "-c", str(config_file)])
        assert result.exit_code == 0, result.output
        records = json.loads(result.stdout)
        assert [r["Name"] for r in records] == ["search", "list", "upload"]

    def test_project_config_is_found(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "--no-color", "routes"])
        assert result.exit_code == 0, result.output
        assert "upload" in result.stdout

    def test_missing_config(self, cli_runner, isolated_dir: Path) -> None:
        result = cli_runner.invoke(app, ["routes"])
        assert isinstance(result.exception, ConfigError)


# ---------------------------------------------------------------------------
# uri
# ---------------------------------------------------------------------------


class TestUriCommand:
    def test_full_uri(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(
            app,
            ["--no-color", "uri", "search", "-a", "mode=cool", "-a", "customerId=1337", "-a", "page=2"],
        )
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "https://michaeljperri.com/api/search/cool/1337/?page=2"

    def test_missing_variable_warns(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "uri", "search", "-a", "mode=cool"])
        assert result.exit_code == 0, result.output
        assert "https://michaeljperri.com/api/search/cool/${customerId}/" in result.stdout
        assert "Path variable 'customerId' was not supplied" in result.output

    def test_ignored_argument_warns(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "uri", "upload", "-a", "id=7", "-a", "extra=1"])
        assert result.exit_code == 0, result.output
        assert "https://michaeljperri.com/api/upload/7" in result.stdout
        assert "Argument 'extra'" in result.output

    def test_unknown_route(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["uri", "nope"])
        assert isinstance(result.exception, InvalidUsageError)
        assert "search" in str(result.exception)

    def test_malformed_arg(self, cli_runner, config_file: Path) -> None:
        result = cli_runner.invoke(app, ["uri", "search", "-a", "mode"])
        assert isinstance(result.exception, InvalidUsageError)


# ---------------------------------------------------------------------------
# call
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_http(monkeypatch: pytest.MonkeyPatch):
    """Route the call command's transport through an httpx.MockTransport."""
    state: dict[str, Any] = {"status": 200, "payload": {"results": [1, 2]}, "seen": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["seen"].append(request)
        return httpx.Response(state["status"], json=state["payload"])

    def factory(dry_run: bool = False) -> HttpxTransport:
        return HttpxTransport(dry_run=dry_run, transport=httpx.MockTransport(handler))

    monkeypatch.setattr("restwrap.commands.call.HttpxTransport", factory)
    return state


class TestCallCommand:
    def test_get(self, cli_runner, config_file: Path, mock_http) -> None:
        result = cli_runner.invoke(
            app,
            ["--json", "--no-color", "call", "search", "-a", "mode=cool", "-a", "customerId=1", "-a", "page=3"],
        )
        assert result.exit_code == 0, result.output
        request = mock_http["seen"][0]
        assert request.method == "GET"
        assert str(request.url) == "https://michaeljperri.com/api/search/cool/1/?page=3"
        assert '"results"' in result.stdout
        assert "HTTP 200 OK" in result.output

    def test_put_with_body_and_option(self, cli_runner, config_file: Path, mock_http) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--json", "-q", "call", "upload",
                "-a", "id=7",
                "--body", "hello",
                "-O", 'headers={"Content-Type": "text/plain"}',
            ],
        )
        assert result.exit_code == 0, result.output
        request = mock_http["seen"][0]
        assert request.method == "PUT"
        assert request.content == b"hello"
        assert request.headers["content-type"] == "text/plain"

    def test_body_on_get_route(self, cli_runner, config_file: Path, mock_http) -> None:
        result = cli_runner.invoke(app, ["call", "search", "--body", "x"])
        assert isinstance(result.exception, InvalidUsageError)
        assert mock_http["seen"] == []

    def test_not_found_status(self, cli_runner, config_file: Path, mock_http) -> None:
        mock_http["status"] = 404
        mock_http["payload"] = {"message": "no such customer"}
        result = cli_runner.invoke(app, ["call", "search", "-a", "mode=x", "-a", "customerId=9"])
        assert isinstance(result.exception, NotFoundError)
        assert "no such customer" in str(result.exception)

    def test_success_status_line(self, cli_runner, config_file: Path, mock_http, monkeypatch) -> None:
        success = MagicMock()
        info = MagicMock()
        monkeypatch.setattr("restwrap.commands.call.success", success)
        monkeypatch.setattr("restwrap.commands.call.info", info)

        result = cli_runner.invoke(app, ["call", "search", "-a", "mode=x", "-a", "customerId=1"])

        assert result.exit_code == 0, result.output
        success.assert_called_once_with("HTTP 200 OK")
        info.assert_not_called()

    def test_error_status_line_is_info(self, cli_runner, config_file: Path, mock_http, monkeypatch) -> None:
        success = MagicMock()
        info = MagicMock()
        monkeypatch.setattr("restwrap.commands.call.success", success)
        monkeypatch.setattr("restwrap.commands.call.info", info)
        mock_http["status"] = 500
        mock_http["payload"] = {"error": "boom"}

        result = cli_runner.invoke(app, ["call", "search", "-a", "mode=x", "-a", "customerId=1"])

        assert isinstance(result.exception, ServerError)
        info.assert_called_once_with("HTTP 500 Internal Server Error")
        success.assert_not_called()

    def test_dry_run(self, cli_runner, config_file: Path, mock_http) -> None:
        result = cli_runner.invoke(
            app,
            ["--plain", "--no-color", "-n", "call", "search", "-a", "mode=x", "-a", "customerId=1"],
        )
        assert result.exit_code == 0, result.output
        assert mock_http["seen"] == []
        assert "[dry-run] GET https://michaeljperri.com/api/search/x/1/" in result.output
        assert "message\tRequest was not sent" in result.stdout


# ---------------------------------------------------------------------------
# main() exit codes
# ---------------------------------------------------------------------------


class TestMain:
    def test_config_error_exit_code(
        self, isolated_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("restwrap.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr(sys, "argv", ["restwrap", "--no-color", "routes"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 7
        assert "No configuration found" in capsys.readouterr().err

    def test_success_exit_code(
        self, config_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("restwrap.app._setup_signal_handlers", lambda: None)
        monkeypatch.setattr(sys, "argv", ["restwrap", "--plain", "--no-color", "uri", "upload", "-a", "id=1"])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == "https://michaeljperri.com/api/upload/1"
