"""Tests for the ``resting`` command line."""

from __future__ import annotations

import json
import sys

import httpx
import pytest
from typer.testing import CliRunner

from resting import __version__, app as app_module, helper
from resting.accessor import access as real_access
from resting.app import app
from resting.exceptions import ConfigurationError, TransportError


URL = "http://shop.local/products"

runner = CliRunner()


@pytest.fixture
def serve(monkeypatch: pytest.MonkeyPatch, recorded_transport):
    """Route every request the CLI makes through a recording MockTransport."""

    def _serve(**kwargs):
        mock, requests = recorded_transport(**kwargs)

        def _access(context, timeouts=None, transport=None):
            return real_access(context, timeouts=timeouts, transport=mock)

        monkeypatch.setattr(helper, "access", _access)
        return requests

    return _serve


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a stray resting.json in the working directory out of the tests."""
    monkeypatch.chdir(tmp_path)


class TestRoot:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"resting {__version__}" in result.stdout


class TestRequest:
    def test_prints_body(self, serve) -> None:
        requests = serve(json_body=[{"name": "A"}])
        result = runner.invoke(app, ["--json", "--quiet", "request", URL, "-p", "8080"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"name": "A"}]
        assert requests[0].method == "GET"
        assert requests[0].url.port == 8080

    def test_params_and_headers(self, serve) -> None:
        requests = serve(json_body=[])
        result = runner.invoke(
            app,
            [
                "--json", "--quiet", "request", URL,
                "-d", "tag=a", "-d", "tag=b",
                "-H", "X-Trace: t1",
            ],
        )
        assert result.exit_code == 0, result.output
        assert requests[0].url.params.get_list("tag") == ["a", "b"]
        assert requests[0].headers["X-Trace"] == "t1"

    def test_post_body(self, serve) -> None:
        requests = serve(json_body={})
        result = runner.invoke(
            app, ["--json", "--quiet", "request", URL, "-X", "POST", "--body", "hello"]
        )
        assert result.exit_code == 0, result.output
        assert requests[0].method == "POST"
        assert requests[0].content == b"hello"

    def test_describe(self, serve) -> None:
        serve(json_body={"ok": True})
        result = runner.invoke(app, ["--plain", "--quiet", "request", URL, "--describe"])
        assert result.exit_code == 0, result.output
        assert "HTTP Status: 200" in result.stdout
        assert "Response body:" in result.stdout

    def test_xml_entities(self, serve) -> None:
        serve(text="<products><product id='1'><name>hat</name></product></products>")
        result = runner.invoke(
            app, ["--json", "--quiet", "request", URL, "--xml", "--entities"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [{"id": "1", "name": "hat"}]

    def test_timeouts_from_environment(self, serve, monkeypatch: pytest.MonkeyPatch) -> None:
        requests = serve(json_body=[])
        monkeypatch.setenv("RESTING_SOCKET_TIMEOUT", "9")
        result = runner.invoke(
            app, ["--json", "--quiet", "request", URL, "--connect-timeout", "2"]
        )
        assert result.exit_code == 0, result.output
        assert requests[0].extensions["timeout"]["connect"] == 2.0
        assert requests[0].extensions["timeout"]["read"] == 9.0

    def test_non_success_status_exits_1(self, serve) -> None:
        serve(json_body={"error": "missing"}, status_code=404)
        result = runner.invoke(app, ["--json", "--quiet", "request", URL])
        assert result.exit_code == 1

    def test_invalid_param_raises(self, serve) -> None:
        serve(json_body=[])
        result = runner.invoke(app, ["request", URL, "-d", "novalue"])
        assert isinstance(result.exception, ConfigurationError)

    def test_transport_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        monkeypatch.setattr(
            helper,
            "access",
            lambda context, timeouts=None, transport=None: real_access(
                context, timeouts=timeouts, transport=httpx.MockTransport(_refuse)
            ),
        )
        result = runner.invoke(app, ["request", URL])
        assert isinstance(result.exception, TransportError)


class TestMain:
    def test_resting_error_maps_to_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def _fail(context, timeouts=None, transport=None):
            raise TransportError("Request failed (GET http://shop.local/products): refused")

        monkeypatch.setattr(helper, "access", _fail)
        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)
        monkeypatch.setattr(sys, "argv", ["resting", "--no-color", "request", URL])

        with pytest.raises(SystemExit) as exc_info:
            app_module.main()

        assert exc_info.value.code == 6
        assert "Error: Request failed" in capsys.readouterr().err

    def test_unexpected_error_exits_1(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(context, timeouts=None, transport=None):
            raise RuntimeError("boom")

        monkeypatch.setattr(helper, "access", _boom)
        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)
        monkeypatch.setattr(sys, "argv", ["resting", "--no-color", "request", URL])

        with pytest.raises(SystemExit) as exc_info:
            app_module.main()

        assert exc_info.value.code == 1
