"""Shared test fixtures for resting.

Provides response builders, a mock-transport factory and clean global
state (output manager, ``RESTING_*`` environment) for every test.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from resting.component.response import ServiceResponse
from resting.models import EncodingType
from resting.output import reset_output


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_resting_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove RESTING_* variables so configuration tests start from defaults."""
    for name in (
        "RESTING_PORT",
        "RESTING_VERB",
        "RESTING_ENCODING",
        "RESTING_TRANSFORMATION",
        "RESTING_CONNECT_TIMEOUT",
        "RESTING_SOCKET_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def _make_service_response(
    body: str | bytes,
    status_code: int = 200,
    content_type: str = "application/json",
    encoding: EncodingType | str = EncodingType.UTF_8,
) -> ServiceResponse:
    """Capture a ServiceResponse from an in-memory httpx.Response."""
    content = body.encode("utf-8") if isinstance(body, str) else body
    return ServiceResponse(
        httpx.Response(
            status_code,
            headers=[("Content-Type", content_type)],
            content=content,
        ),
        encoding,
    )


@pytest.fixture
def make_response() -> Callable[..., ServiceResponse]:
    """Factory fixture: ``make_response(body, status_code=200, content_type=..., encoding=...)``."""
    return _make_service_response


@pytest.fixture
def recorded_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Factory for a MockTransport that records every request it answers.

    Usage::

        transport, requests = recorded_transport(json_body=[{"name": "A"}])
    """

    def _factory(
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        *,
        json_body: Any = None,
        text: Optional[str] = None,
        status_code: int = 200,
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if handler is not None:
                return handler(request)
            if text is not None:
                return httpx.Response(
                    status_code, text=text, headers={"Content-Type": "application/xml"}
                )
            return httpx.Response(status_code, json=json_body)

        return httpx.MockTransport(_handler), requests

    return _factory
