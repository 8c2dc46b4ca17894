"""Execution of service contexts against :mod:`httpx`.

:class:`ServiceAccessor` turns one service context into exactly one HTTP
round trip and captures the result as a
:class:`~resting.component.response.ServiceResponse`. It adds no retries,
follows no redirects and applies no timeout other than the
:class:`~resting.models.TimeoutConfig` it was created with. Transport
failures surface as :class:`~resting.exceptions.TransportError`.

Example::

    context = make_context("GET", "http://api.example.com/products", 8080)
    with ServiceAccessor(TimeoutConfig(connect=3.0)) as accessor:
        response = accessor.access(context)
"""

from __future__ import annotations

from typing import Any, Optional, Union
from urllib.parse import urlencode

import httpx

from resting.component.response import ServiceResponse
from resting.exceptions import ConfigurationError, TransportError
from resting.models import (
    DeleteServiceContext,
    FilePayload,
    FormPayload,
    GetServiceContext,
    MessagePayload,
    PostServiceContext,
    PutServiceContext,
    TimeoutConfig,
    Verb,
)
from resting.output import debug

AnyServiceContext = Union[
    GetServiceContext, PostServiceContext, PutServiceContext, DeleteServiceContext
]

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
_BINARY_CONTENT_TYPE = "application/octet-stream"


class ServiceAccessor:
    """Synchronous executor for service contexts.

    Wraps :class:`httpx.Client`. Use it as a context manager so that the
    underlying connection pool is opened and closed; :meth:`access` outside
    a ``with`` block opens a client for the duration of that single call.

    Args:
        timeouts: Connection and socket timeouts applied to every call.
        transport: Optional transport for the client, e.g.
            :class:`httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        timeouts: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._timeouts = timeouts or TimeoutConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ServiceAccessor:
        self._client = self._make_client()
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def _make_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._timeouts.to_httpx(),
            transport=self._transport,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def access(self, context: AnyServiceContext) -> ServiceResponse:
        """Execute *context* and capture the response.

        Args:
            context: The service context describing the request.

        Returns:
            The captured :class:`ServiceResponse`, whatever its status code.

        Raises:
            TransportError: If the connection cannot be established or the
                transport fails.
            ConfigurationError: If a file payload cannot be read or a message
                cannot be encoded under its encoding.
            BodyReadError: If the response body cannot be drained.
        """
        if self._client is None:
            with self:
                return self.access(context)

        request = self._build_request(self._client, context)
        debug(f"{context.verb.value} {request.url}")
        try:
            response = self._client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request timed out ({context.verb.value} {request.url}): {exc}"
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"Request failed ({context.verb.value} {request.url}): {exc}"
            ) from exc

        service_response = ServiceResponse(response, context.encoding)
        debug(
            f"HTTP {service_response.status_code} "
            f"({service_response.body_length()} bytes) from {request.url}"
        )
        return service_response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _build_request(self, client: httpx.Client, context: AnyServiceContext) -> httpx.Request:
        """Map the context's verb-specific payload onto an :class:`httpx.Request`."""
        kwargs: dict[str, Any] = {}
        content_type: Optional[str] = None
        payload = context.payload

        if isinstance(payload, FormPayload):
            if context.verb in (Verb.GET, Verb.DELETE):
                if payload.params:
                    kwargs["params"] = list(payload.params)
            elif payload.params:
                kwargs["content"] = _form_encode(payload.params)
                content_type = _FORM_CONTENT_TYPE
        elif isinstance(payload, MessagePayload):
            kwargs["content"] = _encode_message(payload)
            content_type = f"text/plain; charset={payload.encoding.value}"
        elif isinstance(payload, FilePayload):
            kwargs["content"] = _read_file(payload)
            if payload.binary or payload.encoding.codec is None:
                content_type = _BINARY_CONTENT_TYPE
            else:
                content_type = f"text/plain; charset={payload.encoding.value}"

        headers = httpx.Headers(list(context.headers))
        if content_type is not None and "content-type" not in headers:
            headers["Content-Type"] = content_type

        return client.build_request(
            context.verb.value,
            context.target.target_url,
            headers=headers,
            **kwargs,
        )


def _form_encode(params: tuple[tuple[str, str], ...]) -> bytes:
    return urlencode(params).encode("ascii")


def _encode_message(payload: MessagePayload) -> bytes:
    codec = payload.encoding.codec or "utf-8"
    try:
        return payload.message.encode(codec)
    except UnicodeEncodeError as exc:
        raise ConfigurationError(
            f"Message cannot be encoded as {codec}: {exc.reason} at position {exc.start}"
        ) from exc


def _read_file(payload: FilePayload) -> bytes:
    try:
        return payload.path.read_bytes()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read request file {payload.path}: {exc}") from exc


def access(
    context: AnyServiceContext,
    timeouts: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ServiceResponse:
    """Execute *context* with a throwaway :class:`ServiceAccessor`."""
    with ServiceAccessor(timeouts, transport) as accessor:
        return accessor.access(context)

