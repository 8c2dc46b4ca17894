"""Fluent builder for REST invocations with non-default settings.

Example::

    products = (
        RestingBuilder("http://local.myapis.com/ProductService/V1/productInput", Product)
        .set_port(8080)
        .set_verb(Verb.POST)
        .set_transformation_type(TransformationType.XML)
        .set_connection_timeout(3.0)
        .build()
    )

The order of the setter calls does not matter.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar, Union

import httpx

from resting import helper
from resting.config import RestingConfig
from resting.exceptions import ConfigurationError
from resting.helper import HeadersLike, ParamsLike
from resting.models import (
    Alias,
    EncodingType,
    RequestParams,
    TimeoutConfig,
    TransformationType,
    Verb,
    coerce_headers,
)

T = TypeVar("T")


class RestingBuilder(Generic[T]):
    """Collects request settings, then invokes the service on :meth:`build`.

    Args:
        uri: Absolute http(s) URL of the endpoint.
        target_type: Entity type for :meth:`build`.
        config: Starting defaults; :class:`~resting.config.RestingConfig`
            defaults when omitted.
        transport: Optional :mod:`httpx` transport, e.g. for tests.
    """

    def __init__(
        self,
        uri: str,
        target_type: type[T],
        config: Optional[RestingConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        config = config or RestingConfig()
        self._uri = uri
        self._target_type = target_type
        self._transport = transport
        self._port = config.port
        self._verb = config.verb
        self._encoding = config.encoding
        self._transformation_type = config.transformation_type
        self._headers = tuple(config.headers)
        self._params: Optional[RequestParams] = None
        self._message: Optional[str] = None
        self._file: Optional[Path] = None
        self._binary = False
        self._connection_timeout = config.connection_timeout
        self._socket_timeout = config.socket_timeout

    # ------------------------------------------------------------------ #
    # Setters
    # ------------------------------------------------------------------ #

    def set_port(self, port: int) -> RestingBuilder[T]:
        """Port to reach the endpoint on.

        Port 80 is the "unset" value: it keeps a port embedded in the URI and
        the 443 default of ``https`` URIs, so port 80 cannot be forced on an
        ``https`` URI. Any other port replaces the URI's port.
        """
        self._port = port
        return self

    def set_verb(self, verb: Union[Verb, str]) -> RestingBuilder[T]:
        try:
            self._verb = Verb(verb)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return self

    def set_encoding_type(self, encoding: Union[EncodingType, str]) -> RestingBuilder[T]:
        try:
            self._encoding = EncodingType(encoding)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return self

    def set_transformation_type(
        self, transformation_type: Union[TransformationType, str]
    ) -> RestingBuilder[T]:
        try:
            self._transformation_type = TransformationType(transformation_type)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return self

    def set_additional_headers(self, headers: HeadersLike) -> RestingBuilder[T]:
        self._headers = coerce_headers(headers)
        return self

    def set_request_params(self, params: ParamsLike) -> RestingBuilder[T]:
        self._params = RequestParams.coerce(params) if params is not None else None
        return self

    def set_message(self, message: Optional[str]) -> RestingBuilder[T]:
        """Send *message* as the raw request body (POST/PUT)."""
        self._message = message
        return self

    def set_file(self, path: Union[str, Path, None], binary: bool = False) -> RestingBuilder[T]:
        """Send the content of *path* as the request body (POST/PUT)."""
        self._file = Path(path) if path is not None else None
        self._binary = binary
        return self

    def set_connection_timeout(self, seconds: Optional[float]) -> RestingBuilder[T]:
        """Connect timeout in seconds. ``None`` or ``0`` means no timeout (the default)."""
        self._connection_timeout = seconds
        return self

    def set_socket_timeout(self, seconds: Optional[float]) -> RestingBuilder[T]:
        """Read/write timeout in seconds. ``None`` or ``0`` means no timeout (the default)."""
        self._socket_timeout = seconds
        return self

    # ------------------------------------------------------------------ #
    # Build
    # ------------------------------------------------------------------ #

    def build(self) -> list[T]:
        """Invoke the service and return the list of target entities.

        Has no side effects on the builder, so it can be called repeatedly.
        """
        return helper.execute_and_transform(
            self._verb,
            self._uri,
            self._target_type,
            self._port,
            transformation_type=self._transformation_type,
            **self._request_kwargs(),
        )

    def build_map(self, alias_map: Union[Alias, Mapping[str, Any], None]) -> dict[str, list[Any]]:
        """Invoke the service and return ``{alias key: [entities]}``.

        Raises:
            ConfigurationError: If *alias_map* is missing or empty, or the
                transformation type is not JSON.
        """
        if self._transformation_type is not TransformationType.JSON:
            raise ConfigurationError(
                "Entity maps can only be built from JSON responses, "
                f"not {self._transformation_type.value.upper()}"
            )
        return helper.execute_and_transform_map(
            self._verb,
            self._uri,
            alias_map,
            self._port,
            transformation_type=self._transformation_type,
            **self._request_kwargs(),
        )

    def _timeouts(self) -> TimeoutConfig:
        try:
            return TimeoutConfig(connect=self._connection_timeout, socket=self._socket_timeout)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid timeout: {exc}") from exc

    def _request_kwargs(self) -> dict[str, Any]:
        return {
            "params": self._params,
            "message": self._message,
            "file": self._file,
            "binary": self._binary,
            "encoding": self._encoding,
            "headers": self._headers,
            "timeouts": self._timeouts(),
            "transport": self._transport,
        }
