"""Configuration defaults and precedence resolution.

:class:`RestingConfig` holds the defaults every request starts from: port
80, GET, UTF-8, JSON, no extra headers and no timeouts.
:func:`load_config` layers those defaults with a project file and
environment variables:

Precedence (high to low):
    1. Explicit overrides passed to :func:`load_config`
    2. Environment variables (``RESTING_PORT``, ``RESTING_VERB``,
       ``RESTING_ENCODING``, ``RESTING_TRANSFORMATION``,
       ``RESTING_CONNECT_TIMEOUT``, ``RESTING_SOCKET_TIMEOUT``)
    3. Project config (``./resting.json``)
    4. Defaults

Timeouts are expressed in seconds; ``0`` or an unset value means no
timeout.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from resting.exceptions import ConfigurationError
from resting.models import (
    DEFAULT_PORT,
    EncodingType,
    Header,
    TimeoutConfig,
    TransformationType,
    Verb,
)

_PROJECT_CONFIG_FILENAME = "resting.json"

_ENV_FIELDS = {
    "RESTING_PORT": "port",
    "RESTING_VERB": "verb",
    "RESTING_ENCODING": "encoding",
    "RESTING_TRANSFORMATION": "transformation_type",
    "RESTING_CONNECT_TIMEOUT": "connection_timeout",
    "RESTING_SOCKET_TIMEOUT": "socket_timeout",
}


class RestingConfig(BaseModel):
    """Effective request defaults.

    Example::

        RestingConfig(port=8080, transformation_type=TransformationType.XML)
    """

    port: int = Field(default=DEFAULT_PORT, description="Port the endpoint listens on")
    verb: Verb = Field(default=Verb.GET, description="HTTP verb")
    encoding: EncodingType = Field(
        default=EncodingType.UTF_8,
        description="Encoding of the request payload and of the response body",
    )
    transformation_type: TransformationType = Field(
        default=TransformationType.JSON, description="Format of the response document"
    )
    headers: list[Header] = Field(default_factory=list, description="Additional request headers")
    connection_timeout: Optional[float] = Field(
        default=None, description="Connect timeout in seconds; None for no timeout"
    )
    socket_timeout: Optional[float] = Field(
        default=None, description="Read/write timeout in seconds; None for no timeout"
    )

    @field_validator("headers", mode="before")
    @classmethod
    def _headers_from_mapping(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return list(value.items())
        return value

    @field_validator("port")
    @classmethod
    def _check_port(cls, value: int) -> int:
        if not 1 <= value <= 65535:
            raise ValueError(f"port {value} is outside 1..65535")
        return value

    @field_validator("connection_timeout", "socket_timeout")
    @classmethod
    def _check_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value < 0:
            raise ValueError("timeouts must not be negative")
        return value

    @property
    def timeouts(self) -> TimeoutConfig:
        return TimeoutConfig(connect=self.connection_timeout, socket=self.socket_timeout)


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``resting.json`` from *directory* (default: the working directory).

    Returns:
        The parsed dict, or ``None`` if the file does not exist.

    Raises:
        ConfigurationError: If the file is unreadable, not valid JSON, or
            not a JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read project config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Project config {path} must contain a JSON object")
    return data


def _env_values() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for env_var, field_name in _ENV_FIELDS.items():
        raw = os.environ.get(env_var, "").strip()
        if raw:
            values[field_name] = raw
    return values


def load_config(project_dir: Optional[Path] = None, **overrides: Any) -> RestingConfig:
    """Resolve the effective configuration.

    Args:
        project_dir: Directory searched for ``resting.json``.
        **overrides: Field values that take precedence over everything
            else. ``None`` values are ignored.

    Raises:
        ConfigurationError: If any layer holds an invalid value or an
            override names an unknown field.
    """
    unknown = set(overrides) - set(RestingConfig.model_fields)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    values: dict[str, Any] = {}
    project = load_project_config(project_dir)
    if project is not None:
        values.update(project)
    values.update(_env_values())
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RestingConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
