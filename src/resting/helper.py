"""Verb helpers: build a service context, execute it, optionally transform.

These functions are the seam between the public surfaces
(:mod:`resting.api`, :class:`~resting.builder.RestingBuilder`, the CLI) and
the accessor/transformer pipeline. Each call builds a fresh context and
discards it afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Iterable, Optional, TypeVar, Union

import httpx

from resting.accessor import access
from resting.component.response import ServiceResponse
from resting.models import (
    DEFAULT_PORT,
    Alias,
    EncodingType,
    Header,
    RequestParams,
    TimeoutConfig,
    TransformationType,
    Verb,
    make_context,
)
from resting.transform import get_transformer

T = TypeVar("T")

ParamsLike = Union[RequestParams, Mapping[str, Any], Iterable[tuple[str, Any]], None]
HeadersLike = Union[Mapping[str, str], Iterable[Union[Header, tuple[str, str]]], None]
AliasLike = Union[Alias, Mapping[str, Any], None]


def execute(
    verb: Union[Verb, str],
    url: str,
    port: int = DEFAULT_PORT,
    *,
    params: ParamsLike = None,
    message: Optional[str] = None,
    file: Union[str, Path, None] = None,
    binary: bool = False,
    encoding: Union[EncodingType, str] = EncodingType.UTF_8,
    headers: HeadersLike = None,
    timeouts: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> ServiceResponse:
    """Run one request and return the captured response.

    See :func:`~resting.models.make_context` for the payload rules.
    """
    context = make_context(
        verb,
        url,
        port,
        params=params,
        message=message,
        file=file,
        encoding=encoding,
        binary=binary,
        headers=headers,
    )
    return access(context, timeouts=timeouts, transport=transport)


def get(url: str, port: int = DEFAULT_PORT, params: ParamsLike = None, **kwargs: Any) -> ServiceResponse:
    return execute(Verb.GET, url, port, params=params, **kwargs)


def delete(url: str, port: int = DEFAULT_PORT, params: ParamsLike = None, **kwargs: Any) -> ServiceResponse:
    return execute(Verb.DELETE, url, port, params=params, **kwargs)


def post(url: str, port: int = DEFAULT_PORT, params: ParamsLike = None, **kwargs: Any) -> ServiceResponse:
    """POST form parameters, or a ``message=`` body, or a ``file=`` body."""
    return execute(Verb.POST, url, port, params=params, **kwargs)


def put(url: str, port: int = DEFAULT_PORT, params: ParamsLike = None, **kwargs: Any) -> ServiceResponse:
    """PUT form parameters, or a ``message=`` body, or a ``file=`` body."""
    return execute(Verb.PUT, url, port, params=params, **kwargs)


def execute_and_transform(
    verb: Union[Verb, str],
    url: str,
    target_type: type[T],
    port: int = DEFAULT_PORT,
    *,
    transformation_type: Union[TransformationType, str] = TransformationType.JSON,
    alias: AliasLike = None,
    **kwargs: Any,
) -> list[T]:
    """Run one request and transform the response into a list of *target_type*."""
    transformer = get_transformer(transformation_type)
    response = execute(verb, url, port, **kwargs)
    return transformer.create_entity_list(response, target_type, alias)


def execute_and_transform_map(
    verb: Union[Verb, str],
    url: str,
    alias: AliasLike,
    port: int = DEFAULT_PORT,
    *,
    transformation_type: Union[TransformationType, str] = TransformationType.JSON,
    **kwargs: Any,
) -> dict[str, list[Any]]:
    """Run one request and transform the response into ``{alias key: entities}``.

    The alias is checked before any traffic is sent.
    """
    resolved = Alias.coerce(alias)
    transformer = get_transformer(transformation_type)
    response = execute(verb, url, port, **kwargs)
    return transformer.create_entity_map(response, resolved)
