"""One-call shortcuts for the common cases.

``get/post/put/delete`` return the raw
:class:`~resting.component.response.ServiceResponse`; the ``*_by_json`` and
``*_by_xml`` variants also transform the body into a list of entities.
Use :class:`~resting.builder.RestingBuilder` when timeouts, headers or
other non-default settings are needed.

Example::

    import resting

    products = resting.get_by_json("http://shop.local/products", 8080, Product)
"""

from __future__ import annotations

from typing import Any, TypeVar

from resting import helper
from resting.helper import AliasLike, ParamsLike, delete, get, post, put
from resting.models import DEFAULT_PORT, TransformationType, Verb

T = TypeVar("T")


def _transform(
    verb: Verb,
    transformation_type: TransformationType,
    url: str,
    port: int,
    target_type: type[T],
    params: ParamsLike,
    alias: AliasLike,
    kwargs: dict[str, Any],
) -> list[T]:
    return helper.execute_and_transform(
        verb,
        url,
        target_type,
        port,
        transformation_type=transformation_type,
        alias=alias,
        params=params,
        **kwargs,
    )


def get_by_json(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.GET, TransformationType.JSON, url, port, target_type, params, alias, kwargs)


def get_by_xml(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.GET, TransformationType.XML, url, port, target_type, params, alias, kwargs)


def post_by_json(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.POST, TransformationType.JSON, url, port, target_type, params, alias, kwargs)


def post_by_xml(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.POST, TransformationType.XML, url, port, target_type, params, alias, kwargs)


def put_by_json(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.PUT, TransformationType.JSON, url, port, target_type, params, alias, kwargs)


def put_by_xml(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.PUT, TransformationType.XML, url, port, target_type, params, alias, kwargs)


def delete_by_json(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.DELETE, TransformationType.JSON, url, port, target_type, params, alias, kwargs)


def delete_by_xml(
    url: str, port: int = DEFAULT_PORT, target_type: type[T] = dict, params: ParamsLike = None,
    alias: AliasLike = None, **kwargs: Any,
) -> list[T]:
    return _transform(Verb.DELETE, TransformationType.XML, url, port, target_type, params, alias, kwargs)


__all__ = [
    "get",
    "post",
    "put",
    "delete",
    "get_by_json",
    "get_by_xml",
    "post_by_json",
    "post_by_xml",
    "put_by_json",
    "put_by_xml",
    "delete_by_json",
    "delete_by_xml",
]
