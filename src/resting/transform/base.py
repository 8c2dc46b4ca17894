"""Abstract transformer and the entity validation shared by all formats."""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping, Optional, TypeVar, Union

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from resting.component.response import ServiceResponse
from resting.exceptions import ConfigurationError, ParseError
from resting.models import Alias, TransformationType

T = TypeVar("T")

_FRAGMENT_LIMIT = 200


@functools.lru_cache(maxsize=128)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


def truncate(text: str, limit: int = _FRAGMENT_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."


def excerpt(text: str, position: int, radius: int = 40) -> str:
    """Return the part of *text* around *position*."""
    start = max(position - radius, 0)
    return text[start : position + radius]


class Transformer(ABC):
    """Converts response text into typed entities.

    Subclasses parse the document and choose which parts of it are
    entities; this base class validates those parts against the target type
    with a pydantic :class:`~pydantic.TypeAdapter`, so the target may be a
    pydantic model, a dataclass, a ``TypedDict`` or a builtin type such as
    ``dict``. Arbitrary classes without a pydantic schema are rejected with
    :class:`~resting.exceptions.ConfigurationError`.
    """

    transformation_type: ClassVar[TransformationType]

    def create_entity_list(
        self,
        response: ServiceResponse,
        target_type: type[T],
        alias: Union[Alias, Mapping[str, Any], None] = None,
    ) -> list[T]:
        """Transform *response* into an ordered list of *target_type*.

        Args:
            response: The captured response.
            target_type: Type every entity is validated against.
            alias: Optional key-to-type binding that narrows which part of
                the document holds the entities.

        Raises:
            ConfigurationError: If *target_type* has no pydantic schema.
            DecodeError: If the body is not text under the response charset.
            ParseError: If the document is malformed or an entity does not
                match *target_type*.
        """
        document = self.parse(response.body_text())
        resolved = Alias.coerce(alias) if alias is not None else None
        return self._validate(self._select_items(document, resolved), target_type)

    def create_entity_map(
        self,
        response: ServiceResponse,
        alias: Union[Alias, Mapping[str, Any], None],
    ) -> dict[str, list[Any]]:
        """Transform *response* into ``{alias key: [entities of that key's type]}``.

        The result holds exactly the alias keys; a key absent from the
        document maps to an empty list.

        Raises:
            ConfigurationError: If *alias* is missing or empty.
            DecodeError: If the body is not text under the response charset.
            ParseError: If the document is malformed or an entity does not
                match its type.
        """
        if alias is None:
            raise ConfigurationError("An alias map is required to build an entity map")
        resolved = Alias.coerce(alias)
        document = self.parse(response.body_text())
        groups = self._select_groups(document, resolved)
        return {
            key: self._validate(groups.get(key, []), resolved[key], key=key)
            for key in resolved
        }

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse *text* into the format's document tree, raising :class:`ParseError`."""

    @abstractmethod
    def _select_items(self, document: Any, alias: Optional[Alias]) -> list[Any]:
        ...

    @abstractmethod
    def _select_groups(self, document: Any, alias: Alias) -> dict[str, list[Any]]:
        ...

    def _to_python(self, item: Any) -> Any:
        return item

    @abstractmethod
    def _fragment(self, item: Any) -> str:
        ...

    def _validate(self, items: list[Any], target_type: Any, key: Optional[str] = None) -> list[Any]:
        type_name = getattr(target_type, "__name__", repr(target_type))
        try:
            adapter = _adapter(target_type)
        except PydanticSchemaGenerationError as exc:
            raise ConfigurationError(
                f"Cannot build entities of type {type_name}; use a pydantic model, "
                "a dataclass, a TypedDict or a builtin type"
            ) from exc
        entities = []
        for index, item in enumerate(items):
            try:
                entities.append(adapter.validate_python(self._to_python(item)))
            except ValidationError as exc:
                location = f"'{key}'[{index}]" if key else f"[{index}]"
                raise ParseError(
                    f"{self.transformation_type.value.upper()} entity {location} "
                    f"does not match {type_name}: {exc}",
                    transformation_type=self.transformation_type,
                    fragment=truncate(self._fragment(item)),
                ) from exc
        return entities
