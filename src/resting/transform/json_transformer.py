"""JSON documents to entities."""

from __future__ import annotations

import json
from typing import Any, Optional

from resting.exceptions import ParseError
from resting.models import Alias, TransformationType
from resting.transform.base import Transformer, excerpt, truncate


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class JSONTransformer(Transformer):
    """Maps a JSON array to entities item by item, and a JSON object to one entity.

    With an alias, an object holding one of the alias keys yields that key's
    value instead. For entity maps the document must be an object keyed by
    the alias keys.
    """

    transformation_type = TransformationType.JSON

    def parse(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseError(
                f"Malformed JSON at line {exc.lineno} column {exc.colno}: {exc.msg}",
                transformation_type=self.transformation_type,
                fragment=excerpt(text, exc.pos),
            ) from exc
        except RecursionError as exc:
            raise ParseError(
                "JSON document is nested too deeply to parse",
                transformation_type=self.transformation_type,
                fragment=truncate(text),
            ) from exc

    def _select_items(self, document: Any, alias: Optional[Alias]) -> list[Any]:
        if isinstance(document, dict) and alias is not None:
            for key in alias:
                if key in document:
                    return _as_list(document[key])
        return _as_list(document)

    def _select_groups(self, document: Any, alias: Alias) -> dict[str, list[Any]]:
        if not isinstance(document, dict):
            raise ParseError(
                f"Expected a JSON object holding {', '.join(alias)}, got {type(document).__name__}",
                transformation_type=self.transformation_type,
                fragment=truncate(json.dumps(document, default=str)),
            )
        return {key: _as_list(document[key]) for key in alias if key in document}

    def _fragment(self, item: Any) -> str:
        return json.dumps(item, default=str)
