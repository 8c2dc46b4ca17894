"""Response transformers.

A transformer turns the text of a
:class:`~resting.component.response.ServiceResponse` into typed entities:
either one ordered list of a target type, or a mapping from alias key to a
list of that key's type.

Classes:
    :class:`Transformer` -- abstract base holding the entity validation.
    :class:`JSONTransformer` -- documents parsed with :mod:`json`.
    :class:`XMLTransformer` -- documents parsed with :mod:`xml.etree.ElementTree`.

Use :func:`get_transformer` to pick one by
:class:`~resting.models.TransformationType`.
"""

from __future__ import annotations

from resting.exceptions import ConfigurationError
from resting.models import TransformationType
from resting.transform.base import Transformer
from resting.transform.json_transformer import JSONTransformer
from resting.transform.xml_transformer import XMLTransformer, element_to_value

_TRANSFORMERS: dict[TransformationType, Transformer] = {
    TransformationType.JSON: JSONTransformer(),
    TransformationType.XML: XMLTransformer(),
}


def get_transformer(transformation_type: TransformationType | str) -> Transformer:
    """Return the shared transformer instance for *transformation_type*.

    Raises:
        ConfigurationError: If *transformation_type* names no known format.
    """
    try:
        resolved = TransformationType(transformation_type)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    return _TRANSFORMERS[resolved]


__all__ = [
    "Transformer",
    "JSONTransformer",
    "XMLTransformer",
    "element_to_value",
    "get_transformer",
]
