"""XML documents to entities.

Elements are converted to plain Python values before validation:

* a leaf element without attributes becomes its stripped text (``None``
  when empty);
* any other element becomes a dict of its attributes followed by its child
  elements, where a repeated child tag collects into a list and leaf text
  next to attributes is stored under ``"text"``.

Namespaces are dropped from tag and attribute names.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Optional

from resting.exceptions import ParseError
from resting.models import Alias, TransformationType
from resting.transform.base import Transformer


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def element_to_value(element: ET.Element) -> Any:
    """Convert *element* into the dict/str/list shape described above."""
    children = list(element)
    text = (element.text or "").strip()
    if not children and not element.attrib:
        return text or None

    value: dict[str, Any] = {_local_name(k): v for k, v in element.attrib.items()}
    repeated: set[str] = set()
    for child in children:
        name = _local_name(child.tag)
        child_value = element_to_value(child)
        if name in repeated:
            value[name].append(child_value)
        elif name in value:
            value[name] = [value[name], child_value]
            repeated.add(name)
        else:
            value[name] = child_value
    if text and not children:
        value["text"] = text
    return value


class XMLTransformer(Transformer):
    """Treats every direct child of the root element as one entity.

    An alias restricts the list variant to children whose tag is an alias
    key; the map variant groups the children by tag.
    """

    transformation_type = TransformationType.XML

    def parse(self, text: str) -> ET.Element:
        try:
            return ET.fromstring(text)
        except ET.ParseError as exc:
            line, column = exc.position
            lines = text.splitlines()
            fragment = lines[line - 1] if 0 < line <= len(lines) else text[:80]
            raise ParseError(
                f"Malformed XML at line {line} column {column}: {exc}",
                transformation_type=self.transformation_type,
                fragment=fragment,
            ) from exc

    def _select_items(self, document: ET.Element, alias: Optional[Alias]) -> list[Any]:
        children = list(document)
        if alias is not None:
            children = [child for child in children if _local_name(child.tag) in alias]
        return children

    def _select_groups(self, document: ET.Element, alias: Alias) -> dict[str, list[Any]]:
        groups: dict[str, list[Any]] = {}
        for child in document:
            name = _local_name(child.tag)
            if name in alias:
                groups.setdefault(name, []).append(child)
        return groups

    def _to_python(self, item: ET.Element) -> Any:
        return element_to_value(item)

    def _fragment(self, item: ET.Element) -> str:
        return ET.tostring(item, encoding="unicode")
