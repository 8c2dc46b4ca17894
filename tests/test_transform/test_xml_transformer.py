"""Tests for XMLTransformer and the element conversion it relies on."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Optional

import pytest
from pydantic import BaseModel

from resting.exceptions import ConfigurationError, ParseError
from resting.models import TransformationType
from resting.transform import XMLTransformer, element_to_value


class Product(BaseModel):
    id: Optional[int] = None
    name: str
    price: float


class Order(BaseModel):
    id: int
    product: str


PRODUCTS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<products>
  <product id="1"><name>shoe</name><price>49.5</price></product>
  <product id="2"><name>sock</name><price>3</price></product>
</products>
"""

CATALOG_XML = """<catalog>
  <product><name>shoe</name><price>49.5</price></product>
  <order><id>10</id><product>shoe</product></order>
  <product><name>hat</name><price>12</price></product>
  <note>ignored</note>
</catalog>
"""


@pytest.fixture
def transformer() -> XMLTransformer:
    return XMLTransformer()


# ---------------------------------------------------------------------------
# Element conversion
# ---------------------------------------------------------------------------


class TestElementToValue:
    def test_leaf_is_text(self) -> None:
        assert element_to_value(ET.fromstring("<name>  shoe </name>")) == "shoe"

    def test_empty_leaf_is_none(self) -> None:
        assert element_to_value(ET.fromstring("<name/>")) is None

    def test_attributes_and_children(self) -> None:
        element = ET.fromstring('<product id="7"><name>shoe</name></product>')
        assert element_to_value(element) == {"id": "7", "name": "shoe"}

    def test_repeated_children_become_list(self) -> None:
        element = ET.fromstring("<order><tag>a</tag><tag>b</tag><tag>c</tag></order>")
        assert element_to_value(element) == {"tag": ["a", "b", "c"]}

    def test_text_next_to_attributes(self) -> None:
        element = ET.fromstring('<price currency="EUR">3.50</price>')
        assert element_to_value(element) == {"currency": "EUR", "text": "3.50"}

    def test_namespaces_are_dropped(self) -> None:
        element = ET.fromstring(
            '<p:product xmlns:p="urn:shop" p:id="3"><p:name>hat</p:name></p:product>'
        )
        assert element_to_value(element) == {"id": "3", "name": "hat"}


# ---------------------------------------------------------------------------
# Entity lists and maps
# ---------------------------------------------------------------------------


class TestEntityList:
    def test_children_of_root(self, transformer, make_response) -> None:
        response = make_response(PRODUCTS_XML, content_type="application/xml")
        assert transformer.create_entity_list(response, Product) == [
            Product(id=1, name="shoe", price=49.5),
            Product(id=2, name="sock", price=3.0),
        ]

    def test_alias_restricts_children(self, transformer, make_response) -> None:
        response = make_response(CATALOG_XML, content_type="application/xml")
        products = transformer.create_entity_list(response, Product, {"product": Product})
        assert [p.name for p in products] == ["shoe", "hat"]

    def test_empty_root(self, transformer, make_response) -> None:
        assert transformer.create_entity_list(make_response("<products/>"), Product) == []


class TestEntityMap:
    def test_groups_by_tag(self, transformer, make_response) -> None:
        result = transformer.create_entity_map(
            make_response(CATALOG_XML), {"product": Product, "order": Order}
        )
        assert set(result) == {"product", "order"}
        assert [p.name for p in result["product"]] == ["shoe", "hat"]
        assert result["order"] == [Order(id=10, product="shoe")]

    def test_absent_tag_maps_to_empty_list(self, transformer, make_response) -> None:
        result = transformer.create_entity_map(
            make_response("<catalog><order><id>1</id><product>x</product></order></catalog>"),
            {"product": Product, "order": Order},
        )
        assert result["product"] == []

    def test_missing_alias_raises(self, transformer, make_response) -> None:
        with pytest.raises(ConfigurationError):
            transformer.create_entity_map(make_response(CATALOG_XML), None)


class TestErrors:
    def test_malformed_xml(self, transformer, make_response) -> None:
        with pytest.raises(ParseError) as exc_info:
            transformer.create_entity_list(make_response("<products>\n<product>\n</products>"), Product)
        assert exc_info.value.transformation_type is TransformationType.XML
        assert exc_info.value.fragment == "</products>"

    def test_schema_mismatch_names_fragment(self, transformer, make_response) -> None:
        response = make_response("<products><product><name>shoe</name></product></products>")
        with pytest.raises(ParseError) as exc_info:
            transformer.create_entity_list(response, Product)
        assert "XML entity [0]" in str(exc_info.value)
        assert exc_info.value.fragment == "<product><name>shoe</name></product>"
