from __future__ import annotations

from pathlib import Path

from schemacontracts.core.document import SchemaDocument
from schemacontracts.federation.tags import (
    extract_coordinate_tags,
    list_tags,
    resolve_tag_directive_name,
)

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def _supergraph() -> SchemaDocument:
    return SchemaDocument.from_sdl((FIXTURES / "products_supergraph.graphql").read_text(encoding="utf-8"))


def test_extracts_tags_per_coordinate():
    tags = extract_coordinate_tags(_supergraph())
    assert tags["Panda.favoriteFood"] == frozenset({"nom-nom-nom"})
    assert tags["Product.delivery.zip"] == frozenset({"internal"})
    assert tags["Query.allPandas"] == frozenset({"public"})
    assert "Product.dimensions" not in tags


def test_extracts_tags_on_types_enum_values_and_input_fields():
    document = SchemaDocument.from_sdl(
        """
        type Query @tag(name: "root") { a: Size }
        enum Size { S @tag(name: "small") L }
        input Filter { term: String @tag(name: "search") @tag(name: "public") }
        """
    )
    tags = extract_coordinate_tags(document)
    assert tags == {
        "Query": frozenset({"root"}),
        "Size.S": frozenset({"small"}),
        "Filter.term": frozenset({"search", "public"}),
    }


def test_link_alias_renames_tag_directive():
    document = SchemaDocument.from_sdl(
        """
        schema @link(url: "https://specs.apollo.dev/tag/v0.3", as: "label") {
          query: Query
        }
        directive @label(name: String!) repeatable on FIELD_DEFINITION
        type Query {
          a: String @label(name: "public")
          b: String @tag(name: "ignored")
        }
        """
    )
    assert resolve_tag_directive_name(document) == "label"
    assert extract_coordinate_tags(document) == {"Query.a": frozenset({"public"})}


def test_plain_tag_link_and_fallback_name():
    assert resolve_tag_directive_name(_supergraph()) == "tag"
    plain = SchemaDocument.from_sdl('type Query { a: String @marker(name: "x") }')
    assert resolve_tag_directive_name(plain, default="marker") == "marker"
    assert extract_coordinate_tags(plain, "marker") == {"Query.a": frozenset({"x"})}


def test_list_tags_sorted_and_distinct():
    assert list_tags(_supergraph()) == ["internal", "nom-nom-nom", "public"]


def test_extension_members_and_tags_belong_to_their_type():
    document = SchemaDocument.from_sdl(
        """
        type Query { a: Item }
        type Item @tag(name: "base") { id: ID }
        extend type Item @tag(name: "extra") {
          secret: String @tag(name: "internal")
        }
        extend enum Size { XL @tag(name: "big") }
        enum Size { S }
        """
    )
    tags = extract_coordinate_tags(document)

    assert tags["Item"] == frozenset({"base", "extra"})
    assert tags["Item.secret"] == frozenset({"internal"})
    assert tags["Size.XL"] == frozenset({"big"})
    assert list_tags(document) == ["base", "big", "extra", "internal"]
