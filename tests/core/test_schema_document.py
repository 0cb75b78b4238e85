from __future__ import annotations

import pytest
from graphql import GraphQLSyntaxError

from schemacontracts.core.document import (
    SPECIFIED_SCALAR_NAMES,
    SchemaDocument,
    has_directive,
    is_specified_scalar,
    make_directive,
    named_type_of,
    replace_node,
)


def test_root_type_names_from_conventional_names():
    document = SchemaDocument.from_sdl(
        """
        type Query { a: String }
        type Mutation { b: String }
        """
    )
    assert document.root_type_names() == {"query": "Query", "mutation": "Mutation"}


def test_root_type_names_explicit_schema_block_wins():
    document = SchemaDocument.from_sdl(
        """
        type RootQuery { a: String }
        type Mutation { b: String }
        schema { query: RootQuery }
        """
    )
    assert document.root_type_names() == {"query": "RootQuery"}


def test_type_definitions_in_document_order():
    document = SchemaDocument.from_sdl(
        """
        directive @internal on FIELD_DEFINITION
        type Query { a: B }
        type B { c: String }
        extend type B { d: String }
        """
    )
    assert list(document.type_definitions()) == ["Query", "B"]
    assert [node.name.value for node in document.type_extensions()] == ["B"]
    assert list(document.directive_definitions()) == ["internal"]


def test_with_definitions_leaves_source_untouched():
    document = SchemaDocument.from_sdl("type Query { a: String }\ntype Unused { b: String }")
    before = document.to_sdl()
    trimmed = document.with_definitions(document.definitions[:1])

    assert document.to_sdl() == before
    assert list(trimmed.type_definitions()) == ["Query"]


def test_replace_node_returns_copy():
    document = SchemaDocument.from_sdl("type Query { a: String }")
    query = document.type_definitions()["Query"]
    marked = replace_node(query, directives=(make_directive("inaccessible"),))

    assert has_directive(marked, "inaccessible")
    assert not has_directive(query, "inaccessible")


def test_named_type_of_unwraps_lists_and_non_null():
    document = SchemaDocument.from_sdl("type Query { a: [[Item!]!] }\ntype Item { b: String }")
    field_node = document.type_definitions()["Query"].fields[0]
    assert named_type_of(field_node.type) == "Item"


def test_from_sdl_propagates_syntax_errors():
    with pytest.raises(GraphQLSyntaxError):
        SchemaDocument.from_sdl("type Query {")


def test_type_nodes_group_extensions_after_definition():
    document = SchemaDocument.from_sdl(
        """
        extend type B { e: String }
        type Query { a: B }
        type B { c: String }
        extend type B { d: String }
        extend type Missing { x: String }
        """
    )
    nodes = document.type_nodes()

    assert list(nodes) == ["Query", "B"]
    assert [len(node.fields) for node in nodes["B"]] == [1, 1, 1]
    assert nodes["B"][0] is document.type_definitions()["B"]
    assert "Missing" not in nodes


def test_specified_scalars_are_known_by_name():
    assert {"String", "Int", "Float", "Boolean", "ID"} <= SPECIFIED_SCALAR_NAMES
    assert is_specified_scalar("ID")
    assert not is_specified_scalar("DateTime")
