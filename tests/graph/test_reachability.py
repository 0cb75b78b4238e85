from __future__ import annotations

import pytest

from schemacontracts.core.document import SchemaDocument
from schemacontracts.core.errors import UnknownTypeReference
from schemacontracts.graph.reachability import (
    RELATION_IMPLEMENTS,
    RELATION_POSSIBLE_TYPE,
    build_type_graph,
    get_reachable_types,
    get_unreachable_types,
    reference_paths,
)


def _reachable(sdl: str, **kwargs):
    return get_reachable_types(SchemaDocument.from_sdl(sdl), **kwargs)


@pytest.mark.parametrize("root", ["Query", "Mutation", "Subscription"])
def test_includes_root_type(root):
    assert _reachable(f"type {root} {{ hello: String }}") == {root}


def test_excludes_unused_root_type():
    reachable = _reachable(
        """
        type Query { hello: String }
        type Mutation { hello: String }
        schema { query: Query }
        """
    )
    assert reachable == {"Query"}


def test_includes_object_types_referenced_by_root():
    assert _reachable("type Query { hello: Hello }\ntype Hello { world: String }") == {"Query", "Hello"}


def test_includes_scalar_types_referenced_by_root():
    assert _reachable("type Query { hello: Hello }\nscalar Hello") == {"Query", "Hello"}


def test_includes_input_types_referenced_by_argument():
    reachable = _reachable("type Query { hello(input: Hello): String }\ninput Hello { world: String }")
    assert reachable == {"Query", "Hello"}


def test_includes_enum_types_referenced_by_root():
    assert _reachable("type Query { hello: Hello }\nenum Hello { WORLD }") == {"Query", "Hello"}


def test_includes_union_and_members():
    reachable = _reachable(
        """
        type Query { hello: Hello }
        union Hello = World
        union Gang = World
        type World { world: String }
        """
    )
    assert reachable == {"Query", "Hello", "World"}


def test_includes_interface_and_implementors():
    reachable = _reachable(
        """
        type Query { hello: Hello }
        interface Hello { world: String }
        type World implements Hello { world: String }
        """
    )
    assert reachable == {"Query", "Hello", "World"}


def test_includes_input_type_referenced_by_input_type():
    reachable = _reachable(
        """
        input Hello { world: World }
        input World { world: String }
        type Query { hello(world: Hello): String }
        """
    )
    assert reachable == {"Query", "Hello", "World"}


def test_transitive_closure_and_cycles():
    reachable = _reachable(
        """
        type Query { user: User }
        type User { friends: [User!]! posts: [Post] }
        type Post { author: User }
        type Orphan { name: String }
        """
    )
    assert reachable == {"Query", "User", "Post"}


def test_interface_does_not_pull_in_implementing_interfaces():
    reachable = _reachable(
        """
        type Query { node: Node }
        interface Node { id: ID! }
        interface Resource implements Node { id: ID! }
        """
    )
    assert reachable == {"Query", "Node"}


def test_type_extensions_contribute_references():
    reachable = _reachable(
        """
        type Query { a: String }
        extend type Query { b: Extra }
        type Extra { c: String }
        """
    )
    assert reachable == {"Query", "Extra"}


def test_specified_scalars_never_included():
    reachable = _reachable("type Query { a: String b: Int c: Float d: Boolean e: ID }")
    assert reachable == {"Query"}


def test_unknown_reference_raises():
    with pytest.raises(UnknownTypeReference) as exc_info:
        _reachable("type Query { a: Missing }")
    assert exc_info.value.type_name == "Missing"
    assert exc_info.value.referenced_from == "Query.a"


def test_unknown_schema_root_raises():
    with pytest.raises(UnknownTypeReference):
        _reachable("type Query { a: String }\nschema { query: RootQuery }")


def test_ignore_directive_removes_marked_paths():
    sdl = """
        type Query { bar: Car @inaccessible  baz: Baz }
        type Car { hello: String }
        type Baz @inaccessible { a: String }
    """
    assert _reachable(sdl) == {"Query", "Car", "Baz"}
    assert _reachable(sdl, ignore_directive="inaccessible") == {"Query"}


def test_reachability_is_pure():
    document = SchemaDocument.from_sdl("type Query { a: A }\ntype A { b: String }\ntype C { d: String }")
    assert get_reachable_types(document) == get_reachable_types(document)
    assert get_unreachable_types(document) == ["C"]


def test_type_graph_labels_edges():
    document = SchemaDocument.from_sdl(
        """
        type Query { node: Node }
        interface Node { id: ID! }
        type User implements Node { id: ID! }
        """
    )
    graph = build_type_graph(document)
    assert graph.nodes["Node"]["kind"] == "interface"
    assert graph.edges["User", "Node"]["relation"] == RELATION_IMPLEMENTS
    assert graph.edges["Node", "User"]["relation"] == RELATION_POSSIBLE_TYPE


def test_reference_paths_explain_reachability():
    document = SchemaDocument.from_sdl(
        """
        type Query { user: User }
        type User { address: Address }
        type Address { city: String }
        type Orphan { a: String }
        """
    )
    assert reference_paths(document, "Address") == {"Query": ["Query", "User", "Address"]}
    assert reference_paths(document, "Orphan") == {}
