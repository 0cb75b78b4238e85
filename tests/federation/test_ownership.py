from __future__ import annotations

from pathlib import Path

import pytest

from schemacontracts.core.document import SchemaDocument
from schemacontracts.core.errors import MalformedSupergraph
from schemacontracts.federation.ownership import (
    build_graph_lookup,
    coordinates_owned_by,
    extract_ownership,
    extract_ownership_from_sdl,
    ownership_to_dataframe,
    subgraphs_of,
)

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


def _supergraph() -> SchemaDocument:
    return SchemaDocument.from_sdl((FIXTURES / "products_supergraph.graphql").read_text(encoding="utf-8"))


def test_graph_lookup_maps_symbols_to_names():
    lookup = build_graph_lookup(_supergraph())
    assert lookup == {
        "INVENTORY": "inventory",
        "PANDAS": "pandas",
        "PRODUCTS": "products",
        "REVIEWS": "reviews",
        "USERS": "users",
    }


def test_field_without_join_field_inherits_type_owners():
    ownership = extract_ownership(_supergraph())
    assert ownership["DeliveryEstimates"] == frozenset({"inventory"})
    assert ownership["DeliveryEstimates.estimatedDelivery"] == frozenset({"inventory"})
    assert ownership["Product.id"] == frozenset({"inventory", "products", "reviews"})


def test_explicit_join_field_overrides_type_owners():
    ownership = extract_ownership(_supergraph())
    assert ownership["Product.reviewsScore"] == frozenset({"reviews"})
    assert ownership["Product.sku"] == frozenset({"products"})


def test_repeated_join_field_is_union_of_graphs():
    ownership = extract_ownership(_supergraph())
    assert ownership["Product.dimensions"] == frozenset({"inventory", "products"})


def test_root_type_lists_every_contributing_subgraph():
    ownership = extract_ownership(_supergraph())
    assert ownership["Query"] == frozenset({"inventory", "pandas", "products", "reviews", "users"})
    assert ownership["Query.allPandas"] == frozenset({"pandas"})


def test_type_owners_include_field_graphs():
    ownership = extract_ownership_from_sdl(
        """
        type Query @join__type(graph: A) {
          a: String
          b: String @join__field(graph: B)
        }
        enum join__Graph {
          A @join__graph(name: "a", url: "")
          B @join__graph(name: "b", url: "")
        }
        """
    )
    assert ownership["Query"] == frozenset({"a", "b"})
    assert ownership["Query.a"] == frozenset({"a"})


def test_enum_values_and_input_fields():
    ownership = extract_ownership(_supergraph())
    assert ownership["ShippingClass.STANDARD"] == frozenset({"inventory", "products"})
    assert ownership["ShippingClass.OVERNIGHT"] == frozenset({"inventory"})
    assert ownership["UserInput.name"] == frozenset({"pandas", "products"})


def test_arguments_and_scaffolding_not_tracked():
    ownership = extract_ownership(_supergraph())
    assert "Query.product.id" not in ownership
    assert "join__Graph" not in ownership
    assert "link__Purpose.SECURITY" not in ownership
    assert all(owners for owners in ownership.values())


def test_subgraph_helpers():
    ownership = extract_ownership(_supergraph())
    assert subgraphs_of(ownership) == ["inventory", "pandas", "products", "reviews", "users"]
    assert coordinates_owned_by(ownership, "pandas") == [
        "Panda",
        "Panda.favoriteFood",
        "Panda.name",
        "Query",
        "Query.allPandas",
        "UserInput",
        "UserInput.name",
    ]


def test_ownership_dataframe_rows():
    ownership = extract_ownership(_supergraph())
    ownership_df = ownership_to_dataframe(ownership)

    assert list(ownership_df.columns) == ["coordinate", "type_name", "member_name", "subgraph"]
    product_id = ownership_df[ownership_df["coordinate"] == "Product.id"]
    assert list(product_id["subgraph"]) == ["inventory", "products", "reviews"]
    assert set(product_id["member_name"]) == {"id"}


def test_empty_ownership_dataframe_keeps_columns():
    ownership_df = ownership_to_dataframe({})
    assert ownership_df.empty
    assert list(ownership_df.columns) == ["coordinate", "type_name", "member_name", "subgraph"]


def test_missing_graph_enum_is_malformed():
    with pytest.raises(MalformedSupergraph) as exc_info:
        extract_ownership_from_sdl("type Query @join__type(graph: A) { a: String }")
    assert exc_info.value.graph_symbol is None


def test_undeclared_graph_symbol_is_malformed():
    sdl = """
        type Query @join__type(graph: A) {
          a: String @join__field(graph: MISSING)
        }
        enum join__Graph {
          A @join__graph(name: "a", url: "")
        }
    """
    with pytest.raises(MalformedSupergraph) as exc_info:
        extract_ownership_from_sdl(sdl)
    assert exc_info.value.graph_symbol == "MISSING"


def test_graph_symbol_without_name_fails_only_when_referenced(caplog):
    sdl = """
        type Query @join__type(graph: A) {
          a: String
        }
        enum join__Graph {
          A @join__graph(name: "a", url: "")
          B
        }
    """
    ownership = extract_ownership_from_sdl(sdl)
    assert ownership["Query.a"] == frozenset({"a"})
    assert "join__Graph.B" in caplog.text

    with pytest.raises(MalformedSupergraph):
        extract_ownership_from_sdl(sdl.replace("a: String", "a: String @join__field(graph: B)"))
