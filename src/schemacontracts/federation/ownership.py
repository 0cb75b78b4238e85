"""
Supergraph ownership extraction.

Reads the federation join spec annotations of a supergraph document and
builds a map from schema coordinate to the subgraphs that contribute it:

- ``enum join__Graph`` values carry ``@join__graph(name: ...)`` which maps the
  internal symbol (e.g. ``INVENTORY``) to the subgraph name (``inventory``)
- types carry repeatable ``@join__type(graph: G)``
- fields and input fields may carry repeatable ``@join__field(graph: G)``
- enum values may carry repeatable ``@join__enumValue(graph: G)``

Members without a member-level join directive belong to every subgraph that
owns the parent type. Explicit member directives always win, even when they
name a strict subset of the type owners. Arguments inherit their field and
are not tracked separately.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

import pandas as pd
from graphql.language import (
    EnumTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeDefinitionNode,
    TypeDefinitionNode,
)

from schemacontracts.constants import (
    DIRECTIVE_JOIN_ENUM_VALUE,
    DIRECTIVE_JOIN_FIELD,
    DIRECTIVE_JOIN_GRAPH,
    DIRECTIVE_JOIN_TYPE,
    JOIN_GRAPH_ARGUMENT,
    JOIN_GRAPH_ENUM,
    JOIN_GRAPH_NAME_ARGUMENT,
)
from schemacontracts.core.coordinates import (
    coordinate_of_enum_value,
    coordinate_of_field,
    coordinate_of_type,
    parse_coordinate,
)
from schemacontracts.core.document import (
    SchemaDocument,
    enum_argument_value,
    get_directives,
    string_argument_value,
)
from schemacontracts.core.errors import MalformedSupergraph
from schemacontracts.schemas.contract_rows import OwnershipRow

logger = logging.getLogger(__name__)

# coordinate -> subgraph names
OwnershipMap = Dict[str, FrozenSet[str]]


def build_graph_lookup(document: SchemaDocument) -> Dict[str, Optional[str]]:
    """
    Map join__Graph symbols to subgraph names.

    Symbols declared without a usable ``@join__graph(name:)`` map to None;
    they only fail once something references them.

    Raises:
        MalformedSupergraph: If the document has no join__Graph enum.
    """
    graph_enum = document.type_definitions().get(JOIN_GRAPH_ENUM)
    if not isinstance(graph_enum, EnumTypeDefinitionNode):
        raise MalformedSupergraph(f"Supergraph does not define enum {JOIN_GRAPH_ENUM}")

    lookup: Dict[str, Optional[str]] = {}
    for value_node in graph_enum.values or ():
        symbol = value_node.name.value
        subgraph_name = None
        for directive in get_directives(value_node, DIRECTIVE_JOIN_GRAPH):
            subgraph_name = string_argument_value(directive, JOIN_GRAPH_NAME_ARGUMENT)
            if subgraph_name is not None:
                break
        if subgraph_name is None:
            logger.warning(f"{JOIN_GRAPH_ENUM}.{symbol} has no @{DIRECTIVE_JOIN_GRAPH}(name:)")
        lookup[symbol] = subgraph_name

    logger.debug(f"Resolved {len(lookup)} join graph symbols")
    return lookup


class _GraphResolver:
    """Resolves graph symbols on join directives through the lookup."""

    def __init__(self, lookup: Dict[str, Optional[str]]):
        self._lookup = lookup

    def resolve(self, symbol: str, referenced_from: str) -> str:
        subgraph_name = self._lookup.get(symbol)
        if subgraph_name is None:
            raise MalformedSupergraph(
                f"Graph '{symbol}' referenced from '{referenced_from}' is not declared "
                f"with @{DIRECTIVE_JOIN_GRAPH} on {JOIN_GRAPH_ENUM}",
                graph_symbol=symbol,
            )
        return subgraph_name

    def owners(self, node, directive_name: str, referenced_from: str) -> Optional[Set[str]]:
        """
        Subgraphs named by ``directive_name`` occurrences on a node.

        Returns None when the node carries no occurrence with a graph
        argument, so callers can apply the inherit-from-type default.
        """
        symbols = [
            enum_argument_value(directive, JOIN_GRAPH_ARGUMENT)
            for directive in get_directives(node, directive_name)
        ]
        symbols = [symbol for symbol in symbols if symbol is not None]
        if not symbols:
            return None
        return {self.resolve(symbol, referenced_from) for symbol in symbols}


def extract_ownership(document: SchemaDocument) -> OwnershipMap:
    """
    Build the coordinate -> subgraphs map of a supergraph.

    Args:
        document: Supergraph document annotated with the join spec.

    Returns:
        OwnershipMap in document order. Coordinates without any owner
        (composition scaffolding) are omitted.

    Raises:
        MalformedSupergraph: If join__Graph is missing or a referenced graph
            symbol has no @join__graph name.
    """
    resolver = _GraphResolver(build_graph_lookup(document))
    ownership: Dict[str, FrozenSet[str]] = {}

    for type_name, definition in document.type_definitions().items():
        if not isinstance(definition, TypeDefinitionNode):
            continue
        type_owners = resolver.owners(definition, DIRECTIVE_JOIN_TYPE, type_name) or set()
        member_ownership: Dict[str, Set[str]] = {}

        if isinstance(definition, (ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode,
                                   InputObjectTypeDefinitionNode)):
            for field_node in definition.fields or ():
                coordinate = coordinate_of_field(type_name, field_node.name.value)
                explicit = resolver.owners(field_node, DIRECTIVE_JOIN_FIELD, coordinate)
                member_ownership[coordinate] = set(type_owners) if explicit is None else explicit

        elif isinstance(definition, EnumTypeDefinitionNode):
            for value_node in definition.values or ():
                coordinate = coordinate_of_enum_value(type_name, value_node.name.value)
                explicit = resolver.owners(value_node, DIRECTIVE_JOIN_ENUM_VALUE, coordinate)
                member_ownership[coordinate] = set(type_owners) if explicit is None else explicit

        # A type is owned by every subgraph contributing to it
        all_owners = set(type_owners)
        for owners in member_ownership.values():
            all_owners |= owners

        if all_owners:
            ownership[coordinate_of_type(type_name)] = frozenset(all_owners)
        for coordinate, owners in member_ownership.items():
            if owners:
                ownership[coordinate] = frozenset(owners)

    logger.info(f"Extracted ownership for {len(ownership)} coordinates")
    return ownership


def extract_ownership_from_sdl(supergraph_sdl: str) -> OwnershipMap:
    """Parse a supergraph SDL string and extract its ownership map."""
    return extract_ownership(SchemaDocument.from_sdl(supergraph_sdl))


def subgraphs_of(ownership: OwnershipMap) -> List[str]:
    """All subgraph names appearing in an ownership map, sorted."""
    names: Set[str] = set()
    for owners in ownership.values():
        names |= owners
    return sorted(names)


def coordinates_owned_by(ownership: OwnershipMap, subgraph: str) -> List[str]:
    return sorted(coordinate for coordinate, owners in ownership.items() if subgraph in owners)


def ownership_rows(ownership: OwnershipMap) -> Iterable[OwnershipRow]:
    for coordinate in sorted(ownership):
        type_name, member, argument = parse_coordinate(coordinate)
        for subgraph in sorted(ownership[coordinate]):
            yield OwnershipRow(
                coordinate=coordinate,
                type_name=type_name,
                member_name=member,
                subgraph=subgraph,
            )


def ownership_to_dataframe(ownership: OwnershipMap) -> pd.DataFrame:
    """One row per (coordinate, subgraph) pair, sorted by coordinate then subgraph."""
    rows = [row.to_dict() for row in ownership_rows(ownership)]
    if not rows:
        return pd.DataFrame(columns=list(OwnershipRow.__annotations__.keys()))
    return pd.DataFrame(rows)


__all__ = [
    "OwnershipMap",
    "build_graph_lookup",
    "extract_ownership",
    "extract_ownership_from_sdl",
    "subgraphs_of",
    "coordinates_owned_by",
    "ownership_rows",
    "ownership_to_dataframe",
]
