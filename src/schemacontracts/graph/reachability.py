"""
Type graph construction and root reachability.

The AST is a tree; the type system built from it is a graph through name
references. This module builds that graph explicitly as a networkx DiGraph
keyed by type name, so forward references and cycles need no special
handling, then walks it breadth-first from the root operation types.

Edges (A -> B) exist when:
- object/interface A has a field returning B, or a field argument of type B
- object/interface A implements interface B
- interface A is implemented by object/interface B (possible types)
- union A has member B
- input object A has an input field of type B

Specified scalars (String, Int, Float, Boolean, ID) are never nodes.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

import networkx as nx
from graphql.language import (
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
)

from schemacontracts.core.coordinates import coordinate_of_arg, coordinate_of_field
from schemacontracts.core.document import (
    SchemaDocument,
    has_directive,
    is_specified_scalar,
    named_type_of,
)
from schemacontracts.core.errors import UnknownTypeReference

logger = logging.getLogger(__name__)

# Edge relation labels stored on the graph
RELATION_FIELD = "field"
RELATION_ARGUMENT = "argument"
RELATION_IMPLEMENTS = "implements"
RELATION_POSSIBLE_TYPE = "possible_type"
RELATION_MEMBER = "member"
RELATION_INPUT_FIELD = "input_field"

KIND_BY_NODE = {
    ObjectTypeDefinitionNode: "object",
    InterfaceTypeDefinitionNode: "interface",
    UnionTypeDefinitionNode: "union",
    EnumTypeDefinitionNode: "enum",
    ScalarTypeDefinitionNode: "scalar",
    InputObjectTypeDefinitionNode: "input_object",
}

FIELD_BEARING = (
    ObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeExtensionNode,
    InterfaceTypeExtensionNode,
)


def _is_ignored(node, ignore_directive: Optional[str]) -> bool:
    return ignore_directive is not None and has_directive(node, ignore_directive)


def build_type_graph(
    document: SchemaDocument,
    ignore_directive: Optional[str] = None,
) -> nx.DiGraph:
    """
    Build the name-keyed type graph of a document.

    Args:
        document: Schema document to analyse.
        ignore_directive: When set, definitions, fields, input fields and
            arguments carrying this directive contribute no edges, and
            types carrying it are not traversable.

    Returns:
        DiGraph whose nodes are defined type names (attribute ``kind`` and
        ``ignored``) and whose edges carry a ``relation`` attribute.

    Raises:
        UnknownTypeReference: If a reference names an undefined,
            non-specified type.
    """
    definitions = document.type_definitions()
    graph = nx.DiGraph()

    for type_name, definition in definitions.items():
        graph.add_node(
            type_name,
            kind=KIND_BY_NODE.get(type(definition), "unknown"),
            ignored=_is_ignored(definition, ignore_directive),
        )

    def add_reference(source: str, target_name: str, relation: str, referenced_from: str) -> None:
        if is_specified_scalar(target_name):
            return
        if target_name not in definitions:
            raise UnknownTypeReference(target_name, referenced_from)
        # First relation wins; it only labels the edge
        if not graph.has_edge(source, target_name):
            graph.add_edge(source, target_name, relation=relation)

    nodes = list(definitions.values()) + document.type_extensions()
    for node in nodes:
        type_name = node.name.value
        if type_name not in definitions:
            raise UnknownTypeReference(type_name, f"extend {type_name}")

        if isinstance(node, FIELD_BEARING):
            for field_node in node.fields or ():
                if _is_ignored(field_node, ignore_directive):
                    continue
                field_coordinate = coordinate_of_field(type_name, field_node.name.value)
                add_reference(type_name, named_type_of(field_node.type), RELATION_FIELD, field_coordinate)
                for arg_node in field_node.arguments or ():
                    if _is_ignored(arg_node, ignore_directive):
                        continue
                    add_reference(
                        type_name,
                        named_type_of(arg_node.type),
                        RELATION_ARGUMENT,
                        coordinate_of_arg(type_name, field_node.name.value, arg_node.name.value),
                    )
            for interface_node in node.interfaces or ():
                interface_name = interface_node.name.value
                add_reference(type_name, interface_name, RELATION_IMPLEMENTS, type_name)
                # Possible types of an interface are its object implementors
                if isinstance(node, (ObjectTypeDefinitionNode, ObjectTypeExtensionNode)):
                    graph.add_edge(interface_name, type_name, relation=RELATION_POSSIBLE_TYPE)

        elif isinstance(node, (UnionTypeDefinitionNode, UnionTypeExtensionNode)):
            for member_node in node.types or ():
                add_reference(type_name, member_node.name.value, RELATION_MEMBER, type_name)

        elif isinstance(node, (InputObjectTypeDefinitionNode, InputObjectTypeExtensionNode)):
            for field_node in node.fields or ():
                if _is_ignored(field_node, ignore_directive):
                    continue
                add_reference(
                    type_name,
                    named_type_of(field_node.type),
                    RELATION_INPUT_FIELD,
                    coordinate_of_field(type_name, field_node.name.value),
                )

        elif isinstance(node, (EnumTypeDefinitionNode, EnumTypeExtensionNode)):
            # Enum values are not tracked by reachability
            continue

    logger.debug(
        f"Built type graph with {graph.number_of_nodes()} types "
        f"and {graph.number_of_edges()} references"
    )
    return graph


def resolve_root_types(document: SchemaDocument) -> List[str]:
    """
    Root operation type names that exist in the document.

    Raises:
        UnknownTypeReference: If a schema block names an undefined type.
    """
    definitions = document.type_definitions()
    roots: List[str] = []
    for operation, type_name in document.root_type_names().items():
        if type_name not in definitions:
            raise UnknownTypeReference(type_name, f"schema.{operation}")
        roots.append(type_name)
    return roots


def walk_reachable(graph: nx.DiGraph, roots: Iterable[str]) -> Set[str]:
    """
    Breadth-first closure over a type graph from the given roots.

    Nodes flagged ``ignored`` are neither marked nor expanded.
    """
    reachable: Set[str] = set()
    queue = deque()
    for root in roots:
        if root in reachable or graph.nodes[root].get("ignored"):
            continue
        reachable.add(root)
        queue.append(root)

    while queue:
        current = queue.popleft()
        for successor in graph.successors(current):
            if successor in reachable or graph.nodes[successor].get("ignored"):
                continue
            reachable.add(successor)
            queue.append(successor)
    return reachable


def get_reachable_types(
    document: SchemaDocument,
    ignore_directive: Optional[str] = None,
) -> Set[str]:
    """
    Names of all types reachable from the root operation types.

    The root types are always included (unless ignored); specified scalars
    never are. Pure function of the document.

    Args:
        document: Schema document to analyse.
        ignore_directive: Optional directive name whose carriers are
            treated as removed (see build_type_graph).

    Returns:
        Set of reachable type names.
    """
    graph = build_type_graph(document, ignore_directive=ignore_directive)
    roots = resolve_root_types(document)
    reachable = walk_reachable(graph, roots)
    logger.debug(f"Reachable types: {len(reachable)}/{graph.number_of_nodes()} from roots {roots}")
    return reachable


def get_unreachable_types(
    document: SchemaDocument,
    ignore_directive: Optional[str] = None,
) -> List[str]:
    """Defined types not reachable from the roots, in document order."""
    reachable = get_reachable_types(document, ignore_directive=ignore_directive)
    return [name for name in document.type_definitions() if name not in reachable]


def reference_paths(document: SchemaDocument, type_name: str) -> Dict[str, List[str]]:
    """
    Shortest reference path from each root type to ``type_name``.

    Useful for explaining why a type stays in a contract. Roots with no
    path are omitted.
    """
    graph = build_type_graph(document)
    paths: Dict[str, List[str]] = {}
    for root in resolve_root_types(document):
        if type_name not in graph:
            break
        try:
            paths[root] = nx.shortest_path(graph, root, type_name)
        except nx.NetworkXNoPath:
            continue
    return paths


__all__ = [
    "build_type_graph",
    "resolve_root_types",
    "walk_reachable",
    "get_reachable_types",
    "get_unreachable_types",
    "reference_paths",
]
