"""
Structural directive rewriting.

Adds an argument-less marker directive (``@inaccessible`` by default) to
type definitions or member nodes. Type extensions are marked together with
the definition they extend. Every function here:
- returns a new SchemaDocument and leaves the input untouched
- rebuilds only the definitions that actually change
- never appends the marker twice, so re-running on its own output is a no-op
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, Set, Tuple

from graphql.language import (
    DirectiveDefinitionNode,
    EnumTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    NameNode,
    ObjectTypeDefinitionNode,
    ScalarTypeDefinitionNode,
    TypeExtensionNode,
    UnionTypeDefinitionNode,
)

from schemacontracts.constants import MARKER_DIRECTIVE_LOCATIONS
from schemacontracts.core.coordinates import parse_coordinate
from schemacontracts.core.document import (
    ENUM_CONTAINERS,
    FIELD_CONTAINERS,
    SchemaDocument,
    has_directive,
    make_directive,
    replace_node,
)

logger = logging.getLogger(__name__)

NAMED_TYPE_DEFINITIONS = (
    ObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    UnionTypeDefinitionNode,
    EnumTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    ScalarTypeDefinitionNode,
)

MARKABLE_NODES = NAMED_TYPE_DEFINITIONS + (TypeExtensionNode,)


def add_directive_if_missing(node, directive_name: str):
    """Return ``node`` with the directive appended, or ``node`` itself if present."""
    if has_directive(node, directive_name):
        return node
    directives = tuple(node.directives or ()) + (make_directive(directive_name),)
    return replace_node(node, directives=directives)


def add_directive_on_types(
    document: SchemaDocument,
    excluded_type_names: Iterable[str],
    directive_name: str,
) -> SchemaDocument:
    """
    Mark every named type definition (and its extensions) whose name is
    not excluded.

    Args:
        document: Source document.
        excluded_type_names: Names to leave untouched, typically the
            reachable set plus protected scaffolding types.
        directive_name: Marker directive name, e.g. "inaccessible".

    Returns:
        New document. Directive definitions, the schema block and all
        other content pass through unchanged.
    """
    excluded = set(excluded_type_names)
    marked = 0
    definitions = []
    for definition in document.definitions:
        if isinstance(definition, MARKABLE_NODES) and definition.name.value not in excluded:
            updated = add_directive_if_missing(definition, directive_name)
            if updated is not definition:
                marked += 1
            definitions.append(updated)
        else:
            definitions.append(definition)

    logger.debug(f"Marked {marked} type definitions with @{directive_name}")
    return document.with_definitions(definitions)


def _group_coordinates(coordinates: Iterable[str]) -> Dict[str, Set[Tuple[str, ...]]]:
    """type name -> set of member paths (empty tuple for the type itself)."""
    grouped: Dict[str, Set[Tuple[str, ...]]] = defaultdict(set)
    for coordinate in coordinates:
        type_name, member, argument = parse_coordinate(coordinate)
        path = tuple(part for part in (member, argument) if part is not None)
        grouped[type_name].add(path)
    return grouped


def _mark_fields(fields, paths: Set[Tuple[str, ...]], directive_name: str, matched: Set):
    updated_fields = []
    changed = False
    for field_node in fields or ():
        field_name = field_node.name.value
        new_field = field_node

        arguments = getattr(field_node, "arguments", None)
        if arguments:
            new_args = []
            args_changed = False
            for arg_node in arguments:
                path = (field_name, arg_node.name.value)
                if path in paths:
                    matched.add(path)
                    new_arg = add_directive_if_missing(arg_node, directive_name)
                    args_changed = args_changed or new_arg is not arg_node
                    new_args.append(new_arg)
                else:
                    new_args.append(arg_node)
            if args_changed:
                new_field = replace_node(new_field, arguments=tuple(new_args))

        if (field_name,) in paths:
            matched.add((field_name,))
            new_field = add_directive_if_missing(new_field, directive_name)

        changed = changed or new_field is not field_node
        updated_fields.append(new_field)
    return tuple(updated_fields), changed


def _mark_enum_values(values, paths: Set[Tuple[str, ...]], directive_name: str, matched: Set):
    updated_values = []
    changed = False
    for value_node in values or ():
        path = (value_node.name.value,)
        if path in paths:
            matched.add(path)
            new_value = add_directive_if_missing(value_node, directive_name)
            changed = changed or new_value is not value_node
            updated_values.append(new_value)
        else:
            updated_values.append(value_node)
    return tuple(updated_values), changed


def add_directive_on_coordinates(
    document: SchemaDocument,
    coordinates: Iterable[str],
    directive_name: str,
) -> SchemaDocument:
    """
    Mark the nodes addressed by schema coordinates.

    Bare type coordinates mark the type definition and its extensions;
    member coordinates mark fields, input fields and enum values wherever
    they are declared; three-part coordinates mark field arguments.
    Coordinates that match nothing are ignored.
    """
    grouped = _group_coordinates(coordinates)
    if not grouped:
        return document

    matched_by_type: Dict[str, Set[Tuple[str, ...]]] = defaultdict(set)
    definitions = []
    for definition in document.definitions:
        if not isinstance(definition, MARKABLE_NODES):
            definitions.append(definition)
            continue
        paths = grouped.get(definition.name.value)
        if not paths:
            definitions.append(definition)
            continue

        matched = matched_by_type[definition.name.value]
        new_definition = definition
        if isinstance(definition, FIELD_CONTAINERS):
            fields, changed = _mark_fields(definition.fields, paths, directive_name, matched)
            if changed:
                new_definition = replace_node(new_definition, fields=fields)
        elif isinstance(definition, ENUM_CONTAINERS):
            values, changed = _mark_enum_values(definition.values, paths, directive_name, matched)
            if changed:
                new_definition = replace_node(new_definition, values=values)

        if () in paths:
            matched.add(())
            new_definition = add_directive_if_missing(new_definition, directive_name)

        definitions.append(new_definition)

    unmatched = sum(
        len(paths - matched_by_type[type_name]) for type_name, paths in grouped.items()
    )
    if unmatched:
        logger.debug(f"{unmatched} coordinates matched no definition")
    return document.with_definitions(definitions)


def document_uses_directive(document: SchemaDocument, directive_name: str) -> bool:
    """Whether any type, extension, member or argument node carries the directive."""
    for definition in list(document.type_definitions().values()) + document.type_extensions():
        if has_directive(definition, directive_name):
            return True
        for member in list(getattr(definition, "fields", None) or ()) + list(
            getattr(definition, "values", None) or ()
        ):
            if has_directive(member, directive_name):
                return True
            for arg_node in getattr(member, "arguments", None) or ():
                if has_directive(arg_node, directive_name):
                    return True
    return False


def ensure_directive_definition(document: SchemaDocument, directive_name: str) -> SchemaDocument:
    """Append ``directive @<name> on ...`` if the document does not define it."""
    if directive_name in document.directive_definitions():
        return document
    definition = DirectiveDefinitionNode(
        description=None,
        name=NameNode(value=directive_name),
        arguments=(),
        repeatable=False,
        locations=tuple(NameNode(value=location) for location in MARKER_DIRECTIVE_LOCATIONS),
    )
    logger.debug(f"Added missing definition for @{directive_name}")
    return document.with_definitions(list(document.definitions) + [definition])


__all__ = [
    "NAMED_TYPE_DEFINITIONS",
    "add_directive_if_missing",
    "add_directive_on_types",
    "add_directive_on_coordinates",
    "document_uses_directive",
    "ensure_directive_definition",
]
