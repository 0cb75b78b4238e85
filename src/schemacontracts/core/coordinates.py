"""
Schema coordinates: canonical string keys for schema elements.

Grammar:
    coordinate := TypeName
                | TypeName.fieldName
                | TypeName.fieldName.argName
                | EnumName.VALUE

Coordinates are derived from names only, so re-parsing semantically
identical SDL always yields identical keys. Plain strings sort them.
"""

from __future__ import annotations

from typing import Iterator, NewType, Optional, Tuple

from graphql.language import (
    EnumTypeDefinitionNode,
    InputObjectTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    ObjectTypeDefinitionNode,
)

SchemaCoordinate = NewType("SchemaCoordinate", str)

COORDINATE_SEPARATOR = "."


def coordinate_of_type(type_name: str) -> SchemaCoordinate:
    """Coordinate of a named type, e.g. ``Query``."""
    return SchemaCoordinate(type_name)


def coordinate_of_field(type_name: str, field_name: str) -> SchemaCoordinate:
    """Coordinate of a field or input field, e.g. ``Query.product``."""
    return SchemaCoordinate(f"{type_name}.{field_name}")


def coordinate_of_arg(type_name: str, field_name: str, arg_name: str) -> SchemaCoordinate:
    """Coordinate of a field argument, e.g. ``Query.product.id``."""
    return SchemaCoordinate(f"{type_name}.{field_name}.{arg_name}")


def coordinate_of_enum_value(enum_name: str, value_name: str) -> SchemaCoordinate:
    """Coordinate of an enum value, e.g. ``ShippingClass.EXPRESS``."""
    return SchemaCoordinate(f"{enum_name}.{value_name}")


def parse_coordinate(coordinate: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Split a coordinate into (type, member, argument).

    Example:
        >>> parse_coordinate("Query.product.id")
        ('Query', 'product', 'id')
        >>> parse_coordinate("Query")
        ('Query', None, None)
    """
    parts = coordinate.split(COORDINATE_SEPARATOR)
    if not parts[0] or len(parts) > 3 or any(not part for part in parts):
        raise ValueError(f"Invalid schema coordinate: {coordinate!r}")
    type_name = parts[0]
    member = parts[1] if len(parts) > 1 else None
    argument = parts[2] if len(parts) > 2 else None
    return type_name, member, argument


def type_name_of(coordinate: str) -> str:
    """Type portion of any coordinate."""
    return coordinate.split(COORDINATE_SEPARATOR, 1)[0]


def is_type_coordinate(coordinate: str) -> bool:
    return COORDINATE_SEPARATOR not in coordinate


def iter_definition_coordinates(definition) -> Iterator[SchemaCoordinate]:
    """Yield the coordinates contributed by one type definition node, in order."""
    type_name = definition.name.value
    yield coordinate_of_type(type_name)

    if isinstance(definition, (ObjectTypeDefinitionNode, InterfaceTypeDefinitionNode)):
        for field_node in definition.fields or ():
            yield coordinate_of_field(type_name, field_node.name.value)
            for arg_node in field_node.arguments or ():
                yield coordinate_of_arg(type_name, field_node.name.value, arg_node.name.value)
    elif isinstance(definition, InputObjectTypeDefinitionNode):
        for field_node in definition.fields or ():
            yield coordinate_of_field(type_name, field_node.name.value)
    elif isinstance(definition, EnumTypeDefinitionNode):
        for value_node in definition.values or ():
            yield coordinate_of_enum_value(type_name, value_node.name.value)


def iter_document_coordinates(document) -> Iterator[SchemaCoordinate]:
    """Yield every coordinate of a SchemaDocument in document order."""
    for definition in document.type_definitions().values():
        yield from iter_definition_coordinates(definition)


__all__ = [
    "SchemaCoordinate",
    "coordinate_of_type",
    "coordinate_of_field",
    "coordinate_of_arg",
    "coordinate_of_enum_value",
    "parse_coordinate",
    "type_name_of",
    "is_type_coordinate",
    "iter_definition_coordinates",
    "iter_document_coordinates",
]
