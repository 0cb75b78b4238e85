"""
Tag extraction.

Collects ``@tag(name: "...")`` occurrences per schema coordinate. Supergraphs
may import the tag spec under another name through
``@link(url: "https://specs.apollo.dev/tag/v0.3", as: "label")`` on the
schema definition; that name is honoured.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Optional, Set

from schemacontracts.constants import (
    DIRECTIVE_LINK,
    DIRECTIVE_TAG,
    TAG_NAME_ARGUMENT,
    TAG_SPEC_URL_PREFIX,
)
from schemacontracts.core.coordinates import (
    coordinate_of_arg,
    coordinate_of_enum_value,
    coordinate_of_field,
    coordinate_of_type,
)
from schemacontracts.core.document import (
    ENUM_CONTAINERS,
    FIELD_CONTAINERS,
    SchemaDocument,
    get_directives,
    string_argument_value,
)

logger = logging.getLogger(__name__)

# coordinate -> tag names
CoordinateTags = Dict[str, FrozenSet[str]]


def resolve_tag_directive_name(document: SchemaDocument, default: str = DIRECTIVE_TAG) -> str:
    """
    Name under which the tag directive is used in a document.

    Returns the ``as:`` alias of a tag-spec ``@link`` on the schema
    definition, ``"tag"`` for a plain tag-spec link, and ``default`` when no
    such link exists (plain SDL, Federation 1).
    """
    for schema_node in document.schema_definitions():
        for directive in get_directives(schema_node, DIRECTIVE_LINK):
            url = string_argument_value(directive, "url")
            if url is None or not url.startswith(TAG_SPEC_URL_PREFIX):
                continue
            alias = string_argument_value(directive, "as")
            return alias if alias else DIRECTIVE_TAG
    return default


def tags_on_node(node, tag_directive_name: str) -> Set[str]:
    tags: Set[str] = set()
    for directive in get_directives(node, tag_directive_name):
        tag = string_argument_value(directive, TAG_NAME_ARGUMENT)
        if tag:
            tags.add(tag)
    return tags


def extract_coordinate_tags(
    document: SchemaDocument,
    tag_directive_name: Optional[str] = None,
) -> CoordinateTags:
    """
    Tags applied to each coordinate of a document.

    Type extensions count as part of their type: tags on an ``extend``
    node apply to the type, and members declared there are collected like
    members of the definition.

    Args:
        document: Any schema document.
        tag_directive_name: Override the directive name; resolved from the
            document when None.

    Returns:
        Mapping for coordinates carrying at least one tag, in document order.
    """
    directive_name = tag_directive_name or resolve_tag_directive_name(document)
    result: Dict[str, FrozenSet[str]] = {}

    def record(coordinate: str, node) -> None:
        tags = tags_on_node(node, directive_name)
        if tags:
            result[coordinate] = result.get(coordinate, frozenset()) | tags

    for type_name, nodes in document.type_nodes().items():
        for node in nodes:
            record(coordinate_of_type(type_name), node)

            if isinstance(node, FIELD_CONTAINERS):
                for field_node in node.fields or ():
                    field_name = field_node.name.value
                    record(coordinate_of_field(type_name, field_name), field_node)
                    for arg_node in getattr(field_node, "arguments", None) or ():
                        record(coordinate_of_arg(type_name, field_name, arg_node.name.value), arg_node)
            elif isinstance(node, ENUM_CONTAINERS):
                for value_node in node.values or ():
                    record(coordinate_of_enum_value(type_name, value_node.name.value), value_node)

    logger.debug(f"Found @{directive_name} on {len(result)} coordinates")
    return result


def list_tags(document: SchemaDocument, tag_directive_name: Optional[str] = None) -> List[str]:
    """All distinct tag names used in a document, sorted."""
    tags: Set[str] = set()
    for coordinate_tags in extract_coordinate_tags(document, tag_directive_name).values():
        tags |= coordinate_tags
    return sorted(tags)


__all__ = [
    "CoordinateTags",
    "resolve_tag_directive_name",
    "tags_on_node",
    "extract_coordinate_tags",
    "list_tags",
]
