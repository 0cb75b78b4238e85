"""
Immutable wrapper around a parsed GraphQL SDL document.

Transforms never mutate the wrapped graphql-core DocumentNode; they build
replacement definition nodes and return a new SchemaDocument. Only the
definitions that changed are rebuilt, the rest are shared.
"""

from __future__ import annotations

from copy import copy
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from graphql import parse, print_ast, specified_scalar_types
from graphql.language import (
    ArgumentNode,
    DirectiveDefinitionNode,
    DirectiveNode,
    DocumentNode,
    EnumTypeDefinitionNode,
    EnumTypeExtensionNode,
    EnumValueNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ListTypeNode,
    NamedTypeNode,
    NameNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    SchemaDefinitionNode,
    SchemaExtensionNode,
    StringValueNode,
    TypeDefinitionNode,
    TypeExtensionNode,
    TypeNode,
)

from schemacontracts.constants import DEFAULT_ROOT_TYPE_NAMES

SPECIFIED_SCALAR_NAMES = frozenset(specified_scalar_types)

# Definition or extension nodes holding fields, and those holding enum values
FIELD_CONTAINERS = (
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    InputObjectTypeDefinitionNode,
    InputObjectTypeExtensionNode,
)
ENUM_CONTAINERS = (EnumTypeDefinitionNode, EnumTypeExtensionNode)


@dataclass(frozen=True)
class SchemaDocument:
    """A parsed SDL document. Treat ``node`` as read-only."""

    node: DocumentNode

    @classmethod
    def from_sdl(cls, sdl: str) -> "SchemaDocument":
        """Parse SDL text. GraphQLSyntaxError propagates on invalid input."""
        return cls(parse(sdl))

    def to_sdl(self) -> str:
        return print_ast(self.node)

    @property
    def definitions(self) -> Sequence:
        return tuple(self.node.definitions or ())

    def type_definitions(self) -> Dict[str, TypeDefinitionNode]:
        """Named type definitions keyed by name, in document order."""
        return {
            definition.name.value: definition
            for definition in self.definitions
            if isinstance(definition, TypeDefinitionNode)
        }

    def type_extensions(self) -> List[TypeExtensionNode]:
        return [
            definition for definition in self.definitions
            if isinstance(definition, TypeExtensionNode)
        ]

    def type_nodes(self) -> Dict[str, List]:
        """
        Definition and extension nodes per defined type name.

        The definition comes first, extensions follow in document order.
        Extensions of undefined types are left out.
        """
        nodes: Dict[str, List] = {name: [node] for name, node in self.type_definitions().items()}
        for extension in self.type_extensions():
            if extension.name.value in nodes:
                nodes[extension.name.value].append(extension)
        return nodes

    def directive_definitions(self) -> Dict[str, DirectiveDefinitionNode]:
        return {
            definition.name.value: definition
            for definition in self.definitions
            if isinstance(definition, DirectiveDefinitionNode)
        }

    def schema_definitions(self) -> List:
        """Schema definition and schema extension nodes."""
        return [
            definition for definition in self.definitions
            if isinstance(definition, (SchemaDefinitionNode, SchemaExtensionNode))
        ]

    def root_type_names(self) -> Dict[str, str]:
        """
        Resolve root operation types.

        An explicit schema block (or extension) wins. Without one, the
        conventional Query/Mutation/Subscription names are used when such
        types are defined.

        Returns:
            Mapping of operation ("query", ...) to type name.
        """
        explicit: Dict[str, str] = {}
        for schema_node in self.schema_definitions():
            for operation_type in schema_node.operation_types or ():
                explicit[operation_type.operation.value] = operation_type.type.name.value
        if explicit:
            return {
                operation: explicit[operation]
                for operation in DEFAULT_ROOT_TYPE_NAMES
                if operation in explicit
            }

        defined = self.type_definitions()
        return {
            operation: type_name
            for operation, type_name in DEFAULT_ROOT_TYPE_NAMES.items()
            if type_name in defined
        }

    def with_definitions(self, definitions: Iterable) -> "SchemaDocument":
        """Return a new document holding the given definitions."""
        new_node = copy(self.node)
        new_node.definitions = tuple(definitions)
        return SchemaDocument(new_node)


# =============================================================================
# NODE HELPERS
# =============================================================================

def replace_node(node, **changes):
    """Shallow copy of an AST node with some attributes replaced."""
    new_node = copy(node)
    for key, value in changes.items():
        setattr(new_node, key, value)
    return new_node


def unwrap_type(type_node: TypeNode) -> NamedTypeNode:
    """Strip list and non-null wrappers from a type reference."""
    while isinstance(type_node, (ListTypeNode, NonNullTypeNode)):
        type_node = type_node.type
    return type_node


def named_type_of(type_node: TypeNode) -> str:
    return unwrap_type(type_node).name.value


def is_specified_scalar(type_name: str) -> bool:
    return type_name in SPECIFIED_SCALAR_NAMES


def has_directive(node, directive_name: str) -> bool:
    return any(
        directive.name.value == directive_name
        for directive in (getattr(node, "directives", None) or ())
    )


def get_directives(node, directive_name: str) -> List[DirectiveNode]:
    return [
        directive
        for directive in (getattr(node, "directives", None) or ())
        if directive.name.value == directive_name
    ]


def get_argument(directive: DirectiveNode, argument_name: str) -> Optional[ArgumentNode]:
    for argument in directive.arguments or ():
        if argument.name.value == argument_name:
            return argument
    return None


def enum_argument_value(directive: DirectiveNode, argument_name: str) -> Optional[str]:
    """Value of an enum-literal argument, or None when absent or not an enum."""
    argument = get_argument(directive, argument_name)
    if argument is None or not isinstance(argument.value, EnumValueNode):
        return None
    return argument.value.value


def string_argument_value(directive: DirectiveNode, argument_name: str) -> Optional[str]:
    """Value of a string-literal argument, or None when absent or not a string."""
    argument = get_argument(directive, argument_name)
    if argument is None or not isinstance(argument.value, StringValueNode):
        return None
    return argument.value.value


def make_directive(directive_name: str) -> DirectiveNode:
    """Argument-less directive usage node."""
    return DirectiveNode(name=NameNode(value=directive_name), arguments=())
