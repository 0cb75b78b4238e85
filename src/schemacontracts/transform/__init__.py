"""AST transforms producing new schema documents."""

from .rewriter import (
    add_directive_if_missing,
    add_directive_on_types,
    add_directive_on_coordinates,
    document_uses_directive,
    ensure_directive_definition,
)

__all__ = [
    "add_directive_if_missing",
    "add_directive_on_types",
    "add_directive_on_coordinates",
    "document_uses_directive",
    "ensure_directive_definition",
]
