"""Type graph construction and reachability analysis."""

from .reachability import (
    # Graph construction
    build_type_graph,
    resolve_root_types,
    # Traversal
    walk_reachable,
    get_reachable_types,
    get_unreachable_types,
    # Diagnostics
    reference_paths,
)

__all__ = [
    "build_type_graph",
    "resolve_root_types",
    "walk_reachable",
    "get_reachable_types",
    "get_unreachable_types",
    "reference_paths",
]
