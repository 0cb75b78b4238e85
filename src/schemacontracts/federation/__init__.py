"""
Federation supergraph analysis.

Provides subgraph ownership extraction from join-spec directives and
per-coordinate tag extraction.
"""

from .ownership import (
    OwnershipMap,
    build_graph_lookup,
    extract_ownership,
    extract_ownership_from_sdl,
    subgraphs_of,
    coordinates_owned_by,
    ownership_to_dataframe,
)
from .tags import (
    CoordinateTags,
    resolve_tag_directive_name,
    extract_coordinate_tags,
    list_tags,
)

__all__ = [
    "OwnershipMap",
    "build_graph_lookup",
    "extract_ownership",
    "extract_ownership_from_sdl",
    "subgraphs_of",
    "coordinates_owned_by",
    "ownership_to_dataframe",
    "CoordinateTags",
    "resolve_tag_directive_name",
    "extract_coordinate_tags",
    "list_tags",
]
