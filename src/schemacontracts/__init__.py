"""
Schema contracts engine.

Derives tag-filtered public contract schemas from GraphQL (supergraph)
schemas and extracts per-coordinate subgraph ownership from federation
join-spec annotations.
"""

__version__ = "0.1.0"
