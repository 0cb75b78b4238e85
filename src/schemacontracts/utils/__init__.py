"""
Utility modules for schemacontracts.

Submodules:
    text: Stable hashing and tag normalization
"""

from schemacontracts.utils.text import stable_hash, normalize_tags

__all__ = [
    "stable_hash",
    "normalize_tags",
]
