"""
Text utilities for contract compilation.

This module provides:
- Stable hashing for deterministic output fingerprints
- Tag list normalization
"""

import hashlib
from typing import FrozenSet, Iterable, List, Optional


def stable_hash(parts: List[str], length: int = 16) -> str:
    """
    Generate a stable hash from a list of string parts.

    The same inputs always produce the same hash, so compiled contract
    schemas can be compared across runs by fingerprint.

    Args:
        parts: List of strings to hash together.
        length: Number of hex characters to return (max 64 for SHA256).

    Returns:
        Hex string of specified length.

    Example:
        >>> len(stable_hash(["type Query { a: String }"], length=8))
        8
    """
    combined = "|".join(parts)
    full_hash = hashlib.sha256(combined.encode("utf-8")).hexdigest()
    return full_hash[:length]


def normalize_tags(tags: Optional[Iterable[str]]) -> Optional[FrozenSet[str]]:
    """
    Normalize a tag collection.

    Drops empty entries and keeps every other tag verbatim, since tags are
    compared with document tags exactly. Returns None for None so "not
    provided" stays distinguishable from "provided but empty".

    Example:
        >>> sorted(normalize_tags([" public", "", "beta"]))
        [' public', 'beta']
    """
    if tags is None:
        return None
    if isinstance(tags, str):
        tags = [tags]
    return frozenset(tag for tag in tags if tag)
