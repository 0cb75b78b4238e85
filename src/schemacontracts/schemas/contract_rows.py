"""
Tabular row contracts for contract compilation reports.

These dataclasses describe the canonical row layout of the DataFrames the
engine emits. Keeping them centralized lets the extractor, the compiler and
the CLI share one definition of each table.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Dict, Optional

ReportVersion = "contracts_v1"


@dataclass
class OwnershipRow:
    """One subgraph contributing one schema coordinate."""

    coordinate: str
    type_name: str
    member_name: Optional[str]
    subgraph: str

    def to_dict(self) -> Dict[str, object]:
        """Convert to serialisable dict for DataFrame construction."""
        return asdict(self)


@dataclass
class ExcludedCoordinateRow:
    """A coordinate hidden from a contract schema, with the reason."""

    contract_name: Optional[str]
    coordinate: str
    type_name: str
    reason: str
    tags: str = ""
    subgraphs: str = ""

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# Exclusion reasons
REASON_INCLUDE_MISS = "missing_include_tag"
REASON_EXCLUDE_HIT = "excluded_tag"
REASON_ALL_MEMBERS_EXCLUDED = "all_members_excluded"
REASON_UNREACHABLE = "unreachable"


__all__ = [
    "ReportVersion",
    "OwnershipRow",
    "ExcludedCoordinateRow",
    "REASON_INCLUDE_MISS",
    "REASON_EXCLUDE_HIT",
    "REASON_ALL_MEMBERS_EXCLUDED",
    "REASON_UNREACHABLE",
]
