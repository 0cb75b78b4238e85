"""
Error taxonomy for contract compilation.

Structural and internal failures are exceptions. User-correctable input
problems are plain records collected into a ContractValidationResult and
returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class SchemaContractsError(Exception):
    """Base class for engine failures."""
    pass


class MalformedSupergraph(SchemaContractsError):
    """Raised when join-spec graph symbols cannot be resolved to subgraph names."""

    def __init__(self, message: str, graph_symbol: Optional[str] = None):
        super().__init__(message)
        self.graph_symbol = graph_symbol


class UnknownTypeReference(SchemaContractsError):
    """Raised when a definition references a type that is neither defined nor built in."""

    def __init__(self, type_name: str, referenced_from: str):
        super().__init__(
            f"Unknown type '{type_name}' referenced from '{referenced_from}'"
        )
        self.type_name = type_name
        self.referenced_from = referenced_from


class CascadeDidNotConverge(SchemaContractsError):
    """Raised when unreachable-type marking fails to reach a fixed point."""

    def __init__(self, iterations: int, pending: List[str]):
        super().__init__(
            f"Unreachable type cascade did not converge after {iterations} iterations "
            f"(still pending: {pending[:5]})"
        )
        self.iterations = iterations
        self.pending = pending


# =============================================================================
# INPUT VALIDATION
# =============================================================================

class ContractErrorCode(Enum):
    """User-correctable contract input errors."""
    NO_TAGS_PROVIDED = "NoTagsProvided"
    TAGS_INTERSECT = "TagsIntersect"
    INVALID_IDENTIFIER = "InvalidIdentifier"
    DUPLICATE_IDENTIFIER = "DuplicateIdentifier"
    INVALID_TARGET_ID = "InvalidTargetId"


# Field names as exposed to API callers
FIELD_TARGET_ID = "targetId"
FIELD_CONTRACT_NAME = "contractName"
FIELD_INCLUDE_TAGS = "includeTags"
FIELD_EXCLUDE_TAGS = "excludeTags"

DETAIL_FIELDS = (FIELD_TARGET_ID, FIELD_CONTRACT_NAME, FIELD_INCLUDE_TAGS, FIELD_EXCLUDE_TAGS)


@dataclass(frozen=True)
class ContractValidationError:
    """A single field-attributed validation failure."""

    code: ContractErrorCode
    field: str
    message: str


@dataclass
class ContractValidationResult:
    """Outcome of validating a contract rule or creation request."""

    errors: List[ContractValidationError] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    def add(self, code: ContractErrorCode, field_name: str, message: str) -> None:
        self.errors.append(ContractValidationError(code, field_name, message))

    def codes(self) -> List[ContractErrorCode]:
        return [error.code for error in self.errors]

    def details(self) -> Dict[str, Optional[str]]:
        """First message per field; untouched fields map to None."""
        details: Dict[str, Optional[str]] = {name: None for name in DETAIL_FIELDS}
        for error in self.errors:
            if details.get(error.field) is None:
                details[error.field] = error.message
        return details


__all__ = [
    "SchemaContractsError",
    "MalformedSupergraph",
    "UnknownTypeReference",
    "CascadeDidNotConverge",
    "ContractErrorCode",
    "ContractValidationError",
    "ContractValidationResult",
    "FIELD_TARGET_ID",
    "FIELD_CONTRACT_NAME",
    "FIELD_INCLUDE_TAGS",
    "FIELD_EXCLUDE_TAGS",
]
