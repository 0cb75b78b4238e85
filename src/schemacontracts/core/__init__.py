"""Core value types: coordinates, the document wrapper, and the error taxonomy."""

from .coordinates import (
    SchemaCoordinate,
    coordinate_of_type,
    coordinate_of_field,
    coordinate_of_arg,
    coordinate_of_enum_value,
    parse_coordinate,
    type_name_of,
    is_type_coordinate,
    iter_document_coordinates,
)
from .document import (
    SchemaDocument,
    SPECIFIED_SCALAR_NAMES,
    is_specified_scalar,
    named_type_of,
)
from .errors import (
    SchemaContractsError,
    MalformedSupergraph,
    UnknownTypeReference,
    CascadeDidNotConverge,
    ContractErrorCode,
    ContractValidationError,
    ContractValidationResult,
)

__all__ = [
    # Coordinates
    "SchemaCoordinate",
    "coordinate_of_type",
    "coordinate_of_field",
    "coordinate_of_arg",
    "coordinate_of_enum_value",
    "parse_coordinate",
    "type_name_of",
    "is_type_coordinate",
    "iter_document_coordinates",
    # Documents
    "SchemaDocument",
    "SPECIFIED_SCALAR_NAMES",
    "is_specified_scalar",
    "named_type_of",
    # Errors
    "SchemaContractsError",
    "MalformedSupergraph",
    "UnknownTypeReference",
    "CascadeDidNotConverge",
    "ContractErrorCode",
    "ContractValidationError",
    "ContractValidationResult",
]
