"""
Shared constants across schemacontracts modules.

This module is the single source of truth for:
- Well-known directive names (marker, tag, federation join spec)
- Federation scaffolding type names
- Root operation type defaults
- Contract identifier bounds
"""

# =============================================================================
# DIRECTIVE NAMES
# =============================================================================
# Directives read or written while deriving a contract schema

DIRECTIVE_INACCESSIBLE = "inaccessible"
DIRECTIVE_TAG = "tag"
DIRECTIVE_LINK = "link"

DIRECTIVE_JOIN_TYPE = "join__type"
DIRECTIVE_JOIN_FIELD = "join__field"
DIRECTIVE_JOIN_ENUM_VALUE = "join__enumValue"
DIRECTIVE_JOIN_GRAPH = "join__graph"

JOIN_GRAPH_ARGUMENT = "graph"
JOIN_GRAPH_NAME_ARGUMENT = "name"
TAG_NAME_ARGUMENT = "name"


# =============================================================================
# FEDERATION SCAFFOLDING
# =============================================================================

JOIN_GRAPH_ENUM = "join__Graph"
JOIN_FIELD_SET_SCALAR = "join__FieldSet"
LINK_IMPORT_SCALAR = "link__Import"
LINK_PURPOSE_ENUM = "link__Purpose"

# Types generated by composition that must never be marked
FEDERATION_SCAFFOLDING_TYPES = frozenset({
    JOIN_GRAPH_ENUM,
    JOIN_FIELD_SET_SCALAR,
    LINK_IMPORT_SCALAR,
    LINK_PURPOSE_ENUM,
})

TAG_SPEC_URL_PREFIX = "https://specs.apollo.dev/tag/"


# =============================================================================
# ROOT OPERATION TYPES
# =============================================================================

OPERATION_QUERY = "query"
OPERATION_MUTATION = "mutation"
OPERATION_SUBSCRIPTION = "subscription"

# Operation -> conventional type name, in resolution order
DEFAULT_ROOT_TYPE_NAMES = {
    OPERATION_QUERY: "Query",
    OPERATION_MUTATION: "Mutation",
    OPERATION_SUBSCRIPTION: "Subscription",
}


# =============================================================================
# CONTRACT LIMITS
# =============================================================================

CONTRACT_NAME_MIN_LENGTH = 2
CONTRACT_NAME_MAX_LENGTH = 64

DEFAULT_MAX_CASCADE_ITERATIONS = 2

# Locations used when a marker directive definition has to be added
MARKER_DIRECTIVE_LOCATIONS = (
    "FIELD_DEFINITION",
    "OBJECT",
    "INTERFACE",
    "UNION",
    "ARGUMENT_DEFINITION",
    "SCALAR",
    "ENUM",
    "ENUM_VALUE",
    "INPUT_OBJECT",
    "INPUT_FIELD_DEFINITION",
)
