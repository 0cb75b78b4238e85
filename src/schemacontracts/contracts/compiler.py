"""
Contract schema compilation.

Derives the public contract schema of a target from its current schema and
a tag rule:

1. Filter coordinates by tag: fields, input fields, arguments and enum
   values missing an include tag or carrying an exclude tag are hidden;
   types on an exclude tag, scalars and unions also on a missing include
   tag, and any type whose members are all hidden. Members declared in
   type extensions count as members of the type.
2. Mark every hidden coordinate with the marker directive.
3. Recompute reachability treating marked elements as removed, and mark
   every type no root can reach any more.
4. Repeat step 3 until nothing changes. Marking an unreachable type cannot
   make another type reachable, so this settles after one extra pass.

Protected types (join/link scaffolding and any type used by a directive
definition) are never filtered or marked. Root operation types are
filtered like any other type: a root whose fields are all hidden is
marked, and everything behind it becomes unreachable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional, Set, Tuple

import pandas as pd
from graphql.language import ScalarTypeDefinitionNode, UnionTypeDefinitionNode

from schemacontracts.config import ContractsConfig
from schemacontracts.contracts.rules import ContractRule, sorted_tags, validate_rule
from schemacontracts.core.coordinates import (
    coordinate_of_arg,
    coordinate_of_enum_value,
    coordinate_of_field,
    coordinate_of_type,
    parse_coordinate,
    type_name_of,
)
from schemacontracts.core.document import (
    ENUM_CONTAINERS,
    FIELD_CONTAINERS,
    SchemaDocument,
    has_directive,
    named_type_of,
)
from schemacontracts.core.errors import CascadeDidNotConverge, ContractValidationResult
from schemacontracts.federation.ownership import OwnershipMap, extract_ownership
from schemacontracts.federation.tags import (
    CoordinateTags,
    extract_coordinate_tags,
    resolve_tag_directive_name,
)
from schemacontracts.graph.reachability import (
    build_type_graph,
    get_reachable_types,
    walk_reachable,
)
from schemacontracts.schemas.contract_rows import (
    REASON_ALL_MEMBERS_EXCLUDED,
    REASON_UNREACHABLE,
    ExcludedCoordinateRow,
    ReportVersion,
)
from schemacontracts.transform.rewriter import (
    add_directive_on_coordinates,
    add_directive_on_types,
    document_uses_directive,
    ensure_directive_definition,
)
from schemacontracts.utils.text import stable_hash

logger = logging.getLogger(__name__)

EMPTY_NAMES: FrozenSet[str] = frozenset()

MEMBERLESS_TYPES = (ScalarTypeDefinitionNode, UnionTypeDefinitionNode)


@dataclass
class ContractCompilation:
    """A compiled contract schema plus what was hidden and why."""

    contract_name: Optional[str]
    document: SchemaDocument
    sdl: str
    rule: ContractRule
    exclusions: Dict[str, str] = field(default_factory=dict)
    cascaded_types: Tuple[str, ...] = ()
    cascade_iterations: int = 0
    excluded_by_subgraph: Dict[str, int] = field(default_factory=dict)
    coordinate_tags: Dict[str, FrozenSet[str]] = field(default_factory=dict)

    @property
    def include_tags(self) -> Optional[List[str]]:
        return sorted_tags(self.rule.include_tags)

    @property
    def exclude_tags(self) -> Optional[List[str]]:
        return sorted_tags(self.rule.exclude_tags)

    @property
    def excluded_coordinates(self) -> List[str]:
        return sorted(self.exclusions)

    @property
    def marked_types(self) -> List[str]:
        return sorted(coordinate for coordinate in self.exclusions if "." not in coordinate)

    @property
    def sdl_hash(self) -> str:
        return stable_hash([self.sdl])

    def to_dict(self) -> Dict[str, object]:
        return {
            "report_version": ReportVersion,
            "contract_name": self.contract_name,
            "include_tags": self.include_tags,
            "exclude_tags": self.exclude_tags,
            "excluded_coordinates": self.excluded_coordinates,
            "cascaded_types": list(self.cascaded_types),
            "cascade_iterations": self.cascade_iterations,
            "excluded_by_subgraph": dict(sorted(self.excluded_by_subgraph.items())),
            "sdl_hash": self.sdl_hash,
        }


@dataclass
class ContractCompilationResult:
    """Either a compilation or the validation errors of the rule."""

    compilation: Optional[ContractCompilation] = None
    validation: ContractValidationResult = field(default_factory=ContractValidationResult)

    @property
    def ok(self) -> bool:
        return self.compilation is not None and self.validation.passed


# =============================================================================
# PROTECTION
# =============================================================================

def directive_argument_types(document: SchemaDocument) -> Set[str]:
    """Types used by directive definition arguments, closed over input fields."""
    definitions = document.type_definitions()
    seeds = {
        named_type_of(arg_node.type)
        for directive in document.directive_definitions().values()
        for arg_node in directive.arguments or ()
    }
    seeds = [name for name in sorted(seeds) if name in definitions]
    if not seeds:
        return set()
    return walk_reachable(build_type_graph(document), seeds)


def protected_type_names(document: SchemaDocument, config: ContractsConfig) -> Set[str]:
    """Types that no pass may mark."""
    return set(config.protected_type_names) | directive_argument_types(document)


# =============================================================================
# TAG FILTERING
# =============================================================================

def owners_of(coordinate: str, ownership: OwnershipMap) -> FrozenSet[str]:
    """Owners of a coordinate; arguments inherit their field's owners."""
    if coordinate in ownership:
        return ownership[coordinate]
    type_name, member, argument = parse_coordinate(coordinate)
    if argument is None:
        return EMPTY_NAMES
    return ownership.get(coordinate_of_field(type_name, member), EMPTY_NAMES)


def _is_owned(coordinate: str, ownership: Optional[OwnershipMap]) -> bool:
    return ownership is None or bool(owners_of(coordinate, ownership))


def select_excluded_coordinates(
    document: SchemaDocument,
    rule: ContractRule,
    coordinate_tags: Mapping[str, FrozenSet[str]],
    skip_types: Set[str],
    ownership: Optional[OwnershipMap] = None,
) -> Dict[str, str]:
    """
    Coordinates hidden by the tag rule, mapped to the reason.

    Members declared in type extensions are judged with the members of the
    definition, so a type stays visible when any of its members does.

    Args:
        document: Target schema.
        rule: Validated contract rule.
        coordinate_tags: Tags per coordinate.
        skip_types: Types not filtered at all (protected scaffolding).
        ownership: When given, only owned coordinates are filtered.

    Returns:
        Ordered mapping coordinate -> reason.
    """
    exclusions: Dict[str, str] = {}

    def tags_of(coordinate: str) -> FrozenSet[str]:
        return coordinate_tags.get(coordinate, EMPTY_NAMES)

    definitions = document.type_definitions()
    for type_name, nodes in document.type_nodes().items():
        if type_name in skip_types:
            continue
        # coordinate -> reason, first declaration wins
        member_reasons: Dict[str, Optional[str]] = {}

        for node in nodes:
            if isinstance(node, FIELD_CONTAINERS):
                for field_node in node.fields or ():
                    field_name = field_node.name.value
                    coordinate = coordinate_of_field(type_name, field_name)
                    if coordinate in member_reasons or not _is_owned(coordinate, ownership):
                        continue
                    member_reasons[coordinate] = rule.exclusion_reason(tags_of(coordinate))
                    for arg_node in getattr(field_node, "arguments", None) or ():
                        arg_coordinate = coordinate_of_arg(type_name, field_name, arg_node.name.value)
                        reason = rule.exclusion_reason(tags_of(arg_coordinate))
                        if reason:
                            exclusions[arg_coordinate] = reason

            elif isinstance(node, ENUM_CONTAINERS):
                for value_node in node.values or ():
                    coordinate = coordinate_of_enum_value(type_name, value_node.name.value)
                    if coordinate in member_reasons or not _is_owned(coordinate, ownership):
                        continue
                    member_reasons[coordinate] = rule.exclusion_reason(tags_of(coordinate))

        for coordinate, reason in member_reasons.items():
            if reason:
                exclusions[coordinate] = reason

        type_coordinate = coordinate_of_type(type_name)
        if not _is_owned(type_coordinate, ownership):
            continue
        type_reason = rule.exclusion_reason(
            tags_of(type_coordinate),
            apply_include=isinstance(definitions[type_name], MEMBERLESS_TYPES),
        )
        if type_reason is None and member_reasons and all(member_reasons.values()):
            type_reason = REASON_ALL_MEMBERS_EXCLUDED
        if type_reason:
            exclusions[type_coordinate] = type_reason

    return exclusions


# =============================================================================
# CASCADE
# =============================================================================

def cascade_unreachable_types(
    document: SchemaDocument,
    marker: str,
    keep_types: Set[str],
    max_iterations: int,
) -> Tuple[SchemaDocument, List[str], int]:
    """
    Mark types that became unreachable until a fixed point.

    Args:
        document: Document after tag marking.
        marker: Marker directive name; marked elements count as removed.
        keep_types: Types never marked (protected scaffolding).
        max_iterations: Marking passes allowed before giving up.

    Returns:
        (document, newly marked type names in order, passes performed)

    Raises:
        CascadeDidNotConverge: If more than ``max_iterations`` passes
            would be needed.
    """
    cascaded: List[str] = []
    iterations = 0
    current = document
    while True:
        reachable = get_reachable_types(current, ignore_directive=marker)
        keep = reachable | keep_types
        pending = [
            name for name, definition in current.type_definitions().items()
            if name not in keep and not has_directive(definition, marker)
        ]
        if not pending:
            break
        iterations += 1
        if iterations > max_iterations:
            raise CascadeDidNotConverge(max_iterations, pending)
        logger.debug(f"Cascade pass {iterations}: marking {len(pending)} unreachable types")
        current = add_directive_on_types(current, keep, marker)
        cascaded.extend(pending)
    return current, cascaded, iterations


# =============================================================================
# ORCHESTRATOR
# =============================================================================

def compile_contract(
    document: SchemaDocument,
    rule: ContractRule,
    config: Optional[ContractsConfig] = None,
    ownership: Optional[OwnershipMap] = None,
    coordinate_tags: Optional[CoordinateTags] = None,
    contract_name: Optional[str] = None,
) -> ContractCompilationResult:
    """
    Compile the contract schema for one rule.

    Args:
        document: Target schema (supergraph or single SDL).
        rule: Contract rule; validated before any transform.
        config: Engine configuration, defaults to ContractsConfig().
        ownership: Supergraph ownership map (federation targets only).
        coordinate_tags: Tags per coordinate. Extracted from the
            document's tag directives when None.
        contract_name: Label carried into the compilation report.

    Returns:
        ContractCompilationResult holding either the compilation or the
        validation errors.

    Raises:
        UnknownTypeReference: If the document references undefined types.
        CascadeDidNotConverge: If the unreachable-type cascade does not settle.
    """
    validation = validate_rule(rule)
    if not validation.passed:
        logger.debug(
            f"Contract {contract_name!r} rejected: {[code.value for code in validation.codes()]}"
        )
        return ContractCompilationResult(validation=validation)

    config = config or ContractsConfig()
    marker = config.marker_directive_name

    if coordinate_tags is None:
        tag_directive = resolve_tag_directive_name(document, default=config.tag_directive_name)
        coordinate_tags = extract_coordinate_tags(document, tag_directive)

    protected = protected_type_names(document, config)

    exclusions = select_excluded_coordinates(
        document,
        rule,
        coordinate_tags,
        skip_types=protected,
        ownership=ownership,
    )
    current = add_directive_on_coordinates(document, exclusions.keys(), marker)
    logger.debug(f"Tag rule hid {len(exclusions)} coordinates")

    cascaded: List[str] = []
    iterations = 0
    if rule.remove_unreachable_types:
        current, cascaded, iterations = cascade_unreachable_types(
            current,
            marker,
            keep_types=protected,
            max_iterations=config.max_cascade_iterations,
        )
        for type_name in cascaded:
            exclusions.setdefault(coordinate_of_type(type_name), REASON_UNREACHABLE)

    if config.ensure_marker_definition and document_uses_directive(current, marker):
        current = ensure_directive_definition(current, marker)

    excluded_by_subgraph: Dict[str, int] = {}
    if ownership is not None:
        for coordinate in exclusions:
            owners = owners_of(coordinate, ownership)
            for subgraph in owners:
                excluded_by_subgraph[subgraph] = excluded_by_subgraph.get(subgraph, 0) + 1

    compilation = ContractCompilation(
        contract_name=contract_name,
        document=current,
        sdl=current.to_sdl(),
        rule=rule,
        exclusions=exclusions,
        cascaded_types=tuple(cascaded),
        cascade_iterations=iterations,
        excluded_by_subgraph=excluded_by_subgraph,
        coordinate_tags={
            coordinate: coordinate_tags[coordinate]
            for coordinate in exclusions
            if coordinate in coordinate_tags
        },
    )
    logger.info(
        f"Compiled contract {contract_name or '<unnamed>'}: "
        f"{len(exclusions)} coordinates hidden, {len(cascaded)} unreachable types cascaded "
        f"in {iterations} passes"
    )
    return ContractCompilationResult(compilation=compilation, validation=validation)


def compile_contract_sdl(
    sdl: str,
    rule: ContractRule,
    config: Optional[ContractsConfig] = None,
    with_ownership: bool = False,
) -> ContractCompilationResult:
    """Parse SDL, optionally extract supergraph ownership, and compile."""
    document = SchemaDocument.from_sdl(sdl)
    ownership = extract_ownership(document) if with_ownership else None
    return compile_contract(document, rule, config=config, ownership=ownership)


def excluded_coordinates_to_dataframe(
    compilation: ContractCompilation,
    ownership: Optional[OwnershipMap] = None,
) -> pd.DataFrame:
    """One row per hidden coordinate, sorted by coordinate."""
    rows = []
    for coordinate in compilation.excluded_coordinates:
        owners = ()
        if ownership is not None:
            owners = owners_of(coordinate, ownership)
        rows.append(ExcludedCoordinateRow(
            contract_name=compilation.contract_name,
            coordinate=coordinate,
            type_name=type_name_of(coordinate),
            reason=compilation.exclusions[coordinate],
            tags=",".join(sorted(compilation.coordinate_tags.get(coordinate, ()))),
            subgraphs=",".join(sorted(owners)),
        ).to_dict())
    if not rows:
        return pd.DataFrame(columns=list(ExcludedCoordinateRow.__annotations__.keys()))
    return pd.DataFrame(rows)


__all__ = [
    "ContractCompilation",
    "ContractCompilationResult",
    "directive_argument_types",
    "protected_type_names",
    "owners_of",
    "select_excluded_coordinates",
    "cascade_unreachable_types",
    "compile_contract",
    "compile_contract_sdl",
    "excluded_coordinates_to_dataframe",
]
