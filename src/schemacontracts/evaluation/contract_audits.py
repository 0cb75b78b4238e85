"""
Contract compilation deterministic audits.

These gates re-check a finished compilation against the invariants the
compiler promises: marking is a fixed point, the public surface holds no
unreachable type, and protected scaffolding is never marked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from schemacontracts.config import ContractsConfig
from schemacontracts.contracts.compiler import ContractCompilation, protected_type_names
from schemacontracts.core.document import SchemaDocument, has_directive
from schemacontracts.graph.reachability import get_reachable_types
from schemacontracts.transform.rewriter import add_directive_on_coordinates, add_directive_on_types


@dataclass
class AuditResult:
    gate_id: str
    passed: bool
    total: int
    succeeded: int
    details: str = ""

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 1.0


def marker_idempotence_gate(
    compilation: ContractCompilation,
    config: Optional[ContractsConfig] = None,
) -> AuditResult:
    """Re-applying the recorded marks must not change the output SDL."""
    config = config or ContractsConfig()
    marker = config.marker_directive_name
    document = compilation.document
    remarked = add_directive_on_coordinates(document, compilation.excluded_coordinates, marker)
    unmarked_types = [
        name for name, definition in document.type_definitions().items()
        if not has_directive(definition, marker)
    ]
    remarked = add_directive_on_types(remarked, unmarked_types, marker)
    passed = remarked.to_sdl() == compilation.sdl
    return AuditResult(
        gate_id="contract_marker_idempotence",
        passed=passed,
        total=1,
        succeeded=1 if passed else 0,
        details="" if passed else "re-marking changed the contract SDL",
    )


def public_surface_reachability_gate(
    compilation: ContractCompilation,
    config: Optional[ContractsConfig] = None,
) -> AuditResult:
    """Every unmarked, unprotected type must be reachable through unmarked paths."""
    config = config or ContractsConfig()
    marker = config.marker_directive_name
    document = compilation.document
    if not compilation.rule.remove_unreachable_types:
        return AuditResult(
            gate_id="contract_public_surface_reachability",
            passed=True,
            total=0,
            succeeded=0,
            details="SKIP: unreachable types are kept by this rule",
        )
    protected = protected_type_names(document, config)
    reachable = get_reachable_types(document, ignore_directive=marker)
    public = [
        name for name, definition in document.type_definitions().items()
        if not has_directive(definition, marker) and name not in protected
    ]
    dangling = [name for name in public if name not in reachable]
    details = f"reachable_public={len(public) - len(dangling)}/{len(public)}"
    if dangling:
        details += f"; dangling={dangling[:5]}"
    return AuditResult(
        gate_id="contract_public_surface_reachability",
        passed=not dangling,
        total=len(public),
        succeeded=len(public) - len(dangling),
        details=details,
    )


def protected_types_untouched_gate(
    compilation: ContractCompilation,
    source: SchemaDocument,
    config: Optional[ContractsConfig] = None,
) -> AuditResult:
    """Protected types keep the directive lists they had in the source."""
    config = config or ContractsConfig()
    source_definitions = source.type_definitions()
    compiled_definitions = compilation.document.type_definitions()
    guarded = sorted(protected_type_names(source, config) & set(source_definitions))
    if not guarded:
        return AuditResult(
            gate_id="contract_protected_types_untouched",
            passed=True,
            total=0,
            succeeded=0,
            details="SKIP: no protected types defined",
        )
    touched = [
        name for name in guarded
        if has_directive(compiled_definitions[name], config.marker_directive_name)
        and not has_directive(source_definitions[name], config.marker_directive_name)
    ]
    details = f"untouched={len(guarded) - len(touched)}/{len(guarded)}"
    if touched:
        details += f"; touched={touched[:5]}"
    return AuditResult(
        gate_id="contract_protected_types_untouched",
        passed=not touched,
        total=len(guarded),
        succeeded=len(guarded) - len(touched),
        details=details,
    )


def run_contract_audits(
    compilation: ContractCompilation,
    source: SchemaDocument,
    config: Optional[ContractsConfig] = None,
) -> List[AuditResult]:
    gates = [
        marker_idempotence_gate(compilation, config),
        public_surface_reachability_gate(compilation, config),
        protected_types_untouched_gate(compilation, source, config),
    ]
    return gates


__all__ = [
    "AuditResult",
    "marker_idempotence_gate",
    "public_surface_reachability_gate",
    "protected_types_untouched_gate",
    "run_contract_audits",
]
