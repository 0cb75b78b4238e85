"""
Evaluation module for contract compilation.

Provides deterministic post-compilation audits (contract_audits).
"""

from .contract_audits import (
    AuditResult,
    marker_idempotence_gate,
    public_surface_reachability_gate,
    protected_types_untouched_gate,
    run_contract_audits,
)

__all__ = [
    "AuditResult",
    "marker_idempotence_gate",
    "public_surface_reachability_gate",
    "protected_types_untouched_gate",
    "run_contract_audits",
]
