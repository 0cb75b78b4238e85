"""
Contract rules, creation requests, and contract schema compilation.

Provides tag rule validation, API-facing contract creation, and the
compiler that derives a contract schema from a target schema.
"""

from .rules import (
    ContractRule,
    validate_rule,
    validate_contract_name,
    validate_target_id,
)
from .requests import (
    CreateContractRequest,
    Contract,
    CreateContractResult,
    validate_create_contract_request,
    create_contract,
)
from .compiler import (
    ContractCompilation,
    ContractCompilationResult,
    compile_contract,
    compile_contract_sdl,
    excluded_coordinates_to_dataframe,
)

__all__ = [
    # Rules
    "ContractRule",
    "validate_rule",
    "validate_contract_name",
    "validate_target_id",
    # Creation
    "CreateContractRequest",
    "Contract",
    "CreateContractResult",
    "validate_create_contract_request",
    "create_contract",
    # Compilation
    "ContractCompilation",
    "ContractCompilationResult",
    "compile_contract",
    "compile_contract_sdl",
    "excluded_coordinates_to_dataframe",
]
