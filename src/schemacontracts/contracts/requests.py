"""
Contract creation requests.

Validates a creation request coming from the API layer and shapes the
response the API returns. Persistence is not handled here: callers pass the
contract names already used on the target and store the returned Contract.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from schemacontracts.contracts.rules import (
    ContractRule,
    sorted_tags,
    validate_contract_name,
    validate_rule,
    validate_target_id,
)
from schemacontracts.core.errors import ContractValidationResult

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong."


@dataclass
class CreateContractRequest:
    """Contract creation input as received from the API layer."""

    target_id: str
    contract_name: Optional[str] = None
    include_tags: Optional[List[str]] = None
    exclude_tags: Optional[List[str]] = None
    remove_unreachable_types_from_public_api_schema: bool = True

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "CreateContractRequest":
        """Build from a camelCase API payload."""
        contract_name = payload.get("userSpecifiedContractId", payload.get("contractName"))
        return cls(
            target_id=str(payload.get("targetId", "")),
            contract_name=contract_name,
            include_tags=payload.get("includeTags"),
            exclude_tags=payload.get("excludeTags"),
            remove_unreachable_types_from_public_api_schema=bool(
                payload.get("removeUnreachableTypesFromPublicApiSchema", True)
            ),
        )

    def rule(self) -> ContractRule:
        return ContractRule.from_tags(
            include=self.include_tags,
            exclude=self.exclude_tags,
            remove_unreachable_types=self.remove_unreachable_types_from_public_api_schema,
        )


@dataclass
class Contract:
    """A validated contract, ready to be persisted by the caller."""

    id: str
    target_id: str
    contract_name: Optional[str]
    rule: ContractRule
    created_at: str

    @property
    def include_tags(self) -> Optional[List[str]]:
        return sorted_tags(self.rule.include_tags)

    @property
    def exclude_tags(self) -> Optional[List[str]]:
        return sorted_tags(self.rule.exclude_tags)

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "target": {"id": self.target_id},
            "contractName": self.contract_name,
            "includeTags": self.include_tags,
            "excludeTags": self.exclude_tags,
            "createdAt": self.created_at,
        }


@dataclass
class CreateContractResult:
    """Either a created contract or the validation errors that prevented it."""

    contract: Optional[Contract] = None
    validation: ContractValidationResult = field(default_factory=ContractValidationResult)

    @property
    def ok(self) -> bool:
        return self.contract is not None and self.validation.passed

    def to_dict(self) -> Dict[str, object]:
        """API response shape: exactly one of ``ok`` / ``error`` is populated."""
        if self.ok:
            return {"ok": {"createdContract": self.contract.to_dict()}, "error": None}
        return {
            "ok": None,
            "error": {
                "message": GENERIC_ERROR_MESSAGE,
                "details": self.validation.details(),
            },
        }


def validate_create_contract_request(
    request: CreateContractRequest,
    existing_contract_names: Iterable[str] = (),
) -> ContractValidationResult:
    """Run every input check; all violations are collected."""
    result = ContractValidationResult()
    validate_target_id(request.target_id, result)
    validate_contract_name(request.contract_name, existing_contract_names, result)
    validate_rule(request.rule(), result)
    return result


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_contract(
    request: CreateContractRequest,
    existing_contract_names: Iterable[str] = (),
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    clock: Callable[[], str] = _utc_now,
) -> CreateContractResult:
    """
    Validate a creation request and build the contract record.

    Args:
        request: Incoming request.
        existing_contract_names: Names already used by contracts of the
            same target.
        id_factory: Contract id generator.
        clock: Timestamp provider (ISO 8601 string).

    Returns:
        CreateContractResult; never raises for invalid input.
    """
    logger.debug(
        f"Create contract (targetId={request.target_id}, contractName={request.contract_name})"
    )
    validation = validate_create_contract_request(request, existing_contract_names)
    if not validation.passed:
        logger.debug(
            f"Create contract failed due to validation errors "
            f"(targetId={request.target_id}, codes={[code.value for code in validation.codes()]})"
        )
        return CreateContractResult(validation=validation)

    contract = Contract(
        id=id_factory(),
        target_id=request.target_id,
        contract_name=request.contract_name,
        rule=request.rule(),
        created_at=clock(),
    )
    logger.debug(
        f"Created contract (targetId={contract.target_id}, contractId={contract.id}, "
        f"contractName={contract.contract_name})"
    )
    return CreateContractResult(contract=contract, validation=validation)


__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "CreateContractRequest",
    "Contract",
    "CreateContractResult",
    "validate_create_contract_request",
    "create_contract",
]
