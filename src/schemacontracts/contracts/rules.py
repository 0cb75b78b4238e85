"""
Contract tag rules and their validation.

A rule hides schema elements by tag:
- with include tags, anything not tagged with one of them is hidden
- with exclude tags, anything tagged with one of them is hidden
- exclusion wins when an element matches both
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

from schemacontracts.constants import CONTRACT_NAME_MAX_LENGTH, CONTRACT_NAME_MIN_LENGTH
from schemacontracts.core.errors import (
    FIELD_CONTRACT_NAME,
    FIELD_INCLUDE_TAGS,
    FIELD_TARGET_ID,
    ContractErrorCode,
    ContractValidationResult,
)
from schemacontracts.schemas.contract_rows import REASON_EXCLUDE_HIT, REASON_INCLUDE_MISS
from schemacontracts.utils.text import normalize_tags

MESSAGE_NO_TAGS = "Provide at least one value for either included tags or excluded tags"
MESSAGE_TAGS_INTERSECT = "Included and exclude tags must not intersect"
MESSAGE_NAME_TOO_SHORT = f"String must contain at least {CONTRACT_NAME_MIN_LENGTH} character(s)"
MESSAGE_NAME_TOO_LONG = f"String must contain at most {CONTRACT_NAME_MAX_LENGTH} character(s)"
MESSAGE_NAME_DUPLICATE = "Must be unique across all target contracts."
MESSAGE_INVALID_UUID = "Invalid uuid"

# Hyphenated 8-4-4-4-12 form only; no braces, urn prefix or bare hex
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}\Z"
)


@dataclass(frozen=True)
class ContractRule:
    """
    Include/exclude tag rule of a contract.

    Attributes:
        include_tags: Tags an element must carry to stay visible.
        exclude_tags: Tags that hide an element.
        remove_unreachable_types: Also hide types left unreachable once
            the tag rule has been applied.
    """

    include_tags: Optional[FrozenSet[str]] = None
    exclude_tags: Optional[FrozenSet[str]] = None
    remove_unreachable_types: bool = True

    def __post_init__(self):
        object.__setattr__(self, "include_tags", normalize_tags(self.include_tags))
        object.__setattr__(self, "exclude_tags", normalize_tags(self.exclude_tags))

    @classmethod
    def from_tags(
        cls,
        include: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
        remove_unreachable_types: bool = True,
    ) -> "ContractRule":
        return cls(
            include_tags=normalize_tags(include),
            exclude_tags=normalize_tags(exclude),
            remove_unreachable_types=remove_unreachable_types,
        )

    @property
    def has_include(self) -> bool:
        return bool(self.include_tags)

    @property
    def has_exclude(self) -> bool:
        return bool(self.exclude_tags)

    def exclusion_reason(self, tags: Iterable[str], apply_include: bool = True) -> Optional[str]:
        """
        Why an element with these tags is hidden, or None if it stays.

        Args:
            tags: Tags on the element (may be empty).
            apply_include: When False only exclude tags are considered.
        """
        tag_set = frozenset(tags)
        if self.has_exclude and tag_set & self.exclude_tags:
            return REASON_EXCLUDE_HIT
        if apply_include and self.has_include and not tag_set & self.include_tags:
            return REASON_INCLUDE_MISS
        return None

    def excludes(self, tags: Iterable[str]) -> bool:
        return self.exclusion_reason(tags) is not None

    def to_dict(self) -> Dict[str, object]:
        return {
            "includeTags": sorted(self.include_tags) if self.include_tags else None,
            "excludeTags": sorted(self.exclude_tags) if self.exclude_tags else None,
            "removeUnreachableTypesFromPublicApiSchema": self.remove_unreachable_types,
        }


def validate_rule(
    rule: ContractRule,
    result: Optional[ContractValidationResult] = None,
) -> ContractValidationResult:
    """
    Check that a rule names at least one tag and that its sets are disjoint.

    Errors are attributed to the includeTags field.
    """
    result = result if result is not None else ContractValidationResult()
    if not rule.has_include and not rule.has_exclude:
        result.add(ContractErrorCode.NO_TAGS_PROVIDED, FIELD_INCLUDE_TAGS, MESSAGE_NO_TAGS)
    elif rule.has_include and rule.has_exclude and rule.include_tags & rule.exclude_tags:
        result.add(ContractErrorCode.TAGS_INTERSECT, FIELD_INCLUDE_TAGS, MESSAGE_TAGS_INTERSECT)
    return result


def validate_contract_name(
    contract_name: Optional[str],
    existing_contract_names: Iterable[str] = (),
    result: Optional[ContractValidationResult] = None,
) -> ContractValidationResult:
    """
    Check a user-specified contract identifier.

    None means "not specified" and passes. Uniqueness is checked against
    the names already used on the same target.
    """
    result = result if result is not None else ContractValidationResult()
    if contract_name is None:
        return result
    if len(contract_name) < CONTRACT_NAME_MIN_LENGTH:
        result.add(ContractErrorCode.INVALID_IDENTIFIER, FIELD_CONTRACT_NAME, MESSAGE_NAME_TOO_SHORT)
    elif len(contract_name) > CONTRACT_NAME_MAX_LENGTH:
        result.add(ContractErrorCode.INVALID_IDENTIFIER, FIELD_CONTRACT_NAME, MESSAGE_NAME_TOO_LONG)
    elif contract_name in set(existing_contract_names):
        result.add(ContractErrorCode.DUPLICATE_IDENTIFIER, FIELD_CONTRACT_NAME, MESSAGE_NAME_DUPLICATE)
    return result


def validate_target_id(
    target_id: str,
    result: Optional[ContractValidationResult] = None,
) -> ContractValidationResult:
    result = result if result is not None else ContractValidationResult()
    if not UUID_PATTERN.match(str(target_id)):
        result.add(ContractErrorCode.INVALID_TARGET_ID, FIELD_TARGET_ID, MESSAGE_INVALID_UUID)
    return result


def sorted_tags(tags: Optional[FrozenSet[str]]) -> Optional[List[str]]:
    return sorted(tags) if tags else None


__all__ = [
    "ContractRule",
    "validate_rule",
    "validate_contract_name",
    "validate_target_id",
    "sorted_tags",
    "MESSAGE_NO_TAGS",
    "MESSAGE_TAGS_INTERSECT",
    "MESSAGE_NAME_TOO_SHORT",
    "MESSAGE_NAME_TOO_LONG",
    "MESSAGE_NAME_DUPLICATE",
    "MESSAGE_INVALID_UUID",
]
