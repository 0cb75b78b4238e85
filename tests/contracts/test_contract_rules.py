from __future__ import annotations

from schemacontracts.contracts.rules import (
    MESSAGE_NAME_DUPLICATE,
    MESSAGE_NAME_TOO_LONG,
    MESSAGE_NAME_TOO_SHORT,
    MESSAGE_NO_TAGS,
    MESSAGE_TAGS_INTERSECT,
    ContractRule,
    validate_contract_name,
    validate_rule,
    validate_target_id,
)
from schemacontracts.core.errors import ContractErrorCode
from schemacontracts.schemas.contract_rows import REASON_EXCLUDE_HIT, REASON_INCLUDE_MISS


def test_intersecting_tags_rejected():
    result = validate_rule(ContractRule.from_tags(include=["foo"], exclude=["foo"]))
    assert result.codes() == [ContractErrorCode.TAGS_INTERSECT]
    assert result.details()["includeTags"] == MESSAGE_TAGS_INTERSECT


def test_empty_tags_rejected():
    result = validate_rule(ContractRule.from_tags(include=[], exclude=[]))
    assert result.codes() == [ContractErrorCode.NO_TAGS_PROVIDED]
    assert result.details()["includeTags"] == MESSAGE_NO_TAGS


def test_missing_tags_rejected():
    assert validate_rule(ContractRule()).codes() == [ContractErrorCode.NO_TAGS_PROVIDED]


def test_include_only_accepted():
    assert validate_rule(ContractRule.from_tags(include=["foo"])).passed


def test_disjoint_include_and_exclude_accepted():
    assert validate_rule(ContractRule.from_tags(include=["foo"], exclude=["bar"])).passed


def test_tags_are_normalized():
    rule = ContractRule.from_tags(include=["public", "", "beta"])
    assert rule.include_tags == frozenset({"public", "beta"})
    assert rule.exclude_tags is None


def test_tags_compared_verbatim():
    rule = ContractRule.from_tags(include=[" public"])
    assert rule.include_tags == frozenset({" public"})
    assert rule.exclusion_reason(["public"]) == REASON_INCLUDE_MISS
    assert rule.exclusion_reason([" public"]) is None


def test_exclusion_reason():
    rule = ContractRule.from_tags(include=["public"], exclude=["internal"])
    assert rule.exclusion_reason(["public"]) is None
    assert rule.exclusion_reason([]) == REASON_INCLUDE_MISS
    assert rule.exclusion_reason(["public", "internal"]) == REASON_EXCLUDE_HIT
    assert rule.exclusion_reason([], apply_include=False) is None


def test_untagged_never_excluded_by_exclude_tags_alone():
    rule = ContractRule.from_tags(exclude=["internal"])
    assert not rule.excludes([])
    assert rule.excludes(["internal"])


def test_contract_name_bounds():
    assert validate_contract_name("a").details()["contractName"] == MESSAGE_NAME_TOO_SHORT
    assert validate_contract_name("a" * 65).details()["contractName"] == MESSAGE_NAME_TOO_LONG
    assert validate_contract_name("ab").passed
    assert validate_contract_name("a" * 64).passed
    assert validate_contract_name(None).passed


def test_duplicate_contract_name_rejected():
    result = validate_contract_name("public", existing_contract_names=["public", "partner"])
    assert result.codes() == [ContractErrorCode.DUPLICATE_IDENTIFIER]
    assert result.details()["contractName"] == MESSAGE_NAME_DUPLICATE


def test_target_id_must_be_uuid():
    assert validate_target_id("2a2f1c3e-61d9-4f0d-9d8a-5b8b9e2c6a01").passed
    assert validate_target_id("not-a-uuid").codes() == [ContractErrorCode.INVALID_TARGET_ID]


def test_target_id_requires_hyphenated_form():
    assert validate_target_id("2A2F1C3E-61D9-4F0D-9D8A-5B8B9E2C6A01").passed
    for target_id in (
        "{2a2f1c3e-61d9-4f0d-9d8a-5b8b9e2c6a01}",
        "urn:uuid:2a2f1c3e-61d9-4f0d-9d8a-5b8b9e2c6a01",
        "2a2f1c3e61d94f0d9d8a5b8b9e2c6a01",
        "2a2f1c3e-61d9-4f0d-9d8a-5b8b9e2c6a01\n",
    ):
        assert not validate_target_id(target_id).passed


def test_rule_to_dict_is_sorted():
    rule = ContractRule.from_tags(include=["b", "a"], remove_unreachable_types=False)
    assert rule.to_dict() == {
        "includeTags": ["a", "b"],
        "excludeTags": None,
        "removeUnreachableTypesFromPublicApiSchema": False,
    }
