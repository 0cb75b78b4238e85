from __future__ import annotations

import pytest

from schemacontracts.config import (
    ENV_MARKER_DIRECTIVE,
    ENV_MAX_CASCADE_ITERATIONS,
    ENV_PROTECTED_TYPES,
    ENV_TAG_DIRECTIVE,
    ContractsConfig,
)
from schemacontracts.constants import FEDERATION_SCAFFOLDING_TYPES

ENV_NAMES = (
    ENV_MARKER_DIRECTIVE,
    ENV_TAG_DIRECTIVE,
    ENV_PROTECTED_TYPES,
    ENV_MAX_CASCADE_ITERATIONS,
)


def _clear_env(monkeypatch):
    # setenv first so teardown also removes values loaded from .env files
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_protect_federation_scaffolding():
    config = ContractsConfig()
    assert config.marker_directive_name == "inaccessible"
    assert config.tag_directive_name == "tag"
    assert config.protected_type_names == FEDERATION_SCAFFOLDING_TYPES
    assert config.max_cascade_iterations == 2


def test_single_schema_preset_has_no_protected_types():
    assert ContractsConfig.for_single_schema().protected_type_names == frozenset()


def test_with_protected_extends_names():
    config = ContractsConfig.for_single_schema().with_protected(["Internal"])
    assert config.protected_type_names == frozenset({"Internal"})


def test_rejects_non_positive_iterations():
    with pytest.raises(ValueError):
        ContractsConfig(max_cascade_iterations=0)


def test_from_env_reads_variables(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    monkeypatch.setenv(ENV_MARKER_DIRECTIVE, "hidden")
    monkeypatch.setenv(ENV_PROTECTED_TYPES, "Internal, Audit")
    monkeypatch.setenv(ENV_MAX_CASCADE_ITERATIONS, "3")

    config = ContractsConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))

    assert config.marker_directive_name == "hidden"
    assert {"Internal", "Audit"} <= config.protected_type_names
    assert FEDERATION_SCAFFOLDING_TYPES <= config.protected_type_names
    assert config.max_cascade_iterations == 3


def test_from_env_loads_dotenv_file(monkeypatch, tmp_path):
    _clear_env(monkeypatch)
    env_file = tmp_path / ".env"
    env_file.write_text(f"{ENV_TAG_DIRECTIVE}=label\n", encoding="utf-8")

    config = ContractsConfig.from_env(dotenv_path=str(env_file))

    assert config.tag_directive_name == "label"


def test_from_env_ignores_bad_iteration_count(monkeypatch, tmp_path, caplog):
    _clear_env(monkeypatch)
    monkeypatch.setenv(ENV_MAX_CASCADE_ITERATIONS, "many")

    config = ContractsConfig.from_env(dotenv_path=str(tmp_path / "missing.env"))

    assert config.max_cascade_iterations == 2
    assert "many" in caplog.text
