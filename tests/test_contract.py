from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers import FIXTURES
from jobcheck.contract import Contract, ContractError, load_contract, load_metadata, validate_metadata
from jobcheck.errors import ScriptError
from jobcheck.exit_codes import ERR_INPUT, ERR_VALIDATION


def _valid_metadata() -> dict[str, object]:
    return {
        "name": "job",
        "description": "does things",
        "inputs": {"target": {"type": "string", "description": "who", "required": True}},
        "outputs": {"status": {"type": "string", "description": "how it went"}},
    }


def test_fixture_metadata_loads_in_declaration_order() -> None:
    contract = load_contract(FIXTURES / "template_job" / "metadata.yaml")
    assert contract.name == "template-job"
    assert list(contract.inputs) == ["target", "action", "options", "dry_run"]
    assert list(contract.outputs) == ["status", "target", "action", "processed_at", "options_processed"]
    assert [name for name, spec in contract.inputs.items() if spec.required] == ["target", "action"]
    assert contract.secrets == ("API_KEY",)


def test_secrets_list_form() -> None:
    contract = load_contract(FIXTURES / "zoom_revoke" / "metadata.yaml")
    assert contract.secrets == ("ZOOM_TOKEN",)
    assert contract.inputs["userId"].required is True
    assert contract.outputs["tokenRevoked"].type == "boolean"


def test_secrets_record_list_and_absent() -> None:
    data = _valid_metadata()
    assert Contract.from_mapping(data).secrets is None
    data["secrets"] = [{"name": "A"}, "B"]
    assert Contract.from_mapping(data).secrets == ("A", "B")


def test_valid_metadata_has_no_problems() -> None:
    assert validate_metadata(_valid_metadata()) == []


def test_every_problem_is_reported() -> None:
    data = _valid_metadata()
    del data["description"]
    data["inputs"] = {"target": {"type": "string", "description": "who", "required": "yes"}}
    data["outputs"] = {"status": {"type": "string"}}
    problems = validate_metadata(data)
    assert len(problems) == 3
    assert problems[0].startswith("metadata validation failed at <root>:")
    assert any("inputs/target/required" in p for p in problems)
    assert any("outputs/status" in p and "description" in p for p in problems)


def test_non_mapping_metadata_is_rejected() -> None:
    assert validate_metadata(["not", "a", "mapping"])


def test_load_contract_raises_with_all_problems(tmp_path: Path) -> None:
    path = tmp_path / "metadata.json"
    path.write_text(json.dumps({"name": "job"}), encoding="utf-8")
    with pytest.raises(ContractError) as excinfo:
        load_contract(path)
    assert excinfo.value.code == ERR_VALIDATION
    assert len(excinfo.value.problems) == 3


def test_invalid_yaml_is_a_validation_error(tmp_path: Path) -> None:
    path = tmp_path / "metadata.yaml"
    path.write_text("name: [unterminated\n", encoding="utf-8")
    with pytest.raises(ScriptError) as excinfo:
        load_metadata(path)
    assert excinfo.value.code == ERR_VALIDATION


def test_missing_metadata_file(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as excinfo:
        load_metadata(tmp_path / "metadata.yaml")
    assert excinfo.value.code == ERR_INPUT


def test_schema_override(tmp_path: Path) -> None:
    schema = tmp_path / "strict.schema.json"
    schema.write_text(json.dumps({"type": "object", "required": ["owner"]}), encoding="utf-8")
    problems = validate_metadata(_valid_metadata(), schema)
    assert problems == ["metadata validation failed at <root>: 'owner' is a required property"]


def test_non_utf8_metadata_is_input_error(tmp_path: Path) -> None:
    path = tmp_path / "metadata.yaml"
    path.write_bytes(b"name: \xff\xfe\n")
    with pytest.raises(ScriptError) as excinfo:
        load_metadata(path)
    assert excinfo.value.code == ERR_INPUT
    assert excinfo.value.kind == "input_unreadable"


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[1, 2]",
        json.dumps({"type": "objekt"}),
    ],
)
def test_broken_schema_override_is_input_error(tmp_path: Path, text: str) -> None:
    schema = tmp_path / "broken.schema.json"
    schema.write_text(text, encoding="utf-8")
    with pytest.raises(ScriptError) as excinfo:
        validate_metadata(_valid_metadata(), schema)
    assert excinfo.value.code == ERR_INPUT
    assert excinfo.value.kind == "schema_invalid"
