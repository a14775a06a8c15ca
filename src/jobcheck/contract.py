from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

from .errors import ScriptError
from .exit_codes import ERR_INPUT, ERR_VALIDATION

METADATA_SCHEMA = "job-metadata.schema.json"


@dataclass(frozen=True)
class InputSpec:
    type: str
    description: str = ""
    required: bool = False


@dataclass(frozen=True)
class OutputSpec:
    type: str
    description: str = ""


@dataclass(frozen=True)
class Contract:
    name: str
    description: str
    inputs: dict[str, InputSpec] = field(default_factory=dict)
    outputs: dict[str, OutputSpec] = field(default_factory=dict)
    secrets: tuple[str, ...] | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Contract":
        inputs = {
            str(name): InputSpec(
                type=str((spec or {}).get("type", "")),
                description=str((spec or {}).get("description", "")),
                required=bool((spec or {}).get("required", False)),
            )
            for name, spec in (data.get("inputs") or {}).items()
        }
        outputs = {
            str(name): OutputSpec(
                type=str((spec or {}).get("type", "")),
                description=str((spec or {}).get("description", "")),
            )
            for name, spec in (data.get("outputs") or {}).items()
        }
        return cls(
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            inputs=inputs,
            outputs=outputs,
            secrets=_secret_names(data.get("secrets")),
        )


def _secret_names(raw: Any) -> tuple[str, ...] | None:
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        return tuple(str(name) for name in raw)
    names: list[str] = []
    for item in raw:
        names.append(str(item["name"]) if isinstance(item, Mapping) else str(item))
    return tuple(names)


class ContractError(ScriptError):
    def __init__(self, path: Path, problems: list[str]) -> None:
        detail = "; ".join(problems)
        super().__init__(f"{path}: invalid job metadata: {detail}", ERR_VALIDATION, "contract_invalid")
        self.problems = problems


def load_metadata(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScriptError(f"cannot read metadata file {path}: {exc.strerror or exc}", ERR_INPUT, "input_unreadable") from exc
    except UnicodeDecodeError as exc:
        raise ScriptError(f"metadata file {path} is not UTF-8: {exc.reason}", ERR_INPUT, "input_unreadable") from exc
    if path.suffix == ".json":
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ScriptError(f"{path}: invalid JSON: {exc}", ERR_VALIDATION, "contract_invalid") from exc
    import yaml

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ScriptError(f"{path}: invalid YAML: {exc}", ERR_VALIDATION, "contract_invalid") from exc


@lru_cache(maxsize=None)
def _load_schema(schema_path: Path | None) -> dict[str, Any]:
    if schema_path is None:
        text = resources.files("jobcheck.schemas").joinpath(METADATA_SCHEMA).read_text(encoding="utf-8")
    else:
        try:
            text = schema_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ScriptError(f"cannot read schema {schema_path}: {exc.strerror or exc}", ERR_INPUT, "input_unreadable") from exc
        except UnicodeDecodeError as exc:
            raise ScriptError(f"schema {schema_path} is not UTF-8: {exc.reason}", ERR_INPUT, "input_unreadable") from exc
    try:
        schema = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScriptError(f"{schema_path}: invalid JSON schema: {exc}", ERR_INPUT, "schema_invalid") from exc
    if not isinstance(schema, dict):
        raise ScriptError(f"{schema_path}: invalid JSON schema: not an object", ERR_INPUT, "schema_invalid")
    return schema


def validate_metadata(payload: Any, schema_path: Path | None = None) -> list[str]:
    import jsonschema

    schema = _load_schema(schema_path)
    validator_cls = jsonschema.validators.validator_for(schema, default=jsonschema.Draft202012Validator)
    try:
        validator_cls.check_schema(schema)
    except jsonschema.SchemaError as exc:
        raise ScriptError(f"{schema_path}: invalid JSON schema: {exc.message}", ERR_INPUT, "schema_invalid") from exc
    problems: list[tuple[str, str]] = []
    for exc in validator_cls(schema).iter_errors(payload):
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        problems.append((loc, f"metadata validation failed at {loc}: {exc.message}"))
    return [message for _loc, message in sorted(problems)]


def load_contract(path: Path, schema_path: Path | None = None) -> Contract:
    payload = load_metadata(path)
    problems = validate_metadata(payload, schema_path)
    if problems:
        raise ContractError(path, problems)
    return Contract.from_mapping(payload)
