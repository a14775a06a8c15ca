from __future__ import annotations

import json
from dataclasses import dataclass, replace
from importlib import resources
from pathlib import Path
from typing import Any

from .errors import ScriptError
from .exit_codes import ERR_CONFIG

CONFIG_FILE = "jobcheck.json"


@dataclass(frozen=True)
class CheckConfig:
    metadata: str = "metadata.yaml"
    script: str = "src/script.mjs"
    schema: str | None = None
    check_secrets: bool = False

    def with_overrides(self, **overrides: Any) -> "CheckConfig":
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def _config_schema() -> dict[str, Any]:
    text = resources.files("jobcheck.schemas").joinpath("config.schema.json").read_text(encoding="utf-8")
    return json.loads(text)


def load_config(project_root: Path) -> CheckConfig:
    path = project_root / CONFIG_FILE
    if not path.exists():
        return CheckConfig()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScriptError(f"cannot read config {path}: {exc.strerror or exc}", ERR_CONFIG, "config_invalid") from exc
    except UnicodeDecodeError as exc:
        raise ScriptError(f"config {path} is not UTF-8: {exc.reason}", ERR_CONFIG, "config_invalid") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ScriptError(f"{path}: invalid JSON: {exc}", ERR_CONFIG, "config_invalid") from exc
    import jsonschema

    try:
        jsonschema.validate(payload, _config_schema())
    except jsonschema.ValidationError as exc:
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        raise ScriptError(f"{path}: config validation failed at {loc}: {exc.message}", ERR_CONFIG, "config_invalid") from exc
    return CheckConfig(**payload)
