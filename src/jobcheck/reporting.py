from __future__ import annotations

import json
import sys
from typing import Any

from .analysis import ConformanceResult
from .context import RunContext

TOOL = "jobcheck"
SCHEMA_VERSION = 1


def dumps_json(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True)


def base_payload(ctx: RunContext, kind: str, status: str = "ok") -> dict[str, object]:
    return {
        "schema_version": SCHEMA_VERSION,
        "tool": TOOL,
        "kind": kind,
        "status": status,
        "run_id": ctx.run_id,
    }


def conformance_payload(ctx: RunContext, result: ConformanceResult, **fields: object) -> dict[str, object]:
    payload = base_payload(ctx, "conformance-check")
    payload.update(result.to_payload())
    payload.update(fields)
    return payload


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def render_text(result: ConformanceResult, script: str) -> tuple[list[str], list[str]]:
    """Split a result into (stdout lines, stderr lines)."""
    err_lines = [f"error: {message}" for message in result.errors]
    out_lines = [f"warning: {message}" for message in result.warnings]
    status = "passed" if result.passed else "failed"
    out_lines.append(
        f"{script}: conformance check {status} "
        f"({_plural(len(result.errors), 'error')}, {_plural(len(result.warnings), 'warning')})"
    )
    return out_lines, err_lines


def emit_result(ctx: RunContext, result: ConformanceResult, as_json: bool, script: str, metadata: str) -> None:
    if as_json:
        print(dumps_json(conformance_payload(ctx, result, script=script, metadata=metadata)))
        return
    out_lines, err_lines = render_text(result, script)
    for line in err_lines:
        print(line, file=sys.stderr)
    for line in out_lines:
        print(line)
