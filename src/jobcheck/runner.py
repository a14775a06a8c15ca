from __future__ import annotations

import time
from pathlib import Path

from .analysis import ConformanceResult, check_conformance
from .config import CheckConfig
from .context import RunContext
from .contract import Contract, load_contract
from .logging import log_event
from .parsing import parse_source, read_source


def check_source(text: str, contract: Contract, filename: str = "<source>", check_secrets: bool = False) -> ConformanceResult:
    return check_conformance(parse_source(text, filename), contract, check_secrets=check_secrets)


def run_check(ctx: RunContext, config: CheckConfig) -> ConformanceResult:
    metadata_path = ctx.resolve(config.metadata)
    script_path = ctx.resolve(config.script)
    schema_path = ctx.resolve(config.schema) if config.schema else None

    contract = load_contract(metadata_path, schema_path)
    log_event(
        ctx,
        "info",
        "contract",
        "loaded",
        job=contract.name,
        inputs=len(contract.inputs),
        outputs=len(contract.outputs),
        path=relative_to_root(ctx, metadata_path),
    )
    text = read_source(script_path)
    start = time.perf_counter()
    result = check_source(text, contract, str(script_path), config.check_secrets)
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    log_event(
        ctx,
        "info",
        "analysis",
        "done",
        script=relative_to_root(ctx, script_path),
        status="pass" if result.passed else "fail",
        errors=len(result.errors),
        warnings=len(result.warnings),
        duration_ms=elapsed_ms,
    )
    for finding in result.findings:
        log_event(ctx, "debug", "analysis", "finding", code=finding.code, severity=finding.severity, subject=finding.subject)
    return result


def relative_to_root(ctx: RunContext, path: Path) -> str:
    try:
        return path.relative_to(ctx.project_root).as_posix()
    except ValueError:
        return str(path)
