from __future__ import annotations

import argparse
import sys
from importlib import metadata as importlib_metadata

from .config import load_config
from .context import RunContext
from .contract import load_metadata, validate_metadata
from .errors import ScriptError
from .exit_codes import ERR_CONFORMANCE, ERR_INTERNAL, ERR_USAGE, ERR_VALIDATION, OK
from .logging import log_event
from .reporting import base_payload, dumps_json, emit_result
from .runner import relative_to_root, run_check


def _version_string() -> str:
    try:
        return importlib_metadata.version("jobcheck")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jobcheck", description="static conformance checks for job scripts")
    p.add_argument("--version", action="version", version=f"jobcheck {_version_string()}")
    p.add_argument("--run-id", help="run identifier for log lines and reports")
    p.add_argument("--root", help="project root holding metadata.yaml and the job script (default: cwd)")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug log events")
    vg.add_argument("--quiet", action="store_true", help="only emit warnings and errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    check_p = sub.add_parser("check", help="check the job script against its declared metadata")
    check_p.add_argument("--metadata", help="metadata file (default: metadata.yaml)")
    check_p.add_argument("--script", help="job script source (default: src/script.mjs)")
    check_p.add_argument("--schema", help="metadata JSON schema override")
    check_p.add_argument(
        "--check-secrets",
        action="store_true",
        default=None,
        help="also compare context.secrets usage with declared secrets",
    )
    check_p.add_argument("--json", action="store_true", help="emit JSON output")

    meta_p = sub.add_parser("validate-metadata", help="validate metadata.yaml against the metadata schema")
    meta_p.add_argument("--metadata", help="metadata file (default: metadata.yaml)")
    meta_p.add_argument("--schema", help="metadata JSON schema override")
    meta_p.add_argument("--json", action="store_true", help="emit JSON output")

    version_p = sub.add_parser("version", help="print version")
    version_p.add_argument("--json", action="store_true", help="emit JSON output")
    return p


def _run_check_command(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    config = load_config(ctx.project_root).with_overrides(
        metadata=ns.metadata,
        script=ns.script,
        schema=ns.schema,
        check_secrets=ns.check_secrets,
    )
    result = run_check(ctx, config)
    emit_result(
        ctx,
        result,
        as_json,
        script=relative_to_root(ctx, ctx.resolve(config.script)),
        metadata=relative_to_root(ctx, ctx.resolve(config.metadata)),
    )
    return OK if result.passed else ERR_CONFORMANCE


def _run_validate_metadata(ctx: RunContext, ns: argparse.Namespace, as_json: bool) -> int:
    config = load_config(ctx.project_root).with_overrides(metadata=ns.metadata, schema=ns.schema)
    path = ctx.resolve(config.metadata)
    schema_path = ctx.resolve(config.schema) if config.schema else None
    problems = validate_metadata(load_metadata(path), schema_path)
    status = "ok" if not problems else "fail"
    if as_json:
        payload = base_payload(ctx, "metadata-validation", status)
        payload.update({"metadata": relative_to_root(ctx, path), "errors": problems})
        print(dumps_json(payload))
    elif problems:
        print(f"{relative_to_root(ctx, path)}: metadata validation failed", file=sys.stderr)
        for problem in problems:
            print(f"  - {problem}", file=sys.stderr)
    else:
        print(f"{relative_to_root(ctx, path)}: metadata validation passed")
    return OK if not problems else ERR_VALIDATION


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    ctx = RunContext.from_args(ns.run_id, ns.root, ns.format, ns.verbose, ns.quiet)
    as_json = ctx.output_format == "json" or bool(getattr(ns, "json", False))
    try:
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, fmt=ctx.output_format, root=str(ctx.project_root))
        if ns.cmd == "version":
            if as_json:
                payload = base_payload(ctx, "version")
                payload["version"] = _version_string()
                print(dumps_json(payload))
            else:
                print(f"jobcheck {_version_string()}")
            return OK
        if ns.cmd == "check":
            return _run_check_command(ctx, ns, as_json)
        if ns.cmd == "validate-metadata":
            return _run_validate_metadata(ctx, ns, as_json)
        return ERR_USAGE
    except ScriptError as exc:
        log_event(ctx, "error", "cli", "failed", cmd=ns.cmd, kind=exc.kind, code=exc.code)
        if as_json:
            payload = base_payload(ctx, "error", "fail")
            payload["error"] = {"message": str(exc), "code": exc.code, "kind": exc.kind}
            print(dumps_json(payload), file=sys.stderr)
        else:
            print(str(exc), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        if as_json:
            payload = base_payload(ctx, "error", "fail")
            payload["error"] = {"message": f"internal error: {exc}", "code": ERR_INTERNAL, "kind": "internal_error"}
            print(dumps_json(payload), file=sys.stderr)
        else:
            print(f"internal error: {exc}", file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
