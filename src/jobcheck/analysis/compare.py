from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from ..contract import Contract
from .returns import ReturnShape

Severity = Literal["error", "warning"]

HANDLER_NOT_FOUND = "handler-not-found"
INPUT_UNDECLARED = "input-undeclared"
INPUT_UNUSED = "input-unused"
OUTPUT_MISSING = "output-missing"
OUTPUT_UNDECLARED = "output-undeclared"
OUTPUT_UNVERIFIABLE = "output-unverifiable"
STRUCTURAL = "structural"
SECRET_UNDECLARED = "secret-undeclared"
SECRET_UNUSED = "secret-unused"


@dataclass(frozen=True)
class Finding:
    code: str
    severity: Severity
    message: str
    subject: str | None = None

    def to_payload(self) -> dict[str, object]:
        return {"code": self.code, "severity": self.severity, "message": self.message, "subject": self.subject}


@dataclass(frozen=True)
class ConformanceResult:
    findings: tuple[Finding, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == "warning"]

    @property
    def passed(self) -> bool:
        return not any(f.severity == "error" for f in self.findings)

    def to_payload(self) -> dict[str, object]:
        return {
            "status": "pass" if self.passed else "fail",
            "passed": self.passed,
            "errors": self.errors,
            "warnings": self.warnings,
            "findings": [f.to_payload() for f in self.findings],
        }


def handler_not_found(reason: str) -> ConformanceResult:
    message = "no entry handler found" if not reason else f"no entry handler found: {reason}"
    return ConformanceResult((Finding(HANDLER_NOT_FOUND, "error", message),))


def _input_findings(contract: Contract, usage: frozenset[str]) -> list[Finding]:
    findings = [
        Finding(INPUT_UNDECLARED, "error", f"{name} used but undeclared", name)
        for name in sorted(usage)
        if name not in contract.inputs
    ]
    findings.extend(
        Finding(INPUT_UNUSED, "warning", f"{name} declared but unused", name)
        for name in contract.inputs
        if name not in usage
    )
    return findings


def _output_findings(contract: Contract, shape: ReturnShape) -> list[Finding]:
    if shape.has_dynamic_return and not shape.produced:
        return [Finding(OUTPUT_UNVERIFIABLE, "warning", "outputs unverifiable due to non-literal return")]
    findings = [
        Finding(OUTPUT_MISSING, "error", f"{name} declared but not produced", name)
        for name in contract.outputs
        if name not in shape.produced
    ]
    findings.extend(
        Finding(OUTPUT_UNDECLARED, "error", f"{name} produced but undeclared", name)
        for name in sorted(shape.produced)
        if name not in contract.outputs
    )
    return findings


def _secret_findings(declared: Iterable[str], used: frozenset[str]) -> list[Finding]:
    declared = tuple(declared)
    findings = [
        Finding(SECRET_UNDECLARED, "warning", f"secret {name} used but undeclared", name)
        for name in sorted(used)
        if name not in declared
    ]
    findings.extend(
        Finding(SECRET_UNUSED, "warning", f"secret {name} declared but unused", name)
        for name in declared
        if name not in used
    )
    return findings


def compare(
    contract: Contract,
    usage: frozenset[str],
    shape: ReturnShape,
    secret_usage: frozenset[str] | None = None,
) -> ConformanceResult:
    """Diff the declared contract against what the handler reads and returns.

    Every mismatch is collected; nothing short-circuits. `secret_usage` is
    compared only when given and the contract declares secrets.
    """
    findings = _input_findings(contract, usage)
    findings.extend(_output_findings(contract, shape))
    findings.extend(Finding(STRUCTURAL, "error", defect) for defect in shape.defects)
    if secret_usage is not None and contract.secrets is not None:
        findings.extend(_secret_findings(contract.secrets, secret_usage))
    return ConformanceResult(tuple(findings))
