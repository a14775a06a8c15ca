from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from typing import Any

from jobcheck.analysis import HandlerReference, locate_handler
from jobcheck.contract import Contract
from jobcheck.parsing import parse_source

ROOT = Path(__file__).resolve().parents[1]
FIXTURES = ROOT / "tests" / "fixtures"


def make_contract(inputs: Any = (), outputs: Any = (), secrets: Any = None, name: str = "test-job") -> Contract:
    data: dict[str, Any] = {
        "name": name,
        "description": "test job",
        "inputs": {field: {"type": "string", "description": field, "required": True} for field in inputs},
        "outputs": {field: {"type": "string", "description": field} for field in outputs},
    }
    if secrets is not None:
        data["secrets"] = list(secrets)
    return Contract.from_mapping(data)


def handler_for(source: str) -> HandlerReference:
    handler = locate_handler(parse_source(source))
    assert handler is not None, source
    return handler


def run_jobcheck(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT / "src") + os.pathsep + env.get("PYTHONPATH", "")
    env.pop("CI", None)
    return subprocess.run(
        [sys.executable, "-m", "jobcheck", *args],
        cwd=cwd,
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )
