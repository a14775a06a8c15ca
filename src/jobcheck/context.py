from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

OutputFormat = Literal["text", "json"]


def make_run_id(prefix: str = "jobcheck") -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return f"{prefix}-{ts}"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    project_root: Path
    output_format: OutputFormat
    verbose: bool
    quiet: bool

    @property
    def log_json(self) -> bool:
        return self.output_format == "json"

    def resolve(self, path: str | Path) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else (self.project_root / candidate)

    @classmethod
    def from_args(
        cls,
        run_id: str | None,
        root: str | None,
        output_format: OutputFormat | None = None,
        verbose: bool = False,
        quiet: bool = False,
    ) -> "RunContext":
        resolved_format: OutputFormat = output_format or ("json" if "CI" in os.environ else "text")
        return cls(
            run_id=run_id or os.environ.get("RUN_ID", make_run_id()),
            project_root=Path(root or os.getcwd()).resolve(),
            output_format=resolved_format,
            verbose=verbose,
            quiet=quiet,
        )
