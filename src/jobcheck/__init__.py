"""Static conformance checks between job script metadata and handler source."""

from .analysis import ConformanceResult, Finding, check_conformance
from .contract import Contract, ContractError, InputSpec, OutputSpec, load_contract, validate_metadata
from .errors import ScriptError
from .parsing import SourceParseError, parse_source
from .runner import check_source

__all__ = [
    "ConformanceResult",
    "Contract",
    "ContractError",
    "Finding",
    "InputSpec",
    "OutputSpec",
    "ScriptError",
    "SourceParseError",
    "check_conformance",
    "check_source",
    "load_contract",
    "parse_source",
    "validate_metadata",
]
