"""Static conformance analysis of job script handlers."""

from .compare import ConformanceResult, Finding, compare
from .engine import check_conformance
from .locator import HandlerReference, find_handler, locate_handler
from .returns import ReturnShape, collect_return_shape
from .usage import Aliased, Destructured, ParameterBinding, Unbound, collect_parameter_usage, collect_secret_usage, resolve_binding

__all__ = [
    "Aliased",
    "ConformanceResult",
    "Destructured",
    "Finding",
    "HandlerReference",
    "ParameterBinding",
    "ReturnShape",
    "Unbound",
    "check_conformance",
    "collect_parameter_usage",
    "collect_return_shape",
    "collect_secret_usage",
    "compare",
    "find_handler",
    "locate_handler",
    "resolve_binding",
]
