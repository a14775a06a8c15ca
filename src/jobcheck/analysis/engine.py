from __future__ import annotations

from tree_sitter import Node, Tree

from ..contract import Contract
from .compare import ConformanceResult, compare, handler_not_found
from .locator import find_handler
from .returns import collect_return_shape
from .usage import collect_parameter_usage, collect_secret_usage


def check_conformance(tree: Tree | Node, contract: Contract, *, check_secrets: bool = False) -> ConformanceResult:
    """Check a parsed job script against its declared contract.

    Pure over its inputs: the same tree and contract always give the same
    result, and every outcome (including a missing handler) is a value.
    """
    handler, reason = find_handler(tree)
    if handler is None:
        return handler_not_found(reason)
    usage = collect_parameter_usage(handler)
    shape = collect_return_shape(handler)
    secret_usage = collect_secret_usage(handler) if check_secrets else None
    return compare(contract, usage, shape, secret_usage)
