from __future__ import annotations

import pytest

from jobcheck.analysis import find_handler, locate_handler
from jobcheck.parsing import parse_source


@pytest.mark.parametrize(
    "source",
    [
        "export default { invoke: async (params, context) => { return {}; } };",
        "export default { invoke: (params) => ({ ok: true }) };",
        "export default { invoke: async function (params) { return {}; } };",
        "export default { invoke: function run(params) { return {}; } };",
        "export default { async invoke(params, context) { return {}; } };",
        "export default ({ invoke: async (params) => { return {}; } });",
        "export default { invoke: async params => { return {}; } };",
    ],
)
def test_handler_shapes_are_located(source: str) -> None:
    handler = locate_handler(parse_source(source))
    assert handler is not None
    assert handler.line == 1


def test_handler_reports_parameters_and_async_flag() -> None:
    source = "export default {\n  invoke: async (params, context) => {\n    return {};\n  }\n};\n"
    handler = locate_handler(parse_source(source))
    assert handler is not None
    assert handler.is_async
    assert [p.text.decode() for p in handler.params] == ["params", "context"]
    assert handler.line == 2


def test_single_unparenthesized_parameter_is_first_param() -> None:
    handler = locate_handler(parse_source("export default { invoke: p => { return {}; } };"))
    assert handler is not None
    assert handler.first_param is not None
    assert handler.first_param.text.decode() == "p"
    assert handler.second_param is None


@pytest.mark.parametrize(
    ("source", "reason"),
    [
        ("const x = 1;", "source has no default export"),
        ("export const invoke = async () => {};", "source has no default export"),
        ("const script = { invoke: async () => {} };\nexport default script;", "default export is not an object literal"),
        ("export default function invoke() { return {}; }", "default export is not an object literal"),
        ("export default { run: async () => { return {}; } };", "default export has no `invoke` property"),
        ("export default { 'invoke': async () => { return {}; } };", "default export has no `invoke` property"),
        ("export default { invoke: 42 };", "`invoke` is not a function"),
        ("const impl = async () => {};\nexport default { invoke: impl };", "`invoke` is not a function"),
        ("const invoke = async () => {};\nexport default { invoke };", "`invoke` is not a function"),
    ],
)
def test_locator_failures_carry_a_reason(source: str, reason: str) -> None:
    handler, found_reason = find_handler(parse_source(source))
    assert handler is None
    assert found_reason == reason


def test_last_invoke_property_wins() -> None:
    source = "export default { invoke: 1, invoke: async (p) => { return {}; } };"
    handler = locate_handler(parse_source(source))
    assert handler is not None
    assert handler.node.type == "arrow_function"
