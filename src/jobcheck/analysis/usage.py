"""Which declared input fields does the handler statically read?

The first handler parameter binds the job inputs either by destructuring
(`async ({ target, action }, context) => ...`) or through an alias
(`async (params, context) => ...`). Only literal field names count:
`params['target']` and `params[key]` are computed accesses and are not
tracked, so usage is an under-approximation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

from tree_sitter import Node

from .locator import HandlerReference
from .nodes import (
    IDENTIFIER,
    MEMBER_EXPRESSION,
    OBJECT_PATTERN,
    PROPERTY_IDENTIFIER,
    SHORTHAND_PROPERTY_PATTERN,
    VARIABLE_DECLARATOR,
    destructured_keys,
    is_identifier,
    literal_key,
    pattern_entry,
    strip_default,
    text_of,
    unwrap,
    walk,
)

SECRETS_FIELD = "secrets"


@dataclass(frozen=True)
class Destructured:
    names: frozenset[str]


@dataclass(frozen=True)
class Aliased:
    name: str


@dataclass(frozen=True)
class Unbound:
    pass


ParameterBinding = Union[Destructured, Aliased, Unbound]


def resolve_binding(param: Node | None) -> ParameterBinding:
    if param is None:
        return Unbound()
    param = strip_default(param)
    if param.type == OBJECT_PATTERN:
        return Destructured(destructured_keys(param))
    if param.type == IDENTIFIER:
        return Aliased(text_of(param))
    return Unbound()


def _member_reads(body: Node, is_target: Callable[[Node], bool]) -> set[str]:
    """`target.name` reads and `const { a, b } = target` declarations."""
    names: set[str] = set()
    for node in walk(body):
        if node.type == MEMBER_EXPRESSION:
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None and prop.type == PROPERTY_IDENTIFIER and is_target(obj):
                names.add(text_of(prop))
        elif node.type == VARIABLE_DECLARATOR:
            pattern = node.child_by_field_name("name")
            value = node.child_by_field_name("value")
            if pattern is not None and value is not None and pattern.type == OBJECT_PATTERN and is_target(value):
                names.update(destructured_keys(pattern))
    return names


def collect_parameter_usage(handler: HandlerReference) -> frozenset[str]:
    binding = resolve_binding(handler.first_param)
    if isinstance(binding, Destructured):
        return binding.names
    if isinstance(binding, Aliased):
        alias = binding.name
        return frozenset(_member_reads(handler.body, lambda node: is_identifier(node, alias)))
    return frozenset()


def _is_secrets_member(node: Node, context_alias: str) -> bool:
    node = unwrap(node)
    if node is None or node.type != MEMBER_EXPRESSION:
        return False
    prop = node.child_by_field_name("property")
    return literal_key(prop) == SECRETS_FIELD and is_identifier(node.child_by_field_name("object"), context_alias)


def _secrets_binding(entry: Node | None, names: set[str], aliases: set[str]) -> None:
    if entry is None:
        return
    entry = strip_default(entry)
    if entry.type == OBJECT_PATTERN:
        names.update(destructured_keys(entry))
    elif entry.type in {IDENTIFIER, SHORTHAND_PROPERTY_PATTERN}:
        aliases.add(text_of(entry))


def collect_secret_usage(handler: HandlerReference) -> frozenset[str]:
    """Secret names read through the second handler parameter's `secrets` field."""
    param = handler.second_param
    if param is None:
        return frozenset()
    param = strip_default(param)
    names: set[str] = set()
    aliases: set[str] = set()
    context_alias: str | None = None
    if param.type == OBJECT_PATTERN:
        _secrets_binding(pattern_entry(param, SECRETS_FIELD), names, aliases)
    elif param.type == IDENTIFIER:
        context_alias = text_of(param)
        for node in walk(handler.body):
            if node.type != VARIABLE_DECLARATOR:
                continue
            pattern = node.child_by_field_name("name")
            if pattern is not None and pattern.type == OBJECT_PATTERN and is_identifier(
                node.child_by_field_name("value"), context_alias
            ):
                _secrets_binding(pattern_entry(pattern, SECRETS_FIELD), names, aliases)
    else:
        return frozenset()

    def is_target(node: Node) -> bool:
        if context_alias is not None and _is_secrets_member(node, context_alias):
            return True
        return any(is_identifier(node, alias) for alias in aliases)

    names.update(_member_reads(handler.body, is_target))
    return frozenset(names)
