from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from tree_sitter import Node

from .locator import HandlerReference
from .nodes import (
    COMPUTED_PROPERTY_NAME,
    METHOD_DEFINITION,
    OBJECT,
    PAIR,
    RETURN_STATEMENT,
    SHORTHAND_PROPERTY,
    SPREAD_ELEMENT,
    line_of,
    literal_key,
    significant_children,
    text_of,
    unwrap,
    walk,
)


@dataclass(frozen=True)
class ReturnShape:
    produced: frozenset[str] = frozenset()
    has_dynamic_return: bool = False
    defects: tuple[str, ...] = field(default_factory=tuple)


def _returned_values(handler: HandlerReference) -> Iterator[tuple[Node | None, int]]:
    # Nested function literals are walked too; their returns count as the handler's.
    if handler.has_concise_body:
        yield unwrap(handler.body), line_of(handler.body)
    for node in walk(handler.body):
        if node.type == RETURN_STATEMENT:
            args = significant_children(node)
            yield (unwrap(args[0]) if args else None), line_of(node)


def _record_keys(record: Node, line: int) -> tuple[set[str], str | None]:
    keys: set[str] = set()
    for member in significant_children(record):
        if member.type == SPREAD_ELEMENT:
            return set(), f"return statement at line {line} must use explicit keys, not spread"
        if member.type == SHORTHAND_PROPERTY:
            keys.add(text_of(member))
            continue
        if member.type == PAIR:
            key_node = member.child_by_field_name("key")
        elif member.type == METHOD_DEFINITION:
            key_node = member.child_by_field_name("name")
        else:
            continue
        if key_node is not None and key_node.type == COMPUTED_PROPERTY_NAME:
            return set(), f"return statement at line {line} must use explicit keys, not computed keys"
        key = literal_key(key_node)
        if key is not None:
            keys.add(key)
    return keys, None


def collect_return_shape(handler: HandlerReference) -> ReturnShape:
    produced: set[str] = set()
    dynamic = False
    defects: list[str] = []
    for value, line in _returned_values(handler):
        if value is None:
            continue
        if value.type != OBJECT:
            dynamic = True
            continue
        keys, defect = _record_keys(value, line)
        if defect is not None:
            defects.append(defect)
            continue
        produced.update(keys)
    return ReturnShape(produced=frozenset(produced), has_dynamic_return=dynamic, defects=tuple(defects))
