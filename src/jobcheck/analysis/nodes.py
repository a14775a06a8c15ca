"""Node kinds and traversal helpers over tree-sitter JavaScript trees.

Only the handful of node kinds the collectors pattern-match on are named
here; everything else is walked through as opaque children.
"""

from __future__ import annotations

from typing import Iterator

from tree_sitter import Node, Tree

ARROW_FUNCTION = "arrow_function"
# tree-sitter-javascript < 0.21 names function expressions `function`.
FUNCTION_EXPRESSION_KINDS = frozenset({"function_expression", "function", ARROW_FUNCTION})

OBJECT = "object"
PAIR = "pair"
SHORTHAND_PROPERTY = "shorthand_property_identifier"
SPREAD_ELEMENT = "spread_element"
METHOD_DEFINITION = "method_definition"
COMPUTED_PROPERTY_NAME = "computed_property_name"

OBJECT_PATTERN = "object_pattern"
PAIR_PATTERN = "pair_pattern"
SHORTHAND_PROPERTY_PATTERN = "shorthand_property_identifier_pattern"
OBJECT_ASSIGNMENT_PATTERN = "object_assignment_pattern"
ASSIGNMENT_PATTERN = "assignment_pattern"

IDENTIFIER = "identifier"
PROPERTY_IDENTIFIER = "property_identifier"
MEMBER_EXPRESSION = "member_expression"
VARIABLE_DECLARATOR = "variable_declarator"
RETURN_STATEMENT = "return_statement"
PARENTHESIZED_EXPRESSION = "parenthesized_expression"
STATEMENT_BLOCK = "statement_block"
EXPORT_STATEMENT = "export_statement"
COMMENT = "comment"
STRING = "string"
STRING_FRAGMENT = "string_fragment"
ESCAPE_SEQUENCE = "escape_sequence"

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def root_of(tree: Tree | Node) -> Node:
    return tree.root_node if isinstance(tree, Tree) else tree


def text_of(node: Node) -> str:
    raw = node.text
    return raw.decode("utf-8") if raw is not None else ""


def line_of(node: Node) -> int:
    return node.start_point[0] + 1


def significant_children(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type != COMMENT]


def unwrap(node: Node | None) -> Node | None:
    """Strip redundant parentheses: `(expr)` is treated as `expr`."""
    while node is not None and node.type == PARENTHESIZED_EXPRESSION:
        inner = significant_children(node)
        node = inner[0] if len(inner) == 1 else None
    return node


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of every named descendant, `node` included."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.named_children))


def is_identifier(node: Node | None, name: str) -> bool:
    node = unwrap(node)
    return node is not None and node.type == IDENTIFIER and text_of(node) == name


def _unescape(sequence: str) -> str:
    body = sequence[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in {"u", "x"} and len(body) > 1:
        return chr(int(body[1:], 16))
    if body[:1] in {"\n", "\r", "\u2028", "\u2029"}:
        return ""
    return _SIMPLE_ESCAPES.get(body, body)


def string_value(node: Node) -> str:
    """Cooked value of a string literal, escape sequences decoded."""
    parts: list[str] = []
    for child in node.named_children:
        if child.type == STRING_FRAGMENT:
            parts.append(text_of(child))
        elif child.type == ESCAPE_SEQUENCE:
            parts.append(_unescape(text_of(child)))
    return "".join(parts)


def literal_key(node: Node | None) -> str | None:
    """Name of a non-computed property key, or None for computed/absent keys."""
    if node is None:
        return None
    if node.type in {PROPERTY_IDENTIFIER, IDENTIFIER, SHORTHAND_PROPERTY, SHORTHAND_PROPERTY_PATTERN}:
        return text_of(node)
    if node.type == STRING:
        return string_value(node)
    if node.type == "number":
        return text_of(node)
    return None


def destructured_keys(pattern: Node) -> frozenset[str]:
    """Field names read by an object destructuring pattern.

    `{a, b = 1, c: local}` reads `a`, `b`, `c`. Rest elements and computed
    keys name nothing statically.
    """
    names: set[str] = set()
    for element in significant_children(pattern):
        if element.type == SHORTHAND_PROPERTY_PATTERN:
            names.add(text_of(element))
        elif element.type == OBJECT_ASSIGNMENT_PATTERN:
            key = literal_key(element.child_by_field_name("left"))
            if key is not None:
                names.add(key)
        elif element.type == PAIR_PATTERN:
            key = literal_key(element.child_by_field_name("key"))
            if key is not None:
                names.add(key)
    return frozenset(names)


def pattern_entry(pattern: Node, key: str) -> Node | None:
    """Local binding target for `key` inside an object pattern, if any."""
    for element in significant_children(pattern):
        if element.type == SHORTHAND_PROPERTY_PATTERN and text_of(element) == key:
            return element
        if element.type == OBJECT_ASSIGNMENT_PATTERN:
            left = element.child_by_field_name("left")
            if literal_key(left) == key:
                return left
        if element.type == PAIR_PATTERN and literal_key(element.child_by_field_name("key")) == key:
            value = element.child_by_field_name("value")
            if value is not None and value.type == ASSIGNMENT_PATTERN:
                value = value.child_by_field_name("left")
            return value
    return None


def strip_default(param: Node) -> Node:
    """`x = {}` and `{a} = {}` bind like `x` and `{a}`."""
    if param.type == ASSIGNMENT_PATTERN:
        left = param.child_by_field_name("left")
        if left is not None:
            return left
    return param


def has_keyword(node: Node, keyword: str) -> bool:
    return any(not child.is_named and child.type == keyword for child in node.children)
