from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node, Tree

from .nodes import (
    ARROW_FUNCTION,
    EXPORT_STATEMENT,
    FUNCTION_EXPRESSION_KINDS,
    METHOD_DEFINITION,
    OBJECT,
    PAIR,
    PROPERTY_IDENTIFIER,
    SHORTHAND_PROPERTY,
    STATEMENT_BLOCK,
    has_keyword,
    line_of,
    root_of,
    significant_children,
    text_of,
    unwrap,
)

HANDLER_NAME = "invoke"


@dataclass(frozen=True)
class HandlerReference:
    node: Node
    params: tuple[Node, ...]
    body: Node
    is_async: bool
    line: int

    @property
    def first_param(self) -> Node | None:
        return self.params[0] if self.params else None

    @property
    def second_param(self) -> Node | None:
        return self.params[1] if len(self.params) > 1 else None

    @property
    def has_concise_body(self) -> bool:
        return self.node.type == ARROW_FUNCTION and self.body.type != STATEMENT_BLOCK


def _handler_params(fn: Node) -> tuple[Node, ...]:
    single = fn.child_by_field_name("parameter")
    if single is not None:
        return (single,)
    params = fn.child_by_field_name("parameters")
    if params is None:
        return ()
    return tuple(significant_children(params))


def _default_export_value(root: Node) -> Node | None:
    for stmt in significant_children(root):
        if stmt.type != EXPORT_STATEMENT or not has_keyword(stmt, "default"):
            continue
        value = stmt.child_by_field_name("value")
        if value is None:
            value = stmt.child_by_field_name("declaration")
        return unwrap(value)
    return None


def _invoke_member(record: Node) -> Node | None:
    found: Node | None = None
    for member in significant_children(record):
        if member.type == PAIR:
            key = member.child_by_field_name("key")
        elif member.type == METHOD_DEFINITION:
            key = member.child_by_field_name("name")
        elif member.type == SHORTHAND_PROPERTY:
            key = member
        else:
            continue
        if key is not None and key.type in {PROPERTY_IDENTIFIER, SHORTHAND_PROPERTY} and text_of(key) == HANDLER_NAME:
            found = member
    return found


def find_handler(tree: Tree | Node) -> tuple[HandlerReference | None, str]:
    """Locate `export default { invoke: <function> }`.

    Returns the handler and an empty reason, or None and the reason the
    shape did not match.
    """
    export_value = _default_export_value(root_of(tree))
    if export_value is None:
        return None, "source has no default export"
    if export_value.type != OBJECT:
        return None, "default export is not an object literal"
    member = _invoke_member(export_value)
    if member is None:
        return None, f"default export has no `{HANDLER_NAME}` property"
    if member.type == SHORTHAND_PROPERTY:
        return None, f"`{HANDLER_NAME}` is not a function"
    fn = member if member.type == METHOD_DEFINITION else unwrap(member.child_by_field_name("value"))
    if fn is None or (fn.type != METHOD_DEFINITION and fn.type not in FUNCTION_EXPRESSION_KINDS):
        return None, f"`{HANDLER_NAME}` is not a function"
    if has_keyword(fn, "*"):
        return None, f"`{HANDLER_NAME}` is a generator, not a function"
    body = fn.child_by_field_name("body")
    if body is None:
        return None, f"`{HANDLER_NAME}` has no body"
    handler = HandlerReference(
        node=fn,
        params=_handler_params(fn),
        body=body,
        is_async=has_keyword(fn, "async"),
        line=line_of(fn),
    )
    return handler, ""


def locate_handler(tree: Tree | Node) -> HandlerReference | None:
    handler, _reason = find_handler(tree)
    return handler
