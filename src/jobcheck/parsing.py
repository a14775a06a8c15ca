from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from .analysis.nodes import line_of
from .errors import ScriptError
from .exit_codes import ERR_INPUT, ERR_PARSE


class SourceParseError(ScriptError):
    def __init__(self, filename: str, line: int) -> None:
        super().__init__(f"{filename}:{line}: syntax error in job script", ERR_PARSE, "source_invalid")
        self.filename = filename
        self.line = line


@lru_cache(maxsize=1)
def javascript() -> Language:
    return Language(tree_sitter_javascript.language())


def _first_error(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def parse_source(text: str, filename: str = "<source>") -> Tree:
    tree = Parser(javascript()).parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        raise SourceParseError(filename, line_of(bad) if bad is not None else 1)
    return tree


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ScriptError(f"cannot read job script {path}: {exc.strerror or exc}", ERR_INPUT, "input_unreadable") from exc
    except UnicodeDecodeError as exc:
        raise ScriptError(f"job script {path} is not UTF-8: {exc.reason}", ERR_INPUT, "input_unreadable") from exc
