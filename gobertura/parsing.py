"""Go source parsing and declaration lookup.

Usage:
    tree = parse_go_source(data, "pkg/foo.go")        # raises SourceParseError
    for decl in locate_declarations(tree.root_node, data):
        decl.name, decl.owner, decl.start, decl.end

Positions follow the Go toolchain convention used by cover profiles:
1-based lines, 1-based byte columns, and an end position pointing just past
the declaration's last byte.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

import tree_sitter_language_pack as tslp

if TYPE_CHECKING:
    import tree_sitter

logger = logging.getLogger(__name__)

#: Owner name shared by every declaration without a receiver
NO_RECEIVER = "-"

_DECLARATION_TYPES = frozenset({"function_declaration", "method_declaration"})

_parser: tree_sitter.Parser | None = None


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SourceParseError(Exception):
    """Raised when a Go source file does not parse cleanly."""

    def __init__(self, file_name: str, line: int) -> None:
        super().__init__(f"{file_name}:{line}: syntax error")
        self.file_name = file_name
        self.line = line


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Declaration:
    """A top-level function or method and its textual extent."""

    name: str
    owner: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_col)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_parser() -> tree_sitter.Parser:
    """Return the (cached) tree-sitter parser for Go."""
    global _parser
    if _parser is None:
        _parser = tslp.get_parser("go")
    return _parser


def parse_go_source(data: bytes, file_name: str = "<source>") -> tree_sitter.Tree:
    """Parse Go source *data* into a syntax tree.

    Raises:
        SourceParseError: if the tree contains any error or missing node.
    """
    tree = get_parser().parse(data)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(file_name, _first_error_line(root))
    return tree


def locate_declarations(root: tree_sitter.Node, data: bytes) -> Iterator[Declaration]:
    """Yield the top-level function and method declarations under *root*.

    Function literals are expressions, not declarations, and are covered by
    whichever declaration encloses them.
    """
    for node in root.children:
        if node.type not in _DECLARATION_TYPES:
            continue
        name_node = node.child_by_field_name("name")
        yield Declaration(
            name=_node_text(name_node, data),
            owner=receiver_name(node, data),
            start_line=node.start_point[0] + 1,
            start_col=node.start_point[1] + 1,
            end_line=node.end_point[0] + 1,
            end_col=node.end_point[1] + 1,
        )


def receiver_name(node: tree_sitter.Node, data: bytes) -> str:
    """Return the receiver type name of a method, or ``"-"`` for a function.

    The name is sliced from the raw source so that generic receivers keep
    their type parameters (``List[T]``); pointer markers are dropped.
    """
    if node.type != "method_declaration":
        return NO_RECEIVER
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return NO_RECEIVER
    for param in receiver.named_children:
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        if type_node is None:
            break
        name = _node_text(type_node, data).lstrip("*").strip()
        return name or NO_RECEIVER
    return NO_RECEIVER


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _node_text(node: tree_sitter.Node | None, data: bytes) -> str:
    if node is None:
        return ""
    return data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _first_error_line(node: tree_sitter.Node) -> int:
    """Return the 1-based line of the first error or missing node."""
    if node.is_error or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error or child.is_missing:
            return _first_error_line(child)
    return node.start_point[0] + 1
