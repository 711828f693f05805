# Syntax tree model: node kinds, source ranges and immutable, parent-linked nodes.
# Rules only ever see SyntaxNode; the tree-sitter tree stays behind the builder.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

from stalecop.errors import MalformedTreeError


class NodeKind(str, Enum):
    """Kind tags for the constructs the engine and its rules care about."""

    PROGRAM = "program"
    CLASS = "class"
    MODULE = "module"
    SCLASS = "sclass"  # class << self
    DEF = "def"
    DEFS = "defs"  # def self.foo
    BLOCK = "block"  # { ... } and do ... end
    LAMBDA = "lambda"  # -> { ... }
    SEND = "send"  # method call
    CASGN = "casgn"  # TODAY = ...
    CVASGN = "cvasgn"  # @@today = ...
    IVASGN = "ivasgn"
    GVASGN = "gvasgn"
    LVASGN = "lvasgn"
    ASSIGN = "assign"  # any other assignment target
    CONST = "const"
    OTHER = "other"


@dataclass(frozen=True)
class SourceRange:
    """
    Byte offsets plus 0-based (row, column) points, as tree-sitter reports them.

    Use line/column (1-based) for display.
    """

    start_byte: int
    end_byte: int
    start_point: tuple[int, int]
    end_point: tuple[int, int]

    def __post_init__(self) -> None:
        if self.start_byte < 0 or self.end_byte < self.start_byte:
            raise MalformedTreeError(
                f"Invalid byte range {self.start_byte}..{self.end_byte}"
            )
        if tuple(self.end_point) < tuple(self.start_point):
            raise MalformedTreeError(
                f"Invalid point range {self.start_point}..{self.end_point}"
            )

    @property
    def line(self) -> int:
        return self.start_point[0] + 1

    @property
    def column(self) -> int:
        return self.start_point[1] + 1

    @property
    def end_line(self) -> int:
        return self.end_point[0] + 1

    @property
    def end_column(self) -> int:
        return self.end_point[1] + 1


class SyntaxNode:
    """
    One construct of the parsed source.

    Children are handed over at construction and the node claims them by
    setting their parent link; a node that already has a parent cannot be
    claimed twice, so every tree built this way is acyclic and each non-root
    node has exactly one parent. Nothing is mutable afterwards.

    `source` is the full file contents shared by every node of the tree;
    `text` slices it lazily.
    """

    __slots__ = (
        "_kind",
        "_range",
        "_children",
        "_parent",
        "_source",
        "_type_name",
        "_method_name",
    )

    def __init__(
        self,
        kind: NodeKind,
        source_range: SourceRange,
        children: Iterable["SyntaxNode"] = (),
        *,
        source: bytes = b"",
        type_name: Optional[str] = None,
        method_name: Optional[str] = None,
    ) -> None:
        if not isinstance(kind, NodeKind):
            raise MalformedTreeError(f"Node kind must be a NodeKind, got {kind!r}")
        if not isinstance(source_range, SourceRange):
            raise MalformedTreeError(f"Node {kind.value} has no source range")

        self._kind = kind
        self._range = source_range
        self._children: tuple[SyntaxNode, ...] = tuple(children)
        self._parent: Optional[SyntaxNode] = None
        self._source = source
        self._type_name = type_name or kind.value
        self._method_name = method_name

        for child in self._children:
            if not isinstance(child, SyntaxNode):
                raise MalformedTreeError(f"Child of {kind.value} is not a SyntaxNode: {child!r}")
            if child._parent is not None:
                raise MalformedTreeError(
                    f"Node {child.type_name} at {child.line}:{child.column} already has a parent"
                )
            child._parent = self

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def children(self) -> tuple["SyntaxNode", ...]:
        return self._children

    @property
    def parent(self) -> Optional["SyntaxNode"]:
        return self._parent

    @property
    def source_range(self) -> SourceRange:
        return self._range

    @property
    def type_name(self) -> str:
        """Grammar node type (e.g. "call", "do_block"); defaults to the kind value."""
        return self._type_name

    @property
    def method_name(self) -> Optional[str]:
        """Called method name for SEND nodes, None otherwise."""
        return self._method_name

    @property
    def text(self) -> str:
        """Source text covered by this node. Bad UTF-8 is replaced, never raised."""
        return self._source[self._range.start_byte : self._range.end_byte].decode(
            "utf-8", errors="replace"
        )

    @property
    def line(self) -> int:
        return self._range.line

    @property
    def column(self) -> int:
        return self._range.column

    @property
    def is_root(self) -> bool:
        return self._parent is None

    def __repr__(self) -> str:
        extra = f" {self._method_name}" if self._method_name else ""
        return f"<SyntaxNode {self._kind.value}{extra} {self.line}:{self.column}>"


def walk(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield node and every descendant in depth-first pre-order (document order)."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))
