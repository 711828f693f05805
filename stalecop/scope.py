# Ancestor queries over parent links: find the nearest enclosing scope of a node
# and classify whether its code runs per call or once at load time.

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Iterator, Optional

from stalecop.syntax.nodes import NodeKind, SyntaxNode

METHOD_KINDS = frozenset({NodeKind.DEF, NodeKind.DEFS})
BLOCK_KINDS = frozenset({NodeKind.BLOCK, NodeKind.LAMBDA})
BODY_KINDS = frozenset({NodeKind.CLASS, NodeKind.MODULE})
SCOPE_KINDS = METHOD_KINDS | BLOCK_KINDS | BODY_KINDS


class ScopeKind(str, Enum):
    METHOD = "method"
    BLOCK = "block"
    CLASS_BODY = "class_body"
    TOP_LEVEL = "top_level"


def ancestors(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield node's parent, grandparent, ... up to the root. The node itself is excluded."""
    current = node.parent
    while current is not None:
        yield current
        current = current.parent


def nearest_enclosing_scope(
    node: SyntaxNode,
    candidate_kinds: AbstractSet[NodeKind],
) -> Optional[NodeKind]:
    """
    Return the kind of the closest ancestor whose kind is in candidate_kinds.

    The first match walking upward wins, not the outermost one. None means
    the root was passed without a match.
    """
    for ancestor in ancestors(node):
        if ancestor.kind in candidate_kinds:
            return ancestor.kind
    return None


def classify_scope(node: SyntaxNode) -> ScopeKind:
    """Classify where node is evaluated: method body, block, class/module body or top level."""
    kind = nearest_enclosing_scope(node, SCOPE_KINDS)
    if kind is None:
        return ScopeKind.TOP_LEVEL
    if kind in METHOD_KINDS:
        return ScopeKind.METHOD
    if kind in BLOCK_KINDS:
        return ScopeKind.BLOCK
    return ScopeKind.CLASS_BODY


def is_evaluated_once(node: SyntaxNode) -> bool:
    """True when node sits directly in a class or module body and runs once, at load time."""
    return classify_scope(node) is ScopeKind.CLASS_BODY
