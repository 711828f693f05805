# Tree-sitter Ruby tree -> immutable SyntaxNode tree.
# Only named nodes are kept; punctuation and keywords carry no analysis value.

from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node as TSNode

from stalecop.syntax.nodes import NodeKind, SourceRange, SyntaxNode

logger = logging.getLogger(__name__)

_KIND_BY_TYPE: dict[str, NodeKind] = {
    "program": NodeKind.PROGRAM,
    "class": NodeKind.CLASS,
    "module": NodeKind.MODULE,
    "singleton_class": NodeKind.SCLASS,
    "method": NodeKind.DEF,
    "singleton_method": NodeKind.DEFS,
    "block": NodeKind.BLOCK,
    "do_block": NodeKind.BLOCK,
    "lambda": NodeKind.LAMBDA,
    "call": NodeKind.SEND,
    "constant": NodeKind.CONST,
}

_ASSIGNMENT_TYPES = frozenset({"assignment", "operator_assignment"})

# Assignment kind is decided by what sits on the left-hand side.
_KIND_BY_ASSIGNMENT_TARGET: dict[str, NodeKind] = {
    "constant": NodeKind.CASGN,
    "scope_resolution": NodeKind.CASGN,  # Foo::BAR = ...
    "class_variable": NodeKind.CVASGN,
    "instance_variable": NodeKind.IVASGN,
    "global_variable": NodeKind.GVASGN,
    "identifier": NodeKind.LVASGN,
}


def node_kind(ts_node: TSNode) -> NodeKind:
    """Map a tree-sitter Ruby node to its NodeKind."""
    if ts_node.type in _ASSIGNMENT_TYPES:
        left = ts_node.child_by_field_name("left")
        if left is None:
            return NodeKind.ASSIGN
        return _KIND_BY_ASSIGNMENT_TARGET.get(left.type, NodeKind.ASSIGN)
    return _KIND_BY_TYPE.get(ts_node.type, NodeKind.OTHER)


def _method_name(ts_node: TSNode, source: bytes) -> Optional[str]:
    method = ts_node.child_by_field_name("method")
    if method is None:
        # e.g. foo.() has no method field
        return None
    return source[method.start_byte : method.end_byte].decode("utf-8", errors="replace")


def _source_range(ts_node: TSNode) -> SourceRange:
    return SourceRange(
        start_byte=ts_node.start_byte,
        end_byte=ts_node.end_byte,
        start_point=(ts_node.start_point[0], ts_node.start_point[1]),
        end_point=(ts_node.end_point[0], ts_node.end_point[1]),
    )


def _make_node(ts_node: TSNode, source: bytes, children: list[SyntaxNode]) -> SyntaxNode:
    kind = node_kind(ts_node)
    return SyntaxNode(
        kind,
        _source_range(ts_node),
        children,
        source=source,
        type_name=ts_node.type,
        method_name=_method_name(ts_node, source) if kind is NodeKind.SEND else None,
    )


def _build(ts_root: TSNode, source: bytes) -> SyntaxNode:
    # Post-order with an explicit stack: long operator or method chains nest
    # deeper than the interpreter's recursion limit.
    built: list[SyntaxNode] = []
    stack: list[tuple[TSNode, bool]] = [(ts_root, False)]
    while stack:
        ts_node, expanded = stack.pop()
        if not expanded:
            stack.append((ts_node, True))
            stack.extend((child, False) for child in reversed(ts_node.named_children))
            continue
        split = len(built) - ts_node.named_child_count
        children = built[split:]
        del built[split:]
        built.append(_make_node(ts_node, source, children))
    return built[0]


def build_tree(ts_root: TSNode, source: bytes) -> SyntaxNode:
    """
    Convert a tree-sitter tree rooted at ts_root into a SyntaxNode tree.

    Children are built before their parent so each parent claims finished
    children; the returned root is complete and read-only.
    """
    root = _build(ts_root, source)
    logger.debug("Built syntax tree: root=%s", root.type_name)
    return root
