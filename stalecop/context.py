# Per-file analysis context: store file path, source code, parse tree and syntax tree.
# Handles reading/parsing Ruby files, unreadable/malformed files, and logging of
# node/def counts so trees are ready for the dispatcher.

import logging
from pathlib import Path
from typing import Optional

from tree_sitter import Parser, Tree

from stalecop.parser import create_parser, parse_bytes
from stalecop.syntax.builder import build_tree
from stalecop.syntax.nodes import NodeKind, SyntaxNode, walk

logger = logging.getLogger(__name__)

_DEF_KINDS = (NodeKind.DEF, NodeKind.DEFS)


def count_tree_stats(root: SyntaxNode) -> tuple[int, int]:
    """
    Return (total node count, method definition count) for the tree.

    Useful for logging how much was parsed.
    """
    nodes = 0
    defs = 0
    for node in walk(root):
        nodes += 1
        if node.kind in _DEF_KINDS:
            defs += 1
    return nodes, defs


class FileContext:
    """
    Per-file state for analysis: path, raw source bytes, tree-sitter tree and
    the syntax tree rules run on.
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        tree: Tree,
        *,
        root: Optional[SyntaxNode] = None,
        has_parse_errors: bool = False,
    ) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.root = root if root is not None else build_tree(tree.root_node, source)
        self.has_parse_errors = has_parse_errors


def context_from_bytes(
    source: bytes,
    path: Path = Path("<source>"),
    parser: Optional[Parser] = None,
) -> FileContext:
    """Parse in-memory Ruby source into a FileContext."""
    tree = parse_bytes(source, parser=parser)
    return FileContext(
        path=path,
        source=source,
        tree=tree,
        has_parse_errors=tree.root_node.has_error,
    )


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
) -> Optional[FileContext]:
    """
    Read a Ruby file and parse it into a FileContext.

    - Unreadable file (permission, missing): returns None and logs error.
    - Malformed Ruby (syntax errors): still returns a FileContext and sets
      has_parse_errors=True; logs a warning.
    - Success: returns FileContext and logs node count and def count.
    """
    if parser is None:
        parser = create_parser()

    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    ctx = context_from_bytes(source, path=path, parser=parser)
    if ctx.has_parse_errors:
        logger.warning("File %s parsed with syntax errors; tree may be incomplete", path)

    node_count, def_count = count_tree_stats(ctx.root)
    logger.info(
        "Parsed %s: %d nodes, %d method(s)%s",
        path,
        node_count,
        def_count,
        " (with parse errors)" if ctx.has_parse_errors else "",
    )
    return ctx
