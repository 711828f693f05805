"""Tests for stalecop.context: FileContext, create_context, node/def counts."""

from pathlib import Path

from stalecop.context import (
    context_from_bytes,
    count_tree_stats,
    create_context,
)
from stalecop.syntax.nodes import NodeKind


def test_count_tree_stats():
    ctx = context_from_bytes(b"class A\n  def a; end\n  def self.b; end\nend\n")
    nodes, defs = count_tree_stats(ctx.root)
    assert nodes > 3
    assert defs == 2


def test_create_context_sample_rb(tmp_path):
    rb_file = tmp_path / "user.rb"
    rb_file.write_bytes(b"class User\nend\n")
    ctx = create_context(rb_file)
    assert ctx is not None
    assert ctx.path == rb_file
    assert ctx.source == b"class User\nend\n"
    assert ctx.tree.root_node is not None
    assert ctx.root.kind is NodeKind.PROGRAM
    assert ctx.has_parse_errors is False


def test_create_context_nonexistent():
    assert create_context(Path("/nonexistent/file.rb")) is None


def test_create_context_malformed_still_returns_context(tmp_path):
    rb_file = tmp_path / "bad.rb"
    rb_file.write_bytes(b"class Broken\n  def x(\nend\n")
    ctx = create_context(rb_file)
    assert ctx is not None
    assert ctx.has_parse_errors is True


def test_create_context_logs_counts(tmp_path, caplog):
    rb_file = tmp_path / "a.rb"
    rb_file.write_bytes(b"def a; end\n")
    with caplog.at_level("INFO"):
        create_context(rb_file)
    assert "1 method(s)" in caplog.text
