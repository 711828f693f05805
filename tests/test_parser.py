"""Tests for tree-sitter Ruby parser wrapper."""

import logging
from pathlib import Path

from stalecop.parser import (
    create_parser,
    get_ruby_language,
    parse_bytes,
    parse_file,
)


def test_get_ruby_language_returns_language():
    """get_ruby_language() returns a tree-sitter Language object."""
    assert get_ruby_language()


def test_create_parser_returns_parser():
    """create_parser() returns a configured Parser."""
    parser = create_parser()
    assert parser is not None
    assert parser.language is not None


def test_parse_bytes_success(caplog):
    """Parsing valid Ruby succeeds and logs."""
    with caplog.at_level(logging.DEBUG):
        tree = parse_bytes(b"class A\n  def b; end\nend\n", parser=create_parser())
    assert not tree.root_node.has_error
    assert tree.root_node.type == "program"
    assert "Parse succeeded" in caplog.text


def test_parse_bytes_invalid_ruby_logs_failure(caplog):
    """Parsing broken Ruby still returns a tree and logs a warning."""
    with caplog.at_level(logging.WARNING):
        tree = parse_bytes(b"class A\n  def b(\n", parser=create_parser())
    assert tree.root_node is not None
    if tree.root_node.has_error:
        assert "errors" in caplog.text


def test_parse_file_sample_rb():
    """Parser parses the sample Ruby file successfully."""
    sample_path = Path(__file__).parent / "sample.rb"
    assert sample_path.exists(), "tests/sample.rb must exist"
    tree = parse_file(sample_path)
    assert tree is not None
    assert not tree.root_node.has_error
    assert tree.root_node.type == "program"


def test_parse_file_nonexistent(caplog):
    """parse_file() on nonexistent path returns None and logs error."""
    with caplog.at_level(logging.ERROR):
        tree = parse_file(Path("/nonexistent/sample.rb"))
    assert tree is None
    assert "Failed to read" in caplog.text
