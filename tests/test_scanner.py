"""
Comment scanner tests

Tests line and block comment detection, absorption of the other comment
kind, and unterminated comments.
"""

import pytest

from docgen.lib.scanner import comments_scan, nextComment_find
from docgen.models.source import CommentSpan


class TestLineComments:
    """Test // comments"""

    def test_line_comment_offsets(self):
        """Span ends at the newline, body is stripped"""
        spans = comments_scan("int x; // hello\nint y;")
        assert spans == [CommentSpan(start_offset=7, end_offset=15, body="hello")]

    def test_line_comment_at_end_of_text(self):
        """A final line comment without newline ends at text length"""
        spans = comments_scan("// tail")
        assert len(spans) == 1
        assert spans[0].end_offset == 7
        assert spans[0].body == "tail"

    def test_block_marker_inside_line_comment_is_inert(self):
        """/* inside a line comment does not open a block"""
        spans = comments_scan("// a /* b\nc */ d")
        assert [s.body for s in spans] == ["a /* b"]


class TestBlockComments:
    """Test /* */ comments"""

    def test_block_comment_offsets(self):
        """Span covers both markers"""
        spans = comments_scan("a /* b */ c")
        assert spans == [CommentSpan(start_offset=2, end_offset=9, body="b")]

    def test_line_marker_inside_block_is_absorbed(self):
        """// inside a block comment is part of the block"""
        spans = comments_scan("/* a // b */ x")
        assert len(spans) == 1
        assert spans[0].body == "a // b"

    def test_unterminated_block_comment(self):
        """Unterminated block yields one span ending at text length"""
        text = "x /* never closed\nint y;"
        spans = comments_scan(text)
        assert len(spans) == 1
        assert spans[0].end_offset == len(text)
        assert spans[0].body == "never closed\nint y;"

    def test_multiline_block_body(self):
        """Block bodies keep inner newlines"""
        spans = comments_scan("/*\n * one\n * two\n */")
        assert spans[0].body == "* one\n * two"


class TestOrdering:
    """Test scanning of several comments"""

    def test_comments_in_source_order(self):
        """Spans are earliest-first and non-overlapping"""
        text = "/* a */ x; // b\n/* c */"
        spans = comments_scan(text)
        assert [s.body for s in spans] == ["a", "b", "c"]
        for first, second in zip(spans, spans[1:]):
            assert first.end_offset <= second.start_offset

    def test_no_comments(self):
        """Text without comments yields no spans"""
        assert comments_scan("int main() { return 0; }") == []
        assert comments_scan("") == []

    def test_next_comment_find(self):
        """Finds the nearest opener of either kind"""
        text = "a; // one\nb; /* two */"
        assert nextComment_find(text, 0) == 3
        assert nextComment_find(text, 4) == 13
        assert nextComment_find(text, 14) == len(text)
