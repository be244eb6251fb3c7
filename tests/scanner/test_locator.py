"""Tests for the comment locator state machine."""

import pytest

from tudu.errors import WarningKind
from tudu.scanner.locator import CommentLocator, LexState, LineIndex, locate_comments
from tudu.scanner.records import CommentStyle
from tudu.syntax import C_STYLE, MARKUP, PYTHON, CommentSyntaxConfig


def bodies(source, syntax=C_STYLE):
    return [span.body(source) for span in locate_comments(source, syntax)]


class TestLineComments:
    def test_line_comment_runs_to_end_of_line(self):
        source = "int x = 1; // trailing note\nint y;"
        spans = list(locate_comments(source, C_STYLE))

        assert len(spans) == 1
        span = spans[0]
        assert span.style is CommentStyle.LINE
        assert span.text(source) == "// trailing note"
        assert span.body(source) == " trailing note"

    def test_crlf_is_not_part_of_the_comment(self):
        source = "// first\r\n// second\r\n"
        assert bodies(source) == [" first", " second"]

    def test_comment_at_end_of_input_without_newline(self):
        assert bodies("x = 1 // last") == [" last"]

    def test_no_comments(self):
        assert bodies("let a = b / c * d;\n") == []


class TestBlockComments:
    def test_block_comment_spans_lines(self):
        source = "a();\n/* one\n * two\n */\nb();"
        spans = list(locate_comments(source, C_STYLE))

        assert len(spans) == 1
        assert spans[0].style is CommentStyle.BLOCK
        assert spans[0].body(source) == " one\n * two\n "
        assert spans[0].text(source).endswith("*/")

    def test_block_comment_hides_line_opener(self):
        source = "/* see // not a new comment */ code(); // real"
        assert bodies(source) == [" see // not a new comment ", " real"]

    def test_unterminated_block_comment_runs_to_end_and_warns(self):
        source = "x();\n/* TODO: never closed\nmore"
        locator = CommentLocator(source, C_STYLE)
        spans = list(locator)

        assert len(spans) == 1
        assert spans[0].end == len(source)
        assert len(locator.warnings) == 1
        warning = locator.warnings[0]
        assert warning.kind is WarningKind.UNTERMINATED_COMMENT
        assert warning.offset == 5
        assert (warning.line, warning.column) == (2, 1)

    def test_markup_comments(self):
        source = "<p>hi</p>\n<!-- TODO: fix layout -->\n"
        assert bodies(source, MARKUP) == [" TODO: fix layout "]


class TestStringLiterals:
    @pytest.mark.parametrize(
        "source",
        [
            'url = "http://example.com";',
            "s = 'a /* b */ c';",
            'msg = "escaped \\" // still string";',
            "t = `multi\nline // template`;",
        ],
    )
    def test_openers_inside_strings_are_ignored(self, source):
        assert bodies(source) == []

    def test_comment_after_string(self):
        source = 'log("TODO"); // TODO: real one'
        assert bodies(source) == [" TODO: real one"]

    def test_single_line_string_ends_at_newline(self):
        source = "x = 'unterminated\n// comment"
        assert bodies(source) == [" comment"]

    def test_python_triple_quoted_strings(self):
        source = 'doc = """\n# not a comment\n"""\n# a comment\n'
        assert bodies(source, PYTHON) == [" a comment"]


class TestLocatorState:
    def test_state_returns_to_code(self):
        locator = CommentLocator("a // b\n", C_STYLE)
        states = []
        for _ in locator:
            states.append(locator.state)
        assert states == [LexState.IN_LINE_COMMENT]
        assert locator.state is LexState.CODE

    def test_spans_are_lazy(self):
        locator = iter(CommentLocator("// a\n// b\n", C_STYLE))
        first = next(locator)
        assert first.start == 0

    def test_syntax_without_strings(self):
        syntax = CommentSyntaxConfig(line_comment_prefixes=(";",), block_comment_delimiters=(), string_delimiters=())
        assert bodies('x "; y" ; z', syntax) == [' y" ; z']


class TestLineIndex:
    def test_positions_are_one_based(self):
        index = LineIndex("ab\ncd\n\nef")
        assert index.position(0) == (1, 1)
        assert index.position(1) == (1, 2)
        assert index.position(3) == (2, 1)
        assert index.position(6) == (3, 1)
        assert index.position(7) == (4, 1)
