"""Tests for marker recognition and classification."""

import pytest

from tudu.scanner.locator import locate_comments
from tudu.scanner.recognizer import MarkerForm, MarkerRecognizer, classify
from tudu.syntax import C_STYLE


def raw_markers(source, syntax=C_STYLE):
    recognizer = MarkerRecognizer(source, syntax)
    markers = []
    for span in locate_comments(source, syntax):
        markers.extend(recognizer.markers(span))
    return markers


class TestRecognition:
    def test_keyword_after_line_opener(self):
        [marker] = raw_markers("// TODO: add tests")
        assert marker.keyword == "TODO"
        assert marker.position == 3
        assert marker.trailing_text == ": add tests"

    @pytest.mark.parametrize(
        "source",
        [
            "// This is just text with TODO in it",
            "// TODOS: plural is another word",
            "// TODO_LIST: identifier",
            "// todo: lowercase",
            "function todoApp() {}",
            'let TODO = "this is a variable";',
            'console.log("TODO: inside a string");',
        ],
    )
    def test_not_a_marker(self, source):
        assert raw_markers(source) == []

    def test_decoration_is_skipped(self):
        assert [m.keyword for m in raw_markers("/// FIXME: doc comment")] == ["FIXME"]
        assert [m.keyword for m in raw_markers("/** TODO: javadoc */")] == ["TODO"]

    def test_one_marker_per_comment_line(self):
        [marker] = raw_markers("// FIXME TODO: both")
        assert marker.keyword == "FIXME"
        assert marker.trailing_text == " TODO: both"

    def test_block_comment_lines(self):
        source = "/*\n * TODO(TASK-1): first\n * continues here\n *\n * FIXME: second\n */"
        first, second = raw_markers(source)
        assert first.keyword == "TODO"
        assert first.trailing_text == "(TASK-1): first\ncontinues here"
        assert second.keyword == "FIXME"
        assert second.trailing_text == ": second"

    def test_continuation_stops_at_next_marker(self):
        source = "/* TODO: one\n   TODO: two */"
        first, second = raw_markers(source)
        assert first.trailing_text == ": one"
        assert second.trailing_text == ": two "

    def test_line_comments_do_not_continue(self):
        first, = raw_markers("// TODO: one\n// more text\n")
        assert first.trailing_text == ": one"

    def test_case_insensitive_keywords(self):
        syntax = C_STYLE.with_keywords(["TODO"], match_case_insensitive=True)
        [marker] = raw_markers("// todo: lower case", syntax)
        assert marker.keyword == "TODO"

    def test_custom_keywords(self):
        syntax = C_STYLE.with_keywords(["HACK", "TODO"])
        assert [m.keyword for m in raw_markers("// HACK: x\n// FIXME: y\n", syntax)] == ["HACK"]


class TestClassification:
    def test_plain(self):
        [marker] = raw_markers("// TODO: implement user authentication")
        shape = classify(marker)
        assert shape.form is MarkerForm.PLAIN
        assert shape.description == "implement user authentication"

    def test_plain_without_colon(self):
        [marker] = raw_markers("// TODO add cache")
        assert classify(marker).description == "add cache"

    def test_parenthesized(self):
        [marker] = raw_markers("// TODO(TASK-100, bidir): implement two-way sync")
        shape = classify(marker)
        assert shape.form is MarkerForm.PARENTHESIZED
        assert shape.section == "TASK-100, bidir"
        assert shape.description == "implement two-way sync"

    def test_parentheses_in_description(self):
        [marker] = raw_markers("// TODO(TASK-1): call foo(bar) later")
        shape = classify(marker)
        assert shape.section == "TASK-1"
        assert shape.description == "call foo(bar) later"

    def test_missing_closing_parenthesis(self):
        [marker] = raw_markers("// TODO(TASK-1, bidir: oops")
        shape = classify(marker)
        assert shape.form is MarkerForm.PARENTHESIZED
        assert shape.section == "TASK-1, bidir: oops"
        assert shape.description == ""
        assert shape.problems == ("missing closing parenthesis",)

    def test_unbalanced_open_parenthesis_keeps_description(self):
        [marker] = raw_markers("// TODO(TASK-1, note=(draft): real description")
        shape = classify(marker)
        assert shape.form is MarkerForm.PARENTHESIZED
        assert shape.section == "TASK-1, note=(draft"
        assert shape.description == "real description"
        assert shape.problems == ()

    def test_closing_parenthesis_inside_quotes_is_skipped(self):
        [marker] = raw_markers('// TODO(TASK-1, a=("x)": desc')
        shape = classify(marker)
        assert shape.section == 'TASK-1, a=("x)": desc'
        assert shape.description == ""
        assert shape.problems == ("missing closing parenthesis",)

    def test_legacy(self):
        [marker] = raw_markers("// TODO TASK-567: old style without parentheses")
        shape = classify(marker)
        assert shape.form is MarkerForm.LEGACY
        assert str(shape.legacy_id) == "TASK-567"
        assert shape.description == "old style without parentheses"

    def test_legacy_requires_colon(self):
        [marker] = raw_markers("// TODO TASK-567 no colon")
        shape = classify(marker)
        assert shape.form is MarkerForm.PLAIN
        assert shape.description == "TASK-567 no colon"

    def test_block_description_is_joined(self):
        source = "/* \n * TODO(TASK-777): multi-line block comment\n * with additional description\n */"
        [marker] = raw_markers(source)
        assert classify(marker).description == "multi-line block comment with additional description"
