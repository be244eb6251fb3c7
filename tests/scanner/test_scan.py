"""End-to-end tests for the scan pipeline."""

import pytest

from tudu import ConfigurationError, scan
from tudu.errors import WarningKind
from tudu.scanner import MarkerKind, Scanner, render_comment, render_marker
from tudu.scanner.records import AttributeKind, CommentStyle
from tudu.syntax import C_STYLE, PYTHON, CommentSyntaxConfig


def only_record(source, syntax=C_STYLE):
    records, warnings = scan(source, syntax)
    assert len(records) == 1
    return records[0], warnings


class TestSpecExamples:
    def test_no_comment_syntax_means_no_records(self):
        records, warnings = scan("const total = price * qty / 2;\nreturn total;\n")
        assert records == ()
        assert warnings == ()

    def test_empty_parentheses(self):
        record, warnings = only_record("// TODO(): desc")
        assert record.id is None
        assert len(record.attributes) == 0
        assert record.description == "desc"
        assert record.kind is MarkerKind.UNTRACKED
        assert warnings == ()

    def test_lowercase_token_is_untracked(self):
        record, warnings = only_record("// TODO(not-an-id): desc")
        assert record.id is None
        assert record.kind is MarkerKind.UNTRACKED
        assert record.attributes.keys() == ["not-an-id"]
        assert warnings == ()

    def test_tracked(self):
        record, _ = only_record("// TODO(TASK-123): desc")
        assert (record.id.prefix, record.id.number) == ("TASK", "123")
        assert str(record.id) == "TASK-123"
        assert len(record.attributes) == 0
        assert record.kind is MarkerKind.TRACKED

    def test_flag_attribute(self):
        record, _ = only_record("// TODO(TASK-100, bidir): desc")
        assert str(record.id) == "TASK-100"
        [attribute] = record.attributes
        assert attribute.kind is AttributeKind.FLAG
        assert (attribute.key, attribute.value) == ("bidir", True)

    def test_list_attribute(self):
        record, _ = only_record("// TODO(BUG-200, labels=urgent,backend): desc")
        assert str(record.id) == "BUG-200"
        assert record.attributes.get("labels") == "urgent,backend"
        assert record.attributes[0].values == ["urgent", "backend"]

    def test_values_with_spaces(self):
        record, _ = only_record("// TODO(BUG-999, status=In Progress, prop.priority=high): desc")
        assert [(a.key, a.value) for a in record.attributes] == [
            ("status", "In Progress"),
            ("prop.priority", "high"),
        ]

    def test_legacy(self):
        record, _ = only_record("// TODO TASK-567: desc")
        assert str(record.id) == "TASK-567"
        assert len(record.attributes) == 0
        assert record.kind is MarkerKind.LEGACY

    @pytest.mark.parametrize(
        "source",
        [
            "function todoApp() { return 1; }",
            'let TODO = "value";',
            'const s = "TODO: not a comment";',
            "const t = `// TODO: template literal`;",
        ],
    )
    def test_false_positives(self, source):
        assert scan(source).records == ()


class TestWarnings:
    def test_malformed_section_keeps_record(self):
        record, warnings = only_record("// TODO(TASK-1, bidir,): desc")
        assert str(record.id) == "TASK-1"
        assert record.attributes.keys() == ["bidir"]
        assert record.description == "desc"
        assert len(warnings) == 1
        assert warnings[0].kind is WarningKind.MALFORMED_ATTRIBUTE_SECTION
        assert warnings[0].marker == "TASK-1"
        assert record.warnings == warnings

    def test_missing_closing_parenthesis(self):
        record, warnings = only_record("// TODO(TASK-1, bidir")
        assert str(record.id) == "TASK-1"
        assert record.attributes.keys() == ["bidir"]
        assert [w.kind for w in warnings] == [WarningKind.MALFORMED_ATTRIBUTE_SECTION]
        assert "missing closing parenthesis" in warnings[0].message

    def test_nested_open_parenthesis(self):
        record, warnings = only_record("// TODO(TASK-1, note=(draft): real description")
        assert str(record.id) == "TASK-1"
        assert record.description == "real description"
        assert record.attributes.get("note") == "(draft"
        assert [w.kind for w in warnings] == [WarningKind.MALFORMED_ATTRIBUTE_SECTION]
        assert "nested parentheses" in warnings[0].message
        assert "missing closing parenthesis" not in warnings[0].message

    def test_duplicate_keys(self):
        record, warnings = only_record("// TODO(TASK-1, assignee=alice, assignee=bob): desc")
        assert record.attributes.get_all("assignee") == ["alice", "bob"]
        assert [w.kind for w in warnings] == [WarningKind.DUPLICATE_ATTRIBUTE_KEY]
        assert "assignee" in warnings[0].message

    def test_unterminated_block_comment(self):
        records, warnings = scan("code();\n/* TODO(TASK-9): never closed\n")
        assert [str(r.id) for r in records] == ["TASK-9"]
        assert [w.kind for w in warnings] == [WarningKind.UNTERMINATED_COMMENT]
        assert warnings[0].marker is None
        assert records[0].warnings == ()

    def test_warnings_in_source_order(self):
        source = "// TODO(A-1, x,): one\n/* TODO(B-2, k=1, k=2): two"
        _, warnings = scan(source)
        assert [w.kind for w in warnings] == [
            WarningKind.MALFORMED_ATTRIBUTE_SECTION,
            WarningKind.UNTERMINATED_COMMENT,
            WarningKind.DUPLICATE_ATTRIBUTE_KEY,
        ]


class TestConfiguration:
    def test_empty_keyword_set_is_rejected(self):
        with pytest.raises(ConfigurationError):
            scan("// TODO: x", C_STYLE.with_keywords([]))

    def test_invalid_keyword_is_rejected(self):
        with pytest.raises(ConfigurationError):
            Scanner(C_STYLE.with_keywords(["TO DO"]))

    def test_syntax_without_comments_is_rejected(self):
        syntax = CommentSyntaxConfig(line_comment_prefixes=(), block_comment_delimiters=())
        with pytest.raises(ConfigurationError):
            scan("x", syntax)

    def test_sets_are_accepted(self):
        syntax = CommentSyntaxConfig(
            line_comment_prefixes={"#", "//"},
            block_comment_delimiters={("/*", "*/")},
            keywords={"FIXME", "TODO"},
        )
        records, _ = scan("# TODO: a\n// FIXME: b\n/* TODO: c */", syntax)
        assert [r.description for r in records] == ["a", "b", "c"]

    def test_python_syntax(self):
        source = 'x = "# TODO: not here"\n# TODO(PY-1): real one\n'
        records, _ = scan(source, PYTHON)
        assert [str(r.id) for r in records] == ["PY-1"]


class TestFixture:
    def test_record_count_and_kinds(self, dummy_js):
        records, warnings = scan(dummy_js)

        assert len(records) == 30
        assert warnings == ()
        kinds = [record.kind for record in records]
        assert kinds.count(MarkerKind.UNTRACKED) == 8
        assert kinds.count(MarkerKind.LEGACY) == 2
        assert kinds.count(MarkerKind.TRACKED) == 20

    def test_no_false_positives(self, dummy_js):
        lines = {record.location.line for record in scan(dummy_js).records}
        assert not lines & {1, 3, 9, 15, 32, 34, 35}

    def test_record_locations(self, dummy_js):
        records = scan(dummy_js).records
        first = records[0]
        assert (first.location.line, first.location.column) == (4, 4)
        assert first.location.comment.style is CommentStyle.LINE

        redis = next(r for r in records if r.description == "add Redis cache here")
        assert (redis.location.line, redis.location.column) == (58, 31)

    def test_block_comments(self, dummy_js):
        records = scan(dummy_js).records
        multi = next(r for r in records if str(r.id) == "TASK-777")
        assert multi.location.line == 40
        assert multi.location.comment.style is CommentStyle.BLOCK
        assert multi.description == "multi-line block comment with additional description"

        inline = next(r for r in records if str(r.id) == "BUG-888")
        assert inline.attributes.get("labels") == "critical"
        assert inline.description == "another block style"

    def test_notion_attributes(self, dummy_js):
        records = scan(dummy_js).records
        record = next(r for r in records if str(r.id) == "TASK-2000")
        assert record.attributes.as_dict() == {
            "labels": "feature",
            "status": "Todo",
            "section": "parser",
            "db": "tasks",
        }

    def test_idempotent(self, dummy_js):
        first = scan(dummy_js)
        second = scan(dummy_js)
        assert first == second
        assert [r.to_dict() for r in first.records] == [r.to_dict() for r in second.records]

    def test_round_trip(self, dummy_js):
        for record in scan(dummy_js).records:
            rescanned, warnings = only_record(render_comment(record))
            assert warnings == ()
            assert rescanned.keyword == record.keyword
            assert rescanned.id == record.id
            assert rescanned.kind == record.kind
            assert rescanned.attributes == record.attributes
            assert rescanned.description == record.description


class TestRendering:
    @pytest.mark.parametrize(
        "marker",
        [
            "TODO: plain",
            "FIXME(BUG-1): tracked",
            "TODO(TASK-1, bidir, labels=a,b, status=In Progress): attrs",
            "TODO TASK-567: legacy",
            'TODO(TASK-2, query="a=b, c"): quoted',
        ],
    )
    def test_render_round_trip(self, marker):
        record, _ = only_record(f"// {marker}")
        assert render_marker(record) == marker

    def test_new_reference(self):
        record, _ = only_record('// TODO(new="Create user service"): desc')
        assert record.is_new
        assert record.new_title == "Create user service"
        assert record.id is None
        assert render_marker(record) == "TODO(new=Create user service): desc"
