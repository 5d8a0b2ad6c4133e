# -*- coding: utf-8 -*-
"""Location: ./tests/unit/toontodo/test_toon.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0

Unit tests for the TOON table and settings codecs.
"""

# Third-Party
import pytest

# First-Party
from toontodo.schemas import AppSettings, Project, Todo, WindowBounds
from toontodo.toon import (
    _encode_cell,
    _split_row_values,
    decode_records,
    decode_settings,
    decode_table,
    encode_records,
    encode_settings,
    encode_table,
    FormatError,
    PROJECTS_TABLE,
    TODOS_TABLE,
)


class TestEncodeTable:
    """Encoding of uniform record tables."""

    def test_exact_layout(self):
        """Header, two-space rows, blank line, version trailer."""
        rows = [
            {"id": "a1", "text": "Buy milk", "completed": False, "createdAt": "2025-11-20T10:00:00.000Z"},
            {"id": "a2", "text": "Call Bob", "completed": True, "createdAt": "2025-11-20T11:00:00.000Z"},
        ]
        text = encode_table(rows, TODOS_TABLE.fields, "todos", "1.0")
        assert text == (
            "todos[2]{id,text,completed,createdAt}:\n"
            "  a1,Buy milk,false,2025-11-20T10:00:00.000Z\n"
            "  a2,Call Bob,true,2025-11-20T11:00:00.000Z\n"
            "\n"
            "version: 1.0"
        )

    def test_empty_collection(self):
        """No rows: header straight into the trailer."""
        assert encode_table([], ["id", "name", "createdAt"], "projects", "2.0") == "projects[0]{id,name,createdAt}:\n\nversion: 2.0"

    def test_no_trailing_newline(self):
        text = encode_table([{"id": "x"}], ["id"], "todos", "1.0")
        assert not text.endswith("\n")

    def test_unknown_keys_ignored(self):
        """Only the declared fields are written, in declared order."""
        text = encode_table([{"name": "n", "id": "i", "extra": "zzz"}], ["id", "name"], "projects", "2.0")
        assert "  i,n\n" in text
        assert "zzz" not in text


class TestCellQuoting:
    """CSV-style quoting of individual cells."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("plain", "plain"),
            ("with space", "with space"),
            ("colon: ok", "colon: ok"),
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("two\nlines", '"two\nlines"'),
            (False, "false"),
        ],
    )
    def test_quoting(self, value, expected):
        assert _encode_cell(value) == expected

    def test_split_handles_doubled_quotes(self):
        values, terminated = _split_row_values('id1,"He said ""yes"", then left",true,ts')
        assert terminated
        assert values == ["id1", 'He said "yes", then left', "true", "ts"]


class TestDecodeTable:
    """Strict table decoding."""

    FIELDS = ["id", "text", "completed", "createdAt"]

    def test_decode_basic(self):
        text = "todos[1]{id,text,completed,createdAt}:\n  a1,Buy milk,false,2025-11-20T10:00:00.000Z\n\nversion: 1.0"
        assert decode_table(text, "todos", self.FIELDS) == [
            {"id": "a1", "text": "Buy milk", "completed": "false", "createdAt": "2025-11-20T10:00:00.000Z"},
        ]

    def test_decode_without_trailer(self):
        text = "todos[1]{id,text,completed,createdAt}:\n  a1,Buy milk,false,ts"
        assert decode_table(text, "todos", self.FIELDS)[0]["text"] == "Buy milk"

    def test_count_mismatch_is_not_checked(self):
        text = "todos[5]{id,text,completed,createdAt}:\n  a1,Buy milk,false,ts\n\nversion: 1.0"
        assert len(decode_table(text, "todos", self.FIELDS)) == 1

    def test_embedded_newline_across_physical_lines(self):
        text = 'todos[1]{id,text,completed,createdAt}:\n  a1,"first\nsecond",false,ts\n\nversion: 1.0'
        assert decode_table(text, "todos", self.FIELDS)[0]["text"] == "first\nsecond"

    def test_value_containing_version_marker(self):
        """A quoted value may itself contain a blank line followed by ``version:``."""
        rows = [{"id": "a1", "text": "notes\n\nversion: 9", "completed": False, "createdAt": "ts"}]
        text = encode_table(rows, self.FIELDS, "todos", "1.0")
        assert decode_table(text, "todos", self.FIELDS)[0]["text"] == "notes\n\nversion: 9"

    def test_crlf_inside_quotes(self):
        rows = [{"id": "a1", "text": "win\r\nline", "completed": True, "createdAt": "ts"}]
        text = encode_table(rows, self.FIELDS, "todos", "1.0")
        assert decode_table(text, "todos", self.FIELDS)[0]["text"] == "win\r\nline"

    @pytest.mark.parametrize("text", ["", "   \n\n", "\n\nversion: 1.0"])
    def test_empty_content(self, text):
        with pytest.raises(FormatError, match="Empty TOON content"):
            decode_table(text, "todos", self.FIELDS)

    def test_invalid_header(self):
        with pytest.raises(FormatError, match="Invalid TOON header format") as exc_info:
            decode_table("invalid content", "todos", self.FIELDS)
        assert exc_info.value.operation == "decode_table:todos"
        assert exc_info.value.row is None

    def test_wrong_label(self):
        text = "projects[0]{id,text,completed,createdAt}:\n\nversion: 1.0"
        with pytest.raises(FormatError, match="Invalid TOON header format"):
            decode_table(text, "todos", self.FIELDS)

    def test_wrong_field_list(self):
        text = "todos[0]{id,title,completed,createdAt}:\n\nversion: 1.0"
        with pytest.raises(FormatError, match="Invalid TOON header format"):
            decode_table(text, "todos", self.FIELDS)

    def test_wrong_field_count(self):
        text = "todos[1]{id,text,completed,createdAt}:\n  a1,Buy milk,false\n\nversion: 1.0"
        with pytest.raises(FormatError, match="Invalid TOON row 0: expected 4 fields, got 3") as exc_info:
            decode_table(text, "todos", self.FIELDS)
        assert exc_info.value.row == 0

    def test_missing_required_field(self):
        text = "todos[2]{id,text,completed,createdAt}:\n  a1,ok,false,ts\n  a2,,false,ts\n\nversion: 1.0"
        with pytest.raises(FormatError, match="Invalid TOON row 1: missing required field") as exc_info:
            decode_table(text, "todos", self.FIELDS)
        assert exc_info.value.row == 1

    def test_unterminated_quote(self):
        text = 'todos[1]{id,text,completed,createdAt}:\n  a1,"never closed,false,ts\n\nversion: 1.0'
        with pytest.raises(FormatError, match="unterminated quoted field"):
            decode_table(text, "todos", self.FIELDS)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_table("nope", "todos", self.FIELDS)


class TestRecords:
    """Typed record round-trips through the table codec."""

    def test_todos_round_trip(self, sample_todos):
        text = encode_records(sample_todos, TODOS_TABLE)
        assert text.startswith("todos[3]{id,text,completed,createdAt}:")
        assert text.endswith("version: 1.0")
        assert decode_records(text, TODOS_TABLE) == sample_todos

    def test_projects_round_trip(self, sample_projects):
        text = encode_records(sample_projects, PROJECTS_TABLE)
        assert text.startswith("projects[2]{id,name,createdAt}:")
        assert text.endswith("version: 2.0")
        assert decode_records(text, PROJECTS_TABLE) == sample_projects

    def test_comma_and_quote_texts_round_trip(self):
        todos = [
            Todo(id="c1", text="Task with, comma", completed=False, created_at="2025-11-20T10:00:00.000Z"),
            Todo(id="c2", text='Task with "quotes"', completed=True, created_at="2025-11-20T11:00:00.000Z"),
        ]
        text = encode_records(todos, TODOS_TABLE)
        assert '  c1,"Task with, comma",false,2025-11-20T10:00:00.000Z' in text
        assert '  c2,"Task with ""quotes""",true,2025-11-20T11:00:00.000Z' in text
        assert decode_records(text, TODOS_TABLE) == todos

    def test_empty_round_trip(self):
        assert decode_records(encode_records([], PROJECTS_TABLE), PROJECTS_TABLE) == []

    def test_order_preserved(self):
        todos = [Todo(id=f"t{i}", text=f"item {i}", completed=bool(i % 2), created_at="ts") for i in range(10)]
        assert [t.id for t in decode_records(encode_records(todos, TODOS_TABLE), TODOS_TABLE)] == [f"t{i}" for i in range(10)]

    def test_completed_only_true_literal(self):
        text = "todos[3]{id,text,completed,createdAt}:\n  a,x,true,ts\n  b,y,TRUE,ts\n  c,z,yes,ts\n\nversion: 1.0"
        assert [t.completed for t in decode_records(text, TODOS_TABLE)] == [True, False, False]

    def test_inner_spacing_preserved(self):
        """Rows are stripped as a whole; spacing inside a cell is kept."""
        projects = [Project(id="p1", name="A  B", created_at="ts")]
        assert decode_records(encode_records(projects, PROJECTS_TABLE), PROJECTS_TABLE)[0].name == "A  B"


class TestSettingsCodec:
    """Settings encoding and permissive decoding."""

    def test_encode_layout(self):
        settings = AppSettings(active_project_id="550e8400-e29b-41d4-a716-446655440000", window_bounds=WindowBounds(x=100, y=100, width=600, height=400))
        assert encode_settings(settings) == (
            "activeProjectId: 550e8400-e29b-41d4-a716-446655440000\n"
            "windowBounds{x,y,width,height}: 100,100,600,400\n"
            "version: 1.0"
        )

    def test_round_trip(self):
        settings = AppSettings(active_project_id="p1", window_bounds=WindowBounds(x=-50, y=20, width=1280, height=720))
        assert decode_settings(encode_settings(settings)) == settings

    def test_empty_active_project_round_trip(self):
        assert decode_settings(encode_settings(AppSettings())).active_project_id == ""

    def test_missing_lines_use_defaults(self):
        decoded = decode_settings("activeProjectId: p1")
        assert decoded.active_project_id == "p1"
        assert decoded.window_bounds.as_tuple() == (100, 100, 600, 400)
        assert decoded.version == "1.0"

    def test_unknown_and_reordered_lines(self):
        text = "theme: dark\nversion: 1.0\n  windowBounds{x,y,width,height}: 1, 2, 3, 4\nactiveProjectId: p7\n"
        decoded = decode_settings(text)
        assert decoded.active_project_id == "p7"
        assert decoded.window_bounds.as_tuple() == (1, 2, 3, 4)

    def test_non_numeric_bounds(self):
        with pytest.raises(FormatError, match="Invalid windowBounds values") as exc_info:
            decode_settings("windowBounds{x,y,width,height}: 100,abc,600,400")
        assert exc_info.value.operation == "decode_settings"

    @pytest.mark.parametrize("value", ["1,2,3", "1,2,3,4,5", ""])
    def test_wrong_bounds_arity(self, value):
        with pytest.raises(FormatError, match="Invalid windowBounds values"):
            decode_settings(f"windowBounds{{x,y,width,height}}: {value}")
