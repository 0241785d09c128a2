"""Tests for loading violation reports."""

import json

import pytest

from revsync_core.errors import ReportError
from revsync_core.models import ERROR, MARKDOWN, MESSAGE, WARNING, Violation
from revsync_core.report import load_report, parse_report


class TestParseReport:
    def test_full_report(self):
        groups = parse_report(
            {
                "warnings": [{"message": "Unused import", "file": "src/app.py", "line": 3, "sticky": True}],
                "errors": ["Build failed"],
                "messages": [{"content": "Thanks!"}],
                "markdowns": ["## Coverage"],
            }
        )
        assert groups[WARNING] == [Violation(WARNING, "Unused import", "src/app.py", 3, sticky=True)]
        assert groups[ERROR] == [Violation(ERROR, "Build failed")]
        assert groups[MESSAGE] == [Violation(MESSAGE, "Thanks!")]
        assert groups[MARKDOWN] == [Violation(MARKDOWN, "## Coverage")]

    def test_empty_report(self):
        assert all(v == [] for v in parse_report(None).values())

    def test_missing_sections_are_empty(self):
        assert parse_report({"errors": ["x"]})[WARNING] == []

    def test_unknown_section_rejected(self):
        with pytest.raises(ReportError, match="notices"):
            parse_report({"notices": []})

    def test_missing_message_rejected(self):
        with pytest.raises(ReportError, match=r"warnings\[0\]"):
            parse_report({"warnings": [{"file": "a.py"}]})

    def test_non_integer_line_rejected(self):
        with pytest.raises(ReportError, match="line"):
            parse_report({"errors": [{"message": "x", "file": "a.py", "line": "3"}]})

    def test_section_must_be_list(self):
        with pytest.raises(ReportError, match="'errors' must be a list"):
            parse_report({"errors": "oops"})

    def test_top_level_must_be_mapping(self):
        with pytest.raises(ReportError):
            parse_report(["warnings"])


class TestLoadReport:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "report.yml"
        path.write_text("warnings:\n  - message: W1\n    file: a.py\n    line: 2\n")
        assert load_report(str(path))[WARNING] == [Violation(WARNING, "W1", "a.py", 2)]

    def test_reads_json(self, tmp_path):
        path = tmp_path / "report.json"
        path.write_text(json.dumps({"errors": [{"message": "E1"}]}))
        assert load_report(str(path))[ERROR] == [Violation(ERROR, "E1")]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReportError, match="not found"):
            load_report(str(tmp_path / "nope.yml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "report.yml"
        path.write_text("warnings: [unclosed\n")
        with pytest.raises(ReportError, match="Could not parse"):
            load_report(str(path))
