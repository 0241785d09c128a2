"""Tests for comment body rendering and parsing."""

import base64

from revsync_core.codec import (
    first_violation,
    is_generated_by,
    marker,
    parse_comment,
    render_inline,
    render_summary,
    resolved_violations,
)
from revsync_core.models import ERROR, KINDS, MARKDOWN, MESSAGE, WARNING, Comment, Violation, empty_groups


def v(kind=WARNING, content="x", file=None, line=None, sticky=False):
    return Violation(kind, content, file=file, line=line, sticky=sticky)


class TestMarker:
    def test_rendered_bodies_are_tool_authored(self):
        assert is_generated_by(render_inline(v(file="a.py", line=1), "lint"), "lint")
        assert is_generated_by(render_summary({WARNING: [v()]}, empty_groups(), "lint"), "lint")

    def test_marker_is_exact(self):
        body = render_summary({WARNING: [v()]}, empty_groups(), "lint-strict")
        assert not is_generated_by(body, "lint")
        assert is_generated_by(body, "lint-strict")

    def test_human_comment_mentioning_tool_is_not_tool_authored(self):
        assert not is_generated_by("generated_by lint, please check", "lint")

    def test_none_body(self):
        assert is_generated_by(None, "danger") is False

    def test_comment_model_uses_marker(self):
        comment = Comment(id=1, body=f"hello\n{marker('danger')}")
        assert comment.is_generated_by("danger")
        assert not comment.is_generated_by("other")


class TestRoundTrip:
    def test_summary_round_trip_for_every_kind(self):
        groups = {
            WARNING: [v(WARNING, "w | pipe", "a.py", 3, sticky=True), v(WARNING, "plain")],
            ERROR: [v(ERROR, "multi\nline")],
            MESSAGE: [v(MESSAGE, "ünïcode ✓")],
            MARKDOWN: [v(MARKDOWN, "## Heading\n\n- item")],
        }
        assert parse_comment(render_summary(groups, empty_groups(), "danger")) == groups

    def test_inline_round_trip(self):
        original = v(ERROR, "bad", "src/a.py", 7, sticky=True)
        assert first_violation(render_inline(original, "danger")) == original

    def test_resolved_inline_keeps_violation(self):
        original = v(WARNING, "bad", "src/a.py", 7, sticky=True)
        assert first_violation(render_inline(original, "danger", resolved=True)) == original

    def test_content_with_comment_terminator_survives(self):
        original = v(WARNING, "watch out --> here <!-- x -->", "a.py", 1)
        assert first_violation(render_inline(original, "danger")) == original


class TestParse:
    def test_body_without_payload_is_empty(self):
        groups = parse_comment("Just a human comment")
        assert groups == {kind: [] for kind in KINDS}

    def test_corrupted_payload_is_empty(self):
        assert parse_comment("<!-- revsync-violations: !!!notbase64 -->") == empty_groups()
        garbage = base64.b64encode(b"{not json").decode()
        assert parse_comment(f"<!-- revsync-violations: {garbage} -->") == empty_groups()

    def test_malformed_entry_is_skipped(self):
        payload = base64.b64encode(b'{"warning": [{"file": "a.py"}, {"content": "ok"}]}').decode()
        groups = parse_comment(f"<!-- revsync-violations: {payload} -->")
        assert groups[WARNING] == [v(WARNING, "ok")]

    def test_first_violation_none_for_plain_body(self):
        assert first_violation("hello") is None


class TestRenderSummary:
    def test_table_per_kind(self):
        body = render_summary({WARNING: [v(WARNING, "w1"), v(WARNING, "w2")], ERROR: [v(ERROR, "e1")]}, {}, "d")
        assert "| | 2 Warnings |" in body
        assert "| | 1 Error |" in body
        assert "| :warning: | w1 |" in body
        assert "| :no_entry_sign: | e1 |" in body
        assert "Messages" not in body

    def test_pipe_and_newline_escaped_in_cell(self):
        body = render_summary({WARNING: [v(WARNING, "a|b\nc")]}, {}, "d")
        assert "| :warning: | a\\|b<br>c |" in body

    def test_markdowns_appended_verbatim(self):
        body = render_summary({MARKDOWN: [v(MARKDOWN, "## Coverage\n92%")]}, {}, "d")
        assert "## Coverage\n92%" in body

    def test_resolved_sticky_shown_struck_through(self):
        previous = {WARNING: [v(WARNING, "gone", sticky=True), v(WARNING, "gone too")]}
        body = render_summary({WARNING: []}, previous, "d")
        assert "| :white_check_mark: | ~~gone~~ |" in body
        assert "gone too" not in body.split("<sub>")[0]

    def test_resolved_entries_kept_in_payload(self):
        previous = {ERROR: [v(ERROR, "gone", sticky=True)]}
        body = render_summary(empty_groups(), previous, "d")
        assert parse_comment(body)[ERROR] == [v(ERROR, "gone", sticky=True)]

    def test_location_shown_for_inline_violation(self):
        body = render_summary({WARNING: [v(WARNING, "w", "src/a.py", 4)]}, {}, "d")
        assert "`src/a.py:4` w" in body


class TestRenderInline:
    def test_emoji_per_kind(self):
        assert render_inline(v(WARNING, "w", "a", 1), "d").startswith(":warning: w")
        assert render_inline(v(ERROR, "e", "a", 1), "d").startswith(":no_entry_sign: e")
        assert render_inline(v(MESSAGE, "m", "a", 1), "d").startswith(":book: m")

    def test_markdown_rendered_raw(self):
        assert render_inline(v(MARKDOWN, "**bold**", "a", 1), "d").startswith("**bold**\n")

    def test_resolved_is_struck_through(self):
        assert render_inline(v(WARNING, "w", "a", 1), "d", resolved=True).startswith(":white_check_mark: ~~w~~")


class TestResolvedViolations:
    def test_only_sticky_and_absent(self):
        still_there = v(content="a", sticky=True)
        gone = v(content="b", sticky=True)
        not_sticky = v(content="c")
        assert resolved_violations([still_there, gone, not_sticky], [v(content="a")]) == [gone]

    def test_duplicates_collapsed(self):
        gone = v(content="b", sticky=True)
        assert resolved_violations([gone, gone], []) == [gone]
