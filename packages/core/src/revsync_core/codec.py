"""Render violations into comment bodies and recover them from posted bodies.

Every body revsync posts carries two hidden HTML comments:

- a marker, ``<!-- generated_by: <danger_id> -->``, which identifies the
  comment as tool-authored for one danger id;
- a state payload, ``<!-- revsync-violations: <base64 json> -->``, which
  holds the violations the body shows so the next run can diff against them
  without scraping the visible markdown.

The visible part is plain GitHub-flavoured markdown and is never parsed.
"""

from __future__ import annotations

import base64
import json
import logging
import re

from revsync_core.models import (
    ERROR,
    KINDS,
    MARKDOWN,
    MESSAGE,
    WARNING,
    Violation,
    ViolationGroups,
    empty_groups,
    merge_groups,
)

logger = logging.getLogger(__name__)

_PAYLOAD_RE = re.compile(r"<!-- revsync-violations: ([A-Za-z0-9+/=]*) -->")

_EMOJI = {WARNING: ":warning:", ERROR: ":no_entry_sign:", MESSAGE: ":book:"}
_TITLES = {WARNING: ("Warning", "Warnings"), ERROR: ("Error", "Errors"), MESSAGE: ("Message", "Messages")}
_RESOLVED_EMOJI = ":white_check_mark:"
_FOOTER = "<sub>Generated by revsync</sub>"


def marker(danger_id: str) -> str:
    return f"<!-- generated_by: {danger_id} -->"


def is_generated_by(body: str | None, danger_id: str) -> bool:
    """True if ``body`` was rendered by revsync for ``danger_id``.

    Exact token match: the marker for "lint" does not match "lint-strict".
    """
    return marker(danger_id) in (body or "")


def _encode(groups: ViolationGroups) -> str:
    data = {
        kind: [{"content": v.content, "file": v.file, "line": v.line, "sticky": v.sticky} for v in violations]
        for kind, violations in groups.items()
        if violations
    }
    encoded = base64.b64encode(json.dumps(data, sort_keys=True).encode("utf-8")).decode("ascii")
    return f"<!-- revsync-violations: {encoded} -->"


def parse_comment(body: str | None) -> ViolationGroups:
    """Recover the violations embedded in a body rendered by this module.

    Returns empty groups for bodies without a payload or with a corrupted one.
    """
    groups = empty_groups()
    match = _PAYLOAD_RE.search(body or "")
    if not match:
        return groups

    try:
        data = json.loads(base64.b64decode(match.group(1), validate=True).decode("utf-8"))
    except ValueError as e:
        logger.debug("Ignoring unreadable violation payload: %s", e)
        return groups
    if not isinstance(data, dict):
        return groups

    for kind in KINDS:
        entries = data.get(kind) or []
        if not isinstance(entries, list):
            continue
        for entry in entries:
            try:
                groups[kind].append(
                    Violation(
                        kind=kind,
                        content=str(entry["content"]),
                        file=entry.get("file"),
                        line=entry.get("line"),
                        sticky=bool(entry.get("sticky", False)),
                    )
                )
            except (KeyError, TypeError, AttributeError):
                logger.debug("Skipping malformed %s entry in payload: %r", kind, entry)
    return groups


def first_violation(body: str | None) -> Violation | None:
    """The first violation in ``body`` in kind order — what an inline comment holds."""
    groups = parse_comment(body)
    for kind in KINDS:
        if groups[kind]:
            return groups[kind][0]
    return None


def _cell(text: str) -> str:
    """Make text safe inside a single markdown table cell."""
    return text.replace("|", "\\|").replace("\r\n", "<br>").replace("\n", "<br>")


def _location(violation: Violation) -> str:
    # Without inline comments the anchor would otherwise be lost.
    return f"`{violation.file}:{violation.line}` " if violation.is_inline else ""


def render_inline(violation: Violation, danger_id: str, resolved: bool = False) -> str:
    """Body of an anchored comment holding a single violation."""
    if resolved:
        text = f"{_RESOLVED_EMOJI} ~~{violation.content.strip()}~~"
    elif violation.kind == MARKDOWN:
        text = violation.content
    else:
        text = f"{_EMOJI[violation.kind]} {violation.content}"
    return "\n\n".join([text, marker(danger_id), _encode({violation.kind: [violation]})])


def resolved_violations(previous: list[Violation], current: list[Violation]) -> list[Violation]:
    """Sticky entries of ``previous`` that no longer appear in ``current``."""
    resolved: list[Violation] = []
    for p in previous:
        if not p.sticky:
            continue
        if any(p.is_equivalent(c) for c in current) or any(p.is_equivalent(r) for r in resolved):
            continue
        resolved.append(p)
    return resolved


def render_summary(violations: ViolationGroups, previous: ViolationGroups, danger_id: str) -> str:
    """Body of the single summary comment.

    One table per kind; sticky findings from ``previous`` that are gone now
    stay in the table, struck through. Markdown notes follow the tables.
    """
    lines: list[str] = []
    resolved_groups = empty_groups()

    for kind in (WARNING, ERROR, MESSAGE):
        current = violations.get(kind, [])
        resolved = resolved_violations(previous.get(kind, []), current)
        resolved_groups[kind] = resolved
        if not current and not resolved:
            continue

        singular, plural = _TITLES[kind]
        lines.append(f"| | {len(current)} {singular if len(current) == 1 else plural} |")
        lines.append("|---|---|")
        for v in current:
            lines.append(f"| {_EMOJI[kind]} | {_location(v)}{_cell(v.content)} |")
        for v in resolved:
            lines.append(f"| {_RESOLVED_EMOJI} | ~~{_location(v)}{_cell(v.content)}~~ |")
        lines.append("")

    for v in violations.get(MARKDOWN, []):
        lines.append(v.content)
        lines.append("")

    lines.append(_FOOTER)
    lines.append(marker(danger_id))
    lines.append(_encode(merge_groups(violations, resolved_groups)))
    return "\n".join(lines)
