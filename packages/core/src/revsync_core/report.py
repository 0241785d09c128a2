"""Load the analysis step's violation report.

The report is YAML (JSON is valid YAML too)::

    warnings:
      - message: Unused import
        file: src/app.py
        line: 3
        sticky: true
      - Missing CHANGELOG entry
    errors: []
    messages: []
    markdowns:
      - "### Coverage\\n92%"
"""

from __future__ import annotations

from pathlib import Path

import yaml

from revsync_core.errors import ReportError
from revsync_core.models import ERROR, MARKDOWN, MESSAGE, WARNING, Violation, ViolationGroups, empty_groups

_SECTIONS = {"warnings": WARNING, "errors": ERROR, "messages": MESSAGE, "markdowns": MARKDOWN}


def _violation(kind: str, entry, where: str) -> Violation:
    if isinstance(entry, str):
        return Violation(kind=kind, content=entry)
    if not isinstance(entry, dict):
        raise ReportError(f"{where}: expected a string or a mapping, got {type(entry).__name__}")

    content = entry.get("message", entry.get("content"))
    if not isinstance(content, str) or not content:
        raise ReportError(f"{where}: missing 'message'")

    line = entry.get("line")
    if line is not None and (isinstance(line, bool) or not isinstance(line, int)):
        raise ReportError(f"{where}: 'line' must be an integer")

    return Violation(
        kind=kind,
        content=content,
        file=entry.get("file"),
        line=line,
        sticky=bool(entry.get("sticky", False)),
    )


def parse_report(data) -> ViolationGroups:
    if data is None:
        return empty_groups()
    if not isinstance(data, dict):
        raise ReportError("Report must be a mapping of warnings/errors/messages/markdowns")

    unknown = set(data) - set(_SECTIONS)
    if unknown:
        raise ReportError(f"Unknown report section(s): {', '.join(sorted(unknown))}")

    groups = empty_groups()
    for section, kind in _SECTIONS.items():
        entries = data.get(section) or []
        if not isinstance(entries, list):
            raise ReportError(f"'{section}' must be a list")
        groups[kind] = [_violation(kind, e, f"{section}[{i}]") for i, e in enumerate(entries)]
    return groups


def load_report(path: str) -> ViolationGroups:
    """Read and validate a report file; raises ReportError on any problem."""
    p = Path(path)
    if not p.exists():
        raise ReportError(f"Report file not found: {path}")
    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ReportError(f"Could not parse report {path}: {e}") from e
    return parse_report(data)
