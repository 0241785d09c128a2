"""Ignore directives written by PR authors in the pull request description.

A line such as ``> Danger: Ignore "Unused import"`` drops every warning,
error or message whose content is exactly ``Unused import``. Markdown notes
cannot be ignored.
"""

from __future__ import annotations

import re

from revsync_core.models import MARKDOWN, ViolationGroups

_IGNORE_RE = re.compile(r'>*\s*danger\s*:\s*ignore\s*"([^"]+)"', re.IGNORECASE)


def ignored_violations(description: str | None) -> list[str]:
    if not description:
        return []
    return _IGNORE_RE.findall(description)


def filter_ignored(groups: ViolationGroups, ignored: list[str]) -> ViolationGroups:
    if not ignored:
        return groups
    skip = set(ignored)
    return {
        kind: violations if kind == MARKDOWN else [v for v in violations if v.content not in skip]
        for kind, violations in groups.items()
    }
