"""Split violations into summary-level and inline groups."""

from __future__ import annotations

from typing import Iterable

from revsync_core.models import Violation, ViolationGroups, empty_groups


def inline_sort_key(violation: Violation) -> tuple:
    """Total order for inline violations: unanchored first, then file, then line.

    Groups the comments of one file together regardless of input order.
    """
    if not violation.is_inline:
        return (0, "", 0)
    return (1, violation.file, violation.line)


def classify(violations: Iterable[Violation]) -> tuple[ViolationGroups, ViolationGroups]:
    """Return ``(regular, inline)`` groupings keyed by kind.

    Regular groups keep input order. Inline groups are sorted with
    inline_sort_key; the sort is stable so duplicate anchors keep input order.
    """
    regular = empty_groups()
    inline = empty_groups()
    for v in violations:
        (inline if v.is_inline else regular)[v.kind].append(v)

    for kind in inline:
        inline[kind].sort(key=inline_sort_key)
    return regular, inline
