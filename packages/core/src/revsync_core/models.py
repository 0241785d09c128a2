"""Violation and comment data models.

Both are frozen dataclasses: violations are produced once per run by the
analysis step, and comments are a read-only snapshot of the remote thread.
Neither is mutated while a reconciliation pass is running.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

WARNING = "warning"
ERROR = "error"
MESSAGE = "message"
MARKDOWN = "markdown"

# Fixed processing and rendering order.
KINDS = (WARNING, ERROR, MESSAGE, MARKDOWN)

ViolationGroups = dict  # kind -> list[Violation]


@dataclass(frozen=True)
class Violation:
    """A single finding reported by the analysis step."""

    kind: str
    content: str
    file: str | None = None
    line: int | None = None
    sticky: bool = False

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Unknown violation kind: {self.kind!r}. Choose one of {', '.join(KINDS)}.")

    @property
    def is_inline(self) -> bool:
        return self.file is not None and self.line is not None

    def is_equivalent(self, other: Violation) -> bool:
        """Same anchor and same rendered content; stickiness is ignored."""
        return self.file == other.file and self.line == other.line and self.content == other.content


@dataclass(frozen=True)
class Comment:
    """Normalized view of a remote comment on a pull request.

    ``file`` is set for comments anchored to the diff. ``line`` can be None on
    an anchored comment when the platform no longer maps it onto the current
    diff (e.g. after a force-push).
    """

    id: int | str
    body: str
    discussion_id: int | str | None = None
    file: str | None = None
    line: int | None = None

    @property
    def anchored(self) -> bool:
        return self.file is not None

    @property
    def target(self) -> tuple[str, int | None] | None:
        return (self.file, self.line) if self.file is not None else None

    def is_generated_by(self, danger_id: str) -> bool:
        from revsync_core.codec import is_generated_by

        return is_generated_by(self.body, danger_id)


@dataclass(frozen=True)
class DiffRefs:
    """Commit SHAs the platform needs to anchor a comment on the diff."""

    base: str
    head: str
    start: str


@dataclass
class ReconcileSummary:
    """What a reconciliation pass did. Reconciler.update returns it for reporting."""

    inline_supported: bool = False
    created: list = field(default_factory=list)
    updated: list = field(default_factory=list)
    resolved: list = field(default_factory=list)
    deleted: list = field(default_factory=list)
    kept: list = field(default_factory=list)  # stale comments kept because a human replied
    skipped: list[Violation] = field(default_factory=list)  # anchored outside the diff
    failed: list[Violation] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created or self.updated or self.resolved or self.deleted)


def empty_groups() -> ViolationGroups:
    return {kind: [] for kind in KINDS}


def group_by_kind(violations: Iterable[Violation]) -> ViolationGroups:
    """Group violations by kind, keeping input order within each kind."""
    groups = empty_groups()
    for v in violations:
        groups[v.kind].append(v)
    return groups


def merge_groups(*groups: ViolationGroups) -> ViolationGroups:
    """Concatenate several groupings kind by kind, in argument order."""
    merged = empty_groups()
    for group in groups:
        for kind, violations in group.items():
            merged[kind].extend(violations)
    return merged


def count(groups: ViolationGroups) -> int:
    return sum(len(v) for v in groups.values())
