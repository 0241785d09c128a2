"""Comment reconciliation engine.

One call to Reconciler.update is one reconciliation pass: it snapshots the
remote comments, decides for every violation whether to create, update,
resolve, keep or delete a comment, and issues those calls one at a time.
Running it again with the same violations issues no further writes.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import replace
from typing import Iterable

from revsync_core.capabilities import detect_inline_support
from revsync_core.classifier import classify
from revsync_core.codec import first_violation, parse_comment, render_inline, render_summary
from revsync_core.errors import GatewayError
from revsync_core.gateway import CommentGateway
from revsync_core.models import (
    ERROR,
    KINDS,
    MARKDOWN,
    MESSAGE,
    WARNING,
    Comment,
    DiffRefs,
    ReconcileSummary,
    Violation,
    ViolationGroups,
    count,
    empty_groups,
    merge_groups,
)

logger = logging.getLogger(__name__)


class DeleteOutcome(enum.Enum):
    DELETED = "deleted"
    GONE = "gone"  # delete failed; the comment is most likely gone already


def _tagged(violations: Iterable[Violation], kind: str) -> list[Violation]:
    return [v if v.kind == kind else replace(v, kind=kind) for v in violations]


def _carried_over(previous: ViolationGroups) -> ViolationGroups:
    """Only sticky findings survive into the next summary."""
    return {kind: [v for v in previous.get(kind, []) if v.sticky] for kind in KINDS}


def _pooled_match(pool: list[Comment], violation: Violation) -> Comment | None:
    """Tool comment at the violation's anchor, preferring one of the same kind."""
    at_anchor = [c for c in pool if c.file == violation.file and c.line == violation.line]
    for c in at_anchor:
        held = first_violation(c.body)
        if held is not None and held.kind == violation.kind:
            return c
    return at_anchor[0] if at_anchor else None


class Reconciler:
    """Converge a pull request's comment thread onto the current violations."""

    def __init__(self, gateway: CommentGateway):
        self.gateway = gateway

    def update(
        self,
        warnings: Iterable[Violation] = (),
        errors: Iterable[Violation] = (),
        messages: Iterable[Violation] = (),
        markdowns: Iterable[Violation] = (),
        danger_id: str = "danger",
        new_comment: bool = False,
        remove_previous_comments: bool = False,
    ) -> ReconcileSummary:
        """Run one reconciliation pass.

        Inline failures are logged and leave the violation for the summary
        comment. Failures while writing the summary comment propagate as
        GatewayError.
        """
        inline_supported = detect_inline_support(self.gateway)
        summary = ReconcileSummary(inline_supported=inline_supported)

        regular, inline = classify(
            _tagged(warnings, WARNING)
            + _tagged(errors, ERROR)
            + _tagged(messages, MESSAGE)
            + _tagged(markdowns, MARKDOWN)
        )

        snapshot = list(self.gateway.list_comments(include_anchored=inline_supported))
        summary_comments = [c for c in snapshot if not c.anchored and c.is_generated_by(danger_id)]
        canonical = summary_comments[-1] if summary_comments else None

        should_create = new_comment or remove_previous_comments or canonical is None
        previous = empty_groups() if should_create else _carried_over(parse_comment(canonical.body))

        if inline_supported:
            rest, previous = self._submit_inline_comments(inline, previous, snapshot, danger_id, summary)
            main = merge_groups(regular, rest)
        else:
            main = merge_groups(regular, inline)

        nothing_left = count(previous) == 0 and count(main) == 0
        if nothing_left or remove_previous_comments:
            for comment in summary_comments:
                if self._try_delete(comment) is DeleteOutcome.DELETED:
                    summary.deleted.append(comment.id)
            # Without inline support the flag only clears the thread. With it,
            # the remaining findings get a fresh summary at the end of the thread.
            if nothing_left or not inline_supported:
                return summary

        body = render_summary(main, previous, danger_id)
        if should_create:
            created = self.gateway.create_comment(body)
            summary.created.append(created.id)
            logger.info("Created summary comment %s", created.id)
        elif body != canonical.body:
            self.gateway.update_comment(canonical.id, body)
            summary.updated.append(canonical.id)
            logger.info("Updated summary comment %s", canonical.id)
        return summary

    def delete_all_tool_comments(self, except_id=None, danger_id: str = "danger", snapshot=None) -> int:
        """Best-effort removal of every tool-authored summary comment but ``except_id``.

        Anchored comments are left alone. Returns how many deletes succeeded.
        """
        if snapshot is None:
            snapshot = list(self.gateway.list_comments(include_anchored=False))

        deleted = 0
        for comment in snapshot:
            if comment.anchored or not comment.is_generated_by(danger_id):
                continue
            if except_id is not None and comment.id == except_id:
                continue
            if self._try_delete(comment) is DeleteOutcome.DELETED:
                deleted += 1
        return deleted

    def _try_delete(self, comment: Comment) -> DeleteOutcome:
        try:
            self.gateway.delete_comment(comment.id, anchored=comment.anchored)
        except GatewayError as e:
            logger.debug("Could not delete comment %s: %s", comment.id, e)
            return DeleteOutcome.GONE
        return DeleteOutcome.DELETED

    # ------------------------------------------------------------------
    # Inline path
    # ------------------------------------------------------------------

    def _submit_inline_comments(
        self,
        inline: ViolationGroups,
        previous: ViolationGroups,
        snapshot: list[Comment],
        danger_id: str,
        summary: ReconcileSummary,
    ) -> tuple[ViolationGroups, ViolationGroups]:
        """Post the inline groups as anchored comments and sweep stale ones.

        Returns the violations that still need the summary comment and the
        previous state minus entries now shown inline.
        """
        anchored = [c for c in snapshot if c.anchored]
        pool = [c for c in anchored if c.is_generated_by(danger_id)]
        human = [c for c in anchored if not c.is_generated_by(danger_id)]

        changed_paths = set(self.gateway.changed_paths())
        refs = self.gateway.diff_refs()
        previous = {kind: list(previous.get(kind, [])) for kind in KINDS}

        rest = empty_groups()
        for kind in KINDS:
            rest[kind] = self._submit_kind(
                inline[kind], pool, previous[kind] if kind != MARKDOWN else [], changed_paths, refs, danger_id, summary
            )

        # Whatever is left in the pool has no current violation.
        for comment in pool:
            self._retire(comment, human, danger_id, summary)

        return rest, previous

    def _submit_kind(
        self,
        violations: list[Violation],
        pool: list[Comment],
        previous: list[Violation],
        changed_paths: set[str],
        refs: DiffRefs,
        danger_id: str,
        summary: ReconcileSummary,
    ) -> list[Violation]:
        remaining: list[Violation] = []
        for v in violations:
            if v.file not in changed_paths:
                # The platform cannot anchor outside the diff.
                logger.debug("%s:%s is not part of the diff, leaving it for the summary", v.file, v.line)
                summary.skipped.append(v)
                remaining.append(v)
                continue

            # Shown inline from now on, so it no longer belongs in the summary table.
            previous[:] = [p for p in previous if not p.is_equivalent(v)]

            body = render_inline(v, danger_id)
            match = _pooled_match(pool, v)
            try:
                if match is None:
                    created = self.gateway.create_anchored_comment(body, v.file, v.line, refs)
                    summary.created.append(created.id)
                else:
                    pool.remove(match)
                    if match.body != body:
                        self.gateway.update_anchored_comment(match.discussion_id, match.id, body)
                        summary.updated.append(match.id)
            except GatewayError as e:
                logger.warning("Could not post inline comment on %s:%s: %s\nbody: %s", v.file, v.line, e, body)
                summary.failed.append(v)
                remaining.append(v)
        return remaining

    def _retire(self, comment: Comment, human: list[Comment], danger_id: str, summary: ReconcileSummary) -> None:
        """Resolve, keep or delete a tool comment no current violation claims."""
        violation = first_violation(comment.body)
        if violation is not None and violation.sticky:
            body = render_inline(violation, danger_id, resolved=True)
            if body == comment.body:
                return
            try:
                self.gateway.update_anchored_comment(comment.discussion_id, comment.id, body)
            except GatewayError as e:
                logger.warning("Could not resolve inline comment %s: %s", comment.id, e)
                return
            summary.resolved.append(comment.id)
            return

        # Any human comment on the same anchor or thread counts as a reply.
        replies = [
            h
            for h in human
            if (comment.line is not None and h.target == comment.target)
            or (comment.discussion_id is not None and h.discussion_id == comment.discussion_id)
        ]
        if replies:
            logger.debug("Keeping comment %s: %d human repl(ies)", comment.id, len(replies))
            summary.kept.append(comment.id)
            return

        if self._try_delete(comment) is DeleteOutcome.DELETED:
            summary.deleted.append(comment.id)
