"""Dry-run gateway: reads from the real platform, prints writes instead of sending them."""

from __future__ import annotations

import itertools
from dataclasses import dataclass

from rich.console import Console

from revsync_core.gateway import CommentGateway
from revsync_core.models import Comment, DiffRefs

console = Console()


@dataclass
class ShadowAction:
    action: str  # "create" | "update" | "delete"
    comment_id: object
    body: str = ""
    file: str | None = None
    line: int | None = None


class ShadowGateway(CommentGateway):
    """Wrap a gateway so a pass can be previewed without touching the thread."""

    def __init__(self, inner: CommentGateway):
        self._inner = inner
        self.min_inline_version = inner.min_inline_version
        self.actions: list[ShadowAction] = []
        self._ids = itertools.count(1)

    def platform_version(self) -> str | None:
        return self._inner.platform_version()

    def changed_paths(self) -> list[str]:
        return self._inner.changed_paths()

    def diff_refs(self) -> DiffRefs:
        return self._inner.diff_refs()

    def description(self) -> str:
        return self._inner.description()

    def list_comments(self, include_anchored: bool = True):
        return self._inner.list_comments(include_anchored=include_anchored)

    def _record(self, action: ShadowAction) -> None:
        self.actions.append(action)
        where = f"  [bold cyan]{action.file}[/bold cyan] line [bold]{action.line}[/bold]" if action.file else ""
        console.print(f"[yellow]shadow[/yellow] {action.action} comment {action.comment_id}{where}")
        if action.body:
            console.print(f"  [dim]{action.body.splitlines()[0]}[/dim]")

    def create_comment(self, body: str) -> Comment:
        comment_id = f"shadow-{next(self._ids)}"
        self._record(ShadowAction("create", comment_id, body))
        return Comment(id=comment_id, body=body, discussion_id=comment_id)

    def create_anchored_comment(self, body: str, file: str, line: int, refs: DiffRefs) -> Comment:
        comment_id = f"shadow-{next(self._ids)}"
        self._record(ShadowAction("create", comment_id, body, file, line))
        return Comment(id=comment_id, body=body, discussion_id=comment_id, file=file, line=line)

    def update_comment(self, comment_id, body: str) -> None:
        self._record(ShadowAction("update", comment_id, body))

    def update_anchored_comment(self, discussion_id, comment_id, body: str) -> None:
        self._record(ShadowAction("update", comment_id, body))

    def delete_comment(self, comment_id, anchored: bool = False) -> None:
        self._record(ShadowAction("delete", comment_id))
