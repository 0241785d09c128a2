"""Abstract remote comment gateway.

The reconciler only talks to a CommentGateway, never to a platform client
directly. Supporting another hosting platform means adding a gateway.
Implementations translate their client's errors into GatewayError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from revsync_core.models import Comment, DiffRefs


class CommentGateway(ABC):
    """Comment primitives for one pull request.

    All calls are synchronous and issued one at a time by the reconciler.
    """

    # Lowest platform_version() that can take anchored comments.
    min_inline_version: str = "0"

    @abstractmethod
    def platform_version(self) -> str | None:
        """Version used for capability negotiation, or None when unknown."""

    @abstractmethod
    def changed_paths(self) -> list[str]:
        """Paths touched by the pull request's current diff."""

    @abstractmethod
    def diff_refs(self) -> DiffRefs:
        """Commits an anchored comment is attached to."""

    @abstractmethod
    def description(self) -> str:
        """Pull request description; empty string when there is none."""

    @abstractmethod
    def list_comments(self, include_anchored: bool = True) -> Iterable[Comment]:
        """Every comment on the pull request, oldest first.

        May be lazy; callers drain it before making decisions.
        """

    @abstractmethod
    def create_comment(self, body: str) -> Comment:
        """Post a regular (non-anchored) comment."""

    @abstractmethod
    def create_anchored_comment(self, body: str, file: str, line: int, refs: DiffRefs) -> Comment:
        """Post a comment anchored to ``file``:``line`` of the diff."""

    @abstractmethod
    def update_comment(self, comment_id, body: str) -> None:
        """Replace the body of a regular comment."""

    @abstractmethod
    def update_anchored_comment(self, discussion_id, comment_id, body: str) -> None:
        """Replace the body of an anchored comment within its discussion."""

    @abstractmethod
    def delete_comment(self, comment_id, anchored: bool = False) -> None:
        """Delete a comment."""
