"""CommentGateway for GitHub pull requests, built on PyGithub.

Regular comments are issue comments on the pull request; anchored comments
are review comments. A review comment's discussion is the thread rooted at
the comment it replies to.
"""

from __future__ import annotations

import importlib.metadata
import logging
from contextlib import contextmanager

from github import GithubException

from revsync_core.errors import GatewayError
from revsync_core.gateway import CommentGateway
from revsync_core.models import Comment, DiffRefs

logger = logging.getLogger(__name__)


@contextmanager
def _api_call(action: str):
    try:
        yield
    except GithubException as e:
        raise GatewayError(f"GitHub {action} failed ({e.status}): {e.data}", status=e.status) from e


def _from_issue_comment(c) -> Comment:
    return Comment(id=c.id, body=c.body or "", discussion_id=c.id)


def _from_review_comment(c) -> Comment:
    # c.line is None once the line no longer exists in the current diff
    # (e.g. after a force-push). Such an outdated comment must not claim a
    # live anchor, so original_line is not used here.
    return Comment(
        id=c.id,
        body=c.body or "",
        discussion_id=c.in_reply_to_id or c.id,
        file=c.path,
        line=c.line,
    )


class GitHubGateway(CommentGateway):
    """Comment primitives for one GitHub pull request.

    ``pull`` and ``repo`` are PyGithub PullRequest and Repository objects.
    """

    # First PyGithub release whose create_review_comment takes a file line
    # instead of a diff position.
    min_inline_version = "2.0.0"

    def __init__(self, repo, pull):
        self._repo = repo
        self._pull = pull

    def platform_version(self) -> str | None:
        try:
            return importlib.metadata.version("PyGithub")
        except importlib.metadata.PackageNotFoundError:
            return None

    def changed_paths(self) -> list[str]:
        with _api_call("list changed files"):
            return [f.filename for f in self._pull.get_files()]

    def diff_refs(self) -> DiffRefs:
        return DiffRefs(base=self._pull.base.sha, head=self._pull.head.sha, start=self._pull.base.sha)

    def description(self) -> str:
        return self._pull.body or ""

    def list_comments(self, include_anchored: bool = True):
        with _api_call("list comments"):
            for c in self._pull.get_issue_comments():
                yield _from_issue_comment(c)
            if include_anchored:
                for c in self._pull.get_review_comments():
                    yield _from_review_comment(c)

    def create_comment(self, body: str) -> Comment:
        with _api_call("create comment"):
            return _from_issue_comment(self._pull.create_issue_comment(body))

    def create_anchored_comment(self, body: str, file: str, line: int, refs: DiffRefs) -> Comment:
        with _api_call(f"create review comment on {file}:{line}"):
            commit = self._repo.get_commit(refs.head)
            created = self._pull.create_review_comment(body=body, commit=commit, path=file, line=line, side="RIGHT")
        logger.debug("Created review comment %s on %s:%s", created.id, file, line)
        return _from_review_comment(created)

    def update_comment(self, comment_id, body: str) -> None:
        with _api_call(f"update comment {comment_id}"):
            self._pull.get_issue_comment(comment_id).edit(body)

    def update_anchored_comment(self, discussion_id, comment_id, body: str) -> None:
        # Review comments are addressed by id alone; the thread is implied.
        with _api_call(f"update review comment {comment_id}"):
            self._pull.get_review_comment(comment_id).edit(body)

    def delete_comment(self, comment_id, anchored: bool = False) -> None:
        with _api_call(f"delete comment {comment_id}"):
            if anchored:
                self._pull.get_review_comment(comment_id).delete()
            else:
                self._pull.get_issue_comment(comment_id).delete()
