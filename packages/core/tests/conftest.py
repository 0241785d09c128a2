"""Shared fixtures: an in-memory CommentGateway that records every call."""

from __future__ import annotations

import dataclasses
import itertools

import pytest

from revsync_core.errors import GatewayError
from revsync_core.gateway import CommentGateway
from revsync_core.models import Comment, DiffRefs


class FakeGateway(CommentGateway):
    min_inline_version = "1.0"

    def __init__(self, version="1.0", changed=("src/a.rb", "src/b.rb"), description=""):
        self.version = version
        self.changed = list(changed)
        self._description = description
        self.comments: list[Comment] = []
        self.calls: list[tuple] = []
        self.fail: set[tuple] = set()
        self._ids = itertools.count(100)

    # -- helpers for tests --------------------------------------------

    def add(self, body, file=None, line=None, discussion_id=None) -> Comment:
        comment_id = next(self._ids)
        comment = Comment(
            id=comment_id, body=body, discussion_id=discussion_id or comment_id, file=file, line=line
        )
        self.comments.append(comment)
        return comment

    def writes(self) -> list[tuple]:
        return [c for c in self.calls if c[0] != "list"]

    def get(self, comment_id) -> Comment:
        return next(c for c in self.comments if c.id == comment_id)

    def _check(self, key: tuple) -> None:
        if key in self.fail:
            raise GatewayError(f"boom: {key}", status=422)

    def _replace(self, comment_id, body: str) -> None:
        self.comments = [dataclasses.replace(c, body=body) if c.id == comment_id else c for c in self.comments]

    # -- CommentGateway -------------------------------------------------

    def platform_version(self):
        if isinstance(self.version, Exception):
            raise self.version
        return self.version

    def changed_paths(self):
        return list(self.changed)

    def diff_refs(self):
        return DiffRefs(base="base-sha", head="head-sha", start="start-sha")

    def description(self):
        return self._description

    def list_comments(self, include_anchored=True):
        self.calls.append(("list", include_anchored))
        return iter([c for c in self.comments if include_anchored or not c.anchored])

    def create_comment(self, body):
        self._check(("create",))
        self.calls.append(("create", body))
        return self.add(body)

    def create_anchored_comment(self, body, file, line, refs):
        self._check(("create_anchored", file, line))
        self.calls.append(("create_anchored", file, line, body))
        return self.add(body, file=file, line=line)

    def update_comment(self, comment_id, body):
        self._check(("update", comment_id))
        self.calls.append(("update", comment_id, body))
        self._replace(comment_id, body)

    def update_anchored_comment(self, discussion_id, comment_id, body):
        self._check(("update_anchored", comment_id))
        self.calls.append(("update_anchored", comment_id, body))
        self._replace(comment_id, body)

    def delete_comment(self, comment_id, anchored=False):
        self._check(("delete", comment_id))
        self.calls.append(("delete", comment_id, anchored))
        self.comments = [c for c in self.comments if c.id != comment_id]


@pytest.fixture
def gateway():
    return FakeGateway()
