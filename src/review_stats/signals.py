"""Reconcile reviews and slash-command comments into approver/reviewer sets."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Protocol

from review_stats.config import CommentSource
from review_stats.models import Comment, Review, ReviewState, SignalSet

LGTM_RE = re.compile(r"^\s*/lgtm\s*$", re.MULTILINE)
APPROVE_RE = re.compile(r"^\s*/approve\s*$", re.MULTILINE)


class ReviewSource(Protocol):
    def list_reviews(self, owner: str, repo: str, number: int) -> list[Review]: ...

    def list_comments(
        self, owner: str, repo: str, number: int, source: CommentSource = ...
    ) -> list[Comment]: ...


def reconcile(reviews: Iterable[Review], comments: Iterable[Comment]) -> SignalSet:
    """Build the approver and reviewer sets of one pull request.

    An approving review counts toward both sets, a changes-requested review
    toward reviewers only.  A comment line reading ``/lgtm`` adds its author
    to reviewers, ``/approve`` to approvers; one comment may carry both.
    """
    signals = SignalSet()

    for review in reviews:
        if review.state == ReviewState.APPROVED:
            signals.approvers.add(review.author_login)
            signals.reviewers.add(review.author_login)
        elif review.state == ReviewState.CHANGES_REQUESTED:
            signals.reviewers.add(review.author_login)

    for comment in comments:
        if LGTM_RE.search(comment.body):
            signals.reviewers.add(comment.author_login)
        if APPROVE_RE.search(comment.body):
            signals.approvers.add(comment.author_login)

    return signals


class ReviewSignalExtractor:
    """Fetch a pull request's reviews and comments and reconcile them."""

    def __init__(
        self,
        client: ReviewSource,
        owner: str,
        repo: str,
        comment_source: CommentSource = CommentSource.REVIEW,
    ) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo
        self._comment_source = comment_source

    def extract(self, number: int) -> SignalSet:
        reviews = self._client.list_reviews(self._owner, self._repo, number)
        comments = self._client.list_comments(
            self._owner, self._repo, number, source=self._comment_source
        )
        return reconcile(reviews, comments)
