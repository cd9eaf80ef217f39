"""Tests for review signal reconciliation."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from review_stats.config import CommentSource
from review_stats.models import Comment, Review, ReviewState
from review_stats.signals import APPROVE_RE, LGTM_RE, ReviewSignalExtractor, reconcile


class TestSlashCommandPatterns:
    @pytest.mark.parametrize(
        "body",
        [
            "/lgtm",
            "/lgtm   ",
            "  /lgtm",
            "\n\n/lgtm\n\n",
            "Thanks for the fix!\n/lgtm\n",
            "/lgtm\r\n",
            "\t/lgtm\t",
        ],
    )
    def test_lgtm_matches_own_line(self, body: str) -> None:
        assert LGTM_RE.search(body)

    @pytest.mark.parametrize(
        "body",
        [
            "I /lgtm this",
            "/lgtm cancel",
            "/LGTM",
            "/lgtmx",
            "lgtm",
            "`/lgtm`",
        ],
    )
    def test_lgtm_rejects_inline_or_modified(self, body: str) -> None:
        assert not LGTM_RE.search(body)

    def test_approve_matches_own_line(self) -> None:
        assert APPROVE_RE.search("looks good\n/approve  \n")

    def test_approve_rejects_cancel(self) -> None:
        assert not APPROVE_RE.search("/approve cancel")
        assert not APPROVE_RE.search("please /approve")


class TestReconcile:
    def test_empty(self) -> None:
        signals = reconcile([], [])
        assert signals.approvers == set()
        assert signals.reviewers == set()

    def test_approved_review_counts_for_both(self) -> None:
        signals = reconcile([Review(author_login="bob", state=ReviewState.APPROVED)], [])
        assert signals.approvers == {"bob"}
        assert signals.reviewers == {"bob"}

    def test_repeated_approvals_count_once(self) -> None:
        reviews = [Review(author_login="bob", state=ReviewState.APPROVED)] * 3
        signals = reconcile(reviews, [])
        assert signals.approvers == {"bob"}
        assert signals.reviewers == {"bob"}

    def test_changes_requested_is_reviewer_only(self) -> None:
        signals = reconcile(
            [Review(author_login="dave", state=ReviewState.CHANGES_REQUESTED)], []
        )
        assert signals.approvers == set()
        assert signals.reviewers == {"dave"}

    def test_other_review_state_ignored(self) -> None:
        signals = reconcile([Review(author_login="erin", state=ReviewState.OTHER)], [])
        assert signals.approvers == set()
        assert signals.reviewers == set()

    def test_lgtm_comment_is_reviewer_only(self) -> None:
        signals = reconcile([], [Comment(author_login="carol", body="/lgtm")])
        assert signals.approvers == set()
        assert signals.reviewers == {"carol"}

    def test_approve_comment_is_approver_only(self) -> None:
        signals = reconcile([], [Comment(author_login="frank", body="/approve")])
        assert signals.approvers == {"frank"}
        assert signals.reviewers == set()

    def test_comment_with_both_commands(self) -> None:
        signals = reconcile([], [Comment(author_login="hank", body="/lgtm\n/approve\n")])
        assert signals.approvers == {"hank"}
        assert signals.reviewers == {"hank"}

    def test_inline_lgtm_does_not_count(self) -> None:
        signals = reconcile([], [Comment(author_login="grace", body="I /lgtm this")])
        assert signals.reviewers == set()

    def test_mixed_sources(
        self, sample_reviews: list[Review], sample_comments: list[Comment]
    ) -> None:
        signals = reconcile(sample_reviews, sample_comments)
        assert signals.approvers == {"bob", "frank"}
        assert signals.reviewers == {"bob", "carol", "dave"}


class TestReviewSignalExtractor:
    def test_extract_fetches_reviews_and_comments(self) -> None:
        client = MagicMock()
        client.list_reviews.return_value = [
            Review(author_login="bob", state=ReviewState.APPROVED)
        ]
        client.list_comments.return_value = [Comment(author_login="carol", body="/lgtm")]

        extractor = ReviewSignalExtractor(
            client, "kubernetes", "kops", comment_source=CommentSource.ISSUE
        )
        signals = extractor.extract(42)

        client.list_reviews.assert_called_once_with("kubernetes", "kops", 42)
        client.list_comments.assert_called_once_with(
            "kubernetes", "kops", 42, source=CommentSource.ISSUE
        )
        assert signals.approvers == {"bob"}
        assert signals.reviewers == {"bob", "carol"}

    def test_extract_with_no_activity(self) -> None:
        client = MagicMock()
        client.list_reviews.return_value = []
        client.list_comments.return_value = []
        signals = ReviewSignalExtractor(client, "o", "r").extract(1)
        assert signals.approvers == set()
        assert signals.reviewers == set()

    def test_fetch_failure_propagates(self) -> None:
        from review_stats.exceptions import GitHubAPIError

        client = MagicMock()
        client.list_reviews.side_effect = GitHubAPIError(
            "GitHub API returned 500", status_code=500, operation="list reviews on #7"
        )
        with pytest.raises(GitHubAPIError, match="list reviews on #7 failed"):
            ReviewSignalExtractor(client, "o", "r").extract(7)
        client.list_comments.assert_not_called()
