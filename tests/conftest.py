"""Shared test fixtures for review-stats tests."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from review_stats.config import ReviewStatsConfig
from review_stats.models import (
    Comment,
    PullRequest,
    Review,
    ReviewState,
    SearchPage,
)


@pytest.fixture
def sample_config() -> ReviewStatsConfig:
    return ReviewStatsConfig(
        repository={"owner": "kubernetes", "name": "kops"},
        window={"start": date(2020, 7, 1), "end": date(2021, 7, 1)},
        throttle={"enabled": False},
    )


@pytest.fixture
def sample_pull_request() -> PullRequest:
    return PullRequest(number=42, author_login="alice")


@pytest.fixture
def sample_reviews() -> list[Review]:
    return [
        Review(author_login="bob", state=ReviewState.APPROVED),
        Review(author_login="dave", state=ReviewState.CHANGES_REQUESTED),
        Review(author_login="erin", state=ReviewState.OTHER),
    ]


@pytest.fixture
def sample_comments() -> list[Comment]:
    return [
        Comment(author_login="carol", body="Looks fine to me.\n/lgtm\n"),
        Comment(author_login="frank", body="/approve"),
        Comment(author_login="grace", body="I /lgtm this"),
    ]


def make_client(
    pages: list[SearchPage],
    reviews: dict[int, list[Review]] | None = None,
    comments: dict[int, list[Comment]] | None = None,
) -> MagicMock:
    """A stand-in GitHub client serving canned pages, reviews and comments."""
    reviews = reviews or {}
    comments = comments or {}
    client = MagicMock()
    client.search_pull_requests.side_effect = list(pages)
    client.list_reviews.side_effect = lambda owner, repo, number: reviews.get(number, [])
    client.list_comments.side_effect = (
        lambda owner, repo, number, source=None: comments.get(number, [])
    )
    return client


@pytest.fixture
def end_to_end_client() -> MagicMock:
    return make_client(
        pages=[
            SearchPage(
                pull_requests=[PullRequest(number=42, author_login="alice")],
                has_next_page=False,
                cost=1,
                remaining=4999,
            )
        ],
        reviews={42: [Review(author_login="bob", state=ReviewState.APPROVED)]},
        comments={42: [Comment(author_login="carol", body="nice work\n/lgtm\n")]},
    )


@pytest.fixture
def client_factory():
    return make_client
