"""Data models for pull request review statistics."""

from __future__ import annotations

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, computed_field

from review_stats.counter import RankedCounter

# GitHub shows deleted accounts as this login.
GHOST_LOGIN = "ghost"


class ReviewState(StrEnum):
    """Review verdicts that matter for counting."""
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    OTHER = "OTHER"

    @classmethod
    def from_api(cls, value: str | None) -> ReviewState:
        """Map a GitHub review state (COMMENTED, DISMISSED, ...) onto this enum."""
        if value == cls.APPROVED.value:
            return cls.APPROVED
        if value == cls.CHANGES_REQUESTED.value:
            return cls.CHANGES_REQUESTED
        return cls.OTHER


class PullRequest(BaseModel):
    """A pull request found by the search."""
    model_config = ConfigDict(frozen=True)

    number: int
    author_login: str


class Review(BaseModel):
    """A formal review submitted on a pull request."""
    author_login: str
    state: ReviewState = ReviewState.OTHER


class Comment(BaseModel):
    """A comment left on a pull request."""
    author_login: str
    body: str = ""


class SignalSet(BaseModel):
    """Approvers and reviewers of a single pull request."""
    approvers: set[str] = set()
    reviewers: set[str] = set()


class SearchPage(BaseModel):
    """One page of search results plus its rate-limit accounting."""
    pull_requests: list[PullRequest] = []
    has_next_page: bool = False
    end_cursor: str | None = None
    cost: int = 0
    remaining: int = 0


class CollectionResult(BaseModel):
    """Every pull request matched by a search, with total rate-limit cost."""
    pull_requests: list[PullRequest] = []
    total_cost: int = 0
    remaining: int = 0
    pages: int = 0


class StatsReport(BaseModel):
    """Ranked author, approver and reviewer counts for one repository."""
    repository: str
    window_start: date
    window_end: date
    authors: RankedCounter
    approvers: RankedCounter
    reviewers: RankedCounter
    pull_request_count: int = 0
    search_cost: int = 0
    rate_limit_remaining: int = 0

    @property
    def tables(self) -> list[RankedCounter]:
        return [self.authors, self.approvers, self.reviewers]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rankings(self) -> dict[str, list[tuple[str, int]]]:
        return {counter.name: counter.rank() for counter in self.tables}
