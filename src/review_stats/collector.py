"""Cursor-paginated pull request search."""

from __future__ import annotations

import logging
from datetime import date
from typing import Protocol

from review_stats.exceptions import GitHubAPIError
from review_stats.models import CollectionResult, PullRequest, SearchPage

logger = logging.getLogger(__name__)


class SearchClient(Protocol):
    def search_pull_requests(
        self, query: str, cursor: str | None = None, page_size: int = 100
    ) -> SearchPage: ...


def build_search_query(owner: str, name: str, start: date, end: date) -> str:
    """Return the issue-search query for PRs in *owner/name* updated in the window."""
    return f"is:pr repo:{owner}/{name} updated:{start.isoformat()}..{end.isoformat()}"


class PullRequestCollector:
    """Page through a pull request search until the cursor runs out."""

    def __init__(self, client: SearchClient, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    def collect(self, owner: str, name: str, start: date, end: date) -> CollectionResult:
        """Return every matching pull request in upstream order.

        Cost is summed over all pages; ``remaining`` is taken from the last
        page.  Any page failure propagates, since a gap in the cursor chain
        would leave the result incomplete.
        """
        query = build_search_query(owner, name, start, end)
        logger.debug("Searching: %s", query)

        pull_requests: list[PullRequest] = []
        total_cost = 0
        remaining = 0
        pages = 0
        cursor: str | None = None

        while True:
            page = self._client.search_pull_requests(
                query, cursor=cursor, page_size=self._page_size
            )
            pages += 1
            total_cost += page.cost
            remaining = page.remaining
            pull_requests.extend(page.pull_requests)
            logger.debug(
                "Search page %d: %d PR(s), cost %d", pages, len(page.pull_requests), page.cost
            )
            if not page.has_next_page:
                break
            if not page.end_cursor:
                raise GitHubAPIError(
                    f"page {pages} reports more results but no end cursor",
                    operation="search pull requests",
                )
            cursor = page.end_cursor

        return CollectionResult(
            pull_requests=pull_requests,
            total_cost=total_cost,
            remaining=remaining,
            pages=pages,
        )
