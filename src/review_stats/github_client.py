"""GitHub API client for pull request search, reviews and comments."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from review_stats.config import CommentSource, ReviewStatsConfig, load_config
from review_stats.exceptions import GitHubAPIError, RateLimitExhaustedError, RepoNotFoundError
from review_stats.models import (
    GHOST_LOGIN,
    Comment,
    PullRequest,
    Review,
    ReviewState,
    SearchPage,
)
from review_stats.throttle import Throttle

logger = logging.getLogger(__name__)

_GITHUB_BASE_URL = "https://api.github.com"
_GITHUB_GRAPHQL_URL = f"{_GITHUB_BASE_URL}/graphql"
_REST_PAGE_SIZE = 100

_SEARCH_QUERY = """
query($query: String!, $cursor: String, $first: Int!) {
  rateLimit {
    cost
    remaining
  }
  search(type: ISSUE, first: $first, after: $cursor, query: $query) {
    pageInfo { hasNextPage endCursor }
    nodes {
      ... on PullRequest {
        number
        author { login }
      }
    }
  }
}
""".strip()


def _login(user: dict[str, Any] | None) -> str:
    if not user:
        return GHOST_LOGIN
    return str(user.get("login") or GHOST_LOGIN)


def _decode_json(operation: str, response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise GitHubAPIError(
            f"response is not valid JSON: {exc}",
            status_code=response.status_code,
            operation=operation,
        ) from exc


class GitHubClient:
    """Blocking GitHub API client used by the collector and signal extractor."""

    def __init__(
        self,
        token: str,
        config: ReviewStatsConfig | None = None,
        throttle: Throttle | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config if config is not None else load_config()
        if throttle is None and self._config.throttle.enabled:
            throttle = Throttle(
                self._config.throttle.hourly_tokens, self._config.throttle.burst
            )
        self._throttle = throttle
        self._client = httpx.Client(
            base_url=_GITHUB_BASE_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=self._config.fetch.timeout,
            transport=transport,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request, translating failures into :class:`GitHubAPIError`.

        Raises:
            RateLimitExhaustedError: On 403 with a rate-limit message or on 429.
            RepoNotFoundError: On 404.
            GitHubAPIError: For transport errors and any other non-2xx response.
        """
        if self._throttle is not None:
            self._throttle.wait()

        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise GitHubAPIError(
                f"{type(exc).__name__}: {exc}", operation=operation
            ) from exc

        if response.status_code in (403, 429):
            try:
                body = response.json() if response.content else {}
            except ValueError:
                body = {}
            message = str(body.get("message", "")) if isinstance(body, dict) else ""
            if response.status_code == 429 or "rate limit" in message.lower():
                reset_header = response.headers.get("X-RateLimit-Reset")
                if reset_header:
                    reset_at = datetime.fromtimestamp(int(reset_header), tz=UTC)
                else:
                    reset_at = datetime.now(UTC)
                raise RateLimitExhaustedError(reset_at=reset_at, operation=operation)

        if response.status_code == 404:
            raise RepoNotFoundError(repo=url, operation=operation)

        if not response.is_success:
            remaining = response.headers.get("X-RateLimit-Remaining")
            raise GitHubAPIError(
                message=f"GitHub API returned {response.status_code}",
                status_code=response.status_code,
                rate_limit_remaining=int(remaining) if remaining else None,
                operation=operation,
            )

        return response

    def _graphql(
        self, operation: str, query: str, variables: dict[str, object]
    ) -> dict[str, Any]:
        """Execute a GraphQL query; a non-empty ``errors`` list is a failure."""
        response = self._send(
            operation,
            "POST",
            _GITHUB_GRAPHQL_URL,
            json={"query": query, "variables": variables},
        )
        data = _decode_json(operation, response)
        if not isinstance(data, dict):
            raise GitHubAPIError("malformed GraphQL response", operation=operation)
        errors = data.get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            raise GitHubAPIError(f"GraphQL errors: {messages}", operation=operation)
        return data  # type: ignore[no-any-return]

    def _get_paginated(self, operation: str, path: str) -> list[dict[str, Any]]:
        """GET every page of a REST list endpoint by following ``Link: rel=next``."""
        items: list[dict[str, Any]] = []
        url: str | None = path
        params: dict[str, int] | None = {"per_page": _REST_PAGE_SIZE}

        while url is not None:
            response = self._send(operation, "GET", url, params=params)
            page = _decode_json(operation, response)
            if not isinstance(page, list) or not all(isinstance(item, dict) for item in page):
                raise GitHubAPIError("malformed list response", operation=operation)
            items.extend(page)
            next_link = response.links.get("next")
            url = next_link["url"] if next_link else None
            # The next link already carries per_page and page.
            params = None

        logger.debug("%s: %d item(s)", operation, len(items))
        return items

    def search_pull_requests(
        self, query: str, cursor: str | None = None, page_size: int = 100
    ) -> SearchPage:
        """Fetch one page of an issue search, keeping only pull request nodes."""
        variables: dict[str, object] = {"query": query, "first": page_size}
        if cursor is not None:
            variables["cursor"] = cursor

        operation = "search pull requests"
        result = self._graphql(operation, _SEARCH_QUERY, variables)
        try:
            data = result["data"]
            search = data["search"]
            rate_limit = data.get("rateLimit") or {}

            prs: list[PullRequest] = []
            for node in search["nodes"]:
                # Non-PR issues come back as empty objects from the inline fragment.
                if not node or node.get("number") is None:
                    continue
                prs.append(
                    PullRequest(number=node["number"], author_login=_login(node.get("author")))
                )

            page_info = search["pageInfo"]
            return SearchPage(
                pull_requests=prs,
                has_next_page=bool(page_info["hasNextPage"]),
                end_cursor=page_info.get("endCursor"),
                cost=int(rate_limit.get("cost", 0)),
                remaining=int(rate_limit.get("remaining", 0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise GitHubAPIError(
                f"malformed search response: {type(exc).__name__}: {exc}",
                operation=operation,
            ) from exc

    def list_reviews(self, owner: str, repo: str, number: int) -> list[Review]:
        """List all reviews on a pull request.

        ``GET /repos/{owner}/{repo}/pulls/{number}/reviews``
        """
        raw = self._get_paginated(
            f"list reviews on #{number}",
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
        )
        return [
            Review(author_login=_login(item.get("user")), state=ReviewState.from_api(item.get("state")))
            for item in raw
        ]

    def list_comments(
        self,
        owner: str,
        repo: str,
        number: int,
        source: CommentSource = CommentSource.REVIEW,
    ) -> list[Comment]:
        """List comments on a pull request.

        ``review`` reads diff comments from ``/pulls/{number}/comments``,
        ``issue`` reads conversation comments from ``/issues/{number}/comments``,
        ``all`` reads both, review comments first.
        """
        paths: list[str] = []
        if source in (CommentSource.REVIEW, CommentSource.ALL):
            paths.append(f"/repos/{owner}/{repo}/pulls/{number}/comments")
        if source in (CommentSource.ISSUE, CommentSource.ALL):
            paths.append(f"/repos/{owner}/{repo}/issues/{number}/comments")

        comments: list[Comment] = []
        for path in paths:
            raw = self._get_paginated(f"list comments on #{number}", path)
            comments.extend(
                Comment(author_login=_login(item.get("user")), body=item.get("body") or "")
                for item in raw
            )
        return comments
