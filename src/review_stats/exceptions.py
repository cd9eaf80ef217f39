"""Custom exception hierarchy for review-stats."""

from __future__ import annotations

from datetime import datetime


class ReviewStatsError(Exception):
    """Base exception for review-stats."""


class GitHubAPIError(ReviewStatsError):
    """Error from the GitHub API or the transport underneath it."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        rate_limit_remaining: int | None = None,
        operation: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.rate_limit_remaining = rate_limit_remaining
        self.operation = operation

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            return f"{self.operation} failed: {message}"
        return message


class RateLimitExhaustedError(GitHubAPIError):
    """GitHub API rate limit exhausted."""

    def __init__(
        self,
        reset_at: datetime,
        rate_limit_remaining: int = 0,
        operation: str | None = None,
    ):
        self.reset_at = reset_at
        super().__init__(
            f"Rate limit exhausted. Resets at {reset_at.isoformat()}",
            status_code=403,
            rate_limit_remaining=rate_limit_remaining,
            operation=operation,
        )


class RepoNotFoundError(GitHubAPIError):
    """GitHub repository (or pull request within it) not found."""

    def __init__(self, repo: str, operation: str | None = None):
        self.repo = repo
        super().__init__(
            f"Repository not found: {repo}", status_code=404, operation=operation
        )


class ConfigError(ReviewStatsError):
    """Error with configuration."""


class CredentialError(ConfigError):
    """The GitHub credential is missing or cannot be read."""
