"""Fold per-PR review signals into ranked author/approver/reviewer counts."""

from __future__ import annotations

import logging
from datetime import date
from typing import Protocol

from pydantic import ValidationError

from review_stats.collector import PullRequestCollector, SearchClient
from review_stats.config import ReviewStatsConfig, SelfApprovalPolicy, WindowConfig
from review_stats.counter import RankedCounter
from review_stats.exceptions import ConfigError
from review_stats.models import PullRequest, SignalSet, StatsReport
from review_stats.signals import ReviewSignalExtractor, ReviewSource

logger = logging.getLogger(__name__)


class StatsClient(SearchClient, ReviewSource, Protocol):
    """Everything the aggregator needs from the GitHub client."""


def _join(logins: set[str]) -> str:
    return ",".join(sorted(logins))


class StatsAggregator:
    """Run the search, extract signals for each PR, and count them."""

    def __init__(self, client: StatsClient, config: ReviewStatsConfig) -> None:
        self._client = client
        self.config = config

    def _apply_ownership(self, pr: PullRequest, signals: SignalSet) -> None:
        ownership = self.config.ownership
        if ownership.self_approval == SelfApprovalPolicy.IGNORE:
            return
        if not ownership.is_owner(pr.author_login):
            return
        if ownership.self_approval == SelfApprovalPolicy.CREDIT:
            signals.approvers.add(pr.author_login)
        elif ownership.self_approval == SelfApprovalPolicy.SUPPRESS:
            signals.approvers.discard(pr.author_login)

    def run(
        self,
        owner: str | None = None,
        name: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> StatsReport:
        """Produce the report for the configured repository and window.

        Arguments override the corresponding configuration values.  An end
        before the start raises :class:`~review_stats.exceptions.ConfigError`.  Any
        :class:`~review_stats.exceptions.GitHubAPIError` propagates; no
        partial report is returned.
        """
        owner = owner or self.config.repository.owner
        name = name or self.config.repository.name
        start = start or self.config.window.start
        end = end or self.config.window.end
        try:
            WindowConfig(start=start, end=end)
        except ValidationError as exc:
            raise ConfigError(
                f"window end {end.isoformat()} is before start {start.isoformat()}"
            ) from exc

        collector = PullRequestCollector(self._client, page_size=self.config.fetch.page_size)
        collected = collector.collect(owner, name, start, end)
        logger.info(
            "Search cost %d point(s). %d remaining.", collected.total_cost, collected.remaining
        )
        logger.info("Found %d pull request(s) in %s/%s", len(collected.pull_requests), owner, name)

        extractor = ReviewSignalExtractor(
            self._client, owner, name, comment_source=self.config.fetch.comment_source
        )
        authors = RankedCounter(name="authors")
        approvers = RankedCounter(name="approvers")
        reviewers = RankedCounter(name="reviewers")

        for pr in collected.pull_requests:
            signals = extractor.extract(pr.number)
            self._apply_ownership(pr, signals)

            authors.increment(pr.author_login)
            approvers.update(signals.approvers)
            reviewers.update(signals.reviewers)

            logger.info(
                "PR: %5d %s %s %s",
                pr.number,
                pr.author_login,
                _join(signals.approvers),
                _join(signals.reviewers),
            )

        return StatsReport(
            repository=f"{owner}/{name}",
            window_start=start,
            window_end=end,
            authors=authors,
            approvers=approvers,
            reviewers=reviewers,
            pull_request_count=len(collected.pull_requests),
            search_cost=collected.total_cost,
            rate_limit_remaining=collected.remaining,
        )
