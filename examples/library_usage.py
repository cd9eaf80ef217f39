"""Example: Rank reviewers of a repository with review-stats."""

from __future__ import annotations

import logging
import os
from datetime import date

from review_stats import GitHubClient, StatsAggregator, load_config
from review_stats.formatter import format_report


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")

    config = load_config()
    config.repository.owner = "octocat"
    config.repository.name = "Hello-World"

    with GitHubClient(token=os.environ["GITHUB_TOKEN"], config=config) as client:
        report = StatsAggregator(client, config).run(
            start=date(2024, 1, 1), end=date(2024, 12, 31)
        )

    print(f"Pull requests: {report.pull_request_count}")
    print(f"Search cost: {report.search_cost} ({report.rate_limit_remaining} remaining)")
    print(format_report(report, color=True))


if __name__ == "__main__":
    main()
