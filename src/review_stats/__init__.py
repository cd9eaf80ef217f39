"""review-stats - pull request review activity per user."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from review_stats.aggregator import StatsAggregator
from review_stats.collector import PullRequestCollector, build_search_query
from review_stats.config import ReviewStatsConfig, load_config
from review_stats.counter import RankedCounter
from review_stats.exceptions import ReviewStatsError
from review_stats.github_client import GitHubClient
from review_stats.models import StatsReport
from review_stats.signals import ReviewSignalExtractor, reconcile

try:
    __version__ = version("review-stats")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "GitHubClient",
    "PullRequestCollector",
    "RankedCounter",
    "ReviewSignalExtractor",
    "ReviewStatsConfig",
    "ReviewStatsError",
    "StatsAggregator",
    "StatsReport",
    "__version__",
    "build_search_query",
    "load_config",
    "reconcile",
]
