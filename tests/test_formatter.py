"""Tests for output formatting."""

from __future__ import annotations

import json
import logging
from datetime import date

import click
import pytest

from review_stats.counter import RankedCounter
from review_stats.formatter import (
    format_json,
    format_report,
    format_summary,
    format_table,
    log_report,
)
from review_stats.models import StatsReport


@pytest.fixture
def sample_report() -> StatsReport:
    authors = RankedCounter(name="authors")
    authors.update(["alice", "alice", "bob"])
    approvers = RankedCounter(name="approvers")
    approvers.update(["bob"])
    reviewers = RankedCounter(name="reviewers")
    reviewers.update(["carol", "bob"])
    return StatsReport(
        repository="kubernetes/kops",
        window_start=date(2020, 7, 1),
        window_end=date(2021, 7, 1),
        authors=authors,
        approvers=approvers,
        reviewers=reviewers,
        pull_request_count=3,
        search_cost=1,
        rate_limit_remaining=4999,
    )


class TestFormatTable:
    def test_header_and_rows(self) -> None:
        counter = RankedCounter(name="authors")
        counter.update(["bob", "alice", "alice"])
        assert format_table(counter) == [
            "authors:",
            "     2 alice",
            "     1 bob",
        ]

    def test_empty_table(self) -> None:
        assert format_table(RankedCounter(name="approvers")) == ["approvers:"]

    def test_wide_counts(self) -> None:
        counter = RankedCounter(name="authors", counts={"alice": 1234567})
        assert format_table(counter)[1] == "1234567 alice"


class TestFormatReport:
    def test_table_order(self, sample_report: StatsReport) -> None:
        text = format_report(sample_report)
        assert text.splitlines() == [
            "authors:",
            "     2 alice",
            "     1 bob",
            "approvers:",
            "     1 bob",
            "reviewers:",
            "     1 bob",
            "     1 carol",
        ]

    def test_color_styles_headers(self, sample_report: StatsReport) -> None:
        text = format_report(sample_report, color=True)
        assert click.style("authors:", bold=True) in text
        assert click.unstyle(text) == format_report(sample_report)

    def test_summary(self, sample_report: StatsReport) -> None:
        summary = format_summary(sample_report)
        assert "kubernetes/kops 2020-07-01..2021-07-01" in summary
        assert "3 pull request(s)" in summary
        assert "4999 remaining" in summary


class TestLogReport:
    def test_logs_each_line(
        self, sample_report: StatsReport, caplog: pytest.LogCaptureFixture
    ) -> None:
        logger = logging.getLogger("review_stats.tests.formatter")
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_report(sample_report, logger)
        assert caplog.messages == format_report(sample_report).splitlines()


class TestFormatJson:
    def test_round_trips(self, sample_report: StatsReport) -> None:
        parsed = json.loads(format_json(sample_report))
        assert parsed["repository"] == "kubernetes/kops"
        assert parsed["window_start"] == "2020-07-01"
        assert parsed["authors"]["counts"] == {"alice": 2, "bob": 1}
        assert parsed["rankings"]["reviewers"] == [["bob", 1], ["carol", 1]]
        assert parsed["search_cost"] == 1
