"""Output formatting for review statistics."""

from __future__ import annotations

import logging

import click

from review_stats.counter import RankedCounter
from review_stats.models import StatsReport


def format_table(counter: RankedCounter) -> list[str]:
    """Header line followed by one ``count login`` line per user, most active first."""
    lines = [f"{counter.name}:"]
    lines.extend(f"{count:6d} {login}" for login, count in counter.rank())
    return lines


def format_summary(report: StatsReport) -> str:
    return (
        f"{report.repository} {report.window_start.isoformat()}..{report.window_end.isoformat()}: "
        f"{report.pull_request_count} pull request(s), "
        f"search cost {report.search_cost}, {report.rate_limit_remaining} remaining"
    )


def format_report(report: StatsReport, color: bool = False) -> str:
    """All three tables (authors, approvers, reviewers) as plain text."""
    lines: list[str] = []
    for counter in report.tables:
        table = format_table(counter)
        if color:
            table[0] = click.style(table[0], bold=True)
        lines.extend(table)
    return "\n".join(lines)


def log_report(report: StatsReport, logger: logging.Logger) -> None:
    """Emit the ranked tables line by line at INFO."""
    for counter in report.tables:
        for line in format_table(counter):
            logger.info("%s", line)


def format_json(report: StatsReport) -> str:
    return report.model_dump_json(indent=2)
