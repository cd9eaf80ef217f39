"""Click-based CLI for pull request review statistics."""

from __future__ import annotations

import logging
import sys
from datetime import date, datetime

import click
import yaml

from review_stats.aggregator import StatsAggregator
from review_stats.config import (
    CommentSource,
    ReviewStatsConfig,
    SelfApprovalPolicy,
    load_config,
    load_token,
)
from review_stats.exceptions import ConfigError, ReviewStatsError
from review_stats.formatter import format_json, format_summary, log_report
from review_stats.github_client import GitHubClient
from review_stats.redaction import install_redaction

logger = logging.getLogger("review_stats.cli")

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )
    if not verbose:
        # httpx logs every request at INFO.
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _apply_overrides(
    config: ReviewStatsConfig,
    repo: str | None,
    since: datetime | None,
    until: datetime | None,
    token_path: str | None,
    owner_self_approval: str | None,
    comment_source: str | None,
) -> ReviewStatsConfig:
    if repo is not None:
        parts = repo.split("/")
        if len(parts) != 2 or not all(parts):
            raise ConfigError("--repo must be in owner/name format.")
        config.repository.owner, config.repository.name = parts
    if since is not None:
        config.window.start = since.date()
    if until is not None:
        config.window.end = until.date()
    elif since is not None and config.window.end < config.window.start:
        # A --since past the configured window runs up to today.
        config.window.end = date.today()
    if config.window.end < config.window.start:
        raise ConfigError(
            f"window end {config.window.end.isoformat()} is before start "
            f"{config.window.start.isoformat()}; pass --until to set the end"
        )
    if token_path is not None:
        config.token_path = token_path
    if owner_self_approval is not None:
        config.ownership.self_approval = SelfApprovalPolicy(owner_self_approval)
    if comment_source is not None:
        config.fetch.comment_source = CommentSource(comment_source)
    return config


@click.group()
@click.version_option(package_name="review-stats")
def main() -> None:
    """review-stats - rank pull request authors, approvers and reviewers."""


@main.command()
@click.option("--repo", default=None, help="Repository (owner/name)")
@click.option("--since", type=_DATE, default=None, help="Window start (YYYY-MM-DD)")
@click.option("--until", type=_DATE, default=None, help="Window end (YYYY-MM-DD)")
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token")
@click.option(
    "--github-token-path",
    "token_path",
    default=None,
    help="Path to the file containing the GitHub OAuth secret",
)
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option(
    "--owner-self-approval",
    type=click.Choice([p.value for p in SelfApprovalPolicy]),
    default=None,
    help="How PRs authored by repository owners credit the author as approver",
)
@click.option(
    "--comment-source",
    type=click.Choice([s.value for s in CommentSource]),
    default=None,
    help="Comments scanned for /lgtm and /approve",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every request")
@click.option("--json", "output_json", is_flag=True, help="Print the report as JSON")
def run(
    repo: str | None,
    since: datetime | None,
    until: datetime | None,
    token: str | None,
    token_path: str | None,
    config_path: str | None,
    owner_self_approval: str | None,
    comment_source: str | None,
    verbose: bool,
    output_json: bool,
) -> None:
    """Count PR authors, approvers and reviewers over a time window."""
    _configure_logging(verbose)

    try:
        config = _apply_overrides(
            load_config(config_path),
            repo,
            since,
            until,
            token_path,
            owner_self_approval,
            comment_source,
        )
        if not token:
            token = load_token(config.token_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    install_redaction(token)

    try:
        with GitHubClient(token=token, config=config) as client:
            report = StatsAggregator(client, config).run()
    except ReviewStatsError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    if output_json:
        click.echo(format_json(report))
        return

    logger.info("%s", format_summary(report))
    log_report(report, logger)


@main.command("show-config")
@click.option("--config", "config_path", default=None, help="Config file path")
def show_config(config_path: str | None) -> None:
    """Print the effective configuration as YAML."""
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False), nl=False)
