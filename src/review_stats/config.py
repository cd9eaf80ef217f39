"""Configuration models for review-stats."""

from __future__ import annotations

import os
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from review_stats.exceptions import ConfigError, CredentialError

DEFAULT_CONFIG_FILES = (".review-stats.yml", ".review-stats.yaml")


class SelfApprovalPolicy(StrEnum):
    """How a PR author who is also a repository owner is treated."""
    IGNORE = "ignore"
    CREDIT = "credit"
    SUPPRESS = "suppress"


class CommentSource(StrEnum):
    """Which pull request comment stream is scanned for /lgtm and /approve."""
    REVIEW = "review"
    ISSUE = "issue"
    ALL = "all"


class RepositoryConfig(BaseModel):
    """The repository whose pull requests are counted."""
    owner: str = "kubernetes"
    name: str = "kops"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class WindowConfig(BaseModel):
    """Date range matched against the pull request ``updated`` timestamp."""
    start: date = date(2020, 7, 1)
    end: date = date(2021, 7, 1)

    @model_validator(mode="after")
    def _check_order(self) -> WindowConfig:
        if self.end < self.start:
            raise ValueError(
                f"window end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )
        return self


class OwnershipConfig(BaseModel):
    """Trusted maintainers and the self-approval rule applied to them."""
    owners: list[str] = Field(default_factory=lambda: [
        "geojaz",
        "hakman",
        "johngmyers",
        "justinsb",
        "kashifsaadat",
        "mikesplain",
        "olemarkus",
        "rdrgmnzs",
        "rifelpet",
        "zetaab",
    ])
    self_approval: SelfApprovalPolicy = SelfApprovalPolicy.IGNORE

    def is_owner(self, login: str) -> bool:
        return login in self.owners


class FetchConfig(BaseModel):
    """GitHub API fetch parameters."""
    page_size: int = Field(default=100, ge=1, le=100)
    comment_source: CommentSource = CommentSource.REVIEW
    timeout: float = 30.0


class ThrottleConfig(BaseModel):
    """Client-side request pacing (token bucket)."""
    enabled: bool = True
    hourly_tokens: int = Field(default=3500, gt=0)
    burst: int = Field(default=1000, gt=0)


class ReviewStatsConfig(BaseModel):
    """Top-level configuration composing all sub-configs."""
    repository: RepositoryConfig = Field(default_factory=RepositoryConfig)
    window: WindowConfig = Field(default_factory=WindowConfig)
    ownership: OwnershipConfig = Field(default_factory=OwnershipConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    throttle: ThrottleConfig = Field(default_factory=ThrottleConfig)
    token_path: str = "github.token"


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path) as f:
        yaml_data = yaml.safe_load(f)
    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return yaml_data


def load_config(path: str | Path | None = None) -> ReviewStatsConfig:
    """Load configuration from YAML file, environment variables, and defaults.

    Priority (highest to lowest):
    1. Environment variables (REVIEW_STATS_*)
    2. YAML config file
    3. Defaults

    Raises:
        ConfigError: If the YAML is malformed or a value fails validation.
    """
    config_data: dict[str, Any] = {}

    try:
        if path is not None:
            config_path = Path(path)
            if config_path.is_file():
                config_data = _read_yaml(config_path)
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                p = Path(default_path)
                if p.is_file():
                    config_data = _read_yaml(p)
                    break
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML configuration: {exc}") from exc

    env_mapping = {
        "REVIEW_STATS_OWNER": ("repository", "owner"),
        "REVIEW_STATS_REPO": ("repository", "name"),
        "REVIEW_STATS_SINCE": ("window", "start"),
        "REVIEW_STATS_UNTIL": ("window", "end"),
        "REVIEW_STATS_PAGE_SIZE": ("fetch", "page_size"),
        "REVIEW_STATS_COMMENT_SOURCE": ("fetch", "comment_source"),
        "REVIEW_STATS_SELF_APPROVAL": ("ownership", "self_approval"),
    }

    for env_var, (section, key) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            config_data.setdefault(section, {})[key] = value

    token_path = os.environ.get("REVIEW_STATS_TOKEN_PATH")
    if token_path is not None:
        config_data["token_path"] = token_path

    try:
        return ReviewStatsConfig(**config_data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc


def load_token(path: str | Path) -> str:
    """Read a GitHub token from *path*, stripping surrounding whitespace.

    Raises:
        CredentialError: If the file cannot be read or is empty.
    """
    try:
        token = Path(path).read_text().strip()
    except OSError as exc:
        raise CredentialError(f"error reading {path}: {exc}") from exc
    if not token:
        raise CredentialError(f"token file {path} is empty")
    return token
