"""Immutable per-run context.

``RunContext`` captures everything a run needs to know about its environment:
which repository it targets, which host and credentials it talks to, which
branch CI checked out and the single "now" used for the branch name and the PR
title. It is built once, before any mutating action, and threaded through
every workflow step instead of re-reading ``os.environ``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple, Union, TYPE_CHECKING

from bundle_update_pr.errors import ConfigurationError

if TYPE_CHECKING:
    from bundle_update_pr.config import Config

DEFAULT_GITHUB_HOST = "github.com"
PUBLIC_API_ENDPOINT = "https://api.github.com"

BRANCH_PREFIX = "bundle-update-"
TITLE_PREFIX = "bundle update at "

# https://github.com/owner/repo.git
_HTTPS_URL = re.compile(r"^https://([^/@]+)/")
# git@github.com:owner/repo.git
_SSH_URL = re.compile(r"^[^@/\s]+@([^:/\s]+):")


@dataclass(frozen=True)
class RepositoryCoordinates:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """e.g. ``rails/rails``"""
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class PublicHost:
    access_token: str = field(repr=False)

    is_enterprise = False
    api_endpoint = PUBLIC_API_ENDPOINT


@dataclass(frozen=True)
class EnterpriseHost:
    access_token: str = field(repr=False)
    api_endpoint: str

    is_enterprise = True


HostConfig = Union[PublicHost, EnterpriseHost]


@dataclass(frozen=True)
class UpdateOptions:
    """Caller-supplied workflow options."""

    git_username: Optional[str] = None
    git_email: Optional[str] = None
    git_branches: Tuple[str, ...] = ("master",)
    assignees: Tuple[str, ...] = ()
    reviewers: Tuple[str, ...] = ()
    labels: Tuple[str, ...] = ()
    allow_dup_pr: bool = False


@dataclass(frozen=True)
class RunContext:
    repo: RepositoryCoordinates
    host_config: HostConfig
    github_host: str
    current_branch: Optional[str]
    now: datetime
    options: UpdateOptions = field(default_factory=UpdateOptions)
    lock_file: str = "Gemfile.lock"
    refresh_command: str = "bundle update && bundle update --ruby"
    note_path: str = ".circleci/BUNDLE_UPDATE_NOTE.md"

    @property
    def branch_name(self) -> str:
        """Remote branch name, e.g. ``bundle-update-20180929154455``."""
        return branch_name_for(self.now)

    @property
    def pr_title(self) -> str:
        return pr_title_for(self.now)

    @property
    def commit_message(self) -> str:
        return f"$ {self.refresh_command}"


def branch_name_for(now: datetime) -> str:
    return f"{BRANCH_PREFIX}{now.strftime('%Y%m%d%H%M%S')}"


def pr_title_for(now: datetime) -> str:
    return f"{TITLE_PREFIX}{now.strftime('%Y-%m-%d %H:%M:%S %Z')}".rstrip()


def resolve_github_host(repository_url: Optional[str]) -> str:
    """Guess the git host from the CI repository URL.

    Both remote forms are understood; anything else falls back to github.com.
    """
    if not repository_url:
        return DEFAULT_GITHUB_HOST
    for pattern in (_HTTPS_URL, _SSH_URL):
        m = pattern.search(repository_url.strip())
        if m:
            return m.group(1)
    return DEFAULT_GITHUB_HOST


def _present(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def validate_environment(config: "Config") -> None:
    """Raise ``ConfigurationError`` on the first missing or inconsistent setting."""
    issues = config.validate_configuration()
    if issues:
        raise ConfigurationError(issues[0])


def select_host_config(config: "Config") -> HostConfig:
    token = _present(config.enterprise_octokit_access_token)
    endpoint = _present(config.enterprise_octokit_api_endpoint)
    if token and not endpoint:
        raise ConfigurationError("$ENTERPRISE_OCTOKIT_API_ENDPOINT isn't set")
    if endpoint and not token:
        raise ConfigurationError("$ENTERPRISE_OCTOKIT_ACCESS_TOKEN isn't set")
    if token:
        return EnterpriseHost(access_token=token, api_endpoint=endpoint.rstrip("/"))

    public_token = _present(config.github_access_token)
    if not public_token:
        raise ConfigurationError("$GITHUB_ACCESS_TOKEN isn't set")
    return PublicHost(access_token=public_token)


def build_run_context(
    config: "Config",
    options: Optional[UpdateOptions] = None,
    now: Optional[datetime] = None,
) -> RunContext:
    """Validate configuration and freeze it into a ``RunContext``."""
    validate_environment(config)
    host_config = select_host_config(config)
    return RunContext(
        repo=RepositoryCoordinates(
            owner=config.circle_project_username.strip(),
            name=config.circle_project_reponame.strip(),
        ),
        host_config=host_config,
        github_host=resolve_github_host(config.circle_repository_url),
        current_branch=_present(config.circle_branch),
        now=now or datetime.now().astimezone(),
        options=options or UpdateOptions(),
        lock_file=config.lock_file,
        refresh_command=config.refresh_command,
        note_path=config.note_path,
    )
