"""Detection of an already opened bundle update pull request."""
from __future__ import annotations

import re
from typing import Optional, Protocol, List

from bundle_update_pr.run_context import BRANCH_PREFIX, TITLE_PREFIX, RepositoryCoordinates
from bundle_update_pr.utils.logger import log_info

_TITLE_RE = re.compile(rf"\A{re.escape(TITLE_PREFIX)}")
_BRANCH_RE = re.compile(rf"\A{re.escape(BRANCH_PREFIX)}\d+")


class PullRequestLister(Protocol):
    def list_pull_requests(self, repo: RepositoryCoordinates) -> List: ...


def is_bundle_update_pr(title: Optional[str], head_ref: Optional[str]) -> bool:
    """Both the title and the head branch must follow the naming convention."""
    return bool(_TITLE_RE.match(title or "")) and bool(_BRANCH_RE.match(head_ref or ""))


def has_existing_update_pr(client: PullRequestLister, repo: RepositoryCoordinates) -> bool:
    for pr in client.list_pull_requests(repo):
        if is_bundle_update_pr(pr.title, pr.head_ref):
            log_info("Found open bundle update PR", number=pr.number, branch=pr.head_ref)
            return True
    return False


def should_skip(client: PullRequestLister, repo: RepositoryCoordinates, allow_dup_pr: bool = False) -> bool:
    if allow_dup_pr:
        return False
    return has_existing_update_pr(client, repo)
