"""Markdown comparison links for the gems updated by a pull request.

The lock file diff of the pull request is parsed for top-level spec lines
(``    name (version)``); each changed gem is looked up on rubygems.org to find
its GitHub repository so a ``compare`` view can be linked.
"""
from __future__ import annotations

import difflib
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from bundle_update_pr.errors import HostingApiError
from bundle_update_pr.run_context import RepositoryCoordinates
from bundle_update_pr.utils.logger import log_debug, log_warning

RUBYGEMS_API = "https://rubygems.org/api/v1/gems/{name}.json"

# "+    rails (7.1.3)"; dependency constraint lines are indented deeper
_SPEC_LINE = re.compile(r"^([+-]) {4}(\S+) \(([^)]+)\)$")
_GITHUB_REPO = re.compile(r"^https?://(?:www\.)?github\.com/([^/\s]+)/([^/\s#?]+)")


@dataclass(frozen=True)
class GemChange:
    name: str
    old_version: Optional[str]
    new_version: Optional[str]


def parse_lockfile_patch(patch: Optional[str]) -> List[GemChange]:
    """Gems whose version differs between the removed and added lines, in diff order."""
    order: List[str] = []
    old: Dict[str, str] = {}
    new: Dict[str, str] = {}
    for line in (patch or "").splitlines():
        m = _SPEC_LINE.match(line)
        if not m:
            continue
        sign, name, version = m.groups()
        if name not in old and name not in new:
            order.append(name)
        # First platform variant wins
        (old if sign == "-" else new).setdefault(name, version)
    return [
        GemChange(name, old.get(name), new.get(name))
        for name in order
        if old.get(name) != new.get(name)
    ]


def github_repo_url(info: Dict[str, Any]) -> Optional[str]:
    for key in ("source_code_uri", "homepage_uri"):
        m = _GITHUB_REPO.match(info.get(key) or "")
        if m:
            repo = m.group(2)
            if repo.endswith(".git"):
                repo = repo[:-4]
            return f"https://github.com/{m.group(1)}/{repo}"
    return None


def format_change(change: GemChange, info: Dict[str, Any]) -> str:
    repo_url = github_repo_url(info)
    home = repo_url or info.get("homepage_uri") or info.get("source_code_uri")
    name = f"[{change.name}]({home})" if home else change.name

    if change.old_version is None:
        return f"* {name}: (added) `{change.new_version}`"
    if change.new_version is None:
        return f"* {name}: (removed) `{change.old_version}`"

    versions = f"`{change.old_version}...{change.new_version}`"
    if repo_url:
        compare_url = f"{repo_url}/compare/v{change.old_version}...v{change.new_version}"
        return f"* {name}: [{versions}]({compare_url})"
    return f"* {name}: {versions}"


class CompareLinker:
    def __init__(self, client, repo: RepositoryCoordinates, lock_file: str = "Gemfile.lock", timeout: int = 30):
        self.client = client
        self.repo = repo
        self.lock_file = lock_file
        self.timeout = timeout

    def _gem_info(self, name: str) -> Dict[str, Any]:
        try:
            resp = requests.get(RUBYGEMS_API.format(name=name), timeout=self.timeout)
            resp.raise_for_status()
            return resp.json() or {}
        except (requests.RequestException, ValueError) as e:
            log_warning("Gem lookup failed, linking without repository", gem=name, error=str(e))
            return {}

    def lockfile_patch(self, pr_number: int, base: Optional[str] = None, head: Optional[str] = None) -> str:
        """Lock file hunk of the pull request diff.

        The files API omits ``patch`` for large diffs; the base and head
        contents are diffed instead when both refs are known.
        """
        for f in self.client.pull_request_files(self.repo, pr_number):
            if f.get("filename") != self.lock_file:
                continue
            if f.get("patch"):
                return f["patch"]
            log_warning("Lock file diff missing from pull request files", pr_number=pr_number, lock_file=self.lock_file)
            if base and head:
                return self._diff_refs(base, head)
            return ""
        return ""

    def _diff_refs(self, base: str, head: str) -> str:
        try:
            old = self.client.file_content(self.repo, self.lock_file, base)
            new = self.client.file_content(self.repo, self.lock_file, head)
        except HostingApiError as e:
            log_warning("Unable to fetch lock file contents", base=base, head=head, error=e.message)
            return ""
        return "\n".join(difflib.unified_diff(old.splitlines(), new.splitlines(), lineterm=""))

    def make_compare_links(self, pr_number: int, base: Optional[str] = None, head: Optional[str] = None) -> List[str]:
        changes = parse_lockfile_patch(self.lockfile_patch(pr_number, base, head))
        log_debug("Parsed lock file diff", pr_number=pr_number, gems=[c.name for c in changes])
        return [format_change(change, self._gem_info(change.name)) for change in changes]
