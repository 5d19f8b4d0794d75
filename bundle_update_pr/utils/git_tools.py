from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import List, Optional

from bundle_update_pr.errors import RefreshFailedError, VersionControlError
from bundle_update_pr.utils.logger import log_debug, log_error, log_info, sanitize_text


def _redact(args: List[str]) -> str:
    # Remote URLs carry the access token; never echo them.
    return " ".join(re.sub(r"(https?://)[^/\s@]+@", r"\1<token>@", a) for a in args)


class GitClient:
    """The few git commands the workflow needs, run in the CI checkout."""

    def __init__(self, cwd: Optional[Path] = None):
        self.cwd = Path(cwd) if cwd else None

    def _git(self, *args: str) -> str:
        cmd = ["git", *args]
        log_debug("Running git", command=_redact(cmd))
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self.cwd) if self.cwd else None,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = sanitize_text((e.stderr or "").strip())
            log_error("git command failed", command=_redact(cmd), returncode=e.returncode, stderr=stderr)
            raise VersionControlError(f"`{_redact(cmd)}` failed with exit status {e.returncode}: {stderr}") from e
        except OSError as e:
            raise VersionControlError(f"Unable to run git: {e}") from e
        return proc.stdout

    def add_remote(self, name: str, url: str) -> None:
        self._git("remote", "add", name, url)

    def set_identity(self, username: str, email: str) -> None:
        self._git("config", "user.name", username)
        self._git("config", "user.email", email)

    def add(self, path: str) -> None:
        self._git("add", path)

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def rename_branch(self, branch: str) -> None:
        self._git("branch", "-M", branch)

    def push(self, remote: str, branch: str) -> None:
        self._git("push", "-q", remote, branch)

    def status(self) -> str:
        """Short status with branch header (``git status -sb``)."""
        return self._git("status", "-sb")


class BundleRefresher:
    """Runs the lock refresh shell command and reports success."""

    def __init__(self, command: str, cwd: Optional[Path] = None):
        self.command = command
        self.cwd = Path(cwd) if cwd else None

    def refresh(self) -> bool:
        log_info("Refreshing lock file", command=self.command)
        try:
            proc = subprocess.run(self.command, cwd=str(self.cwd) if self.cwd else None, shell=True)
        except OSError as e:
            raise RefreshFailedError(f"Unable to execute `{self.command}`: {e}") from e
        return proc.returncode == 0
