"""Decides whether the lock refresh produced something worth committing."""
from __future__ import annotations

from bundle_update_pr.errors import RefreshFailedError
from bundle_update_pr.run_context import RunContext
from bundle_update_pr.utils.logger import log_info


def needs_commit(ctx: RunContext, refresher, git) -> bool:
    """Refresh the lock file on an eligible branch and look for a diff.

    Branches outside ``ctx.options.git_branches`` are left untouched.
    """
    if ctx.current_branch not in ctx.options.git_branches:
        log_info("Branch not eligible for bundle update",
                 branch=ctx.current_branch, eligible=list(ctx.options.git_branches))
        return False

    if not refresher.refresh():
        raise RefreshFailedError(f"Unable to execute `{ctx.refresh_command}`")

    return ctx.lock_file in git.status()
