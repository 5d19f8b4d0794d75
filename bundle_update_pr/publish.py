"""Publishing of the update branch to the remote."""
from __future__ import annotations

from bundle_update_pr.run_context import RunContext
from bundle_update_pr.utils.logger import log_info

REMOTE_NAME = "github-url-with-token"


def authenticated_remote_url(ctx: RunContext) -> str:
    # Token only in URL for remote operations; do not log this.
    return f"https://{ctx.host_config.access_token}@{ctx.github_host}/{ctx.repo.full_name}"


def default_git_email(username: str, github_host: str) -> str:
    return f"{username}@users.noreply.{github_host}"


def publish_branch(ctx: RunContext, git, username: str, email: str) -> str:
    """Commit the lock file on a fresh branch and push it.

    Returns the remote branch name, e.g. ``bundle-update-20180929154455``.
    Any failing git step aborts; earlier steps are not rolled back.
    """
    branch = ctx.branch_name
    git.add_remote(REMOTE_NAME, authenticated_remote_url(ctx))
    git.set_identity(username, email)
    git.add(ctx.lock_file)
    git.commit(ctx.commit_message)
    git.rename_branch(branch)
    git.push(REMOTE_NAME, branch)
    log_info("Pushed bundle update branch", branch=branch, repository=ctx.repo.full_name)
    return branch
