"""Workflow steps of the bundle update pull request graph.

Each node takes the state dict and returns the updated state. Early exits set
``status`` and ``message`` and let the graph route straight to ``finish``;
errors propagate and abort the run.
"""
from __future__ import annotations

from typing import Any, Dict

from bundle_update_pr.body import Note, compose_body
from bundle_update_pr.changes import needs_commit
from bundle_update_pr.compare_links import CompareLinker
from bundle_update_pr.duplicates import should_skip
from bundle_update_pr.publish import default_git_email, publish_branch as push_update_branch
from bundle_update_pr.run_context import RunContext, build_run_context
from bundle_update_pr.utils.gh_api import GitHubClient
from bundle_update_pr.utils.git_tools import BundleRefresher, GitClient
from bundle_update_pr.utils.logger import log_info, log_workflow_progress

STATUS_SKIPPED_DUPLICATE = "skipped_duplicate"
STATUS_NO_CHANGES = "no_changes"
STATUS_CREATED = "created"

SKIP_DUPLICATE_MESSAGE = "Skip because it has already existed."
NO_CHANGES_MESSAGE = "No changes due to bundle update"


def _timeout(state: Dict[str, Any]) -> int:
    return getattr(state.get("settings"), "github_api_timeout", 30)


def validate_environment(state: Dict[str, Any]) -> Dict[str, Any]:
    ctx = build_run_context(state["settings"], state.get("options"), state.get("now"))
    log_workflow_progress("environment validated",
                          repository=ctx.repo.full_name,
                          branch=ctx.current_branch,
                          enterprise=ctx.host_config.is_enterprise)
    return {
        **state,
        "run_context": ctx,
        "hosting": state.get("hosting") or GitHubClient(ctx.host_config, timeout=_timeout(state)),
        "git": state.get("git") or GitClient(),
        "refresher": state.get("refresher") or BundleRefresher(ctx.refresh_command),
    }


def check_duplicate(state: Dict[str, Any]) -> Dict[str, Any]:
    ctx: RunContext = state["run_context"]
    if should_skip(state["hosting"], ctx.repo, ctx.options.allow_dup_pr):
        log_info(SKIP_DUPLICATE_MESSAGE)
        return {**state, "status": STATUS_SKIPPED_DUPLICATE, "message": SKIP_DUPLICATE_MESSAGE}
    log_workflow_progress("duplicate check passed")
    return state


def check_changes(state: Dict[str, Any]) -> Dict[str, Any]:
    ctx: RunContext = state["run_context"]
    if not needs_commit(ctx, state["refresher"], state["git"]):
        log_info(NO_CHANGES_MESSAGE)
        return {**state, "status": STATUS_NO_CHANGES, "message": NO_CHANGES_MESSAGE}
    log_workflow_progress("lock file changed", lock_file=ctx.lock_file)
    return state


def publish_branch(state: Dict[str, Any]) -> Dict[str, Any]:
    ctx: RunContext = state["run_context"]
    username = ctx.options.git_username or state["hosting"].current_user_login()
    email = ctx.options.git_email or default_git_email(username, ctx.github_host)
    branch = push_update_branch(ctx, state["git"], username, email)
    return {**state, "branch": branch}


def create_pull_request(state: Dict[str, Any]) -> Dict[str, Any]:
    ctx: RunContext = state["run_context"]
    pr = state["hosting"].create_pull_request(
        ctx.repo, base=ctx.current_branch, head=state["branch"], title=ctx.pr_title,
    )
    log_workflow_progress("pull request created", number=pr.number, url=pr.html_url)
    return {**state, "pr_number": pr.number, "pr_url": pr.html_url}


def decorate_pull_request(state: Dict[str, Any]) -> Dict[str, Any]:
    """Labels, body, assignees, reviewers; in that order, body always."""
    ctx: RunContext = state["run_context"]
    hosting = state["hosting"]
    number = state["pr_number"]
    options = ctx.options

    if options.labels:
        hosting.add_labels(ctx.repo, number, options.labels)

    linker = state.get("compare_linker") or CompareLinker(hosting, ctx.repo, ctx.lock_file, _timeout(state))
    links = linker.make_compare_links(number, base=ctx.current_branch, head=state.get("branch", ctx.branch_name))
    body = compose_body(links, Note(ctx.note_path).read_if_exists())
    hosting.update_pull_request_body(ctx.repo, number, body)

    if options.assignees:
        hosting.add_assignees(ctx.repo, number, options.assignees)
    if options.reviewers:
        hosting.request_reviewers(ctx.repo, number, options.reviewers)

    log_workflow_progress("pull request decorated", number=number,
                          labels=list(options.labels),
                          assignees=list(options.assignees),
                          reviewers=list(options.reviewers))
    return state


def finish(state: Dict[str, Any]) -> Dict[str, Any]:
    if state.get("status"):
        return state
    return {**state, "status": STATUS_CREATED, "message": f"PR: {state.get('pr_url') or state.get('pr_number')}"}
