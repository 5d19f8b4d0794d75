from __future__ import annotations

import argparse
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from langgraph.graph import END, StateGraph
from pydantic import ValidationError

from bundle_update_pr.config import Config, get_config
from bundle_update_pr.errors import BundleUpdatePrError
from bundle_update_pr.nodes import (
    check_changes,
    check_duplicate,
    create_pull_request,
    decorate_pull_request,
    finish,
    publish_branch,
    validate_environment,
)
from bundle_update_pr.run_context import UpdateOptions
from bundle_update_pr.state import UpdateState
from bundle_update_pr.utils.logger import configure_logging, log_error


def build_graph():
    g = StateGraph(UpdateState)
    g.set_entry_point("validate_environment")
    g.add_node("validate_environment", validate_environment)
    g.add_node("check_duplicate", check_duplicate)
    g.add_node("check_changes", check_changes)
    g.add_node("publish_branch", publish_branch)
    g.add_node("create_pull_request", create_pull_request)
    g.add_node("decorate_pull_request", decorate_pull_request)
    g.add_node("finish", finish)

    g.add_edge("validate_environment", "check_duplicate")
    g.add_conditional_edges(
        "check_duplicate",
        lambda s: "finish" if s.get("status") else "check_changes",
        {"finish": "finish", "check_changes": "check_changes"},
    )
    g.add_conditional_edges(
        "check_changes",
        lambda s: "finish" if s.get("status") else "publish_branch",
        {"finish": "finish", "publish_branch": "publish_branch"},
    )
    g.add_edge("publish_branch", "create_pull_request")
    g.add_edge("create_pull_request", "decorate_pull_request")
    g.add_edge("decorate_pull_request", "finish")
    g.add_edge("finish", END)

    return g.compile()


def create_if_needed(
    options: Optional[UpdateOptions] = None,
    *,
    config: Optional[Config] = None,
    hosting=None,
    git=None,
    refresher=None,
    compare_linker=None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Open a bundle update pull request unless one exists or nothing changed.

    Returns the final graph state; ``status`` is one of ``skipped_duplicate``,
    ``no_changes`` or ``created``. Collaborators left as ``None`` are built
    from the configuration.
    """
    state: Dict[str, Any] = {
        "settings": config if config is not None else get_config(),
        "options": options or UpdateOptions(),
    }
    for key, value in (("hosting", hosting), ("git", git), ("refresher", refresher),
                       ("compare_linker", compare_linker), ("now", now)):
        if value is not None:
            state[key] = value
    return build_graph().invoke(state)


def _csv(value: Optional[str]) -> tuple:
    return tuple(v.strip() for v in (value or "").split(",") if v.strip())


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Open a pull request for `bundle update` from CI")
    parser.add_argument("branches", nargs="*", default=["master"],
                        help="Branches on which the update may run (default: master)")
    parser.add_argument("--git-username", dest="git_username", default=None,
                        help="Commit author name (default: login of the token owner)")
    parser.add_argument("--git-email", dest="git_email", default=None,
                        help="Commit author e-mail (default: <username>@users.noreply.<host>)")
    parser.add_argument("-a", "--assignees", default="", help="Comma-separated assignees")
    parser.add_argument("-r", "--reviewers", default="", help="Comma-separated reviewers")
    parser.add_argument("-l", "--labels", default="", help="Comma-separated labels")
    parser.add_argument("-d", "--allow-dup-pr", dest="allow_dup_pr", action="store_true",
                        help="Open a PR even if a bundle update PR is already open")
    return parser.parse_args(argv)


def options_from_args(args: argparse.Namespace) -> UpdateOptions:
    return UpdateOptions(
        git_username=args.git_username,
        git_email=args.git_email,
        git_branches=tuple(args.branches),
        assignees=_csv(args.assignees),
        reviewers=_csv(args.reviewers),
        labels=_csv(args.labels),
        allow_dup_pr=args.allow_dup_pr,
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    load_dotenv()

    try:
        config = get_config()
    except ValidationError as e:
        log_error("Configuration validation failed", error=str(e))
        print(f"❌ Invalid configuration: {e}")
        sys.exit(1)

    configure_logging(config.log_level, config.log_format)
    config.log_configuration()

    try:
        result = create_if_needed(options_from_args(args), config=config)
    except BundleUpdatePrError as e:
        log_error("Bundle update PR aborted", error_type=type(e).__name__, error=e.message)
        print(f"❌ {e.message}")
        sys.exit(1)

    # Only print non-sensitive summary
    print(result.get("message", "done"))


if __name__ == "__main__":
    main()
