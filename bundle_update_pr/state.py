"""Shared state type for the bundle update pull request graph."""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypedDict

from bundle_update_pr.run_context import RunContext, UpdateOptions  # noqa: F401


class UpdateState(TypedDict, total=False):
    # Inputs
    settings: Any
    options: UpdateOptions
    now: datetime

    # Resolved once by validate_environment
    run_context: RunContext

    # Collaborators (injected in tests, built from the run context otherwise)
    hosting: Any
    git: Any
    refresher: Any
    compare_linker: Any

    # Outcome
    status: str
    message: str
    branch: str
    pr_number: int
    pr_url: str
