"""bundle-update-pr: open a pull request for `bundle update` from CI.

Provides a LangGraph pipeline to:
  validate_environment → check_duplicate → check_changes → publish_branch
  → create_pull_request → decorate_pull_request → finish

CLI entrypoint lives in `bundle_update_pr.graph`.
"""

from __future__ import annotations

from bundle_update_pr.graph import create_if_needed
from bundle_update_pr.run_context import UpdateOptions

__all__ = [
    "create_if_needed",
    "UpdateOptions",
]
