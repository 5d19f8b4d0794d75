"""Unit tests for branch publishing."""

import pytest
from unittest.mock import Mock, call

from bundle_update_pr.errors import VersionControlError
from bundle_update_pr.publish import (
    REMOTE_NAME,
    authenticated_remote_url,
    default_git_email,
    publish_branch,
)
from bundle_update_pr.run_context import EnterpriseHost


class TestRemoteUrl:
    def test_public(self, make_context):
        assert authenticated_remote_url(make_context()) == "https://test-github-token@github.com/masutaka/sample-app"

    def test_enterprise_token_and_host(self, make_context):
        ctx = make_context(
            host_config=EnterpriseHost(access_token="ent-token", api_endpoint="https://ghe.corp.local/api/v3"),
            github_host="ghe.corp.local",
        )

        assert authenticated_remote_url(ctx) == "https://ent-token@ghe.corp.local/masutaka/sample-app"


def test_default_git_email():
    assert default_git_email("bundle-bot", "github.com") == "bundle-bot@users.noreply.github.com"


class TestPublishBranch:
    """Test the ordered git sequence."""

    def test_runs_steps_in_order(self, make_context):
        git = Mock()

        branch = publish_branch(make_context(), git, "bundle-bot", "bot@example.com")

        assert branch == "bundle-update-20180929154455"
        assert git.mock_calls == [
            call.add_remote(REMOTE_NAME, "https://test-github-token@github.com/masutaka/sample-app"),
            call.set_identity("bundle-bot", "bot@example.com"),
            call.add("Gemfile.lock"),
            call.commit("$ bundle update && bundle update --ruby"),
            call.rename_branch("bundle-update-20180929154455"),
            call.push(REMOTE_NAME, "bundle-update-20180929154455"),
        ]

    def test_failure_aborts_remaining_steps(self, make_context):
        git = Mock()
        git.commit.side_effect = VersionControlError("commit failed")

        with pytest.raises(VersionControlError):
            publish_branch(make_context(), git, "bundle-bot", "bot@example.com")

        git.add.assert_called_once_with("Gemfile.lock")
        git.rename_branch.assert_not_called()
        git.push.assert_not_called()
