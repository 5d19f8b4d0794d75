"""Unit tests for sanitized logging helpers."""

import logging

from bundle_update_pr.utils.logger import configure_logging, logger, safe_json, sanitize_text


class TestSanitizeText:
    def test_credentialed_url(self):
        text = sanitize_text("git remote add r https://secret@github.com/o/r")

        assert "secret" not in text
        assert "https://<token>@github.com/o/r" in text

    def test_github_token(self):
        assert sanitize_text("token ghp_" + "a" * 36) == "token <github-token>"

    def test_email(self):
        assert sanitize_text("author bot@users.noreply.github.com") == "author <email>"

    def test_plain_text_untouched(self):
        assert sanitize_text("bundle update at 2018-09-29") == "bundle update at 2018-09-29"

    def test_empty(self):
        assert sanitize_text("") == ""


class TestSafeJson:
    def test_truncates(self):
        assert safe_json({"k": "x " * 1000}, max_length=50).endswith("... [truncated]")

    def test_non_serializable_falls_back_to_str(self):
        assert "object" in safe_json({"k": object()})


def test_configure_logging_sets_level():
    previous = logger.level
    try:
        configure_logging("DEBUG")
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(previous)
