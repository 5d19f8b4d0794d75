"""Configuration management using Pydantic BaseSettings.

Settings are read from the CI environment (CircleCI variables) and an
optional ``.env`` file. Only a handful are load-bearing; the rest are tunables
with sensible defaults for a Ruby/Bundler project.
"""
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Main configuration class."""

    # CI project identity
    circle_project_username: Optional[str] = Field(None, description="Repository owner")
    circle_project_reponame: Optional[str] = Field(None, description="Repository name")
    circle_branch: Optional[str] = Field(None, description="Branch checked out by the CI job")
    circle_repository_url: Optional[str] = Field(None, description="Remote URL, used to guess the git host")

    # Credentials
    github_access_token: Optional[str] = Field(None, description="Primary GitHub access token")
    enterprise_octokit_access_token: Optional[str] = Field(None, description="GitHub Enterprise access token")
    enterprise_octokit_api_endpoint: Optional[str] = Field(None, description="GitHub Enterprise API endpoint")
    github_api_timeout: int = Field(30, ge=5, le=300, description="Request timeout in seconds")

    # Bundle update
    lock_file: str = Field("Gemfile.lock", description="Lock file committed by the update")
    refresh_command: str = Field("bundle update && bundle update --ruby", description="Shell command refreshing the lock file")
    note_path: str = Field(".circleci/BUNDLE_UPDATE_NOTE.md", description="Optional note appended to the PR body")

    # Logging
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    @field_validator('circle_project_username', 'circle_project_reponame', 'circle_branch',
                     'circle_repository_url', 'github_access_token',
                     'enterprise_octokit_access_token', 'enterprise_octokit_api_endpoint')
    @classmethod
    def blank_as_unset(cls, v):
        # Empty or whitespace-only values count as unset
        if v is None:
            return None
        return v.strip() or None

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level: {v}. Valid options: {valid_levels}')
        return v.upper()

    @field_validator('lock_file', 'refresh_command')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('must not be blank')
        return v.strip()

    def validate_configuration(self) -> List[str]:
        """Validate the load-bearing settings and return any issues."""
        issues = []

        if not self.circle_project_username:
            issues.append("$CIRCLE_PROJECT_USERNAME isn't set")
        if not self.circle_project_reponame:
            issues.append("$CIRCLE_PROJECT_REPONAME isn't set")
        if not self.github_access_token:
            issues.append("$GITHUB_ACCESS_TOKEN isn't set")

        if self.enterprise_octokit_access_token and not self.enterprise_octokit_api_endpoint:
            issues.append("$ENTERPRISE_OCTOKIT_API_ENDPOINT isn't set")
        if not self.enterprise_octokit_access_token and self.enterprise_octokit_api_endpoint:
            issues.append("$ENTERPRISE_OCTOKIT_ACCESS_TOKEN isn't set")

        return issues

    def log_configuration(self) -> None:
        """Log the current configuration (sanitized)."""
        from bundle_update_pr.utils.logger import log_info

        log_info("Configuration loaded",
                repository=f"{self.circle_project_username}/{self.circle_project_reponame}",
                branch=self.circle_branch,
                enterprise=bool(self.enterprise_octokit_access_token),
                lock_file=self.lock_file,
                refresh_command=self.refresh_command,
                note_path=self.note_path,
                log_level=self.log_level)


# Global configuration instance (lazy loading)
_config = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from environment variables."""
    global _config
    _config = Config()
    return _config
