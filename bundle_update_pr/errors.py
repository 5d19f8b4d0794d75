"""Error kinds raised while opening a bundle update pull request.

Every error is fatal for the run: nothing here is retried or compensated.
"""
from typing import Optional


class BundleUpdatePrError(Exception):
    """Base class for all workflow errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(BundleUpdatePrError):
    """Mandatory settings are missing or inconsistent."""


class RefreshFailedError(BundleUpdatePrError):
    """The dependency lock refresh command exited with a failure status."""


class VersionControlError(BundleUpdatePrError):
    """A git command failed while publishing the update branch."""


class HostingApiError(BundleUpdatePrError):
    """A hosting API request failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
