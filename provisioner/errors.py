"""
Provisioning errors.

Services raise these; the API layer turns them into HTTP responses:
- NotFoundError      -> 404
- ConfigurationError -> 503
- ProvisioningError  -> 500
"""

from typing import List


class ProvisioningError(Exception):
    """An upstream call failed. Carries the contextual message only."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ProvisioningError):
    """A named lookup (project, repository, template) returned 404 upstream."""


class ConfigurationError(ProvisioningError):
    """A provider cannot be used because required settings are missing."""

    def __init__(self, provider: str, missing: List[str]):
        self.provider = provider
        self.missing = missing
        super().__init__(f"{provider} is not configured: {', '.join(missing)} not set")


class UpstreamAPIError(Exception):
    """Base for the clients' API errors: an HTTP status plus a readable message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def describe_error(error: Exception) -> str:
    """The message worth relaying to the caller for any upstream failure."""
    if isinstance(error, (ProvisioningError, UpstreamAPIError)):
        return error.message
    return str(error)
