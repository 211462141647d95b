"""
Configuration Management

This module loads environment variables from .env file and provides
a centralized Settings object, plus one immutable configuration object
per upstream provider.

Usage:
    from provisioner.config import settings, GitHubConfig

    github_config = GitHubConfig.from_settings(settings)
    print(github_config.base_url)
"""

import logging
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from provisioner.errors import ConfigurationError

logger = logging.getLogger(__name__)

AZURE_DEVOPS_API_VERSION = "7.1-preview.1"
GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every credential defaults to an empty string so the API can boot with
    only some of the providers configured. Missing values are reported by
    validate_settings() and by each provider config.
    """

    # Azure DevOps
    azure_devops_org: str = ""
    azure_devops_pat: str = ""

    # GitHub
    github_personal_access_token: str = ""

    # Jira Cloud
    jira_base_url: str = ""
    jira_email: str = ""
    jira_api_token: str = ""

    # Backend API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    http_timeout: float = 30.0  # seconds, applied to every upstream call
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra fields in .env
    )


# Create a single instance to use throughout the application
settings = Settings()


class AzureDevOpsConfig(BaseModel):
    """Connection settings for one Azure DevOps organization."""

    model_config = ConfigDict(frozen=True)

    organization: str
    personal_access_token: str
    api_version: str = AZURE_DEVOPS_API_VERSION
    timeout: float = 30.0

    @property
    def base_url(self) -> str:
        return f"https://dev.azure.com/{self.organization}"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AzureDevOpsConfig":
        missing = []
        if not settings.azure_devops_org:
            missing.append("AZURE_DEVOPS_ORG")
        if not settings.azure_devops_pat:
            missing.append("AZURE_DEVOPS_PAT")
        if missing:
            raise ConfigurationError("Azure DevOps", missing)

        return cls(
            organization=settings.azure_devops_org,
            personal_access_token=settings.azure_devops_pat,
            timeout=settings.http_timeout,
        )


class GitHubConfig(BaseModel):
    """Connection settings for the GitHub REST API."""

    model_config = ConfigDict(frozen=True)

    token: str
    base_url: str = GITHUB_API_URL
    api_version: str = GITHUB_API_VERSION
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubConfig":
        if not settings.github_personal_access_token:
            raise ConfigurationError("GitHub", ["GITHUB_PERSONAL_ACCESS_TOKEN"])

        return cls(
            token=settings.github_personal_access_token,
            timeout=settings.http_timeout,
        )


class JiraConfig(BaseModel):
    """
    Connection settings for a Jira Cloud site.

    Unlike the repository providers, missing Jira values do not stop the
    service from being built: they are logged and every upstream call will
    simply fail (test_connection then reports False).
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    email: str
    api_token: str
    timeout: float = 30.0

    @property
    def is_complete(self) -> bool:
        return bool(self.base_url and self.email and self.api_token)

    @classmethod
    def from_settings(cls, settings: Settings) -> "JiraConfig":
        config = cls(
            base_url=settings.jira_base_url.rstrip("/"),
            email=settings.jira_email,
            api_token=settings.jira_api_token,
            timeout=settings.http_timeout,
        )
        if not config.is_complete:
            logger.warning("Missing Jira configuration values! Check your environment variables.")
        return config


def missing_settings(settings: Settings) -> List[str]:
    """Return the names of every provider env var that is not set."""
    required = {
        "AZURE_DEVOPS_ORG": settings.azure_devops_org,
        "AZURE_DEVOPS_PAT": settings.azure_devops_pat,
        "GITHUB_PERSONAL_ACCESS_TOKEN": settings.github_personal_access_token,
        "JIRA_BASE_URL": settings.jira_base_url,
        "JIRA_EMAIL": settings.jira_email,
        "JIRA_API_TOKEN": settings.jira_api_token,
    }
    return [name for name, value in required.items() if not value]


def validate_settings(current: Settings = settings):
    """Validate that all provider settings are configured."""
    missing = missing_settings(current)
    if missing:
        raise ValueError(
            f"Configuration errors: {', '.join(missing)} not set.\n"
            f"The matching endpoints will not work until they are configured.\n"
            f"See .env.example for reference."
        )
