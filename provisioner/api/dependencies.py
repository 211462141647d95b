"""
FastAPI dependencies.

Each provider builds its service once per process from the application
settings. The Jira service is shared so its cached account id survives
across requests.
"""

from functools import lru_cache

from provisioner.clients.azure_devops_client import AzureDevOpsClient
from provisioner.clients.github_client import GitHubClient
from provisioner.clients.jira_client import JiraClient
from provisioner.config import AzureDevOpsConfig, GitHubConfig, JiraConfig, settings
from provisioner.services.azure_devops_service import AzureDevOpsService
from provisioner.services.github_service import GitHubService
from provisioner.services.jira_service import JiraService


@lru_cache
def get_azure_devops_service() -> AzureDevOpsService:
    """Raises ConfigurationError when AZURE_DEVOPS_ORG/AZURE_DEVOPS_PAT are missing."""
    config = AzureDevOpsConfig.from_settings(settings)
    return AzureDevOpsService(AzureDevOpsClient(config))


@lru_cache
def get_jira_service() -> JiraService:
    return JiraService(JiraClient(JiraConfig.from_settings(settings)))


@lru_cache
def get_github_service() -> GitHubService:
    """Raises ConfigurationError when GITHUB_PERSONAL_ACCESS_TOKEN is missing."""
    config = GitHubConfig.from_settings(settings)
    return GitHubService(GitHubClient(config), jira=get_jira_service())
