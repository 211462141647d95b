"""
API Clients

This package contains thin client classes for the upstream APIs:
- AzureDevOpsClient: Git repositories in Azure DevOps
- GitHubClient: GitHub repositories and templates
- JiraClient: Jira projects, filters and boards
"""

from provisioner.clients.azure_devops_client import AzureDevOpsClient, AzureDevOpsAPIError
from provisioner.clients.github_client import GitHubClient, GitHubAPIError
from provisioner.clients.jira_client import JiraClient, JiraAPIError

__all__ = [
    "AzureDevOpsClient",
    "AzureDevOpsAPIError",
    "GitHubClient",
    "GitHubAPIError",
    "JiraClient",
    "JiraAPIError",
]
