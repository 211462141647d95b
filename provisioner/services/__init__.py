"""
Provisioning services.

Each service wraps one upstream client and applies the error policy:
NotFoundError for missing named resources, ProvisioningError otherwise.
"""

from provisioner.services.azure_devops_service import AzureDevOpsService
from provisioner.services.jira_service import JiraService, derive_project_key
from provisioner.services.github_service import (
    GitHubService,
    select_possibly_derived_repositories,
)

__all__ = [
    "AzureDevOpsService",
    "GitHubService",
    "JiraService",
    "derive_project_key",
    "select_possibly_derived_repositories",
]
