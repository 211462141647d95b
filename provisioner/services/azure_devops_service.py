"""
Azure DevOps repository service.

Creates, deletes and renames Git repositories inside a named project.
The upstream endpoints address repositories by id, so every operation
starts with a project-scoped name lookup.
"""

import logging
from typing import Any, Dict

import httpx

from provisioner.clients.azure_devops_client import AzureDevOpsAPIError, AzureDevOpsClient
from provisioner.errors import NotFoundError, ProvisioningError, describe_error

logger = logging.getLogger(__name__)


class AzureDevOpsService:
    """Repository provisioning on top of AzureDevOpsClient."""

    def __init__(self, client: AzureDevOpsClient):
        self.client = client

    def get_project_id(self, project_name: str) -> str:
        return self.client.get_project(project_name)["id"]

    def get_repository_id(self, project_name: str, repo_name: str) -> str:
        """
        Resolve a repository name to its id.

        Raises:
            NotFoundError: If the repository does not exist in the project
        """
        try:
            return self.client.get_repository(project_name, repo_name)["id"]
        except AzureDevOpsAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(
                    f"Repository '{repo_name}' not found in project '{project_name}'"
                ) from e
            raise

    def create_repository(self, project_name: str, repo_name: str) -> Dict[str, Any]:
        """Create `repo_name` in `project_name` and return the upstream repository."""
        try:
            project_id = self.get_project_id(project_name)
            repository = self.client.create_repository(project_name, project_id, repo_name)
        except (AzureDevOpsAPIError, httpx.HTTPError, KeyError) as e:
            logger.error(f"Azure DevOps create failed for {project_name}/{repo_name}: {e}")
            raise ProvisioningError(f"Failed to create repository: {describe_error(e)}") from e

        logger.info(f"Created repository {project_name}/{repo_name} ({repository.get('id')})")
        return repository

    def delete_repository(self, project_name: str, repo_name: str) -> Dict[str, str]:
        try:
            repo_id = self.get_repository_id(project_name, repo_name)
            self.client.delete_repository(project_name, repo_id)
        except NotFoundError:
            raise
        except (AzureDevOpsAPIError, httpx.HTTPError, KeyError) as e:
            logger.error(f"Azure DevOps delete failed for {project_name}/{repo_name}: {e}")
            raise ProvisioningError(f"Failed to delete repository: {describe_error(e)}") from e

        logger.info(f"Deleted repository {project_name}/{repo_name} ({repo_id})")
        return {"message": "Repository deleted successfully"}

    def update_repository(
        self, project_name: str, repo_name: str, new_name: str
    ) -> Dict[str, Any]:
        """Rename `repo_name` to `new_name`."""
        try:
            repo_id = self.get_repository_id(project_name, repo_name)
            repository = self.client.rename_repository(project_name, repo_id, new_name)
        except NotFoundError:
            raise
        except (AzureDevOpsAPIError, httpx.HTTPError, KeyError) as e:
            logger.error(f"Azure DevOps rename failed for {project_name}/{repo_name}: {e}")
            raise ProvisioningError(f"Failed to update repository: {describe_error(e)}") from e

        logger.info(f"Renamed repository {project_name}/{repo_name} -> {new_name}")
        return repository
