"""
Azure DevOps API Client

This client handles the Git repository endpoints of the Azure DevOps
REST API. Authentication is HTTP Basic with an empty username and the
personal access token as password.

Reference: https://learn.microsoft.com/en-us/rest/api/azure/devops/git/repositories
"""

import logging
from typing import Any, Dict, Optional

import httpx

from provisioner.config import AzureDevOpsConfig
from provisioner.errors import UpstreamAPIError

logger = logging.getLogger(__name__)


class AzureDevOpsAPIError(UpstreamAPIError):
    """Custom exception for Azure DevOps API errors."""
    def __str__(self):
        return f"Azure DevOps API Error {self.status_code}: {self.message}"


class AzureDevOpsClient:
    """
    Client for the repository endpoints of one Azure DevOps organization.

    The upstream create/delete/rename endpoints take opaque identifiers,
    so this client also exposes the name-to-id lookups.

    Usage:
        client = AzureDevOpsClient(AzureDevOpsConfig.from_settings(settings))
        project = client.get_project("Platform")
        repo = client.create_repository("Platform", project["id"], "billing-api")
    """

    def __init__(
        self,
        config: AzureDevOpsConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the Azure DevOps client.

        Args:
            config: Organization and credentials
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.base_url = config.base_url
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}

    def _make_request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an HTTP request to the Azure DevOps API.

        Args:
            method: HTTP method
            endpoint: Path relative to the organization URL
            json_data: JSON body for POST/PATCH requests

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            AzureDevOpsAPIError: If the API answers with a 4xx/5xx status
                or a success body that is not JSON
            httpx.HTTPError: If the request could not be sent
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Azure DevOps API: {method} {url}")

        with httpx.Client(transport=self.transport) as client:
            response = client.request(
                method=method,
                url=url,
                headers=self.headers,
                params={"api-version": self.config.api_version},
                json=json_data,
                auth=("", self.config.personal_access_token),
                timeout=self.config.timeout,
            )

            if response.status_code >= 400:
                try:
                    error_msg = response.json().get("message", "Unknown error")
                except (ValueError, AttributeError):
                    error_msg = response.text or response.reason_phrase
                raise AzureDevOpsAPIError(response.status_code, error_msg)

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                raise AzureDevOpsAPIError(
                    response.status_code, "Response body is not valid JSON"
                )

    def get_project(self, project_name: str) -> Dict[str, Any]:
        """Get a project by name. The response carries its `id`."""
        return self._make_request("GET", f"/_apis/projects/{project_name}")

    def get_repository(self, project_name: str, repo_name: str) -> Dict[str, Any]:
        """Get a repository by name (or id) inside a project."""
        return self._make_request(
            "GET", f"/{project_name}/_apis/git/repositories/{repo_name}"
        )

    def create_repository(
        self, project_name: str, project_id: str, repo_name: str
    ) -> Dict[str, Any]:
        """Create an empty Git repository in the given project."""
        return self._make_request(
            "POST",
            f"/{project_name}/_apis/git/repositories",
            json_data={"name": repo_name, "project": {"id": project_id}},
        )

    def delete_repository(self, project_name: str, repo_id: str) -> None:
        """Delete a repository by id."""
        self._make_request(
            "DELETE", f"/{project_name}/_apis/git/repositories/{repo_id}"
        )

    def rename_repository(
        self, project_name: str, repo_id: str, new_name: str
    ) -> Dict[str, Any]:
        """Rename a repository by id."""
        return self._make_request(
            "PATCH",
            f"/{project_name}/_apis/git/repositories/{repo_id}",
            json_data={"name": new_name},
        )
