"""
GitHub API Client

This client handles the repository endpoints of the GitHub REST API.
It uses httpx for HTTP requests and handles authentication and error
handling.

Reference: https://docs.github.com/en/rest/repos/repos
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from provisioner.config import GitHubConfig
from provisioner.errors import UpstreamAPIError

logger = logging.getLogger(__name__)

# The only page the façade ever reads; GitHub's maximum page size.
PER_PAGE = 100


class GitHubAPIError(UpstreamAPIError):
    """Custom exception for GitHub API errors."""
    def __str__(self):
        return f"GitHub API Error {self.status_code}: {self.message}"


class GitHubClient:
    """
    Client for interacting with GitHub's REST API.

    This class provides methods to:
    - Generate a repository from a template
    - Create a repository for the authenticated user
    - Get a single repository
    - List the authenticated user's repositories

    Usage:
        client = GitHubClient(GitHubConfig.from_settings(settings))
        repo = client.get_repository("octocat", "template-service")
        mine = client.list_user_repositories()
    """

    def __init__(
        self,
        config: GitHubConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            config: Token and API settings
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.base_url = config.base_url
        self.transport = transport

        # Set up headers for all requests
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "Authorization": f"token {config.token}",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": config.api_version,
        }

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None
    ) -> Any:
        """
        Make an HTTP request to GitHub API.

        Args:
            method: HTTP method
            endpoint: API endpoint (e.g., "/user/repos")
            params: Query parameters
            json_data: JSON body for POST/PATCH requests

        Returns:
            JSON response from GitHub

        Raises:
            GitHubAPIError: If the request fails or the body is not JSON
            httpx.HTTPError: If the request could not be sent
        """
        url = f"{self.base_url}{endpoint}"

        with httpx.Client(transport=self.transport) as client:
            response = client.request(
                method=method,
                url=url,
                headers=self.headers,
                params=params,
                json=json_data,
                timeout=self.config.timeout
            )

            # Check for errors
            if response.status_code >= 400:
                try:
                    error_msg = response.json().get("message", "Unknown error")
                except (ValueError, AttributeError):
                    error_msg = response.text or response.reason_phrase
                raise GitHubAPIError(response.status_code, error_msg)

            try:
                return response.json()
            except ValueError:
                raise GitHubAPIError(
                    response.status_code, "Response body is not valid JSON"
                )

    def generate_from_template(
        self,
        template_owner: str,
        template_repo: str,
        payload: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Create a repository from a template repository.

        Args:
            template_owner: Owner of the template
            template_repo: Name of the template
            payload: owner, name, description, private, include_all_branches

        Returns:
            The created repository
        """
        endpoint = f"/repos/{template_owner}/{template_repo}/generate"
        return self._make_request("POST", endpoint, json_data=payload)

    def create_user_repository(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a repository owned by the authenticated user."""
        return self._make_request("POST", "/user/repos", json_data=payload)

    def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        """Get a single repository, including its `created_at` timestamp."""
        return self._make_request("GET", f"/repos/{owner}/{repo}")

    def list_user_repositories(self) -> List[Dict[str, Any]]:
        """List the first page (up to 100) of the authenticated user's repositories."""
        return self._make_request("GET", "/user/repos", params={"per_page": PER_PAGE})
