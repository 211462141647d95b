"""
Jira API Client

This client covers the parts of the Jira Cloud REST API v3 and the
Agile REST API v1.0 needed to provision a Scrum board: projects,
filters, boards and the current user.

Reference: https://developer.atlassian.com/cloud/jira/platform/rest/v3/
"""

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from provisioner.config import JiraConfig
from provisioner.errors import UpstreamAPIError

logger = logging.getLogger(__name__)

API_PATH = "/rest/api/3"
AGILE_PATH = "/rest/agile/1.0"


class JiraAPIError(UpstreamAPIError):
    """
    Custom exception for Jira API errors.

    Keeps the raw response body so callers can log what Jira rejected.
    """
    def __init__(self, status_code: int, reason: str, body: Any = None):
        self.reason = reason
        self.body = body
        super().__init__(status_code, reason)

    def __str__(self):
        return f"Jira API returned status {self.status_code}: {self.reason}"


class JiraClient:
    """
    Client for a Jira Cloud site.

    Usage:
        client = JiraClient(JiraConfig.from_settings(settings))
        me = client.get_myself()
        filter_ = client.create_filter({"name": "Ops Filter", "jql": "project = OPS"})
    """

    def __init__(
        self,
        config: JiraConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self.base_url = config.base_url
        self.transport = transport

        credentials = base64.b64encode(
            f"{config.email}:{config.api_token}".encode()
        ).decode()
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Basic {credentials}",
            "Accept": "application/json",
        }

    def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an HTTP request to the Jira site.

        Args:
            method: HTTP method
            endpoint: Full path including the API prefix
            params: Query parameters
            json_data: JSON body

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            JiraAPIError: If Jira answers with any non-2xx status or a
                success body that is not JSON
            httpx.HTTPError: If the request could not be sent
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"Jira API: {method} {url}")

        with httpx.Client(transport=self.transport) as client:
            response = client.request(
                method=method,
                url=url,
                headers=self.headers,
                params=params,
                json=json_data,
                timeout=self.config.timeout,
            )

            if not response.is_success:
                try:
                    body = response.json()
                except ValueError:
                    body = response.text
                raise JiraAPIError(response.status_code, response.reason_phrase, body)

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                raise JiraAPIError(
                    response.status_code, "Response body is not valid JSON", response.text
                )

    def get_myself(self) -> Dict[str, Any]:
        """Get the user the credentials belong to (accountId, displayName, ...)."""
        return self._make_request("GET", f"{API_PATH}/myself")

    def search_projects(self, query: str) -> Dict[str, Any]:
        """Search projects by name/key. Matches are under `values`."""
        return self._make_request(
            "GET", f"{API_PATH}/project/search", params={"query": query}
        )

    def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._make_request("POST", f"{API_PATH}/project", json_data=payload)

    def create_filter(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._make_request("POST", f"{API_PATH}/filter", json_data=payload)

    def create_board(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._make_request("POST", f"{AGILE_PATH}/board", json_data=payload)
