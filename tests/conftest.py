"""
Test configuration and fixtures
"""

import json
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from provisioner.api.main import app
from provisioner.config import AzureDevOpsConfig, GitHubConfig, JiraConfig


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def calls(self) -> List[str]:
        """'METHOD /path' for each request, in order."""
        return [f"{r.method} {r.url.path}" for r in self.requests]


def request_json(request: httpx.Request):
    return json.loads(request.content) if request.content else None


@pytest.fixture
def azure_devops_config():
    return AzureDevOpsConfig(organization="contoso", personal_access_token="ado-pat")


@pytest.fixture
def github_config():
    return GitHubConfig(token="gh-token")


@pytest.fixture
def jira_config():
    return JiraConfig(
        base_url="https://contoso.atlassian.net",
        email="dev@contoso.com",
        api_token="jira-token",
    )


@pytest.fixture
def api_client():
    """TestClient for the FastAPI app; tests register their own dependency overrides."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
