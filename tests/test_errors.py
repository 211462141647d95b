"""
Tests for the shared error types
"""
import httpx

from provisioner.clients.azure_devops_client import AzureDevOpsAPIError
from provisioner.clients.github_client import GitHubAPIError
from provisioner.clients.jira_client import JiraAPIError
from provisioner.errors import NotFoundError, UpstreamAPIError, describe_error


class TestDescribeError:
    """Test the message relayed for each kind of failure"""

    def test_client_errors_relay_their_message(self):
        assert describe_error(AzureDevOpsAPIError(500, "TF400898")) == "TF400898"
        assert describe_error(GitHubAPIError(422, "Repository creation failed.")) == (
            "Repository creation failed."
        )
        assert describe_error(JiraAPIError(403, "Forbidden", {"errorMessages": []})) == "Forbidden"

    def test_provisioning_errors_relay_their_message(self):
        assert describe_error(NotFoundError("Repository 'x' not found")) == "Repository 'x' not found"

    def test_anything_else_falls_back_to_str(self):
        assert describe_error(httpx.ConnectError("connection refused")) == "connection refused"
        assert describe_error(KeyError("id")) == "'id'"

    def test_client_errors_share_a_base_and_keep_their_format(self):
        jira = JiraAPIError(403, "Forbidden", "body")

        assert isinstance(jira, UpstreamAPIError)
        assert jira.status_code == 403 and jira.body == "body"
        assert str(jira) == "Jira API returned status 403: Forbidden"
        assert str(GitHubAPIError(404, "Not Found")) == "GitHub API Error 404: Not Found"
        assert str(AzureDevOpsAPIError(500, "boom")) == "Azure DevOps API Error 500: boom"
