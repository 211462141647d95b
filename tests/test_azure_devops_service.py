"""
Tests for the Azure DevOps client and service against a simulated organization
"""
import base64
import uuid

import httpx
import pytest

from provisioner.clients.azure_devops_client import AzureDevOpsClient
from provisioner.errors import NotFoundError, ProvisioningError
from provisioner.services.azure_devops_service import AzureDevOpsService
from tests.conftest import RecordingTransport, request_json


class FakeOrganization:
    """In-memory Azure DevOps organization: projects and their repositories."""

    def __init__(self, projects):
        self.projects = {name: str(uuid.uuid4()) for name in projects}
        self.repositories = {name: {} for name in projects}  # project -> {repo_id: repo}
        self.fail_with = None

    def _find(self, project, name_or_id):
        repos = self.repositories[project]
        if name_or_id in repos:
            return repos[name_or_id]
        for repo in repos.values():
            if repo["name"] == name_or_id:
                return repo
        return None

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"message": "TF400898: An Internal Error Occurred."})

        parts = request.url.path.strip("/").split("/")
        # /contoso/_apis/projects/<project>
        if parts[1:3] == ["_apis", "projects"]:
            project = parts[3]
            if project not in self.projects:
                return httpx.Response(404, json={"message": f"TF200016: The following project does not exist: {project}."})
            return httpx.Response(200, json={"id": self.projects[project], "name": project})

        # /contoso/<project>/_apis/git/repositories[/<repo>]
        project = parts[1]
        if project not in self.projects:
            return httpx.Response(404, json={"message": "project not found"})

        if request.method == "POST":
            body = request_json(request)
            repo = {
                "id": str(uuid.uuid4()),
                "name": body["name"],
                "project": {"id": body["project"]["id"], "name": project},
            }
            self.repositories[project][repo["id"]] = repo
            return httpx.Response(201, json=repo)

        repo = self._find(project, parts[-1])
        if repo is None:
            return httpx.Response(404, json={"message": f"TF401019: The Git repository with name or identifier {parts[-1]} does not exist."})

        if request.method == "GET":
            return httpx.Response(200, json=repo)
        if request.method == "DELETE":
            del self.repositories[project][repo["id"]]
            return httpx.Response(204)
        if request.method == "PATCH":
            repo["name"] = request_json(request)["name"]
            return httpx.Response(200, json=repo)

        return httpx.Response(405)


@pytest.fixture
def organization():
    return FakeOrganization(["Platform"])


@pytest.fixture
def transport(organization):
    return RecordingTransport(organization.handle)


@pytest.fixture
def service(azure_devops_config, transport):
    return AzureDevOpsService(AzureDevOpsClient(azure_devops_config, transport=transport))


class TestAzureDevOpsClient:
    """Test request shape"""

    def test_requests_carry_api_version_and_basic_auth(self, service, transport):
        service.create_repository("Platform", "billing-api")

        expected = "Basic " + base64.b64encode(b":ado-pat").decode()
        for request in transport.requests:
            assert request.url.host == "dev.azure.com"
            assert request.url.params["api-version"] == "7.1-preview.1"
            assert request.headers["Authorization"] == expected

    def test_create_resolves_project_id_first(self, service, transport, organization):
        repo = service.create_repository("Platform", "billing-api")

        assert transport.calls == [
            "GET /contoso/_apis/projects/Platform",
            "POST /contoso/Platform/_apis/git/repositories",
        ]
        body = request_json(transport.requests[1])
        assert body == {"name": "billing-api", "project": {"id": organization.projects["Platform"]}}
        assert repo["name"] == "billing-api"


class TestAzureDevOpsService:
    """Test repository lifecycle and error mapping"""

    def test_create_then_delete_leaves_no_trace(self, service, organization):
        service.create_repository("Platform", "billing-api")
        assert len(organization.repositories["Platform"]) == 1

        result = service.delete_repository("Platform", "billing-api")

        assert result == {"message": "Repository deleted successfully"}
        assert organization.repositories["Platform"] == {}

    def test_delete_uses_resolved_id(self, service, transport):
        repo = service.create_repository("Platform", "billing-api")
        transport.requests.clear()

        service.delete_repository("Platform", "billing-api")

        assert transport.calls == [
            "GET /contoso/Platform/_apis/git/repositories/billing-api",
            f"DELETE /contoso/Platform/_apis/git/repositories/{repo['id']}",
        ]

    def test_delete_missing_repository_is_not_found(self, service, transport):
        with pytest.raises(NotFoundError) as exc_info:
            service.delete_repository("Platform", "ghost")

        assert exc_info.value.message == "Repository 'ghost' not found in project 'Platform'"
        # no delete attempted
        assert [r.method for r in transport.requests] == ["GET"]

    def test_rename_missing_repository_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_repository("Platform", "ghost", "spirit")

    def test_rename_repository(self, service, organization):
        service.create_repository("Platform", "billing-api")

        repo = service.update_repository("Platform", "billing-api", "billing-service")

        assert repo["name"] == "billing-service"
        names = [r["name"] for r in organization.repositories["Platform"].values()]
        assert names == ["billing-service"]

    def test_create_in_missing_project_is_generic_failure(self, service):
        with pytest.raises(ProvisioningError) as exc_info:
            service.create_repository("Nope", "billing-api")

        assert not isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.message.startswith("Failed to create repository: TF200016")

    def test_upstream_error_on_delete_is_wrapped(self, service, organization):
        organization.fail_with = 500

        with pytest.raises(ProvisioningError) as exc_info:
            service.delete_repository("Platform", "billing-api")

        assert not isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.message == (
            "Failed to delete repository: TF400898: An Internal Error Occurred."
        )

    def test_network_error_on_rename_is_wrapped(self, azure_devops_config):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = AzureDevOpsService(
            AzureDevOpsClient(azure_devops_config, transport=httpx.MockTransport(refuse))
        )

        with pytest.raises(ProvisioningError) as exc_info:
            service.update_repository("Platform", "billing-api", "billing-service")

        assert exc_info.value.message == "Failed to update repository: connection refused"

    def test_sign_in_page_instead_of_json_is_wrapped(self, azure_devops_config):
        # Azure DevOps answers a rejected PAT with a 203 and its HTML sign-in page
        service = AzureDevOpsService(
            AzureDevOpsClient(
                azure_devops_config,
                transport=httpx.MockTransport(
                    lambda request: httpx.Response(203, text="<html>Sign In</html>")
                ),
            )
        )

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_repository("Platform", "billing-api")

        assert exc_info.value.message == (
            "Failed to create repository: Response body is not valid JSON"
        )
