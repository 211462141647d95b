"""
Tests for Jira board provisioning
"""
import base64
import logging

import httpx
import pytest

from provisioner.clients.jira_client import JiraClient
from provisioner.errors import ProvisioningError
from provisioner.services.jira_service import JiraService, build_filter_jql, derive_project_key
from tests.conftest import RecordingTransport, request_json


class FakeJira:
    """Scripted Jira site. Each endpoint's response can be overridden per test."""

    def __init__(self):
        self.projects = []
        self.responses = {}

    def handle(self, request: httpx.Request) -> httpx.Response:
        key = f"{request.method} {request.url.path}"
        if key in self.responses:
            response = self.responses[key]
            if isinstance(response, Exception):
                raise response
            return response

        if key == "GET /rest/api/3/myself":
            return httpx.Response(200, json={"accountId": "acc-123", "displayName": "Dev Bot"})
        if key == "GET /rest/api/3/project/search":
            return httpx.Response(200, json={"values": self.projects})
        if key == "POST /rest/api/3/project":
            body = request_json(request)
            return httpx.Response(201, json={"id": 10001, "key": body["key"], "self": "..."})
        if key == "POST /rest/api/3/filter":
            body = request_json(request)
            return httpx.Response(200, json={"id": "20001", "name": body["name"], "jql": body["jql"]})
        if key == "POST /rest/agile/1.0/board":
            body = request_json(request)
            return httpx.Response(201, json={"id": 7, "name": body["name"], "type": body["type"]})
        return httpx.Response(404, json={"errorMessages": ["unknown endpoint"]})


@pytest.fixture
def jira():
    return FakeJira()


@pytest.fixture
def transport(jira):
    return RecordingTransport(jira.handle)


@pytest.fixture
def service(jira_config, transport):
    return JiraService(JiraClient(jira_config, transport=transport))


class TestProjectKey:
    """Test project key derivation"""

    def test_strips_symbols_and_uppercases(self):
        assert derive_project_key("ab") == "AB"
        assert derive_project_key("Data Team 2") == "DATATEAM2"

    def test_truncates_to_ten_characters(self):
        assert derive_project_key("My Cool Board!") == "MYCOOLBOAR"
        assert len(derive_project_key("a" * 40)) == 10

    def test_jql(self):
        assert build_filter_jql("OPS") == "project = OPS ORDER BY created DESC"


class TestCreateBoard:
    """Test the project -> filter -> board flow"""

    def test_creates_project_filter_and_board_in_order(self, service, transport):
        result = service.create_board("Payments Team")

        assert transport.calls == [
            "GET /rest/api/3/project/search",
            "GET /rest/api/3/myself",
            "POST /rest/api/3/project",
            "POST /rest/api/3/filter",
            "POST /rest/agile/1.0/board",
        ]
        assert result["project"]["key"] == "PAYMENTSTE"
        assert result["filter"]["id"] == "20001"
        assert result["board"]["id"] == 7

    def test_payloads(self, service, transport):
        service.create_board("Payments Team")
        project, filter_, board = (request_json(r) for r in transport.requests[2:])

        assert project == {
            "key": "PAYMENTSTE",
            "name": "Payments Team",
            "projectTypeKey": "software",
            "leadAccountId": "acc-123",
            "projectTemplateKey": "com.pyxis.greenhopper.jira:basic-software-development-template",
        }
        assert filter_ == {
            "name": "Payments Team Filter",
            "description": "Filter for Payments Team board",
            "jql": "project = PAYMENTSTE ORDER BY created DESC",
            "sharePermissions": [],
        }
        assert board == {
            "name": "Payments Team",
            "type": "scrum",
            "filterId": "20001",
            "location": {"projectKeyOrId": "PAYMENTSTE", "type": "project"},
        }

    def test_basic_auth_header(self, service, transport):
        service.test_connection()

        expected = base64.b64encode(b"dev@contoso.com:jira-token").decode()
        assert transport.requests[0].headers["Authorization"] == f"Basic {expected}"

    def test_reuses_existing_project_case_insensitively(self, service, transport, jira):
        jira.projects = [
            {"id": "1", "key": "PAY", "name": "Payments Team Archive"},
            {"id": "2", "key": "PT", "name": "payments team"},
        ]

        result = service.create_board("Payments Team")

        assert result["project"]["key"] == "PT"
        assert "POST /rest/api/3/project" not in transport.calls
        assert "GET /rest/api/3/myself" not in transport.calls

    def test_search_failure_falls_through_to_creation(self, service, transport, jira, caplog):
        jira.responses["GET /rest/api/3/project/search"] = httpx.Response(500, text="boom")

        with caplog.at_level(logging.WARNING):
            result = service.create_board("Payments Team")

        assert result["project"]["key"] == "PAYMENTSTE"
        assert "POST /rest/api/3/project" in transport.calls
        assert "Error searching for project" in caplog.text

    def test_unreadable_search_response_falls_through_to_creation(self, service, transport, jira):
        jira.responses["GET /rest/api/3/project/search"] = httpx.Response(
            200, text="<html>login</html>"
        )

        result = service.create_board("Payments Team")

        assert result["board"]["id"] == 7
        assert "POST /rest/api/3/project" in transport.calls

    def test_unexpected_search_shape_falls_through_to_creation(self, service, transport, jira):
        jira.responses["GET /rest/api/3/project/search"] = httpx.Response(200, json=["PAY"])

        result = service.create_board("Payments Team")

        assert result["project"]["key"] == "PAYMENTSTE"
        assert "POST /rest/api/3/project" in transport.calls

    def test_filter_failure_never_creates_board(self, service, transport, jira):
        jira.responses["POST /rest/api/3/filter"] = httpx.Response(
            400, json={"errorMessages": ["The JQL query is invalid"]}
        )

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")

        assert "POST /rest/agile/1.0/board" not in transport.calls
        assert exc_info.value.message == (
            "Failed to create Jira board: Failed to create Jira filter: "
            "Failed to create filter: Bad Request"
        )

    def test_unreadable_filter_response_never_creates_board(self, service, transport, jira):
        jira.responses["POST /rest/api/3/filter"] = httpx.Response(200, text="<html>login</html>")

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")

        assert "POST /rest/agile/1.0/board" not in transport.calls
        assert exc_info.value.message == (
            "Failed to create Jira board: Failed to create Jira filter: "
            "Failed to create filter: Response body is not valid JSON"
        )

    def test_project_creation_failure_stops_flow(self, service, transport, jira):
        jira.responses["POST /rest/api/3/project"] = httpx.Response(
            400, json={"errors": {"projectKey": "A project with that key already exists."}}
        )

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")

        assert transport.calls[-1] == "POST /rest/api/3/project"
        assert exc_info.value.message == (
            "Failed to create Jira board: Failed to create Jira project: "
            "Failed to create project: Bad Request"
        )

    def test_board_failure_reports_status(self, service, jira, caplog):
        jira.responses["POST /rest/agile/1.0/board"] = httpx.Response(
            403, json={"errorMessages": ["No permission"]}
        )

        with caplog.at_level(logging.ERROR), pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")

        assert exc_info.value.message == (
            "Failed to create Jira board: Jira API returned status 403: Forbidden"
        )
        assert "No permission" in caplog.text

    def test_network_error_is_wrapped(self, service, jira):
        jira.responses["POST /rest/api/3/filter"] = httpx.ConnectError("connection reset")

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")

        assert exc_info.value.message == (
            "Failed to create Jira board: Failed to create Jira filter: connection reset"
        )

    def test_account_id_looked_up_once(self, service, transport):
        service.create_board("Payments Team")
        service.create_board("Growth Team")

        assert transport.calls.count("GET /rest/api/3/myself") == 1

    def test_failed_account_lookup_is_not_cached(self, service, transport, jira):
        jira.responses["GET /rest/api/3/myself"] = httpx.Response(401, text="Unauthorized")

        with pytest.raises(ProvisioningError) as exc_info:
            service.create_board("Payments Team")
        assert "Unable to get Jira account ID" in exc_info.value.message

        del jira.responses["GET /rest/api/3/myself"]
        service.create_board("Payments Team")

        assert service.get_account_id() == "acc-123"
        assert transport.calls.count("GET /rest/api/3/myself") == 2


class TestConnection:
    """Test the connection check"""

    def test_success(self, service):
        assert service.test_connection() is True

    def test_unauthorized_returns_false(self, service, jira):
        jira.responses["GET /rest/api/3/myself"] = httpx.Response(401, text="Unauthorized")

        assert service.test_connection() is False

    def test_network_error_returns_false(self, service, jira):
        jira.responses["GET /rest/api/3/myself"] = httpx.ConnectError("no route to host")

        assert service.test_connection() is False
