"""
Jira board provisioning service.

create_board() runs a fixed, strictly sequential flow:

    1. find the project by name, or create it
    2. create a filter over that project
    3. create a Scrum board bound to the filter and the project

A failure at any step stops the flow. Nothing created by earlier steps is
rolled back.
"""

import logging
import re
from typing import Any, Dict, Optional

import httpx

from provisioner.clients.jira_client import JiraAPIError, JiraClient
from provisioner.errors import ProvisioningError, describe_error

logger = logging.getLogger(__name__)

PROJECT_KEY_MAX_LENGTH = 10
PROJECT_TYPE_KEY = "software"
PROJECT_TEMPLATE_KEY = "com.pyxis.greenhopper.jira:basic-software-development-template"
BOARD_TYPE = "scrum"


def derive_project_key(name: str) -> str:
    """
    Build a Jira project key from a board name.

    Drops everything that is not a letter or digit, keeps the first 10
    characters and uppercases them: "Data Team 2" -> "DATATEAM2".
    """
    return re.sub(r"[^A-Za-z0-9]", "", name)[:PROJECT_KEY_MAX_LENGTH].upper()


def build_filter_jql(project_key: str) -> str:
    return f"project = {project_key} ORDER BY created DESC"


def _log_rejection(step: str, error: JiraAPIError):
    logger.error(f"{step} error: status {error.status_code}, body: {error.body}")


class JiraService:
    """
    Board provisioning on top of JiraClient.

    The account id of the configured user is looked up on first use and
    kept for the lifetime of the instance; the API holds a single instance
    per process.
    """

    def __init__(self, client: JiraClient):
        self.client = client
        self._account_id: Optional[str] = None

        logger.info(f"Jira service initialized with base URL: {client.base_url}")

    def get_account_id(self) -> str:
        """
        Account id of the configured user, used as project lead.

        Only a successful lookup is cached, so a failed call is retried on
        the next board creation.
        """
        if self._account_id is not None:
            return self._account_id

        try:
            account_id = self.client.get_myself()["accountId"]
        except (JiraAPIError, httpx.HTTPError, KeyError, TypeError) as e:
            logger.error(f"Failed to get account ID: {e}")
            raise ProvisioningError("Unable to get Jira account ID for project creation") from e

        self._account_id = account_id
        logger.info(f"Retrieved account ID: {account_id}")
        return account_id

    def find_project(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Look up a project whose name equals `name`, ignoring case.

        Any search failure, including an unreadable response, is logged
        and reported as "no match" so that board creation falls through to
        creating the project. This also hides connectivity problems at this
        step; they resurface on the create call that follows.
        """
        try:
            response = self.client.search_projects(name)
            for project in (response or {}).get("values", []):
                if (project.get("name") or "").lower() == name.lower():
                    return project
        except Exception as e:
            logger.warning(f"Error searching for project: {e}")
        return None

    def create_or_get_project(self, name: str) -> Dict[str, Any]:
        existing = self.find_project(name)
        if existing:
            logger.info(f"Found existing project: {existing['name']} ({existing.get('key')})")
            return existing

        try:
            key = derive_project_key(name)
            account_id = self.get_account_id()

            logger.info(
                f"Creating new Jira project with name: {name}, key: {key}, and lead: {account_id}"
            )
            project = self.client.create_project({
                "key": key,
                "name": name,
                "projectTypeKey": PROJECT_TYPE_KEY,
                "leadAccountId": account_id,
                "projectTemplateKey": PROJECT_TEMPLATE_KEY,
            })
        except JiraAPIError as e:
            _log_rejection("Project creation", e)
            raise ProvisioningError(
                f"Failed to create Jira project: Failed to create project: {e.reason}"
            ) from e
        except (ProvisioningError, httpx.HTTPError) as e:
            logger.error(f"Failed to create project: {e}")
            raise ProvisioningError(f"Failed to create Jira project: {describe_error(e)}") from e

        # Jira answers project creation with {id, key, self}; keep the name for callers
        project.setdefault("name", name)
        logger.info(f"Project created: {project['name']} ({project.get('key')})")
        return project

    def create_filter(self, name: str, project_key: str) -> Dict[str, Any]:
        """Create a private filter listing every issue of the project, newest first."""
        try:
            filter_ = self.client.create_filter({
                "name": f"{name} Filter",
                "description": f"Filter for {name} board",
                "jql": build_filter_jql(project_key),
                "sharePermissions": [],
            })
        except JiraAPIError as e:
            _log_rejection("Filter creation", e)
            raise ProvisioningError(
                f"Failed to create Jira filter: Failed to create filter: {e.reason}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to create filter: {e}")
            raise ProvisioningError(f"Failed to create Jira filter: {e}") from e

        logger.info(f"Filter created: {filter_.get('name')} ({filter_.get('id')})")
        return filter_

    def create_board(self, name: str) -> Dict[str, Any]:
        """
        Provision a Scrum board called `name`.

        Returns:
            {"board": ..., "project": ..., "filter": ...}

        Raises:
            ProvisioningError: If any of the three steps fails
        """
        logger.info(f"Starting complete Jira board creation process for: {name}")

        try:
            project = self.create_or_get_project(name)
            filter_ = self.create_filter(name, project["key"])

            logger.info(
                f"Creating board with name: {name}, project: {project['key']}, filter: {filter_['id']}"
            )
            board = self.client.create_board({
                "name": name,
                "type": BOARD_TYPE,
                "filterId": filter_["id"],
                "location": {
                    "projectKeyOrId": project["key"],
                    "type": "project",
                },
            })
        except JiraAPIError as e:
            logger.info(f"Board creation response status: {e.status_code}")
            _log_rejection("Board creation", e)
            raise ProvisioningError(f"Failed to create Jira board: {e}") from e
        except (ProvisioningError, httpx.HTTPError, KeyError) as e:
            logger.error(f"Failed to create Jira board: {describe_error(e)}")
            raise ProvisioningError(f"Failed to create Jira board: {describe_error(e)}") from e

        logger.info(f"Successfully created Jira board: {name}")
        return {
            "board": board,
            "project": project,
            "filter": filter_,
        }

    def test_connection(self) -> bool:
        """Check the credentials against /myself. Never raises."""
        try:
            me = self.client.get_myself()
        except Exception as e:
            logger.error(f"Jira connection test failed: {e}")
            return False

        logger.info(f"Jira connection test successful. Connected as: {(me or {}).get('displayName')}")
        return True
