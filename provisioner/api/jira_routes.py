"""
Jira Routes

Endpoints:
- GET /jira/test-connection - Check the configured Jira credentials
- POST /jira/create-board/{name} - Provision project, filter and Scrum board
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from provisioner.api.dependencies import get_jira_service
from provisioner.errors import ProvisioningError
from provisioner.pyd_models.jira_models import BoardCreationResult, ConnectionStatus
from provisioner.services.jira_service import JiraService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jira", tags=["jira"])


@router.get("/test-connection", response_model=ConnectionStatus)
def test_connection(service: JiraService = Depends(get_jira_service)):
    """Returns `{"success": false}` instead of an error when Jira is unreachable."""
    return ConnectionStatus(success=service.test_connection())


@router.post(
    "/create-board/{name}",
    response_model=BoardCreationResult,
    status_code=201,
)
def create_board(name: str, service: JiraService = Depends(get_jira_service)):
    """
    Create a Scrum board called `name`.

    Reuses the project with the same name if one exists, otherwise creates
    it, then creates `<name> Filter` and the board on top of it.
    """
    logger.info(f"📋 Creating Jira board: {name}")

    try:
        result = service.create_board(name)
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )

    logger.info(f"✅ Board ready: {name}")
    return result
