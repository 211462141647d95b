"""
Azure DevOps Routes

Endpoints:
- POST /azure-devops/projects/{projectName}/repositories - Create a repository
- DELETE /azure-devops/projects/{projectName}/repositories/{repoName} - Delete a repository
- PATCH /azure-devops/projects/{projectName}/repositories/{repoName} - Rename a repository
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Path

from provisioner.api.dependencies import get_azure_devops_service
from provisioner.errors import NotFoundError, ProvisioningError
from provisioner.pyd_models.azure_devops_models import (
    CreateRepositoryRequest,
    DeleteRepositoryResponse,
    UpdateRepositoryRequest,
)
from provisioner.services.azure_devops_service import AzureDevOpsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/azure-devops", tags=["azure-devops"])


@router.post(
    "/projects/{project_name}/repositories",
    status_code=201,
    summary="Create a new repository in Azure DevOps",
    responses={500: {"description": "Upstream failure"}},
)
def create_repository(
    body: CreateRepositoryRequest,
    project_name: str = Path(..., description="Name of the Azure DevOps project"),
    service: AzureDevOpsService = Depends(get_azure_devops_service),
) -> Dict[str, Any]:
    """
    Create a Git repository inside an Azure DevOps project.

    **Body:** `{"repoName": "billing-api"}`

    **Returns:** the repository as created by Azure DevOps.
    """
    logger.info(f"📦 Creating Azure DevOps repository: {project_name}/{body.repo_name}")

    try:
        return service.create_repository(project_name, body.repo_name)
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )


@router.delete(
    "/projects/{project_name}/repositories/{repo_name}",
    response_model=DeleteRepositoryResponse,
    summary="Delete a repository in Azure DevOps",
    responses={404: {"description": "Repository not found"}},
)
def delete_repository(
    project_name: str = Path(..., description="Name of the Azure DevOps project"),
    repo_name: str = Path(..., description="Name of the repository to delete"),
    service: AzureDevOpsService = Depends(get_azure_devops_service),
):
    """Delete a repository by name."""
    logger.info(f"🗑️  Deleting Azure DevOps repository: {project_name}/{repo_name}")

    try:
        return service.delete_repository(project_name, repo_name)
    except NotFoundError as e:
        logger.warning(f"⚠️  {e.message}")
        raise HTTPException(
            status_code=404,
            detail={"error": "Not Found", "message": e.message},
        )
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )


@router.patch(
    "/projects/{project_name}/repositories/{repo_name}",
    summary="Update repository name in Azure DevOps",
    responses={404: {"description": "Repository not found"}},
)
def update_repository(
    body: UpdateRepositoryRequest,
    project_name: str = Path(..., description="Name of the Azure DevOps project"),
    repo_name: str = Path(..., description="Current name of the repository"),
    service: AzureDevOpsService = Depends(get_azure_devops_service),
) -> Dict[str, Any]:
    """
    Rename a repository.

    **Body:** `{"newName": "billing-service"}`
    """
    logger.info(f"✏️  Renaming Azure DevOps repository: {project_name}/{repo_name} -> {body.new_name}")

    try:
        return service.update_repository(project_name, repo_name, body.new_name)
    except NotFoundError as e:
        logger.warning(f"⚠️  {e.message}")
        raise HTTPException(
            status_code=404,
            detail={"error": "Not Found", "message": e.message},
        )
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )
