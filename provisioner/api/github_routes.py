"""
GitHub Routes

Endpoints:
- POST /github/templates/{owner}/{repo}/generate - Create a repository from a template
- POST /github/repositories - Create a repository for the authenticated user
- GET /github/templates/{owner}/{repo}/repositories - Repositories possibly generated from a template
- GET /github/user/repositories - Repositories of the authenticated user
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from provisioner.api.dependencies import get_github_service
from provisioner.errors import NotFoundError, ProvisioningError
from provisioner.pyd_models.github_models import RepositoryOptions
from provisioner.services.github_service import GitHubService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/github", tags=["github"])

# Passed as owner when the body does not name one; GitHub ignores it anyway.
DEFAULT_OWNER = "current-user"


@router.post(
    "/templates/{owner}/{repo}/generate",
    status_code=201,
    summary="Create a new repository from a template",
    responses={404: {"description": "Template repository not found"}},
)
def create_repository_from_template(
    owner: str,
    repo: str,
    options: RepositoryOptions,
    service: GitHubService = Depends(get_github_service),
) -> Dict[str, Any]:
    """
    Generate a repository from the template `owner/repo`.

    **Parameters:**
    - **owner**: Owner of the template repository
    - **repo**: Name of the template repository

    **Body:** `name` (required), `owner`, `description`, `private`,
    `includeAllBranches`
    """
    logger.info(f"📦 Generating {options.name} from template {owner}/{repo}")

    try:
        return service.create_repository_from_template(owner, repo, options)
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


@router.post(
    "/repositories",
    status_code=201,
    summary="Create a new GitHub repository",
)
def create_repository(
    options: RepositoryOptions,
    service: GitHubService = Depends(get_github_service),
) -> Dict[str, Any]:
    """
    Create a repository for the authenticated user.

    **Body:** `name` (required), `description`, `private`, `autoInit`.
    An `owner` in the body is accepted but GitHub always creates the
    repository under the authenticated account.
    """
    owner = options.owner or DEFAULT_OWNER
    logger.info(f"📦 Creating GitHub repository {options.name} (owner={owner})")

    try:
        return service.create_repository(owner, options)
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )


@router.get(
    "/templates/{owner}/{repo}/repositories",
    summary="Get repositories that may have been generated from a template",
    responses={404: {"description": "Template repository not found"}},
)
def get_repositories_from_template(
    owner: str,
    repo: str,
    service: GitHubService = Depends(get_github_service),
) -> List[Dict[str, Any]]:
    """
    Best-effort list of repositories generated from `owner/repo`.

    GitHub has no "generated from" filter: this returns the authenticated
    user's repositories (first 100) created after the template was.
    """
    logger.info(f"🔍 Looking for repositories derived from {owner}/{repo}")

    try:
        repositories = service.get_repositories_from_template(owner, repo)
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

    logger.info(f"✅ Found {len(repositories)} candidate repositories")
    return repositories


@router.get(
    "/user/repositories",
    summary="Get all repositories for the authenticated user",
)
def get_user_repositories(
    service: GitHubService = Depends(get_github_service),
) -> List[Dict[str, Any]]:
    """Up to 100 repositories of the authenticated user."""
    try:
        return service.get_user_repositories()
    except ProvisioningError as e:
        logger.error(f"❌ {e.message}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Provisioning Failed", "message": e.message},
        )
