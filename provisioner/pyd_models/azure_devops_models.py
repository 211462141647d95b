"""
Pydantic models for the Azure DevOps endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field


class CreateRepositoryRequest(BaseModel):
    """Body of POST /azure-devops/projects/{projectName}/repositories."""
    repo_name: str = Field(
        ..., alias="repoName", min_length=1, description="Name of the repository to create"
    )

    model_config = ConfigDict(populate_by_name=True)


class UpdateRepositoryRequest(BaseModel):
    """Body of PATCH /azure-devops/projects/{projectName}/repositories/{repoName}."""
    new_name: str = Field(
        ..., alias="newName", min_length=1, description="New name for the repository"
    )

    model_config = ConfigDict(populate_by_name=True)


class DeleteRepositoryResponse(BaseModel):
    """Fixed acknowledgment returned after a delete."""
    message: str = "Repository deleted successfully"
