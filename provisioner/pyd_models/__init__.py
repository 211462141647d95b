"""
Data Schemas

This package contains Pydantic models for request validation and for the
composite responses the facade builds itself:
- azure_devops_models: Azure DevOps request bodies
- github_models: GitHub request bodies
- jira_models: Jira board provisioning results

Upstream repository/project payloads are relayed as-is and have no model.
"""

from provisioner.pyd_models.azure_devops_models import (
    CreateRepositoryRequest,
    UpdateRepositoryRequest,
    DeleteRepositoryResponse,
)
from provisioner.pyd_models.github_models import RepositoryOptions
from provisioner.pyd_models.jira_models import BoardCreationResult, ConnectionStatus

__all__ = [
    "CreateRepositoryRequest",
    "UpdateRepositoryRequest",
    "DeleteRepositoryResponse",
    "RepositoryOptions",
    "BoardCreationResult",
    "ConnectionStatus",
]
