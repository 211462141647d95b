"""
Pydantic models for the GitHub endpoints.

The same body is used to generate a repository from a template and to
create a plain repository; each call only forwards the fields GitHub
accepts for it, and only those the caller set.

Reference: https://docs.github.com/en/rest/repos/repos
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RepositoryOptions(BaseModel):
    """
    Options for a new GitHub repository.

    Attributes:
        name: Name of the repository to create
        owner: Owner of the new repository (template generation only)
        description: Repository description
        private: Whether the repository should be private
        include_all_branches: Copy every branch of the template, not just the default one
        auto_init: Initialize with a README (plain creation only)
    """
    name: str = Field(..., min_length=1, description="Name of the repository to create")
    owner: Optional[str] = Field(None, description="Owner of the new repository")
    description: Optional[str] = Field(None, description="Description of the repository")
    private: Optional[bool] = Field(None, description="Whether the repository should be private")
    include_all_branches: Optional[bool] = Field(
        None,
        alias="includeAllBranches",
        description="Whether to include all branches from the template",
    )
    auto_init: Optional[bool] = Field(
        None,
        alias="autoInit",
        description="Whether to initialize the repository with a README",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
