"""
GitHub repository service.

Wraps GitHubClient with the facade's error policy: a 404 on a named
template becomes NotFoundError, every other failure is re-raised as a
ProvisioningError carrying the upstream message.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import httpx

from provisioner.clients.github_client import GitHubAPIError, GitHubClient
from provisioner.errors import NotFoundError, ProvisioningError, describe_error
from provisioner.pyd_models.github_models import RepositoryOptions
from provisioner.services.jira_service import JiraService

logger = logging.getLogger(__name__)


def drop_unset(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Leave out the options the caller did not set; GitHub applies its own defaults."""
    return {key: value for key, value in payload.items() if value is not None}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse GitHub's ISO-8601 timestamps ("2024-01-31T12:00:00Z")."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    # naive timestamps are treated as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def select_possibly_derived_repositories(
    repositories: Iterable[Dict[str, Any]],
    template_created_at: datetime,
) -> List[Dict[str, Any]]:
    """
    Best-effort guess at which repositories were generated from a template.

    GitHub does not expose a "generated from" filter, so the only signal
    is time: a repository created strictly after the template *could* be
    derived from it. The result carries no confidence and will include
    unrelated repositories; repositories without a readable `created_at`
    are left out.
    """
    selected = []
    for repo in repositories:
        created_at = parse_timestamp(repo.get("created_at"))
        if created_at is not None and created_at > template_created_at:
            selected.append(repo)
    return selected


class GitHubService:
    """
    Repository provisioning on top of GitHubClient.

    The Jira service is held so new repositories can later be paired with a
    board; no GitHub operation calls it yet.
    """

    def __init__(self, client: GitHubClient, jira: Optional[JiraService] = None):
        self.client = client
        self.jira = jira

    def create_repository_from_template(
        self,
        template_owner: str,
        template_repo: str,
        options: RepositoryOptions,
    ) -> Dict[str, Any]:
        """
        Generate a new repository from `template_owner/template_repo`.

        The new repository belongs to `options.owner`, or to the template
        owner when no owner is given.

        Raises:
            NotFoundError: If the template does not exist
            ProvisioningError: For any other failure
        """
        payload = drop_unset({
            "owner": options.owner or template_owner,
            "name": options.name,
            "description": options.description,
            "private": options.private,
            "include_all_branches": options.include_all_branches,
        })
        try:
            return self.client.generate_from_template(template_owner, template_repo, payload)
        except GitHubAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(
                    f"Template repository '{template_repo}' not found for owner '{template_owner}'"
                ) from e
            raise ProvisioningError(
                f"Failed to create repository from template: {describe_error(e)}"
            ) from e
        except httpx.HTTPError as e:
            raise ProvisioningError(
                f"Failed to create repository from template: {describe_error(e)}"
            ) from e

    def create_repository(self, owner: str, options: RepositoryOptions) -> Dict[str, Any]:
        """
        Create a plain repository.

        `owner` is accepted for symmetry with the template route, but GitHub's
        /user/repos endpoint always creates the repository for the
        authenticated user.
        """
        logger.debug(f"Creating repository {options.name} (requested owner: {owner})")
        payload = drop_unset({
            "name": options.name,
            "description": options.description,
            "private": options.private,
            "auto_init": options.auto_init,
        })
        try:
            return self.client.create_user_repository(payload)
        except (GitHubAPIError, httpx.HTTPError) as e:
            raise ProvisioningError(f"Failed to create repository: {describe_error(e)}") from e

    def get_repositories_from_template(
        self, template_owner: str, template_repo: str
    ) -> List[Dict[str, Any]]:
        """
        List the user's repositories created after the template.

        See select_possibly_derived_repositories() for why this is only a
        heuristic.
        """
        try:
            template = self.client.get_repository(template_owner, template_repo)
            repositories = self.client.list_user_repositories()
        except GitHubAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(
                    f"Template repository '{template_repo}' not found for owner '{template_owner}'"
                ) from e
            raise ProvisioningError(f"Failed to retrieve repositories: {describe_error(e)}") from e
        except httpx.HTTPError as e:
            raise ProvisioningError(f"Failed to retrieve repositories: {describe_error(e)}") from e

        template_created_at = parse_timestamp(template.get("created_at"))
        if template_created_at is None:
            raise ProvisioningError(
                "Failed to retrieve repositories: template has no creation timestamp"
            )

        return select_possibly_derived_repositories(repositories, template_created_at)

    def get_user_repositories(self) -> List[Dict[str, Any]]:
        """Up to 100 of the authenticated user's repositories, unfiltered."""
        try:
            return self.client.list_user_repositories()
        except (GitHubAPIError, httpx.HTTPError) as e:
            raise ProvisioningError(f"Failed to fetch user repositories: {describe_error(e)}") from e
