"""Issue types available in a project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jira_remote.remote.client import Method
from jira_remote.remote.errors import InvalidUsageError
from jira_remote.remote.models import IssueType, RemoteIssueType

if TYPE_CHECKING:
    from jira_remote.remote.cache import JiraCache
    from jira_remote.remote.client import JiraRestClient

logger = logging.getLogger(__name__)


class IssueTypeService:
    """Fetches the issue types of a project, cached per project key."""

    def __init__(self, client: JiraRestClient, cache: JiraCache) -> None:
        self._client = client
        self._cache = cache

    async def get_issue_types_for_project(self, project_key: str) -> list[IssueType]:
        """Get the issue types of a project.

        Args:
            project_key: Project key or id.

        Returns:
            Issue types in server order.

        Raises:
            InvalidUsageError: If project_key is empty.
            ResourceNotFoundError: If the project does not exist.
        """
        if not project_key:
            msg = "Project key must be supplied."
            raise InvalidUsageError(msg)

        cache = self._cache.issue_types
        async with cache.lock(project_key):
            cached = cache.get(project_key)
            if cached is not None:
                return cached

            remote_types = await self._client.execute_as(
                list[RemoteIssueType],
                Method.GET,
                f"rest/api/2/project/{project_key}/statuses",
            )
            logger.debug("Fetched %d issue types for %s", len(remote_types), project_key)
            return cache.populate(
                project_key,
                (IssueType.from_remote(remote) for remote in remote_types),
            )
