"""Project component create, delete and lookup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

from jira_remote.remote.client import Method
from jira_remote.remote.errors import InvalidUsageError
from jira_remote.remote.models import (
    ProjectComponent,
    ProjectComponentCreationInfo,
    RemoteComponent,
)

if TYPE_CHECKING:
    from jira_remote.remote.cache import JiraCache
    from jira_remote.remote.client import JiraRestClient

logger = logging.getLogger(__name__)


class ProjectComponentService:
    """Manages project components, cached per project key."""

    def __init__(self, client: JiraRestClient, cache: JiraCache) -> None:
        self._client = client
        self._cache = cache

    async def create_component(
        self,
        info: ProjectComponentCreationInfo,
    ) -> ProjectComponent:
        """Create a component in a project.

        The created component is added to the cache of its project when
        that project was already fetched; otherwise the next fetch returns it.

        Args:
            info: Name, project and optional details of the component.

        Returns:
            The created component, tagged with info.project_key.

        Raises:
            InvalidUsageError: If the name or project key is empty.
        """
        if not info.name:
            msg = "Component name must be supplied."
            raise InvalidUsageError(msg)
        if not info.project_key:
            msg = "Component project key must be supplied."
            raise InvalidUsageError(msg)

        remote = await self._client.execute_as(
            RemoteComponent,
            Method.POST,
            "rest/api/2/component",
            info.to_payload(),
        )
        component = ProjectComponent.from_remote(remote, info.project_key)
        if self._cache.components.is_populated(info.project_key):
            self._cache.components.add(info.project_key, component)
        logger.info("Created component %s in %s", component.id, info.project_key)
        return component

    async def delete_component(
        self,
        component_id: str,
        move_issues_to: str | None = None,
    ) -> None:
        """Delete a component.

        Args:
            component_id: Id of the component to delete.
            move_issues_to: Optional id of a component that receives the
                issues of the deleted one.
        """
        if not component_id:
            msg = "Component id must be supplied."
            raise InvalidUsageError(msg)

        resource = f"rest/api/2/component/{quote(component_id, safe='')}"
        if move_issues_to:
            resource += f"?moveIssuesTo={quote(move_issues_to, safe='')}"

        await self._client.execute(Method.DELETE, resource)

        removed_from = self._cache.components.discard(component_id)
        logger.info("Deleted component %s (cached in %s)", component_id, removed_from or "none")

    async def get_components(self, project_key: str) -> list[ProjectComponent]:
        """Get the components of a project.

        Args:
            project_key: Project key.

        Returns:
            Components of the project.
        """
        if not project_key:
            msg = "Project key must be supplied."
            raise InvalidUsageError(msg)

        cache = self._cache.components
        async with cache.lock(project_key):
            cached = cache.get(project_key)
            if cached is not None:
                return cached

            remote_components = await self._client.execute_as(
                list[RemoteComponent],
                Method.GET,
                f"rest/api/2/project/{project_key}/components",
            )
            return cache.populate(
                project_key,
                (ProjectComponent.from_remote(r, project_key) for r in remote_components),
            )
