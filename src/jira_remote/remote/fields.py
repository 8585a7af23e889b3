"""Custom field lookups, globally or scoped to a project and issue type.

Resolution by the fetch options given:

- no project, no issue type: every custom field on the server, cached under
  the global key.
- project and issue type: the create-meta fields of that issue type, cached
  under ``project::issueType``.
- project only: the union over all issue types of the project, deduplicated
  first-wins. Only the per-issue-type results are cached.
- issue type without project: rejected.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jira_remote.remote.cache import GLOBAL_KEY, distinct_by_id, issue_type_key
from jira_remote.remote.client import Method
from jira_remote.remote.errors import (
    InvalidUsageError,
    ProjectNotFoundError,
    ResourceNotFoundError,
)
from jira_remote.remote.models import (
    CreateMetaPage,
    CustomField,
    CustomFieldFetchOptions,
    RemoteField,
)

if TYPE_CHECKING:
    from jira_remote.remote.cache import JiraCache
    from jira_remote.remote.client import JiraRestClient
    from jira_remote.remote.issue_types import IssueTypeService

logger = logging.getLogger(__name__)


class IssueFieldService:
    """Resolves custom fields through the cache and the REST client."""

    def __init__(
        self,
        client: JiraRestClient,
        cache: JiraCache,
        issue_types: IssueTypeService,
    ) -> None:
        self._client = client
        self._cache = cache
        self._issue_types = issue_types

    async def get_custom_fields(
        self,
        options: CustomFieldFetchOptions | None = None,
    ) -> list[CustomField]:
        """Get custom fields, optionally filtered by project and issue type.

        Args:
            options: Project and issue type filters. None fetches all
                custom fields on the server.

        Returns:
            Custom fields with unique ids.

        Raises:
            InvalidUsageError: If an issue type is given without a project.
            ProjectNotFoundError: If the project does not exist.
        """
        project_key = options.project_key if options else None
        issue_type_id = options.issue_type_id if options else None

        if issue_type_id and not project_key:
            msg = f"Issue type '{issue_type_id}' requires a project key."
            raise InvalidUsageError(msg)

        if project_key and issue_type_id:
            return await self._get_for_issue_type(project_key, issue_type_id)

        if project_key:
            return await self._get_for_project(project_key)

        return await self._get_all()

    async def get_custom_fields_for_project(self, project_key: str) -> list[CustomField]:
        """Get the custom fields available in any issue type of a project."""
        return await self.get_custom_fields(CustomFieldFetchOptions(project_key=project_key))

    async def _get_all(self) -> list[CustomField]:
        cache = self._cache.custom_fields
        async with cache.lock(GLOBAL_KEY):
            cached = cache.get(GLOBAL_KEY)
            if cached is not None:
                return cached

            remote_fields = await self._client.execute_as(
                list[RemoteField], Method.GET, "rest/api/2/field"
            )
            return cache.populate(
                GLOBAL_KEY,
                (CustomField.from_remote(f) for f in remote_fields if f.custom),
            )

    async def _get_for_issue_type(
        self,
        project_key: str,
        issue_type_id: str,
    ) -> list[CustomField]:
        key = issue_type_key(project_key, issue_type_id)
        cache = self._cache.project_custom_fields
        async with cache.lock(key):
            cached = cache.get(key)
            if cached is not None:
                return cached

            resource = f"rest/api/2/issue/createmeta/{project_key}/issuetypes/{issue_type_id}"
            try:
                page = await self._client.execute_as(CreateMetaPage, Method.GET, resource)
            except ResourceNotFoundError as e:
                raise ProjectNotFoundError(project_key) from e

            remote_fields = [meta.to_remote_field() for meta in page.values]
            custom_fields = [
                CustomField.from_remote(f) for f in remote_fields if f.custom
            ]
            dropped = len(remote_fields) - len(custom_fields)
            if dropped:
                logger.debug("Skipped %d system fields for %s", dropped, key)

            return cache.populate(key, custom_fields)

    async def _get_for_project(self, project_key: str) -> list[CustomField]:
        try:
            issue_types = await self._issue_types.get_issue_types_for_project(project_key)
        except ResourceNotFoundError as e:
            raise ProjectNotFoundError(project_key) from e

        project_fields: list[CustomField] = []
        for issue_type in issue_types:
            project_fields.extend(
                await self._get_for_issue_type(project_key, issue_type.id)
            )

        return distinct_by_id(project_fields)
