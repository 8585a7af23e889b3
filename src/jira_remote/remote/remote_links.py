"""Remote links of issues."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jira_remote.remote.client import Method
from jira_remote.remote.errors import InvalidUsageError
from jira_remote.remote.models import IssueRemoteLink, RemoteLinkRecord

if TYPE_CHECKING:
    from jira_remote.remote.client import JiraRestClient


class IssueRemoteLinkService:
    def __init__(self, client: JiraRestClient) -> None:
        self._client = client

    async def create_remote_link(
        self,
        issue_key: str,
        remote_url: str,
        title: str,
        summary: str | None = None,
    ) -> None:
        """Link an issue to a remote resource.

        Args:
            issue_key: Key of the issue.
            remote_url: URL of the remote resource.
            title: Title shown for the link.
            summary: Optional summary; omitted from the payload when empty.

        Raises:
            InvalidUsageError: If title or remote_url is empty.
        """
        if not title:
            msg = "Title must be supplied."
            raise InvalidUsageError(msg)
        if not remote_url:
            msg = "Remote URL must be supplied."
            raise InvalidUsageError(msg)

        link_object: dict[str, Any] = {"title": title, "url": remote_url}
        if summary:
            link_object["summary"] = summary

        await self._client.execute(
            Method.POST,
            f"rest/api/2/issue/{issue_key}/remotelink",
            {"object": link_object},
        )

    async def get_remote_links(self, issue_key: str) -> list[IssueRemoteLink]:
        """Get the remote links of an issue."""
        records = await self._client.execute_as(
            list[RemoteLinkRecord],
            Method.GET,
            f"rest/api/2/issue/{issue_key}/remotelink",
        )
        return [
            IssueRemoteLink(
                remote_url=record.link_object.url,
                title=record.link_object.title,
                summary=record.link_object.summary,
            )
            for record in records
        ]
