"""Jira facade owning the REST client, the entity cache and the services.

Usage:
    async with Jira.create("https://jira.example.com", username="me", password="token") as jira:
        fields = await jira.fields.get_custom_fields()
        components = await jira.components.get_components("PROJ")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jira_remote.remote.cache import JiraCache
from jira_remote.remote.client import DEFAULT_TIMEOUT, JiraRestClient
from jira_remote.remote.components import ProjectComponentService
from jira_remote.remote.fields import IssueFieldService
from jira_remote.remote.issue_types import IssueTypeService
from jira_remote.remote.remote_links import IssueRemoteLinkService

if TYPE_CHECKING:
    import httpx

    from jira_remote.config.schema import Config


class Jira:
    """Entry point to a Jira server.

    The cache is created with the instance and shared by its services; it
    lives until the instance is discarded.
    """

    def __init__(self, rest_client: JiraRestClient, cache: JiraCache | None = None) -> None:
        self._rest_client = rest_client
        self._cache = cache if cache is not None else JiraCache()
        self.issue_types = IssueTypeService(rest_client, self._cache)
        self.fields = IssueFieldService(rest_client, self._cache, self.issue_types)
        self.components = ProjectComponentService(rest_client, self._cache)
        self.remote_links = IssueRemoteLinkService(rest_client)

    @classmethod
    def create(
        cls,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        request_trace: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Jira:
        """Create a Jira instance for a server URL."""
        return cls(
            JiraRestClient(
                url,
                username=username,
                password=password,
                request_trace=request_trace,
                timeout=timeout,
                transport=transport,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Jira:
        """Create a Jira instance from validated configuration."""
        return cls(JiraRestClient.from_config(config, transport=transport))

    @property
    def rest_client(self) -> JiraRestClient:
        return self._rest_client

    @property
    def cache(self) -> JiraCache:
        return self._cache

    async def __aenter__(self) -> Jira:
        await self._rest_client.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self._rest_client.aclose()

    async def aclose(self) -> None:
        await self._rest_client.aclose()

    def __repr__(self) -> str:
        return f"Jira(url={self._rest_client.url!r})"
