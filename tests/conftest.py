"""Shared pytest fixtures for jira_remote tests.

This module provides common fixtures for:
- Temporary config files
- A fake Jira server behind httpx.MockTransport
- Sample Jira REST API responses
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest
import pytest_asyncio
import structlog
import yaml

from jira_remote import Jira
from jira_remote.remote.client import JiraRestClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Generator

BASE_URL = "https://jira.example.com"


# ============================================================================
# Fake server
# ============================================================================


Responder = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


class FakeJiraServer:
    """Routes requests by method and path and records every request.

    Unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
    ) -> None:
        if text is None:
            text = "" if json_body is None else json.dumps(json_body)
        body = text
        self.routes[(method, path)] = lambda _request: httpx.Response(status, text=body)

    def add_responder(self, method: str, path: str, responder: Responder) -> None:
        self.routes[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, text='{"errorMessages":["Not found"]}')
        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            return responder(request)
        return responder

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )


@pytest.fixture
def jira_server() -> FakeJiraServer:
    """Return an empty fake Jira server."""
    return FakeJiraServer()


@pytest_asyncio.fixture
async def rest_client(jira_server: FakeJiraServer) -> AsyncGenerator[JiraRestClient, None]:
    """Create a JiraRestClient talking to the fake server."""
    async with JiraRestClient(BASE_URL, transport=jira_server.transport) as client:
        yield client


@pytest_asyncio.fixture
async def jira(jira_server: FakeJiraServer) -> AsyncGenerator[Jira, None]:
    """Create a Jira instance talking to the fake server."""
    async with Jira.create(BASE_URL, transport=jira_server.transport) as instance:
        yield instance


@pytest.fixture(autouse=True)
def clear_jira_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep JIRA_* overrides from the host environment out of tests."""
    for name in ("JIRA_URL", "JIRA_USERNAME", "JIRA_PASSWORD", "JIRA_REQUEST_TRACE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo structlog configuration done by a test."""
    yield
    structlog.reset_defaults()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Return a sample configuration."""
    return {
        "version": 1,
        "server": {
            "url": BASE_URL,
            "username": "admin",
            "password": "${JIRA_API_TOKEN}",
            "timeout": 10,
        },
        "client": {
            "request_trace": False,
        },
    }


@pytest.fixture
def write_config(temp_dir: Path) -> Callable[..., Path]:
    """Factory fixture to write config files."""

    def _write(config: dict[str, Any], filename: str = "config.yaml") -> Path:
        path = temp_dir / filename
        with path.open("w") as f:
            yaml.safe_dump(config, f)
        return path

    return _write


# ============================================================================
# Jira API Response Fixtures
# ============================================================================


@pytest.fixture
def field_list_response() -> list[dict[str, Any]]:
    """Return a sample ``GET /rest/api/2/field`` response."""
    return [
        {
            "id": "summary",
            "name": "Summary",
            "custom": False,
            "schema": {"type": "string", "system": "summary"},
        },
        {
            "id": "customfield_10000",
            "name": "Story Points",
            "custom": True,
            "schema": {
                "type": "number",
                "custom": "com.atlassian.jira.plugin.system.customfieldtypes:float",
                "customId": 10000,
            },
        },
        {
            "id": "customfield_10001",
            "name": "Team",
            "custom": True,
            "schema": {
                "type": "string",
                "custom": "com.atlassian.jira.plugin.system.customfieldtypes:textfield",
                "customId": 10001,
            },
        },
    ]


def createmeta_response(*field_ids: str) -> dict[str, Any]:
    """Build a create-meta response listing the given field ids."""
    return {
        "startAt": 0,
        "maxResults": 50,
        "total": len(field_ids),
        "values": [
            {
                "fieldId": field_id,
                "name": f"Field {field_id}",
                "required": False,
                "schema": {"type": "string"},
            }
            for field_id in field_ids
        ],
    }


def issue_types_response(*issue_type_ids: str) -> list[dict[str, Any]]:
    """Build a ``/project/{key}/statuses`` response for the given issue types."""
    return [
        {
            "id": issue_type_id,
            "name": f"Type {issue_type_id}",
            "subtask": False,
            "statuses": [{"id": "1", "name": "Open"}],
        }
        for issue_type_id in issue_type_ids
    ]


@pytest.fixture
def components_response() -> list[dict[str, Any]]:
    """Return a sample ``GET /rest/api/2/project/{key}/components`` response."""
    return [
        {
            "id": "10000",
            "name": "Backend",
            "description": "Server side",
            "lead": {"name": "alice", "displayName": "Alice"},
        },
        {
            "id": "10001",
            "name": "Frontend",
        },
    ]


@pytest.fixture
def make_createmeta() -> Callable[..., dict[str, Any]]:
    """Factory fixture for create-meta responses."""
    return createmeta_response


@pytest.fixture
def make_issue_types() -> Callable[..., list[dict[str, Any]]]:
    """Factory fixture for project issue type responses."""
    return issue_types_response
