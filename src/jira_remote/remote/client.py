"""Jira REST client: request execution and response classification.

This module provides the JiraRestClient class which handles:
- Request building for GET/POST/PUT/DELETE with JSON bodies
- Optional request tracing through structlog
- Classification of every response into parsed JSON or a typed error
- Typed decoding of responses into pydantic-compatible types

Requests are never retried. Each failure is raised to the caller at once.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from jira_remote.logging import log_request, log_request_body, log_response
from jira_remote.remote.errors import (
    AuthenticationError,
    DecodeError,
    InvalidUsageError,
    MalformedResponseError,
    ResourceNotFoundError,
    ServerError,
    ServerReportedError,
    TransportError,
)

if TYPE_CHECKING:
    from jira_remote.config.schema import Config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Parsed JSON: dict, list or scalar as produced by json.loads
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None

DEFAULT_TIMEOUT = 30.0


class Method(str, Enum):
    """HTTP methods supported by the REST client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @property
    def is_read_only(self) -> bool:
        return self is Method.GET


def parse_method(method: Method | str) -> Method:
    """Convert a method name, in any case, to a Method.

    Raises:
        InvalidUsageError: If the name is not a supported method.
    """
    if isinstance(method, Method):
        return method
    try:
        return Method(str(method).upper())
    except ValueError as e:
        msg = f"Unsupported HTTP method: {method!r}"
        raise InvalidUsageError(msg) from e


def serialize_body(body: Any) -> str:
    """Serialize a request body to JSON text.

    Strings are sent verbatim, pydantic models are dumped by alias without
    ``None`` members, and anything else goes through ``json.dumps``.

    Raises:
        InvalidUsageError: If the body cannot be serialized to JSON.
    """
    if isinstance(body, str):
        return body
    try:
        if isinstance(body, BaseModel):
            return body.model_dump_json(by_alias=True, exclude_none=True)
        return json.dumps(body)
    except (TypeError, ValueError) as e:
        msg = f"Request body cannot be serialized to JSON: {e}"
        raise InvalidUsageError(msg) from e


def classify_response(status_code: int, content: str) -> JsonValue:
    """Validate a response and return its parsed JSON.

    Args:
        status_code: HTTP status code.
        content: Response body, already trimmed.

    Returns:
        The parsed JSON value; an empty object for an empty body.

    Raises:
        AuthenticationError: For 401 and 403.
        ResourceNotFoundError: For 404.
        ServerError: For any other status of 400 or above.
        MalformedResponseError: If the body is not a JSON object or array.
        ServerReportedError: If the body is an object with ``errorMessages``.
    """
    if status_code in (401, 403):
        raise AuthenticationError(
            f"Response Content: {content}",
            status_code=status_code,
            content=content,
        )

    if status_code == 404:
        raise ResourceNotFoundError(f"Response Content: {content}", content=content)

    if status_code >= 400:
        raise ServerError(
            f"Response Status Code: {status_code}. Response Content: {content}",
            status_code=status_code,
            content=content,
        )

    if not content.strip():
        return {}

    if not content.startswith(("{", "[")):
        raise MalformedResponseError(
            f"Response was not recognized as JSON. Content: {content}",
            content=content,
        )

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Failed to parse response as JSON. Content: {content}",
            content=content,
        ) from e

    if isinstance(parsed, dict) and "errorMessages" in parsed:
        error_messages = parsed["errorMessages"]
        raise ServerReportedError(
            f"Response reported error(s) from Jira: {json.dumps(error_messages)}",
            error_messages=error_messages,
        )

    return parsed


def decode(target: type[T], value: JsonValue) -> T:
    """Validate parsed JSON into a target type.

    Raises:
        DecodeError: If the value does not match the target type.
    """
    try:
        return TypeAdapter(target).validate_python(value)
    except ValidationError as e:
        raise DecodeError(
            f"Response did not match {getattr(target, '__name__', target)}: "
            f"{e.error_count()} error(s)",
            errors=[dict(err) for err in e.errors(include_url=False)],
        ) from e


class JiraRestClient:
    """Async client for the Jira REST API.

    The underlying httpx client is created on first use and closed by
    ``aclose()`` or on leaving the async context. An httpx transport or a
    ready-made httpx client may be supplied, mainly for testing.
    """

    def __init__(
        self,
        url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        request_trace: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the REST client.

        Args:
            url: Base URL of the Jira server.
            username: Optional username for basic credentials.
            password: Optional password or API token for basic credentials.
            request_trace: Whether to trace requests and responses.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport for the created client.
            client: Optional pre-configured httpx client; used as-is.
        """
        self._url = url if url.endswith("/") else f"{url}/"
        self._username = username
        self._password = password
        self._request_trace = request_trace
        self._timeout = timeout
        self._transport = transport
        self._client = client
        self._owns_client = client is None

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> JiraRestClient:
        """Create a client from validated configuration."""
        return cls(
            config.server.url,
            username=config.server.username,
            password=config.server.password,
            request_trace=config.client.request_trace,
            timeout=config.server.timeout,
            transport=transport,
        )

    @property
    def url(self) -> str:
        """Base URL of the Jira server."""
        return self._url

    @property
    def request_trace(self) -> bool:
        return self._request_trace

    @request_trace.setter
    def request_trace(self, enabled: bool) -> None:
        self._request_trace = enabled

    async def __aenter__(self) -> JiraRestClient:
        """Enter async context."""
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure we have an active client."""
        if self._client is None:
            auth = None
            if self._username is not None and self._password is not None:
                auth = httpx.BasicAuth(self._username, self._password)
            self._client = httpx.AsyncClient(
                base_url=self._url,
                auth=auth,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def execute(
        self,
        method: Method | str,
        resource: str,
        body: Any = None,
    ) -> JsonValue:
        """Execute a request and return the validated JSON response.

        Args:
            method: HTTP method.
            resource: Server-relative resource path, e.g. ``rest/api/2/field``.
            body: Optional request body; a string is sent verbatim, other
                values are serialized to JSON.

        Returns:
            Parsed JSON response; an empty dict for an empty body.

        Raises:
            InvalidUsageError: For a GET with a body or an unusable body.
            TransportError: If no response was received.
            JiraError: Any classification error from classify_response.
        """
        method = parse_method(method)

        if method.is_read_only and body is not None:
            msg = (
                f"GET requests are not allowed to have a request body. "
                f"Resource: {resource}. Body: {body}"
            )
            raise InvalidUsageError(msg)

        content = self._prepare_body(resource, body)

        if self._request_trace:
            log_request(method.value, resource)
            if body is not None:
                log_request_body(method.value, resource, body)

        response = await self._send(method, resource, content)
        return self._validate(method, resource, response)

    async def execute_as(
        self,
        target: type[T],
        method: Method | str,
        resource: str,
        body: Any = None,
    ) -> T:
        """Execute a request and decode the response into ``target``.

        Raises:
            DecodeError: If the JSON does not match ``target``.
        """
        result = await self.execute(method, resource, body)
        return decode(target, result)

    async def download_data(self, url: str) -> bytes:
        """Download a resource as bytes.

        Args:
            url: Absolute URL or server-relative path of the resource.

        Returns:
            The raw response body.
        """
        if self._request_trace:
            log_request(Method.GET.value, url)
        response = await self._send(Method.GET, url, None)
        if self._request_trace:
            log_response(
                Method.GET.value, url, response.status_code, f"<{len(response.content)} bytes>"
            )
        if response.status_code >= 400:
            classify_response(response.status_code, response.text.strip())
        return response.content

    async def download(self, url: str, path: str | Path) -> Path:
        """Download a resource into a file.

        Returns:
            Path of the written file.
        """
        data = await self.download_data(url)
        target = Path(path)
        target.write_bytes(data)
        return target

    def _prepare_body(self, resource: str, body: Any) -> str | None:
        if body is None:
            return None

        content = serialize_body(body)
        if isinstance(body, str):
            if not content.strip():
                msg = f"Request body must not be empty. Resource: {resource}"
                raise InvalidUsageError(msg)
            try:
                json.loads(content)
            except json.JSONDecodeError as e:
                msg = f"Request body is not valid JSON. Resource: {resource}"
                raise InvalidUsageError(msg) from e
        return content

    async def _send(
        self,
        method: Method,
        resource: str,
        content: str | None,
    ) -> httpx.Response:
        client = self._ensure_client()
        headers = {"Content-Type": "application/json"} if content is not None else None
        try:
            return await client.request(
                method.value,
                resource,
                content=content,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method.value, resource, e)
            if self._request_trace:
                log_response(method.value, resource, None, str(e))
            raise TransportError(f"Error Message: {e}") from e

    def _validate(
        self,
        method: Method,
        resource: str,
        response: httpx.Response,
    ) -> JsonValue:
        content = response.text.strip() if response.content else ""

        if self._request_trace:
            log_response(method.value, resource, response.status_code, content)

        return classify_response(response.status_code, content)

    def __repr__(self) -> str:
        """Get string representation."""
        return f"JiraRestClient(url={self._url!r}, username={self._username!r})"
