"""Error taxonomy for the Jira REST client.

Every failure raised by the request executor or the services derives from
JiraError. The executor never retries: each error reaches the caller of the
request that produced it. Services translate ResourceNotFoundError into a
domain error only where the resource being looked up is known (e.g. a project).
"""

from __future__ import annotations

from typing import Any


class JiraError(Exception):
    """Base class for all errors raised by jira_remote."""


class InvalidUsageError(JiraError, ValueError):
    """Raised when a caller violates a precondition.

    Examples are a GET request with a body, a missing required field or an
    issue type id given without a project key. No network call is made.
    """


class ProjectNotFoundError(InvalidUsageError):
    """Raised when a project-scoped lookup names a project the server lacks."""

    def __init__(self, project_key: str) -> None:
        """Initialize project not found error.

        Args:
            project_key: The project key that was not found.
        """
        super().__init__(
            f"Project with key '{project_key}' was not found on the Jira server."
        )
        self.project_key = project_key


class TransportError(JiraError):
    """Raised when no response could be obtained from the server."""


class AuthenticationError(JiraError):
    """Raised for 401 and 403 responses."""

    def __init__(self, message: str, *, status_code: int, content: str = "") -> None:
        """Initialize authentication error.

        Args:
            message: Error description.
            status_code: HTTP status code (401 or 403).
            content: Raw response body.
        """
        super().__init__(message)
        self.status_code = status_code
        self.content = content


class ResourceNotFoundError(JiraError):
    """Raised for 404 responses."""

    def __init__(self, message: str, *, content: str = "") -> None:
        super().__init__(message)
        self.status_code = 404
        self.content = content


class ServerError(JiraError):
    """Raised for any other response with a status code of 400 or above."""

    def __init__(self, message: str, *, status_code: int, content: str = "") -> None:
        """Initialize server error.

        Args:
            message: Error description.
            status_code: HTTP status code.
            content: Raw response body.
        """
        super().__init__(message)
        self.status_code = status_code
        self.content = content


class MalformedResponseError(JiraError):
    """Raised when a successful response body is not a JSON object or array."""

    def __init__(self, message: str, *, content: str = "") -> None:
        super().__init__(message)
        self.content = content


class ServerReportedError(JiraError):
    """Raised when a JSON object response carries an ``errorMessages`` field."""

    def __init__(self, message: str, *, error_messages: Any = None) -> None:
        """Initialize server reported error.

        Args:
            message: Error description.
            error_messages: The ``errorMessages`` value exactly as returned.
        """
        super().__init__(message)
        self.error_messages = error_messages


class DecodeError(JiraError):
    """Raised when valid JSON does not match the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize decode error.

        Args:
            message: Error description.
            errors: Validation error details from pydantic.
        """
        super().__init__(message)
        self.errors = errors or []
