"""Structured logging and request tracing.

This module provides:
- structlog configuration for JSON or console logging to stderr
- Secret redaction for credentials and authorization headers
- Request trace events for outgoing requests and their responses
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from structlog.typing import EventDict, WrappedLogger

TRACE_LOGGER = "jira_remote.trace"

# Patterns for secret redaction
SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Basic and bearer credentials in headers
    (re.compile(r"(Basic\s+)([A-Za-z0-9+/=]+)", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"(Bearer\s+)([A-Za-z0-9._-]+)", re.IGNORECASE), r"\1[REDACTED]"),
    # Authorization headers
    (re.compile(r"(authorization[=:]\s*['\"]?)([^\s'\"]+)", re.IGNORECASE), r"\1[REDACTED]"),
    # Passwords and API tokens in query strings or JSON text
    (
        re.compile(r"((?:password|api_token|token)['\"]?\s*[=:]\s*['\"]?)([^\s'\",&}]+)", re.IGNORECASE),
        r"\1[REDACTED]",
    ),
    # Credentials embedded in URLs
    (re.compile(r"(https?://)([^/\s:@]+):([^/\s@]+)@"), r"\1\2:[REDACTED]@"),
]

SECRET_KEYS = frozenset({"password", "token", "api_token", "authorization"})


def redact_secrets(value: Any) -> Any:
    """Redact sensitive values from a string, dict, or list.

    Dictionary entries whose key names a credential are replaced outright;
    strings are scrubbed with SECRET_PATTERNS.

    Args:
        value: Value to redact. Can be str, dict, list, or other.

    Returns:
        Value with sensitive data redacted
    """
    if isinstance(value, str):
        result = value
        for pattern, replacement in SECRET_PATTERNS:
            result = pattern.sub(replacement, result)
        return result

    if isinstance(value, dict):
        return {
            k: "[REDACTED]" if str(k).lower() in SECRET_KEYS and v else redact_secrets(v)
            for k, v in value.items()
        }

    if isinstance(value, list):
        return [redact_secrets(item) for item in value]

    return value


def _redact_processor(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """structlog processor that redacts secrets from log events."""
    return redact_secrets(event_dict)


def configure_logging(
    verbose: bool = False,
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    Sets up structlog with JSON formatting to stderr, including:
    - Timestamp in ISO format
    - Log level
    - Secret redaction
    - Exception formatting

    Args:
        verbose: If True, enable DEBUG level. Otherwise INFO.
        json_output: If True, output JSON. Otherwise use console format.
    """
    level = logging.DEBUG if verbose else logging.INFO

    # Library modules log through the standard library
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=level,
    )

    processors: list[Callable[..., Any]] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact_processor,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def format_body(body: Any) -> str:
    """Serialize a request body for tracing.

    Strings are traced as sent; structured values are indented with
    ``None`` members dropped.
    """
    if isinstance(body, str):
        return body
    return json.dumps(_drop_none(body), indent=2, default=str)


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(item) for item in value]
    return value


def log_request(method: str, resource: str) -> None:
    """Trace an outgoing request.

    Args:
        method: HTTP method
        resource: Server-relative resource path
    """
    log = get_logger(TRACE_LOGGER)
    log.info("request", method=method, resource=resource)


def log_request_body(method: str, resource: str, body: Any) -> None:
    """Trace the body of an outgoing request.

    Args:
        method: HTTP method
        resource: Server-relative resource path
        body: Request body (string or structured value)
    """
    log = get_logger(TRACE_LOGGER)
    log.info("request_body", method=method, resource=resource, body=format_body(body))


def log_response(method: str, resource: str, status_code: int | None, content: str) -> None:
    """Trace a received response.

    Args:
        method: HTTP method of the request
        resource: Server-relative resource path
        status_code: Response status, or None when no response was received
        content: Trimmed response body
    """
    log = get_logger(TRACE_LOGGER)
    log.info(
        "response",
        method=method,
        resource=resource,
        status_code=status_code,
        content=content,
    )
