"""Logging module for jira_remote.

This module provides structured logging with:
- structlog configuration for consistent log formatting
- Secret redaction for credentials and authorization headers
- Request trace events for the REST client

Usage:
    from jira_remote.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger(__name__)
"""

from jira_remote.logging.trace import (
    configure_logging,
    get_logger,
    log_request,
    log_request_body,
    log_response,
    redact_secrets,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_request",
    "log_request_body",
    "log_response",
    "redact_secrets",
]
