"""Async client for the Jira REST API with per-project entity caching."""

from jira_remote.jira import Jira

__version__ = "0.1.0"

__all__ = ["Jira", "__version__"]
