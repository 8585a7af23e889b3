"""Jira REST client, entity cache and domain services."""

from jira_remote.remote.cache import (
    GLOBAL_KEY,
    EntityCache,
    JiraCache,
    distinct_by_id,
    issue_type_key,
)
from jira_remote.remote.client import JiraRestClient, Method, classify_response
from jira_remote.remote.components import ProjectComponentService
from jira_remote.remote.errors import (
    AuthenticationError,
    DecodeError,
    InvalidUsageError,
    JiraError,
    MalformedResponseError,
    ProjectNotFoundError,
    ResourceNotFoundError,
    ServerError,
    ServerReportedError,
    TransportError,
)
from jira_remote.remote.fields import IssueFieldService
from jira_remote.remote.issue_types import IssueTypeService
from jira_remote.remote.models import (
    CustomField,
    CustomFieldFetchOptions,
    IssueRemoteLink,
    IssueType,
    ProjectComponent,
    ProjectComponentCreationInfo,
)
from jira_remote.remote.remote_links import IssueRemoteLinkService

__all__ = [
    "GLOBAL_KEY",
    "AuthenticationError",
    "CustomField",
    "CustomFieldFetchOptions",
    "DecodeError",
    "EntityCache",
    "InvalidUsageError",
    "IssueFieldService",
    "IssueRemoteLink",
    "IssueRemoteLinkService",
    "IssueType",
    "IssueTypeService",
    "JiraCache",
    "JiraError",
    "JiraRestClient",
    "MalformedResponseError",
    "Method",
    "ProjectComponent",
    "ProjectComponentCreationInfo",
    "ProjectComponentService",
    "ProjectNotFoundError",
    "ResourceNotFoundError",
    "ServerError",
    "ServerReportedError",
    "TransportError",
    "classify_response",
    "distinct_by_id",
    "issue_type_key",
]
