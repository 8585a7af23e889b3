"""Typed server records and domain entities.

Server records (``Remote*``) are pydantic models validated once at the REST
boundary. Domain entities are frozen models built from those records; they
carry an ``id`` used as the cache identity.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CUSTOM_FIELD_PREFIX = "customfield_"


class _RemoteRecord(BaseModel):
    """Base for records received from the server."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# ============================================================================
# Fields
# ============================================================================


class FieldSchema(_RemoteRecord):
    """Type metadata of a field."""

    type: str | None = None
    items: str | None = None
    system: str | None = None
    custom: str | None = None
    custom_id: int | None = Field(default=None, alias="customId")


class RemoteField(_RemoteRecord):
    """A field record from ``GET /rest/api/2/field``."""

    id: str
    name: str = ""
    custom: bool = False
    field_schema: FieldSchema | None = Field(default=None, alias="schema")


class CreateMetaField(_RemoteRecord):
    """A field record from the create-meta endpoint.

    The create-meta endpoint names the field id ``fieldId`` and carries no
    ``custom`` marker.
    """

    field_id: str = Field(alias="fieldId")
    name: str = ""
    required: bool = False
    field_schema: FieldSchema | None = Field(default=None, alias="schema")

    def to_remote_field(self) -> RemoteField:
        """Map this record to a field record keyed by ``fieldId``."""
        return RemoteField(
            id=self.field_id,
            name=self.name,
            custom=self.field_id.lower().startswith(CUSTOM_FIELD_PREFIX),
            field_schema=self.field_schema,
        )


class CreateMetaPage(_RemoteRecord):
    """Envelope returned by the create-meta endpoint."""

    values: list[CreateMetaField]
    start_at: int = Field(default=0, alias="startAt")
    max_results: int | None = Field(default=None, alias="maxResults")
    total: int | None = None


class CustomField(BaseModel):
    """A user-defined issue attribute identified by a ``customfield_<n>`` id."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    field_schema: FieldSchema | None = None

    @classmethod
    def from_remote(cls, remote: RemoteField) -> CustomField:
        return cls(id=remote.id, name=remote.name, field_schema=remote.field_schema)

    @property
    def custom_type(self) -> str | None:
        """The custom field type key, e.g. ``com.atlassian...:textfield``."""
        return self.field_schema.custom if self.field_schema else None

    def has_id(self, field_id: str) -> bool:
        return self.id == field_id


# ============================================================================
# Issue types
# ============================================================================


class RemoteIssueType(_RemoteRecord):
    """An issue type record as listed by ``/project/{key}/statuses``."""

    id: str
    name: str = ""
    description: str | None = None
    subtask: bool = False
    icon_url: str | None = Field(default=None, alias="iconUrl")


class IssueType(BaseModel):
    """The type of an issue as defined on the server."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str | None = None
    is_subtask: bool = False
    icon_url: str | None = None

    @classmethod
    def from_remote(cls, remote: RemoteIssueType) -> IssueType:
        return cls(
            id=remote.id,
            name=remote.name,
            description=remote.description,
            is_subtask=remote.subtask,
            icon_url=remote.icon_url,
        )

    def matches(self, name_or_id: str) -> bool:
        """Check whether this issue type has the given id or name.

        A numeric argument is compared against the id, anything else
        against the name.
        """
        if name_or_id.isdigit():
            return self.id == name_or_id
        return self.name == name_or_id


# ============================================================================
# Components
# ============================================================================


class RemoteUser(_RemoteRecord):
    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class RemoteComponent(_RemoteRecord):
    """A component record. The server omits the owning project key."""

    id: str
    name: str = ""
    description: str | None = None
    lead: RemoteUser | None = None
    lead_user_name: str | None = Field(default=None, alias="leadUserName")
    project_key: str | None = Field(default=None, alias="project")


class ProjectComponent(BaseModel):
    """A sub-categorization of issues within a project."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    project_key: str
    description: str | None = None
    lead: str | None = None

    @classmethod
    def from_remote(cls, remote: RemoteComponent, project_key: str) -> ProjectComponent:
        """Build a component and tag it with the project it was fetched for."""
        lead = remote.lead_user_name
        if lead is None and remote.lead is not None:
            lead = remote.lead.name
        return cls(
            id=remote.id,
            name=remote.name,
            project_key=project_key,
            description=remote.description,
            lead=lead,
        )


class ProjectComponentCreationInfo(BaseModel):
    """Information needed to create a component.

    Serialized by alias with ``None`` values omitted.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    project_key: str = Field(alias="project")
    description: str | None = None
    lead_user_name: str | None = Field(default=None, alias="leadUserName")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================================
# Remote links
# ============================================================================


class RemoteLinkObject(_RemoteRecord):
    url: str
    title: str | None = None
    summary: str | None = None


class RemoteLinkRecord(_RemoteRecord):
    """An element of ``GET /rest/api/2/issue/{key}/remotelink``."""

    id: int | None = None
    link_object: RemoteLinkObject = Field(alias="object")


class IssueRemoteLink(BaseModel):
    """A link from an issue to a resource outside the server."""

    model_config = ConfigDict(frozen=True)

    remote_url: str
    title: str | None = None
    summary: str | None = None


# ============================================================================
# Options
# ============================================================================


class CustomFieldFetchOptions(BaseModel):
    """Filters used when fetching custom fields.

    Attributes:
        project_key: Restrict to fields available in this project.
        issue_type_id: Further restrict to one issue type of the project.
            Requires project_key.
    """

    project_key: str | None = None
    issue_type_id: str | None = None
