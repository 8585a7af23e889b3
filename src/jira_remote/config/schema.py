"""Pydantic schema models for configuration.

- Config: Top-level configuration container
- ServerConfig: Jira server location, credentials and timeout
- ClientConfig: REST client behaviour
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerConfig(BaseModel):
    """Jira server settings.

    Attributes:
        url: Base URL of the Jira server (http or https)
        username: Optional username for basic credentials
        password: Optional password or API token (use ${VAR} references)
        timeout: Request timeout in seconds (1-300, default: 30)
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    username: str | None = None
    password: str | None = None
    timeout: Annotated[float, Field(ge=1, le=300)] = 30.0

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the server URL scheme."""
        if not v.startswith(("http://", "https://")):
            msg = "url must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/") + "/"


class ClientConfig(BaseModel):
    """REST client settings.

    Attributes:
        request_trace: Trace every request and response (default: False)
    """

    model_config = ConfigDict(extra="forbid")

    request_trace: bool = False


class Config(BaseModel):
    """Top-level configuration loaded from YAML.

    Attributes:
        version: Schema version (must be 1)
        server: Jira server settings
        client: REST client settings
    """

    model_config = ConfigDict(extra="forbid")

    version: Literal[1]
    server: ServerConfig
    client: ClientConfig = Field(default_factory=ClientConfig)
