"""Configuration module for jira_remote.

Usage:
    from jira_remote.config import load_config, Config

    config = load_config()  # Auto-discovers config file
    config = load_config("/path/to/config.yaml")  # Explicit path
"""

from jira_remote.config.loader import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EnvironmentVariableError,
    apply_env_overrides,
    discover_config_path,
    load_config,
)
from jira_remote.config.schema import ClientConfig, Config, ServerConfig

__all__ = [
    "ClientConfig",
    "Config",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "ServerConfig",
    "apply_env_overrides",
    "discover_config_path",
    "load_config",
]
