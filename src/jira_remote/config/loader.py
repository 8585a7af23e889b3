"""Configuration loading for the Jira connection.

Settings come from a YAML file, with ``${VAR}`` references expanded, and
can be overridden per value by ``JIRA_URL``, ``JIRA_USERNAME``,
``JIRA_PASSWORD`` and ``JIRA_REQUEST_TRACE``. When no file exists but
``JIRA_URL`` is set, the configuration is built from the environment alone.

File discovery order: ``--config``, ``$JIRA_REMOTE_CONFIG``,
``./jira-remote.yaml``, then ``$XDG_CONFIG_HOME/jira-remote/config.yaml``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from jira_remote.config.schema import Config
from jira_remote.paths import get_default_config_path

CONFIG_ENV_VAR = "JIRA_REMOTE_CONFIG"
LOCAL_CONFIG_NAME = "jira-remote.yaml"

# Environment variable -> (section, key) it overrides.
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "JIRA_URL": ("server", "url"),
    "JIRA_USERNAME": ("server", "username"),
    "JIRA_PASSWORD": ("server", "password"),
    "JIRA_REQUEST_TRACE": ("client", "request_trace"),
}

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


class ConfigError(Exception):
    """Raised when the Jira connection settings cannot be loaded."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when neither a config file nor ``JIRA_URL`` is available."""


class ConfigValidationError(ConfigError):
    """Raised when the settings do not match the schema."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        validation_errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.validation_errors = validation_errors or []
        super().__init__(message, path)


class EnvironmentVariableError(ConfigError):
    """Raised when a ``${VAR}`` reference names an unset variable."""

    def __init__(self, var_name: str, path: Path | None = None) -> None:
        self.var_name = var_name
        super().__init__(
            f"Environment variable '{var_name}' is referenced by the config but not set.",
            path,
        )


def expand_env_vars(value: Any, *, strict: bool = True) -> Any:
    """Replace ``${VAR}`` references inside strings, lists and mappings.

    With ``strict=False`` unknown references are left as they are.

        >>> os.environ["JIRA_API_TOKEN"] = "secret"
        >>> expand_env_vars({"password": "${JIRA_API_TOKEN}"})
        {'password': 'secret'}
    """
    if isinstance(value, dict):
        return {key: expand_env_vars(item, strict=strict) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item, strict=strict) for item in value]
    if not isinstance(value, str):
        return value

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in os.environ:
            return os.environ[name]
        if strict:
            raise EnvironmentVariableError(name)
        return match.group(0)

    return ENV_VAR_PATTERN.sub(substitute, value)


def apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``raw`` with ``JIRA_*`` overrides applied."""
    merged = {section: dict(values) for section, values in raw.items() if isinstance(values, dict)}
    merged.update({k: v for k, v in raw.items() if not isinstance(v, dict)})
    for var_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(var_name)
        if not value:
            continue
        if merged.get(section) is None:
            merged[section] = {}
        if isinstance(merged[section], dict):
            merged[section][key] = value
    return merged


def _candidate_paths() -> list[Path]:
    candidates: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser().resolve())
    candidates.append(Path.cwd() / LOCAL_CONFIG_NAME)
    candidates.append(get_default_config_path())
    return candidates


def discover_config_path(explicit_path: str | Path | None = None) -> Path:
    """Find the config file to load.

    An explicit path must exist; otherwise the first existing candidate
    in discovery order wins.

    Raises:
        ConfigNotFoundError: If no candidate exists
    """
    if explicit_path:
        path = Path(explicit_path).expanduser().resolve()
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}", path)
        return path

    candidates = _candidate_paths()
    for path in candidates:
        if path.exists():
            return path

    searched = "".join(f"\n  - {p}" for p in candidates)
    raise ConfigNotFoundError(f"No config file found. Searched locations:{searched}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML mapping from ``path``. An empty file yields ``{}``."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a YAML mapping", path)
    return data


def _validate(raw: dict[str, Any], path: Path | None) -> Config:
    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        errors = e.errors()
        lines = "".join(
            f"\n  - {'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in errors
        )
        raise ConfigValidationError(
            f"Config validation failed ({len(errors)} error(s)):{lines}",
            path=path,
            validation_errors=[dict(err) for err in errors],
        ) from e


def load_config(
    path: str | Path | None = None,
    *,
    expand_env: bool = True,
    env_overrides: bool = True,
) -> Config:
    """Load and validate the Jira connection settings.

    Args:
        path: Explicit config file path. If None, discovery is used.
        expand_env: Whether to expand ``${VAR}`` references in the file.
        env_overrides: Whether ``JIRA_*`` variables override file values
            and may stand in for a missing file.

    Raises:
        ConfigNotFoundError: If no file is found and ``JIRA_URL`` is unset
        ConfigError: If the file cannot be read or parsed
        EnvironmentVariableError: If a referenced env var is not set
        ConfigValidationError: If the settings fail schema validation
    """
    config_path: Path | None
    try:
        config_path = discover_config_path(path)
    except ConfigNotFoundError:
        if path or not (env_overrides and os.environ.get("JIRA_URL")):
            raise
        config_path = None

    raw: dict[str, Any] = {"version": 1}
    if config_path is not None:
        raw = load_yaml(config_path)
        if expand_env:
            try:
                raw = expand_env_vars(raw, strict=True)
            except EnvironmentVariableError as e:
                e.path = config_path
                raise

    if env_overrides:
        raw = apply_env_overrides(raw)

    return _validate(raw, config_path)
