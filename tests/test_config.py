"""Tests for configuration loading."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from jira_remote.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigValidationError,
    EnvironmentVariableError,
    apply_env_overrides,
    discover_config_path,
    load_config,
)
from jira_remote.config.loader import expand_env_vars

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


class TestExpandEnvVars:
    def test_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JIRA_API_TOKEN", "secret")
        assert expand_env_vars({"server": {"password": "${JIRA_API_TOKEN}"}}) == {
            "server": {"password": "secret"}
        }

    def test_missing_strict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JIRA_MISSING", raising=False)
        with pytest.raises(EnvironmentVariableError) as exc_info:
            expand_env_vars("${JIRA_MISSING}")
        assert exc_info.value.var_name == "JIRA_MISSING"

    def test_missing_lenient(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JIRA_MISSING", raising=False)
        assert expand_env_vars("${JIRA_MISSING}", strict=False) == "${JIRA_MISSING}"


class TestLoadConfig:
    def test_valid(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
        sample_config: dict[str, Any],
    ) -> None:
        monkeypatch.setenv("JIRA_API_TOKEN", "secret")
        path = write_config(sample_config)

        config = load_config(path)

        assert config.server.url == "https://jira.example.com/"
        assert config.server.password == "secret"
        assert config.server.timeout == 10
        assert config.client.request_trace is False

    def test_missing_env_var_names_file(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
        sample_config: dict[str, Any],
    ) -> None:
        monkeypatch.delenv("JIRA_API_TOKEN", raising=False)
        path = write_config(sample_config)

        with pytest.raises(EnvironmentVariableError) as exc_info:
            load_config(path)

        assert exc_info.value.path == path

    @pytest.mark.parametrize(
        "server",
        [
            {"url": "ftp://jira.example.com"},
            {"url": "https://jira.example.com", "timeout": 0},
            {"url": "https://jira.example.com", "unknown": True},
        ],
    )
    def test_invalid_server(
        self,
        write_config: Callable[..., Path],
        server: dict[str, Any],
    ) -> None:
        path = write_config({"version": 1, "server": server})

        with pytest.raises(ConfigValidationError) as exc_info:
            load_config(path)

        assert exc_info.value.validation_errors

    def test_not_a_mapping(self, temp_dir: Path) -> None:
        path = temp_dir / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_explicit_path_missing(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            load_config(temp_dir / "absent.yaml")


class TestDiscovery:
    def test_env_var(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
        sample_config: dict[str, Any],
    ) -> None:
        path = write_config(sample_config, "custom.yaml")
        monkeypatch.setenv("JIRA_REMOTE_CONFIG", str(path))

        assert discover_config_path() == path.resolve()

    def test_xdg(
        self,
        monkeypatch: pytest.MonkeyPatch,
        temp_dir: Path,
    ) -> None:
        monkeypatch.delenv("JIRA_REMOTE_CONFIG", raising=False)
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "xdg"))
        config_path = temp_dir / "xdg" / "jira-remote" / "config.yaml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text("version: 1\n")

        assert discover_config_path() == config_path

    def test_nothing_found(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.delenv("JIRA_REMOTE_CONFIG", raising=False)
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "xdg"))

        with pytest.raises(ConfigNotFoundError, match="Searched locations"):
            discover_config_path()


class TestEnvironmentOverrides:
    def test_override_file_values(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
        sample_config: dict[str, Any],
    ) -> None:
        monkeypatch.setenv("JIRA_API_TOKEN", "secret")
        monkeypatch.setenv("JIRA_PASSWORD", "from-env")
        monkeypatch.setenv("JIRA_REQUEST_TRACE", "true")
        path = write_config(sample_config)

        config = load_config(path)

        assert config.server.password == "from-env"
        assert config.server.username == "admin"
        assert config.client.request_trace is True

    def test_environment_only(self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> None:
        monkeypatch.delenv("JIRA_REMOTE_CONFIG", raising=False)
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "xdg"))
        monkeypatch.setenv("JIRA_URL", "https://jira.example.com")
        monkeypatch.setenv("JIRA_USERNAME", "bot")

        config = load_config()

        assert config.server.url == "https://jira.example.com/"
        assert config.server.username == "bot"
        assert config.server.timeout == 30

    def test_explicit_missing_file_not_rescued(
        self, monkeypatch: pytest.MonkeyPatch, temp_dir: Path
    ) -> None:
        monkeypatch.setenv("JIRA_URL", "https://jira.example.com")

        with pytest.raises(ConfigNotFoundError):
            load_config(temp_dir / "absent.yaml")

    def test_overrides_disabled(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
        sample_config: dict[str, Any],
    ) -> None:
        monkeypatch.setenv("JIRA_API_TOKEN", "secret")
        monkeypatch.setenv("JIRA_PASSWORD", "from-env")

        config = load_config(write_config(sample_config), env_overrides=False)

        assert config.server.password == "secret"

    def test_apply_does_not_mutate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JIRA_USERNAME", "bot")
        raw = {"version": 1, "server": {"url": "https://x", "username": "admin"}}

        merged = apply_env_overrides(raw)

        assert merged["server"]["username"] == "bot"
        assert raw["server"]["username"] == "admin"

    def test_empty_section_takes_override(
        self,
        monkeypatch: pytest.MonkeyPatch,
        write_config: Callable[..., Path],
    ) -> None:
        monkeypatch.setenv("JIRA_URL", "https://jira.example.com")
        path = write_config({"version": 1, "server": None})

        config = load_config(path)

        assert config.server.url == "https://jira.example.com/"

    def test_scalar_section_left_for_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JIRA_URL", "https://jira.example.com")

        assert apply_env_overrides({"version": 1, "server": "oops"})["server"] == "oops"
