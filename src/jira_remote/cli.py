"""CLI entry point for jira-remote.

This module provides the Typer-based CLI with commands:
- jira-remote validate: Validate configuration
- jira-remote fields: List custom fields
- jira-remote components: List project components
- jira-remote create-component / delete-component: Manage components
- jira-remote remote-links / add-remote-link: Manage issue remote links

Exit codes:
- 0: Success
- 1: Configuration error
- 2: Authentication error
- 3: Request or usage error
- 4: Fatal error
"""

from __future__ import annotations

import asyncio
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, TypeVar

import typer

from jira_remote import __version__
from jira_remote.config import ConfigError, load_config
from jira_remote.jira import Jira
from jira_remote.logging import configure_logging, get_logger
from jira_remote.remote.errors import (
    AuthenticationError,
    InvalidUsageError,
    JiraError,
    TransportError,
)
from jira_remote.remote.models import (
    CustomFieldFetchOptions,
    ProjectComponentCreationInfo,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from jira_remote.config.schema import Config

T = TypeVar("T")


class ExitCode(IntEnum):
    """CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    AUTH_ERROR = 2
    REQUEST_ERROR = 3
    FATAL_ERROR = 4


app = typer.Typer(
    name="jira-remote",
    help="Query and manage Jira custom fields, components and remote links.",
    add_completion=False,
    no_args_is_help=True,
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging."),
]
TraceOption = Annotated[
    bool,
    typer.Option("--trace", help="Trace requests and responses."),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jira-remote {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """jira-remote - Jira REST client."""


def _fail(message: str, code: ExitCode) -> typer.Exit:
    typer.echo(typer.style(f"✗ {message}", fg=typer.colors.RED), err=True)
    return typer.Exit(code)


def _load(config: Path | None, verbose: bool) -> Config:
    configure_logging(verbose=verbose, json_output=False)
    try:
        return load_config(config)
    except ConfigError as e:
        raise _fail(f"Configuration error: {e}", ExitCode.CONFIG_ERROR) from e


def _run(
    config: Path | None,
    verbose: bool,
    trace: bool,
    operation: Callable[[Jira], Awaitable[T]],
) -> T:
    """Load configuration, run one operation against Jira and map errors to exit codes."""
    cfg = _load(config, verbose)
    log = get_logger("jira_remote.cli")

    async def _call() -> T:
        async with Jira.from_config(cfg) as jira:
            if trace:
                jira.rest_client.request_trace = True
            return await operation(jira)

    try:
        return asyncio.run(_call())
    except AuthenticationError as e:
        raise _fail(f"Authentication failed ({e.status_code})", ExitCode.AUTH_ERROR) from e
    except InvalidUsageError as e:
        raise _fail(str(e), ExitCode.REQUEST_ERROR) from e
    except TransportError as e:
        raise _fail(f"Could not reach {cfg.server.url}: {e}", ExitCode.FATAL_ERROR) from e
    except JiraError as e:
        log.error("Request failed", error=str(e), error_type=type(e).__name__)
        raise _fail(str(e), ExitCode.REQUEST_ERROR) from e


@app.command()
def validate(config: ConfigOption = None, verbose: VerboseOption = False) -> None:
    """Validate configuration without contacting the server."""
    cfg = _load(config, verbose)
    typer.echo(typer.style("✓ Configuration is valid", fg=typer.colors.GREEN))

    if verbose:
        typer.echo("\nConfiguration summary:")
        typer.echo(f"  Server: {cfg.server.url}")
        typer.echo(f"  Username: {cfg.server.username or '(anonymous)'}")
        typer.echo(f"  Timeout: {cfg.server.timeout}s")
        typer.echo(f"  Request trace: {'on' if cfg.client.request_trace else 'off'}")


@app.command()
def fields(
    project: Annotated[
        str | None,
        typer.Option("--project", "-p", help="Only fields available in this project."),
    ] = None,
    issue_type: Annotated[
        str | None,
        typer.Option("--issue-type", "-t", help="Only fields of this issue type id."),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """List custom fields."""
    options = CustomFieldFetchOptions(project_key=project, issue_type_id=issue_type)
    result = _run(config, verbose, trace, lambda jira: jira.fields.get_custom_fields(options))
    for field in sorted(result, key=lambda f: f.id):
        typer.echo(f"{field.id}\t{field.name}\t{field.custom_type or ''}")


@app.command()
def components(
    project: Annotated[str, typer.Argument(help="Project key.")],
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """List the components of a project."""
    result = _run(config, verbose, trace, lambda jira: jira.components.get_components(project))
    for component in sorted(result, key=lambda c: c.name):
        typer.echo(f"{component.id}\t{component.name}\t{component.lead or ''}")


@app.command("create-component")
def create_component(
    project: Annotated[str, typer.Argument(help="Project key.")],
    name: Annotated[str, typer.Argument(help="Component name.")],
    description: Annotated[
        str | None, typer.Option("--description", help="Component description.")
    ] = None,
    lead: Annotated[str | None, typer.Option("--lead", help="Lead user name.")] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """Create a component in a project."""
    info = ProjectComponentCreationInfo(
        name=name,
        project_key=project,
        description=description,
        lead_user_name=lead,
    )
    component = _run(config, verbose, trace, lambda jira: jira.components.create_component(info))
    typer.echo(typer.style(f"✓ Created component {component.id}", fg=typer.colors.GREEN))


@app.command("delete-component")
def delete_component(
    component_id: Annotated[str, typer.Argument(help="Component id.")],
    move_issues_to: Annotated[
        str | None,
        typer.Option("--move-issues-to", help="Component id receiving the issues."),
    ] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """Delete a component."""
    _run(
        config,
        verbose,
        trace,
        lambda jira: jira.components.delete_component(component_id, move_issues_to),
    )
    typer.echo(typer.style(f"✓ Deleted component {component_id}", fg=typer.colors.GREEN))


@app.command("remote-links")
def remote_links(
    issue: Annotated[str, typer.Argument(help="Issue key.")],
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """List the remote links of an issue."""
    result = _run(config, verbose, trace, lambda jira: jira.remote_links.get_remote_links(issue))
    for link in result:
        typer.echo(f"{link.title or ''}\t{link.remote_url}\t{link.summary or ''}")


@app.command("add-remote-link")
def add_remote_link(
    issue: Annotated[str, typer.Argument(help="Issue key.")],
    url: Annotated[str, typer.Argument(help="Remote URL.")],
    title: Annotated[str, typer.Argument(help="Link title.")],
    summary: Annotated[str | None, typer.Option("--summary", help="Link summary.")] = None,
    config: ConfigOption = None,
    verbose: VerboseOption = False,
    trace: TraceOption = False,
) -> None:
    """Add a remote link to an issue."""
    _run(
        config,
        verbose,
        trace,
        lambda jira: jira.remote_links.create_remote_link(issue, url, title, summary),
    )
    typer.echo(typer.style(f"✓ Linked {issue} to {url}", fg=typer.colors.GREEN))
