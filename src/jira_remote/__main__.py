"""Entry point for running jira_remote as a module.

Allows running the application with:
    python -m jira_remote

This delegates to the Typer CLI app.
"""

from jira_remote.cli import app

if __name__ == "__main__":
    app()
