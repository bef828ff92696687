"""Root Typer app — global options and command registration."""

from __future__ import annotations

from typing import Optional

import typer

from deploy_status import __version__
from deploy_status.client.errors import DeployStatusError
from deploy_status.commands import account, config_cmd, status, watch
from deploy_status.commands._common import get_manager
from deploy_status.logging import configure_logging

app = typer.Typer(
    name="deploy-status",
    help="Track Vercel and Netlify deployments from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"deploy-status {__version__}")
        raise typer.Exit()


def _configured_logging() -> tuple[str, str]:
    try:
        settings = get_manager().settings
    except DeployStatusError:
        return "WARNING", "console"
    return settings.log_level, settings.log_format


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="More logging (-v info, -vv debug)."
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log format: console or json."
    ),
) -> None:
    """deploy-status — watch Vercel and Netlify deployments."""
    level, fmt = _configured_logging()
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1:
        level = "INFO"
    configure_logging(level, log_format or fmt)


# Register command groups
app.add_typer(account.app, name="account")
app.add_typer(config_cmd.app, name="config")
app.command("status")(status.status)
app.command("deployments")(status.deployments)
app.command("watch")(watch.watch)


def main() -> None:
    app()
