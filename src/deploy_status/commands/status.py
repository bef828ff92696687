"""Status commands — one-shot refresh and display."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from deploy_status.client.errors import error_handler
from deploy_status.commands._common import FormatOpt, get_manager, make_engine
from deploy_status.config.manager import ConfigManager
from deploy_status.output.formatter import (
    DEPLOYMENT_COLUMNS,
    PROJECT_COLUMNS,
    deployment_rows,
    output,
    project_rows,
)
from deploy_status.sync.engine import SyncEngine

console = Console()


async def _refresh(mgr: ConfigManager) -> SyncEngine:
    async with make_engine(mgr) as engine:
        await engine.refresh_all()
    return engine


def _require_accounts(mgr: ConfigManager) -> bool:
    if mgr.load_accounts():
        return True
    console.print(
        "[yellow]No accounts configured. Run 'deploy-status account add' to get started.[/]"
    )
    return False


@error_handler
def status(
    all_projects: Annotated[
        bool, typer.Option("--all", "-a", help="Show every project, not only recent activity"),
    ] = False,
    fmt: FormatOpt = "table",
) -> None:
    """Refresh once and show the overall status and active projects."""
    mgr = get_manager()
    if not _require_accounts(mgr):
        return
    engine = asyncio.run(_refresh(mgr))
    overall = engine.overall_status()
    projects = list(engine.projects) if all_projects else engine.active_projects()
    error = engine.last_error

    if fmt != "table":
        output(
            {
                "overall_status": overall.value,
                "last_refreshed_at": engine.last_refreshed_at,
                "last_error": str(error) if error else None,
                "projects": projects,
            },
            fmt,
            columns=PROJECT_COLUMNS,
            rows=project_rows(projects),
        )
        return

    console.print(f"Overall: [{overall.color}]{overall.value}[/]")
    if error:
        console.print(f"[yellow]Last error:[/] {escape(str(error))}")
    if not projects:
        console.print("[dim]No deployments in the last hour.[/]")
        return
    title = "Projects" if all_projects else "Active Projects"
    output(projects, fmt, columns=PROJECT_COLUMNS, rows=project_rows(projects), title=title)


@error_handler
def deployments(
    project: Annotated[str, typer.Argument(help="Project id or name")],
    fmt: FormatOpt = "table",
) -> None:
    """Show the recent deployments of one project."""
    mgr = get_manager()
    if not _require_accounts(mgr):
        return
    engine = asyncio.run(_refresh(mgr))
    found = engine.find_project(project)
    if found is None:
        console.print(f"[red]Project '{project}' not found.[/]")
        raise typer.Exit(1)
    output(
        list(found.deployments),
        fmt,
        columns=DEPLOYMENT_COLUMNS,
        rows=deployment_rows(found.deployments),
        title=f"{found.name} ({found.service.display_name})",
    )
