"""Account commands — connect and manage provider accounts."""

from __future__ import annotations

import asyncio
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from deploy_status.client.errors import error_handler
from deploy_status.commands._common import (
    FormatOpt,
    credential_store,
    get_manager,
    make_engine,
    resolve_account,
)
from deploy_status.config.constants import ENV_TOKEN
from deploy_status.config.manager import ConfigManager
from deploy_status.models.account import Account, Service
from deploy_status.models.project import Project
from deploy_status.output.formatter import ACCOUNT_COLUMNS, account_rows, output

app = typer.Typer(name="account", help="Manage Vercel and Netlify accounts.")
console = Console()


async def _add(mgr: ConfigManager, account: Account, token: str) -> tuple[list[Project], str | None]:
    async with make_engine(mgr) as engine:
        projects = await engine.add_account(account, token)
        error = str(engine.last_error) if engine.last_error else None
    return projects, error


@app.command()
@error_handler
def add(
    service: Annotated[Service, typer.Argument(help="Provider", case_sensitive=False)],
    name: Annotated[str, typer.Argument(help="Display name for the account")],
    token: Annotated[
        Optional[str],
        typer.Option("--token", "-t", envvar=ENV_TOKEN, help="Personal access token"),
    ] = None,
) -> None:
    """Connect an account. The token is validated before it is stored."""
    mgr = get_manager()
    if not token:
        console.print(f"[dim]{service.token_instructions}[/]")
        token = Prompt.ask(f"{service.display_name} token", password=True)
    account = Account(service=service, name=name)
    console.print(f"Validating token with {service.display_name}...")
    projects, error = asyncio.run(_add(mgr, account, token))
    console.print(
        f"[green]Account '{name}' added.[/] {len(projects)} project(s) found."
    )
    if error:
        console.print(f"[yellow]Initial refresh failed: {error}[/]")


@app.command("list")
@error_handler
def list_accounts(fmt: FormatOpt = "table") -> None:
    """List configured accounts."""
    mgr = get_manager()
    accounts = mgr.load_accounts()
    if not accounts:
        console.print(
            "[yellow]No accounts configured. Run 'deploy-status account add' to get started.[/]"
        )
        return
    store = credential_store(mgr)
    has_token = {str(a.id): store.exists(a.credential_key) for a in accounts}
    output(
        [a.model_dump(mode="json") for a in accounts],
        fmt,
        columns=ACCOUNT_COLUMNS,
        rows=account_rows(accounts, has_token),
        title="Accounts",
    )


@app.command()
@error_handler
def remove(
    ref: Annotated[str, typer.Argument(help="Account id, id prefix or name")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove an account and its stored token."""
    mgr = get_manager()
    account = resolve_account(mgr, ref)
    if not force:
        if not Confirm.ask(f"Remove account '{account.name}'?"):
            console.print("Cancelled.")
            return
    make_engine(mgr, clients={}).remove_account(account.id)
    console.print(f"[green]Account '{account.name}' removed.[/]")


def _set_enabled(ref: str, enabled: bool) -> None:
    mgr = get_manager()
    account = resolve_account(mgr, ref)
    make_engine(mgr, clients={}).set_account_enabled(account.id, enabled)
    state = "enabled" if enabled else "disabled"
    console.print(f"[green]Account '{account.name}' {state}.[/]")


@app.command()
@error_handler
def enable(
    ref: Annotated[str, typer.Argument(help="Account id, id prefix or name")],
) -> None:
    """Include an account in refreshes."""
    _set_enabled(ref, True)


@app.command()
@error_handler
def disable(
    ref: Annotated[str, typer.Argument(help="Account id, id prefix or name")],
) -> None:
    """Exclude an account from refreshes."""
    _set_enabled(ref, False)
