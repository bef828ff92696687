"""Shared helpers for CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated

import typer
from rich.console import Console

from deploy_status.client import make_clients
from deploy_status.config.credentials import FileCredentialStore
from deploy_status.config.manager import ConfigManager
from deploy_status.models.account import Account, Service
from deploy_status.sync.engine import ProviderAPI, SyncEngine

_console = Console()

FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]


def get_manager() -> ConfigManager:
    return ConfigManager()


def credential_store(mgr: ConfigManager) -> FileCredentialStore:
    """Credential file kept next to the config file."""
    return FileCredentialStore(mgr.config_path.parent / "credentials.toml")


def make_engine(
    mgr: ConfigManager,
    clients: Mapping[Service, ProviderAPI] | None = None,
) -> SyncEngine:
    """Create a SyncEngine wired to the on-disk config and credentials."""
    settings = mgr.settings
    if clients is None:
        clients = make_clients(timeout=settings.timeout)
    return SyncEngine(clients, credential_store(mgr), mgr, settings=settings)


def resolve_account(mgr: ConfigManager, ref: str) -> Account:
    """Look up an account by id, id prefix or name, exiting if unknown."""
    account = mgr.get_account(ref)
    if account is None:
        _console.print(f"[red]Account '{ref}' not found.[/]")
        raise typer.Exit(1)
    return account
