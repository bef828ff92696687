"""Config commands — inspect and change settings."""

from __future__ import annotations

from typing import Annotated, Any

import typer
from rich.console import Console

from deploy_status.client.errors import error_handler
from deploy_status.commands._common import FormatOpt, credential_store, get_manager
from deploy_status.output.formatter import output

app = typer.Typer(name="config", help="Show and change polling and notification settings.")
console = Console()


def _flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{prefix}{key}."))
        else:
            flat[f"{prefix}{key}"] = value
    return flat


@app.command()
@error_handler
def show(fmt: FormatOpt = "table") -> None:
    """Show the effective settings."""
    mgr = get_manager()
    data = mgr.settings.model_dump(mode="json")
    if fmt == "table":
        output(_flatten(data), fmt, kv=True, title="Settings")
    else:
        output(data, fmt)


@app.command("set")
@error_handler
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. idle_interval or notifications.enabled")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Change a setting."""
    mgr = get_manager()
    mgr.set_value(key, value)
    console.print(f"[green]{key} set to {value}.[/]")


@app.command()
@error_handler
def path() -> None:
    """Show where configuration and tokens are stored."""
    mgr = get_manager()
    console.print(f"Config file: {mgr.config_path}")
    console.print(f"Credentials: {credential_store(mgr).path}")
