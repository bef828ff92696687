"""Rich table rendering helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

from rich.table import Table
from rich.text import Text

from deploy_status.models.status import DeploymentStatus

STATUS_STYLES = {
    DeploymentStatus.QUEUED: "grey50",
    DeploymentStatus.BUILDING: "yellow",
    DeploymentStatus.READY: "green",
    DeploymentStatus.ERROR: "bold red",
    DeploymentStatus.CANCELED: "grey50",
    DeploymentStatus.SKIPPED: "grey50",
}


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    show_lines: bool = False,
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title, show_lines=show_lines)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(_cell(cell) for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, _cell(value))
    return table


def _cell(value: Any) -> Text | str:
    if isinstance(value, DeploymentStatus):
        return Text(value.display_name, style=STATUS_STYLES[value])
    return str(value) if value is not None else ""


def relative_time(when: datetime | None, now: datetime | None = None) -> str:
    """Compact age of *when*, e.g. ``now``, ``5m ago``, ``3d ago``."""
    if when is None:
        return ""
    now = now or datetime.now(timezone.utc)
    seconds = (now - when).total_seconds()
    if seconds < 60:
        return "now"
    if seconds < 3600:
        return f"{int(seconds // 60)}m ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    if seconds < 604800:
        return f"{int(seconds // 86400)}d ago"
    return when.strftime("%Y-%m-%d")
