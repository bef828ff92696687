"""Output dispatcher — renders data in table, JSON, YAML, or CSV format."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console

from deploy_status.models.account import Account
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus
from deploy_status.output.tables import kv_table, make_table, relative_time

console = Console()

PROJECT_COLUMNS = ["Service", "Project", "Status", "Branch", "Commit", "Created", "URL"]
DEPLOYMENT_COLUMNS = ["ID", "Status", "Branch", "Commit", "Message", "Created", "Duration"]
ACCOUNT_COLUMNS = ["ID", "Service", "Name", "Enabled", "Token"]


def _plain(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: _plain(value) for key, value in data.items()}
    return data


def output_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(_plain(data), indent=2, default=str))


def output_yaml(data: Any) -> None:
    """Print data as YAML."""
    import yaml

    console.print(
        yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False), end="",
    )


def output_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print data as CSV."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(columns)
    writer.writerows(
        [[_csv_value(v) for v in row] for row in rows]
    )
    console.print(buf.getvalue(), end="", markup=False)


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, DeploymentStatus):
        return value.value
    return str(value)


def output_table(
    data: Any,
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Print data as a Rich table."""
    if kv and isinstance(data, dict):
        console.print(kv_table(data, title=title))
    elif columns and rows is not None:
        console.print(make_table(title, columns, rows))
    elif isinstance(data, dict):
        console.print(kv_table(data, title=title))
    else:
        console.print(data)


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Dispatch output to the appropriate formatter."""
    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif fmt == "csv":
        if columns and rows is not None:
            output_csv(columns, rows)
        else:
            output_json(data)
    else:
        output_table(data, columns=columns, rows=rows, title=title, kv=kv)


def project_rows(projects: Sequence[Project]) -> list[list[Any]]:
    rows = []
    for p in projects:
        latest = p.latest_deployment
        rows.append([
            p.service.display_name,
            p.name,
            p.latest_status,
            latest.branch if latest else None,
            latest.short_commit_sha if latest else None,
            relative_time(latest.created_at) if latest else None,
            (latest.url if latest and latest.url else p.url) or p.admin_url,
        ])
    return rows


def deployment_rows(deployments: Sequence[Deployment]) -> list[list[Any]]:
    return [
        [
            d.id,
            d.status,
            d.branch,
            d.short_commit_sha,
            (d.commit_message or "").splitlines()[0] if d.commit_message else None,
            relative_time(d.created_at),
            d.formatted_build_duration,
        ]
        for d in deployments
    ]


def account_rows(accounts: Sequence[Account], has_token: dict[str, bool]) -> list[list[Any]]:
    return [
        [
            str(a.id),
            a.service.display_name,
            a.name,
            "yes" if a.enabled else "no",
            "stored" if has_token.get(str(a.id)) else "missing",
        ]
        for a in accounts
    ]
