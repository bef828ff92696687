"""Tests for output formatting."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from deploy_status.models.account import Account, Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus
from deploy_status.output.formatter import (
    ACCOUNT_COLUMNS,
    PROJECT_COLUMNS,
    account_rows,
    deployment_rows,
    output,
    output_csv,
    project_rows,
)


@pytest.fixture
def captured():
    buf = StringIO()
    console = Console(file=buf, force_terminal=False, width=200)
    with patch("deploy_status.output.formatter.console", console):
        yield buf


def _project() -> Project:
    created = datetime.now(timezone.utc) - timedelta(minutes=3)
    dep = Deployment(
        id="dpl_1",
        project_id="prj_web",
        service=Service.VERCEL,
        status=DeploymentStatus.BUILDING,
        url="https://web-1.vercel.app",
        admin_url="https://vercel.com/~/web/dpl_1",
        created_at=created,
        branch="main",
        commit_sha="0123456789",
        commit_message="First line\nsecond line",
    )
    return Project(
        id="prj_web",
        account_id=uuid.uuid4(),
        service=Service.VERCEL,
        name="web",
        admin_url="https://vercel.com/~/web",
        deployments=(dep,),
    )


class TestOutputJson:
    def test_dict(self, captured):
        output({"key": "val"}, "json")
        assert json.loads(captured.getvalue()) == {"key": "val"}

    def test_models(self, captured):
        output([_project()], "json")
        (data,) = json.loads(captured.getvalue())
        assert data["name"] == "web"
        assert data["deployments"][0]["status"] == "building"


class TestOutputYaml:
    def test_dict(self, captured):
        output({"overall_status": "ready", "projects": []}, "yaml")
        assert "overall_status: ready" in captured.getvalue()


class TestOutputCsv:
    def test_csv_output(self, captured):
        output_csv(["Name", "Status"], [["a", DeploymentStatus.READY], ["b", None]])
        out = captured.getvalue()
        assert "Name,Status" in out
        assert "a,ready" in out
        assert "b," in out

    def test_csv_without_rows_falls_back_to_json(self, captured):
        output({"a": 1}, "csv")
        assert json.loads(captured.getvalue()) == {"a": 1}


class TestOutputTable:
    def test_project_table(self, captured):
        projects = [_project()]
        output(projects, "table", columns=PROJECT_COLUMNS, rows=project_rows(projects), title="Active")
        out = captured.getvalue()
        assert "web" in out
        assert "Building" in out
        assert "0123456" in out
        assert "3m ago" in out

    def test_kv_table(self, captured):
        output({"idle_interval": 300}, "table", kv=True)
        assert "idle_interval" in captured.getvalue()


class TestRows:
    def test_deployment_rows_first_line_of_message(self):
        (row,) = deployment_rows(_project().deployments)
        assert row[0] == "dpl_1"
        assert row[4] == "First line"
        assert row[6] is None

    def test_project_rows_prefers_deployment_url(self):
        (row,) = project_rows([_project()])
        assert row[-1] == "https://web-1.vercel.app"

    def test_account_rows(self):
        acct = Account(service=Service.NETLIFY, name="agency", enabled=False)
        (row,) = account_rows([acct], {str(acct.id): True})
        assert len(row) == len(ACCOUNT_COLUMNS)
        assert row[1:] == ["Netlify", "agency", "no", "stored"]
