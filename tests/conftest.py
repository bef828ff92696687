"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
import structlog

from deploy_status.client.errors import DeployStatusError
from deploy_status.config.credentials import MemoryCredentialStore
from deploy_status.config.manager import ConfigManager
from deploy_status.models.account import Account, Service

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def millis(when: datetime) -> int:
    return int(when.timestamp() * 1000)


class FakeProvider:
    """In-memory stand-in for a provider client, returning raw payloads."""

    def __init__(self, service: Service) -> None:
        self.service = service
        self.valid_tokens: set[str] = {"good-token"}
        self.projects: Any = [] if service is Service.NETLIFY else {"projects": []}
        self.deployments: dict[str, Any] = {}
        self.errors: dict[str, DeployStatusError] = {}
        self.delay = 0.0
        self.calls: list[tuple[str, ...]] = []
        self.closed = False

    async def validate_credential(self, token: str) -> bool:
        self.calls.append(("validate", token))
        return token in self.valid_tokens

    async def list_projects(self, token: str, account_id: Any = None) -> Any:
        self.calls.append(("projects", token))
        if "projects" in self.errors:
            raise self.errors["projects"]
        return self.projects

    async def list_deployments(self, token: str, project_id: str, limit: int) -> Any:
        self.calls.append(("deployments", project_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if project_id in self.errors:
            raise self.errors[project_id]
        empty: Any = [] if self.service is Service.NETLIFY else {"deployments": []}
        return self.deployments.get(project_id, empty)

    async def get_deployment(self, token: str, deployment_id: str) -> Any:
        raise NotImplementedError

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def credentials() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def fake_clients() -> dict[Service, FakeProvider]:
    return {service: FakeProvider(service) for service in Service}


@pytest.fixture
def vercel_account() -> Account:
    return Account(service=Service.VERCEL, name="personal")


@pytest.fixture
def netlify_account() -> Account:
    return Account(service=Service.NETLIFY, name="agency")


@pytest.fixture
def vercel_projects() -> dict:
    """Sample ``GET /v9/projects`` response."""
    return {
        "projects": [
            {"id": "prj_web", "name": "web", "framework": "nextjs"},
            {"id": "prj_docs", "name": "docs", "framework": None},
        ],
        "pagination": {"count": 2, "next": None},
    }


@pytest.fixture
def vercel_deployment():
    """Factory for ``GET /v6/deployments`` entries."""

    def make(
        uid: str = "dpl_1",
        *,
        state: str = "READY",
        created: datetime = NOW - timedelta(minutes=10),
        ready: datetime | None = None,
        building_at: datetime | None = None,
        project_id: str = "prj_web",
        name: str = "web",
        meta: dict | None = None,
        **extra: Any,
    ) -> dict:
        payload: dict[str, Any] = {
            "uid": uid,
            "name": name,
            "url": f"{name}-{uid}.vercel.app",
            "state": state,
            "created": millis(created),
            "projectId": project_id,
            "meta": meta if meta is not None else {
                "githubCommitRef": "main",
                "githubCommitSha": "0123456789abcdef",
                "githubCommitMessage": "Update homepage",
            },
        }
        if ready is not None:
            payload["ready"] = millis(ready)
        if building_at is not None:
            payload["buildingAt"] = millis(building_at)
        payload.update(extra)
        return payload

    return make


@pytest.fixture
def netlify_sites() -> list[dict]:
    """Sample ``GET /sites`` response."""
    return [
        {
            "id": "site-blog",
            "name": "blog",
            "url": "http://blog.netlify.app",
            "ssl_url": "https://blog.netlify.app",
            "admin_url": "https://app.netlify.com/sites/blog",
        },
    ]


@pytest.fixture
def netlify_deploy():
    """Factory for ``GET /sites/{id}/deploys`` entries."""

    def make(
        deploy_id: str = "dep-1",
        *,
        state: str = "ready",
        created: datetime = NOW - timedelta(minutes=10),
        published: datetime | None = None,
        site_id: str = "site-blog",
        **extra: Any,
    ) -> dict:
        payload: dict[str, Any] = {
            "id": deploy_id,
            "site_id": site_id,
            "state": state,
            "ssl_url": "https://blog.netlify.app",
            "deploy_ssl_url": f"https://{deploy_id}--blog.netlify.app",
            "admin_url": "https://app.netlify.com/sites/blog",
            "created_at": created.isoformat().replace("+00:00", "Z"),
            "updated_at": (created + timedelta(minutes=1)).isoformat().replace("+00:00", "Z"),
            "published_at": published.isoformat().replace("+00:00", "Z") if published else None,
            "title": "New post",
            "commit_ref": "fedcba9876543210",
            "branch": "main",
            "error_message": None,
            "deploy_time": 42,
        }
        payload.update(extra)
        return payload

    return make


@pytest.fixture
def now() -> datetime:
    """Fixed reference time the sample payloads are built around."""
    return NOW


@pytest.fixture
def config_env(tmp_config: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    """Point the CLI at a temp config file; tokens land next to it."""
    monkeypatch.setenv("DEPLOY_STATUS_CONFIG", str(tmp_config))
    monkeypatch.delenv("DEPLOY_STATUS_TOKEN", raising=False)
    return ConfigManager(config_path=tmp_config)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configuration done by a test or a CLI invocation."""
    yield
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    structlog.reset_defaults()
