"""Vercel payload normalization.

Vercel reports timestamps as milliseconds since the epoch and git metadata
under ``meta`` with one set of keys per source-control integration.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from deploy_status.client.errors import DecodingError
from deploy_status.config.constants import VERCEL_DASHBOARD
from deploy_status.models.account import Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus
from deploy_status.providers.status import resolve_status

STATUS_TABLE = {
    "queued": DeploymentStatus.QUEUED,
    "pending": DeploymentStatus.QUEUED,
    "initializing": DeploymentStatus.QUEUED,
    "building": DeploymentStatus.BUILDING,
    "ready": DeploymentStatus.READY,
    "error": DeploymentStatus.ERROR,
    "canceled": DeploymentStatus.CANCELED,
    "skipped": DeploymentStatus.SKIPPED,
}

# Source-control integrations in lookup order
GIT_PROVIDERS = ("github", "gitlab", "bitbucket")


class VercelProject(BaseModel):
    id: str
    name: str
    framework: str | None = None


class VercelProjectsResponse(BaseModel):
    projects: list[VercelProject]


class VercelDeployment(BaseModel):
    # v6 list entries use uid/created, the v13 single endpoint uses id/createdAt
    uid: str = Field(validation_alias=AliasChoices("uid", "id"))
    name: str
    url: str | None = None
    state: str | None = None
    readyState: str | None = None
    created: float = Field(validation_alias=AliasChoices("created", "createdAt"))
    ready: float | None = None
    buildingAt: float | None = None
    projectId: str | None = None
    inspectorUrl: str | None = None
    meta: dict[str, Any] | None = None
    errorCode: str | None = None
    errorMessage: str | None = None

    def git_field(self, suffix: str) -> str | None:
        """First non-empty ``<provider>Commit<suffix>`` value in ``meta``."""
        meta = self.meta or {}
        for provider in GIT_PROVIDERS:
            value = meta.get(f"{provider}Commit{suffix}")
            if isinstance(value, str) and value:
                return value
        return None


class VercelDeploymentsResponse(BaseModel):
    deployments: list[VercelDeployment]


def _from_millis(value: float) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def resolve_deployment_status(raw: VercelDeployment) -> DeploymentStatus:
    return resolve_status(
        raw.state or raw.readyState or "QUEUED",
        STATUS_TABLE,
        error_message=raw.errorMessage,
        build_started=raw.buildingAt is not None,
    )


def _to_deployment(raw: VercelDeployment) -> Deployment:
    status = resolve_deployment_status(raw)
    ready_at = None
    if status is DeploymentStatus.READY and raw.ready is not None:
        ready_at = _from_millis(raw.ready)
    return Deployment(
        id=raw.uid,
        project_id=raw.projectId or raw.name,
        service=Service.VERCEL,
        status=status,
        url=f"https://{raw.url}" if raw.url else None,
        admin_url=raw.inspectorUrl or f"{VERCEL_DASHBOARD}/{raw.name}/{raw.uid}",
        created_at=_from_millis(raw.created),
        ready_at=ready_at,
        branch=raw.git_field("Ref"),
        commit_message=raw.git_field("Message"),
        commit_sha=raw.git_field("Sha"),
        error_message=raw.errorMessage,
    )


def normalize_projects(raw_payload: Any, account_id: uuid.UUID) -> list[Project]:
    """Map a ``GET /v9/projects`` payload to projects without deployments."""
    try:
        response = VercelProjectsResponse.model_validate(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Vercel projects: {exc}") from exc
    return [
        Project(
            id=p.id,
            account_id=account_id,
            service=Service.VERCEL,
            name=p.name,
            url=None,
            admin_url=f"{VERCEL_DASHBOARD}/{p.name}",
            framework=p.framework,
        )
        for p in response.projects
    ]


def normalize_deployments(raw_payload: Any) -> list[Deployment]:
    """Map a ``GET /v6/deployments`` payload to deployments."""
    try:
        response = VercelDeploymentsResponse.model_validate(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Vercel deployments: {exc}") from exc
    return [_to_deployment(d) for d in response.deployments]


def normalize_deployment(raw_payload: Any) -> Deployment:
    """Map a ``GET /v13/deployments/{id}`` payload to a deployment."""
    try:
        raw = VercelDeployment.model_validate(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Vercel deployment: {exc}") from exc
    return _to_deployment(raw)
