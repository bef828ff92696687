"""Netlify payload normalization."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError, field_validator

from deploy_status.client.errors import DecodingError
from deploy_status.models.account import Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus
from deploy_status.providers.status import resolve_status

STATUS_TABLE = {
    "new": DeploymentStatus.QUEUED,
    "pending": DeploymentStatus.QUEUED,
    "uploading": DeploymentStatus.QUEUED,
    "uploaded": DeploymentStatus.QUEUED,
    "preparing": DeploymentStatus.QUEUED,
    "prepared": DeploymentStatus.QUEUED,
    "enqueued": DeploymentStatus.QUEUED,
    "building": DeploymentStatus.BUILDING,
    "processing": DeploymentStatus.BUILDING,
    "ready": DeploymentStatus.READY,
    "error": DeploymentStatus.ERROR,
    "skipped": DeploymentStatus.SKIPPED,
    "canceled": DeploymentStatus.CANCELED,
}


class NetlifySite(BaseModel):
    id: str
    name: str
    url: str | None = None
    ssl_url: str | None = None
    admin_url: str


class NetlifyDeploy(BaseModel):
    id: str
    site_id: str
    state: str
    url: str | None = None
    ssl_url: str | None = None
    deploy_url: str | None = None
    admin_url: str
    created_at: datetime
    updated_at: datetime | None = None
    published_at: datetime | None = None
    title: str | None = None
    commit_ref: str | None = None
    branch: str | None = None
    error_message: str | None = None
    deploy_time: float | None = None

    @field_validator("created_at", "updated_at", "published_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


_sites = TypeAdapter(list[NetlifySite])
_deploys = TypeAdapter(list[NetlifyDeploy])


def resolve_deploy_status(raw: NetlifyDeploy) -> DeploymentStatus:
    return resolve_status(
        raw.state,
        STATUS_TABLE,
        error_message=raw.error_message,
        build_started=bool(raw.deploy_time),
    )


def _to_deployment(raw: NetlifyDeploy) -> Deployment:
    status = resolve_deploy_status(raw)
    ready_at = None
    # updated_at on an unfinished deploy is not a completion time
    if status is DeploymentStatus.READY:
        ready_at = raw.published_at or raw.updated_at
    return Deployment(
        id=raw.id,
        project_id=raw.site_id,
        service=Service.NETLIFY,
        status=status,
        url=raw.ssl_url or raw.url or raw.deploy_url,
        admin_url=raw.admin_url,
        created_at=raw.created_at,
        ready_at=ready_at,
        branch=raw.branch,
        commit_message=raw.title,
        commit_sha=raw.commit_ref,
        error_message=raw.error_message,
    )


def normalize_projects(raw_payload: Any, account_id: uuid.UUID) -> list[Project]:
    """Map a ``GET /sites`` payload to projects without deployments."""
    try:
        sites = _sites.validate_python(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Netlify sites: {exc}") from exc
    return [
        Project(
            id=site.id,
            account_id=account_id,
            service=Service.NETLIFY,
            name=site.name,
            url=site.ssl_url or site.url,
            admin_url=site.admin_url,
            framework=None,
        )
        for site in sites
    ]


def normalize_deployments(raw_payload: Any) -> list[Deployment]:
    """Map a ``GET /sites/{id}/deploys`` payload to deployments."""
    try:
        deploys = _deploys.validate_python(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Netlify deploys: {exc}") from exc
    return [_to_deployment(d) for d in deploys]


def normalize_deployment(raw_payload: Any) -> Deployment:
    """Map a ``GET /deploys/{id}`` payload to a deployment."""
    try:
        raw = NetlifyDeploy.model_validate(raw_payload)
    except ValidationError as exc:
        raise DecodingError(f"Netlify deploy: {exc}") from exc
    return _to_deployment(raw)
