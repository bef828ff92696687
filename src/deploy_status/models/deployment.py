"""Deployment data model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from deploy_status.models.account import Service
from deploy_status.models.status import DeploymentStatus


class Deployment(BaseModel):
    """A single deployment of a project, normalized across providers."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    service: Service
    status: DeploymentStatus
    url: str | None = None
    admin_url: str
    created_at: datetime
    ready_at: datetime | None = None
    branch: str | None = None
    commit_message: str | None = None
    commit_sha: str | None = None
    error_message: str | None = None

    @property
    def build_duration(self) -> float | None:
        """Build duration in seconds."""
        if self.ready_at is None:
            return None
        return (self.ready_at - self.created_at).total_seconds()

    @property
    def formatted_build_duration(self) -> str | None:
        """Build duration for display, e.g. ``2m 30s``."""
        duration = self.build_duration
        if duration is None:
            return None
        minutes, seconds = divmod(int(duration), 60)
        if minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    @property
    def short_commit_sha(self) -> str | None:
        if self.commit_sha is None:
            return None
        return self.commit_sha[:7]
