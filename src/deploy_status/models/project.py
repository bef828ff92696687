"""Project data model."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from deploy_status.models.account import Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.status import DeploymentStatus

DISTANT_PAST = datetime.min.replace(tzinfo=timezone.utc)


class Project(BaseModel):
    """A project (Vercel) or site (Netlify) with its recent deployments.

    ``deployments`` is ordered newest first.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    account_id: uuid.UUID
    service: Service
    name: str
    url: str | None = None
    admin_url: str
    framework: str | None = None
    deployments: tuple[Deployment, ...] = Field(default_factory=tuple)

    @property
    def key(self) -> tuple[Service, uuid.UUID, str]:
        """Identity of the project across providers and accounts."""
        return (self.service, self.account_id, self.id)

    @property
    def latest_deployment(self) -> Deployment | None:
        return self.deployments[0] if self.deployments else None

    @property
    def latest_status(self) -> DeploymentStatus | None:
        latest = self.latest_deployment
        return latest.status if latest else None

    @property
    def latest_activity(self) -> datetime:
        """Creation time of the latest deployment, used for ordering."""
        latest = self.latest_deployment
        return latest.created_at if latest else DISTANT_PAST

    @property
    def is_building(self) -> bool:
        status = self.latest_status
        return status is not None and status.is_active

    def with_deployments(
        self, deployments: list[Deployment], *, limit: int | None = None,
    ) -> Project:
        """Return a copy holding *deployments* sorted newest first."""
        ordered = sorted(deployments, key=lambda d: d.created_at, reverse=True)
        if limit is not None:
            ordered = ordered[:limit]
        return self.model_copy(update={"deployments": tuple(ordered)})
