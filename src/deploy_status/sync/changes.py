"""Turns status transitions between refreshes into events."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

import structlog

from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus

logger = structlog.get_logger(__name__)


class EventKind(str, Enum):
    BUILD_STARTED = "build-started"
    BUILD_SUCCEEDED = "build-succeeded"
    BUILD_FAILED = "build-failed"


_TITLES = {
    EventKind.BUILD_STARTED: "Build Started",
    EventKind.BUILD_SUCCEEDED: "Deploy Succeeded",
    EventKind.BUILD_FAILED: "Deploy Failed",
}


@dataclass(frozen=True)
class DeploymentEvent:
    """A notification-worthy status transition of one project."""

    kind: EventKind
    project: Project
    deployment: Deployment

    @property
    def identifier(self) -> str:
        return f"{self.kind.value}-{self.deployment.id}"

    @property
    def title(self) -> str:
        return _TITLES[self.kind]

    @property
    def body(self) -> str:
        body = self.project.name
        if self.kind is EventKind.BUILD_STARTED:
            if self.deployment.branch:
                body += f" ({self.deployment.branch})"
        elif self.kind is EventKind.BUILD_SUCCEEDED:
            duration = self.deployment.formatted_build_duration
            if duration:
                body += f" ({duration})"
        elif self.deployment.error_message:
            body += f"\n{self.deployment.error_message}"
        return body

    @property
    def target_url(self) -> str:
        """Where a click on the notification should lead."""
        return self.deployment.url or self.deployment.admin_url


def transition_event(
    previous: DeploymentStatus, current: DeploymentStatus,
) -> EventKind | None:
    """Event for a status change of an already known project, if any."""
    if current is DeploymentStatus.BUILDING:
        return EventKind.BUILD_STARTED if previous is DeploymentStatus.QUEUED else None
    if current is DeploymentStatus.READY:
        return EventKind.BUILD_SUCCEEDED
    if current is DeploymentStatus.ERROR:
        return EventKind.BUILD_FAILED
    return None


class ChangeDetector:
    """Compares each refresh's latest statuses with the previous refresh.

    ``last_change_at`` (a monotonic timestamp) is updated whenever a known
    project changes status; the scheduler uses it to pick its interval.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._previous: dict[tuple, DeploymentStatus] = {}
        self.last_change_at: float | None = None

    def prime(self, projects: Iterable[Project]) -> None:
        """Record the current statuses without emitting events."""
        self._previous = _statuses(projects)

    def detect(self, projects: Iterable[Project]) -> list[DeploymentEvent]:
        projects = list(projects)
        events: list[DeploymentEvent] = []
        for project in projects:
            current = project.latest_status
            deployment = project.latest_deployment
            if current is None or deployment is None:
                continue
            previous = self._previous.get(project.key)
            if previous is None:
                # First sighting: only a running build is worth announcing
                if current is DeploymentStatus.BUILDING:
                    events.append(DeploymentEvent(EventKind.BUILD_STARTED, project, deployment))
                continue
            if previous is current:
                continue
            self.last_change_at = self._clock()
            logger.info(
                "status changed",
                project=project.name,
                service=project.service.value,
                previous=previous.value,
                current=current.value,
            )
            kind = transition_event(previous, current)
            if kind is not None:
                events.append(DeploymentEvent(kind, project, deployment))
        self._previous = _statuses(projects)
        return events


def _statuses(projects: Iterable[Project]) -> dict[tuple, DeploymentStatus]:
    return {
        p.key: p.latest_status for p in projects if p.latest_status is not None
    }
