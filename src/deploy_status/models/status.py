"""Deployment and aggregate status enumerations."""

from __future__ import annotations

from enum import Enum


class DeploymentStatus(str, Enum):
    """Normalized status of a single deployment."""

    QUEUED = "queued"
    BUILDING = "building"
    READY = "ready"
    ERROR = "error"
    CANCELED = "canceled"
    # Monorepo deploy with no changes
    SKIPPED = "skipped"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_terminal(self) -> bool:
        """Whether the deployment has finished, successfully or not."""
        return not self.is_active

    @property
    def is_active(self) -> bool:
        """Whether the deployment is still waiting or building."""
        return self in (DeploymentStatus.QUEUED, DeploymentStatus.BUILDING)


_DISPLAY_NAMES = {
    DeploymentStatus.QUEUED: "Queued",
    DeploymentStatus.BUILDING: "Building",
    DeploymentStatus.READY: "Ready",
    DeploymentStatus.ERROR: "Failed",
    DeploymentStatus.CANCELED: "Canceled",
    DeploymentStatus.SKIPPED: "Skipped",
}


class OverallStatus(str, Enum):
    """Aggregate status across the active projects."""

    IDLE = "idle"
    READY = "ready"
    BUILDING = "building"
    ERROR = "error"

    @property
    def color(self) -> str:
        return {
            OverallStatus.IDLE: "grey50",
            OverallStatus.READY: "green",
            OverallStatus.BUILDING: "yellow",
            OverallStatus.ERROR: "red",
        }[self]
