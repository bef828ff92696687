"""Pydantic domain models for accounts, projects and deployments."""

from deploy_status.models.account import Account, Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus, OverallStatus

__all__ = [
    "Account",
    "Deployment",
    "DeploymentStatus",
    "OverallStatus",
    "Project",
    "Service",
]
