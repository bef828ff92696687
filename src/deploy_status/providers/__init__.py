"""Adapters from provider payloads to the domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable

from deploy_status.models.account import Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.providers import netlify, vercel


@dataclass(frozen=True)
class Adapter:
    """The normalization functions of one provider."""

    normalize_projects: Callable[[Any, uuid.UUID], list[Project]]
    normalize_deployments: Callable[[Any], list[Deployment]]
    normalize_deployment: Callable[[Any], Deployment]


ADAPTERS: dict[Service, Adapter] = {
    Service.VERCEL: Adapter(
        vercel.normalize_projects,
        vercel.normalize_deployments,
        vercel.normalize_deployment,
    ),
    Service.NETLIFY: Adapter(
        netlify.normalize_projects,
        netlify.normalize_deployments,
        netlify.normalize_deployment,
    ),
}

__all__ = ["ADAPTERS", "Adapter"]
