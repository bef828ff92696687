"""Vercel REST API client."""

from __future__ import annotations

from typing import Any

from deploy_status.client.base import ProviderClient
from deploy_status.config.constants import (
    DEFAULT_DEPLOYMENTS_PER_PROJECT,
    VERCEL_API_BASE,
    VERCEL_PROJECT_PAGE_SIZE,
)
from deploy_status.models.account import Service


class VercelClient(ProviderClient):
    """Client for ``api.vercel.com``."""

    service = Service.VERCEL
    default_base_url = VERCEL_API_BASE

    async def validate_credential(self, token: str) -> bool:
        return await self.check_token("/v2/user", token)

    async def list_projects(self, token: str, account_id: Any = None) -> Any:
        return await self.get_json(
            "/v9/projects", token, params={"limit": VERCEL_PROJECT_PAGE_SIZE},
        )

    async def list_deployments(
        self,
        token: str,
        project_id: str,
        limit: int = DEFAULT_DEPLOYMENTS_PER_PROJECT,
    ) -> Any:
        return await self.get_json(
            "/v6/deployments", token,
            params={"projectId": project_id, "limit": limit},
        )

    async def get_deployment(self, token: str, deployment_id: str) -> Any:
        return await self.get_json(f"/v13/deployments/{deployment_id}", token)
