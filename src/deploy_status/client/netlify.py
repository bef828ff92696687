"""Netlify REST API client."""

from __future__ import annotations

from typing import Any

from deploy_status.client.base import ProviderClient
from deploy_status.config.constants import (
    DEFAULT_DEPLOYMENTS_PER_PROJECT,
    NETLIFY_API_BASE,
)
from deploy_status.models.account import Service


class NetlifyClient(ProviderClient):
    """Client for ``api.netlify.com``. Netlify calls projects "sites"."""

    service = Service.NETLIFY
    default_base_url = NETLIFY_API_BASE

    async def validate_credential(self, token: str) -> bool:
        return await self.check_token("/user", token)

    async def list_projects(self, token: str, account_id: Any = None) -> Any:
        return await self.get_json("/sites", token)

    async def list_deployments(
        self,
        token: str,
        project_id: str,
        limit: int = DEFAULT_DEPLOYMENTS_PER_PROJECT,
    ) -> Any:
        return await self.get_json(
            f"/sites/{project_id}/deploys", token, params={"per_page": limit},
        )

    async def get_deployment(self, token: str, deployment_id: str) -> Any:
        return await self.get_json(f"/deploys/{deployment_id}", token)
