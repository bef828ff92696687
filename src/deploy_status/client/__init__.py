"""HTTP clients for the Vercel and Netlify APIs."""

from __future__ import annotations

from deploy_status.client.base import ProviderClient
from deploy_status.client.netlify import NetlifyClient
from deploy_status.client.vercel import VercelClient
from deploy_status.models.account import Service

CLIENTS: dict[Service, type[ProviderClient]] = {
    Service.VERCEL: VercelClient,
    Service.NETLIFY: NetlifyClient,
}


def make_clients(*, timeout: float | None = None) -> dict[Service, ProviderClient]:
    """Create one client per supported service."""
    kwargs = {"timeout": timeout} if timeout is not None else {}
    return {service: cls(**kwargs) for service, cls in CLIENTS.items()}


__all__ = ["CLIENTS", "NetlifyClient", "ProviderClient", "VercelClient", "make_clients"]
