"""Async HTTP client shared by the provider APIs."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx
import structlog

from deploy_status.client.auth import BearerTokenAuth
from deploy_status.client.errors import (
    DecodingError,
    InvalidCredentialError,
    ProviderConnectionError,
    RateLimitedError,
    ServerError,
)
from deploy_status.config.constants import DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT
from deploy_status.models.account import Service

logger = structlog.get_logger(__name__)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a numeric ``Retry-After`` header; HTTP dates are ignored."""
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _error_detail(response: httpx.Response) -> str:
    # Vercel nests the message under "error", Netlify returns it at top level
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(body.get("message") or error or "")


class ProviderClient(ABC):
    """Async HTTP client for one provider's REST API.

    Holds no per-account state: the token is passed with every call, so a
    single client can serve any number of accounts concurrently.
    """

    service: ClassVar[Service]
    default_base_url: ClassVar[str]

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=DEFAULT_MAX_RETRIES),
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ProviderClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        if status in (401, 403):
            raise InvalidCredentialError()
        if status == 429:
            raise RateLimitedError(parse_retry_after(response.headers.get("Retry-After")))
        raise ServerError(status, _error_detail(response))

    async def _send(self, method: str, path: str, token: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(
                method, path, auth=BearerTokenAuth(token), **kwargs,
            )
        except httpx.TimeoutException as exc:
            raise ProviderConnectionError(
                f"Request to {self.base_url} timed out: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ProviderConnectionError(
                f"Invalid URL for {self.base_url}: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderConnectionError(
                f"Network error talking to {self.base_url}: {exc}"
            ) from exc
        except httpx.DecodingError as exc:
            raise DecodingError(f"Undecodable response body: {exc}") from exc
        except httpx.RequestError as exc:
            raise ProviderConnectionError(
                f"Request to {self.base_url} failed: {exc}"
            ) from exc

    async def request(self, method: str, path: str, token: str, **kwargs: Any) -> httpx.Response:
        response = await self._send(method, path, token, **kwargs)
        logger.debug(
            "provider request",
            service=self.service.value,
            method=method,
            path=path,
            status=response.status_code,
        )
        return self._handle_response(response)

    async def get_json(self, path: str, token: str, **kwargs: Any) -> Any:
        resp = await self.request("GET", path, token, **kwargs)
        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodingError(str(exc)) from exc

    async def check_token(self, path: str, token: str) -> bool:
        """Return whether *token* is accepted by the endpoint at *path*."""
        response = await self._send("GET", path, token)
        if response.status_code in (401, 403):
            return False
        self._handle_response(response)
        return response.status_code == 200

    # Provider API

    @abstractmethod
    async def validate_credential(self, token: str) -> bool: ...

    @abstractmethod
    async def list_projects(self, token: str, account_id: Any = None) -> Any: ...

    @abstractmethod
    async def list_deployments(self, token: str, project_id: str, limit: int) -> Any: ...

    @abstractmethod
    async def get_deployment(self, token: str, deployment_id: str) -> Any: ...
