"""Synchronization engine: owns the current snapshot of accounts and projects.

The snapshot is an immutable value. Every update builds a new one and swaps
it in with a single assignment, so readers never see a half-applied account
refresh. Writers for the same account are serialized by a per-account lock;
different accounts own disjoint projects and may interleave freely.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import structlog

from deploy_status.client.errors import (
    ConfigurationError,
    DeployStatusError,
    InvalidCredentialError,
)
from deploy_status.config.credentials import CredentialStore
from deploy_status.config.models import Settings
from deploy_status.models.account import Account, Service
from deploy_status.models.deployment import Deployment
from deploy_status.models.project import Project
from deploy_status.models.status import DeploymentStatus, OverallStatus
from deploy_status.providers import ADAPTERS, Adapter
from deploy_status.sync.fanout import gather_results

logger = structlog.get_logger(__name__)

ProjectKey = tuple[Service, uuid.UUID, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProviderAPI(Protocol):
    async def validate_credential(self, token: str) -> bool: ...

    async def list_projects(self, token: str, account_id: Any = None) -> Any: ...

    async def list_deployments(self, token: str, project_id: str, limit: int) -> Any: ...

    async def get_deployment(self, token: str, deployment_id: str) -> Any: ...


class AccountStore(Protocol):
    def load_accounts(self) -> list[Account]: ...

    def save_accounts(self, accounts: list[Account]) -> None: ...


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of the engine state."""

    accounts: tuple[Account, ...] = ()
    projects: tuple[Project, ...] = ()
    last_refreshed_at: datetime | None = None
    last_error: DeployStatusError | None = None


def select_active_projects(
    projects: tuple[Project, ...] | list[Project],
    now: datetime,
    window: timedelta,
) -> list[Project]:
    """Projects that are building or deployed within *window* of *now*.

    Building and queued projects come first, then the most recently created.
    """
    cutoff = now - window
    active = [
        p for p in projects
        if p.latest_deployment is not None
        and (p.is_building or p.latest_deployment.created_at > cutoff)
    ]
    return sorted(active, key=lambda p: (not p.is_building, -p.latest_activity.timestamp()))


def derive_overall_status(
    accounts: tuple[Account, ...] | list[Account],
    active_projects: list[Project],
) -> OverallStatus:
    # Only the active window counts, so an old failure does not keep the
    # aggregate red forever.
    if not accounts:
        return OverallStatus.IDLE
    statuses = [p.latest_status for p in active_projects]
    if DeploymentStatus.ERROR in statuses:
        return OverallStatus.ERROR
    if any(s is not None and s.is_active for s in statuses):
        return OverallStatus.BUILDING
    if not active_projects:
        return OverallStatus.IDLE
    return OverallStatus.READY


class SyncEngine:
    """Fetches, normalizes and merges deployment state for all accounts."""

    def __init__(
        self,
        clients: Mapping[Service, ProviderAPI],
        credentials: CredentialStore,
        account_store: AccountStore | None = None,
        *,
        settings: Settings | None = None,
        adapters: Mapping[Service, Adapter] = ADAPTERS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.settings = settings or Settings()
        self._clients = clients
        self._credentials = credentials
        self._account_store = account_store
        self._adapters = adapters
        self._clock = clock
        self._requests = asyncio.Semaphore(self.settings.max_concurrency)
        self._locks: dict[uuid.UUID, asyncio.Lock] = {}
        self.account_errors: dict[uuid.UUID, DeployStatusError] = {}
        self.deployment_errors: dict[ProjectKey, DeployStatusError] = {}
        accounts = account_store.load_accounts() if account_store else []
        self._snapshot = Snapshot(accounts=tuple(accounts))

    async def aclose(self) -> None:
        for client in self._clients.values():
            close = getattr(client, "aclose", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> SyncEngine:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    # State access

    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._snapshot.accounts

    @property
    def projects(self) -> tuple[Project, ...]:
        return self._snapshot.projects

    @property
    def last_error(self) -> DeployStatusError | None:
        return self._snapshot.last_error

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._snapshot.last_refreshed_at

    def get_account(self, account_id: uuid.UUID) -> Account | None:
        return next((a for a in self.accounts if a.id == account_id), None)

    def find_project(self, ref: str) -> Project | None:
        """Find a project by id or name."""
        for project in self.projects:
            if ref in (project.id, project.name):
                return project
        return None

    def projects_for(self, service: Service) -> list[Project]:
        return [p for p in self.projects if p.service is service]

    # Derived views

    @property
    def has_active_builds(self) -> bool:
        return any(p.is_building for p in self.projects)

    def active_projects(self, now: datetime | None = None) -> list[Project]:
        return select_active_projects(
            self.projects,
            now or self._clock(),
            timedelta(seconds=self.settings.active_window),
        )

    def overall_status(self, now: datetime | None = None) -> OverallStatus:
        return derive_overall_status(self.accounts, self.active_projects(now))

    # Account management

    async def add_account(self, account: Account, credential: str) -> list[Project]:
        """Validate *credential*, store it, register *account* and fetch its projects."""
        if self.get_account(account.id) is not None:
            raise ConfigurationError(f"Account {account.id} already exists")
        client = self._clients[account.service]
        if not await client.validate_credential(credential):
            raise InvalidCredentialError()
        self._credentials.save(credential, account.credential_key)
        self._snapshot = replace(self._snapshot, accounts=self.accounts + (account,))
        self._persist_accounts()
        logger.info(
            "account added", account_id=str(account.id), service=account.service.value,
        )
        return await self.refresh_account(account.id)

    def remove_account(self, account_id: uuid.UUID) -> None:
        """Forget an account, its projects and its credential. Unknown ids are ignored."""
        account = self.get_account(account_id)
        if account is None:
            return
        self._credentials.delete(account.credential_key)
        self._snapshot = replace(
            self._snapshot,
            accounts=tuple(a for a in self.accounts if a.id != account_id),
            projects=tuple(p for p in self.projects if p.account_id != account_id),
        )
        self.account_errors.pop(account_id, None)
        self._drop_deployment_errors(account_id)
        self._locks.pop(account_id, None)
        self._persist_accounts()
        logger.info("account removed", account_id=str(account_id))

    def set_account_enabled(self, account_id: uuid.UUID, enabled: bool) -> Account:
        account = self.get_account(account_id)
        if account is None:
            raise ConfigurationError(f"Unknown account: {account_id}")
        updated = account.model_copy(update={"enabled": enabled})
        projects = self.projects
        if not enabled:
            projects = tuple(p for p in projects if p.account_id != account_id)
        self._snapshot = replace(
            self._snapshot,
            accounts=tuple(updated if a.id == account_id else a for a in self.accounts),
            projects=projects,
        )
        self._persist_accounts()
        return updated

    def _persist_accounts(self) -> None:
        if self._account_store is not None:
            self._account_store.save_accounts(list(self.accounts))

    # Refresh

    async def refresh_all(self) -> Snapshot:
        """Refresh every enabled account concurrently.

        A failing account keeps its previous projects; its error is recorded
        and does not affect the others.
        """
        self._snapshot = replace(self._snapshot, last_error=None)
        enabled = [a for a in self.accounts if a.enabled]
        await asyncio.gather(*(self.refresh_account(a.id) for a in enabled))
        self._snapshot = replace(self._snapshot, last_refreshed_at=self._clock())
        logger.debug(
            "refresh complete",
            accounts=len(enabled),
            projects=len(self.projects),
            failed=len(self.account_errors),
        )
        return self._snapshot

    async def refresh_account(self, account_id: uuid.UUID) -> list[Project]:
        """Fetch one account's projects and deployments and swap them into the snapshot.

        Returns the fetched projects, or an empty list when the refresh failed.
        """
        account = self.get_account(account_id)
        if account is None:
            return []
        lock = self._locks.setdefault(account_id, asyncio.Lock())
        async with lock:
            try:
                token = self._credentials.load(account.credential_key)
                if token is None:
                    raise ConfigurationError(f"No token stored for account '{account.name}'")
                projects = await self._fetch_account(account, token)
            except DeployStatusError as exc:
                self._record_error(account, exc)
                return []
            current = self.get_account(account_id)
            if current is None or not current.enabled:
                # Removed or disabled while the fetch was in flight
                return []
            self._apply(account_id, projects)
        self.account_errors.pop(account_id, None)
        return projects

    async def _fetch_account(self, account: Account, token: str) -> list[Project]:
        client = self._clients[account.service]
        adapter = self._adapters[account.service]
        limit = self.settings.deployments_per_project

        async with self._requests:
            raw = await client.list_projects(token, account.id)
        projects = _unique_by_id(adapter.normalize_projects(raw, account.id))

        async def fetch_deployments(project_id: str) -> list[Deployment]:
            payload = await client.list_deployments(token, project_id, limit)
            return adapter.normalize_deployments(payload)

        results = await gather_results(
            [p.id for p in projects], fetch_deployments, self._requests,
        )
        by_id = {r.key: r for r in results}
        previous = {p.id: p for p in self.projects if p.account_id == account.id}

        merged: list[Project] = []
        for project in projects:
            result = by_id[project.id]
            if result.ok and result.value is not None:
                deployments = result.value
                self.deployment_errors.pop(project.key, None)
            else:
                # Keep the last known deployments for this project
                old = previous.get(project.id)
                deployments = list(old.deployments) if old else []
                if result.error is not None:
                    self.deployment_errors[project.key] = result.error
                    logger.warning(
                        "deployment fetch failed",
                        account_id=str(account.id),
                        project_id=project.id,
                        error=str(result.error),
                    )
            merged.append(project.with_deployments(deployments, limit=limit))
        return merged

    def _apply(self, account_id: uuid.UUID, projects: list[Project]) -> None:
        others = [p for p in self.projects if p.account_id != account_id]
        combined = sorted(others + projects, key=lambda p: p.latest_activity, reverse=True)
        self._snapshot = replace(self._snapshot, projects=tuple(combined))

    def _record_error(self, account: Account, exc: DeployStatusError) -> None:
        logger.warning(
            "account refresh failed",
            account_id=str(account.id),
            service=account.service.value,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        self.account_errors[account.id] = exc
        self._snapshot = replace(self._snapshot, last_error=exc)

    def _drop_deployment_errors(self, account_id: uuid.UUID) -> None:
        for key in [k for k in self.deployment_errors if k[1] == account_id]:
            del self.deployment_errors[key]


def _unique_by_id(projects: list[Project]) -> list[Project]:
    seen: set[str] = set()
    unique = []
    for project in projects:
        if project.id not in seen:
            seen.add(project.id)
            unique.append(project)
    return unique
