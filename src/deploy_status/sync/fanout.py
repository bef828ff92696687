"""Bounded concurrent map that keeps per-item failures."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from deploy_status.client.errors import DeployStatusError

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class FetchResult(Generic[K, V]):
    """Outcome of one fetch: a value or the error that replaced it."""

    key: K
    value: V | None = None
    error: DeployStatusError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def gather_results(
    keys: Iterable[K],
    fetch: Callable[[K], Awaitable[V]],
    semaphore: asyncio.Semaphore,
) -> list[FetchResult[K, V]]:
    """Run ``fetch(key)`` for every key concurrently, at most as many at once
    as *semaphore* allows.

    :class:`DeployStatusError` is captured into the item's result. Anything
    else is a bug and propagates.
    """

    async def run(key: K) -> FetchResult[K, V]:
        async with semaphore:
            try:
                return FetchResult(key, value=await fetch(key))
            except DeployStatusError as exc:
                return FetchResult(key, error=exc)

    return list(await asyncio.gather(*(run(key) for key in keys)))
