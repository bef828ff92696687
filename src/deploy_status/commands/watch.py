"""Watch command: keep polling and announce status changes."""

from __future__ import annotations

import asyncio
import signal
from typing import Annotated

import structlog
import typer
from rich.console import Console

from deploy_status.client.errors import error_handler
from deploy_status.commands._common import get_manager, make_engine
from deploy_status.config.manager import ConfigManager
from deploy_status.notify import ConsoleNotifier, DesktopNotifier, NotificationRouter
from deploy_status.sync.scheduler import NotificationDispatcher, PollingScheduler

console = Console()
logger = structlog.get_logger(__name__)


async def _watch(mgr: ConfigManager, router: NotificationRouter) -> None:
    async with make_engine(mgr) as engine:
        scheduler = PollingScheduler(engine, dispatcher=router)
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, scheduler.stop)
            except (NotImplementedError, RuntimeError):
                # Not supported on Windows event loops
                pass
        scheduler.start(immediate=True)
        await scheduler.join()
        logger.info("watch finished", polls=scheduler.poll_count)


@error_handler
def watch(
    desktop: Annotated[
        bool, typer.Option("--desktop/--no-desktop", help="Also show desktop notifications"),
    ] = False,
) -> None:
    """Poll continuously, faster while builds run, and print status changes."""
    mgr = get_manager()
    if not mgr.load_accounts():
        console.print(
            "[yellow]No accounts configured. Run 'deploy-status account add' to get started.[/]"
        )
        return
    dispatchers: list[NotificationDispatcher] = [ConsoleNotifier(console)]
    if desktop:
        notifier = DesktopNotifier()
        if notifier.available:
            dispatchers.append(notifier)
        else:
            console.print("[yellow]No desktop notification command found; console only.[/]")
    router = NotificationRouter(dispatchers, mgr.settings.notifications)
    console.print("Watching deployments. Press Ctrl+C to stop.")
    try:
        asyncio.run(_watch(mgr, router))
    except KeyboardInterrupt:
        pass
    console.print("Stopped.")
