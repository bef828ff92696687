"""Notification dispatchers for deployment events.

All dispatchers are fire-and-forget: delivery failures are logged and never
raised to the polling loop.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
import threading
from collections.abc import Sequence

import structlog
from rich.console import Console
from rich.markup import escape

from deploy_status.config.models import NotificationPreferences
from deploy_status.sync.changes import DeploymentEvent, EventKind
from deploy_status.sync.scheduler import NotificationDispatcher

logger = structlog.get_logger(__name__)

_STYLES = {
    EventKind.BUILD_STARTED: "yellow",
    EventKind.BUILD_SUCCEEDED: "green",
    EventKind.BUILD_FAILED: "bold red",
}


def is_wanted(event: DeploymentEvent, prefs: NotificationPreferences) -> bool:
    """Whether the user asked to be told about events of this kind."""
    if not prefs.enabled:
        return False
    return {
        EventKind.BUILD_STARTED: prefs.on_build_start,
        EventKind.BUILD_SUCCEEDED: prefs.on_build_success,
        EventKind.BUILD_FAILED: prefs.on_build_failure,
    }[event.kind]


class ConsoleNotifier:
    """Prints events to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def deliver(self, event: DeploymentEvent) -> None:
        style = _STYLES[event.kind]
        service = event.project.service.display_name
        body = escape(event.body).replace("\n", "\n    ")
        self.console.print(f"[{style}]{event.title}[/] [dim]{service}[/] {body}")
        self.console.print(f"    [dim]{escape(event.target_url)}[/]")


class DesktopNotifier:
    """Shows events as desktop notifications via ``notify-send`` or ``osascript``.

    Runs the command on a daemon thread so delivery never blocks polling.
    """

    def __init__(self) -> None:
        self._command = self._detect()

    @staticmethod
    def _detect() -> str | None:
        if sys.platform == "darwin":
            return shutil.which("osascript")
        return shutil.which("notify-send")

    @property
    def available(self) -> bool:
        return self._command is not None

    def build_command(self, event: DeploymentEvent) -> list[str] | None:
        if self._command is None:
            return None
        if sys.platform == "darwin":
            script = (
                f"display notification {_applescript_string(event.body)}"
                f" with title {_applescript_string(event.title)}"
            )
            return [self._command, "-e", script]
        return [self._command, "--app-name=deploy-status", event.title, event.body]

    def deliver(self, event: DeploymentEvent) -> None:
        command = self.build_command(event)
        if command is None:
            logger.debug("no desktop notifier available", event=event.identifier)
            return
        threading.Thread(
            target=self._run, args=(command, event.identifier), daemon=True,
            name="DesktopNotify",
        ).start()

    @staticmethod
    def _run(command: list[str], identifier: str) -> None:
        try:
            subprocess.run(
                command,
                timeout=15,
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError):
            logger.debug("desktop notification failed", event=identifier, exc_info=True)


class NotificationRouter:
    """Filters events by preference and fans them out to several dispatchers."""

    def __init__(
        self,
        dispatchers: Sequence[NotificationDispatcher],
        preferences: NotificationPreferences | None = None,
    ) -> None:
        self.dispatchers = list(dispatchers)
        self.preferences = preferences or NotificationPreferences()

    def deliver(self, event: DeploymentEvent) -> None:
        if not is_wanted(event, self.preferences):
            logger.debug("notification suppressed", event=event.identifier)
            return
        for dispatcher in self.dispatchers:
            try:
                dispatcher.deliver(event)
            except Exception:
                logger.warning(
                    "notification delivery failed",
                    dispatcher=type(dispatcher).__name__,
                    event=event.identifier,
                    exc_info=True,
                )


def _applescript_string(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
