"""Delivery of deployment events to the console and the desktop."""

from deploy_status.notify.dispatchers import (
    ConsoleNotifier,
    DesktopNotifier,
    NotificationRouter,
    is_wanted,
)

__all__ = ["ConsoleNotifier", "DesktopNotifier", "NotificationRouter", "is_wanted"]
