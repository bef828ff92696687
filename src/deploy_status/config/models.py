"""Pydantic models for application configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from deploy_status.config.constants import (
    DEFAULT_ACTIVE_INTERVAL,
    DEFAULT_ACTIVE_WINDOW,
    DEFAULT_DEPLOYMENTS_PER_PROJECT,
    DEFAULT_IDLE_INTERVAL,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_RECENT_CHANGE_WINDOW,
    DEFAULT_RECENT_INTERVAL,
    DEFAULT_TIMEOUT,
)
from deploy_status.models.account import Account


class NotificationPreferences(BaseModel):
    """Which deployment events are delivered as notifications."""

    enabled: bool = True
    on_build_start: bool = True
    on_build_success: bool = True
    on_build_failure: bool = True


class Settings(BaseModel):
    """Polling, fetching and logging settings."""

    active_interval: float = Field(
        default=DEFAULT_ACTIVE_INTERVAL, gt=0,
        description="Poll interval while builds are running (seconds)",
    )
    recent_interval: float = Field(
        default=DEFAULT_RECENT_INTERVAL, gt=0,
        description="Poll interval shortly after a status change (seconds)",
    )
    idle_interval: float = Field(
        default=DEFAULT_IDLE_INTERVAL, gt=0,
        description="Poll interval with no activity (seconds)",
    )
    recent_change_window: float = Field(
        default=DEFAULT_RECENT_CHANGE_WINDOW, gt=0,
        description="How long a status change counts as recent (seconds)",
    )
    active_window: float = Field(
        default=DEFAULT_ACTIVE_WINDOW, gt=0,
        description="How long a finished deployment stays in the active view (seconds)",
    )
    deployments_per_project: int = Field(
        default=DEFAULT_DEPLOYMENTS_PER_PROJECT, ge=1, le=100,
    )
    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1, le=64)
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"
    notifications: NotificationPreferences = Field(
        default_factory=NotificationPreferences,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseModel):
    """Root configuration model."""

    settings: Settings = Field(default_factory=Settings)
    accounts: list[Account] = Field(default_factory=list)
