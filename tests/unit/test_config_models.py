"""Tests for configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from deploy_status.config.models import AppConfig, NotificationPreferences, Settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.active_interval == 10
        assert s.recent_interval == 30
        assert s.idle_interval == 300
        assert s.recent_change_window == 180
        assert s.active_window == 3600
        assert s.deployments_per_project == 5
        assert s.log_level == "WARNING"
        assert s.log_format == "console"

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(active_interval=0)

    def test_deployments_per_project_bounds(self):
        with pytest.raises(ValidationError):
            Settings(deployments_per_project=0)
        with pytest.raises(ValidationError):
            Settings(deployments_per_project=101)

    def test_log_level(self):
        assert Settings(log_level="info").log_level == "INFO"
        with pytest.raises(ValidationError):
            Settings(log_level="loud")

    def test_log_format(self):
        with pytest.raises(ValidationError):
            Settings(log_format="xml")


class TestNotificationPreferences:
    def test_all_enabled_by_default(self):
        prefs = NotificationPreferences()
        assert prefs.enabled
        assert prefs.on_build_start and prefs.on_build_success and prefs.on_build_failure


class TestAppConfig:
    def test_empty(self):
        cfg = AppConfig()
        assert cfg.accounts == []
        assert cfg.settings == Settings()
