"""Tests for wire status resolution and the skipped-build heuristic."""

from __future__ import annotations

import pytest

from deploy_status.models.status import DeploymentStatus
from deploy_status.providers import netlify, vercel
from deploy_status.providers.status import classify_error, resolve_status


class TestClassifyError:
    @pytest.mark.parametrize(
        "message",
        [
            "Build skipped: no changes detected",
            "Canceled by a newer deployment",
            "Deploy IGNORED by ignore command",
            "Project not in scope for this commit",
        ],
    )
    def test_skip_keywords(self, message):
        assert classify_error(message, build_started=True) is DeploymentStatus.SKIPPED

    def test_real_failure_message(self):
        assert classify_error("Module not found", build_started=True) is DeploymentStatus.ERROR
        assert classify_error("Module not found", build_started=False) is DeploymentStatus.ERROR

    def test_no_message_never_started(self):
        assert classify_error(None, build_started=False) is DeploymentStatus.SKIPPED

    def test_no_message_started(self):
        assert classify_error(None, build_started=True) is DeploymentStatus.ERROR

    @pytest.mark.parametrize("message", ["", "   "])
    def test_blank_message_is_a_failure(self, message):
        assert classify_error(message, build_started=False) is DeploymentStatus.ERROR


class TestResolveStatus:
    def test_case_insensitive(self):
        assert resolve_status(
            "READY", vercel.STATUS_TABLE, error_message=None, build_started=True,
        ) is DeploymentStatus.READY

    def test_unknown_state_is_queued(self):
        assert resolve_status(
            "HIBERNATING", vercel.STATUS_TABLE, error_message=None, build_started=False,
        ) is DeploymentStatus.QUEUED

    @pytest.mark.parametrize(
        "state", ["new", "pending", "uploading", "uploaded", "preparing", "prepared", "enqueued"],
    )
    def test_netlify_queued_states(self, state):
        assert resolve_status(
            state, netlify.STATUS_TABLE, error_message=None, build_started=False,
        ) is DeploymentStatus.QUEUED

    def test_netlify_processing_is_building(self):
        assert resolve_status(
            "processing", netlify.STATUS_TABLE, error_message=None, build_started=True,
        ) is DeploymentStatus.BUILDING

    def test_error_goes_through_heuristic(self):
        assert resolve_status(
            "ERROR", vercel.STATUS_TABLE, error_message=None, build_started=False,
        ) is DeploymentStatus.SKIPPED
