"""Tests for Netlify payload normalization."""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest

from deploy_status.client.errors import DecodingError
from deploy_status.models.account import Service
from deploy_status.models.status import DeploymentStatus
from deploy_status.providers.netlify import (
    normalize_deployment,
    normalize_deployments,
    normalize_projects,
)


class TestNormalizeProjects:
    def test_sites(self, netlify_sites):
        account_id = uuid.uuid4()
        (site,) = normalize_projects(netlify_sites, account_id)
        assert site.id == "site-blog"
        assert site.service is Service.NETLIFY
        assert site.url == "https://blog.netlify.app"
        assert site.admin_url == "https://app.netlify.com/sites/blog"
        assert site.framework is None

    def test_not_a_list(self):
        with pytest.raises(DecodingError):
            normalize_projects({"sites": []}, uuid.uuid4())


class TestNormalizeDeployments:
    def test_ready_deploy(self, netlify_deploy, now):
        created = now - timedelta(minutes=5)
        raw = netlify_deploy(created=created, published=created + timedelta(seconds=75))
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.READY
        assert dep.project_id == "site-blog"
        assert dep.url == "https://blog.netlify.app"
        assert dep.created_at == created
        assert dep.formatted_build_duration == "1m 15s"
        assert dep.commit_message == "New post"
        assert dep.short_commit_sha == "fedcba9"

    def test_ready_falls_back_to_updated_at(self, netlify_deploy, now):
        created = now - timedelta(minutes=5)
        (dep,) = normalize_deployments([netlify_deploy(created=created)])
        assert dep.ready_at == created + timedelta(minutes=1)

    def test_building_has_no_ready_at(self, netlify_deploy):
        (dep,) = normalize_deployments([netlify_deploy(state="building")])
        assert dep.status is DeploymentStatus.BUILDING
        assert dep.ready_at is None

    def test_skipped_by_message(self, netlify_deploy):
        raw = netlify_deploy(state="error", error_message="Canceled build due to no content change")
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.SKIPPED

    def test_failure_with_message(self, netlify_deploy):
        raw = netlify_deploy(state="error", error_message="Build script returned non-zero exit code: 2")
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.ERROR

    def test_error_never_built_is_skipped(self, netlify_deploy):
        raw = netlify_deploy(state="error", deploy_time=None)
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.SKIPPED

    def test_error_zero_deploy_time_is_skipped(self, netlify_deploy):
        raw = netlify_deploy(state="error", deploy_time=0)
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.SKIPPED

    def test_error_built_without_message(self, netlify_deploy):
        (dep,) = normalize_deployments([netlify_deploy(state="error")])
        assert dep.status is DeploymentStatus.ERROR

    def test_blank_message_never_built_is_error(self, netlify_deploy):
        raw = netlify_deploy(state="error", deploy_time=None, error_message="")
        (dep,) = normalize_deployments([raw])
        assert dep.status is DeploymentStatus.ERROR

    @pytest.mark.parametrize(
        "extra",
        [{"deploy_time": None}, {"error_message": "Skipped: ignored"}, {"error_message": "exit 2"}],
    )
    def test_error_resolution_is_stable(self, netlify_deploy, extra):
        payload = [netlify_deploy(state="error", **extra)]
        (first,) = normalize_deployments(payload)
        (second,) = normalize_deployments(payload)
        assert first.status is second.status

    def test_naive_timestamp_is_utc(self, netlify_deploy):
        raw = netlify_deploy(created_at="2026-10-19T11:50:00")
        (dep,) = normalize_deployments([raw])
        assert dep.created_at.tzinfo is not None
        assert dep.created_at.utcoffset() == timedelta(0)

    def test_invalid_payload(self, netlify_deploy):
        raw = netlify_deploy()
        del raw["admin_url"]
        with pytest.raises(DecodingError):
            normalize_deployments([raw])


class TestNormalizeSingleDeploy:
    def test_single(self, netlify_deploy):
        dep = normalize_deployment(netlify_deploy(deploy_id="dep-7", state="enqueued"))
        assert dep.id == "dep-7"
        assert dep.status is DeploymentStatus.QUEUED

    def test_invalid(self):
        with pytest.raises(DecodingError):
            normalize_deployment([])
