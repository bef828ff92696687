"""Tests for Rich table helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from rich.text import Text

from deploy_status.models.status import DeploymentStatus
from deploy_status.output.tables import _cell, kv_table, make_table, relative_time

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class TestMakeTable:
    def test_columns_and_rows(self):
        table = make_table("T", ["A", "B"], [["1", None], ["2", "x"]])
        assert table.title == "T"
        assert len(table.columns) == 2
        assert table.row_count == 2

    def test_kv_table(self):
        table = kv_table({"a": 1, "b": None})
        assert table.row_count == 2


class TestCell:
    def test_status_is_styled(self):
        cell = _cell(DeploymentStatus.ERROR)
        assert isinstance(cell, Text)
        assert cell.plain == "Failed"

    def test_none_is_blank(self):
        assert _cell(None) == ""


class TestRelativeTime:
    def test_now(self):
        assert relative_time(NOW - timedelta(seconds=30), NOW) == "now"

    def test_minutes_hours_days(self):
        assert relative_time(NOW - timedelta(minutes=5), NOW) == "5m ago"
        assert relative_time(NOW - timedelta(hours=3), NOW) == "3h ago"
        assert relative_time(NOW - timedelta(days=2), NOW) == "2d ago"

    def test_old_dates(self):
        assert relative_time(NOW - timedelta(days=30), NOW) == "2026-09-19"

    def test_none(self):
        assert relative_time(None) == ""
