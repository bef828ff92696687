"""Refresh orchestration, change detection and adaptive polling."""

from deploy_status.sync.changes import ChangeDetector, DeploymentEvent, EventKind
from deploy_status.sync.engine import Snapshot, SyncEngine
from deploy_status.sync.scheduler import PollingScheduler, Regime, select_regime

__all__ = [
    "ChangeDetector",
    "DeploymentEvent",
    "EventKind",
    "PollingScheduler",
    "Regime",
    "Snapshot",
    "SyncEngine",
    "select_regime",
]
