"""Wire status resolution shared by the provider adapters.

Both providers report monorepo deploys that were skipped because nothing
changed with the same wire value as a failed build. :func:`classify_error`
separates the two; it is a heuristic over observed provider behavior, not a
documented API contract.
"""

from __future__ import annotations

from collections.abc import Mapping

from deploy_status.models.status import DeploymentStatus

SKIP_KEYWORDS = ("skipped", "canceled", "no changes", "ignored", "not in scope")


def classify_error(error_message: str | None, build_started: bool) -> DeploymentStatus:
    """Decide whether an error-coded deployment really failed or was skipped."""
    if error_message is not None:
        message = error_message.lower()
        if any(keyword in message for keyword in SKIP_KEYWORDS):
            return DeploymentStatus.SKIPPED
        return DeploymentStatus.ERROR
    # Real failures carry a message, even an empty one; a build that never
    # started was skipped
    if not build_started:
        return DeploymentStatus.SKIPPED
    return DeploymentStatus.ERROR


def resolve_status(
    wire_state: str,
    table: Mapping[str, DeploymentStatus],
    *,
    error_message: str | None,
    build_started: bool,
) -> DeploymentStatus:
    """Map a provider state to a :class:`DeploymentStatus`.

    Unknown states resolve to ``QUEUED``: an unrecognized transient state
    should not be reported as a failure.
    """
    status = table.get(wire_state.strip().lower(), DeploymentStatus.QUEUED)
    if status is DeploymentStatus.ERROR:
        return classify_error(error_message, build_started)
    return status
