"""Utilities for managing Kubernetes conditions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ..constants import COND_CREATION_FAILED, COND_READY


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Return a copy of the conditions list with one condition updated or added.

    Args:
        conditions: List of existing conditions (left untouched)
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed
        now: Transition time to record (defaults to current UTC time)

    Returns:
        New list of conditions
    """
    timestamp = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%dT%H:%M:%SZ")

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": timestamp,
    }
    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    result = []
    replaced = False
    for cond in conditions:
        if cond.get("type") == condition_type:
            # Only update lastTransitionTime if status changed
            if cond.get("status") == status:
                new_condition["lastTransitionTime"] = cond.get("lastTransitionTime", timestamp)
            result.append(new_condition)
            replaced = True
        else:
            result.append(dict(cond))

    if not replaced:
        result.append(new_condition)

    return result


def set_ready_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Set the Ready condition."""
    return update_condition(
        conditions,
        COND_READY,
        "True" if status else "False",
        "AccountReady" if status else "AccountNotReady",
        message,
        observed_generation,
        now,
    )


def set_creation_failed_condition(
    conditions: list[dict[str, Any]],
    failed: bool,
    message: str,
    observed_generation: int | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Set the CreationFailed condition."""
    return update_condition(
        conditions,
        COND_CREATION_FAILED,
        "True" if failed else "False",
        "CreationFailed" if failed else "CreationSucceeded",
        message,
        observed_generation,
        now,
    )
