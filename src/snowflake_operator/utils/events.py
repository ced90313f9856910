"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_ACCOUNT_CREATED,
    EVENT_REASON_ACCOUNT_DELETED,
    EVENT_REASON_DURATION_EXPIRED,
    EVENT_REASON_RECONCILE_FAILED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_account_created(body: dict[str, Any], account_name: str) -> None:
    """Emit account created event."""
    emit_event(body, EVENT_REASON_ACCOUNT_CREATED, f"Snowflake account {account_name} created")


def emit_account_deleted(body: dict[str, Any], account_name: str) -> None:
    """Emit account deleted event."""
    emit_event(body, EVENT_REASON_ACCOUNT_DELETED, f"Snowflake account {account_name} dropped")


def emit_duration_expired(body: dict[str, Any], duration: str) -> None:
    """Emit duration expired event."""
    emit_event(body, EVENT_REASON_DURATION_EXPIRED, f"Duration {duration} expired, deleting resource")
