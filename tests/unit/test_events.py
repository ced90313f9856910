"""Tests for Kubernetes event utilities."""

from __future__ import annotations

from snowflake_operator.utils.events import (
    emit_account_created,
    emit_account_deleted,
    emit_duration_expired,
    emit_event,
    emit_reconcile_failed,
)

BODY = {"metadata": {"name": "demo", "namespace": "default"}}


class TestEmitEvent:
    """Test cases for emit_event function."""

    def test_emit_event_normal(self, mock_kopf_event):
        """Test emitting normal event."""
        emit_event(BODY, "TestReason", "Test message")

        mock_kopf_event.assert_called_once_with(
            BODY,
            reason="TestReason",
            message="Test message",
            type="Normal",
        )

    def test_emit_event_warning(self, mock_kopf_event):
        """Test emitting warning event."""
        emit_event(BODY, "ErrorReason", "Error occurred", type_="Warning")

        mock_kopf_event.assert_called_once_with(
            BODY,
            reason="ErrorReason",
            message="Error occurred",
            type="Warning",
        )


class TestAccountEvents:
    """Test cases for account lifecycle events."""

    def test_emit_reconcile_failed(self, mock_kopf_event):
        emit_reconcile_failed(BODY, "boom")

        mock_kopf_event.assert_called_once_with(BODY, reason="ReconcileFailed", message="boom", type="Warning")

    def test_emit_account_created(self, mock_kopf_event):
        emit_account_created(BODY, "SFABC123")

        mock_kopf_event.assert_called_once_with(
            BODY, reason="AccountCreated", message="Snowflake account SFABC123 created", type="Normal"
        )

    def test_emit_account_deleted(self, mock_kopf_event):
        emit_account_deleted(BODY, "SFABC123")

        mock_kopf_event.assert_called_once_with(
            BODY, reason="AccountDeleted", message="Snowflake account SFABC123 dropped", type="Normal"
        )

    def test_emit_duration_expired(self, mock_kopf_event):
        emit_duration_expired(BODY, "2m")

        mock_kopf_event.assert_called_once_with(
            BODY, reason="DurationExpired", message="Duration 2m expired, deleting resource", type="Normal"
        )
