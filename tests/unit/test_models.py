"""Tests for resource snapshots."""

from __future__ import annotations

from datetime import datetime, timezone

from snowflake_operator.models import AccountStatus, ReconcileResult, SnowflakeAccount


class TestAccountStatus:
    """Test cases for AccountStatus."""

    def test_from_empty(self):
        status = AccountStatus.from_dict(None)

        assert status == AccountStatus()
        assert not status.account_created
        assert status.creation_time is None

    def test_from_dict(self):
        status = AccountStatus.from_dict(
            {
                "accountCreated": True,
                "accountURL": "https://SFABC123.snowflakecomputing.com",
                "creationTime": "2026-01-01T12:00:00Z",
                "message": "Snowflake account created successfully",
                "observedGeneration": 2,
                "conditions": [{"type": "Ready", "status": "True"}],
            }
        )

        assert status.account_created
        assert status.creation_time == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert status.observed_generation == 2
        assert status.conditions == ({"type": "Ready", "status": "True"},)

    def test_to_dict(self):
        status = AccountStatus(
            account_created=True,
            account_url="https://SFABC123.snowflakecomputing.com",
            creation_time=datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc),
            message="done",
            observed_generation=1,
        )

        assert status.to_dict() == {
            "accountCreated": True,
            "accountURL": "https://SFABC123.snowflakecomputing.com",
            "creationTime": "2026-01-01T12:00:00Z",
            "message": "done",
            "observedGeneration": 1,
            "conditions": [],
        }


class TestSnowflakeAccount:
    """Test cases for SnowflakeAccount snapshots."""

    def test_from_object(self):
        account = SnowflakeAccount.from_object(
            {
                "metadata": {
                    "name": "demo",
                    "namespace": "team-a",
                    "uid": "uid-demo",
                    "resourceVersion": "7",
                    "generation": 2,
                    "finalizers": ["a"],
                    "deletionTimestamp": "2026-01-01T12:00:00Z",
                },
                "spec": {"duration": "10m"},
            }
        )

        assert account.namespace == "team-a"
        assert account.finalizers == ("a",)
        assert account.being_deleted
        assert account.has_finalizer("a")
        assert account.duration == "10m"
        assert account.kind == "SnowflakeAccount"

    def test_with_status_returns_copy(self):
        account = SnowflakeAccount.from_object({"metadata": {"name": "demo"}})

        updated = account.with_status(AccountStatus(account_created=True))

        assert updated.status.account_created
        assert not account.status.account_created

    def test_event_body(self):
        account = SnowflakeAccount.from_object({"metadata": {"name": "demo", "namespace": "ns", "uid": "u"}})

        assert account.event_body()["metadata"] == {"name": "demo", "namespace": "ns", "uid": "u"}


class TestReconcileResult:
    """Test cases for ReconcileResult."""

    def test_requeue(self):
        assert not ReconcileResult().requeue
        assert ReconcileResult(requeue_after=0.0).requeue
