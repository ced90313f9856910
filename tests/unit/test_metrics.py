"""Tests for Prometheus metrics."""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from snowflake_operator.metrics import (
    account_expirations_total,
    account_operation_duration_seconds,
    account_operations_total,
    api_call_total,
    error_total,
    reconcile_duration_seconds,
    reconcile_total,
    requeue_after_seconds,
)
from snowflake_operator.services.accounts import AccountClientError


def sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsExist:
    """Test that all expected metrics are defined."""

    def test_names(self):
        # Prometheus counters don't include "_total" in their _name attribute
        assert reconcile_total._name == "snowflake_operator_reconcile"
        assert reconcile_duration_seconds._name == "snowflake_operator_reconcile_duration_seconds"
        assert error_total._name == "snowflake_operator_error"
        assert account_operations_total._name == "snowflake_operator_account_operations"
        assert account_operation_duration_seconds._name == "snowflake_operator_account_operation_duration_seconds"
        assert api_call_total._name == "snowflake_operator_api_call"
        assert account_expirations_total._name == "snowflake_operator_account_expirations"
        assert requeue_after_seconds._name == "snowflake_operator_requeue_after_seconds"


class TestReconcileMetrics:
    """Test that reconcile passes are counted."""

    def test_success_counted(self, store, reconciler):
        labels = {"kind": "SnowflakeAccount", "result": "success"}
        before = sample("snowflake_operator_reconcile_total", labels)
        store.add_account(finalizers=())

        reconciler.reconcile("default", "demo")

        assert sample("snowflake_operator_reconcile_total", labels) == before + 1
        assert sample("snowflake_operator_requeue_after_seconds", {"kind": "SnowflakeAccount"}) == 0.0

    def test_error_counted(self, store, reconciler, account_client, client_error):
        labels = {"kind": "SnowflakeAccount", "error_type": "AccountClientError"}
        before = sample("snowflake_operator_error_total", labels)
        store.add_account()
        account_client.create_error = client_error

        with pytest.raises(AccountClientError):
            reconciler.reconcile("default", "demo")

        assert sample("snowflake_operator_error_total", labels) == before + 1

    def test_expiration_counted(self, store, reconciler, clock):
        before = sample("snowflake_operator_account_expirations_total")
        store.add_account()
        reconciler.reconcile("default", "demo")
        clock.advance(minutes=5)

        reconciler.reconcile("default", "demo")

        assert sample("snowflake_operator_account_expirations_total") == before + 1
