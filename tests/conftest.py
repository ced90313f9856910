"""Shared fixtures for operator tests."""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import patch

import pytest
from kubernetes import client

from snowflake_operator.config import OrgCredentials
from snowflake_operator.constants import API_GROUP_VERSION, FINALIZER, KIND_SNOWFLAKE_ACCOUNT
from snowflake_operator.models import AccountDetails, AccountStatus, SnowflakeAccount
from snowflake_operator.reconciler import SnowflakeAccountReconciler
from snowflake_operator.services.accounts import AccountClientError
from snowflake_operator.store import ConflictError, NotFoundError

START_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START_TIME) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: Any) -> None:
        self.current = self.current + timedelta(**kwargs)


class FakeStateStore:
    """In-memory state store with API server semantics for finalizers and resourceVersion."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.secrets: dict[tuple[str, str], client.V1Secret] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[str] = []
        self._version = 0

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise self.failures[operation]

    def _existing(self, operation: str, namespace: str, name: str) -> dict[str, Any]:
        obj = self.objects.get((namespace, name))
        if obj is None:
            raise NotFoundError(operation, "Not Found", 404)
        return obj

    def _check_version(self, operation: str, obj: dict[str, Any], account: SnowflakeAccount) -> None:
        if obj["metadata"]["resourceVersion"] != account.resource_version:
            raise ConflictError(operation, "the object has been modified", 409)

    def add_account(
        self,
        name: str = "demo",
        namespace: str = "default",
        duration: str = "",
        finalizers: tuple[str, ...] = (FINALIZER,),
        status: dict[str, Any] | None = None,
        deleting: bool = False,
    ) -> dict[str, Any]:
        obj = {
            "apiVersion": API_GROUP_VERSION,
            "kind": KIND_SNOWFLAKE_ACCOUNT,
            "metadata": {
                "name": name,
                "namespace": namespace,
                "uid": f"uid-{name}",
                "generation": 1,
                "resourceVersion": self._next_version(),
                "finalizers": list(finalizers),
            },
            "spec": {"duration": duration} if duration else {},
        }
        if status is not None:
            obj["status"] = status
        if deleting:
            obj["metadata"]["deletionTimestamp"] = "2026-01-01T12:00:00Z"
        self.objects[(namespace, name)] = obj
        return obj

    def get(self, namespace: str = "default", name: str = "demo") -> SnowflakeAccount:
        return SnowflakeAccount.from_object(copy.deepcopy(self.objects[(namespace, name)]))

    def get_account(self, namespace: str, name: str) -> SnowflakeAccount:
        self._record("get_account")
        return SnowflakeAccount.from_object(copy.deepcopy(self._existing("get_account", namespace, name)))

    def update_finalizers(self, account: SnowflakeAccount, finalizers: tuple[str, ...]) -> SnowflakeAccount:
        self._record("update_finalizers")
        obj = self._existing("update_finalizers", account.namespace, account.name)
        self._check_version("update_finalizers", obj, account)
        obj["metadata"]["finalizers"] = list(finalizers)
        obj["metadata"]["resourceVersion"] = self._next_version()
        if obj["metadata"].get("deletionTimestamp") and not finalizers:
            del self.objects[(account.namespace, account.name)]
        return SnowflakeAccount.from_object(copy.deepcopy(obj))

    def update_status(self, account: SnowflakeAccount, status: AccountStatus) -> SnowflakeAccount:
        self._record("update_status")
        obj = self._existing("update_status", account.namespace, account.name)
        self._check_version("update_status", obj, account)
        obj["status"] = status.to_dict()
        obj["metadata"]["resourceVersion"] = self._next_version()
        return SnowflakeAccount.from_object(copy.deepcopy(obj))

    def delete_account(self, namespace: str, name: str) -> None:
        self._record("delete_account")
        obj = self.objects.get((namespace, name))
        if obj is None:
            return
        if obj["metadata"]["finalizers"]:
            obj["metadata"]["deletionTimestamp"] = "2026-01-01T13:00:00Z"
            obj["metadata"]["resourceVersion"] = self._next_version()
        else:
            del self.objects[(namespace, name)]

    def create_secret(self, namespace: str, secret: client.V1Secret) -> None:
        self._record("create_secret")
        key = (namespace, secret.metadata.name)
        if key in self.secrets:
            raise ConflictError("create_secret", "already exists", 409)
        self.secrets[key] = secret

    def list_secrets(self, namespace: str, label_selector: str) -> list[client.V1Secret]:
        self._record("list_secrets")
        wanted = dict(term.split("=", 1) for term in label_selector.split(","))
        return [
            secret
            for (secret_ns, _), secret in self.secrets.items()
            if secret_ns == namespace
            and all((secret.metadata.labels or {}).get(key) == value for key, value in wanted.items())
        ]


class FakeAccountClient:
    """Account client double; calling it acts as the client factory."""

    def __init__(self) -> None:
        self.credentials: list[OrgCredentials] = []
        self.created: list[AccountDetails] = []
        self.dropped: list[str] = []
        self.create_error: Exception | None = None
        self.drop_error: Exception | None = None

    def __call__(self, credentials: OrgCredentials) -> FakeAccountClient:
        self.credentials.append(credentials)
        return self

    def create_account(self, details: AccountDetails) -> str:
        if self.create_error is not None:
            raise self.create_error
        self.created.append(details)
        return details.account_name

    def drop_account(self, account_name: str) -> None:
        if self.drop_error is not None:
            raise self.drop_error
        self.dropped.append(account_name)


@pytest.fixture(autouse=True)
def mock_kopf_event():
    """Events are posted through kopf, which is not running under test."""
    with patch("snowflake_operator.utils.events.kopf.event") as mock_event:
        yield mock_event


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> FakeStateStore:
    return FakeStateStore()


@pytest.fixture
def account_client() -> FakeAccountClient:
    return FakeAccountClient()


@pytest.fixture
def org_credentials() -> OrgCredentials:
    return OrgCredentials(username="orgadmin", password="org-secret", account="myorg-main")


@pytest.fixture
def reconciler(store, account_client, org_credentials, clock) -> SnowflakeAccountReconciler:
    return SnowflakeAccountReconciler(
        store,
        load_credentials=lambda: org_credentials,
        client_factory=account_client,
        clock=clock,
    )


@pytest.fixture
def account_details() -> AccountDetails:
    return AccountDetails(
        account_name="SFABC123",
        admin_name="admin_k3j9x0qa",
        admin_password="Ab1!Cd2@Ef3#Gh",
        email="admin_k3j9x0qa@example.com",
        region="AWS_US_WEST_2",
        edition="ENTERPRISE",
    )


@pytest.fixture
def client_error() -> AccountClientError:
    return AccountClientError("CREATE ACCOUNT", "250001: Could not connect to Snowflake backend")
