"""Kubernetes-backed storage for SnowflakeAccount resources and their secrets."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from kubernetes import client, config

from . import metrics
from .constants import API_GROUP, API_VERSION, FIELD_MANAGER, PLURAL_SNOWFLAKE_ACCOUNTS
from .models import AccountStatus, SnowflakeAccount

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the API server rejects or fails a request."""

    def __init__(self, operation: str, message: str, status: int | None = None) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
        self.status = status


class NotFoundError(StoreError):
    """Raised when the requested object does not exist."""


class ConflictError(StoreError):
    """Raised when a write is based on a stale resourceVersion."""


class StateStore(Protocol):
    """Operations the reconciler needs from the desired/observed state store."""

    def get_account(self, namespace: str, name: str) -> SnowflakeAccount:
        ...

    def update_finalizers(self, account: SnowflakeAccount, finalizers: tuple[str, ...]) -> SnowflakeAccount:
        ...

    def update_status(self, account: SnowflakeAccount, status: AccountStatus) -> SnowflakeAccount:
        ...

    def delete_account(self, namespace: str, name: str) -> None:
        ...

    def create_secret(self, namespace: str, secret: client.V1Secret) -> None:
        ...

    def list_secrets(self, namespace: str, label_selector: str) -> list[client.V1Secret]:
        ...


def _translate_api_exception(operation: str, e: client.exceptions.ApiException) -> StoreError:
    message = e.reason or str(e)
    if e.status == 404:
        return NotFoundError(operation, message, e.status)
    if e.status == 409:
        return ConflictError(operation, message, e.status)
    return StoreError(operation, message, e.status)


def load_kubernetes_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


class KubernetesStateStore:
    """State store backed by the Kubernetes API server."""

    def __init__(
        self,
        custom_api: client.CustomObjectsApi | None = None,
        core_api: client.CoreV1Api | None = None,
    ) -> None:
        self.custom_api = custom_api or client.CustomObjectsApi()
        self.core_api = core_api or client.CoreV1Api()

    @classmethod
    def from_environment(cls) -> KubernetesStateStore:
        load_kubernetes_config()
        return cls()

    def _call(self, operation: str, fn: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        try:
            result = fn(**kwargs)
            metrics.api_call_total.labels(operation=operation, result="success").inc()
            return result
        except client.exceptions.ApiException as e:
            metrics.api_call_total.labels(operation=operation, result="error").inc()
            raise _translate_api_exception(operation, e) from e
        finally:
            logger.debug(f"Kubernetes API call {operation} took {time.time() - start_time:.3f}s")

    def get_account(self, namespace: str, name: str) -> SnowflakeAccount:
        """Fetch the current SnowflakeAccount.

        Raises:
            NotFoundError: If the resource does not exist
        """
        obj = self._call(
            "get_account",
            self.custom_api.get_namespaced_custom_object,
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_SNOWFLAKE_ACCOUNTS,
            name=name,
        )
        return SnowflakeAccount.from_object(obj)

    def update_finalizers(self, account: SnowflakeAccount, finalizers: tuple[str, ...]) -> SnowflakeAccount:
        """Replace the finalizer list, guarded by the snapshot's resourceVersion.

        Raises:
            ConflictError: If the resource changed since the snapshot was taken
        """
        body = {
            "metadata": {
                "resourceVersion": account.resource_version,
                "finalizers": list(finalizers),
            },
        }
        obj = self._call(
            "update_finalizers",
            self.custom_api.patch_namespaced_custom_object,
            group=API_GROUP,
            version=API_VERSION,
            namespace=account.namespace,
            plural=PLURAL_SNOWFLAKE_ACCOUNTS,
            name=account.name,
            body=body,
            field_manager=FIELD_MANAGER,
        )
        return SnowflakeAccount.from_object(obj)

    def update_status(self, account: SnowflakeAccount, status: AccountStatus) -> SnowflakeAccount:
        """Write the status subresource, guarded by the snapshot's resourceVersion.

        Raises:
            ConflictError: If the resource changed since the snapshot was taken
        """
        body = {
            "metadata": {"resourceVersion": account.resource_version},
            "status": status.to_dict(),
        }
        obj = self._call(
            "update_status",
            self.custom_api.patch_namespaced_custom_object_status,
            group=API_GROUP,
            version=API_VERSION,
            namespace=account.namespace,
            plural=PLURAL_SNOWFLAKE_ACCOUNTS,
            name=account.name,
            body=body,
            field_manager=FIELD_MANAGER,
        )
        return SnowflakeAccount.from_object(obj)

    def delete_account(self, namespace: str, name: str) -> None:
        """Request deletion of a SnowflakeAccount; an absent resource counts as deleted."""
        try:
            self._call(
                "delete_account",
                self.custom_api.delete_namespaced_custom_object,
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=PLURAL_SNOWFLAKE_ACCOUNTS,
                name=name,
            )
        except NotFoundError:
            logger.info(f"SnowflakeAccount {namespace}/{name} already deleted")

    def create_secret(self, namespace: str, secret: client.V1Secret) -> None:
        self._call(
            "create_secret",
            self.core_api.create_namespaced_secret,
            namespace=namespace,
            body=secret,
            field_manager=FIELD_MANAGER,
        )

    def list_secrets(self, namespace: str, label_selector: str) -> list[client.V1Secret]:
        result = self._call(
            "list_secrets",
            self.core_api.list_namespaced_secret,
            namespace=namespace,
            label_selector=label_selector,
        )
        return list(result.items or [])
