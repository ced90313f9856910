"""Immutable snapshots of SnowflakeAccount resources and pass results."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .constants import API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp as written by the API server."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_timestamp(value: datetime) -> str:
    """Format a timezone-aware datetime as an RFC 3339 UTC timestamp."""
    return value.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class AccountStatus:
    """Observed state of a SnowflakeAccount, as stored in ``.status``."""

    account_created: bool = False
    account_url: str = ""
    creation_time: datetime | None = None
    message: str = ""
    observed_generation: int = 0
    conditions: tuple[dict[str, Any], ...] = ()

    @classmethod
    def from_dict(cls, status: dict[str, Any] | None) -> AccountStatus:
        status = status or {}
        return cls(
            account_created=bool(status.get("accountCreated", False)),
            account_url=status.get("accountURL") or "",
            creation_time=parse_timestamp(status.get("creationTime")),
            message=status.get("message") or "",
            observed_generation=int(status.get("observedGeneration") or 0),
            conditions=tuple(status.get("conditions") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accountCreated": self.account_created,
            "accountURL": self.account_url,
            "creationTime": format_timestamp(self.creation_time) if self.creation_time else None,
            "message": self.message,
            "observedGeneration": self.observed_generation,
            "conditions": [dict(cond) for cond in self.conditions],
        }


@dataclass(frozen=True)
class SnowflakeAccount:
    """Snapshot of a SnowflakeAccount custom resource."""

    name: str
    namespace: str
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    api_version: str = API_GROUP_VERSION
    kind: str = KIND_SNOWFLAKE_ACCOUNT
    finalizers: tuple[str, ...] = ()
    deletion_timestamp: str | None = None
    duration: str = ""
    status: AccountStatus = field(default_factory=AccountStatus)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> SnowflakeAccount:
        """Build a snapshot from a custom object as returned by the API."""
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "default"),
            uid=metadata.get("uid", ""),
            resource_version=metadata.get("resourceVersion", ""),
            generation=int(metadata.get("generation") or 0),
            api_version=obj.get("apiVersion", API_GROUP_VERSION),
            kind=obj.get("kind", KIND_SNOWFLAKE_ACCOUNT),
            finalizers=tuple(metadata.get("finalizers") or ()),
            deletion_timestamp=metadata.get("deletionTimestamp"),
            duration=spec.get("duration") or "",
            status=AccountStatus.from_dict(obj.get("status")),
        )

    @property
    def being_deleted(self) -> bool:
        return bool(self.deletion_timestamp)

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.finalizers

    def with_status(self, status: AccountStatus) -> SnowflakeAccount:
        return replace(self, status=status)

    def owner_reference(self) -> dict[str, Any]:
        """Owner reference binding a child object's lifetime to this resource."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "name": self.name,
            "uid": self.uid,
            "controller": True,
            "blockOwnerDeletion": True,
        }

    def event_body(self) -> dict[str, Any]:
        """Minimal object body for attaching Kubernetes events."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.name, "namespace": self.namespace, "uid": self.uid},
        }


@dataclass(frozen=True)
class AccountDetails:
    """Details of one account creation attempt; never persisted on its own."""

    account_name: str
    admin_name: str
    admin_password: str = field(repr=False)
    email: str
    region: str
    edition: str


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of a successful reconcile pass.

    ``requeue_after`` is the number of seconds after which the resource
    must be reconciled again, or None if no wake-up is needed.
    """

    requeue_after: float | None = None

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None
