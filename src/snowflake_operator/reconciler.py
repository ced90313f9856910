"""Reconciliation loop for SnowflakeAccount resources."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable

from . import metrics
from .builders.account import account_url, create_account_details
from .config import ConfigurationError, OrgCredentials, load_org_credentials
from .constants import CONTROLLER_NAME, DEFAULT_DURATION, KIND_SNOWFLAKE_ACCOUNT, MESSAGE_ACCOUNT_CREATED
from .finalizer import ReconcileState, classify, finalize_account, with_finalizer, without_finalizer
from .logging import log_resource_event
from .models import AccountStatus, ReconcileResult, SnowflakeAccount
from .services.accounts import AccountClient, AccountClientError, SnowflakeAccountClient
from .store import NotFoundError, StateStore, StoreError
from .tracing import trace_span
from .utils.conditions import set_creation_failed_condition, set_ready_condition
from .utils.duration import Clock, SystemClock, check_duration
from .utils.errors import sanitize_exception
from .utils.events import emit_account_created, emit_account_deleted, emit_duration_expired
from .utils.secrets import create_credentials_secret, find_credentials_secret, read_account_name


class SnowflakeAccountReconciler:
    """Converges one SnowflakeAccount per call to ``reconcile``.

    Every pass re-reads the resource and derives its action from that
    snapshot alone; nothing is carried over between passes. A pass either
    returns a ``ReconcileResult`` or raises, in which case the caller is
    expected to retry it with backoff.
    """

    def __init__(
        self,
        store: StateStore,
        load_credentials: Callable[[], OrgCredentials] = load_org_credentials,
        client_factory: Callable[[OrgCredentials], AccountClient] = SnowflakeAccountClient,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            store: Desired/observed state store
            load_credentials: Returns organization credentials; called once per pass that needs them
            client_factory: Builds an account client from organization credentials
            clock: Time source for lease checks (defaults to the UTC wall clock)
        """
        self.kind = KIND_SNOWFLAKE_ACCOUNT
        self.store = store
        self.load_credentials = load_credentials
        self.client_factory = client_factory
        self.clock = clock or SystemClock()
        self.logger = logging.getLogger(__name__)

    def _log(
        self,
        level: int,
        account: SnowflakeAccount,
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=account.name,
            namespace=account.namespace,
            uid=account.uid or "unknown",
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(self, account: SnowflakeAccount, message: str, event: str = "info", reason: str = "Info", **kwargs: Any) -> None:
        self._log(logging.INFO, account, message, event, reason, **kwargs)

    def log_warning(self, account: SnowflakeAccount, message: str, event: str = "warning", reason: str = "Warning", **kwargs: Any) -> None:
        self._log(logging.WARNING, account, message, event, reason, **kwargs)

    def log_error(
        self,
        account: SnowflakeAccount,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        if error is not None:
            kwargs["error"] = sanitize_exception(error)
            kwargs["error_type"] = type(error).__name__
        self._log(logging.ERROR, account, message, event, reason, **kwargs)

    def reconcile(self, namespace: str, name: str) -> ReconcileResult:
        """Run one reconcile pass for the SnowflakeAccount ``namespace/name``.

        Returns:
            The pass result, carrying the requested wake-up delay if any

        Raises:
            ConfigurationError: If organization credentials are missing
            AccountClientError: If a Snowflake operation failed
            StoreError: If reading or persisting Kubernetes state failed
        """
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()
        start_time = time.time()
        try:
            result = self._reconcile(namespace, name)
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
            if result.requeue_after is not None:
                metrics.requeue_after_seconds.labels(kind=self.kind).set(result.requeue_after)
            return result
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(duration)

    def _reconcile(self, namespace: str, name: str) -> ReconcileResult:
        try:
            account = self.store.get_account(namespace, name)
        except NotFoundError:
            self.logger.info(f"SnowflakeAccount {namespace}/{name} not found, ignoring since it must be deleted")
            return ReconcileResult()

        state = classify(account)
        with trace_span("reconcile", kind=self.kind, attributes={"resource.name": name, "reconcile.state": state.value}):
            if state is ReconcileState.AWAITING_FINALIZER:
                return self._attach_finalizer(account)
            if state is ReconcileState.DELETING:
                return self._finalize(account)
            if state is ReconcileState.ALREADY_DELETED:
                self.log_info(account, "Resource is being deleted and already finalized", reason="AlreadyFinalized")
                return ReconcileResult()
            if state is ReconcileState.CREATED:
                return self._check_lease(account)
            return self._provision(account)

    def _attach_finalizer(self, account: SnowflakeAccount) -> ReconcileResult:
        self.log_info(account, "Adding finalizer", reason="FinalizerAdded")
        try:
            self.store.update_finalizers(account, with_finalizer(account.finalizers))
        except NotFoundError:
            self.log_info(account, "Resource disappeared before the finalizer was added", reason="NotFound")
            return ReconcileResult()
        return ReconcileResult(requeue_after=0.0)

    def _finalize(self, account: SnowflakeAccount) -> ReconcileResult:
        self.log_info(account, "Running finalizer", event="deletion", reason="Finalizing")

        with trace_span("finalize", kind=self.kind, attributes={"resource.name": account.name}):
            try:
                dropped = finalize_account(self.store, account, self.load_credentials, self.client_factory)
            except (ConfigurationError, AccountClientError) as e:
                self.log_error(account, "Failed to delete Snowflake account, will retry", error=e, reason="DeletionFailed")
                raise

        if dropped:
            emit_account_deleted(account.event_body(), dropped)
            self.log_info(account, f"Deleted Snowflake account {dropped}", event="deletion", reason="AccountDeleted", account_name=dropped)
        else:
            self.log_info(account, "No Snowflake account to delete", event="deletion", reason="NothingToDelete")

        try:
            self.store.update_finalizers(account, without_finalizer(account.finalizers))
        except NotFoundError:
            self.log_info(account, "Resource already removed", event="deletion", reason="NotFound")
            return ReconcileResult()

        self.log_info(account, "Successfully finalized SnowflakeAccount", event="deletion", reason="Finalized")
        return ReconcileResult()

    def _check_lease(self, account: SnowflakeAccount) -> ReconcileResult:
        check = check_duration(account.status.creation_time, account.duration, self.clock)

        if check.due:
            self.log_info(account, "Duration expired, deleting SnowflakeAccount", reason="DurationExpired", duration=account.duration)
            metrics.account_expirations_total.inc()
            emit_duration_expired(account.event_body(), account.duration or DEFAULT_DURATION)
            # The finalizer drops the Snowflake account on the next pass
            self.store.delete_account(account.namespace, account.name)
            return ReconcileResult()

        if check.remaining is None:
            return ReconcileResult()

        requeue_after = check.remaining.total_seconds()
        self.log_info(account, "Snowflake account alive, requeuing until expiry", reason="Alive", requeue_after=requeue_after)
        return ReconcileResult(requeue_after=requeue_after)

    def _provision(self, account: SnowflakeAccount) -> ReconcileResult:
        # A credentials secret without status means an earlier pass created the
        # account but failed before recording it
        existing = find_credentials_secret(self.store, account)
        if existing is not None:
            account_name = read_account_name(existing)
            created_at = existing.metadata.creation_timestamp or self.clock.now()
            self.log_warning(
                account,
                f"Adopting Snowflake account {account_name} from existing credentials secret",
                reason="AccountAdopted",
                secret_name=existing.metadata.name,
            )
            return self._record_created(account, account_name, created_at)

        with trace_span("provision", kind=self.kind, attributes={"resource.name": account.name}):
            try:
                credentials = self.load_credentials()
                details = create_account_details()
                self.log_info(
                    account,
                    "Creating Snowflake account",
                    reason="Provisioning",
                    account_name=details.account_name,
                    region=details.region,
                    edition=details.edition,
                )
                self.client_factory(credentials).create_account(details)
            except (ConfigurationError, AccountClientError) as e:
                self.log_error(account, "Failed to create Snowflake account", error=e, reason="CreationFailed")
                self._record_failure(account, f"Failed to create account: {sanitize_exception(e)}")
                raise

            emit_account_created(account.event_body(), details.account_name)

            try:
                create_credentials_secret(self.store, account, details)
            except StoreError as e:
                self.log_error(account, "Failed to create credentials secret", error=e, reason="SecretFailed")
                self._record_failure(account, f"Account created but failed to store credentials: {sanitize_exception(e)}")
                raise

        return self._record_created(account, details.account_name, self.clock.now())

    def _record_created(self, account: SnowflakeAccount, account_name: str, created_at: datetime) -> ReconcileResult:
        now = self.clock.now()
        creation_time = created_at.astimezone(timezone.utc).replace(microsecond=0)
        conditions = set_ready_condition(
            list(account.status.conditions), True, f"Snowflake account {account_name} is ready", account.generation, now
        )
        conditions = set_creation_failed_condition(conditions, False, MESSAGE_ACCOUNT_CREATED, account.generation, now)
        status = AccountStatus(
            account_created=True,
            account_url=account_url(account_name),
            creation_time=creation_time,
            message=MESSAGE_ACCOUNT_CREATED,
            observed_generation=account.generation,
            conditions=tuple(conditions),
        )

        try:
            self.store.update_status(account, status)
        except NotFoundError:
            self.log_warning(account, "Resource removed before status could be recorded", reason="NotFound", account_name=account_name)
            return ReconcileResult()

        self.log_info(account, "Successfully created Snowflake account and stored credentials", reason="AccountCreated", account_name=account_name)
        return self._check_lease(account.with_status(status))

    def _record_failure(self, account: SnowflakeAccount, message: str) -> None:
        """Record a provisioning failure in status; a failed write is only logged."""
        now = self.clock.now()
        conditions = set_ready_condition(list(account.status.conditions), False, message, account.generation, now)
        conditions = set_creation_failed_condition(conditions, True, message, account.generation, now)
        status = replace(
            account.status,
            message=message,
            observed_generation=account.generation,
            conditions=tuple(conditions),
        )
        try:
            self.store.update_status(account, status)
        except StoreError as e:
            self.log_error(account, "Failed to update status", error=e, reason="StatusUpdateFailed")
