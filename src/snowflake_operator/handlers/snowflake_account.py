"""Handler for SnowflakeAccount CRD."""

from __future__ import annotations

import logging
import threading
from typing import Any

import kopf

from ..config import get_int_setting
from ..constants import API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT
from ..models import ReconcileResult
from ..reconciler import SnowflakeAccountReconciler
from ..store import ConflictError, KubernetesStateStore
from ..utils.errors import sanitize_exception
from ..utils.events import emit_reconcile_failed

logger = logging.getLogger(__name__)

MIN_REQUEUE_DELAY_SECONDS = 1.0
CONFLICT_RETRY_DELAY_SECONDS = 1.0

# Global reconciler instance, created on first use
_reconciler: SnowflakeAccountReconciler | None = None

# kopf runs timers apart from change handlers, so passes for one object are
# serialized here
_pass_locks: dict[tuple[str, str], threading.Lock] = {}
_pass_locks_guard = threading.Lock()


def get_reconciler() -> SnowflakeAccountReconciler:
    """Return the shared reconciler, creating it on first use."""
    global _reconciler
    if _reconciler is None:
        _reconciler = SnowflakeAccountReconciler(KubernetesStateStore.from_environment())
    return _reconciler


def get_pass_lock(namespace: str, name: str) -> threading.Lock:
    """Return the lock held while a pass runs for ``namespace/name``."""
    with _pass_locks_guard:
        return _pass_locks.setdefault((namespace, name), threading.Lock())


def forget_pass_lock(namespace: str, name: str) -> None:
    with _pass_locks_guard:
        _pass_locks.pop((namespace, name), None)


def run_pass(body: dict[str, Any], meta: dict[str, Any], wait: bool = True) -> ReconcileResult | None:
    """Run one reconcile pass for the object kopf handed us.

    Only the identity is taken from kopf's body; the reconciler re-reads
    the object itself. At most one pass per object runs at a time.

    Args:
        body: Object body as delivered by kopf
        meta: Object metadata as delivered by kopf
        wait: Wait for a pass already running on the object; otherwise skip

    Returns:
        The pass result, or None if the pass was skipped

    Raises:
        kopf.TemporaryError: If the object changed underneath the pass
    """
    namespace = meta.get("namespace", "default")
    name = meta.get("name", "unknown")

    lock = get_pass_lock(namespace, name)
    if not lock.acquire(blocking=wait):
        logger.debug(f"SnowflakeAccount {namespace}/{name} is already being reconciled, skipping")
        return None

    try:
        return get_reconciler().reconcile(namespace, name)
    except ConflictError as e:
        logger.info(f"SnowflakeAccount {namespace}/{name} changed during reconcile, retrying")
        raise kopf.TemporaryError(str(e), delay=CONFLICT_RETRY_DELAY_SECONDS) from e
    except Exception as e:
        emit_reconcile_failed(body, f"Reconciliation failed: {sanitize_exception(e)}")
        raise
    finally:
        lock.release()


def requeue(result: ReconcileResult | None) -> None:
    """Ask kopf to call the handler again once the requested delay has passed.

    The wake-up is raised as a retry whose message marks it as scheduled.

    Raises:
        kopf.TemporaryError: If the result requests a wake-up
    """
    if result is None or result.requeue_after is None:
        return
    delay = max(result.requeue_after, MIN_REQUEUE_DELAY_SECONDS)
    raise kopf.TemporaryError(f"Scheduled re-check in {delay:.0f}s, not a failure", delay=delay)


@kopf.on.create(API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT)
@kopf.on.update(API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT)
@kopf.on.resume(API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT)
def handle_snowflake_account(
    body: dict[str, Any],
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Handle SnowflakeAccount resource reconciliation."""
    requeue(run_pass(body, meta))


@kopf.timer(API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT, interval=get_int_setting("RECONCILE_INTERVAL_SECONDS", 60))
def resync_snowflake_account(
    body: dict[str, Any],
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Periodically reconcile SnowflakeAccount resources."""
    # The next tick is the wake-up, so a requested requeue needs no retry
    run_pass(body, meta, wait=False)


@kopf.on.delete(API_GROUP_VERSION, KIND_SNOWFLAKE_ACCOUNT, optional=True)
def handle_snowflake_account_delete(
    body: dict[str, Any],
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Handle SnowflakeAccount resource deletion."""
    requeue(run_pass(body, meta))
    forget_pass_lock(meta.get("namespace", "default"), meta.get("name", "unknown"))
