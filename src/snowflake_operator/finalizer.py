"""Finalizer protocol gating SnowflakeAccount deletion on external cleanup."""

from __future__ import annotations

import enum
import logging
from typing import Callable

from .builders.account import account_name_from_url
from .config import OrgCredentials
from .constants import FINALIZER
from .models import SnowflakeAccount
from .services.accounts import AccountClient
from .services.accounts.client import is_valid_identifier
from .store import StateStore, StoreError
from .utils.secrets import find_account_name_in_secrets

logger = logging.getLogger(__name__)


class ReconcileState(enum.Enum):
    """Lifecycle state of a SnowflakeAccount as seen by one reconcile pass."""

    AWAITING_FINALIZER = "AwaitingFinalizer"
    DELETING = "Deleting"
    ALREADY_DELETED = "AlreadyDeleted"
    PROVISIONING = "Provisioning"
    CREATED = "Created"


def classify(account: SnowflakeAccount) -> ReconcileState:
    """Map a snapshot to the state that decides this pass's action."""
    if account.being_deleted:
        if account.has_finalizer(FINALIZER):
            return ReconcileState.DELETING
        return ReconcileState.ALREADY_DELETED
    if not account.has_finalizer(FINALIZER):
        return ReconcileState.AWAITING_FINALIZER
    if account.status.account_created:
        return ReconcileState.CREATED
    return ReconcileState.PROVISIONING


def with_finalizer(finalizers: tuple[str, ...]) -> tuple[str, ...]:
    """Return the finalizers with the operator's finalizer appended once."""
    if FINALIZER in finalizers:
        return finalizers
    return finalizers + (FINALIZER,)


def without_finalizer(finalizers: tuple[str, ...]) -> tuple[str, ...]:
    """Return the finalizers without the operator's finalizer."""
    return tuple(f for f in finalizers if f != FINALIZER)


def resolve_account_name(store: StateStore, account: SnowflakeAccount) -> str:
    """Find the name of the external account to drop.

    The name embedded in ``status.accountURL`` wins. Without it (for example
    when the pass that created the account crashed before writing status),
    the credentials secret is consulted. An empty string means there is
    nothing to drop.
    """
    account_name = account_name_from_url(account.status.account_url)
    if account_name:
        return account_name

    try:
        return find_account_name_in_secrets(store, account)
    except StoreError as e:
        logger.warning(f"Failed to look up credentials secret for {account.namespace}/{account.name}: {e}")
        return ""


def finalize_account(
    store: StateStore,
    account: SnowflakeAccount,
    load_credentials: Callable[[], OrgCredentials],
    client_factory: Callable[[OrgCredentials], AccountClient],
) -> str:
    """Drop the external account backing a SnowflakeAccount.

    Returns:
        The dropped account name, or an empty string if there was nothing to drop

    Raises:
        ConfigurationError: If organization credentials are not configured
        AccountClientError: If the drop failed; the finalizer must stay in place
    """
    account_name = resolve_account_name(store, account)
    if not account_name:
        logger.info(f"No account name found for {account.namespace}/{account.name}, skipping deletion")
        return ""
    if not is_valid_identifier(account_name):
        logger.warning(f"Recorded account name {account_name!r} is not a valid identifier, skipping deletion")
        return ""

    account_client = client_factory(load_credentials())
    account_client.drop_account(account_name)
    return account_name
