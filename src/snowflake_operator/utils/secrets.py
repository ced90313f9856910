"""Utilities for managing the generated credentials secret."""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING

from kubernetes import client

from ..builders.account import account_url
from ..constants import (
    LABEL_INSTANCE,
    LABEL_MANAGED_BY,
    LABEL_MANAGED_BY_VALUE,
    LABEL_NAME,
    LABEL_NAME_VALUE,
    SECRET_KEY_ACCOUNT_NAME,
    SECRET_KEY_ACCOUNT_URL,
    SECRET_KEY_ADMIN_NAME,
    SECRET_KEY_ADMIN_PASSWORD,
    SECRET_KEY_EDITION,
    SECRET_KEY_EMAIL,
    SECRET_KEY_REGION,
    SECRET_NAME_SUFFIX,
)
from ..models import AccountDetails, SnowflakeAccount

if TYPE_CHECKING:
    from ..store import StateStore

logger = logging.getLogger(__name__)


def credentials_secret_name(account_name: str) -> str:
    """Return the secret name for an account (lowercase for Kubernetes naming)."""
    return f"{account_name.lower()}{SECRET_NAME_SUFFIX}"


def credentials_secret_labels(parent_name: str) -> dict[str, str]:
    """Labels identifying the credentials secret of a SnowflakeAccount."""
    return {
        LABEL_NAME: LABEL_NAME_VALUE,
        LABEL_MANAGED_BY: LABEL_MANAGED_BY_VALUE,
        LABEL_INSTANCE: parent_name,
    }


def _encode(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


def _decode(value: str | bytes) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return base64.b64decode(value).decode("utf-8")


def build_credentials_secret(account: SnowflakeAccount, details: AccountDetails) -> client.V1Secret:
    """Build the credentials secret for a freshly created account.

    Args:
        account: Parent SnowflakeAccount snapshot
        details: Details of the created account

    Returns:
        Secret owned by the parent resource
    """
    data = {
        SECRET_KEY_ACCOUNT_NAME: details.account_name,
        SECRET_KEY_ADMIN_NAME: details.admin_name,
        SECRET_KEY_ADMIN_PASSWORD: details.admin_password,
        SECRET_KEY_EMAIL: details.email,
        SECRET_KEY_REGION: details.region,
        SECRET_KEY_EDITION: details.edition,
        SECRET_KEY_ACCOUNT_URL: account_url(details.account_name),
    }

    return client.V1Secret(
        api_version="v1",
        kind="Secret",
        metadata=client.V1ObjectMeta(
            name=credentials_secret_name(details.account_name),
            namespace=account.namespace,
            labels=credentials_secret_labels(account.name),
            owner_references=[account.owner_reference()],
        ),
        type="Opaque",
        data={key: _encode(value) for key, value in data.items()},
    )


def create_credentials_secret(
    store: StateStore,
    account: SnowflakeAccount,
    details: AccountDetails,
) -> str:
    """Persist the credentials secret for a created account.

    Returns:
        Name of the created secret
    """
    secret = build_credentials_secret(account, details)
    store.create_secret(account.namespace, secret)
    logger.info(f"Created credentials secret {secret.metadata.name} in namespace {account.namespace}")
    return secret.metadata.name


def read_account_name(secret: client.V1Secret) -> str:
    """Decode the account name stored in a credentials secret, or return an empty string."""
    value = (secret.data or {}).get(SECRET_KEY_ACCOUNT_NAME)
    if not value:
        return ""
    return _decode(value)


def find_credentials_secret(store: StateStore, account: SnowflakeAccount) -> client.V1Secret | None:
    """Find the parent's credentials secret that records an account name.

    Secrets are matched by the labels set in ``build_credentials_secret``
    rather than by name, since the name derives from the generated account.
    """
    selector = ",".join(f"{key}={value}" for key, value in credentials_secret_labels(account.name).items())
    for secret in store.list_secrets(account.namespace, selector):
        if read_account_name(secret):
            return secret
    return None


def find_account_name_in_secrets(store: StateStore, account: SnowflakeAccount) -> str:
    """Look up the account name recorded in the parent's credentials secret.

    Returns:
        The recorded account name, or an empty string if no secret carries one
    """
    secret = find_credentials_secret(store, account)
    if secret is None:
        logger.info(f"No credentials secret found for {account.namespace}/{account.name}")
        return ""

    account_name = read_account_name(secret)
    logger.info(f"Found account name {account_name} in secret {secret.metadata.name}")
    return account_name
