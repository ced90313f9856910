"""Builder for Snowflake account details."""

from __future__ import annotations

from ..constants import (
    ACCOUNT_EDITION,
    ACCOUNT_REGION,
    ACCOUNT_URL_TEMPLATE,
    EMAIL_DOMAIN,
)
from ..models import AccountDetails
from ..utils.credentials import generate_account_name, generate_admin_name, generate_password


def create_account_details() -> AccountDetails:
    """Generate the name, admin identity and password for a new account.

    Returns:
        Fresh account details with a fixed region and edition
    """
    admin_name = generate_admin_name()
    return AccountDetails(
        account_name=generate_account_name(),
        admin_name=admin_name,
        admin_password=generate_password(),
        email=f"{admin_name}@{EMAIL_DOMAIN}",
        region=ACCOUNT_REGION,
        edition=ACCOUNT_EDITION,
    )


def account_url(account_name: str) -> str:
    """Return the public URL of a Snowflake account."""
    return ACCOUNT_URL_TEMPLATE.format(account_name=account_name)


def account_name_from_url(url: str) -> str:
    """Extract the account name from ``https://<account>.snowflakecomputing.com``.

    Returns an empty string when the URL carries no host label.
    """
    if not url:
        return ""
    host = url.split("://", 1)[1] if "://" in url else url
    name, dot, _ = host.partition(".")
    if not dot:
        return ""
    return name
