"""Configuration for the Snowflake Account Operator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .constants import (
    DEFAULT_ORG_ROLE,
    ENV_ORG_ACCOUNT,
    ENV_ORG_PASSWORD,
    ENV_ORG_ROLE,
    ENV_ORG_USERNAME,
)


class ConfigurationError(RuntimeError):
    """Raised when required operator configuration is missing."""


@dataclass(frozen=True)
class OrgCredentials:
    """Organization-level credentials used for every account operation."""

    username: str
    password: str
    account: str
    role: str = DEFAULT_ORG_ROLE

    def __repr__(self) -> str:
        return f"OrgCredentials(username={self.username!r}, account={self.account!r}, role={self.role!r})"


def load_org_credentials(environ: Mapping[str, str] | None = None) -> OrgCredentials:
    """Read and validate organization credentials from the environment.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Validated organization credentials

    Raises:
        ConfigurationError: If a required variable is missing or empty
    """
    env = os.environ if environ is None else environ

    values = {}
    for key in (ENV_ORG_USERNAME, ENV_ORG_PASSWORD, ENV_ORG_ACCOUNT):
        value = env.get(key, "")
        if not value:
            raise ConfigurationError(f"environment variable {key} is required but not set")
        values[key] = value

    return OrgCredentials(
        username=values[ENV_ORG_USERNAME],
        password=values[ENV_ORG_PASSWORD],
        account=values[ENV_ORG_ACCOUNT],
        role=env.get(ENV_ORG_ROLE) or DEFAULT_ORG_ROLE,
    )


def get_int_setting(name: str, default: int) -> int:
    """Read an integer process setting, falling back to the default when unset."""
    value = os.getenv(name)
    if not value:
        return default
    return int(value)
