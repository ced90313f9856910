"""Snowflake account management client."""

from .base import AccountClient, AccountClientError
from .client import SnowflakeAccountClient

__all__ = ["AccountClient", "AccountClientError", "SnowflakeAccountClient"]
