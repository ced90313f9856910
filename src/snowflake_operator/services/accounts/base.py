"""Base account client interface."""

from __future__ import annotations

from typing import Protocol

from ...models import AccountDetails


class AccountClientError(RuntimeError):
    """Raised when an account operation fails; always safe to retry."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"failed to execute {operation}: {message}")
        self.operation = operation


class AccountClient(Protocol):
    """Protocol defining Snowflake account operations."""

    def create_account(self, details: AccountDetails) -> str:
        """Create an account and return its name."""
        ...

    def drop_account(self, account_name: str) -> None:
        """Drop an account if it exists, with a grace period before hard deletion."""
        ...
