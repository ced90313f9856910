"""Snowflake account client implementation."""

from __future__ import annotations

import logging
import re
import time
from contextlib import contextmanager
from typing import Iterable, Iterator

import snowflake.connector
from snowflake.connector import SnowflakeConnection
from snowflake.connector.cursor import SnowflakeCursor
from snowflake.connector.errors import Error as SnowflakeError

from ... import metrics
from ...config import OrgCredentials
from ...constants import (
    ACCOUNT_COMMENT,
    ACCOUNT_OPERATION_TIMEOUT_SECONDS,
    ADMIN_FIRST_NAME,
    ADMIN_LAST_NAME,
    DROP_GRACE_PERIOD_DAYS,
)
from ...models import AccountDetails
from ...utils.errors import sanitize_exception
from .base import AccountClientError

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")

OPERATION_CREATE = "CREATE ACCOUNT"
OPERATION_DROP = "DROP ACCOUNT"


def is_valid_identifier(value: str) -> bool:
    """Return whether a value is a safe unquoted Snowflake identifier."""
    return bool(IDENTIFIER_PATTERN.match(value))


class SnowflakeAccountClient:
    """Creates and drops Snowflake accounts using organization credentials."""

    def __init__(
        self,
        credentials: OrgCredentials,
        timeout: int = ACCOUNT_OPERATION_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the account client.

        Args:
            credentials: Organization credentials used to authenticate
            timeout: Upper bound in seconds for connecting and for each statement
        """
        self.credentials = credentials
        self.timeout = timeout

    @contextmanager
    def _cursor(self) -> Iterator[SnowflakeCursor]:
        logger.debug(
            "Connecting to Snowflake account '%s' as user '%s' with role '%s'",
            self.credentials.account,
            self.credentials.username,
            self.credentials.role,
        )
        connection: SnowflakeConnection = snowflake.connector.connect(
            user=self.credentials.username,
            password=self.credentials.password,
            account=self.credentials.account,
            role=self.credentials.role,
            login_timeout=self.timeout,
            network_timeout=self.timeout,
        )
        cursor: SnowflakeCursor | None = None
        try:
            cursor = connection.cursor()
            yield cursor
        finally:
            if cursor is not None:
                cursor.close()
            connection.close()

    def _execute(self, operation: str, statement: str, sensitive_values: Iterable[str] = ()) -> None:
        """Run a single statement on a fresh connection.

        Raises:
            AccountClientError: If connecting or executing fails
        """
        self._log_statement(statement, sensitive_values)
        start_time = time.time()
        try:
            with self._cursor() as cursor:
                cursor.execute(statement, timeout=self.timeout)
            metrics.account_operations_total.labels(operation=operation, result="success").inc()
        except (SnowflakeError, OSError) as e:
            metrics.account_operations_total.labels(operation=operation, result="error").inc()
            message = sanitize_exception(e)
            for value in sensitive_values:
                if value:
                    message = message.replace(value, "***")
            raise AccountClientError(operation, message) from e
        finally:
            duration = time.time() - start_time
            metrics.account_operation_duration_seconds.labels(operation=operation).observe(duration)

    def create_account(self, details: AccountDetails) -> str:
        """Create a Snowflake account.

        Args:
            details: Generated account name, admin identity and password

        Returns:
            Name of the created account

        Raises:
            AccountClientError: If the account could not be created
        """
        if not is_valid_identifier(details.account_name):
            raise AccountClientError(OPERATION_CREATE, f"invalid account name {details.account_name!r}")

        statement = "\n".join(
            [
                f"CREATE ACCOUNT {details.account_name}",
                f"    ADMIN_NAME = {self._quote_literal(details.admin_name)}",
                f"    ADMIN_PASSWORD = {self._quote_literal(details.admin_password)}",
                "    ADMIN_USER_TYPE = PERSON",
                f"    FIRST_NAME = {self._quote_literal(ADMIN_FIRST_NAME)}",
                f"    LAST_NAME = {self._quote_literal(ADMIN_LAST_NAME)}",
                f"    EMAIL = {self._quote_literal(details.email)}",
                "    MUST_CHANGE_PASSWORD = TRUE",
                f"    EDITION = {details.edition}",
                f"    REGION = {self._quote_literal(details.region)}",
                f"    COMMENT = {self._quote_literal(ACCOUNT_COMMENT)}",
            ]
        )

        logger.info(
            f"Creating Snowflake account {details.account_name} "
            f"(region={details.region}, edition={details.edition})"
        )
        self._execute(OPERATION_CREATE, statement, [details.admin_password])
        logger.info(f"Snowflake account {details.account_name} created successfully")
        return details.account_name

    def drop_account(self, account_name: str) -> None:
        """Drop a Snowflake account if it exists.

        The account stays recoverable for the grace period before Snowflake
        removes it permanently. Dropping an absent account succeeds.

        Raises:
            AccountClientError: If the statement could not be executed
        """
        if not is_valid_identifier(account_name):
            raise AccountClientError(OPERATION_DROP, f"invalid account name {account_name!r}")

        statement = f"DROP ACCOUNT IF EXISTS {account_name} GRACE_PERIOD_IN_DAYS = {DROP_GRACE_PERIOD_DAYS}"
        logger.info(
            f"Dropping Snowflake account {account_name} "
            f"(orgAccount={self.credentials.account}, orgRole={self.credentials.role})"
        )
        self._execute(OPERATION_DROP, statement)
        logger.info(f"Successfully dropped Snowflake account {account_name}")

    @staticmethod
    def _quote_literal(value: str) -> str:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    @staticmethod
    def _log_statement(statement: str, sensitive_values: Iterable[str]) -> None:
        sanitized = statement
        for value in sensitive_values:
            if value:
                sanitized = sanitized.replace(value, "***")
        logger.debug("Executing Snowflake SQL:\n%s", sanitized)
