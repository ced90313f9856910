"""Utilities for generating Snowflake account names and credentials."""

from __future__ import annotations

import logging
import secrets
import string

from ..constants import ACCOUNT_NAME_PREFIX, ADMIN_NAME_PREFIX

logger = logging.getLogger(__name__)

ACCOUNT_NAME_CHARSET = string.ascii_uppercase + string.digits
ADMIN_NAME_CHARSET = string.ascii_lowercase + string.digits
SPECIAL_CHARSET = "!@#$%^&*"

ACCOUNT_NAME_RANDOM_LENGTH = 6
ADMIN_NAME_RANDOM_LENGTH = 8
PASSWORD_CLASS_LENGTHS = (
    (string.ascii_uppercase, 4),
    (string.ascii_lowercase, 4),
    (string.digits, 4),
    (SPECIAL_CHARSET, 2),
)
PASSWORD_LENGTH = sum(length for _, length in PASSWORD_CLASS_LENGTHS)


def _secure_randbelow(upper: int) -> int | None:
    """Draw a uniform integer in [0, upper) from the OS random source.

    Returns None when the secure source is unavailable.
    """
    try:
        return secrets.randbelow(upper)
    except (OSError, NotImplementedError) as e:
        logger.warning(f"Secure random source unavailable: {e}")
        return None


def generate_random_string(length: int, charset: str) -> str:
    """Generate a random string of the given length from a charset.

    Characters the secure source cannot produce fall back to cycling
    through the charset, so the result always has the requested length.
    """
    chars = []
    for i in range(length):
        index = _secure_randbelow(len(charset))
        if index is None:
            index = i % len(charset)
        chars.append(charset[index])
    return "".join(chars)


def shuffle_string(value: str) -> str:
    """Return the characters of a string in uniformly random order (Fisher-Yates)."""
    chars = list(value)
    for i in range(len(chars) - 1, 0, -1):
        j = _secure_randbelow(i + 1)
        if j is None:
            continue
        chars[i], chars[j] = chars[j], chars[i]
    return "".join(chars)


def generate_account_name() -> str:
    """Generate a random account name, e.g. ``SF4K9ZQ2``."""
    return ACCOUNT_NAME_PREFIX + generate_random_string(ACCOUNT_NAME_RANDOM_LENGTH, ACCOUNT_NAME_CHARSET)


def generate_admin_name() -> str:
    """Generate a random admin username, e.g. ``admin_x8k2m1qa``."""
    return ADMIN_NAME_PREFIX + generate_random_string(ADMIN_NAME_RANDOM_LENGTH, ADMIN_NAME_CHARSET)


def generate_password() -> str:
    """Generate an admin password with upper, lower, digit and special characters."""
    password = "".join(
        generate_random_string(length, charset) for charset, length in PASSWORD_CLASS_LENGTHS
    )
    return shuffle_string(password)
