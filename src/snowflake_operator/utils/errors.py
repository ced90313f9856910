"""Error sanitization utilities to prevent credential leakage."""

import re

# Statements echoed back by the connector may carry the generated admin password
SENSITIVE_PATTERNS = [
    (r"(ADMIN_PASSWORD\s*=\s*)'(?:[^']|'')*'", r"\1'[REDACTED]'"),
    (r"(password=)[^\s&;]+", r"\1[REDACTED]"),
    (r"(://[^:/\s]+:)[^@\s]+@", r"\1[REDACTED]@"),
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "password",
    "admin_password",
    "adminpassword",
    "secret",
    "credentials",
    "token",
    "private_key",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}:\s*([^\s,;\)]+)",
            f"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return sanitize_error_message(str(error))

