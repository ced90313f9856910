"""Structured JSON logging for SnowflakeAccount reconciliation.

Each resource event is a single JSON line keyed by the object it concerns.
Generated admin passwords and organization credentials travel through the
same code paths as the values that get logged, so every extra field is
passed through ``sanitize_secrets`` before it is written.
"""

import json
import logging
import os
import sys
from typing import Any

REDACTED = "***REDACTED***"

# Any key containing one of these (case-insensitive) is redacted
SECRET_KEY_MARKERS = ("password", "secret_key", "token", "private_key")

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("snowflake.connector", "kubernetes.client.rest")


def setup_structured_logging() -> None:
    """Configure JSON-line logging at ``LOG_LEVEL`` (default INFO)."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log one event about a SnowflakeAccount as a JSON line.

    Args:
        logger: Logger to write to
        controller: Name of the reporting controller
        resource_kind: Kind of the object
        resource_name: Name of the object
        namespace: Namespace of the object
        uid: UID of the object
        event: Event category such as ``info`` or ``deletion``
        reason: CamelCase reason, matching the Kubernetes event reason where one is posted
        message: Human-readable message
        level: Logging level
        **kwargs: Extra fields, redacted by ``sanitize_secrets``
    """
    if not logger.isEnabledFor(level):
        return

    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "object": f"{namespace}/{resource_name}",
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(sanitize_secrets(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_KEY_MARKERS)


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``log_data`` with secret-looking fields redacted, nested dicts included."""
    sanitized: dict[str, Any] = {}
    for key, value in log_data.items():
        if is_secret_key(key):
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_secrets(value)
        else:
            sanitized[key] = value
    return sanitized
