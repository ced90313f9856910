"""Main entry point for the Snowflake Account Operator."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from . import tracing
from .config import get_int_setting

# Import handlers to register them with kopf
from . import handlers  # noqa: F401

logger = logging.getLogger(__name__)


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    # Set up structured JSON logging
    structured_logging.setup_structured_logging()
    tracing.initialize_tracing()

    # Use AnnotationsProgressStorage to avoid conflicts with status updates
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()

    settings.posting.level = logging.INFO
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = get_int_setting("MAX_WORKERS", 4)

    # Start metrics HTTP server with health check endpoints
    metrics_port = get_int_setting("METRICS_PORT", 8080)
    health.start_metrics_server(metrics_port)
    health.mark_ready()
    logger.info(f"Operator configured, serving metrics and health checks on port {metrics_port}")


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Report not-ready while the operator shuts down."""
    health.mark_ready(False)
