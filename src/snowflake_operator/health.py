"""Health check and metrics endpoints for the operator."""

from __future__ import annotations

import threading
from typing import Any

from prometheus_client import make_wsgi_app
from werkzeug.serving import make_server
from werkzeug.wrappers import Request, Response

_ready = threading.Event()


def mark_ready(ready: bool = True) -> None:
    """Flip the readiness state reported on /readyz."""
    if ready:
        _ready.set()
    else:
        _ready.clear()


def is_ready() -> bool:
    """Return whether the operator has finished starting up."""
    return _ready.is_set()


def health_check_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
    """WSGI application for the /healthz and /readyz endpoints."""
    request = Request(environ)
    path = request.path

    if path == "/healthz":
        response = Response('{"status":"ok"}', mimetype="application/json", status=200)
    elif path == "/readyz":
        if is_ready():
            response = Response('{"status":"ready"}', mimetype="application/json", status=200)
        else:
            response = Response('{"status":"starting"}', mimetype="application/json", status=503)
    else:
        response = Response('{"error":"not found"}', mimetype="application/json", status=404)

    return response(environ, start_response)


def create_combined_wsgi_app() -> Any:
    """Create a WSGI app that combines metrics and health check endpoints.

    Returns:
        Combined WSGI application
    """
    metrics_app = make_wsgi_app()

    def combined_app(environ: dict[str, Any], start_response: Any) -> list[bytes]:
        """WSGI app that routes /healthz and /readyz, delegates /metrics to prometheus."""
        path = environ.get("PATH_INFO", "")
        if path in ("/healthz", "/readyz"):
            return health_check_app(environ, start_response)
        return metrics_app(environ, start_response)

    return combined_app


def start_metrics_server(port: int) -> Any:
    """Serve metrics and health endpoints from a daemon thread.

    Args:
        port: Port to listen on

    Returns:
        The running server
    """
    server = make_server("", port, create_combined_wsgi_app(), threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return server
