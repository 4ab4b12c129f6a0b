"""Prometheus request metrics served at `/metrics`."""

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

# Collectors live in the process-wide registry; only the first app registers them.
_metrics_configured = False


def setup_monitoring(app: FastAPI) -> None:
    global _metrics_configured
    if _metrics_configured:
        return

    Instrumentator(
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics", "/livez", "/readyz", "/uploads.*"],
    ).instrument(app).expose(app, include_in_schema=False)
    _metrics_configured = True
