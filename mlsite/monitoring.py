"""Prometheus instrumentation of the application.

Request counts and latencies are collected for the page and the JSON
endpoints and served at ``/metrics``.  Requests for ``/metrics`` itself and
for static assets are not recorded.
"""

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator


def setup_monitoring(app: FastAPI) -> None:
    """Attach Prometheus instrumentation to a FastAPI app."""
    Instrumentator(excluded_handlers=["/metrics", "/static"]).instrument(app).expose(
        app, include_in_schema=False
    )
