from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from aeron_exporter import __version__
from aeron_exporter.api.endpoints import health, metrics_export
from aeron_exporter.api.middleware.error_shaping import SafeErrorMiddleware
from aeron_exporter.api.middleware.request_context import RequestContextMiddleware
from aeron_exporter.api.observability.registry import build_registry
from aeron_exporter.core.cnc import CncFileReader


def create_app(
    registry: Optional[CollectorRegistry] = None,
    cnc_file_reader: Optional[CncFileReader] = None,
) -> FastAPI:
    """
    Build the exporter app around an explicit registry.

    Without a registry, one is built holding an AeronCollector over
    cnc_file_reader (default: cnc.dat in the resolved Aeron directory).
    """
    reader = cnc_file_reader or CncFileReader()

    app = FastAPI(
        title="Aeron Prometheus Exporter",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )
    app.state.cnc_file_reader = reader
    app.state.registry = registry if registry is not None else build_registry(reader)

    # ------------------------------------------------------------
    # Middleware stack (ORDER MATTERS)
    # Starlette reverses add_middleware order: the LAST call = OUTERMOST wrapper.
    #   SafeErrorMiddleware -> RequestContext -> handler
    # ------------------------------------------------------------
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(SafeErrorMiddleware)

    app.include_router(health.router)
    app.include_router(metrics_export.router)
    return app
