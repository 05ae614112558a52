"""Prometheus metrics scrape endpoint.

Renders the app's own CollectorRegistry. Collection failures are already
turned into metrics by the collector, so a scrape answers 200 even when
cnc.dat cannot be read.
"""

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
def prometheus_metrics(request: Request) -> Response:
    return Response(generate_latest(request.app.state.registry), media_type=CONTENT_TYPE_LATEST)


# Any path scrapes, as with the stock prometheus exposition server
@router.get("/", include_in_schema=False)
def prometheus_metrics_root(request: Request) -> Response:
    return prometheus_metrics(request)
