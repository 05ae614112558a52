from __future__ import annotations

import logging
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse, Response

log = logging.getLogger("aeron_exporter.errors")


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Last line of defence for anything a collector or endpoint lets escape.

    cnc.dat failures never get here; AeronCollector reports them as a metric.
    Whatever does is logged with its traceback and answered with a bare
    plain-text 500, which Prometheus records as a failed scrape (up == 0).
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            log.exception("Unhandled error rid=%s path=%s", rid, request.url.path)
            headers = {"X-Request-Id": rid} if rid else None
            return PlainTextResponse("Internal Server Error\n", status_code=500, headers=headers)
