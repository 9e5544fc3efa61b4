"""
FastAPI middleware for automatic Prometheus metrics collection.

This middleware tracks:
- Total API requests with method, endpoint, and status labels
- Request duration histograms
- In-progress request gauges
"""
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from image_compressor.metrics import (
    api_requests_in_progress,
    record_api_request,
)

UNMATCHED_ENDPOINT = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to automatically track API request metrics.

    Every metric is labelled by route template rather than raw path, so
    query strings and unknown URLs do not blow up label cardinality.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method

        # Skip the /metrics endpoint itself
        if request.url.path == "/metrics":
            return await call_next(request)

        endpoint = self._endpoint_label(request)

        in_progress = api_requests_in_progress.labels(method=method, endpoint=endpoint)
        in_progress.inc()
        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            in_progress.dec()
            record_api_request(method, endpoint, status_code, time.time() - start_time)

    def _endpoint_label(self, request: Request) -> str:
        """Path template of the route that will handle ``request``."""
        for route in request.app.router.routes:
            match, _ = route.matches(request.scope)
            if match == Match.FULL:
                return getattr(route, "path", UNMATCHED_ENDPOINT)
        return UNMATCHED_ENDPOINT
