"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from flightdesk.telemetry import observe_request


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus, skipping the scrape endpoint."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observe_request(
                request.method,
                self._route_label(request),
                status_code,
                time.perf_counter() - start_time,
            )

    @staticmethod
    def _route_label(request: Request) -> str:
        """Prefer the route template so flight ids do not explode label cardinality."""

        route = request.scope.get("route")
        path = getattr(route, "path", None)
        return path or request.url.path
