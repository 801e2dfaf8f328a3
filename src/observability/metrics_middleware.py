"""
FastAPI middleware for automatic Prometheus metrics collection.

Tracks request counts, latency and in-flight requests per route template
(e.g. /api/v1/gamification) so query strings and ids never blow up label
cardinality.
"""

import logging
import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.observability.metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_progress,
)

logger = logging.getLogger(__name__)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for every HTTP request"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        http_requests_in_progress.labels(method=method, endpoint=path).inc()
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            logger.error(f"Request failed: {e}", exc_info=True)
            raise
        finally:
            http_requests_in_progress.labels(method=method, endpoint=path).dec()
            http_requests_total.labels(method=method, endpoint=path, status=status_code).inc()
            http_request_duration_seconds.labels(method=method, endpoint=path).observe(
                time.perf_counter() - start_time
            )

    @staticmethod
    def _normalize_path(path: str) -> str:
        """Replace numeric and UUID path segments with placeholders"""
        parts = []
        for part in path.strip("/").split("/"):
            if part.isdigit():
                parts.append("{id}")
            elif _looks_like_uuid(part):
                parts.append("{uuid}")
            else:
                parts.append(part)
        return "/" + "/".join(parts)


def _looks_like_uuid(value: str) -> bool:
    parts = value.split("-")
    if [len(p) for p in parts] != [8, 4, 4, 4, 12]:
        return False
    try:
        for part in parts:
            int(part, 16)
    except ValueError:
        return False
    return True


def setup_metrics_middleware(app) -> None:
    """Add Prometheus metrics middleware to the FastAPI application"""
    app.add_middleware(PrometheusMiddleware)
    logger.info("Prometheus metrics middleware configured")
