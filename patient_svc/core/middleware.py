"""
Request logging middleware and in-process request counters.

LoggingMiddleware sits outside CORS in main.py, so every response,
preflight rejections included, carries an X-Request-ID and is counted.
"""

import logging
import threading
import time
import uuid
from collections import Counter
from typing import Any, Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging_config import set_request_id, clear_request_id

logger = logging.getLogger(__name__)


class MetricsCollector:
    """Counts completed requests by status class and tracks mean latency."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_status: Counter = Counter()
        self._duration_ms_sum = 0.0

    def record(self, status_code: int, duration_ms: float) -> None:
        with self._lock:
            self._by_status[f"{status_code // 100}xx"] += 1
            self._duration_ms_sum += duration_ms

    def snapshot(self) -> Dict[str, Any]:
        """Return a consistent copy of the counters for the /metrics endpoint."""
        with self._lock:
            total = sum(self._by_status.values())
            return {
                "requests_total": total,
                "requests_by_status": dict(sorted(self._by_status.items())),
                "mean_duration_ms": round(self._duration_ms_sum / total, 2) if total else 0.0,
            }


metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return metrics_collector


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with a short id, logs it and counts it.

    The id is bound to the logging context for the duration of the
    request and echoed back in the X-Request-ID header.
    """

    # Probe and docs traffic is counted but not logged
    QUIET_PATHS = {"/health", "/ready", "/metrics", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        set_request_id(request_id)
        path = request.url.path
        log_request = path not in self.QUIET_PATHS
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error", extra={"method": request.method, "path": path})
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            clear_request_id()

        metrics_collector.record(response.status_code, elapsed_ms)

        if log_request:
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                f"{request.method} {path} -> {response.status_code}",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "duration_ms": round(elapsed_ms, 2),
                },
            )

        response.headers["X-Request-ID"] = request_id
        return response
